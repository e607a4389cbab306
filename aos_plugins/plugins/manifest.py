"""Plugin manifest model - the YAML frontmatter of a plugin readme.md.

The models below are the schema every plugin must satisfy. The JSON Schema
published for editors (plugin.schema.json) is generated from them.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from aos_plugins.constants import PLUGIN_NAME_PATTERN
from aos_plugins.plugins.mapping import validate_mapping

EXECUTOR_KEYS = ("rest", "graphql", "sql", "csv", "command", "swift", "applescript", "app")

# Keys from the pre-migration format that must not reappear
LEGACY_KEYS = {
    "apps": "use 'tags' instead of 'apps'",
    "extended_actions": "merge 'extended_actions' into 'actions'",
}


class Capability(str, Enum):
    """Capabilities an action can provide (see e2e.capabilities)."""

    WEB_SEARCH = "web_search"
    WEB_READ = "web_read"
    TASK_LIST = "task_list"
    TASK_GET = "task_get"
    BOOK_LIST = "book_list"
    BOOK_SEARCH = "book_search"
    CONTACT_LIST = "contact_list"
    MESSAGE_LIST = "message_list"
    EVENT_LIST = "event_list"


class ParamType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ResponseSpec(BaseModel):
    """How the host turns a raw response into entities."""

    model_config = ConfigDict(extra="allow")

    root: Optional[str] = Field(default=None, description="Path to the records inside the response")
    mapping: Optional[Dict[str, Any]] = Field(default=None, description="Entity field -> mapping expression")

    @field_validator("mapping")
    @classmethod
    def mapping_expressions_parse(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if v is not None:
            errors = validate_mapping(v)
            if errors:
                raise ValueError("; ".join(errors))
        return v


class _Executor(BaseModel):
    model_config = ConfigDict(extra="allow")

    response: Optional[ResponseSpec] = None


class RestExecutor(_Executor):
    method: HTTPMethod = HTTPMethod.GET
    url: str = Field(..., min_length=1)
    headers: Optional[Dict[str, Any]] = None
    query: Optional[Dict[str, Any]] = None
    body: Any = None


class GraphQLExecutor(_Executor):
    query: str = Field(..., min_length=1)
    variables: Optional[Dict[str, Any]] = None
    endpoint: Optional[str] = None


class SqlExecutor(_Executor):
    query: str = Field(..., min_length=1)
    database: Optional[str] = None


class CsvExecutor(_Executor):
    path: str = Field(..., min_length=1)
    delimiter: str = ","


class CommandExecutor(_Executor):
    binary: Optional[str] = None
    run: Optional[str] = Field(default=None, description="Inline shell script")
    args: List[str] = Field(default_factory=list)
    cwd: Optional[str] = None
    timeout: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def binary_or_run(self) -> "CommandExecutor":
        if not self.binary and not self.run:
            raise ValueError("command executor needs 'binary' or 'run'")
        return self


class ScriptExecutor(_Executor):
    script: str = Field(..., min_length=1)


class AppExecutor(BaseModel):
    model_config = ConfigDict(extra="allow")

    app: str
    action: str
    params: Optional[Dict[str, Any]] = None


class ExecutorChoice(BaseModel):
    """Exactly one executor block, keyed by executor name."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    rest: Optional[RestExecutor] = None
    graphql: Optional[GraphQLExecutor] = None
    sql: Optional[SqlExecutor] = None
    csv: Optional[CsvExecutor] = None
    command: Optional[CommandExecutor] = None
    swift: Optional[ScriptExecutor] = None
    applescript: Optional[ScriptExecutor] = None
    app: Optional[AppExecutor] = None

    def executors(self) -> List[str]:
        """Names of the executor blocks that are set."""
        return [key for key in EXECUTOR_KEYS if getattr(self, key) is not None]


class ExecutorStep(ExecutorChoice):
    """One step of a chained action; 'as' binds its result for later steps."""

    bind: Optional[str] = Field(default=None, alias="as", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")

    @model_validator(mode="after")
    def exactly_one_executor(self) -> "ExecutorStep":
        found = self.executors()
        if len(found) != 1:
            raise ValueError(f"step needs exactly one executor ({', '.join(EXECUTOR_KEYS)}), found {found or 'none'}")
        return self


class ParamSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: ParamType = ParamType.STRING
    required: bool = False
    default: Any = None
    description: Optional[str] = None
    enum: Optional[List[Any]] = None


class ActionDefinition(ExecutorChoice):
    """A named action/operation/utility and how the host performs it."""

    operation: Optional[str] = Field(default=None, description="read | create | update | delete | ...")
    label: Optional[str] = None
    description: Optional[str] = None
    params: Optional[Dict[str, ParamSpec]] = None
    returns: Optional[str] = None
    readonly: Optional[bool] = None
    provides: Optional[Capability] = None
    steps: Optional[List[ExecutorStep]] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def one_executor_or_steps(self) -> "ActionDefinition":
        found = self.executors()
        if self.steps is not None:
            if found:
                raise ValueError(f"use either 'steps' or a single executor, not both (found {', '.join(found)})")
            bindings = [s.bind for s in self.steps if s.bind]
            duplicates = sorted({b for b in bindings if bindings.count(b) > 1})
            if duplicates:
                raise ValueError(f"duplicate step bindings: {', '.join(duplicates)}")
        elif len(found) != 1:
            raise ValueError(f"action needs exactly one executor ({', '.join(EXECUTOR_KEYS)}) or 'steps', found {found or 'none'}")
        return self


class AuthConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["api_key", "local", "cookies"]
    header: Optional[str] = None
    prefix: Optional[str] = None
    label: Optional[str] = None
    help_url: Optional[str] = None
    domain: Optional[str] = None


class SettingSpec(BaseModel):
    """User setting, exposed to scripts as SETTING_{NAME}."""

    model_config = ConfigDict(extra="allow")

    type: ParamType = ParamType.STRING
    default: Any = None
    label: Optional[str] = None
    description: Optional[str] = None


class SchemaField(BaseModel):
    """Field of a data app's local database schema."""

    model_config = ConfigDict(extra="allow")

    type: Literal["string", "integer", "number", "boolean", "array", "object", "datetime", "date"]
    required: bool = False
    description: Optional[str] = None
    default: Any = None


class LintExemptions(BaseModel):
    """Documented reasons to skip test-lint requirements."""

    credential_handling: Optional[str] = None
    cleanup: Optional[str] = None


class PluginTestingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    exempt: Optional[LintExemptions] = None


class PluginManifest(BaseModel):
    """Plugin manifest loaded from readme.md frontmatter."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., pattern=PLUGIN_NAME_PATTERN, description="Unique plugin identifier (kebab-case, matches folder)")
    name: str = Field(..., min_length=1, description="Human-readable plugin name")
    description: str = Field(..., min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    tags: List[str] = Field(..., min_length=1)
    website: Optional[str] = None
    auth: Optional[AuthConfig] = None
    settings: Optional[Dict[str, SettingSpec]] = None
    data_schema: Optional[Dict[str, SchemaField]] = Field(default=None, alias="schema")
    actions: Optional[Dict[str, ActionDefinition]] = None
    operations: Optional[Dict[str, ActionDefinition]] = None
    utilities: Optional[Dict[str, ActionDefinition]] = None
    instructions: Optional[str] = None
    testing: Optional[PluginTestingConfig] = None

    @model_validator(mode="before")
    @classmethod
    def reject_legacy_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for key, hint in LEGACY_KEYS.items():
                if key in data:
                    raise ValueError(f"'{key}' is no longer supported: {hint}")
        return data

    def all_tools(self) -> Dict[str, ActionDefinition]:
        """Actions, operations and utilities merged in declaration order."""
        tools: Dict[str, ActionDefinition] = {}
        for group in (self.actions, self.operations, self.utilities):
            tools.update(group or {})
        return tools

    def tool_names(self) -> List[str]:
        return list(self.all_tools())


def format_validation_errors(error: ValidationError) -> List[str]:
    """Turn a pydantic ValidationError into '<path>: <message>' lines."""
    lines = []
    for err in error.errors():
        path = "/" + "/".join(str(part) for part in err["loc"])
        lines.append(f"{path}: {err['msg']}")
    return lines


def validate_frontmatter(frontmatter: Dict[str, Any]) -> tuple[Optional[PluginManifest], List[str]]:
    """Validate frontmatter against the manifest model.

    Returns:
        (manifest, []) when valid, (None, errors) otherwise
    """
    try:
        return PluginManifest.model_validate(frontmatter), []
    except ValidationError as e:
        return None, format_validation_errors(e)


def manifest_json_schema() -> Dict[str, Any]:
    """JSON Schema of the manifest, keyed by the YAML names."""
    schema = PluginManifest.model_json_schema(by_alias=True)
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["title"] = "AgentOS plugin frontmatter"
    return schema
