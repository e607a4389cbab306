"""Pattern checks applied to plugin test files.

Requirements depend on what the plugin declares:

* always: import the shared fixtures, validate returned fields
* auth present: skip cleanly when the host has no credential
* create operations: clean up created items, use unique test content

Each test flavour (TypeScript/vitest and Python/pytest) has its own patterns.
"""

import re
from dataclasses import dataclass
from typing import Dict, List

ALWAYS = "always"
CREDENTIAL_HANDLING = "credential_handling"
CLEANUP = "cleanup"


@dataclass(frozen=True)
class Check:
    id: str
    pattern: re.Pattern
    description: str
    group: str

    def matches(self, content: str) -> bool:
        return bool(self.pattern.search(content))


TS_CHECKS: List[Check] = [
    Check("fixtures_import", re.compile(r"from\s+['\"].*fixtures['\"]"),
          "import from fixtures", ALWAYS),
    Check("schema_validation", re.compile(r"expect\s*\([^)]+\)\s*\.\s*(toBeDefined|toHaveProperty)\s*\("),
          "schema validation (toBeDefined or toHaveProperty)", ALWAYS),
    Check("skip_tests_variable", re.compile(r"let\s+skipTests\s*=\s*false"),
          "let skipTests = false", CREDENTIAL_HANDLING),
    Check("before_all_credential_check", re.compile(r"beforeAll[\s\S]*?Credential not found"),
          "beforeAll with 'Credential not found' check", CREDENTIAL_HANDLING),
    Check("skip_check_in_tests", re.compile(r"if\s*\(\s*skipTests\s*\)"),
          "if (skipTests) in test cases", CREDENTIAL_HANDLING),
    Check("after_all_cleanup", re.compile(r"afterAll[\s\S]*?createdItems"),
          "afterAll with createdItems cleanup", CLEANUP),
    Check("test_content_usage", re.compile(r"testContent\s*\("),
          "testContent() for unique test data", CLEANUP),
]

PY_CHECKS: List[Check] = [
    Check("fixtures_import", re.compile(r"from\s+aos_plugins\.e2e(\.\w+)?\s+import"),
          "import from aos_plugins.e2e", ALWAYS),
    Check("schema_validation", re.compile(r"assert\s+[^\n]+\s+is\s+not\s+None|assert\s+['\"][\w.]+['\"]\s+in\s"),
          "schema validation (assert ... is not None or assert 'field' in ...)", ALWAYS),
    Check("credential_fixture", re.compile(r"@pytest\.fixture\(\s*scope\s*=\s*['\"](module|session)['\"]"),
          "module-scoped fixture for the credential check", CREDENTIAL_HANDLING),
    Check("credential_error_check", re.compile(r"except\s+\(?[\w.]*CredentialNotFoundError"),
          "except CredentialNotFoundError in the credential check", CREDENTIAL_HANDLING),
    Check("skip_without_credentials", re.compile(r"pytest\.skip\s*\("),
          "pytest.skip() when no credentials are configured", CREDENTIAL_HANDLING),
    Check("teardown_cleanup", re.compile(r"yield[\s\S]*?created_items"),
          "fixture teardown (after yield) cleaning up created_items", CLEANUP),
    Check("test_content_usage", re.compile(r"make_test_content\s*\("),
          "make_test_content() for unique test data", CLEANUP),
]

FLAVOR_CHECKS: Dict[str, List[Check]] = {
    "ts": TS_CHECKS,
    "py": PY_CHECKS,
}
