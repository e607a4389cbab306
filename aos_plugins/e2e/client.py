"""AgentOS client for end-to-end plugin tests.

Spawns the AgentOS binary in MCP mode and talks newline-delimited JSON-RPC
2.0 over its stdio. One session is shared by every test in the process.
"""

import atexit
import itertools
import json
import logging
import os
import queue
import subprocess
import threading
import time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from aos_plugins.constants import AGENTOS_ARGS, AGENTOS_BINARY, AGENTOS_TIMEOUT, DEBUG_MCP

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
CLIENT_INFO = {"name": "aos-plugins-tests", "version": "1.0.0"}

# Host error messages that mean "plugin not configured"
CREDENTIAL_ERROR_MARKERS = ("Credential not found", "No credentials configured")


class AgentOSError(Exception):
    """The host returned an error or could not be reached."""


class CredentialNotFoundError(AgentOSError):
    """The plugin has no credential configured in the host."""


class AgentOSTimeoutError(AgentOSError):
    """The host did not answer in time."""


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request (a notification when id is None)."""

    jsonrpc: str = "2.0"
    method: str
    params: Optional[Dict[str, Any]] = None
    id: Optional[int] = None


class JSONRPCError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    jsonrpc: str = "2.0"
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None
    id: Optional[int] = None


def error_from_message(message: str) -> AgentOSError:
    if any(marker in message for marker in CREDENTIAL_ERROR_MARKERS):
        return CredentialNotFoundError(message)
    return AgentOSError(message)


def decode_tool_result(result: Dict[str, Any]) -> Any:
    """Decode the first content item of a tools/call result.

    JSON text is parsed, anything else is returned as a string. Error
    results raise.
    """
    content = result.get("content") or []
    text = None
    if content and isinstance(content[0], dict):
        text = content[0].get("text")

    if result.get("isError"):
        raise error_from_message(text or "Tool call failed")

    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class AgentOS:
    """Synchronous MCP client for a spawned AgentOS process."""

    def __init__(self, binary: Optional[str] = None, args: Optional[List[str]] = None,
                 timeout: Optional[float] = None, debug: Optional[bool] = None,
                 env: Optional[Dict[str, str]] = None):
        self.binary = binary or AGENTOS_BINARY
        self.args = list(AGENTOS_ARGS if args is None else args)
        self.timeout = AGENTOS_TIMEOUT if timeout is None else timeout
        self.debug = DEBUG_MCP if debug is None else debug
        self.env = env

        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._messages: "queue.Queue[Optional[dict]]" = queue.Queue()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.server_info: Dict[str, Any] = {}

    @property
    def connected(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def connect(self) -> "AgentOS":
        """Start the host process and run the MCP handshake."""
        if self.connected:
            return self

        command = [self.binary, *self.args]
        logger.info(f"Starting AgentOS: {' '.join(command)}")
        env = {**os.environ, **self.env} if self.env else None
        try:
            self._process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=None if self.debug else subprocess.DEVNULL,
                text=True,
                bufsize=1,
                env=env,
            )
        except OSError as e:
            raise AgentOSError(
                f"Failed to start AgentOS at {self.binary}: {e}\n"
                "Make sure AgentOS is built: cd ~/dev/agentos && npm run tauri build -- --debug"
            ) from e

        self._messages = queue.Queue()
        self._reader = threading.Thread(target=self._read_stdout, name="agentos-reader", daemon=True)
        self._reader.start()

        try:
            result = self._request("initialize", {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": CLIENT_INFO,
            })
            self._notify("notifications/initialized")
        except AgentOSError:
            self.disconnect()
            raise

        self.server_info = (result or {}).get("serverInfo", {})
        logger.info(f"AgentOS connected: {self.server_info}")
        return self

    def disconnect(self) -> None:
        process, self._process = self._process, None
        if process is None:
            return

        if process.stdin:
            try:
                process.stdin.close()
            except OSError:
                pass
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning("AgentOS did not exit, killing it")
            process.kill()
            process.wait()

        if self._reader is not None:
            self._reader.join(timeout=5)
            self._reader = None
        logger.info("AgentOS disconnected")

    def call(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """Call an MCP tool and return its decoded result.

        Args:
            tool_name: MCP tool, e.g. "UsePlugin"
            arguments: Tool arguments, e.g. {"plugin": "todoist", "tool": "list", "params": {}}

        Raises:
            CredentialNotFoundError: The plugin has no credential configured
            AgentOSTimeoutError: No answer within the client timeout
            AgentOSError: Any other host error
        """
        result = self._request("tools/call", {"name": tool_name, "arguments": arguments or {}})
        return decode_tool_result(result or {})

    def _send(self, request: JSONRPCRequest) -> None:
        if not self.connected:
            raise AgentOSError("AgentOS is not running")
        line = json.dumps(request.model_dump(exclude_none=True))
        if self.debug:
            logger.debug(f"→ {line}")
        try:
            self._process.stdin.write(line + "\n")
            self._process.stdin.flush()
        except OSError as e:
            raise AgentOSError(f"Failed to write to AgentOS: {e}") from e

    def _notify(self, method: str, params: Optional[Dict[str, Any]] = None) -> None:
        self._send(JSONRPCRequest(method=method, params=params))

    def _request(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        with self._lock:
            request_id = next(self._ids)
            self._send(JSONRPCRequest(method=method, params=params, id=request_id))

            deadline = time.monotonic() + self.timeout
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise AgentOSTimeoutError(f"{method} timed out after {self.timeout}s")
                try:
                    message = self._messages.get(timeout=remaining)
                except queue.Empty:
                    raise AgentOSTimeoutError(f"{method} timed out after {self.timeout}s")

                if message is None:
                    raise AgentOSError("AgentOS exited unexpectedly")
                if message.get("id") != request_id:
                    # Server notifications and stale responses
                    continue

                response = JSONRPCResponse.model_validate(message)
                if response.error is not None:
                    raise error_from_message(response.error.message)
                return response.result

    def _read_stdout(self) -> None:
        process = self._process
        for line in process.stdout:
            line = line.strip()
            if not line:
                continue
            if self.debug:
                logger.debug(f"← {line}")
            try:
                message = json.loads(line)
            except json.JSONDecodeError:
                logger.debug(f"Ignoring non-JSON output: {line}")
                continue
            if isinstance(message, dict):
                self._messages.put(message)
        self._messages.put(None)

    def __enter__(self) -> "AgentOS":
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()


_agentos: Optional[AgentOS] = None


def host_available(binary: Optional[str] = None) -> bool:
    """True if the AgentOS binary exists and is executable."""
    return os.access(binary or AGENTOS_BINARY, os.X_OK)


def get_agentos() -> AgentOS:
    """The shared AgentOS session, connected on first use."""
    global _agentos
    if _agentos is None:
        _agentos = AgentOS().connect()
        atexit.register(_disconnect_shared)
    return _agentos


def set_agentos(instance: Optional[AgentOS]) -> None:
    global _agentos
    _agentos = instance


def _disconnect_shared() -> None:
    global _agentos
    if _agentos is not None:
        _agentos.disconnect()
        _agentos = None
