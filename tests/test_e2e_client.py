"""Tests for the AgentOS MCP client against a fake host process."""

import sys
import textwrap

import pytest

from aos_plugins.e2e.client import (
    AgentOS,
    AgentOSError,
    AgentOSTimeoutError,
    CredentialNotFoundError,
    decode_tool_result,
    get_agentos,
    host_available,
    set_agentos,
)

FAKE_HOST = textwrap.dedent('''
    import json
    import sys
    import time

    def send(message):
        sys.stdout.write(json.dumps(message) + "\\n")
        sys.stdout.flush()

    def text(value, error=False):
        return {"content": [{"type": "text", "text": value}], "isError": error}

    for line in sys.stdin:
        message = json.loads(line)
        if "id" not in message:
            continue
        request_id = message["id"]

        if message["method"] == "initialize":
            sys.stdout.write("starting up...\\n")
            send({"jsonrpc": "2.0", "result": {"serverInfo": {"name": "fake-agentos"}}, "id": request_id})
            continue

        params = message["params"]
        name = params["name"]
        send({"jsonrpc": "2.0", "method": "notifications/progress", "params": {}})
        if name == "Echo":
            result = text(json.dumps(params["arguments"]))
        elif name == "Text":
            result = text("plain words")
        elif name == "NoCreds":
            result = text("Credential not found for plugin todoist", error=True)
        elif name == "Fail":
            result = text("boom", error=True)
        elif name == "Slow":
            time.sleep(1)
            result = text("[]")
        else:
            send({"jsonrpc": "2.0", "error": {"code": -32601, "message": "Unknown tool: " + name}, "id": request_id})
            continue
        send({"jsonrpc": "2.0", "result": result, "id": request_id})
''')


@pytest.fixture
def fake_host(tmp_path):
    script = tmp_path / "fake_host.py"
    script.write_text(FAKE_HOST, encoding="utf-8")
    return script


@pytest.fixture
def client(fake_host):
    agentos = AgentOS(binary=sys.executable, args=[str(fake_host)], timeout=5)
    with agentos:
        yield agentos


class TestAgentOS:
    """Tests for AgentOS.connect/call/disconnect."""

    def test_handshake(self, client):
        assert client.connected
        assert client.server_info == {"name": "fake-agentos"}

    def test_call_decodes_json(self, client):
        arguments = {"plugin": "todoist", "tool": "list", "params": {"limit": 1}}
        assert client.call("Echo", arguments) == arguments

    def test_call_returns_plain_text(self, client):
        assert client.call("Text") == "plain words"

    def test_credential_error(self, client):
        with pytest.raises(CredentialNotFoundError, match="Credential not found"):
            client.call("NoCreds")

    def test_tool_error(self, client):
        with pytest.raises(AgentOSError, match="boom") as exc_info:
            client.call("Fail")
        assert not isinstance(exc_info.value, CredentialNotFoundError)

    def test_rpc_error(self, client):
        with pytest.raises(AgentOSError, match="Unknown tool: Nope"):
            client.call("Nope")

    def test_timeout_then_recovers(self, client):
        client.timeout = 0.2
        with pytest.raises(AgentOSTimeoutError):
            client.call("Slow")

        client.timeout = 5
        assert client.call("Echo", {"after": "timeout"}) == {"after": "timeout"}

    def test_disconnect(self, fake_host):
        agentos = AgentOS(binary=sys.executable, args=[str(fake_host)], timeout=5).connect()
        agentos.disconnect()

        assert not agentos.connected
        with pytest.raises(AgentOSError, match="not running"):
            agentos.call("Echo")

    def test_missing_binary(self, tmp_path):
        with pytest.raises(AgentOSError, match="Failed to start AgentOS"):
            AgentOS(binary=str(tmp_path / "missing"), args=[]).connect()

    def test_host_that_exits(self, tmp_path):
        script = tmp_path / "exits.py"
        script.write_text("import sys\nsys.exit(0)\n")
        agentos = AgentOS(binary=sys.executable, args=[str(script)], timeout=5)

        with pytest.raises(AgentOSError):
            agentos.connect()
        assert not agentos.connected


class TestDecodeToolResult:
    def test_empty_content(self):
        assert decode_tool_result({"content": []}) is None

    def test_error_without_text(self):
        with pytest.raises(AgentOSError, match="Tool call failed"):
            decode_tool_result({"isError": True})

    def test_no_credentials_configured(self):
        with pytest.raises(CredentialNotFoundError):
            decode_tool_result({"content": [{"text": "No credentials configured"}], "isError": True})


class TestSharedSession:
    def test_set_and_get(self, client):
        set_agentos(client)
        try:
            assert get_agentos() is client
        finally:
            set_agentos(None)


class TestHostAvailable:
    def test_missing_binary(self, tmp_path):
        assert not host_available(str(tmp_path / "agentos"))

    def test_executable_binary(self):
        assert host_available(sys.executable)
