"""End-to-end helpers for plugin tests against a running AgentOS."""

from .capabilities import CAPABILITY_SCHEMAS, find_plugins_with_capabilities, is_skippable_error
from .client import (
    AgentOS,
    AgentOSError,
    AgentOSTimeoutError,
    CredentialNotFoundError,
    get_agentos,
    host_available,
    set_agentos,
)
from .fixtures import (
    TEST_PREFIX,
    aos,
    cleanup_test_data,
    is_test_data,
    make_test_content,
    make_test_id,
    retry,
    sleep,
    wait_for,
)

__all__ = [
    'AgentOS',
    'AgentOSError',
    'AgentOSTimeoutError',
    'aos',
    'CAPABILITY_SCHEMAS',
    'cleanup_test_data',
    'CredentialNotFoundError',
    'find_plugins_with_capabilities',
    'get_agentos',
    'host_available',
    'is_skippable_error',
    'is_test_data',
    'make_test_content',
    'make_test_id',
    'retry',
    'set_agentos',
    'sleep',
    'TEST_PREFIX',
    'wait_for',
]
