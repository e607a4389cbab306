"""Tooling for the AgentOS plugin content repository.

Validates plugin frontmatter, lints plugin end-to-end tests, scaffolds new
plugins, checks repository structure, and provides the helpers plugin tests
use to talk to the AgentOS host.
"""

__version__ = "1.0.0"
