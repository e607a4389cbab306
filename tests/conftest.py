"""Shared fixtures: throwaway plugin trees under tmp_path."""

import textwrap

import pytest

VALID_README = """---
id: {name}
name: Example
description: Example plugin
icon: icon.svg
tags: [tasks]
{extra}
operations:
  task.list:
    operation: read
    rest:
      method: GET
      url: https://api.example.com/tasks
      response:
        mapping:
          id: "[].id"
          title: "[].name"
  task.create:
    operation: create
    rest:
      method: POST
      url: https://api.example.com/tasks
      body:
        name: "{{{{params.title}}}}"
---

# Example
"""

ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor">'
    '<circle cx="12" cy="12" r="9"/></svg>\n'
)

FULL_TEST = """
import { describe, it, expect } from 'vitest';
import { aos } from '../../../tests/utils/fixtures';

describe('example', () => {
  it('lists', async () => {
    const items = await aos().call('UsePlugin', { plugin: 'example', tool: 'task.list' });
    expect(items).toBeDefined();
  });
  it('creates', async () => {
    const item = await aos().call('UsePlugin', { plugin: 'example', tool: 'task.create' });
    expect(item.id).toBeDefined();
  });
});
"""


@pytest.fixture(autouse=True)
def no_colors(monkeypatch):
    monkeypatch.setenv("FORCE_COLOR", "0")


@pytest.fixture
def plugins_dir(tmp_path):
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def make_plugin(plugins_dir):
    """Write plugins/<name>/ with readme, icon and a test file.

    Pass readme=None, icon=None or test=None to leave that file out.
    """
    def _make(name="example", readme=VALID_README, icon=ICON, test=FULL_TEST, extra=""):
        plugin_dir = plugins_dir / name
        plugin_dir.mkdir()
        if readme is not None:
            content = readme.format(name=name, extra=extra) if readme is VALID_README else readme
            (plugin_dir / "readme.md").write_text(textwrap.dedent(content), encoding="utf-8")
        if icon is not None:
            (plugin_dir / "icon.svg").write_text(icon, encoding="utf-8")
        if test is not None:
            (plugin_dir / "tests").mkdir()
            (plugin_dir / "tests" / f"{name}.test.ts").write_text(test, encoding="utf-8")
        return plugin_dir

    return _make
