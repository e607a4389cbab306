"""Templates for new plugins.

Placeholders use __UPPER__ tokens so the TypeScript and YAML bodies can keep
their own braces untouched.
"""

from typing import List

ICON_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <rect x="3" y="3" width="18" height="18" rx="4"/>
  <path d="M9.5 9a2.5 2.5 0 1 1 3.5 2.3c-.6.3-1 .9-1 1.6V14"/>
  <circle cx="12" cy="17" r=".5" fill="currentColor"/>
</svg>
"""

# =============================================================================
# readme.md
# =============================================================================

AUTH_BLOCK = """
auth:
  type: api_key
  header: Authorization
  prefix: "Bearer "
  label: API Key
  help_url: https://example.com/api-keys
"""

READ_ACTIONS = """actions:
  list:
    operation: read
    label: "List items"
    rest:
      method: GET
      url: https://api.example.com/items
      query:
        limit: "{{params.limit | default: 50}}"
      response:
        mapping:
          id: "[].id"
          title: "[].name"
          plugin: "'__PLUGIN__'"

  get:
    operation: read
    label: "Get item"
    rest:
      method: GET
      url: "https://api.example.com/items/{{params.id}}"
      response:
        mapping:
          id: ".id"
          title: ".name"
          plugin: "'__PLUGIN__'"
"""

CRUD_ACTIONS = """
  create:
    operation: create
    label: "Create item"
    rest:
      method: POST
      url: https://api.example.com/items
      body:
        name: "{{params.title}}"
      response:
        mapping:
          id: ".id"
          title: ".name"
          plugin: "'__PLUGIN__'"

  update:
    operation: update
    label: "Update item"
    rest:
      method: PATCH
      url: "https://api.example.com/items/{{params.id}}"
      body:
        name: "{{params.title}}"
      response:
        mapping:
          id: ".id"
          title: ".name"
          plugin: "'__PLUGIN__'"

  delete:
    operation: delete
    label: "Delete item"
    rest:
      method: DELETE
      url: "https://api.example.com/items/{{params.id}}"
      response:
        mapping:
          success: "true"
"""

README = """---
id: __PLUGIN__
name: __DISPLAY__
description: "TODO: Describe what this plugin does"
icon: icon.svg
color: "#000000"
tags: [todo]

website: https://example.com
__AUTH__
__ACTIONS__---

# __DISPLAY__

TODO: Human-readable documentation.

## Setup

1. Get your API key from https://example.com/settings/api
2. Add credential in AgentOS Settings → Plugins → __DISPLAY__

## Features

- List items
- Get item details__FEATURES__
"""


def render_readme(plugin: str, display: str, readonly: bool, local: bool) -> str:
    actions = READ_ACTIONS + ("" if readonly else CRUD_ACTIONS)
    return (README
            .replace("__AUTH__", "" if local else AUTH_BLOCK)
            .replace("__ACTIONS__", actions)
            .replace("__FEATURES__", "" if readonly else "\n- Create, update, delete items")
            .replace("__PLUGIN__", plugin)
            .replace("__DISPLAY__", display))


# =============================================================================
# TypeScript (vitest) tests
# =============================================================================

TS_HEADER = """/**
 * __DISPLAY__ Plugin Tests
 */

import { __VITEST__ } from 'vitest';
import { __FIXTURES__ } from '../../../tests/utils/fixtures';

const plugin = '__PLUGIN__';
"""

TS_CREATED_ITEMS = """
// Track created items for cleanup
const createdItems: Array<{ id: string }> = [];
"""

TS_SKIP_VARIABLE = """
// Skip tests if no credentials configured
let skipTests = false;
"""

TS_BEFORE_ALL = """  beforeAll(async () => {
    try {
      await aos().call('UsePlugin', { plugin, tool: 'list', params: { limit: 1 } });
    } catch (e: any) {
      if (e.message?.includes('Credential not found')) {
        console.log('  ⏭ Skipping: no credentials configured');
        skipTests = true;
      } else throw e;
    }
  });
"""

TS_AFTER_ALL = """  afterAll(async () => {
    for (const item of createdItems) {
      try {
        await aos().call('UsePlugin', {
          plugin,
          tool: 'delete',
          params: { id: item.id },
          execute: true,
        });
      } catch (e) {
        console.warn(`  Failed to cleanup ${item.id}:`, e);
      }
    }
  });
"""

TS_LIST = """  describe('list', () => {
    it('returns an array of items', async () => {
__GUARD__      const items = await aos().call('UsePlugin', {
        plugin,
        tool: 'list',
        params: { limit: 5 },
      });

      expect(Array.isArray(items)).toBe(true);
    });

    it('items have required schema fields', async () => {
__GUARD__      const items = await aos().call('UsePlugin', {
        plugin,
        tool: 'list',
        params: { limit: 5 },
      });

      for (const item of items) {
        expect(item.id).toBeDefined();
        expect(item.title).toBeDefined();
        expect(item.plugin).toBe(plugin);
      }
    });
  });
"""

TS_GET = """  describe('get', () => {
    it('returns a single item', async () => {
__GUARD__      const items = await aos().call('UsePlugin', {
        plugin,
        tool: 'list',
        params: { limit: 1 },
      });
      if (!items.length) return;

      const item = await aos().call('UsePlugin', {
        plugin,
        tool: 'get',
        params: { id: items[0].id },
      });

      expect(item.id).toBeDefined();
      expect(item.id).toBe(items[0].id);
    });
  });
"""

TS_CRUD = """  describe('create → get → update → delete', () => {
    let createdItem: any;

    it('can create an item', async () => {
__GUARD__      const title = testContent('item');

      createdItem = await aos().call('UsePlugin', {
        plugin,
        tool: 'create',
        params: { title },
        execute: true,
      });

      expect(createdItem).toBeDefined();
      expect(createdItem.id).toBeDefined();

      createdItems.push({ id: createdItem.id });
    });

    it('can get the created item', async () => {
__GUARD__      if (!createdItem?.id) return;

      const item = await aos().call('UsePlugin', {
        plugin,
        tool: 'get',
        params: { id: createdItem.id },
      });

      expect(item).toBeDefined();
      expect(item.id).toBe(createdItem.id);
      expect(item.title).toContain(TEST_PREFIX);
    });

    it('can update the item', async () => {
__GUARD__      if (!createdItem?.id) return;

      const newTitle = testContent('updated item');

      const updated = await aos().call('UsePlugin', {
        plugin,
        tool: 'update',
        params: { id: createdItem.id, title: newTitle },
        execute: true,
      });

      expect(updated).toBeDefined();
    });

    it('can delete the item', async () => {
__GUARD__      if (!createdItem?.id) return;

      const result = await aos().call('UsePlugin', {
        plugin,
        tool: 'delete',
        params: { id: createdItem.id },
        execute: true,
      });

      expect(result).toBeDefined();

      // Remove from cleanup list
      const idx = createdItems.findIndex(i => i.id === createdItem.id);
      if (idx >= 0) createdItems.splice(idx, 1);
    });
  });
"""

TS_GUARD = "      if (skipTests) return;\n\n"


def render_ts_test(plugin: str, display: str, readonly: bool, local: bool) -> str:
    """vitest file; credential guard unless local, cleanup unless readonly."""
    credentials = not local
    cleanup = not readonly

    vitest = ["describe", "it", "expect"]
    if credentials:
        vitest.append("beforeAll")
    if cleanup:
        vitest.append("afterAll")
    fixtures = "aos, testContent, TEST_PREFIX" if cleanup else "aos"

    parts: List[str] = [TS_HEADER.replace("__VITEST__", ", ".join(vitest)).replace("__FIXTURES__", fixtures)]
    if cleanup:
        parts.append(TS_CREATED_ITEMS)
    if credentials:
        parts.append(TS_SKIP_VARIABLE)

    body: List[str] = []
    if credentials:
        body.append(TS_BEFORE_ALL)
    if cleanup:
        body.append(TS_AFTER_ALL)
    body.append(TS_LIST)
    body.append(TS_CRUD if cleanup else TS_GET)

    parts.append("\ndescribe('__DISPLAY__ Plugin', () => {\n" + "\n".join(body) + "});\n")

    return ("".join(parts)
            .replace("__GUARD__", TS_GUARD if credentials else "")
            .replace("__PLUGIN__", plugin)
            .replace("__DISPLAY__", display))


# =============================================================================
# Python (pytest) tests
# =============================================================================

PY_HEADER = '''"""__DISPLAY__ plugin tests."""

import pytest

from aos_plugins.e2e import __IMPORTS__

PLUGIN = "__PLUGIN__"

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(not host_available(), reason="AgentOS host not available"),
]
'''

PY_CREATED_ITEMS = '''
# Track created items for cleanup
created_items = []
state = {}
'''

PY_CREDENTIAL_FIXTURE = '''

@pytest.fixture(scope="module", autouse=True)
def require_credentials():
    """Skip the module when the host has no credential for this plugin."""
    try:
        aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "list", "params": {"limit": 1}})
    except CredentialNotFoundError:
        pytest.skip("no credentials configured")
'''

PY_CLEANUP_FIXTURE = '''

@pytest.fixture(scope="module", autouse=True)
def cleanup_created_items():
    yield
    for item in created_items:
        try:
            aos().call("UsePlugin", {
                "plugin": PLUGIN,
                "tool": "delete",
                "params": {"id": item["id"]},
                "execute": True,
            })
        except Exception as e:
            print(f"  Failed to cleanup {item['id']}: {e}")
'''

PY_LIST = '''

class TestList:
    def test_returns_a_list_of_items(self):
        items = aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "list", "params": {"limit": 5}})
        assert isinstance(items, list)

    def test_items_have_required_fields(self):
        items = aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "list", "params": {"limit": 5}})
        for item in items:
            assert item.get("id") is not None
            assert item.get("title") is not None
            assert item["plugin"] == PLUGIN
'''

PY_GET = '''

class TestGet:
    def test_returns_a_single_item(self):
        items = aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "list", "params": {"limit": 1}})
        if not items:
            pytest.skip("no items to fetch")

        item = aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "get", "params": {"id": items[0]["id"]}})
        assert item.get("id") is not None
        assert item["id"] == items[0]["id"]
'''

PY_CRUD = '''

class TestLifecycle:
    """create → get → update → delete"""

    def test_create(self):
        title = make_test_content("item")
        item = aos().call("UsePlugin", {
            "plugin": PLUGIN,
            "tool": "create",
            "params": {"title": title},
            "execute": True,
        })

        assert item is not None
        assert item.get("id") is not None
        created_items.append({"id": item["id"]})
        state["item"] = item

    def test_get(self):
        if "item" not in state:
            pytest.skip("no item was created")

        item = aos().call("UsePlugin", {"plugin": PLUGIN, "tool": "get", "params": {"id": state["item"]["id"]}})
        assert item["id"] == state["item"]["id"]
        assert TEST_PREFIX in item["title"]

    def test_update(self):
        if "item" not in state:
            pytest.skip("no item was created")

        updated = aos().call("UsePlugin", {
            "plugin": PLUGIN,
            "tool": "update",
            "params": {"id": state["item"]["id"], "title": make_test_content("updated item")},
            "execute": True,
        })
        assert updated is not None

    def test_delete(self):
        if "item" not in state:
            pytest.skip("no item was created")

        result = aos().call("UsePlugin", {
            "plugin": PLUGIN,
            "tool": "delete",
            "params": {"id": state["item"]["id"]},
            "execute": True,
        })
        assert result is not None
        created_items[:] = [i for i in created_items if i["id"] != state["item"]["id"]]
'''


def render_py_test(plugin: str, display: str, readonly: bool, local: bool) -> str:
    """pytest file; same requirements as the vitest flavour."""
    credentials = not local
    cleanup = not readonly

    imports = ["aos", "host_available"]
    if credentials:
        imports.insert(0, "CredentialNotFoundError")
    if cleanup:
        imports = imports + ["make_test_content", "TEST_PREFIX"]

    parts = [PY_HEADER.replace("__IMPORTS__", ", ".join(imports))]
    if cleanup:
        parts.append(PY_CREATED_ITEMS)
    if credentials:
        parts.append(PY_CREDENTIAL_FIXTURE)
    if cleanup:
        parts.append(PY_CLEANUP_FIXTURE)
    parts.append(PY_LIST)
    parts.append(PY_CRUD if cleanup else PY_GET)

    return "".join(parts).replace("__PLUGIN__", plugin).replace("__DISPLAY__", display)
