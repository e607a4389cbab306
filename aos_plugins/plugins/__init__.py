"""Plugin definitions: frontmatter, manifest model, mapping syntax, discovery.

Imports are lazy so lightweight helpers (frontmatter parsing) do not pull in
pydantic model construction.
"""

__all__ = [
    "PluginManifest",
    "ActionDefinition",
    "Capability",
    "validate_frontmatter",
    "parse_frontmatter",
    "FrontmatterError",
    "parse_mapping_expression",
    "PluginDiscovery",
    "PluginInstance",
]


def __getattr__(name):
    if name in ("PluginManifest", "ActionDefinition", "Capability", "validate_frontmatter"):
        from aos_plugins.plugins import manifest
        return getattr(manifest, name)
    if name in ("parse_frontmatter", "FrontmatterError"):
        from aos_plugins.plugins import frontmatter
        return getattr(frontmatter, name)
    if name == "parse_mapping_expression":
        from aos_plugins.plugins.mapping import parse_mapping_expression
        return parse_mapping_expression
    if name in ("PluginDiscovery", "PluginInstance"):
        from aos_plugins.plugins import discovery
        return getattr(discovery, name)
    raise AttributeError(f"module 'aos_plugins.plugins' has no attribute {name!r}")
