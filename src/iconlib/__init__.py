"""Core library for iconctl.

Icon set inspection plus the configuration loading shared with the CLI.
"""

from iconlib.catalog import (
    Classification,
    DiscoveredSet,
    IconSetInspector,
    ResolvedGlob,
    SchemaKind,
    find_icon_sets,
)

__all__ = [
    "catalog",
    "config",
    "Classification",
    "DiscoveredSet",
    "IconSetInspector",
    "ResolvedGlob",
    "SchemaKind",
    "find_icon_sets",
]
