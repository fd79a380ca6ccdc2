"""filelink

Renders references to book resources (local files, remote objects, or
resources in other books) as HTML links, choosing between local-open,
last-modified-tagged and plain URLs at render time.

Namespaces: config, resources, render, observability.
"""

__all__ = [
    "config",
    "resources",
    "render",
    "pages",
    "library",
    "observability",
]
