"""Runtime module providing the resource resolver."""

from resource_accessor.runtime.resolver import ResourceResolver, SearchPath

__all__ = ["ResourceResolver", "SearchPath"]
