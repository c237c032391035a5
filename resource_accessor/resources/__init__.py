"""Resources module for path normalization, root descriptors and stream reading."""

from resource_accessor.resources.descriptor import parse_location, parse_root
from resource_accessor.resources.normalizer import PathNormalizer, as_directory
from resource_accessor.resources.reader import ResourceReader

__all__ = [
    "PathNormalizer",
    "ResourceReader",
    "as_directory",
    "parse_location",
    "parse_root",
]
