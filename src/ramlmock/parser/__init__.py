"""RAML document loading -- discover files, resolve ``!include``, normalize.

This sub-package is the first half of the ramlmock pipeline: it turns RAML
files on disk into :class:`~ramlmock.models.SpecNode` trees that the
generator can walk.

Typical usage::

    from ramlmock.parser import discover_spec_files, load_spec_file

    for path in discover_spec_files("specs/"):
        root = load_spec_file(path)

Sub-modules:

* :mod:`~ramlmock.parser.loader` -- file discovery, ``#%RAML`` header
  validation, and YAML parsing with ``!include`` support.
* :mod:`~ramlmock.parser.normalizer` -- rewrites the raw RAML mapping into
  the explicit ``resources``/``methods`` tree.
* :mod:`~ramlmock.parser.resolver` -- expands ``$ref`` pointers inside JSON
  schemas.
"""

from ramlmock.parser.loader import (
    discover_spec_files,
    load_spec_file,
    validate_raml_version,
)
from ramlmock.parser.normalizer import normalize_document
from ramlmock.parser.resolver import resolve_schema_refs

__all__ = [
    "discover_spec_files",
    "load_spec_file",
    "normalize_document",
    "resolve_schema_refs",
    "validate_raml_version",
]
