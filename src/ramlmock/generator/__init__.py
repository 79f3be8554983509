"""Request-mocker generation from parsed RAML resource trees.

This sub-package is the second half of the ramlmock pipeline: it turns the
:class:`~ramlmock.models.SpecNode` trees produced by :mod:`ramlmock.parser`
into :class:`~ramlmock.mocker.RequestMocker` objects.

Sub-modules, leaves first:

* :mod:`~ramlmock.generator.responses` -- status-code and media-type
  classification of a method's responses.
* :mod:`~ramlmock.generator.methods` -- one mocker per supported method,
  with default-code selection.
* :mod:`~ramlmock.generator.uri` -- URI pattern composition and base-URI
  expansion.
* :mod:`~ramlmock.generator.walker` -- recursive, concurrent tree walk and
  result merging.
"""

from ramlmock.generator.methods import extract_methods
from ramlmock.generator.responses import classify_responses
from ramlmock.generator.uri import BasePath, compose_uri, resolve_base_path
from ramlmock.generator.walker import union_mockers, walk, walk_documents

__all__ = [
    "BasePath",
    "classify_responses",
    "compose_uri",
    "extract_methods",
    "resolve_base_path",
    "union_mockers",
    "walk",
    "walk_documents",
]
