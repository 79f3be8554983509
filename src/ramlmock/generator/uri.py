"""Compose absolute URI patterns from nested RAML resources.

Two operations:

* :func:`compose_uri` appends a resource's ``relativeUri`` to the URI of its
  parent, turning declared ``{name}`` placeholders into ``:name`` route
  parameters.
* :func:`resolve_base_path` turns the document's ``baseUri`` template into
  the path prefix that every top-level resource is mounted under.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple
from urllib.parse import urlsplit

from ramlmock.models import SpecNode

logger = logging.getLogger(__name__)

_REPEATED_SLASHES = re.compile(r"/{2,}")
_TEMPLATE_TOKEN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class BasePath(NamedTuple):
    """Result of :func:`resolve_base_path`.

    Attributes:
        path: Path component of the expanded ``baseUri`` (``""`` when the
            node declares none).
        unresolved: Template tokens for which no value was found, in order
            of appearance. They stay unexpanded in the URI.
    """

    path: str
    unresolved: tuple[str, ...] = ()


def compose_uri(prefix: str, node: SpecNode) -> str:
    """Return the absolute URI pattern of *node* below *prefix*.

    Nodes without a ``relativeUri`` share their parent's URI.

    Example::

        compose_uri("/api/", node)   # node.relative_uri == "/widgets/{id}"
        # -> "/api/widgets/:id" when "id" is a declared URI parameter
    """
    if not node.relative_uri:
        return prefix

    relative = node.relative_uri
    for name in node.uri_parameters or {}:
        relative = relative.replace("{" + name + "}", ":" + name)

    return collapse_slashes(prefix + "/" + relative)


def collapse_slashes(uri: str) -> str:
    return _REPEATED_SLASHES.sub("/", uri)


def resolve_base_path(node: SpecNode) -> BasePath:
    """Expand the ``baseUri`` template of *node* and return its path.

    Each ``{token}`` takes the ``default`` of the matching base-URI parameter,
    falling back to a same-named field on the node (``{version}`` reads the
    document's ``version``). Tokens are only expanded when the node declares
    ``baseUriParameters``.
    """
    if not node.base_uri:
        return BasePath("")

    if not node.base_uri_parameters:
        return BasePath(urlsplit(node.base_uri).path)

    expanded = node.base_uri
    unresolved: list[str] = []
    for name in dict.fromkeys(_TEMPLATE_TOKEN.findall(node.base_uri)):
        value = _base_parameter_value(node, name)
        if value is None:
            logger.warning("No value found for {%s} in baseUri %s", name, node.base_uri)
            unresolved.append(name)
            continue
        expanded = expanded.replace("{" + name + "}", str(value))

    return BasePath(urlsplit(expanded).path, tuple(unresolved))


def _base_parameter_value(node: SpecNode, name: str) -> object:
    parameter = (node.base_uri_parameters or {}).get(name)
    if parameter is not None and parameter.default not in (None, ""):
        return parameter.default
    value = node.field_value(name)
    if value in (None, ""):
        return None
    return value
