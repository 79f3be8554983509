"""Normalize a raw RAML 0.8 mapping into a :class:`~ramlmock.models.SpecNode` tree.

RAML nests resources as mapping keys that start with ``/`` and declares
methods as lower-case verb keys next to them.  This module rewrites that
shape into the explicit tree the generator walks:

* every ``/...`` key becomes a child in ``resources`` with its key as
  ``relativeUri``;
* every HTTP verb key becomes an entry in ``methods`` with the verb
  upper-cased in ``method``;
* status-code keys become strings (YAML reads ``200:`` as an integer).

A body ``schema`` that names an entry of the root ``schemas`` list is
replaced with that entry's text.  Two :class:`~ramlmock.models.ParserOptions`
switches apply while bodies are rewritten:

* ``dereference_schemas`` -- ``$ref`` pointers inside a JSON schema are
  expanded (see :mod:`ramlmock.parser.resolver`).
* ``decode_examples`` -- a string ``example`` under a JSON media type is
  decoded with :func:`json.loads` when it parses.

A body declared without a media type (``body: {schema: ...}``) is filed under
the document's ``mediaType``.

Resource types, traits, and security schemes are not expanded; a resource or
method that uses ``type`` or ``is`` is logged at debug level.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from ramlmock.exceptions import SpecLoadError
from ramlmock.models import ParserOptions, SpecNode
from ramlmock.parser.resolver import ReadReference, resolve_schema_refs

logger = logging.getLogger(__name__)

# HTTP methods recognised by RAML 0.8
_HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")

_BODY_FIELDS = frozenset({"schema", "example", "formParameters"})


def normalize_document(
    raw: dict[str, Any],
    parser_options: ParserOptions,
    source: str = "<document>",
    location: Any = None,
    read_reference: Optional[ReadReference] = None,
) -> SpecNode:
    """Build the root :class:`~ramlmock.models.SpecNode` of a RAML document.

    Args:
        raw: The YAML mapping of the whole document, ``!include`` already
            resolved.
        parser_options: Normalization switches.
        source: Document name used in error messages.
        location: Where the document was read from; relative schema
            ``$ref``s resolve against it.
        read_reference: Reads a schema file or URL named by a ``$ref``.

    Returns:
        The validated root node. Non-resource root fields (``title``,
        ``version``, ``mediaType``...) are kept as extra attributes.

    Raises:
        SpecLoadError: If the normalized tree fails validation.
    """
    context = _Context(
        media_type=raw.get("mediaType"),
        schemas=_collect_schemas(raw.get("schemas")),
        options=parser_options,
        location=location,
        read_reference=read_reference,
    )

    root: dict[str, Any] = {
        key: value
        for key, value in raw.items()
        if not _is_resource_key(key)
    }
    resources = _normalize_resources(raw, context)
    if resources:
        root["resources"] = resources

    try:
        return SpecNode.model_validate(root)
    except ValidationError as exc:
        raise SpecLoadError(f"Invalid RAML structure in {source}: {exc}") from exc


class _Context:
    """Document-wide settings consulted while rewriting bodies."""

    def __init__(
        self,
        media_type: Optional[str],
        schemas: dict[str, Any],
        options: ParserOptions,
        location: Any = None,
        read_reference: Optional[ReadReference] = None,
    ) -> None:
        self.media_type = media_type
        self.schemas = schemas
        self.options = options
        self.location = location
        self.read_reference = read_reference


def _is_resource_key(key: Any) -> bool:
    return isinstance(key, str) and key.startswith("/")


def _collect_schemas(schemas: Any) -> dict[str, Any]:
    """Flatten the root ``schemas`` declaration into a name -> text mapping.

    RAML 0.8 declares it as a list of single-entry mappings; a plain mapping
    is accepted too.
    """
    if isinstance(schemas, dict):
        return dict(schemas)

    collected: dict[str, Any] = {}
    if isinstance(schemas, list):
        for entry in schemas:
            if isinstance(entry, dict):
                collected.update(entry)
    return collected


def _normalize_resources(raw: dict[str, Any], context: _Context) -> list[dict[str, Any]]:
    return [
        _normalize_resource(key, value, context)
        for key, value in raw.items()
        if _is_resource_key(key)
    ]


def _normalize_resource(
    relative_uri: str, raw: Any, context: _Context
) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}

    _log_unexpanded(relative_uri, raw)

    resource: dict[str, Any] = {"relativeUri": relative_uri}
    for key, value in raw.items():
        if _is_resource_key(key) or key in _HTTP_METHODS:
            continue
        resource[key] = value

    methods = [
        _normalize_method(verb, raw[verb], context)
        for verb in raw
        if verb in _HTTP_METHODS
    ]
    if methods:
        resource["methods"] = methods

    children = _normalize_resources(raw, context)
    if children:
        resource["resources"] = children

    return resource


def _normalize_method(verb: str, raw: Any, context: _Context) -> dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    _log_unexpanded(verb.upper(), raw)

    method: dict[str, Any] = {
        key: value for key, value in raw.items() if key != "responses"
    }
    method["method"] = verb.upper()

    responses = raw.get("responses")
    if isinstance(responses, dict):
        method["responses"] = {
            str(code): _normalize_response(response, context)
            for code, response in responses.items()
        }

    return method


def _normalize_response(raw: Any, context: _Context) -> Optional[dict[str, Any]]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        return {}

    response = dict(raw)
    body = raw.get("body")
    if isinstance(body, dict):
        response["body"] = _normalize_body(body, context)
    return response


def _normalize_body(raw: dict[str, Any], context: _Context) -> dict[str, Any]:
    # A body without media-type keys inherits the document's default type.
    if context.media_type and raw and set(raw) <= _BODY_FIELDS:
        raw = {context.media_type: raw}

    body: dict[str, Any] = {}
    for media_type, descriptor in raw.items():
        if not isinstance(descriptor, dict):
            body[str(media_type)] = None
            continue
        body[str(media_type)] = _normalize_descriptor(str(media_type), descriptor, context)
    return body


def _normalize_descriptor(
    media_type: str, raw: dict[str, Any], context: _Context
) -> dict[str, Any]:
    descriptor = dict(raw)
    options = context.options

    schema = descriptor.get("schema")
    if isinstance(schema, str) and schema in context.schemas:
        schema = descriptor["schema"] = context.schemas[schema]
    if options.dereference_schemas and schema:
        descriptor["schema"] = resolve_schema_refs(
            schema, context.schemas, context.location, context.read_reference
        )

    example = descriptor.get("example")
    if options.decode_examples and isinstance(example, str) and "json" in media_type:
        try:
            descriptor["example"] = json.loads(example)
        except json.JSONDecodeError:
            pass

    return descriptor


def _log_unexpanded(name: str, raw: dict[str, Any]) -> None:
    if raw.get("type") is not None:
        logger.debug("%s uses resource type %r; it is not expanded", name, raw["type"])
    if raw.get("is") is not None:
        logger.debug("%s uses traits %r; they are not expanded", name, raw["is"])
