"""Expand ``$ref`` pointers inside the JSON schemas of a RAML document.

RAML 0.8 schemas are JSON Schema documents given as text.  A schema may
point elsewhere with ``{"$ref": ...}``; three kinds of reference are
understood:

* ``#/definitions/author`` -- a JSON Pointer into the schema containing it;
* ``author`` or ``author#/definitions/year`` -- an entry of the document's
  root ``schemas`` list;
* ``schemas/author.json`` -- a file or URL, relative to the RAML document.

Every reference may carry a ``#/...`` fragment.  Pointers inside a referenced
schema resolve against that schema, not the one that referenced it.

A schema that references itself (directly or through others) keeps its
``$ref`` dict at the point where the cycle closes.  Unresolvable references
raise :class:`~ramlmock.exceptions.SchemaParseError`.

The public entry points are :func:`resolve_schema_refs` and
:func:`resolve_pointer`.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional

from ramlmock.exceptions import SchemaParseError

ReadReference = Callable[[Any, str], tuple[Any, str]]
"""``(base_location, reference) -> (location, text)`` for external schemas."""


class _SchemaDocument:
    """A parsed schema together with where it was read from."""

    def __init__(self, root: Any, location: Any, name: str) -> None:
        self.root = root
        self.location = location
        self.name = name


def resolve_schema_refs(
    schema: Any,
    named_schemas: Mapping[str, Any],
    location: Any = None,
    read_reference: Optional[ReadReference] = None,
) -> Any:
    """Return *schema* with every ``$ref`` replaced by its target.

    Args:
        schema: Schema text or an already-parsed mapping.
        named_schemas: The document's root ``schemas``, name -> text.
        location: Location of the RAML document, for relative references.
        read_reference: Reads an external reference; without it only
            pointers and named schemas resolve.

    Returns:
        The parsed, expanded schema when it contained a ``$ref``; otherwise
        *schema* unchanged.  Text that is not JSON is returned unchanged as
        well so that the response classifier reports it.

    Raises:
        SchemaParseError: If a reference cannot be resolved.
    """
    root = _parse(schema)
    if root is None or not _contains_ref(root):
        return schema

    resolver = _Resolver(named_schemas, read_reference)
    return resolver.expand(root, _SchemaDocument(root, location, "<schema>"), frozenset())


def resolve_pointer(root: Any, pointer: str, ref: str = "") -> Any:
    """Follow a JSON Pointer (``/definitions/year``) through *root*.

    An empty pointer addresses *root* itself.

    Raises:
        SchemaParseError: If a segment does not exist.
    """
    current = root
    for segment in pointer.lstrip("/").split("/") if pointer.strip("/") else []:
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            raise SchemaParseError(
                f"Cannot resolve $ref '{ref or pointer}': '{segment}' not found"
            )
    return current


class _Resolver:
    def __init__(
        self,
        named_schemas: Mapping[str, Any],
        read_reference: Optional[ReadReference],
    ) -> None:
        self._named = named_schemas
        self._read_reference = read_reference
        self._external: dict[str, _SchemaDocument] = {}

    def expand(self, node: Any, document: _SchemaDocument, seen: frozenset) -> Any:
        if isinstance(node, list):
            return [self.expand(item, document, seen) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if not isinstance(ref, str):
            return {key: self.expand(value, document, seen) for key, value in node.items()}

        target_document, pointer = self._locate(ref, document)
        key = (target_document.name, pointer)
        if key in seen:
            return node
        target = resolve_pointer(target_document.root, pointer, ref)
        return self.expand(target, target_document, seen | {key})

    def _locate(self, ref: str, document: _SchemaDocument) -> tuple[_SchemaDocument, str]:
        target, _, pointer = ref.partition("#")
        if not target:
            return document, pointer

        if target in self._named:
            root = _parse(self._named[target])
            if root is None:
                raise SchemaParseError(
                    f"Cannot resolve $ref '{ref}': schema '{target}' is not JSON"
                )
            return _SchemaDocument(root, document.location, f"schema:{target}"), pointer

        return self._read_external(target, ref, document), pointer

    def _read_external(self, target: str, ref: str, document: _SchemaDocument) -> _SchemaDocument:
        if self._read_reference is None or document.location is None:
            raise SchemaParseError(f"Cannot resolve $ref '{ref}': unknown schema '{target}'")

        key = f"{document.location}|{target}"
        if key not in self._external:
            location, text = self._read_reference(document.location, target)
            root = _parse(text)
            if root is None:
                raise SchemaParseError(f"Cannot resolve $ref '{ref}': {location} is not JSON")
            self._external[key] = _SchemaDocument(root, document.location, str(location))
        return self._external[key]


def _parse(schema: Any) -> Any:
    if isinstance(schema, (dict, list)):
        return schema
    if not isinstance(schema, str) or not schema.strip():
        return None
    try:
        return json.loads(schema)
    except json.JSONDecodeError:
        return None


def _contains_ref(node: Any) -> bool:
    if isinstance(node, dict):
        return "$ref" in node or any(_contains_ref(v) for v in node.values())
    if isinstance(node, list):
        return any(_contains_ref(item) for item in node)
    return False
