"""Generate fake data that follows a JSON Schema node.

This is the default schema mocker wired into every
:class:`~ramlmock.mocker.RequestMocker`.  It walks the schema recursively and
fills primitive values with :mod:`faker`.  It understands the keywords that
appear in typical response schemas (``type``, ``properties``, ``items``,
``enum``, ``const``, ``format``, ``minimum``/``maximum``,
``minItems``/``maxItems``, ``minLength``/``maxLength``, ``allOf``,
``oneOf``/``anyOf``, and local ``$ref`` pointers such as
``#/definitions/author``) and ignores the rest.  When only one of
``minimum``/``maximum`` is set the other is placed a fixed span away from it.

Custom formats take precedence over everything else: when a node's ``format``
names an entry of *formats*, that generator is called as
``generator(faker, node)`` and its return value is used verbatim.

Any callable with the signature of :func:`mock_schema` can replace it; see
the ``schema_mocker`` argument of :func:`ramlmock.generate`.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Optional

from faker import Faker

from ramlmock.parser.resolver import resolve_pointer

_faker: Optional[Faker] = None

_MAX_DEPTH = 8
_DEFAULT_MAX_ITEMS = 3
_DEFAULT_SPAN = 10000


def get_faker() -> Faker:
    """Return the shared :class:`~faker.Faker` instance, creating it lazily."""
    global _faker
    if _faker is None:
        _faker = Faker()
    return _faker


_STRING_FORMATS: dict[str, Callable[[Faker], Any]] = {
    "email": lambda f: f.email(),
    "uri": lambda f: f.uri(),
    "url": lambda f: f.url(),
    "hostname": lambda f: f.hostname(),
    "ipv4": lambda f: f.ipv4(),
    "ipv6": lambda f: f.ipv6(),
    "uuid": lambda f: f.uuid4(),
    "date": lambda f: f.date(),
    "date-time": lambda f: f.iso8601(),
    "time": lambda f: f.time(),
}


def mock_schema(
    schema: Any,
    formats: Optional[Mapping[str, Callable[[Any, dict[str, Any]], Any]]] = None,
    faker: Optional[Faker] = None,
) -> Any:
    """Generate a value conforming (loosely) to *schema*.

    Args:
        schema: A parsed JSON Schema node. Non-mapping values yield ``None``.
        formats: Custom format generators keyed by format name.
        faker: Faker instance to draw values from; defaults to
            :func:`get_faker`.

    Returns:
        A JSON-compatible Python value.
    """
    return _generate(schema, schema, formats or {}, faker or get_faker(), depth=0)


def _generate(
    node: Any,
    root: Any,
    formats: Mapping[str, Callable[[Any, dict[str, Any]], Any]],
    faker: Faker,
    depth: int,
) -> Any:
    if not isinstance(node, dict) or depth > _MAX_DEPTH:
        return None

    ref = node.get("$ref")
    if isinstance(ref, str):
        # Anything but a local pointer should have been expanded at load time.
        if not ref.startswith("#"):
            return None
        return _generate(resolve_pointer(root, ref[1:], ref), root, formats, faker, depth + 1)

    fmt = node.get("format")
    if fmt in formats:
        return formats[fmt](faker, node)

    if "const" in node:
        return node["const"]
    if node.get("enum"):
        return faker.random_element(node["enum"])

    if "allOf" in node:
        return _generate(_merge_all_of(node), root, formats, faker, depth + 1)
    for key in ("oneOf", "anyOf"):
        if node.get(key):
            return _generate(node[key][0], root, formats, faker, depth + 1)

    schema_type = _schema_type(node)

    if schema_type == "object":
        properties = node.get("properties") or {}
        return {
            name: _generate(sub, root, formats, faker, depth + 1)
            for name, sub in properties.items()
        }

    if schema_type == "array":
        min_items = node.get("minItems", 1)
        max_items = node.get("maxItems", max(min_items, _DEFAULT_MAX_ITEMS))
        count = faker.random_int(min=min_items, max=max_items)
        items = node.get("items") or {}
        if isinstance(items, list):
            # Tuple validation: one value per positional schema.
            return [_generate(sub, root, formats, faker, depth + 1) for sub in items]
        return [_generate(items, root, formats, faker, depth + 1) for _ in range(count)]

    if schema_type == "integer":
        low, high = _bounds(node)
        return faker.random_int(min=math.ceil(low), max=math.floor(high))

    if schema_type == "number":
        low, high = _bounds(node)
        return faker.pyfloat(min_value=low, max_value=high, right_digits=2)

    if schema_type == "boolean":
        return faker.pybool()

    if schema_type == "null":
        return None

    if schema_type == "string":
        return _generate_string(node, fmt, faker)

    return None


def _generate_string(node: dict[str, Any], fmt: Any, faker: Faker) -> str:
    if fmt in _STRING_FORMATS:
        return str(_STRING_FORMATS[fmt](faker))

    min_length = node.get("minLength", 0)
    max_length = node.get("maxLength")
    value = faker.pystr(
        min_chars=max(min_length, 1), max_chars=max_length or max(min_length, 20)
    )
    if max_length is not None:
        value = value[:max_length]
    return value


def _schema_type(node: dict[str, Any]) -> str:
    """Return the node's type, inferring ``object``/``array`` from their keywords.

    Type arrays (``["string", "null"]``) resolve to the first non-null type.
    """
    type_value = node.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return non_null[0] if non_null else "null"
    if type_value:
        return str(type_value)
    if "properties" in node:
        return "object"
    if "items" in node:
        return "array"
    return ""


def _merge_all_of(node: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {k: v for k, v in node.items() if k != "allOf"}
    properties: dict[str, Any] = dict(merged.get("properties") or {})
    for part in node["allOf"]:
        if not isinstance(part, dict):
            continue
        properties.update(part.get("properties") or {})
        for key, value in part.items():
            if key != "properties":
                merged.setdefault(key, value)
    if properties:
        merged["properties"] = properties
        merged.setdefault("type", "object")
    return merged


def _bounds(node: dict[str, Any]) -> tuple[float, float]:
    """Return ``(minimum, maximum)``, deriving a missing bound from the other."""
    low = node.get("minimum")
    high = node.get("maximum")
    if low is None and high is None:
        return 0, _DEFAULT_SPAN
    if low is None:
        low = 0 if high >= 0 else high - _DEFAULT_SPAN
    if high is None:
        high = _DEFAULT_SPAN if low <= _DEFAULT_SPAN else low + _DEFAULT_SPAN
    return low, high
