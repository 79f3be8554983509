"""Classify a method's declared responses into :class:`ResponseDescriptor` objects.

A RAML method declares its responses as a mapping of status-code key to
response definition, each with a body keyed by media type.  Only responses
that can be mocked survive classification:

* the code key must be a plain decimal number (``"default"`` is dropped);
* the body must offer ``application/json`` or a vendor JSON/XML media type
  such as ``application/vnd.acme.v2+json`` (``text/plain`` is dropped).

The surviving body's ``schema`` text is parsed here, so a malformed schema
surfaces as :class:`~ramlmock.exceptions.SchemaParseError` before any mocker
is built.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from ramlmock.exceptions import SchemaParseError
from ramlmock.models import BodyDescriptor, ResponseDefinition, ResponseDescriptor

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

_VENDOR_MEDIA_TYPE = re.compile(r"^application/[A-Za-z0-9.\-]*\+?(json|xml)")
_NUMERIC_CODE = re.compile(r"\d+")


def classify_responses(
    responses: Mapping[str, Optional[ResponseDefinition]],
) -> tuple[ResponseDescriptor, ...]:
    """Turn a code-keyed response mapping into descriptors, keeping input order.

    Args:
        responses: Status-code key to response definition. ``None`` values
            are skipped.

    Returns:
        One :class:`~ramlmock.models.ResponseDescriptor` per usable code.

    Raises:
        SchemaParseError: If a usable body declares schema text that is not
            valid JSON.
    """
    descriptors: list[ResponseDescriptor] = []

    for code_key, response in responses.items():
        if response is None:
            continue

        body = select_body(response.body)
        if body is None:
            logger.debug("Skipping response %s: no JSON or XML body", code_key)
            continue

        code = parse_status_code(code_key)
        if code is None:
            logger.debug("Skipping response %r: not a numeric status code", code_key)
            continue

        descriptors.append(
            ResponseDescriptor(
                code=code,
                schema=parse_schema(body.schema_, code),
                example=body.example,
            )
        )

    return tuple(descriptors)


def select_body(
    body: Optional[Mapping[str, Optional[BodyDescriptor]]],
) -> Optional[BodyDescriptor]:
    """Pick the body to mock from a media-type mapping.

    ``application/json`` wins when present; otherwise the first key that looks
    like a JSON or XML media type (vendor types included) is used.
    """
    if not body:
        return None

    if body.get(JSON_MEDIA_TYPE) is not None:
        return body[JSON_MEDIA_TYPE]

    for media_type, descriptor in body.items():
        if is_mockable_media_type(media_type):
            return descriptor

    return None


def is_mockable_media_type(media_type: str) -> bool:
    """Return True for ``application/json``, ``application/xml`` and their vendor variants."""
    return _VENDOR_MEDIA_TYPE.match(media_type) is not None


def parse_status_code(code_key: Any) -> Optional[int]:
    """Parse a status-code key into a non-negative integer, or ``None``."""
    text = str(code_key).strip()
    if not _NUMERIC_CODE.fullmatch(text):
        return None
    return int(text)


def parse_schema(schema: Any, code: int) -> Any:
    """Parse a body's schema text into a Python object.

    Mappings pass through unchanged, empty values become ``None``.

    Raises:
        SchemaParseError: If *schema* is text that is not valid JSON.
    """
    if not schema:
        return None
    if not isinstance(schema, str):
        return schema
    try:
        return json.loads(schema)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(
            f"Invalid JSON schema for response {code}: {exc}"
        ) from exc
