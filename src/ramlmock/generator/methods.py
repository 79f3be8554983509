"""Build :class:`~ramlmock.mocker.RequestMocker` objects for one resource node.

Each supported method (``GET``, ``POST``, ``PUT``, ``DELETE``) that declares
responses yields one mocker.  Its responses are classified by
:func:`~ramlmock.generator.responses.classify_responses` and registered as
lazy producers; the lowest 2xx code becomes the default.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Optional

from ramlmock.generator.responses import classify_responses
from ramlmock.mocker import Producer, RequestMocker
from ramlmock.models import FormatGenerator, ResponseDescriptor, SpecNode

SchemaMocker = Callable[[Any, Mapping[str, FormatGenerator]], Any]

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

_SUCCESS_CODE = re.compile(r"2\d\d")


def extract_methods(
    node: SpecNode,
    uri: str,
    formats: Optional[Mapping[str, FormatGenerator]] = None,
    schema_mocker: Optional[SchemaMocker] = None,
) -> tuple[RequestMocker, ...]:
    """Return one request mocker per supported method declared on *node*.

    Args:
        node: The resource node whose ``methods`` are read.
        uri: The node's absolute URI pattern.
        formats: Custom format generators passed to *schema_mocker*.
        schema_mocker: Called as ``schema_mocker(schema, formats)`` each time a
            mock body is requested. Defaults to
            :func:`~ramlmock.schema_mocker.mock_schema`.

    Returns:
        Mockers in method declaration order.

    Raises:
        SchemaParseError: If any response schema of any method is malformed;
            no mockers are returned for the node in that case.
    """
    if schema_mocker is None:
        from ramlmock.schema_mocker import mock_schema

        schema_mocker = mock_schema
    formats = formats or {}

    mockers: list[RequestMocker] = []
    for method in node.methods or []:
        if not is_supported_method(method.method) or not method.responses:
            continue

        mocker = RequestMocker(uri, method.method)
        default_code: Optional[int] = None

        for descriptor in classify_responses(method.responses):
            mocker.add_response(
                descriptor.code,
                _mock_producer(descriptor, formats, schema_mocker),
                _example_producer(descriptor),
            )
            if is_default_candidate(descriptor.code, default_code):
                default_code = descriptor.code

        if default_code is not None:
            mocker.set_default(default_code)
        mockers.append(mocker)

    return tuple(mockers)


def is_supported_method(verb: str) -> bool:
    return verb.upper() in SUPPORTED_METHODS


def is_default_candidate(code: int, current: Optional[int]) -> bool:
    """Return True when *code* should replace *current* as the default.

    Only 2xx codes qualify, and a lower code beats a higher one.
    """
    if current is not None and code >= current:
        return False
    return _SUCCESS_CODE.fullmatch(str(code)) is not None


def _mock_producer(
    descriptor: ResponseDescriptor,
    formats: Mapping[str, FormatGenerator],
    schema_mocker: SchemaMocker,
) -> Producer:
    def produce() -> Any:
        if descriptor.schema_ is None:
            return None
        return schema_mocker(descriptor.schema_, formats)

    return produce


def _example_producer(descriptor: ResponseDescriptor) -> Producer:
    def produce() -> Any:
        return descriptor.example

    return produce
