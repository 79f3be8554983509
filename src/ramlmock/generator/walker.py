"""Walk RAML resource trees and collect request mockers.

:func:`walk` descends one document.  At every node it composes the node's
URI, then concurrently extracts the node's own methods and walks its child
resources (children are mounted below the document's base path).  Results
from each branch are returned as new tuples and merged with
:func:`union_mockers`, so no collection is shared between branches.

:func:`walk_documents` does the same for several documents at once, each
starting from a fresh ``"/"`` prefix.

Concurrency is cooperative (:func:`asyncio.gather`): the first branch to
fail propagates its exception and the other branches' results are dropped.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Mapping, Optional

from ramlmock.generator.methods import SchemaMocker, extract_methods
from ramlmock.generator.uri import compose_uri, resolve_base_path
from ramlmock.mocker import RequestMocker
from ramlmock.models import FormatGenerator, SpecNode

ROOT_URI = "/"


async def walk(
    node: SpecNode,
    uri: str = ROOT_URI,
    formats: Optional[Mapping[str, FormatGenerator]] = None,
    schema_mocker: Optional[SchemaMocker] = None,
) -> tuple[RequestMocker, ...]:
    """Collect the mockers of *node* and its whole subtree.

    Args:
        node: Document root or resource node.
        uri: URI accumulated by the ancestors of *node*.
        formats: Custom format generators for the schema mocker.
        schema_mocker: Replacement for the default schema mocker.

    Returns:
        The union of the node's own mockers and its descendants' mockers.

    Raises:
        SchemaParseError: If any method in the subtree declares a malformed
            response schema.
    """
    node_uri = compose_uri(uri, node)

    branches = []
    if node.methods:
        branches.append(_extract(node, node_uri, formats, schema_mocker))
    if node.resources:
        branches.append(_walk_resources(node, node_uri, formats, schema_mocker))

    results = await asyncio.gather(*branches)
    return union_mockers(*results)


async def walk_documents(
    roots: Iterable[SpecNode],
    formats: Optional[Mapping[str, FormatGenerator]] = None,
    schema_mocker: Optional[SchemaMocker] = None,
) -> tuple[RequestMocker, ...]:
    """Walk every document root from ``"/"`` and union the results."""
    results = await asyncio.gather(
        *(walk(root, ROOT_URI, formats, schema_mocker) for root in roots)
    )
    return union_mockers(*results)


def union_mockers(*groups: Iterable[RequestMocker]) -> tuple[RequestMocker, ...]:
    """Concatenate *groups*, skipping mocker objects already seen.

    Identity is what counts: two mockers for the same route built from
    different documents are both kept.
    """
    seen: set[int] = set()
    merged: list[RequestMocker] = []
    for group in groups:
        for mocker in group:
            if id(mocker) in seen:
                continue
            seen.add(id(mocker))
            merged.append(mocker)
    return tuple(merged)


async def _extract(
    node: SpecNode,
    uri: str,
    formats: Optional[Mapping[str, FormatGenerator]],
    schema_mocker: Optional[SchemaMocker],
) -> tuple[RequestMocker, ...]:
    return extract_methods(node, uri, formats, schema_mocker)


async def _walk_resources(
    node: SpecNode,
    uri: str,
    formats: Optional[Mapping[str, FormatGenerator]],
    schema_mocker: Optional[SchemaMocker],
) -> tuple[RequestMocker, ...]:
    base_path = resolve_base_path(node).path
    results = await asyncio.gather(
        *(
            walk(child, base_path + uri, formats, schema_mocker)
            for child in node.resources or []
        )
    )
    return union_mockers(*results)
