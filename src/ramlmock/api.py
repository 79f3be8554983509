"""Public entry points: RAML files in, request mockers out.

Three flavours of the same operation:

* :func:`generate` -- the coroutine; raises on failure.
* :func:`generate_with_callback` -- runs :func:`generate` to completion and
  reports ``callback(error, mockers)``.
* :func:`generate_sync` -- blocking wrapper returning the mockers.

Example::

    mockers = generate_sync({"path": "specs/"})
    for mocker in mockers:
        print(mocker.method, mocker.uri, mocker.mock())
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from ramlmock.exceptions import OptionsError
from ramlmock.generator.methods import SchemaMocker
from ramlmock.generator.walker import walk_documents
from ramlmock.mocker import RequestMocker
from ramlmock.models import GenerateOptions
from ramlmock.parser.loader import (
    Location,
    discover_spec_files,
    is_url,
    load_spec_file,
)

logger = logging.getLogger(__name__)

OptionsLike = Union[GenerateOptions, Mapping[str, Any]]
GenerateCallback = Callable[[Optional[Exception], Optional[list[RequestMocker]]], Any]


def resolve_options(options: Optional[OptionsLike]) -> GenerateOptions:
    """Validate *options* into a :class:`~ramlmock.models.GenerateOptions`.

    Raises:
        OptionsError: ``NO_OPTIONS`` when *options* is ``None``,
            ``INVALID_OPTIONS`` when a mapping fails validation.
    """
    if options is None:
        raise OptionsError("You must define an options object", code="NO_OPTIONS")
    if isinstance(options, GenerateOptions):
        return options
    try:
        return GenerateOptions.model_validate(dict(options))
    except (ValidationError, TypeError, ValueError) as exc:
        raise OptionsError(f"Invalid options: {exc}", code="INVALID_OPTIONS") from exc


def resolve_spec_files(options: GenerateOptions) -> list[Location]:
    """Return the documents to load: the ``.raml`` files of ``path``, else ``files``.

    ``files`` entries may be local paths or ``http(s)://`` URLs.

    Raises:
        OptionsError: ``NO_SOURCE`` when neither ``path`` nor ``files`` is set.
        DirectoryReadError: If ``path`` cannot be listed.
    """
    if options.path:
        return discover_spec_files(options.path)
    if options.files is not None:
        return [f if is_url(f) else Path(f) for f in options.files]
    raise OptionsError(
        "Options must set either 'path' or 'files'", code="NO_SOURCE"
    )


async def generate(
    options: Optional[OptionsLike],
    *,
    schema_mocker: Optional[SchemaMocker] = None,
) -> list[RequestMocker]:
    """Load every spec named by *options* and return their request mockers.

    Documents are loaded in worker threads and walked concurrently. The first
    failure aborts the call; no partial results are returned.

    Args:
        options: A :class:`~ramlmock.models.GenerateOptions` or an equivalent
            mapping (``path``, ``files``, ``formats``, ``parserOptions``).
        schema_mocker: Replacement for
            :func:`~ramlmock.schema_mocker.mock_schema`.

    Returns:
        One mocker per (document, URI, method). Order across documents and
        sibling resources is not significant.

    Raises:
        OptionsError: If *options* is missing, invalid, or names no source.
        DirectoryReadError: If ``path`` cannot be listed.
        SpecLoadError: If a document cannot be loaded.
        SchemaParseError: If a response schema is not valid JSON.
    """
    resolved = resolve_options(options)
    files = resolve_spec_files(resolved)
    logger.debug("Generating mockers from %d spec file(s)", len(files))

    roots = await asyncio.gather(
        *(
            asyncio.to_thread(load_spec_file, path, resolved.parser_options)
            for path in files
        )
    )
    mockers = await walk_documents(roots, resolved.formats, schema_mocker)
    return list(mockers)


def generate_sync(
    options: Optional[OptionsLike],
    *,
    schema_mocker: Optional[SchemaMocker] = None,
) -> list[RequestMocker]:
    """Blocking form of :func:`generate`. Must not be called from a running loop."""
    return asyncio.run(generate(options, schema_mocker=schema_mocker))


def generate_with_callback(
    options: Optional[OptionsLike],
    callback: GenerateCallback,
    *,
    schema_mocker: Optional[SchemaMocker] = None,
) -> None:
    """Run :func:`generate` and report the outcome as ``callback(error, mockers)``.

    Every failure, directory errors included, is delivered as
    ``callback(error, None)``; success as ``callback(None, mockers)``.

    Raises:
        TypeError: Immediately, if *callback* is not callable.
    """
    if not callable(callback):
        raise TypeError("`callback` is not a function")

    try:
        mockers = generate_sync(options, schema_mocker=schema_mocker)
    except Exception as exc:
        callback(exc, None)
        return
    callback(None, mockers)
