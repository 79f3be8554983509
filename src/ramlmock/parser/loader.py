"""Locate and load RAML documents from disk or over HTTP.

This module handles all I/O for fetching RAML documents and converting them
into :class:`~ramlmock.models.SpecNode` trees.  RAML is YAML with a
``#%RAML <version>`` header line and an ``!include`` tag; both are handled
here, after which the raw mapping is handed to
:func:`~ramlmock.parser.normalizer.normalize_document`.

Includes are resolved relative to the including document: against its
directory for local files, with :func:`urllib.parse.urljoin` for documents
fetched from an ``http(s)://`` URL.

The public functions are:

* :func:`discover_spec_files` -- list the ``.raml`` files of a directory.
* :func:`load_spec_file` -- load, parse, and normalize one document.
* :func:`validate_raml_version` -- check and return the header version.
* :func:`read_reference` -- read a schema file or URL named by a ``$ref``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urljoin, urlsplit

import httpx
import yaml

from ramlmock.exceptions import DirectoryReadError, SpecLoadError
from ramlmock.models import ParserOptions, SpecNode
from ramlmock.parser.normalizer import normalize_document

logger = logging.getLogger(__name__)

SPEC_FILE_EXTENSION = ".raml"
SUPPORTED_RAML_VERSIONS = ("0.8",)

_HEADER_PREFIX = "#%RAML"
_YAML_SUFFIXES = (".yaml", ".yml", ".raml")

Location = Union[str, Path]
"""A local :class:`~pathlib.Path` or an ``http(s)://`` URL string."""


class RamlLoader(yaml.SafeLoader):
    """YAML safe loader that resolves ``!include`` relative to the including document.

    Args:
        stream: YAML text.
        location: Location of the document being parsed.
        include_stack: Locations currently being loaded, for cycle detection.
    """

    def __init__(
        self,
        stream: str,
        location: Location,
        include_stack: tuple[Location, ...] = (),
    ) -> None:
        super().__init__(stream)
        self.location = location
        self.include_stack = include_stack


def _construct_include(loader: RamlLoader, node: yaml.Node) -> Any:
    """Inline an included document: YAML/RAML is parsed, anything else is text.

    JSON files stay text because RAML schemas are declared as JSON strings.
    """
    target = _resolve_relative(loader.location, str(loader.construct_scalar(node)))
    if target in loader.include_stack:
        raise SpecLoadError(f"Circular !include of {target}")

    content = _read_text(target)
    if _suffix(target) not in _YAML_SUFFIXES:
        return content
    return _parse_yaml(content, target, loader.include_stack + (target,))


RamlLoader.add_constructor("!include", _construct_include)


def is_url(source: Location) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def discover_spec_files(directory: Location) -> list[Path]:
    """Return the ``.raml`` files directly inside *directory*, sorted by name.

    Raises:
        DirectoryReadError: If the directory cannot be listed.
    """
    dir_path = Path(directory)
    try:
        entries = sorted(dir_path.iterdir())
    except OSError as exc:
        raise DirectoryReadError(
            f"Failed to read spec directory {directory}: {exc}"
        ) from exc

    return [
        entry
        for entry in entries
        if entry.name.endswith(SPEC_FILE_EXTENSION) and entry.is_file()
    ]


def load_spec_file(
    source: Location,
    parser_options: Optional[ParserOptions] = None,
) -> SpecNode:
    """Load a RAML document and return its root :class:`~ramlmock.models.SpecNode`.

    Args:
        source: Path to a ``.raml`` file, or an ``http(s)://`` URL.
        parser_options: Normalization switches; defaults to
            :class:`~ramlmock.models.ParserOptions`.

    Raises:
        SpecLoadError: If the document cannot be read, lacks a supported RAML
            header, is not valid YAML, or does not describe a resource tree.
    """
    location: Location = source if is_url(source) else Path(source).resolve()
    content = _read_text(location)
    if not content.strip():
        raise SpecLoadError(f"Spec file is empty: {source}")

    validate_raml_version(content, source=str(source))
    raw = _parse_yaml(content, location, (location,))
    if not isinstance(raw, dict):
        raise SpecLoadError(
            f"Spec must be a YAML mapping (got {type(raw).__name__}): {source}"
        )

    logger.debug("Loaded RAML document %s", source)
    return normalize_document(
        raw,
        parser_options or ParserOptions(),
        source=str(source),
        location=location,
        read_reference=read_reference,
    )


def validate_raml_version(content: str, source: str = "<string>") -> str:
    """Validate the ``#%RAML`` header line and return its version.

    Raises:
        SpecLoadError: If the header is missing or names an unsupported version.
    """
    lines = content.lstrip("\ufeff").splitlines()
    first_line = lines[0].strip() if lines else ""
    if not first_line.startswith(_HEADER_PREFIX):
        raise SpecLoadError(
            f"Missing '#%RAML' header in {source}. Is this a RAML document?"
        )

    version = first_line[len(_HEADER_PREFIX):].strip()
    if version not in SUPPORTED_RAML_VERSIONS:
        raise SpecLoadError(
            f"Unsupported RAML version '{version}' in {source}. "
            f"Only RAML {', '.join(SUPPORTED_RAML_VERSIONS)} is supported."
        )
    return version


def _resolve_relative(base: Location, reference: str) -> Location:
    if is_url(reference):
        return reference
    if isinstance(base, Path):
        return (base.parent / reference).resolve()
    return urljoin(base, reference)


def read_reference(base: Location, reference: str) -> tuple[Location, str]:
    """Read a schema named by a ``$ref``, relative to the document at *base*."""
    target = _resolve_relative(base, reference)
    return target, _read_text(target)


def _suffix(location: Location) -> str:
    if isinstance(location, Path):
        return location.suffix.lower()
    return Path(urlsplit(location).path).suffix.lower()


def _read_text(location: Location) -> str:
    if isinstance(location, Path):
        return _read_file(location)
    return _read_url(location)


def _read_file(path: Path) -> str:
    if not path.is_file():
        raise SpecLoadError(f"Spec file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read spec file {path}: {exc}") from exc


def _read_url(url: str) -> str:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecLoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecLoadError(f"Failed to fetch spec from {url}: {exc}") from exc
    return response.text


def _parse_yaml(
    content: str, location: Location, include_stack: tuple[Location, ...]
) -> Any:
    loader = RamlLoader(content, location, include_stack)
    try:
        return loader.get_single_data()
    except yaml.YAMLError as exc:
        raise SpecLoadError(f"Invalid YAML in {location}: {exc}") from exc
    finally:
        loader.dispose()
