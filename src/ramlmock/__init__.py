"""ramlmock -- Build mock responders from RAML API descriptions.

This package reads RAML 0.8 documents and produces one
:class:`~ramlmock.mocker.RequestMocker` per (URI pattern, HTTP method) pair.
Each mocker generates fake response bodies from the declared JSON Schemas,
or returns the declared examples, for any status code, and has a default
code (the lowest 2xx).

Typical usage::

    from ramlmock import generate_sync

    for mocker in generate_sync({"path": "specs/"}):
        print(mocker.method, mocker.uri, mocker.mock())

The ``ramlmock`` console script lists routes and prints mock bodies.

Modules:
    api: Public entry points (async, callback, blocking).
    mocker: The RequestMocker value object.
    generator: Tree walk, URI composition, response classification.
    parser: RAML file discovery and loading.
    schema_mocker: Faker-based fake data from JSON Schema.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    config: Project-local configuration.
    output: stdout/stderr formatting with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from ramlmock.exceptions import (  # noqa: E402
    DirectoryReadError,
    OptionsError,
    RamlMockError,
    SchemaParseError,
    SpecLoadError,
)
from ramlmock.api import generate, generate_sync, generate_with_callback  # noqa: E402
from ramlmock.mocker import RequestMocker  # noqa: E402
from ramlmock.models import GenerateOptions, ParserOptions  # noqa: E402

__all__ = [
    "DirectoryReadError",
    "GenerateOptions",
    "OptionsError",
    "ParserOptions",
    "RamlMockError",
    "RequestMocker",
    "SchemaParseError",
    "SpecLoadError",
    "generate",
    "generate_sync",
    "generate_with_callback",
]
