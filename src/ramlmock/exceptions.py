"""Exception hierarchy for ramlmock.

All exceptions inherit from :class:`RamlMockError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ramlmock.exit_codes`
and a short machine-readable ``code`` string.  Library callers match on the
exception type or on ``code``; the CLI entry point in :func:`ramlmock.app.main`
catches ``RamlMockError`` and exits with ``exit_code``.

Subclass hierarchy::

    RamlMockError            (exit 1, ERROR)
    +-- OptionsError         (exit 2, NO_OPTIONS | NO_SOURCE | INVALID_OPTIONS)
    +-- SpecLoadError        (exit 7, SPEC_LOAD)
    +-- SchemaParseError     (exit 7, SCHEMA_PARSE)
    +-- DirectoryReadError   (exit 7, DIRECTORY_READ)
    +-- RouteNotFoundError   (exit 4, ROUTE_NOT_FOUND)
    +-- ConfigError          (exit 1, CONFIG)
"""

from ramlmock.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_ERROR,
)


class RamlMockError(Exception):
    """Base exception for all ramlmock errors.

    Every subclass sets a class-level ``exit_code`` and ``code``. Both can be
    overridden per instance.

    Args:
        message: Human-readable error description printed to stderr.
        code: Optional override for the class-level error code.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    code: str = "ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        if exit_code is not None:
            self.exit_code = exit_code


class OptionsError(RamlMockError):
    """Raised when ``generate`` options are missing or unusable."""

    exit_code = EXIT_INVALID_USAGE
    code = "NO_OPTIONS"


class SpecLoadError(RamlMockError):
    """Raised when a RAML document cannot be read, parsed, or normalized."""

    exit_code = EXIT_SPEC_ERROR
    code = "SPEC_LOAD"


class SchemaParseError(RamlMockError):
    """Raised when a declared response schema is not valid JSON text.

    Aborts the method extraction of the resource that declares it.
    """

    exit_code = EXIT_SPEC_ERROR
    code = "SCHEMA_PARSE"


class DirectoryReadError(RamlMockError):
    """Raised when the spec directory cannot be listed."""

    exit_code = EXIT_SPEC_ERROR
    code = "DIRECTORY_READ"


class RouteNotFoundError(RamlMockError):
    """Raised by the CLI when no mocker matches the requested route."""

    exit_code = EXIT_NOT_FOUND
    code = "ROUTE_NOT_FOUND"


class ConfigError(RamlMockError):
    """Raised for configuration problems (invalid ``ramlmock.json``)."""

    exit_code = EXIT_GENERIC_FAILURE
    code = "CONFIG"
