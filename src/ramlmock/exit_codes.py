"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ramlmock.exceptions.RamlMockError` subclass.
Shell wrappers can inspect the exit code to tell a missing route apart from
a broken spec file without parsing stderr.

Example::

    $ ramlmock mock GET /api/unknown
    $ echo $?
    4   # EXIT_NOT_FOUND -- no mocker matches the route
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or options."""

EXIT_NOT_FOUND = 4
"""No request mocker matches the requested method and URI."""

EXIT_SPEC_ERROR = 7
"""A RAML document, its directory, or an embedded schema could not be read."""
