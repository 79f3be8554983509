"""``ramlmock mock`` -- print a generated body for one route."""

from __future__ import annotations

from typing import Optional

import typer

from ramlmock.commands import load_mockers
from ramlmock.exceptions import RouteNotFoundError
from ramlmock.exit_codes import EXIT_INVALID_USAGE
from ramlmock.mocker import RequestMocker
from ramlmock.output import error, format_response, info


def find_mocker(
    mockers: list[RequestMocker], method: str, uri: str
) -> RequestMocker:
    """Return the first mocker for *method* and *uri*.

    Raises:
        RouteNotFoundError: If none matches.
    """
    for mocker in mockers:
        if mocker.matches(method, uri):
            return mocker
    raise RouteNotFoundError(f"No mocker for {method.upper()} {uri}")


def mock_command(
    method: str = typer.Argument(..., help="HTTP method, e.g. GET."),
    uri: str = typer.Argument(..., help="URI pattern, e.g. /api/widgets/:id."),
    files: Optional[list[str]] = typer.Argument(
        None, help="RAML files to load.", show_default=False
    ),
    path: Optional[str] = typer.Option(
        None, "--path", "-d", help="Directory of .raml files (wins over FILES)."
    ),
    code: Optional[int] = typer.Option(
        None, "--code", "-c", help="Status code (default: the route's default code)."
    ),
    example: bool = typer.Option(
        False, "--example", "-e", help="Print the declared example instead of a mock."
    ),
) -> None:
    """Print a mock (or example) response body for a route.

    The URI must be given as listed by ``ramlmock routes``.

    Example::

        ramlmock mock GET /api/widgets/:id --path specs/
        ramlmock mock POST /api/widgets --code 201 --example api.raml
    """
    mockers = load_mockers(path, files)

    try:
        mocker = find_mocker(mockers, method, uri)
    except RouteNotFoundError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if code is not None and code not in mocker.responses_by_code:
        declared = ", ".join(str(c) for c in mocker.codes) or "none"
        error(f"{mocker.method.upper()} {mocker.uri} does not declare {code} (declared: {declared})")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    body = mocker.example(code) if example else mocker.mock(code)
    if body is None:
        info("No body declared for this response.")
        return

    format_response(body)
