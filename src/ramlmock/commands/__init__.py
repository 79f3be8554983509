"""Built-in CLI sub-commands for ramlmock.

* :mod:`~ramlmock.commands.routes` -- list the generated request mockers.
* :mod:`~ramlmock.commands.mock` -- print a mock or example body for one
  route.

Each module exports a plain callback function registered directly on the
root app, plus the shared :func:`load_mockers` helper lives here.
"""

from __future__ import annotations

from typing import Optional

import typer

from ramlmock.mocker import RequestMocker
from ramlmock.output import debug, error, suggest


def load_mockers(
    path: Optional[str] = None,
    files: Optional[list[str]] = None,
) -> list[RequestMocker]:
    """Resolve spec sources and generate mockers for a CLI command.

    Raises:
        typer.Exit: With the error's exit code when configuration, loading,
            or generation fails.
    """
    from ramlmock.api import generate_sync
    from ramlmock.config import resolve_generate_options
    from ramlmock.exceptions import OptionsError, RamlMockError

    try:
        options = resolve_generate_options(cli_path=path, cli_files=files)
        mockers = generate_sync(options)
    except OptionsError as exc:
        error(str(exc))
        suggest("Pass RAML files, use --path DIR, or create ramlmock.json")
        raise typer.Exit(code=exc.exit_code) from None
    except RamlMockError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Generated {len(mockers)} request mocker(s)")
    return mockers
