"""``ramlmock routes`` -- list every generated request mocker."""

from __future__ import annotations

from typing import Optional

import typer

from ramlmock.commands import load_mockers
from ramlmock.output import get_output, info


def routes_command(
    files: Optional[list[str]] = typer.Argument(
        None, help="RAML files to load.", show_default=False
    ),
    path: Optional[str] = typer.Option(
        None, "--path", "-d", help="Directory of .raml files (wins over FILES)."
    ),
) -> None:
    """List all mockable routes.

    Shows one row per request mocker: HTTP method, URI pattern, default
    status code, and every declared code.

    Example::

        ramlmock routes --path specs/
        ramlmock --json routes api.raml
    """
    mockers = load_mockers(path, files)
    if not mockers:
        info("No mockable routes found.")
        return

    headers = ["Method", "URI", "Default", "Codes"]
    rows: list[list[str]] = []
    for mocker in sorted(mockers, key=lambda m: (m.uri, m.method.upper())):
        rows.append([
            mocker.method.upper(),
            mocker.uri,
            str(mocker.default_code) if mocker.default_code is not None else "-",
            ", ".join(str(code) for code in mocker.codes) or "-",
        ])

    get_output().print_table(headers, rows, title=f"Routes ({len(rows)})")
