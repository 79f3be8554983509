"""Root Typer application for the ``ramlmock`` console script.

The root callback turns the global flags into an
:class:`~ramlmock.output.OutputManager` and hooks the ``ramlmock`` logger up
to it; ``routes`` and ``mock`` then do the work. :func:`main` is the entry
point named in ``pyproject.toml``: a :class:`~ramlmock.exceptions.RamlMockError`
that escapes a command ends the process with that error's exit code, and
Ctrl-C ends it with 130.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from ramlmock import __version__
from ramlmock.commands.mock import mock_command
from ramlmock.commands.routes import routes_command
from ramlmock.exceptions import RamlMockError
from ramlmock.exit_codes import EXIT_GENERIC_FAILURE
from ramlmock.output import (
    OutputFormat,
    OutputManager,
    configure_logging,
    error,
    set_output,
)

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="ramlmock",
    help="Generate mock responses from RAML API descriptions.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.command("routes", help="List the routes a set of RAML files can mock.")(routes_command)
app.command("mock", help="Print a mock or example body for one route.")(mock_command)


def _print_version(requested: bool) -> None:
    if requested:
        typer.echo(f"ramlmock {__version__}")
        raise typer.Exit()


def _requested_format(json_output: bool, plain_output: bool) -> OutputFormat:
    # --json beats --plain when both are given
    if json_output:
        return OutputFormat.JSON
    if plain_output:
        return OutputFormat.PLAIN
    return OutputFormat.AUTO


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True,
        help="Print the ramlmock version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit bodies and routes as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Emit tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Turn off colour and markup."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug diagnostics."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write bodies and routes to this file."
    ),
) -> None:
    """Generate mock responses from RAML API descriptions."""
    set_output(
        OutputManager(
            format=_requested_format(json_output, plain_output),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )
    configure_logging(verbose=verbose)


def _cancelled(*_: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def main() -> None:
    """Run the CLI; always ends in ``SystemExit``."""
    signal.signal(signal.SIGINT, _cancelled)
    try:
        app()
    except KeyboardInterrupt:
        _cancelled()
    except RamlMockError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except SystemExit:
        raise
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
