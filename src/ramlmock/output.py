"""Terminal output for the ``ramlmock`` CLI.

Mock bodies and route tables are *data* and go to stdout (or to the file
given with ``-o``), so they can be piped into ``jq`` or saved as fixtures.
Everything else is a *diagnostic* and goes to stderr: warnings about
unresolved base-URI tokens, errors, hints, and debug traces.

Rendering depends on the resolved :class:`OutputFormat`:

* ``json`` -- bodies are pretty-printed JSON, tables become arrays of
  objects keyed by column header.
* ``plain`` -- tab-separated text, suitable for ``cut`` and ``awk``.
* ``rich`` -- syntax-highlighted bodies and boxed tables.

``auto`` picks ``rich`` on an interactive terminal with colour enabled and
``plain`` everywhere else. ``NO_COLOR`` and ``TERM=dumb`` disable colour.

Library modules never print. They log through :mod:`logging`;
:func:`configure_logging` attaches an :class:`OutputLogHandler` to the
``ramlmock`` logger so that those records reach stderr in the CLI.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Iterator, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# kind -> (plain prefix, rich markup prefix)
_DIAGNOSTIC_PREFIXES: dict[str, tuple[str, str]] = {
    "info": ("", ""),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] "),
    "error": ("Error: ", "[bold red]Error:[/bold red] "),
    "suggest": ("→ ", "[dim]→ "),
    "debug": ("[debug] ", "[dim]\\[debug] "),
}


class OutputManager:
    """Renders CLI data on stdout and diagnostics on stderr.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and markup on both streams.
        quiet: Drop ``info`` and ``suggest`` diagnostics.
        verbose: Show ``debug`` diagnostics.
        output_file: Write data to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._output_file_opened = False
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- data ----------------------------------------------------------- #

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Render a mock or example body.

        JSON text is parsed first so that it is re-indented; any other text
        is written unchanged. With ``output_file`` set, the body is written to the
        file as JSON (or as the text it already is).
        """
        if self._output_file:
            self._write_file(data if isinstance(data, str) else _dump(data))
            return

        body, is_text = _decode_text(data)
        if is_text:
            self._write_body_text(body)
        elif self._format == OutputFormat.JSON:
            self.print_data(_dump(body))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(body):
                self.print_data(line)
        else:
            lexer = "xml" if "xml" in content_type else "json"
            self._stdout.print(Syntax(_dump(body), lexer, theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        """Write one block of text to stdout, or to ``output_file`` when set."""
        if self._output_file:
            self._write_file(text)
        else:
            print(text, file=sys.stdout, flush=True)

    def _write_file(self, text: str) -> None:
        # The first write of a run truncates the file; later ones append.
        mode = "a" if self._output_file_opened else "w"
        with open(self._output_file, mode, encoding="utf-8") as f:
            f.write(text if text.endswith("\n") else text + "\n")
        self._output_file_opened = True

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows under *headers* (the ``routes`` listing)."""
        if self._format == OutputFormat.JSON:
            self.print_data(_dump([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- diagnostics ---------------------------------------------------- #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnose("info", message)

    def warning(self, message: str) -> None:
        self._diagnose("warning", message)

    def error(self, message: str) -> None:
        self._diagnose("error", message)

    def suggest(self, message: str) -> None:
        """Print a next-step hint, e.g. how to point the CLI at spec files."""
        if not self._quiet:
            self._diagnose("suggest", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnose("debug", message)

    def _diagnose(self, kind: str, message: str) -> None:
        plain_prefix, rich_prefix = _DIAGNOSTIC_PREFIXES[kind]
        if self._no_color:
            print(f"{plain_prefix}{message}", file=sys.stderr, flush=True)
            return
        closing = "[/dim]" if rich_prefix.startswith("[dim]") else ""
        self._stderr.print(f"{rich_prefix}{message}{closing}")

    def _write_body_text(self, text: str) -> None:
        if self._format == OutputFormat.RICH:
            self._stdout.print(text)
        else:
            self.print_data(text)


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not no_color:
        return OutputFormat.RICH
    return OutputFormat.PLAIN


def _decode_text(data: Any) -> tuple[Any, bool]:
    """Parse JSON text; return ``(value, True)`` for text that is not JSON."""
    if not isinstance(data, str):
        return data, False
    try:
        return json.loads(data), False
    except json.JSONDecodeError:
        return data, True


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_lines(body: Any) -> Iterator[str]:
    if isinstance(body, dict):
        for key, value in body.items():
            yield f"{key}\t{value}"
    elif isinstance(body, list):
        for item in body:
            if isinstance(item, dict):
                yield "\t".join(str(v) for v in item.values())
            else:
                yield str(item)
    else:
        yield str(body)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- global instance ---------------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


# -- logging bridge ----------------------------------------------------- #


class OutputLogHandler(logging.Handler):
    """Send ``ramlmock`` log records to the installed :class:`OutputManager`.

    ERROR and above print as errors, WARNING as warnings, and anything lower
    as debug output.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        output = get_output()
        if record.levelno >= logging.ERROR:
            output.error(message)
        elif record.levelno >= logging.WARNING:
            output.warning(message)
        else:
            output.debug(message)


def configure_logging(verbose: bool = False) -> None:
    """Attach the bridge to the ``ramlmock`` logger and set its level.

    Calling it again only changes the level.
    """
    logger = logging.getLogger("ramlmock")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, OutputLogHandler) for h in logger.handlers):
        logger.addHandler(OutputLogHandler())


# -- shortcuts to the installed manager --------------------------------- #


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
