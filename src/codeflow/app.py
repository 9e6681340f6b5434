"""Typer application and CLI entry point for codeflow.

The command line is a developer tool for exercising provider configs: it
lists providers, prints authorization URLs, and runs callbacks from
pasted redirect parameters. Applications use the library API
(:mod:`codeflow.strategies`, :mod:`codeflow.flow`) directly.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from codeflow import __version__
from codeflow.commands.flow import authorize_command, callback_command, providers_command
from codeflow.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="codeflow",
    help="Run OAuth2 authorization code flows against configured providers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("providers")(providers_command)
app.command("authorize")(authorize_command)
app.command("callback")(callback_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"codeflow {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Provider file (JSON or YAML)."
    ),
    timeout: float = typer.Option(
        30.0, "--timeout", help="Provider request timeout in seconds."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~codeflow.output.OutputManager`, enables
    debug logging for ``--verbose``, and stores the shared options in
    ``ctx.obj``.
    """
    from codeflow.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["timeout"] = timeout


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``codeflow`` console script.

    :class:`~codeflow.exceptions.CodeflowError` instances that escape a
    command exit with the error's ``exit_code``; anything else exits with
    :data:`~codeflow.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from codeflow.exceptions import CodeflowError
        from codeflow.output import error

        if isinstance(exc, CodeflowError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
