"""CLI entrypoints for command-exec."""

from __future__ import annotations

import json
from pathlib import Path
from typing import cast

import typer

from command_exec.app import AppConfigError, build_config, create_command, initialize_config
from command_exec.errors import (
    CommandExecutionFailed,
    CommandExecutionThrown,
    CommandResolutionError,
)
from command_exec.result import ProcessResult, result_to_dict
from command_exec.util.logging import configure_logging

EXIT_FAILED = 1
EXIT_USAGE = 2

app = typer.Typer(help="Run a command and classify its outcome.")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING, SILENT).",
    ),
) -> None:
    """Configure CLI-level options."""

    configure_logging(log_level)


@app.command()
def init(workspace: Path = typer.Argument(Path("."))) -> None:
    """Write a default configuration file to a workspace."""

    try:
        config_path = initialize_config(workspace)
    except AppConfigError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc
    typer.echo(f"Created configuration at {config_path}")


@app.command("run")
def run_command(
    name: str = typer.Argument(..., help="Command name or path to the executable."),
    options: str = typer.Option(None, "--options", "-o", help="Options for the command."),
    parameter: str = typer.Option(None, "--parameter", "-p", help="Parameter for the command."),
    workdir: Path = typer.Option(None, "--workdir", "-w", help="Working directory."),
    log_file: Path = typer.Option(None, "--log-file", help="Log file written by the command."),
    detect_on: list[str] = typer.Option(
        [],
        "--detect-on",
        help="Error detection source: return_code|stdout|stderr|log_file. Repeatable.",
    ),
    allow_code: list[int] = typer.Option([], "--allow-code", help="Allowed return code."),
    forbid_stdout: list[str] = typer.Option([], "--forbid-stdout", help="Forbidden stdout word."),
    forbid_stderr: list[str] = typer.Option([], "--forbid-stderr", help="Forbidden stderr word."),
    forbid_log: list[str] = typer.Option([], "--forbid-log", help="Forbidden log file word."),
    on_error: str = typer.Option(
        None,
        "--on-error",
        help="On-error policy: nothing|raise_error|throw_error",
    ),
    run_via: str = typer.Option(None, "--run-via", help="Runner: open3|system"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Configuration file."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Run a command and report whether it succeeded."""

    try:
        config = build_config(
            config_path,
            options=options,
            parameter=parameter,
            working_directory=workdir,
            log_file=log_file,
            detect_on=detect_on,
            allowed_return_codes=allow_code,
            forbidden_words_in_stdout=forbid_stdout,
            forbidden_words_in_stderr=forbid_stderr,
            forbidden_words_in_log_file=forbid_log,
            on_error_do=on_error,
            run_via=run_via,
        )
        command = create_command(name, config)
    except (AppConfigError, CommandResolutionError) as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc

    try:
        command.run()
    except (CommandExecutionFailed, CommandExecutionThrown) as exc:
        if not as_json:
            typer.echo(f"Error: {exc}")
    except OSError as exc:
        typer.echo(f"Error: unable to start {command.to_string()}: {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc
    result = cast(ProcessResult, command.result)

    _report(command.to_string(), result, as_json=as_json)
    if not result.succeeded:
        raise typer.Exit(code=EXIT_FAILED)


def _report(command_line: str, result: ProcessResult, *, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps({"command": command_line, **result_to_dict(result)}, indent=2))
        return
    if result.succeeded:
        typer.echo(f"{command_line}: success (return code {result.return_code})")
        return
    typer.echo(
        f"{command_line}: failed on {result.reason_for_failure.value} "
        f"(return code {result.return_code})"
    )
    for line in result.stderr:
        typer.echo(f"stderr: {line}")
