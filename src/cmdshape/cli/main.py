"""CLI entry points for cmdshape.

Implements click-based CLI for redacting text and inspecting decorated commands.
"""

import sys

import click
from dotenv import load_dotenv
from rich.console import Console

from cmdshape import __version__
from cmdshape.core.config import ShapeConfig, load_config
from cmdshape.core.decoration import expand_encoded
from cmdshape.core.exceptions import (
    CmdShapeException,
    ConfigurationError,
    format_error_for_user,
)
from cmdshape.core.exec_options import (
    ExecOptions,
    build,
    powershell,
    powershell_compressed,
    redact_string,
)
from cmdshape.core.exec_options import redact as redact_pattern
from cmdshape.core.logger import get_logger
from cmdshape.core.streams import RedactingWriter

# Load .env file from current directory or parent directories
load_dotenv()

console = Console(stderr=True)


def _redacting_options(
    config: ShapeConfig, patterns: tuple[str, ...], literals: tuple[str, ...]
) -> ExecOptions:
    opts = [redact_pattern(pattern, mask=config.redact_mask) for pattern in patterns]
    if literals:
        opts.append(redact_string(*literals, mask=config.redact_mask))
    return build(*config.exec_options(), *opts)


@click.group()
@click.version_option(version=__version__, prog_name="cmdshape")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """cmdshape - redact and decorate command text."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {format_error_for_user(e)}")
        sys.exit(1)

    config.apply()
    get_logger().set_level(config.log_level)
    if config.disable_redact:
        get_logger().warn("redaction is disabled for this process")
    ctx.obj = config


@cli.command()
@click.argument("source", type=click.File("rb"), default="-")
@click.option("--pattern", "-p", "patterns", multiple=True, help="Regular expression to mask")
@click.option("--string", "-s", "literals", multiple=True, help="Literal string to mask")
@click.pass_obj
def redact(
    config: ShapeConfig, source, patterns: tuple[str, ...], literals: tuple[str, ...]
) -> None:
    """Copy SOURCE (default stdin) to stdout with sensitive text masked.

    Text is redacted line by line, so a pattern never sees past a newline.
    """
    try:
        options = _redacting_options(config, patterns, literals)
    except CmdShapeException as e:
        console.print(f"[bold red]Error:[/bold red] {format_error_for_user(e)}")
        sys.exit(1)

    out = RedactingWriter(click.get_binary_stream("stdout"), options.redact)
    for line in source:
        out.write(line)


@cli.command()
@click.argument("command")
@click.option(
    "--mode",
    type=click.Choice(["powershell", "compressed"]),
    default="powershell",
    show_default=True,
    help="Decoration to apply",
)
@click.option("--show-log", is_flag=True, help="Also log the command the way execution would")
@click.option("--string", "-s", "literals", multiple=True, help="Literal string to mask in the log")
@click.pass_obj
def decorate(
    config: ShapeConfig, command: str, mode: str, show_log: bool, literals: tuple[str, ...]
) -> None:
    """Print COMMAND as it would be executed after decoration."""
    options = _redacting_options(config, (), literals)
    options.apply(powershell_compressed() if mode == "compressed" else powershell())

    decorated = options.command(command)
    if show_log:
        get_logger().set_level("DEBUG")
        options.log_cmd(decorated)
    click.echo(decorated)


@cli.command()
@click.argument("command")
@click.option("--pattern", "-p", "patterns", multiple=True, help="Regular expression to mask")
@click.option("--string", "-s", "literals", multiple=True, help="Literal string to mask")
@click.pass_obj
def expand(
    config: ShapeConfig, command: str, patterns: tuple[str, ...], literals: tuple[str, ...]
) -> None:
    """Print a legible, redacted form of an encoded PowerShell COMMAND."""
    try:
        options = _redacting_options(config, patterns, literals)
    except CmdShapeException as e:
        console.print(f"[bold red]Error:[/bold red] {format_error_for_user(e)}")
        sys.exit(1)

    click.echo(options.redact(expand_encoded(command)))


if __name__ == "__main__":
    cli()
