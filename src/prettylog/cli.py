"""
prettylog CLI using Click.

Renders log lines from the shell, e.g. in deploy scripts:
    $ prettylog emit "disk full" --at error path=/var mount=data
    $ prettylog emit "deployed" --json version=1.4.2 | jq .
"""

import sys

import click

from .config import load_config
from .levels import LEVELS
from .setup import new_logger

_VERSION = "0.3.0"


def _parse_attrs(pairs: tuple[str, ...]) -> list[tuple[str, str]]:
    """Convierte argumentos KEY=VALUE en pares (key, value)."""
    attrs = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="ATTRS")
        attrs.append((key, value))
    return attrs


def _common_options(func):
    func = click.option(
        "--color/--no-color",
        default=None,
        help="Force ANSI colors on or off (default: only on a terminal)",
    )(func)
    func = click.option(
        "--json/--no-json",
        "json_output",
        default=None,
        help="One JSON object per line (env: PRETTYLOG_JSON)",
    )(func)
    func = click.option(
        "--add-source/--no-add-source",
        default=None,
        help="Show the call site of each record (env: PRETTYLOG_ADD_SOURCE)",
    )(func)
    func = click.option(
        "--level",
        "-l",
        default=None,
        help="Minimum level to emit; unknown names mean info (env: PRETTYLOG_LEVEL)",
    )(func)
    return func


@click.group()
@click.version_option(version=_VERSION, prog_name="prettylog")
def main() -> None:
    """prettylog - leveled, colorized or JSON log lines."""
    pass


@main.command()
@click.argument("message")
@click.argument("attrs", nargs=-1)
@click.option(
    "--at",
    "at_level",
    type=click.Choice(list(LEVELS)),
    default="info",
    show_default=True,
    help="Level of the emitted record; fatal exits with status 1",
)
@_common_options
def emit(message: str, attrs: tuple[str, ...], at_level: str, **kwargs) -> None:
    """Emit MESSAGE as a single log record with optional KEY=VALUE attributes."""
    color = kwargs.pop("color")
    config = load_config(cli_args=kwargs)
    logger = new_logger(config, stream=sys.stdout, colors=color)

    log_method = getattr(logger, at_level)
    log_method(message, *_parse_attrs(attrs))


@main.command()
@click.option("--fatal", "with_fatal", is_flag=True, help="Finish with a fatal record (exit status 1)")
@_common_options
def demo(with_fatal: bool, **kwargs) -> None:
    """Emit one sample record per level."""
    color = kwargs.pop("color")
    config = load_config(cli_args=kwargs)
    logger = new_logger(config, stream=sys.stdout, colors=color)

    logger.trace("Trace example", message="trace message")
    logger.debug("Debug example", message="debug message")
    logger.info("Info example", message="info message")
    logger.warn("Warn example", message="warn message")
    logger.error("Error example", message="error message")
    if with_fatal:
        logger.fatal("Fatal example", message="fatal message")


if __name__ == "__main__":
    main()
