from __future__ import annotations

import logging
import pathlib
from typing import List
from typing import Optional

from typer import Context as TyperContext
from typer import Option
from typer import Typer
from typer import echo

import formtree
from formtree.cli import config
from formtree.cli import schema
from formtree.core.context import create_context
from formtree.logging_config import setup_logging

log = logging.getLogger(__name__)

app = Typer()

app.command('config', short_help="Show current configuration values")(config.config)
app.command('check', short_help="Check schema files")(schema.check)
app.command('show', short_help="Show schemas as a property tree")(schema.show)


@app.callback(invoke_without_command=True)
def callback(
    ctx: TyperContext,
    option: Optional[List[str]] = Option(None, '-o', '--option', help=(
        "Set configuration option, example: `-o option.name=value`."
    )),
    env_file: Optional[pathlib.Path] = Option(None, '--env-file', help=(
        "Load configuration from a given .env file."
    )),
    version: bool = Option(False, help="Show version number."),
    log_file: Optional[pathlib.Path] = Option(None, '--log-file', help=(
        "Also write log messages to a specified file."
    )),
    log_level: str = Option('warning', '--log-level', help=(
        "Log level. Possible levels: critical, error, warning, info, debug. "
        "Default: warning."
    )),
):
    setup_logging(log_level, log_file)

    log.debug("log file set to: %s", log_file or 'STDERR')
    log.debug("log level set to: %s", log_level)

    ctx.obj = ctx.obj or create_context('cli', args=option, envfile=env_file)
    if version:
        echo(formtree.__version__)


def main():
    app()
