import pathlib
from typing import List

from typer import Argument
from typer import Context as TyperContext
from typer import Exit
from typer import Option
from typer import echo

from formtree import exceptions
from formtree.schemas.manifest import read_manifest
from formtree.schemas.render import render_schema


def check(
    ctx: TyperContext,
    paths: List[pathlib.Path] = Argument(..., help="Schema YAML files"),
):
    """Load, link and check schema files"""
    context = ctx.obj.fork('check')
    try:
        read_manifest(context, paths)
    except (exceptions.BaseError, exceptions.MultipleErrors) as e:
        echo(str(e), err=True)
        raise Exit(code=1)
    echo("OK")


def show(
    ctx: TyperContext,
    paths: List[pathlib.Path] = Argument(..., help="Schema YAML files"),
    name: List[str] = Option(None, "--name", "-n", help="Show only given schemas"),
):
    """Show schemas as a property tree"""
    context = ctx.obj.fork('show')
    manifest = read_manifest(context, paths)
    for schema in manifest.schemas.values():
        if name and schema.name not in name:
            continue
        for line in render_schema(schema):
            echo(line)
