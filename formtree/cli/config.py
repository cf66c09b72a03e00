from typing import List
from typing import Optional

from typer import Argument
from typer import Context as TyperContext

from formtree.core.config import KeyFormat


def config(
    ctx: TyperContext,
    name: Optional[List[str]] = Argument(None),
    fmt: KeyFormat = KeyFormat.cfg,
):
    """Show current configuration values"""
    context = ctx.obj
    rc = context.get('rc')
    rc.dump(*(name or []), fmt=fmt)
