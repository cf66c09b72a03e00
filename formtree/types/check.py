from formtree import commands
from formtree import exceptions
from formtree.components import Context
from formtree.components import Schema
from formtree.types.datatype import Composite
from formtree.types.datatype import Scalar


@commands.check.register(Context, Scalar)
def check(context: Context, dtype: Scalar) -> None:
    pass


@commands.check.register(Context, Composite)
def check(context: Context, dtype: Composite) -> None:
    if not isinstance(dtype.child, Schema):
        raise exceptions.MissingChildSchema(
            dtype.prop,
            kind=dtype.kind.value,
        )
    commands.check(context, dtype.child)
