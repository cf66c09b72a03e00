from formtree import commands
from formtree import exceptions
from formtree.components import Context
from formtree.components import Manifest
from formtree.components import Schema


@commands.check.register(Context, Manifest)
def check(context: Context, manifest: Manifest) -> None:
    errors = []
    for schema in manifest.schemas.values():
        try:
            commands.check(context, schema)
        except exceptions.BaseError as e:
            errors.append(e)
    if errors:
        raise exceptions.MultipleErrors(errors)


@commands.check.register(Context, Schema)
def check(context: Context, schema: Schema) -> None:
    rules = schema.rules
    if rules is not None and not (hasattr(rules, 'check') or callable(rules)):
        raise exceptions.InvalidParameterValue(
            schema,
            param='rules',
            given=type(rules).__name__,
            choices='object with check(values) method, callable',
        )
    for prop in schema:
        commands.check(context, prop.dtype)
