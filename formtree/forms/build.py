from __future__ import annotations

import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from formtree import commands
from formtree.bindings.components import Binding
from formtree.components import Context
from formtree.components import Form
from formtree.components import Property
from formtree.components import Schema
from formtree.components import Visibility
from formtree.types.datatype import Collection
from formtree.types.datatype import Nested
from formtree.types.datatype import Scalar

log = logging.getLogger(__name__)


def create_form(
    context: Context,
    schema: Schema,
    model: Any = None,
    **roles: Any,
) -> Form:
    """Build a form tree from models.

    `model` is bound to the `self` role, other models are bound to roles
    given as keyword arguments:

        form = create_form(context, album, model=record, artist=artist)

    """
    bindings: Dict[str, Binding] = {}
    if model is not None:
        bindings['self'] = commands.bind(context, model)
    for role, owner in roles.items():
        bindings[role] = commands.bind(context, owner)
    log.debug("Creating %r form with roles: %s.", schema.name, ", ".join(bindings))
    return build_form(context, schema, bindings)


def build_form(
    context: Context,
    schema: Schema,
    bindings: Dict[str, Binding],
    *,
    parent: Form = None,
    prop: Property = None,
    index: int = None,
) -> Form:
    form = Form(schema, bindings, parent=parent, prop=prop, index=index)
    for p in schema:
        form.values[p.name] = commands.read(context, form, p.dtype)
    form.mark_clean()
    return form


def build_child(
    context: Context,
    parent: Form,
    prop: Property,
    model: Any,
    *,
    index: int = None,
) -> Form:
    bindings = {'self': commands.bind(context, model)}
    return build_form(
        context,
        prop.dtype.child,
        bindings,
        parent=parent,
        prop=prop,
        index=index,
    )


@commands.read.register(Context, Form, Scalar)
def read(context: Context, form: Form, dtype: Scalar) -> Any:
    prop = dtype.prop
    if prop.visibility is Visibility.empty:
        return prop.default
    value = form.get_binding(prop).get(prop.attr)
    return prop.default if value is None else value


@commands.read.register(Context, Form, Nested)
def read(context: Context, form: Form, dtype: Nested) -> Optional[Form]:
    prop = dtype.prop
    if prop.visibility is Visibility.empty:
        return None
    model = form.get_binding(prop).get(prop.attr)
    if model is None:
        return None
    return build_child(context, form, prop, model)


@commands.read.register(Context, Form, Collection)
def read(context: Context, form: Form, dtype: Collection) -> List[Form]:
    prop = dtype.prop
    if prop.visibility is Visibility.empty:
        return []
    models = form.get_binding(prop).get(prop.attr) or []
    return [
        build_child(context, form, prop, model, index=i)
        for i, model in enumerate(models)
    ]
