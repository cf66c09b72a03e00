from __future__ import annotations

import logging
from typing import Any
from typing import List
from typing import Optional
from typing import overload

from formtree import commands
from formtree import exceptions
from formtree.components import Context
from formtree.components import Form
from formtree.components import Kind
from formtree.components import Property
from formtree.components import Schema
from formtree.components import Surplus
from formtree.components import Visibility
from formtree.forms.build import build_child
from formtree.forms.components import CreationContext
from formtree.types.datatype import Collection
from formtree.types.datatype import Nested
from formtree.types.datatype import Scalar
from formtree.validation.rules import is_blank

log = logging.getLogger(__name__)


@overload
@commands.populate.register(Context, Form, dict)
def populate(
    context: Context,
    form: Form,
    data: dict,
    *,
    surplus: Optional[Surplus] = None,
) -> Form:
    if surplus is None:
        surplus = context.get('config').surplus
    else:
        surplus = Surplus(surplus)

    # Nothing is applied, until the whole input is known to be well formed.
    commands.check_data(context, form.schema, data)
    _check_tree(context, form, data, surplus)

    _populate_properties(context, form, data, surplus)
    return form


@overload
@commands.populate.register(Context, Form, object)
def populate(context: Context, form: Form, data: object, **kwargs) -> Form:
    raise exceptions.InvalidInput(form, given=type(data).__name__)


@overload
@commands.populate.register(Context, Form, Scalar, object)
def populate(
    context: Context,
    form: Form,
    dtype: Scalar,
    value: Any,
    *,
    surplus: Surplus,
) -> None:
    prop = dtype.prop
    if prop.setter is not None:
        value = prop.setter(value)
    form.values[prop.name] = value


@overload
@commands.populate.register(Context, Form, Nested, dict)
def populate(
    context: Context,
    form: Form,
    dtype: Nested,
    fragment: dict,
    *,
    surplus: Surplus,
) -> None:
    prop = dtype.prop
    if _skip(context, form, prop, fragment):
        log.debug("Skipping %r of %r form.", prop.name, form.path)
        return
    child = form.values[prop.name]
    if child is None:
        child = _create_child(context, form, prop, fragment)
        form.values[prop.name] = child
    _populate_properties(context, child, fragment, surplus)


@commands.populate.register(Context, Form, Collection, (list, tuple))
def populate(
    context: Context,
    form: Form,
    dtype: Collection,
    fragments: list,
    *,
    surplus: Surplus,
) -> None:
    prop = dtype.prop

    existing: List[Form] = form.values[prop.name]
    if surplus is Surplus.error and len(existing) > len(fragments):
        raise exceptions.SurplusItems(
            prop,
            given=len(fragments),
            existing=len(existing),
        )

    # Input items are aligned with existing items by position.
    items = []
    for i, fragment in enumerate(fragments):
        child = existing[i] if i < len(existing) else None
        if _skip(context, form, prop, fragment, index=i):
            log.debug("Skipping %r item %d of %r form.", prop.name, i, form.path)
            if child is not None:
                items.append(child)
            continue
        if child is None:
            child = _create_child(context, form, prop, fragment, index=len(items))
        _populate_properties(context, child, fragment, surplus)
        items.append(child)

    if surplus is Surplus.keep:
        items.extend(existing[len(fragments):])
    elif len(existing) > len(fragments):
        log.debug(
            "Dropping %d items of %r collection.",
            len(existing) - len(fragments),
            prop.name,
        )

    for i, child in enumerate(items):
        child.index = i
    # A new list, so that a list read from the model is never changed.
    form.values[prop.name] = items


def _populate_properties(
    context: Context,
    form: Form,
    data: dict,
    surplus: Surplus,
) -> None:
    for name in data:
        if name not in form.schema.properties:
            log.debug("Ignoring unknown %r input key of %r form.", name, form.name)
    for prop in form.schema:
        if prop.visibility is Visibility.virtual:
            continue
        if prop.name in data:
            commands.populate(context, form, prop.dtype, data[prop.name], surplus=surplus)


def _skip(
    context: Context,
    form: Form,
    prop: Property,
    fragment: dict,
    *,
    index: int = None,
) -> bool:
    if prop.skip_if is None:
        return False
    if prop.skip_if == 'all_blank':
        return _all_blank(fragment)
    ctx = CreationContext(context, form, prop, index=index, fragment=fragment)
    return bool(prop.skip_if(fragment, ctx))


def _all_blank(value: Any) -> bool:
    if isinstance(value, dict):
        return all(_all_blank(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return all(_all_blank(v) for v in value)
    return is_blank(value)


def _create_child(
    context: Context,
    form: Form,
    prop: Property,
    fragment: dict,
    *,
    index: int = None,
) -> Form:
    policy = prop.populate_if_empty
    if policy is None:
        raise exceptions.MissingNestedModel(form, property=prop.name)
    ctx = CreationContext(context, form, prop, index=index, fragment=fragment)
    model = commands.create_model(context, policy, fragment, ctx)
    log.debug("Created %s model for %r property.", type(model).__name__, prop.name)
    return build_child(context, form, prop, model, index=index)


def _check_tree(context: Context, form: Form, data: dict, surplus: Surplus) -> None:
    # Existing forms are walked along the input, looking for surplus items and
    # for missing children that can't be created. Forms created during
    # population don't exist yet, so their children are not checked here.
    for prop in form.schema:
        if prop.name not in data or prop.visibility is Visibility.virtual:
            continue
        value = form.values[prop.name]
        fragment = data[prop.name]
        if prop.kind is Kind.nested:
            if _skip(context, form, prop, fragment):
                continue
            if value is not None:
                _check_tree(context, value, fragment, surplus)
            elif prop.populate_if_empty is None:
                raise exceptions.MissingNestedModel(form, property=prop.name)
        elif prop.kind is Kind.collection:
            if surplus is Surplus.error and len(value) > len(fragment):
                raise exceptions.SurplusItems(
                    prop,
                    given=len(fragment),
                    existing=len(value),
                )
            for i, item in enumerate(fragment):
                if _skip(context, form, prop, item, index=i):
                    continue
                if i < len(value):
                    _check_tree(context, value[i], item, surplus)
                elif prop.populate_if_empty is None:
                    raise exceptions.MissingNestedModel(form, property=prop.name)


@commands.create_model.register(Context, type, object, CreationContext)
def create_model(
    context: Context,
    policy: type,
    fragment: object,
    ctx: CreationContext,
) -> Any:
    return policy()


@commands.create_model.register(Context, object, object, CreationContext)
def create_model(
    context: Context,
    policy: object,
    fragment: object,
    ctx: CreationContext,
) -> Any:
    return policy(fragment, ctx)


@overload
@commands.check_data.register(Context, Schema, dict)
def check_data(context: Context, schema: Schema, data: dict) -> None:
    for prop in schema:
        if prop.name in data and prop.visibility is not Visibility.virtual:
            commands.check_data(context, prop.dtype, data[prop.name])


@overload
@commands.check_data.register(Context, Schema, object)
def check_data(context: Context, schema: Schema, data: object) -> None:
    raise exceptions.InvalidInput(schema, given=type(data).__name__)


@overload
@commands.check_data.register(Context, Scalar, object)
def check_data(context: Context, dtype: Scalar, value: object) -> None:
    pass


@overload
@commands.check_data.register(Context, Nested, dict)
def check_data(context: Context, dtype: Nested, value: dict) -> None:
    commands.check_data(context, dtype.child, value)


@overload
@commands.check_data.register(Context, Nested, object)
def check_data(context: Context, dtype: Nested, value: object) -> None:
    raise exceptions.InvalidNestedValue(dtype.prop, given=type(value).__name__)


@overload
@commands.check_data.register(Context, Collection, (list, tuple))
def check_data(context: Context, dtype: Collection, value: list) -> None:
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise exceptions.InvalidCollectionItem(
                dtype.prop,
                index=i,
                given=type(item).__name__,
            )
        commands.check_data(context, dtype.child, item)


@commands.check_data.register(Context, Collection, object)
def check_data(context: Context, dtype: Collection, value: object) -> None:
    raise exceptions.InvalidCollectionValue(dtype.prop, given=type(value).__name__)
