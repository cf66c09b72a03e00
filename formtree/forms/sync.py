from __future__ import annotations

import logging
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import overload

from formtree import commands
from formtree import exceptions
from formtree.bindings.components import Binding
from formtree.components import Context
from formtree.components import Form
from formtree.components import Kind
from formtree.types.datatype import Collection
from formtree.types.datatype import Nested
from formtree.types.datatype import Scalar

log = logging.getLogger(__name__)

SaveCallback = Callable[[Dict[str, Any]], Any]


@overload
@commands.sync.register(Context, Form)
def sync(context: Context, form: Form) -> None:
    for prop in form.schema:
        if not prop.writable:
            continue
        commands.sync(context, form, prop.dtype, form.values[prop.name])


@overload
@commands.sync.register(Context, Form, Scalar, object)
def sync(context: Context, form: Form, dtype: Scalar, value: Any) -> None:
    prop = dtype.prop
    form.get_binding(prop).set(prop.attr, value)


@overload
@commands.sync.register(Context, Form, Nested, Form)
def sync(context: Context, form: Form, dtype: Nested, child: Form) -> None:
    commands.sync(context, child)
    prop = dtype.prop
    form.get_binding(prop).set(prop.attr, child.model)


@overload
@commands.sync.register(Context, Form, Nested, type(None))
def sync(context: Context, form: Form, dtype: Nested, child: None) -> None:
    pass


@commands.sync.register(Context, Form, Collection, list)
def sync(context: Context, form: Form, dtype: Collection, items: List[Form]) -> None:
    for child in items:
        commands.sync(context, child)
    prop = dtype.prop
    form.get_binding(prop).set(prop.attr, [child.model for child in items])


@overload
@commands.save.register(Context, Form)
def save(context: Context, form: Form) -> None:
    commands.sync(context, form)
    commands.persist(context, form)


@commands.save.register(Context, Form, object)
def save(context: Context, form: Form, callback: Optional[SaveCallback]) -> Any:
    if callback is None:
        return commands.save(context, form)
    # Models are synced, but persisting them is left to the callback.
    commands.sync(context, form)
    return callback(commands.to_nested_dict(context, form))


@commands.persist.register(Context, Form)
def persist(context: Context, form: Form) -> None:
    seen = set()
    for binding in _iter_bindings(form):
        if id(binding.model) in seen:
            continue
        seen.add(id(binding.model))
        log.debug("Saving %s.", binding.name)
        if not binding.persist():
            raise exceptions.PersistenceFailure(binding)


def _iter_bindings(form: Form) -> Iterator[Binding]:
    # Children first, in declaration and index order, then own bindings.
    for prop in form.schema:
        if not prop.writable or not prop.save:
            continue
        value = form.values[prop.name]
        if prop.kind is Kind.nested and value is not None:
            yield from _iter_bindings(value)
        elif prop.kind is Kind.collection:
            for child in value:
                yield from _iter_bindings(child)
    yield from form.bindings.values()


@overload
@commands.to_nested_dict.register(Context, Form)
def to_nested_dict(context: Context, form: Form) -> Dict[str, Any]:
    return {
        prop.name: commands.to_nested_dict(context, prop.dtype, form.values[prop.name])
        for prop in form.schema
    }


@overload
@commands.to_nested_dict.register(Context, Scalar, object)
def to_nested_dict(context: Context, dtype: Scalar, value: Any) -> Any:
    return value


@overload
@commands.to_nested_dict.register(Context, Nested, Form)
def to_nested_dict(context: Context, dtype: Nested, value: Form) -> Dict[str, Any]:
    return commands.to_nested_dict(context, value)


@overload
@commands.to_nested_dict.register(Context, Nested, type(None))
def to_nested_dict(context: Context, dtype: Nested, value: None) -> None:
    return None


@commands.to_nested_dict.register(Context, Collection, list)
def to_nested_dict(context: Context, dtype: Collection, value: List[Form]) -> List[dict]:
    return [commands.to_nested_dict(context, child) for child in value]
