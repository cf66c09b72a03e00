from __future__ import annotations

import enum
from typing import Any
from typing import Dict
from typing import Mapping

from formtree import exceptions
from formtree.components import Component
from formtree.utils.imports import importstr
from formtree.utils.schema import NA
from formtree.utils.schema import resolve_schema


def load_node(
    node: Component,
    data: Mapping[str, Any],
    *,
    Base: type = Component,
) -> Component:
    """Set node attributes from `data`, following node's `schema`.

    Supported schema options:

    - `attr` - attribute name, if it differs from the parameter name.
    - `default` - value used when parameter is not given.
    - `required` - parameter must be given.
    - `choices` - enum class, string values are converted to enum items.
    - `type: callable` - `'dotted.path:name'` strings are imported.

    """
    node_schema = resolve_schema(node, Base)
    for name in data:
        if name not in node_schema:
            raise exceptions.UnknownParameter(node, param=name)
    for name, schema in node_schema.items():
        value = data.get(name, NA)
        if schema.get('required', False) and (value is NA or value is None):
            raise exceptions.MissingRequiredParameter(node, param=name)
        if value is NA:
            value = schema.get('default')
        elif schema.get('choices'):
            value = _load_choice(node, name, schema['choices'], value)
        elif schema.get('type') == 'callable' and isinstance(value, str):
            value = _load_callable(value)
        attr = schema.get('attr', name)
        setattr(node, attr, value)
    return node


def _load_choice(
    node: Component,
    param: str,
    choices: type,
    value: Any,
) -> enum.Enum:
    if isinstance(value, choices):
        return value
    for item in choices:
        if item.value == value:
            return item
    raise exceptions.InvalidParameterValue(
        node,
        param=param,
        given=value,
        choices=', '.join(str(item.value) for item in choices),
    )


def _load_callable(value: str) -> Any:
    # A few callables are referred by name, everything else must be a
    # python path.
    if ':' in value:
        return importstr(value)
    return value


def get_params(node: Component, *, Base: type = Component) -> Dict[str, Any]:
    """Return given node parameters, reverse of `load_node`."""
    params = {}
    for name, schema in resolve_schema(node, Base).items():
        attr = schema.get('attr', name)
        value = getattr(node, attr, NA)
        if value is not NA and value != schema.get('default'):
            params[name] = value
    return params
