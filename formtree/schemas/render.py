from typing import Iterator

from formtree.components import Kind
from formtree.components import Schema
from formtree.nodes import get_params


def render_schema(schema: Schema, indent: str = '') -> Iterator[str]:
    """Render schema properties as an indented tree.

        album
          title
          songs: collection[album.songs]
            title

    """
    if not indent:
        yield schema.name or '<anonymous>'
        indent = '  '
    for prop in schema:
        line = f'{indent}{prop.name}'
        if prop.kind is not Kind.scalar:
            line += f': {prop.kind.value}[{prop.dtype.child.name}]'
        params = get_params(prop)
        if params.get('as') == prop.name:
            del params['as']
        if params:
            line += '  (' + ', '.join(
                f'{k}={_render_value(v)}' for k, v in params.items()
            ) + ')'
        yield line
        if prop.kind is not Kind.scalar:
            yield from render_schema(prop.dtype.child, indent + '  ')


def _render_value(value) -> str:
    if hasattr(value, 'value'):
        return str(value.value)
    if callable(value):
        return getattr(value, '__qualname__', repr(value))
    return str(value)
