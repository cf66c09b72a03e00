from typing import Dict
from typing import overload

from formtree import commands
from formtree.bindings.components import Binding
from formtree.components import Form
from formtree.components import Manifest
from formtree.components import Property
from formtree.components import Schema
from formtree.types.datatype import DataType


@overload
@commands.get_error_context.register(object)
def get_error_context(this: object, *, prefix='this') -> Dict[str, str]:
    return {}


@overload
@commands.get_error_context.register(Manifest)
def get_error_context(manifest: Manifest, *, prefix='this') -> Dict[str, str]:
    return {
        'manifest': f'{prefix}.name',
    }


@overload
@commands.get_error_context.register(Schema)
def get_error_context(schema: Schema, *, prefix='this') -> Dict[str, str]:
    return {
        'schema': f'{prefix}.name',
    }


@overload
@commands.get_error_context.register(Property)
def get_error_context(prop: Property, *, prefix='this') -> Dict[str, str]:
    context = commands.get_error_context(prop.parent, prefix=f'{prefix}.parent')
    context['property'] = f'{prefix}.name'
    return context


@overload
@commands.get_error_context.register(DataType)
def get_error_context(dtype: DataType, *, prefix='this') -> Dict[str, str]:
    return commands.get_error_context(dtype.prop, prefix=f'{prefix}.prop')


@overload
@commands.get_error_context.register(Form)
def get_error_context(form: Form, *, prefix='this') -> Dict[str, str]:
    return {
        'schema': f'{prefix}.schema.name',
        'form': f'{prefix}.path',
    }


@commands.get_error_context.register(Binding)
def get_error_context(binding: Binding, *, prefix='this') -> Dict[str, str]:
    return {
        'model': f'{prefix}.name',
    }
