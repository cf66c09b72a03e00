from formtree import commands
from formtree.bindings.components import Binding
from formtree.bindings.components import MappingBinding
from formtree.bindings.components import ObjectBinding
from formtree.components import Context


@commands.bind.register(Context, object)
def bind(context: Context, model: object) -> Binding:
    return ObjectBinding(model)


@commands.bind.register(Context, dict)
def bind(context: Context, model: dict) -> Binding:
    return MappingBinding(model)


@commands.bind.register(Context, Binding)
def bind(context: Context, binding: Binding) -> Binding:
    return binding
