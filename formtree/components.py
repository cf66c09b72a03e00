from __future__ import annotations

import enum
import pathlib
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional
from typing import Set
from typing import TYPE_CHECKING
from typing import Union

from formtree import exceptions
from formtree.validation.report import ErrorReport

if TYPE_CHECKING:
    from formtree.bindings.components import Binding
    from formtree.core.config import RawConfig
    from formtree.schemas.builder import SchemaBuilder
    from formtree.types.datatype import DataType


class Context:
    """Stacked state container passed as the first argument to all commands.

    Each `with context:` block pushes a new state, taking a shallow copy of
    the previous one. Values set inside the block are gone after it exits.
    """

    _name: str
    _parent: Optional[Context]

    def __init__(self, name: str, parent: Context = None):
        self._name = name
        self._parent = parent
        self._local_names: List[Set[str]] = [set()]
        if parent:
            self._factory = [parent._factory[-1].copy()]
            self._names = [parent._names[-1].copy()]
            # Bound factories are evaluated again in the fork.
            self._context = [{
                k: v for k, v in parent._context[-1].items()
                if k not in parent._factory[-1]
            }]
        else:
            self._factory = [{}]
            self._names = [set()]
            self._context = [{}]

    def __repr__(self):
        name = []
        parent = self
        while parent is not None:
            name.append(f'{parent._name}:{len(parent._context) - 1}')
            parent = parent._parent
        name = ' < '.join(reversed(name))
        return f'<{type(self).__module__}.{type(self).__name__}({name})>'

    def __enter__(self):
        self._context.append(self._context[-1].copy())
        self._factory.append(self._factory[-1].copy())
        self._names.append(self._names[-1].copy())
        self._local_names.append(set())
        return self

    def __exit__(self, *exc):
        self._context.pop()
        self._factory.pop()
        self._names.pop()
        self._local_names.pop()

    def fork(self, name: str) -> Context:
        """Create a new context based on the current state of this one."""
        return type(self)(name, self)

    def bind(self, name: str, factory: Callable, *args, **kwargs):
        """Bind a lazy factory, called once on first `get`."""
        self._set_local_name(name)
        self._factory[-1][name] = (factory, args, kwargs)

    def set(self, name: str, value: Any):
        self._set_local_name(name)
        self._context[-1][name] = value
        return value

    def get(self, name: str) -> Any:
        if name in self._context[-1]:
            return self._context[-1][name]
        if name in self._factory[-1]:
            factory, args, kwargs = self._factory[-1][name]
            self._context[-1][name] = factory(*args, **kwargs)
            return self._context[-1][name]
        raise Exception(f"Unknown context variable {name!r}.")

    def has(self, name: str, local: bool = False) -> bool:
        if local:
            return name in self._local_names[-1]
        return name in self._names[-1]

    def _set_local_name(self, name: str):
        # Inherited names can be redefined, local ones can't.
        if name in self._local_names[-1]:
            raise Exception(f"Context variable {name!r} has been already set.")
        self._local_names[-1].add(name)
        self._names[-1].add(name)


class Component:
    schema = {}


class Node(Component):
    schema = {}

    type: str = None
    name: str = None
    parent: Optional[Node] = None

    def __repr__(self) -> str:
        return f'<{type(self).__module__}.{type(self).__name__}(name={self.name!r})>'


class Immutable:
    """Refuses attribute changes after `freeze()` was called."""

    _frozen: bool = False

    def freeze(self) -> None:
        self._frozen = True

    def __setattr__(self, name, value):
        if self._frozen:
            raise exceptions.FrozenError(self, attr=name)
        super().__setattr__(name, value)


class Kind(enum.Enum):
    scalar = 'scalar'
    nested = 'nested'
    collection = 'collection'


class Visibility(enum.Enum):
    # Read from the model and written back on sync.
    normal = 'normal'

    # Read from the model, never populated from input, never written back.
    virtual = 'virtual'

    # Never read from the model and never written back, lives only in the
    # form, so it can be populated and validated.
    empty = 'empty'


class Surplus(enum.Enum):
    """What to do with existing collection items not present in input."""

    keep = 'keep'
    drop = 'drop'
    error = 'error'


class Property(Immutable, Node):
    type = 'property'

    attr: str
    on: str
    visibility: Visibility
    default: Any
    setter: Optional[Callable[[Any], Any]]
    populate_if_empty: Any
    skip_if: Union[Callable, str, None]
    prepopulator: Optional[Callable]
    save: bool
    dtype: DataType = None
    parent: Schema = None
    # Declaration parameters this property was built from, used to derive
    # new schemas.
    params: Mapping[str, Any]

    schema = {
        'as': {'type': 'string', 'attr': 'attr'},
        'on': {'type': 'string', 'default': 'self'},
        'visibility': {'choices': Visibility, 'default': Visibility.normal},
        'default': {'default': None},
        'setter': {'type': 'callable'},
        'populate_if_empty': {'type': 'callable'},
        'skip_if': {'type': 'callable'},
        'prepopulator': {'type': 'callable'},
        'save': {'type': 'boolean', 'default': True},
    }

    def __repr__(self):
        kind = self.dtype.kind.value if self.dtype else 'none'
        schema = self.parent.name if self.parent else None
        return (
            f'<{type(self).__module__}.{type(self).__name__}('
            f'name={self.name!r}, kind={kind!r}, schema={schema!r})>'
        )

    @property
    def kind(self) -> Kind:
        return self.dtype.kind

    @property
    def writable(self) -> bool:
        return self.visibility is Visibility.normal


class Schema(Immutable, Node):
    """Schema definition, an ordered set of property descriptors."""

    type = 'schema'

    properties: Mapping[str, Property]
    # Rule checker, anything with `check(values)` method or a callable.
    rules: Any = None

    def __iter__(self) -> Iterator[Property]:
        return iter(self.properties.values())

    def derive(self, name: str = None) -> SchemaBuilder:
        """Start a new schema definition, based on this one."""
        from formtree.schemas.builder import SchemaBuilder
        return SchemaBuilder(name or self.name, base=self)


class Manifest(Component):
    """A set of schema definitions loaded from YAML documents."""

    type = 'manifest'
    name: str = None
    path: Optional[pathlib.Path] = None
    # Raw documents by schema name, as given to `load`.
    data: Dict[str, dict]
    schemas: Dict[str, Schema]

    def __init__(self, name: str = 'default'):
        self.name = name
        self.data = {}
        self.schemas = {}


class Form:
    """Schema instance, a node of the runtime form tree."""

    type = 'form'

    schema: Schema
    bindings: Dict[str, Binding]
    values: Dict[str, Any]
    parent: Optional[Form]
    # Property of the parent form, this form is a value of.
    prop: Optional[Property]
    # Position in parent's collection.
    index: Optional[int]
    errors: ErrorReport

    def __init__(
        self,
        schema: Schema,
        bindings: Dict[str, Binding],
        *,
        parent: Form = None,
        prop: Property = None,
        index: int = None,
    ):
        self.schema = schema
        self.bindings = bindings
        self.parent = parent
        self.prop = prop
        self.index = index
        self.values = {}
        self.errors = ErrorReport()
        self._initial = {}

    def __repr__(self):
        path = self.path or '.'
        return f'<{type(self).__module__}.{type(self).__name__}({self.schema.name}:{path})>'

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def path(self) -> str:
        if self.parent is None:
            return ''
        path = self.prop.name
        if self.index is not None:
            path += f'[{self.index}]'
        if self.parent.path:
            path = self.parent.path + '.' + path
        return path

    @property
    def model(self) -> Any:
        binding = self.bindings.get('self')
        return binding.model if binding else None

    def get_binding(self, prop: Property) -> Binding:
        if prop.on not in self.bindings:
            raise exceptions.UnknownOwnerRole(self, property=prop.name, role=prop.on)
        return self.bindings[prop.on]

    def mark_clean(self) -> None:
        """Remember current values, `changed` compares against these."""
        self._initial = {
            k: list(v) if isinstance(v, list) else v
            for k, v in self.values.items()
        }

    def changed(self, name: str = None) -> bool:
        if name is None:
            return any(self.changed(n) for n in self.values)
        value = self.values[name]
        initial = self._initial.get(name)
        if isinstance(value, Form):
            return value is not initial or value.changed()
        if isinstance(value, list):
            initial = initial or []
            return (
                len(value) != len(initial) or
                any(a is not b for a, b in zip(value, initial)) or
                any(child.changed() for child in value)
            )
        return value != initial


class Config:
    """Runtime configuration, loaded from `RawConfig`."""

    rc: RawConfig
    env: str = None
    debug: bool = False
    surplus: Surplus = Surplus.keep

    def __init__(self):
        self.commands = []
