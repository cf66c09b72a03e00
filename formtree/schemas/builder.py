from __future__ import annotations

import inspect
import logging
from types import MappingProxyType
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union

from formtree import exceptions
from formtree.components import Kind
from formtree.components import Property
from formtree.components import Schema
from formtree.nodes import load_node
from formtree.types.datatype import Composite
from formtree.types.datatype import DATA_TYPES
from formtree.utils.imports import importstr
from formtree.validation.rules import RuleSet

log = logging.getLogger(__name__)

# Inline child schema: another schema, a builder, a function taking a builder,
# a dict declaration or a schema name.
ChildSchema = Union[Schema, 'SchemaBuilder', Callable, dict, str, None]

# Resolves schema names, used by manifests.
Resolver = Callable[[str], Schema]

# Named `skip_if` checks.
SKIP_IF = ('all_blank',)


class Declaration:
    """Property declaration, not yet built into a `Property`."""

    name: str
    kind: Optional[Kind]
    child: Optional[Schema]
    params: Dict[str, Any]

    def __init__(self, name, kind=None, child=None, params=None):
        self.name = name
        self.kind = kind
        self.child = child
        self.params = dict(params or {})

    def __repr__(self):
        kind = self.kind.value if self.kind else None
        return f'<{type(self).__name__}({self.name!r}, {kind!r})>'

    @classmethod
    def from_property(cls, prop: Property) -> Declaration:
        child = prop.dtype.child if isinstance(prop.dtype, Composite) else None
        return cls(prop.name, prop.kind, child, prop.params)


class SchemaBuilder:
    """Collects property declarations and builds an immutable `Schema`.

        builder = SchemaBuilder('album')
        builder.property('title')
        builder.collection('songs', lambda b: b.property('title'))
        album = builder.build()

    Declaring a property, that is already declared, requires `inherit=True`
    to merge new options into existing ones or `replace=True` to replace it.
    """

    name: Optional[str]
    base: Optional[Schema]
    declarations: List[Declaration]

    def __init__(
        self,
        name: str = None,
        *,
        base: Schema = None,
        resolve: Resolver = None,
    ):
        self.name = name
        self.base = base
        self.resolve = resolve
        self.declarations = []
        self.checker = None
        if base is not None:
            self.declarations = [Declaration.from_property(p) for p in base]
            self.checker = base.rules

    def __repr__(self):
        return f'<{type(self).__module__}.{type(self).__name__}({self.name!r})>'

    def property(
        self,
        name: str,
        type: Union[Kind, str] = None,
        schema: ChildSchema = None,
        *,
        inherit: bool = False,
        replace: bool = False,
        **params,
    ) -> SchemaBuilder:
        kind = _load_kind(self, name, type)
        if kind is None and schema is not None:
            kind = Kind.nested
        self._declare(name, kind, schema, params, inherit=inherit, replace=replace)
        return self

    def nested(self, name: str, schema: ChildSchema = None, **params) -> SchemaBuilder:
        return self.property(name, Kind.nested, schema, **params)

    def collection(self, name: str, schema: ChildSchema = None, **params) -> SchemaBuilder:
        return self.property(name, Kind.collection, schema, **params)

    def include(
        self,
        fragment: ChildSchema,
        *,
        inherit: bool = False,
        replace: bool = False,
    ) -> SchemaBuilder:
        """Copy property declarations of a fragment into this schema.

        Rules of the fragment are not included.
        """
        if isinstance(fragment, str):
            fragment = self._resolve(fragment)
        if isinstance(fragment, Schema):
            declarations = [Declaration.from_property(p) for p in fragment]
        else:
            builder = SchemaBuilder(self.name, resolve=self.resolve)
            _apply(builder, fragment)
            declarations = builder.declarations
        for decl in declarations:
            if decl.name in self._names() and not (inherit or replace):
                raise exceptions.DuplicateProperty(
                    schema=self.name,
                    property=decl.name,
                )
            self._set(decl, inherit=inherit, replace=replace)
        return self

    def rules(self, checker: Any) -> SchemaBuilder:
        """Set rule checker, anything with `check(values)` or a callable."""
        self.checker = checker
        return self

    def declare_from(self, data: Mapping[str, Any]) -> SchemaBuilder:
        """Declare properties from plain data, as given in YAML documents.

            include: [timestamps]
            properties:
              title: {}
              artist:
                type: nested
                schema: artist
            rules:
              title: {required: true}

        """
        for fragment in data.get('include') or []:
            self.include(fragment)
        for name, params in (data.get('properties') or {}).items():
            self.property(name, **(params or {}))
        rules = data.get('rules')
        if isinstance(rules, dict):
            self.rules(RuleSet.from_dict(rules))
        elif isinstance(rules, str):
            checker = importstr(rules)
            if inspect.isclass(checker):
                checker = checker()
            self.rules(checker)
        elif rules is not None:
            self.rules(rules)
        return self

    def build(self) -> Schema:
        schema = Schema()
        schema.name = self.name
        properties = {}
        for decl in self.declarations:
            properties[decl.name] = load_property(schema, decl)
        schema.properties = MappingProxyType(properties)
        schema.rules = self.checker
        for prop in properties.values():
            prop.dtype.freeze()
            prop.freeze()
        schema.freeze()
        log.debug("Schema %r built with %d properties.", self.name, len(properties))
        return schema

    def _names(self) -> List[str]:
        return [decl.name for decl in self.declarations]

    def _declare(
        self,
        name: str,
        kind: Optional[Kind],
        child: ChildSchema,
        params: Dict[str, Any],
        *,
        inherit: bool,
        replace: bool,
    ) -> None:
        names = self._names()
        if name in names and inherit and not replace:
            current = self.declarations[names.index(name)]
            decl = Declaration(
                name,
                kind or current.kind,
                self._child(name, child, base=current.child),
                {**current.params, **params},
            )
        else:
            if name in names and not replace:
                raise exceptions.DuplicateProperty(schema=self.name, property=name)
            decl = Declaration(name, kind, self._child(name, child), params)
        self._set(decl, replace=True)

    def _set(self, decl: Declaration, *, inherit=False, replace=False) -> None:
        names = self._names()
        if decl.name not in names:
            self.declarations.append(decl)
        elif inherit and not replace:
            current = self.declarations[names.index(decl.name)]
            child = decl.child
            if current.child is not None and child is not None:
                child = current.child.derive().include(child, inherit=True).build()
            self.declarations[names.index(decl.name)] = Declaration(
                decl.name,
                decl.kind or current.kind,
                child or current.child,
                {**current.params, **decl.params},
            )
        else:
            self.declarations[names.index(decl.name)] = decl

    def _child(
        self,
        name: str,
        child: ChildSchema,
        *,
        base: Schema = None,
    ) -> Optional[Schema]:
        if child is None:
            return base
        if isinstance(child, str):
            child = self._resolve(child)
        if base is not None:
            return base.derive().include(child, inherit=True).build()
        if isinstance(child, Schema):
            return child
        if isinstance(child, SchemaBuilder):
            return child.build()
        builder = SchemaBuilder(_child_name(self.name, name), resolve=self.resolve)
        _apply(builder, child)
        return builder.build()

    def _resolve(self, ref: str) -> Schema:
        if self.resolve is None:
            raise exceptions.UnknownSchemaReference(ref=ref)
        return self.resolve(ref)


def _apply(builder: SchemaBuilder, fragment: ChildSchema) -> None:
    if isinstance(fragment, SchemaBuilder):
        for decl in fragment.declarations:
            builder.declarations.append(decl)
    elif isinstance(fragment, dict):
        builder.declare_from(fragment)
    elif callable(fragment):
        fragment(builder)
    else:
        raise exceptions.InvalidParameterValue(
            param='schema',
            given=fragment,
            choices='schema, builder, callable, dict, name',
        )


def _child_name(parent: Optional[str], name: str) -> str:
    return f'{parent}.{name}' if parent else name


def _load_kind(
    builder: SchemaBuilder,
    name: str,
    kind: Union[Kind, str, None],
) -> Optional[Kind]:
    if kind is None or isinstance(kind, Kind):
        return kind
    try:
        return Kind(kind)
    except ValueError:
        raise exceptions.UnknownPropertyType(
            schema=builder.name,
            property=name,
            given=kind,
            choices=', '.join(k.value for k in Kind),
        )


def load_property(schema: Schema, decl: Declaration) -> Property:
    prop = Property()
    prop.name = decl.name
    prop.parent = schema
    load_node(prop, decl.params)
    if prop.attr is None:
        prop.attr = prop.name
    prop.params = MappingProxyType(dict(decl.params))
    if isinstance(prop.skip_if, str) and prop.skip_if not in SKIP_IF:
        raise exceptions.InvalidParameterValue(
            prop,
            param='skip_if',
            given=prop.skip_if,
            choices=', '.join(SKIP_IF + ('callable',)),
        )
    if isinstance(prop.populate_if_empty, str):
        raise exceptions.InvalidParameterValue(
            prop,
            param='populate_if_empty',
            given=prop.populate_if_empty,
            choices="class, callable, 'module:name' path",
        )

    kind = decl.kind or Kind.scalar
    dtype = DATA_TYPES[kind]()
    dtype.prop = prop
    if isinstance(dtype, Composite):
        if decl.child is None:
            raise exceptions.MissingChildSchema(prop, kind=kind.value)
        dtype.child = decl.child
    elif decl.child is not None:
        raise exceptions.UnknownParameter(prop, param='schema')
    prop.dtype = dtype
    return prop
