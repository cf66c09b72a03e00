from __future__ import annotations

from typing import Dict
from typing import TYPE_CHECKING
from typing import Type

from formtree.components import Component
from formtree.components import Immutable
from formtree.components import Kind

if TYPE_CHECKING:
    from formtree.components import Property
    from formtree.components import Schema


class DataType(Immutable, Component):
    kind: Kind = None
    prop: Property = None

    def __repr__(self):
        name = self.prop.name if self.prop else None
        return f'<{name}:{self.kind.value}>'


class Scalar(DataType):
    kind = Kind.scalar


class Composite(DataType):
    """Property holding forms of a child schema."""

    child: Schema = None


class Nested(Composite):
    kind = Kind.nested


class Collection(Composite):
    kind = Kind.collection


DATA_TYPES: Dict[Kind, Type[DataType]] = {
    Kind.scalar: Scalar,
    Kind.nested: Nested,
    Kind.collection: Collection,
}
