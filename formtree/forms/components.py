from __future__ import annotations

from typing import Any
from typing import Optional

from formtree.components import Context
from formtree.components import Form
from formtree.components import Property
from formtree.components import Schema


class CreationContext:
    """What a creation policy knows about the model it has to create."""

    context: Context
    # Parent form, the new model will be a child of.
    form: Form
    prop: Property
    schema: Schema
    # Position in collection, None for nested properties.
    index: Optional[int]
    # Raw input fragment of the new form.
    fragment: Any

    def __init__(self, context, form, prop, *, index=None, fragment=None):
        self.context = context
        self.form = form
        self.prop = prop
        self.schema = prop.dtype.child
        self.index = index
        self.fragment = fragment

    def __repr__(self):
        return (
            f'<{type(self).__module__}.{type(self).__name__}('
            f'{self.prop.name!r}, index={self.index!r})>'
        )


class PrepopulateContext:
    """Passed to property prepopulators."""

    context: Context
    form: Form
    prop: Property

    def __init__(self, context, form, prop):
        self.context = context
        self.form = form
        self.prop = prop

    def add(self, model: Any) -> Form:
        """Add a child form for `model`, to the property being prepopulated.

        Nested properties get the new form as their value, collections get it
        appended.
        """
        from formtree.forms.build import build_child
        if isinstance(self.form.values[self.prop.name], list):
            items = self.form.values[self.prop.name]
            child = build_child(self.context, self.form, self.prop, model, index=len(items))
            items.append(child)
        else:
            child = build_child(self.context, self.form, self.prop, model)
            self.form.values[self.prop.name] = child
        return child

    def get(self) -> Any:
        return self.form.values[self.prop.name]

