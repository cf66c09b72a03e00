from __future__ import annotations

from typing import Any
from typing import Dict
from typing import TYPE_CHECKING
from typing import overload

from formtree.dispatcher import command

if TYPE_CHECKING:
    from formtree.components import Context
    from formtree.components import Form


@command()
def load():
    """Load primitive data structures to python-native objects.

        load(Context, Config, RawConfig) -> Config
        load(Context, Manifest, list) -> Manifest

    """


@command()
def link():
    """Link loaded components.

    While loading, components can't be linked, because not all components might
    be loaded yet. Schema references, `extends` and `include` are resolved here.
    """


@command()
def check():
    """Check if loaded components are correct.

        check(Context, Manifest)
        check(Context, Schema)
        check(Context, DataType)

    """


@command()
def get_error_context():
    """Return error context paths for a component.

    Paths are resolved by `formtree.exceptions.resolve_context_vars`.
    """


@command()
def bind():
    """Wrap a model into a `Binding`, implementing the accessor contract.

        bind(Context, object) -> Binding

    """


@command()
def read():
    """Read a property value from models, when a form is constructed.

        read(Context, Form, DataType) -> value

    """


@command()
def check_data():
    """Check the shape of form input before anything is populated.

        check_data(Context, Schema, dict)
        check_data(Context, DataType, value)

    Raises `PopulationError` on the first malformed fragment.
    """


@overload
def populate(context: Context, form: Form, data: dict, *, surplus=None) -> Form:
    """Populate whole form tree from input data."""


@command()
def populate():
    """Overwrite form values from input data.

        populate(Context, Form, dict) -> Form
        populate(Context, Form, DataType, value)

    Models are never touched, only form values change. Missing nested forms
    are created with a property creation policy.
    """


@command()
def create_model():
    """Create a model for a missing nested form.

        create_model(Context, policy, fragment, CreationContext) -> model

    If policy is a class, it is instantiated without arguments, otherwise it
    is called with the raw input fragment and creation context.
    """


@command()
def collect_errors():
    """Run rule checkers of all forms in a tree.

        collect_errors(Context, Form) -> ErrorReport
        collect_errors(Context, DataType, value) -> ErrorReport

    """


@overload
def validate(context: Context, form: Form, data: dict = None) -> bool:
    """Populate form with `data`, if given, and check it."""


@command()
def validate():
    """Validate a form tree.

    Returns True if there are no errors, errors are stored in `form.errors`.
    """


@command()
def sync():
    """Write form values to models without persisting them.

        sync(Context, Form)
        sync(Context, Form, DataType, value)

    """


@command()
def save():
    """Sync form values and persist models, children before parents.

        save(Context, Form)
        save(Context, Form, callback)

    When a callback is given, models are synced, but instead of persisting
    them, the callback is called with `to_nested_dict` of the form.
    """


@command()
def persist():
    """Persist all models of a form tree, bottom-up."""


@overload
def to_nested_dict(context: Context, form: Form) -> Dict[str, Any]:
    """Return form values as plain nested data."""


@command()
def to_nested_dict():
    """Dump form tree as plain nested data, without touching models.

        to_nested_dict(Context, Form) -> dict
        to_nested_dict(Context, DataType, value) -> Any

    """


@command()
def prepopulate():
    """Run property prepopulators, usually to add empty nested forms."""

