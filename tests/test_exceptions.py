import formtree.core.errors  # noqa
from formtree.components import Node
from formtree.exceptions import BaseError
from formtree.exceptions import MultipleErrors
from formtree.exceptions import error_response
from formtree.exceptions import UnknownOwnerRole
from formtree.forms.build import create_form
from formtree.schemas.builder import SchemaBuilder
from formtree.testing.models import Album


class Error(BaseError):
    template = "Error."
    context = {
        'bar': 'this.deeply.nested.value',
    }


def test_str_without_this():
    error = Error()
    assert str(error) == "Error.\n"
    assert error_response(error) == {
        'type': 'system',
        'code': 'Error',
        'template': 'Error.',
        'message': 'Error.',
        'context': {},
    }


def test_str_with_this():
    node = Node()
    node.type = 'schema'
    node.name = 'album'
    error = Error(node)
    assert str(error) == (
        "Error.\n"
        "  Context:\n"
        "    component: formtree.components.Node\n"
    )
    assert error.type == 'schema'


def test_str_optional():
    error = Error(foo=42)
    assert str(error) == (
        "Error.\n"
        "  Context:\n"
        "    foo: 42\n"
    )


def test_missing_template_var():
    class Missing(BaseError):
        template = "Missing {thing}."

    assert Missing().message == "Missing [UNKNOWN]."


def test_property_context():
    schema = SchemaBuilder('album').property('title').build()
    error = Error(schema.properties['title'])
    assert error.type == 'property'
    assert error.context == {
        'component': 'formtree.components.Property',
        'schema': 'album',
        'property': 'title',
    }


def test_form_context(context):
    form = create_form(context, SchemaBuilder('other').build(), Album())
    error = UnknownOwnerRole(form, property='title', role='label')
    assert error.context == {
        'component': 'formtree.components.Form',
        'schema': 'other',
        'form': '',
        'property': 'title',
        'role': 'label',
    }
    assert error.message == (
        "Property 'title' is owned by 'label', but form has no model for it."
    )


def test_multiple_errors():
    errors = MultipleErrors([Error(foo=1), Error(foo=2)])
    assert len(errors.errors) == 2
    assert str(errors) == (
        "Multiple errors:\n"
        " - Error.\n"
        "     Context:\n"
        "       foo: 1\n"
        " - Error.\n"
        "     Context:\n"
        "       foo: 2\n"
    )
