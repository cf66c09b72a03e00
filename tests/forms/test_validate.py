import pytest

from formtree import commands
from formtree.forms.build import create_form
from formtree.schemas.builder import SchemaBuilder
from formtree.testing.models import Album
from formtree.testing.models import Song
from formtree.validation.report import ErrorReport


def test_valid(context, album):
    form = create_form(context, album, Album())
    assert commands.validate(context, form, {
        'title': 'Blue',
        'songs': [{'title': 'A'}],
    })
    assert not form.errors
    assert form.errors.flatten() == {}


def test_nested_errors(context, album):
    form = create_form(context, album, Album())
    assert not commands.validate(context, form, {
        'title': '',
        'songs': [{'title': ''}, {'title': 'ok'}, {'title': 'x' * 21}],
    })
    assert form.errors.flatten() == {
        'title': ["can't be blank"],
        'songs[0].title': ["can't be blank"],
        'songs[2].title': ["is too long (maximum is 20 characters)"],
    }
    assert form.errors.to_dict() == {
        'title': ["can't be blank"],
        'songs': {
            0: {'title': ["can't be blank"]},
            2: {'title': ["is too long (maximum is 20 characters)"]},
        },
    }
    assert form['songs'][0].errors.flatten() == {
        'title': ["can't be blank"],
    }
    assert not form['songs'][1].errors


def test_validate_without_data(context, album):
    form = create_form(context, album, Album(title='Blue', songs=[Song()]))
    assert not commands.validate(context, form)
    assert form.errors.flatten() == {
        'songs[0].title': ["can't be blank"],
    }


def test_validate_none_data(context, album):
    form = create_form(context, album, Album(title='Blue'))
    assert commands.validate(context, form, None)


def test_collect_errors_does_not_populate(context, album):
    form = create_form(context, album, Album(title='Blue'))
    report = commands.collect_errors(context, form)
    assert isinstance(report, ErrorReport)
    assert not report
    assert form.values['title'] == 'Blue'


def test_rules_get_read_only_values(context, album):
    def checker(values):
        values['title'] = 'changed'

    schema = album.derive().rules(checker).build()
    form = create_form(context, schema, Album(title='Blue'))
    with pytest.raises(TypeError):
        commands.validate(context, form)
    assert form['title'] == 'Blue'


def test_callable_rules(context):
    def checker(values):
        if values['title'] == values['name']:
            return {'name': "must differ from title"}

    schema = (
        SchemaBuilder('album')
        .property('title')
        .property('name', **{'as': 'title'})
        .rules(checker)
        .build()
    )
    form = create_form(context, schema, Album(title='Blue'))
    assert not commands.validate(context, form)
    assert form.errors.flatten() == {'name': ["must differ from title"]}


def test_validate_surplus_option(context, album):
    form = create_form(context, album, Album(songs=[Song(title='A'), Song(title='')]))
    assert commands.validate(context, form, {
        'title': 'Blue',
        'songs': [{'title': 'B'}],
    }, surplus='drop')
    assert len(form['songs']) == 1
