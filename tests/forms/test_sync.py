import pytest

from formtree import commands
from formtree.exceptions import MissingAccessor
from formtree.exceptions import PersistenceFailure
from formtree.forms.build import create_form
from formtree.schemas.builder import SchemaBuilder
from formtree.testing.models import Album
from formtree.testing.models import Artist
from formtree.testing.models import NotPersistable
from formtree.testing.models import Song
from formtree.testing.models import Unsaved


class ReadOnlyAlbum:

    @property
    def year(self):
        return 1971


def test_sync(context, album):
    model = Album(title='Blue', songs=[Song(title='A')])
    form = create_form(context, album, model)
    commands.populate(context, form, {
        'title': 'Red',
        'artist': {'name': 'Joni'},
        'songs': [{'title': 'B'}, {'title': 'C'}],
    })
    commands.sync(context, form)
    assert model.title == 'Red'
    assert isinstance(model.artist, Artist)
    assert model.artist.name == 'Joni'
    assert [s.title for s in model.songs] == ['B', 'C']
    assert model.songs[0] is form['songs'][0].model


def test_sync_idempotent(context, album):
    model = Album(title='Blue', songs=[Song(title='A')])
    form = create_form(context, album, model)
    commands.populate(context, form, {'songs': [{'title': 'B'}, {'title': 'C'}]})
    commands.sync(context, form)
    first = (model.title, model.artist, list(model.songs))
    commands.sync(context, form)
    assert (model.title, model.artist, list(model.songs)) == first


def test_sync_skips_virtual_and_empty(context):
    schema = (
        SchemaBuilder('album')
        .property('title', visibility='virtual')
        .property('note', visibility='empty')
        .property('year')
        .build()
    )
    model = Album(title='Blue')
    form = create_form(context, schema, model)
    form.values['title'] = 'Red'
    commands.populate(context, form, {'note': 'x', 'year': 1971})
    commands.sync(context, form)
    assert model.title == 'Blue'
    assert not hasattr(model, 'note')
    assert model.year == 1971


def test_sync_virtual_nested(context, song):
    schema = (
        SchemaBuilder('album')
        .collection('songs', song, visibility='virtual')
        .build()
    )
    model = Album(songs=[Song(title='A')])
    form = create_form(context, schema, model)
    commands.populate(context, form, {'songs': [{'title': 'B'}]})
    commands.sync(context, form)
    assert model.songs[0].title == 'A'


def test_sync_read_only(context):
    schema = SchemaBuilder('album').property('year').build()
    form = create_form(context, schema, ReadOnlyAlbum())
    with pytest.raises(MissingAccessor) as e:
        commands.sync(context, form)
    assert e.value.context['mode'] == 'writer'


def test_composition(context, journal):
    schema = (
        SchemaBuilder('release')
        .property('title')
        .property('year')
        .property('name', on='artist')
        .property('country', on='artist')
        .build()
    )
    album = Album(title='Blue')
    artist = Artist(name='Joni')
    form = create_form(context, schema, album, artist=artist)
    commands.populate(context, form, {
        'title': 'Red',
        'name': 'Neil',
        'country': 'CA',
    })
    commands.save(context, form)
    assert album.title == 'Red'
    assert artist.name == 'Neil'
    assert artist.country == 'CA'
    assert journal == [album, artist]


def test_save_order(context, album, journal):
    model = Album(title='Album')
    form = create_form(context, album, model)
    commands.populate(context, form, {
        'artist': {'name': 'Artist'},
        'songs': [{'title': 'A'}, {'title': 'B'}],
    })
    commands.save(context, form)
    assert [m.label for m in journal] == ['Artist', 'A', 'B', 'Album']


def test_save_false(context, song, journal):
    schema = (
        SchemaBuilder('album')
        .property('title')
        .collection('songs', song, populate_if_empty=Song, save=False)
        .build()
    )
    model = Album(title='Album')
    form = create_form(context, schema, model)
    commands.populate(context, form, {'songs': [{'title': 'A'}]})
    commands.save(context, form)
    # Synced, but not persisted.
    assert model.songs[0].title == 'A'
    assert journal == [model]


def test_save_shared_model(context, journal):
    artist = Artist(name='Joni')
    schema = (
        SchemaBuilder('album')
        .nested('artist', lambda b: b.property('name'))
        .nested('producer', lambda b: b.property('name'), **{'as': 'artist'})
        .build()
    )
    model = Album(artist=artist)
    form = create_form(context, schema, model)
    commands.save(context, form)
    assert journal == [artist, model]


def test_persistence_failure(context):
    schema = SchemaBuilder('artist').property('name').build()
    form = create_form(context, schema, Unsaved())
    with pytest.raises(PersistenceFailure) as e:
        commands.save(context, form)
    assert e.value.context['model'] == 'Unsaved'


def test_persistence_missing_save(context):
    schema = SchemaBuilder('artist').property('name').build()
    form = create_form(context, schema, NotPersistable())
    with pytest.raises(MissingAccessor):
        commands.save(context, form)


def test_persistence_error_propagates(context):
    class Broken(Artist):
        def save(self):
            raise RuntimeError("disk full")

    schema = SchemaBuilder('artist').property('name').build()
    form = create_form(context, schema, Broken())
    with pytest.raises(RuntimeError):
        commands.save(context, form)


def test_mapping_models(context, album):
    model = {'title': 'Blue', 'songs': []}
    form = create_form(context, album, model)
    commands.populate(context, form, {'songs': [{'title': 'A'}]})
    commands.save(context, form)
    assert model['songs'][0].title == 'A'


def test_to_nested_dict(context, journal):
    schema = (
        SchemaBuilder('album')
        .property('title')
        .property('note', visibility='empty', default='')
        .property('year', visibility='virtual')
        .nested('artist', lambda b: b.property('name'), populate_if_empty=Artist)
        .collection('songs', lambda b: b.property('title'), populate_if_empty=Song)
        .build()
    )
    model = Album(title='Blue', year=1971)
    form = create_form(context, schema, model)
    commands.populate(context, form, {'songs': [{'title': 'A'}]})
    assert commands.to_nested_dict(context, form) == {
        'title': 'Blue',
        'note': '',
        'year': 1971,
        'artist': None,
        'songs': [{'title': 'A'}],
    }
    assert model.songs == []
    assert journal == []


def test_save_with_callback(context, album, journal):
    model = Album(title='Blue')
    form = create_form(context, album, model)
    commands.populate(context, form, {
        'title': 'Red',
        'artist': {'name': 'Joni'},
    })
    saved = []
    commands.save(context, form, saved.append)
    assert saved == [{
        'title': 'Red',
        'artist': {'name': 'Joni'},
        'songs': [],
    }]
    assert model.title == 'Red'
    assert journal == []


def test_save_without_callback(context, album, journal):
    model = Album(title='Blue')
    form = create_form(context, album, model)
    commands.save(context, form, None)
    assert journal == [model]
