from formtree import commands
from formtree.forms.build import create_form
from formtree.schemas.builder import SchemaBuilder
from formtree.testing.models import Album
from formtree.testing.models import Artist
from formtree.testing.models import Song


def _add_song(form, ctx):
    if not ctx.get():
        ctx.add(Song())


def _add_artist(form, ctx):
    if ctx.get() is None:
        ctx.add(Artist(name='Unknown'))


def test_prepopulate(context, journal):
    schema = (
        SchemaBuilder('album')
        .property('title')
        .nested('artist', lambda b: b.property('name'), prepopulator=_add_artist)
        .collection('songs', lambda b: b.property('title'), prepopulator=_add_song)
        .build()
    )
    model = Album()
    form = create_form(context, schema, model)
    commands.prepopulate(context, form)
    assert form['artist']['name'] == 'Unknown'
    assert len(form['songs']) == 1
    assert form['songs'][0].index == 0
    assert form['songs'][0].parent is form
    # Models are not touched.
    assert model.artist is None
    assert model.songs == []
    assert journal == []


def test_prepopulate_nested_forms(context):
    calls = []

    def record(form, ctx):
        calls.append(form.path)

    song = SchemaBuilder('song').property('title', prepopulator=record).build()
    schema = SchemaBuilder('album').collection('songs', song).build()
    form = create_form(context, schema, Album(songs=[Song(), Song()]))
    commands.prepopulate(context, form)
    assert calls == ['songs[0]', 'songs[1]']


def test_prepopulate_then_populate(context):
    schema = (
        SchemaBuilder('album')
        .collection('songs', lambda b: b.property('title'), prepopulator=_add_song)
        .build()
    )
    form = create_form(context, schema, Album())
    commands.prepopulate(context, form)
    commands.populate(context, form, {'songs': [{'title': 'A'}]})
    assert form['songs'][0]['title'] == 'A'
