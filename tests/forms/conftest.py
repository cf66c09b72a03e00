import pytest

from formtree.schemas.builder import SchemaBuilder
from formtree.testing.models import Artist
from formtree.testing.models import Song
from formtree.validation.rules import RuleSet
from formtree.validation.rules import length
from formtree.validation.rules import required


@pytest.fixture()
def song():
    return (
        SchemaBuilder('song')
        .property('title')
        .property('track')
        .rules(RuleSet({'title': [required(), length(max=20)]}))
        .build()
    )


@pytest.fixture()
def album(song):
    return (
        SchemaBuilder('album')
        .property('title')
        .nested('artist', lambda b: b.property('name'), populate_if_empty=Artist)
        .collection('songs', song, populate_if_empty=Song)
        .rules(RuleSet({'title': [required()]}))
        .build()
    )
