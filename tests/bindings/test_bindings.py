import pytest

from formtree import commands
from formtree.bindings.components import MappingBinding
from formtree.bindings.components import ObjectBinding
from formtree.exceptions import MissingAccessor
from formtree.testing.models import Album
from formtree.testing.models import NotPersistable
from formtree.testing.models import Unsaved


class ReadOnly:

    @property
    def title(self):
        return 'fixed'


def test_bind_object(context):
    album = Album(title='Blue')
    binding = commands.bind(context, album)
    assert isinstance(binding, ObjectBinding)
    assert binding.name == 'Album'
    assert binding.get('title') == 'Blue'
    binding.set('title', 'Red')
    assert album.title == 'Red'


def test_bind_mapping(context):
    data = {'title': 'Blue'}
    binding = commands.bind(context, data)
    assert isinstance(binding, MappingBinding)
    assert binding.get('title') == 'Blue'
    assert binding.get('year') is None
    binding.set('year', 1971)
    assert data == {'title': 'Blue', 'year': 1971}
    assert binding.persist() is True


def test_bind_binding(context):
    binding = MappingBinding({})
    assert commands.bind(context, binding) is binding


def test_missing_reader(context):
    binding = commands.bind(context, Album())
    with pytest.raises(MissingAccessor) as e:
        binding.get('label_text')
    assert e.value.context == {
        'component': 'formtree.bindings.components.ObjectBinding',
        'model': 'Album',
        'mode': 'reader',
        'accessor': 'label_text',
    }
    assert e.value.type == 'model'


def test_missing_writer(context):
    binding = commands.bind(context, Album())
    with pytest.raises(MissingAccessor) as e:
        binding.set('label', 'x')
    assert e.value.context['mode'] == 'writer'


def test_read_only_writer(context):
    binding = commands.bind(context, ReadOnly())
    assert binding.get('title') == 'fixed'
    with pytest.raises(MissingAccessor):
        binding.set('title', 'x')


def test_persist(context, journal):
    album = Album()
    assert commands.bind(context, album).persist() is True
    assert journal == [album]


def test_persist_refused(context):
    assert commands.bind(context, Unsaved()).persist() is False


def test_persist_missing_save(context):
    binding = commands.bind(context, NotPersistable())
    with pytest.raises(MissingAccessor) as e:
        binding.persist()
    assert e.value.context['accessor'] == 'save'
