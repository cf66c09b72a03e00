"""In-memory models used in tests.

All models record themselves in `Model.journal` when saved, so tests can
check persistence order.
"""

from __future__ import annotations

from typing import List


class Model:
    journal: List[Model] = []

    def __repr__(self):
        return f'<{type(self).__name__}({self.label})>'

    @property
    def label(self) -> str:
        return str(getattr(self, 'title', None) or getattr(self, 'name', None))

    def save(self):
        Model.journal.append(self)


class Album(Model):

    def __init__(self, title=None, artist=None, songs=None, year=None):
        self.title = title
        self.artist = artist
        self.songs = [] if songs is None else songs
        self.year = year


class Song(Model):

    def __init__(self, title=None, track=None, composer=None):
        self.title = title
        self.track = track
        self.composer = composer


class Artist(Model):

    def __init__(self, name=None, country=None):
        self.name = name
        self.country = country


class Unsaved(Artist):
    """Refuses to be saved."""

    def save(self):
        return False


class NotPersistable:
    """Has no `save` method."""

    def __init__(self, name=None):
        self.name = name
