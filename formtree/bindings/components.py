from __future__ import annotations

import logging
from typing import Any

from formtree import exceptions

log = logging.getLogger(__name__)


class Binding:
    """Accessor contract between a form and a model.

    Forms never touch models directly, all reads, writes and persistence go
    through a binding.
    """

    type = 'model'
    model: Any

    def __init__(self, model: Any):
        self.model = model

    def __repr__(self):
        return f'<{type(self).__module__}.{type(self).__name__}({self.name})>'

    @property
    def name(self) -> str:
        return type(self.model).__name__

    def get(self, attr: str) -> Any:
        raise NotImplementedError

    def set(self, attr: str, value: Any) -> None:
        raise NotImplementedError

    def persist(self) -> bool:
        raise NotImplementedError


class ObjectBinding(Binding):

    def get(self, attr: str) -> Any:
        try:
            return getattr(self.model, attr)
        except AttributeError:
            raise exceptions.MissingAccessor(self, mode='reader', accessor=attr)

    def set(self, attr: str, value: Any) -> None:
        if not hasattr(self.model, attr):
            raise exceptions.MissingAccessor(self, mode='writer', accessor=attr)
        try:
            setattr(self.model, attr, value)
        except AttributeError:
            # Read-only properties.
            raise exceptions.MissingAccessor(self, mode='writer', accessor=attr)

    def persist(self) -> bool:
        save = getattr(self.model, 'save', None)
        if save is None or not callable(save):
            raise exceptions.MissingAccessor(self, mode='persistence', accessor='save')
        log.debug("Persisting %s.", self.name)
        return save() is not False


class MappingBinding(Binding):

    def get(self, attr: str) -> Any:
        return self.model.get(attr)

    def set(self, attr: str, value: Any) -> None:
        self.model[attr] = value

    def persist(self) -> bool:
        return True
