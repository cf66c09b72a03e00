from __future__ import annotations

import inspect
from typing import Any
from typing import Callable
from typing import Dict
from typing import TypeVar
from typing import cast

from multipledispatch.dispatcher import Dispatcher
from multipledispatch.dispatcher import str_signature

F = TypeVar('F', bound=Callable[..., Any])

_commands: Dict[str, Command] = {}


def command(name: str = None) -> Callable[[F], Command]:
    """Declare a new command.

    Decorated function body is never called, it only gives command a name and
    documentation. Implementations are added with `Command.register`.
    """

    def _(func: F) -> Command:
        _name = func.__name__ if name is None else name
        if _name in _commands:
            raise Exception(f"{_name!r} is already defined.")
        cmd = Command(_name, doc=func.__doc__)
        _commands[_name] = cmd
        return cmd

    return cast(Command, _)


class Command(Dispatcher):
    __doc__ = Dispatcher.__doc__

    def register(self, *signature_types) -> Callable[[F], Command]:
        def _(func: F) -> Command:
            types = signature_types or tuple(_find_func_types(func))
            self.add(types, func)
            return self
        return cast(Command, _)

    def __getitem__(self, types):
        types = types if isinstance(types, tuple) else (types,)
        func = self.dispatch(*types)
        if not func:
            raise NotImplementedError(
                f"Could not find signature for {self.name}: "
                f"<{str_signature(types)}>"
            )
        return func


def _find_func_types(func):
    sig = inspect.signature(func)
    kinds = {
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    }
    for param in sig.parameters.values():
        if param.kind not in kinds or param.annotation is param.empty:
            break
        if isinstance(param.annotation, str):
            raise TypeError(
                f"Can't register {func.__qualname__} from string annotations, "
                "give signature types explicitly."
            )
        yield param.annotation
