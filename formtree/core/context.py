import importlib
import logging
import pathlib
from typing import List
from typing import Type
from typing import TypeVar

from formtree import commands
from formtree.components import Context
from formtree.core.config import RawConfig
from formtree.core.config import read_config
from formtree.utils.imports import importstr

log = logging.getLogger(__name__)

ContextType = TypeVar('ContextType', bound=Context)


def create_context(
    name: str = 'formtree',
    rc: RawConfig = None,
    context: ContextType = None,
    args: List[str] = None,
    envfile: str = None,
) -> ContextType:
    if rc is None:
        rc = read_config(args, envfile)

    load_commands(rc.get('commands', 'modules', cast=list))

    if context is None:
        Context_: Type[Context] = rc.get('components', 'core', 'context', cast=importstr, required=True)
        context = Context_(name)

    context.set('rc', rc)

    Config = rc.get('components', 'core', 'config', cast=importstr, required=True)
    config = commands.load(context, Config(), rc)
    context.set('config', config)

    return context


def load_commands(modules: List[str]) -> None:
    """Import all python modules of given packages, to register commands."""
    for module_path in modules:
        module = importlib.import_module(module_path)
        path = pathlib.Path(module.__file__).resolve()
        if path.name != '__init__.py':
            continue
        path = path.parent
        base = path.parents[module_path.count('.')]
        for path in sorted(path.glob('**/*.py')):
            if path.name == '__init__.py':
                module_path = path.parent.relative_to(base)
            else:
                module_path = path.relative_to(base).with_suffix('')
            module_path = '.'.join(module_path.parts)
            log.debug("Loading commands from %s.", module_path)
            importlib.import_module(module_path)
