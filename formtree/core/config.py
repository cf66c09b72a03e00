from __future__ import annotations

import enum
import logging
import os
import pathlib
import sys
from typing import Any
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple

from ruamel.yaml import YAML

from formtree.utils.imports import importstr
from formtree.utils.schema import NA

Key = Tuple[str, ...]

ENV_PREFIX = 'FORMTREE_'

yaml = YAML(typ='safe')

log = logging.getLogger(__name__)


def read_config(args: List[str] = None, envfile: str = None) -> RawConfig:
    rc = RawConfig()
    rc.read([
        Path('formtree', 'formtree.config:CONFIG'),
        EnvFile('envfile', envfile or '.env'),
        EnvVars('envvars', os.environ),
        CliArgs('cliargs', args or []),
    ])
    return rc


class KeyFormat(str, enum.Enum):
    cfg = 'cfg'
    env = 'env'


class ConfigSource:
    """A single source of configuration values.

    After `read` all values are kept flat, by key tuples:

        {('populate', 'surplus'): 'keep'}

    Values for a specific environment are kept under
    `('environments', env, ...)` keys.
    """

    name: str = None
    config: Dict[Key, Any]

    def __init__(self, name: str = None, config: Any = None):
        self.name = name or self.name or type(self).__name__
        self.config = config

    def __str__(self):
        return self.name

    def __repr__(self):
        return f'{type(self).__module__}.{type(self).__name__}({self.name!r})'

    def read(self, known: List[str]) -> None:
        raise NotImplementedError

    def keys(self, env: str = None) -> Iterator[Key]:
        for key in self.config:
            if env:
                if key[:2] == ('environments', env):
                    yield key[2:]
            elif key[:1] != ('environments',):
                yield key

    def get(self, key: Key, env: str = None) -> Any:
        if env:
            return self.config.get(('environments', env) + key, NA)
        return self.config.get(key, NA)


class PyDict(ConfigSource):

    def read(self, known: List[str]) -> None:
        data = dict(self.config)
        envs = data.pop('environments', {})
        config = dict(_flatten(data))
        for env, values in envs.items():
            for key, value in _flatten(values):
                config[('environments', env) + key] = value
        self.config = config


class Path(PyDict):
    """Python path to a `dict`, or a YAML file path."""

    def read(self, known: List[str]) -> None:
        if self.config.endswith(('.yml', '.yaml')):
            self.config = yaml.load(pathlib.Path(self.config).read_text()) or {}
        else:
            self.config = importstr(self.config)
        super().read(known)


class CliArgs(PyDict):
    name = 'cli'

    def read(self, known: List[str]) -> None:
        config = {}
        for arg in self.config:
            key, val = arg.split('=', 1)
            if ',' in val:
                val = [v.strip() for v in val.split(',')]
            config[key] = val
        self.config = config
        super().read(known)


class EnvVars(ConfigSource):
    name = 'env'

    def read(self, known: List[str]) -> None:
        config = {}
        for key, val in self.config.items():
            if not key.startswith(ENV_PREFIX):
                continue
            key = tuple(key[len(ENV_PREFIX):].lower().split('__'))
            # FORMTREE_TEST__POPULATE__SURPLUS sets `populate.surplus` for
            # `test` environment.
            if len(key) > 1 and key[0] not in known and key[1] in known:
                key = ('environments',) + key
            config[key] = val
        self.config = config


class EnvFile(EnvVars):

    def read(self, known: List[str]) -> None:
        config = {}
        path = pathlib.Path(self.config)
        if path.exists():
            with path.open() as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith('#') or '=' not in line:
                        continue
                    name, value = line.split('=', 1)
                    config[name.strip()] = value.strip()
        self.config = config
        super().read(known)


class RawConfig:
    """A raw configuration reader component

    Reads configuration directly from supported configuration `sources`, later
    sources override values of earlier ones:

    - `PyDict` - python `dict` objects.
    - `Path` - python path pointing to a `dict` or YAML file path.
    - `EnvVars` - environment variables with `FORMTREE_` prefix.
    - `EnvFile` - `.env` files containing variables with `FORMTREE_` prefix.
    - `CliArgs` - `-o` command line arguments with `name=value` values.

    """

    sources: List[ConfigSource]

    def __init__(self, sources: List[ConfigSource] = None):
        self._locked = False
        self.sources = sources or []

    def read(self, sources: List[ConfigSource]) -> None:
        if self._locked:
            raise Exception(
                "Configuration is locked, use `rc.fork()` if you need to "
                "change configuration."
            )
        for source in sources:
            log.info("Reading config from %s.", source.name)
            # Environment variables are mapped to environments using names
            # known from earlier sources.
            source.read(sorted(self._known_names()))
            self.sources.append(source)

    def add(self, name: str, params: dict) -> RawConfig:
        self.read([PyDict(name, params)])
        return self

    def fork(self, params: dict = None) -> RawConfig:
        rc = RawConfig(list(self.sources))
        if params:
            rc.add('fork', params)
        return rc

    def lock(self) -> None:
        self._locked = True

    def has(self, *key: str) -> bool:
        return self.get(*key, default=NA) is not NA

    def get(
        self,
        *key: str,
        default: Any = None,
        cast: Any = None,
        required: bool = False,
        origin: bool = False,
    ) -> Any:
        env, _ = self._get_value(('env',))
        value, source = self._get_value(key, env)
        if value is NA:
            value = default

        if cast is not None and value is not None and value is not NA:
            if cast is list and isinstance(value, str):
                value = [v.strip() for v in value.split(',')] if value else []
            else:
                value = cast(value)

        if required and value is None:
            name = '.'.join(key)
            raise Exception(f"{name!r} is a required configuration option.")

        if origin:
            return value, source.name if source else ''
        return value

    def keys(self, *key: str) -> List[str]:
        """Return names of the next level below `key`."""
        env, _ = self._get_value(('env',))
        n = len(key)
        names = []
        for source in self.sources:
            for k in _iter_keys(source, env):
                if len(k) > n and k[:n] == key and k[n] not in names:
                    names.append(k[n])
        return names

    def getall(self, *key: str, origin: bool = False) -> Iterator[tuple]:
        env, _ = self._get_value(('env',))
        seen = []
        for source in self.sources:
            for k in _iter_keys(source, env):
                if k[:len(key)] == key and k not in seen:
                    seen.append(k)
        for k in seen:
            value, source = self._get_value(k, env)
            if origin:
                yield k, value, source.name
            else:
                yield k, value

    def dump(self, *names: str, fmt: KeyFormat = KeyFormat.cfg, file=None):
        file = file or sys.stdout
        table = [('Origin', 'Name', 'Value')]
        for key, val, origin in self.getall(origin=True):
            if names and not any('.'.join(key).startswith(n) for n in names):
                continue
            if fmt == KeyFormat.env:
                key = ENV_PREFIX + '__'.join(key).upper()
            else:
                key = '.'.join(key)
            table.append((origin, key, val))
        sizes = [max(len(str(row[i])) for row in table) for i in range(3)]
        table.insert(1, tuple('-' * s for s in sizes))
        for row in table:
            print('  '.join(str(x).ljust(s) for x, s in zip(row, sizes)).rstrip(), file=file)

    def get_source_names(self) -> List[str]:
        return [source.name for source in self.sources]

    def _get_value(
        self,
        key: Key,
        env: str = None,
    ) -> Tuple[Any, Optional[ConfigSource]]:
        for source in reversed(self.sources):
            value = source.get(key, env) if env else NA
            if value is NA:
                value = source.get(key)
            if value is not NA:
                return value, source
        # Return a nested dict, if only inner keys are set.
        n = len(key)
        inner = {
            k[n:]: self._get_value(k, env)[0]
            for source in self.sources
            for k in _iter_keys(source, env)
            if n and len(k) > n and k[:n] == key
        }
        if inner:
            return _unflatten(inner), None
        return NA, None

    def _known_names(self) -> set:
        return {
            key[0]
            for source in self.sources
            for key in source.keys()
        }


def _iter_keys(source: ConfigSource, env: str = None) -> Iterator[Key]:
    yield from source.keys()
    if env:
        yield from source.keys(env)


def _flatten(value: Any, path: Key = ()) -> Iterator[Tuple[Key, Any]]:
    # Dotted names are split, so that `{'populate.surplus': 'drop'}` is the
    # same as `{'populate': {'surplus': 'drop'}}`.
    if isinstance(value, dict) and (value or not path):
        for k, v in value.items():
            yield from _flatten(v, path + tuple(str(k).split('.')))
    else:
        yield path, value


def _unflatten(config: Dict[Key, Any]) -> dict:
    result = {}
    for key, value in config.items():
        node = result
        for name in key[:-1]:
            node = node.setdefault(name, {})
        node[key[-1]] = value
    return result
