from __future__ import annotations

import logging
import pathlib
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from formtree import commands
from formtree import exceptions
from formtree.components import Context
from formtree.components import Manifest
from formtree.components import Schema
from formtree.schemas.builder import SchemaBuilder

log = logging.getLogger(__name__)

yaml = YAML(typ='safe')

# Top level keys of a schema document.
DOCUMENT_PARAMS = {
    'name',
    'extends',
    'include',
    'properties',
    'rules',
}


def read_yaml_file(path: pathlib.Path) -> Iterator[dict]:
    try:
        with path.open() as f:
            for data in yaml.load_all(f):
                yield data
    except YAMLError as e:
        raise exceptions.InvalidManifestFile(
            filename=str(path),
            error=str(e),
        )


def read_manifest(
    context: Context,
    paths: Iterable[Union[str, pathlib.Path]],
    *,
    name: str = 'default',
) -> Manifest:
    """Load, link and check schemas from YAML files."""
    manifest = Manifest(name)
    docs: List[dict] = []
    for path in paths:
        path = pathlib.Path(path)
        manifest.path = manifest.path or path
        log.info("Reading schemas from %s.", path)
        docs.extend(read_yaml_file(path))
    commands.load(context, manifest, docs)
    commands.link(context, manifest)
    commands.check(context, manifest)
    return manifest


@commands.load.register(Context, Manifest, (list, tuple))
def load(context: Context, manifest: Manifest, docs: list) -> Manifest:
    for doc in docs:
        if not doc:
            continue
        for param in doc:
            if param not in DOCUMENT_PARAMS:
                raise exceptions.UnknownParameter(manifest, param=param)
        name = doc.get('name')
        if not name:
            raise exceptions.MissingRequiredParameter(manifest, param='name')
        if name in manifest.data:
            raise exceptions.DuplicateSchema(manifest, name=name)
        manifest.data[name] = doc
    return manifest


class _Linker:
    """Builds manifest schemas, resolving references on demand."""

    def __init__(self, manifest: Manifest):
        self.manifest = manifest
        self.building: List[str] = []

    def __call__(self, name: str) -> Schema:
        manifest = self.manifest
        if name in manifest.schemas:
            return manifest.schemas[name]
        if name not in manifest.data:
            raise exceptions.UnknownSchemaReference(manifest, ref=name)
        if name in self.building:
            chain = self.building[self.building.index(name):] + [name]
            raise exceptions.CircularSchemaReference(
                manifest,
                chain=' -> '.join(chain),
            )

        self.building.append(name)
        doc = manifest.data[name]
        base = self(doc['extends']) if doc.get('extends') else None
        builder = SchemaBuilder(name, base=base, resolve=self)
        builder.declare_from(doc)
        manifest.schemas[name] = builder.build()
        self.building.pop()
        return manifest.schemas[name]


@commands.link.register(Context, Manifest)
def link(context: Context, manifest: Manifest) -> None:
    resolve = _Linker(manifest)
    for name in manifest.data:
        resolve(name)
    # Keep schemas in document order.
    manifest.schemas = {name: manifest.schemas[name] for name in manifest.data}
