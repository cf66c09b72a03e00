from typing import Any
from typing import Dict
from typing import Iterable
from typing import Optional
from typing import Tuple

import logging
import re


log = logging.getLogger(__name__)


class UnknownValue:

    def __str__(self):
        return '[UNKNOWN]'

    __repr__ = __str__


UNKNOWN_VALUE = UnknownValue()


# Order in which context variables are shown, everything else goes after
# these, sorted by name.
CONTEXT_ORDER = [
    'component',
    'manifest',
    'schema',
    'form',
    'property',
    'index',
    'model',
    'accessor',
]


def resolve_context_vars(schema: Dict[str, str], this: Optional[Any], kwargs: dict):
    """Resolve error context from `this` component and given kwargs.

    `schema` maps context names to dotted paths, starting from one of the
    kwargs names, for example `{'schema': 'this.parent.name'}`. A path part
    ending with `()` is called.
    """
    if this is not None:
        from formtree import commands
        import formtree.core.errors  # noqa: registers get_error_context
        schema = {
            **commands.get_error_context(this),
            **schema,
        }
        kwargs = {**kwargs, 'this': this}

    added = set()
    context = {}
    if this is not None:
        context['component'] = type(this).__module__ + '.' + type(this).__name__
    for k, path in schema.items():
        path = path or k
        name, *names = path.split('.')
        if name not in kwargs:
            continue
        added.add(name)
        value = kwargs
        for name in [name] + names:
            func = name.endswith('()')
            if func:
                name = name[:-2]
            if isinstance(value, dict):
                value = value.get(name)
            elif hasattr(value, name):
                value = getattr(value, name)
            else:
                value = UNKNOWN_VALUE
                break
            if func:
                value = value()
        if value is not UNKNOWN_VALUE:
            context[k] = value

    for k in set(kwargs) - added:
        v = kwargs[k]
        if not isinstance(v, (int, float, str)):
            v = str(v)
        context[k] = v

    names = CONTEXT_ORDER + [x for x in schema if x not in CONTEXT_ORDER]
    names += [x for x in kwargs if x not in names]

    def sort_key(item: Tuple[str, Any]) -> Tuple[int, str]:
        key = item[0]
        try:
            return names.index(key), key
        except ValueError:
            return len(names), key

    return {k: v for k, v in sorted(context.items(), key=sort_key)}


class BaseError(Exception):
    type: str = None
    template: str = None
    context: Dict[str, Any] = {}

    def __init__(self, *args, **kwargs):
        if len(args) == 0:
            this = None
        elif len(args) == 1:
            this = args[0]
        else:
            this = None
            log.error("Only one positional argument is alowed, but %d was given.", len(args), stack_info=True)

        self.type = this.type if this is not None and getattr(this, 'type', None) else 'system'
        self.context = resolve_context_vars(self.context, this, kwargs)
        super().__init__(self.message)

    def __str__(self):
        return (
            self.message + '\n' +
            ('  Context:\n' if self.context else '') +
            ''.join(
                f'    {k}: {v}\n'
                for k, v in self.context.items()
            )
        )

    @property
    def message(self):
        try:
            return _render_template(self)
        except KeyError:
            log.exception("Can't render error message for %s.", self.__class__.__name__)
            return self.template


def error_response(error: BaseError):
    return {
        'type': error.type,
        'code': type(error).__name__,
        'template': error.template,
        'context': error.context,
        'message': error.message,
    }


def _render_template(error: BaseError):
    context = error.context
    try:
        return error.template.format(**context)
    except KeyError:
        context = context.copy()
        template_vars_re = re.compile(r'\{(\w+)')
        for match in template_vars_re.finditer(error.template):
            name = match.group(1)
            if name not in context:
                context[name] = UNKNOWN_VALUE
        return error.template.format(**context)


class MultipleErrors(Exception):

    def __init__(self, errors: Iterable[BaseError]):
        self.errors = list(errors)
        super().__init__(
            'Multiple errors:\n' + ''.join([
                f' - {error.message}\n' +
                '     Context:\n' + ''.join(
                    f'       {k}: {v}\n' for k, v in error.context.items()
                )
                for error in self.errors
            ])
        )


class DefinitionError(BaseError):
    template = "Invalid schema definition."


class DuplicateProperty(DefinitionError):
    template = (
        "Property {property!r} is already defined in {schema!r} schema, "
        "use `inherit` or `replace` to override it."
    )


class MissingChildSchema(DefinitionError):
    template = "Child schema is not given for {kind} property {property!r}."


class UnknownParameter(DefinitionError):
    template = "Unknown parameter {param!r}."


class MissingRequiredParameter(DefinitionError):
    template = "Parameter {param!r} is required."


class InvalidParameterValue(DefinitionError):
    template = "Invalid {param!r} value {given!r}, expected one of: {choices}."


class UnknownPropertyType(DefinitionError):
    template = "Unknown property type {given!r}, expected one of: {choices}."


class UnknownSchemaReference(DefinitionError):
    template = "Schema {ref!r} is not defined."


class CircularSchemaReference(DefinitionError):
    template = "Circular schema reference: {chain}."


class DuplicateSchema(DefinitionError):
    template = "Schema {name!r} is already defined in {manifest!r} manifest."


class InvalidManifestFile(DefinitionError):
    template = "Error while parsing {filename!r} manifest file: {error}"


class FrozenError(DefinitionError):
    template = "Can't set {attr!r}, schema definition is already built."


class MissingAccessor(BaseError):
    template = "Model {model} does not have {mode} {accessor!r}."


class UnknownOwnerRole(BaseError):
    template = "Property {property!r} is owned by {role!r}, but form has no model for it."


class MissingNestedModel(BaseError):
    template = (
        "Can't populate {property!r}, there is no model to populate and "
        "`populate_if_empty` is not set."
    )


class PopulationError(BaseError):
    template = "Invalid input for {property!r}."


class InvalidInput(PopulationError):
    template = "Form input must be a mapping, got {given}."


class InvalidNestedValue(PopulationError):
    template = "Nested property {property!r} expects a mapping, got {given}."


class InvalidCollectionValue(PopulationError):
    template = "Collection property {property!r} expects a list, got {given}."


class InvalidCollectionItem(PopulationError):
    template = "Item {index} of collection {property!r} must be a mapping, got {given}."


class SurplusItems(PopulationError):
    template = (
        "Collection {property!r} got {given} items, but {existing} items "
        "already exist."
    )


class PersistenceFailure(BaseError):
    template = "Model {model} was not persisted."


class InvalidConfigValue(BaseError):
    template = "Invalid value {given!r} for {option!r} option, expected one of: {choices}."
