from typing import Any
from typing import Dict


class NotAvailable:

    def __repr__(self):
        return "<NA>"

    def __bool__(self):
        return False


NA = NotAvailable()


def resolve_schema(obj: Any, Base: type) -> Dict[str, dict]:
    # Merges `schema` class attributes from `Base` down to `type(obj)`, so
    # that subclasses only declare their own parameters.
    #
    #     class Base:
    #         schema = {'required': {'type': 'boolean', 'default': False}}
    #
    #     class Obj(Base):
    #         schema = {'items': {}}
    #
    #     resolve_schema(Obj(), Base)
    #     {'required': {'type': 'boolean', 'default': False}, 'items': {}}

    bases = []
    for cls in type(obj).mro():
        bases.append(cls)
        if cls is Base:
            break
    else:
        raise Exception(f"Could not find specified base {Base!r} on {type(obj)}.")
    schema = {}
    for cls in reversed(bases):
        schema.update(cls.__dict__.get('schema', {}))
    return schema
