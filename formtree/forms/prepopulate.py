from __future__ import annotations

import logging
from typing import Any
from typing import overload

from formtree import commands
from formtree.components import Context
from formtree.components import Form
from formtree.forms.components import PrepopulateContext
from formtree.types.datatype import Collection
from formtree.types.datatype import Nested
from formtree.types.datatype import Scalar

log = logging.getLogger(__name__)


@overload
@commands.prepopulate.register(Context, Form)
def prepopulate(context: Context, form: Form) -> Form:
    for prop in form.schema:
        if prop.prepopulator is not None:
            log.debug("Prepopulating %r of %r form.", prop.name, form.name)
            prop.prepopulator(form, PrepopulateContext(context, form, prop))
        commands.prepopulate(context, form, prop.dtype, form.values[prop.name])
    return form


@overload
@commands.prepopulate.register(Context, Form, Scalar, object)
def prepopulate(context: Context, form: Form, dtype: Scalar, value: Any) -> None:
    pass


@overload
@commands.prepopulate.register(Context, Form, Nested, object)
def prepopulate(context: Context, form: Form, dtype: Nested, value: Any) -> None:
    if value is not None:
        commands.prepopulate(context, value)


@commands.prepopulate.register(Context, Form, Collection, list)
def prepopulate(context: Context, form: Form, dtype: Collection, value: list) -> None:
    for child in value:
        commands.prepopulate(context, child)
