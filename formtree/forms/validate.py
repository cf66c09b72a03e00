from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import overload

from formtree import commands
from formtree.components import Context
from formtree.components import Form
from formtree.types.datatype import Collection
from formtree.types.datatype import Nested
from formtree.types.datatype import Scalar
from formtree.utils.schema import NA
from formtree.validation.report import ChildReport
from formtree.validation.report import ErrorReport

log = logging.getLogger(__name__)


@overload
@commands.validate.register(Context, Form)
def validate(context: Context, form: Form, data: Any = NA, **kwargs) -> bool:
    if data is not NA:
        commands.populate(context, form, data, **kwargs)
    report = commands.collect_errors(context, form)
    if report:
        log.debug("Form %r is invalid: %s", form.name, report.flatten())
    return not report


@commands.validate.register(Context, Form, object)
def validate(context: Context, form: Form, data: Any, **kwargs) -> bool:
    return commands.validate(context, form, data=NA if data is None else data, **kwargs)


@overload
@commands.collect_errors.register(Context, Form)
def collect_errors(context: Context, form: Form) -> ErrorReport:
    report = ErrorReport()
    rules = form.schema.rules
    if rules is not None:
        # Rule checkers get a read-only view, so values can't be changed.
        values = MappingProxyType(form.values)
        if hasattr(rules, 'check'):
            report.update(rules.check(values))
        else:
            report.update(rules(values))
    for prop in form.schema:
        child = commands.collect_errors(context, prop.dtype, form.values[prop.name])
        if child is not None:
            report.nest(prop.name, child)
    form.errors = report
    return report


@overload
@commands.collect_errors.register(Context, Scalar, object)
def collect_errors(context: Context, dtype: Scalar, value: Any) -> None:
    return None


@overload
@commands.collect_errors.register(Context, Nested, Form)
def collect_errors(context: Context, dtype: Nested, value: Form) -> ErrorReport:
    return commands.collect_errors(context, value)


@overload
@commands.collect_errors.register(Context, Nested, type(None))
def collect_errors(context: Context, dtype: Nested, value: None) -> None:
    return None


@commands.collect_errors.register(Context, Collection, list)
def collect_errors(
    context: Context,
    dtype: Collection,
    value: List[Form],
) -> Optional[ChildReport]:
    reports: Dict[int, ErrorReport] = {}
    for i, child in enumerate(value):
        reports[i] = commands.collect_errors(context, child)
    return reports
