"""Default rule checker.

Forms only need a `check(values) -> ErrorReport` contract from their rules,
`RuleSet` is a small implementation of it, enough for common field checks.
Each rule is a callable taking a field value and returning an error message
or `None`.
"""

from __future__ import annotations

from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional

from formtree import exceptions
from formtree.validation.report import ErrorReport

Rule = Callable[[Any], Optional[str]]


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def required(message: str = "can't be blank") -> Rule:
    def rule(value):
        if is_blank(value):
            return message
    return rule


def length(min: int = None, max: int = None) -> Rule:
    def rule(value):
        if is_blank(value):
            return None
        size = len(value)
        if min is not None and size < min:
            return f"is too short (minimum is {min} characters)"
        if max is not None and size > max:
            return f"is too long (maximum is {max} characters)"
    return rule


def choices(values) -> Rule:
    values = list(values)

    def rule(value):
        if is_blank(value):
            return None
        if value not in values:
            return f"is not included in the list: {', '.join(map(str, values))}"
    return rule


def custom(func: Callable[[Any], bool], message: str = "is invalid") -> Rule:
    def rule(value):
        if not func(value):
            return message
    return rule


class RuleSet:

    def __init__(self, rules: Mapping[str, List[Rule]] = None):
        self.rules: Dict[str, List[Rule]] = {}
        for name, items in (rules or {}).items():
            self.add(name, *items)

    def __repr__(self):
        return f'<{type(self).__module__}.{type(self).__name__}({list(self.rules)!r})>'

    def add(self, name: str, *rules: Rule) -> RuleSet:
        self.rules.setdefault(name, []).extend(rules)
        return self

    def check(self, values: Mapping[str, Any]) -> ErrorReport:
        report = ErrorReport()
        for name, rules in self.rules.items():
            value = values.get(name)
            for rule in rules:
                message = rule(value)
                if message:
                    report.add(name, message)
        return report

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> RuleSet:
        """Build rules from plain data, as given in YAML schemas.

            title:
              required: true
              length: {max: 60}
              choices: [a, b]

        """
        ruleset = cls()
        for name, params in data.items():
            for rule, arg in params.items():
                if rule not in LOADERS:
                    raise exceptions.InvalidParameterValue(
                        param='rules',
                        given=rule,
                        choices=', '.join(LOADERS),
                    )
                loaded = LOADERS[rule](arg)
                if loaded is not None:
                    ruleset.add(name, loaded)
        return ruleset


LOADERS: Dict[str, Callable[[Any], Optional[Rule]]] = {
    'required': lambda arg: required() if arg else None,
    'length': lambda arg: length(**arg),
    'choices': choices,
}
