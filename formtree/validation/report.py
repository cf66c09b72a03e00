from __future__ import annotations

from typing import Dict
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Tuple
from typing import Union

# Nested report of a single form, or reports of collection items by index.
ChildReport = Union['ErrorReport', Dict[int, 'ErrorReport']]


class ErrorReport:
    """Validation errors of a form tree.

    Own messages are kept by property name, reports of nested forms are kept
    by property name too, for collections by property name and item index.

    A report is falsy when neither it nor any nested report has messages:

        >>> report = ErrorReport()
        >>> bool(report)
        False
        >>> report.add('title', "can't be blank")
        >>> report.flatten()
        {'title': ["can't be blank"]}

    """

    messages: Dict[str, List[str]]
    children: Dict[str, ChildReport]

    def __init__(self, messages: Mapping[str, List[str]] = None):
        self.messages = {}
        self.children = {}
        for name, msgs in (messages or {}).items():
            for msg in msgs:
                self.add(name, msg)

    def __repr__(self):
        return f'<{type(self).__module__}.{type(self).__name__}({self.flatten()!r})>'

    def __bool__(self):
        return bool(self.messages) or any(
            _child_has_errors(child) for child in self.children.values()
        )

    def __eq__(self, other):
        if isinstance(other, ErrorReport):
            return self.flatten() == other.flatten()
        return NotImplemented

    def add(self, name: str, message: str) -> None:
        self.messages.setdefault(name, []).append(message)

    def update(self, other: Union[ErrorReport, Mapping[str, List[str]], None]) -> None:
        """Merge messages given by a rule checker into this report."""
        if other is None:
            return
        if isinstance(other, ErrorReport):
            for name, msgs in other.messages.items():
                for msg in msgs:
                    self.add(name, msg)
            for name, child in other.children.items():
                self.nest(name, child)
        else:
            for name, msgs in other.items():
                if isinstance(msgs, str):
                    msgs = [msgs]
                for msg in msgs:
                    self.add(name, msg)

    def nest(self, name: str, report: ChildReport) -> None:
        if not _child_has_errors(report):
            return
        current = self.children.get(name)
        if isinstance(current, ErrorReport) and isinstance(report, ErrorReport):
            current.update(report)
        elif isinstance(current, dict) and isinstance(report, dict):
            for index, item in report.items():
                if index in current:
                    current[index].update(item)
                else:
                    current[index] = item
        elif isinstance(report, dict):
            self.children[name] = dict(report)
        else:
            self.children[name] = report

    def items(self, prefix: str = '') -> Iterator[Tuple[str, List[str]]]:
        for name, msgs in self.messages.items():
            yield prefix + name, msgs
        for name, child in self.children.items():
            if isinstance(child, ErrorReport):
                yield from child.items(f'{prefix}{name}.')
            else:
                for index, item in sorted(child.items()):
                    yield from item.items(f'{prefix}{name}[{index}].')

    def flatten(self) -> Dict[str, List[str]]:
        return {name: list(msgs) for name, msgs in self.items()}

    def to_dict(self) -> dict:
        result = {name: list(msgs) for name, msgs in self.messages.items()}
        for name, child in self.children.items():
            if isinstance(child, ErrorReport):
                result[name] = child.to_dict()
            else:
                result[name] = {
                    index: item.to_dict()
                    for index, item in sorted(child.items())
                    if item
                }
        return result


def _child_has_errors(child: ChildReport) -> bool:
    if isinstance(child, ErrorReport):
        return bool(child)
    return any(bool(item) for item in child.values())
