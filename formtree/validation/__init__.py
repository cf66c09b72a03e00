from formtree.validation.report import ErrorReport  # noqa
from formtree.validation.rules import RuleSet  # noqa
