"""
Rule building: turns off/maybe-off facts into compiled matchers.

Expression templates live in the ``service_regex`` table so new rotations can
be onboarded without a deploy. A template mentions the position through a
placeholder (``:position``) that is filled in per request, because the
position that is off changes with the day and block type.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from offdays.config import CATEGORY_ORDER, Category, Settings
from offdays.models import OffRotations
from offdays.table_store import In, TableStore

logger = logging.getLogger("offdays.rules")


class Matcher(Protocol):
    def matches(self, text: str) -> bool:
        ...


Rules = List[Tuple[Category, Matcher]]


class PatternMatcher:
    """Case-insensitive regular expression searched anywhere in the text."""

    def __init__(self, expression: str):
        self.expression = expression
        self.pattern = re.compile(expression, re.IGNORECASE)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text or "") is not None

    def __repr__(self) -> str:
        return f"PatternMatcher({self.expression!r})"


class NeverMatcher:
    def matches(self, text: str) -> bool:
        return False

    def __repr__(self) -> str:
        return "NeverMatcher()"


class RuleCompiler(Protocol):
    def compile_rule(self, template: str, position: Optional[str] = None) -> Matcher:
        ...

    def combine(self, matchers: Sequence[Matcher]) -> Matcher:
        ...


class RegexRuleCompiler:
    """Default engine: literal placeholder substitution and ``re`` patterns."""

    def __init__(self, placeholder: str = ":position"):
        self.placeholder = placeholder

    def compile_rule(self, template: str, position: Optional[str] = None) -> PatternMatcher:
        expression = template if position is None else template.replace(self.placeholder, position)
        return PatternMatcher(expression)

    def combine(self, matchers: Sequence[PatternMatcher]) -> PatternMatcher:
        if len(matchers) == 1:
            return matchers[0]
        return PatternMatcher("(?:" + "|".join(m.expression for m in matchers) + ")")


async def fetch_service_expressions(store: TableStore, settings: Settings,
                                    services: Iterable[str]) -> Dict[str, str]:
    """Service name -> stored expression template, for the given services only."""
    names = tuple(dict.fromkeys(services))
    if not names:
        return {}
    rows = await store.scan(
        settings.table_service_regex,
        where=In("service", names),
        projection=("service", "expression"),
    )
    return {row["service"]: row["expression"] for row in rows if "expression" in row}


async def build_rules(store: TableStore, settings: Settings, rotations: OffRotations,
                      compiler: Optional[RuleCompiler] = None,
                      exhaustive: bool = True) -> Rules:
    """
    Build one matcher per category, in ``CATEGORY_ORDER``.

    The generic maybe-off template joins MAYBE_OFF. A category with nothing
    to match is dropped, except that the non-exhaustive variant always keeps
    MAYBE_OFF (as a never-matching rule when no generic template is stored).
    """
    compiler = compiler or RegexRuleCompiler(settings.position_placeholder)
    generic_key = settings.maybe_off_service
    expressions = await fetch_service_expressions(
        store, settings, [*rotations.services(), generic_key]
    )

    facts = rotations.by_category()
    rules: Rules = []
    for category in CATEGORY_ORDER:
        matchers = []
        for service, position in facts[category].items():
            template = expressions.get(service)
            if template is None:
                logger.warning("No expression stored for service %r, skipping", service)
                continue
            matchers.append(compiler.compile_rule(template, position))
        if category == Category.MAYBE_OFF and generic_key in expressions:
            matchers.append(compiler.compile_rule(expressions[generic_key]))

        if matchers:
            rules.append((category, compiler.combine(matchers)))
        elif category == Category.MAYBE_OFF and not exhaustive:
            rules.append((category, NeverMatcher()))
    return rules
