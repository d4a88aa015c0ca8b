"""
Rule compiler: turns raw ``LHS=RHS`` text into typed rules.

Rules are classified once, here, so the rewriter only dispatches on
``rule.kind`` instead of inspecting text per symbol.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from leaf_lsystem.errors import RuleSyntaxError
from leaf_lsystem.symbols import (
    CHANCE_CLOSE,
    CHANCE_OPEN,
    CONTEXT_LEFT,
    CONTEXT_RIGHT,
    RULE_ONLY_SYMBOLS,
)

logger = logging.getLogger(__name__)


class RuleKind(enum.Enum):
    SIMPLE = "simple"
    CONTEXT = "context"
    STOCHASTIC = "stochastic"
    INERT = "inert"


@dataclass(frozen=True)
class SimpleRule:
    text: str
    focus: str
    replacement: str
    kind: RuleKind = field(default=RuleKind.SIMPLE, init=False)


@dataclass(frozen=True)
class ContextRule:
    """
    Replace ``focus`` only when it sits between ``before`` and ``after``.

    ``None`` means the side is absent; an empty string is a present but
    empty context.
    """
    text: str
    focus: str
    replacement: str
    before: Optional[str] = None
    after: Optional[str] = None
    kind: RuleKind = field(default=RuleKind.CONTEXT, init=False)


@dataclass(frozen=True)
class StochasticRule:
    """
    Replace ``focus`` with ``outcome_a`` when a draw lands within
    ``probability``, else with ``outcome_b`` (empty string deletes).
    """
    text: str
    focus: str
    probability: float
    outcome_a: str
    outcome_b: str = ""
    kind: RuleKind = field(default=RuleKind.STOCHASTIC, init=False)


@dataclass(frozen=True)
class InertRule:
    text: str
    kind: RuleKind = field(default=RuleKind.INERT, init=False)


Rule = Union[SimpleRule, ContextRule, StochasticRule, InertRule]
COMPILED_RULES = (SimpleRule, ContextRule, StochasticRule, InertRule)


@dataclass(frozen=True)
class SkippedRule:
    text: str
    reason: str


class RuleSet:
    """Ordered, immutable collection of compiled rules. Order is match priority."""

    def __init__(self, rules: Iterable[Rule] = (), skipped: Iterable[SkippedRule] = ()):
        self.rules: Tuple[Rule, ...] = tuple(rules)
        self.skipped: Tuple[SkippedRule, ...] = tuple(skipped)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __getitem__(self, index: int) -> Rule:
        return self.rules[index]

    def __repr__(self) -> str:
        return f"RuleSet({[r.text for r in self.rules]!r}, skipped={len(self.skipped)})"


def _parse_context(text: str, lhs: str, replacement: str) -> ContextRule:
    lt = lhs.find(CONTEXT_LEFT)
    gt = lhs.find(CONTEXT_RIGHT)

    if lt != -1 and gt != -1 and gt < lt:
        raise RuleSyntaxError(text, "'>' must come after '<'")

    before = lhs[:lt] if lt != -1 else None
    after = lhs[gt + 1:] if gt != -1 else None

    # whatever lies between the markers (or the string edges) is the focus
    start = lt + 1 if lt != -1 else 0
    end = gt if gt != -1 else len(lhs)
    focus = lhs[start:end]
    if len(focus) != 1:
        raise RuleSyntaxError(text, f"context rule needs exactly one focus symbol, got {focus!r}")
    if any(c in RULE_ONLY_SYMBOLS for c in (before or "") + (after or "")):
        raise RuleSyntaxError(text, "context contains rule-only symbols")

    return ContextRule(text, focus, replacement, before=before, after=after)


def _parse_stochastic(text: str, lhs: str, outcomes: List[str]) -> StochasticRule:
    opening = lhs.find(CHANCE_OPEN)
    closing = lhs.find(CHANCE_CLOSE)
    if opening != 1 or closing != len(lhs) - 1:
        raise RuleSyntaxError(text, "stochastic rule must look like 'a(p)'")

    chance = lhs[opening + 1:closing]
    if chance == "":
        probability = 0.0
    else:
        try:
            probability = float("0" + chance)
        except ValueError:
            raise RuleSyntaxError(text, f"unparsable probability {chance!r}")
    if not 0.0 <= probability <= 1.0:
        raise RuleSyntaxError(text, f"probability {probability} outside [0, 1]")

    outcome_b = outcomes[1] if len(outcomes) > 1 else ""
    return StochasticRule(text, lhs[0], probability, outcomes[0], outcome_b)


def parse_rule(text: str) -> Rule:
    """
    Compile a single rule.

    Args:
        text: ``LHS=RHS`` or ``LHS=RHS1=RHS2``

    Returns:
        One of SimpleRule, ContextRule, StochasticRule or InertRule

    Raises:
        RuleSyntaxError: if the text is not a usable rule
    """
    if not isinstance(text, str):
        raise RuleSyntaxError(repr(text), "rule must be a string")

    lhs, *rhs = text.split("=")
    if not lhs:
        raise RuleSyntaxError(text, "empty left-hand side")
    if not rhs:
        raise RuleSyntaxError(text, "missing right-hand side")
    if len(rhs) > 2:
        logger.warning(f"Rule {text!r} has more than two outcomes, extra ones are ignored")
        rhs = rhs[:2]

    if len(lhs) == 1:
        return SimpleRule(text, lhs, rhs[0])
    if CONTEXT_LEFT in lhs or CONTEXT_RIGHT in lhs:
        return _parse_context(text, lhs, rhs[0])
    if CHANCE_OPEN in lhs or CHANCE_CLOSE in lhs:
        return _parse_stochastic(text, lhs, rhs)

    logger.warning(f"Rule {text!r} is neither simple, context-sensitive nor stochastic; it will never match")
    return InertRule(text)


def compile_rules(texts: Iterable[Union[None, str, Rule]]) -> RuleSet:
    """
    Compile raw rule strings into a RuleSet, keeping declaration order.

    ``None`` entries are dropped and already compiled rules are kept as
    they are. Malformed rules are logged and recorded in
    ``RuleSet.skipped``; they never abort the compilation.
    """
    rules: List[Rule] = []
    skipped: List[SkippedRule] = []

    for text in texts:
        if text is None:
            continue
        if isinstance(text, COMPILED_RULES):
            rules.append(text)
            continue
        try:
            rules.append(parse_rule(text))
        except RuleSyntaxError as e:
            logger.warning(f"Skipping rule {e.text}: {e.reason}")
            skipped.append(SkippedRule(e.text, e.reason))

    if not rules:
        logger.warning("No rules added")

    return RuleSet(rules, skipped)
