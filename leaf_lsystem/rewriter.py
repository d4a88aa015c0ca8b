"""
Grammar rewriter: expands an axiom generation by generation.

Every generation is matched against the previous, unmodified one. For each
symbol the first rule (in declaration order) that matches wins; symbols that
no rule matches are copied through unchanged.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np

from leaf_lsystem.errors import ExpansionLimitError, InvalidInputError
from leaf_lsystem.rules import (
    COMPILED_RULES,
    ContextRule,
    Rule,
    RuleKind,
    RuleSet,
    StochasticRule,
    compile_rules,
)

logger = logging.getLogger(__name__)

Rules = Union[RuleSet, Iterable[Rule], Iterable[str]]


def _flatten(rules) -> Iterator:
    for r in rules:
        if r is None or isinstance(r, (str,) + COMPILED_RULES):
            yield r
        elif isinstance(r, (list, tuple)):
            yield from _flatten(r)
        else:
            raise InvalidInputError(f"Expected rule text or a compiled rule, got {r!r}")


def _as_rule_set(rules: Rules) -> RuleSet:
    if isinstance(rules, RuleSet):
        return rules
    if isinstance(rules, str):
        rules = [rules]
    try:
        flat = list(_flatten(rules))
    except TypeError:
        raise InvalidInputError(f"Rules must be a sequence, got {rules!r}")

    return compile_rules(flat)


def _context_matches(rule: ContextRule, generation: str, index: int) -> bool:
    before, after = rule.before, rule.after

    # too close to either end of the string, rule does not apply
    if before is not None and index < len(before):
        return False
    if after is not None and index + len(after) >= len(generation):
        return False

    start = index - len(before) if before is not None else index
    window = (before or "") + rule.focus + (after or "")
    return generation[start:start + len(window)] == window


def _draw_outcome(rule: StochasticRule, rng) -> str:
    if rng.random() <= rule.probability:
        return rule.outcome_a
    return rule.outcome_b


def rewrite_symbol(rule_set: RuleSet, generation: str, index: int, rng) -> str:
    """Return what the symbol at ``index`` of ``generation`` turns into."""
    symbol = generation[index]

    for rule in rule_set:
        if rule.kind is RuleKind.INERT or rule.focus != symbol:
            continue
        if rule.kind is RuleKind.SIMPLE:
            return rule.replacement
        if rule.kind is RuleKind.CONTEXT:
            if _context_matches(rule, generation, index):
                return rule.replacement
            continue
        if rule.kind is RuleKind.STOCHASTIC:
            return _draw_outcome(rule, rng)

    # implicit identity rule
    return symbol


def _next_generation(rule_set: RuleSet, generation: str, rng, max_length: Optional[int]) -> str:
    parts: List[str] = []
    length = 0
    for index in range(len(generation)):
        piece = rewrite_symbol(rule_set, generation, index, rng)
        length += len(piece)
        if max_length is not None and length > max_length:
            raise ExpansionLimitError(f"Expanded string exceeds max_length={max_length}")
        parts.append(piece)
    return "".join(parts)


def _check_cycles(cycles: int) -> None:
    if isinstance(cycles, bool) or not isinstance(cycles, (int, np.integer)):
        raise InvalidInputError(f"Cycle count must be an integer, got {cycles!r}")
    if cycles < 0:
        raise InvalidInputError("Cycle cannot be negative.")


def iter_generations(
    rules: Rules,
    axiom: str,
    cycles: int,
    rng=None,
    max_length: Optional[int] = None,
) -> Iterator[str]:
    """
    Yield the axiom followed by each of the ``cycles`` generations.

    Args:
        rules: RuleSet, compiled rules or raw rule text
        axiom: Starting string
        cycles: Number of rewrite passes (>= 0)
        rng: Any object with a ``random()`` method returning a float in [0, 1);
            defaults to an entropy seeded ``numpy.random.Generator``
        max_length: Optional cap on the length of any generation

    Raises:
        InvalidInputError: if ``cycles`` is negative
        ExpansionLimitError: if a generation grows past ``max_length``
    """
    _check_cycles(cycles)
    rule_set = _as_rule_set(rules)
    if rng is None:
        rng = np.random.default_rng()
    if not axiom:
        logger.warning("Enter an axiom to start the L-System.")
        axiom = ""

    current = axiom
    yield current
    for cycle in range(cycles):
        current = _next_generation(rule_set, current, rng, max_length)
        logger.debug(f"Generation {cycle + 1}: {len(current)} symbols")
        yield current


def expand(
    rules: Rules,
    axiom: str,
    cycles: int,
    rng=None,
    max_length: Optional[int] = None,
) -> str:
    """Expand ``axiom`` for ``cycles`` generations and return the last one."""
    _check_cycles(cycles)
    current = axiom
    for current in iter_generations(rules, axiom, cycles, rng=rng, max_length=max_length):
        pass
    return current


class LSystem:
    """
    Compiled L-system with its own random source.

    Args:
        axiom: Starting symbols
        rules: Raw rule text (e.g. ``["a=ab", "a<b>c=d", "b(.5)=x=y"]``)
            or an already compiled RuleSet
        seed: Seed for stochastic rules; None draws from system entropy
        max_length: Optional cap on the expanded string length
    """

    def __init__(
        self,
        axiom: str,
        rules: Rules,
        seed: Optional[int] = None,
        max_length: Optional[int] = None,
    ):
        self.axiom = axiom
        self.rules = _as_rule_set(rules)
        self.max_length = max_length
        self.rng = np.random.default_rng(seed)

    def generate(self, cycles: int) -> str:
        return expand(self.rules, self.axiom, cycles, rng=self.rng, max_length=self.max_length)

    def generations(self, cycles: int) -> Iterator[str]:
        return iter_generations(self.rules, self.axiom, cycles, rng=self.rng, max_length=self.max_length)
