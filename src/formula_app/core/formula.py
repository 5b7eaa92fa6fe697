"""
Formula: a resource-transformation rule.

A formula turns a fixed set of input resources into a fixed set of output
resources. Each application scales the base outputs by the multiplier of one
FormulaOutcome, drawn from the outcome table at the formula's proficiency level
(or fixed up front with `outcome_override`).
"""

from collections.abc import Mapping
from fractions import Fraction
from typing import Dict, Optional, Union
import logging
import random

from formula_app.config import MAX_PROFICIENCY_LEVEL, START_PROFICIENCY_LEVEL
from .outcomes import DEFAULT_RULES, FormulaOutcome, OutcomeRules


# ---------- Exceptions ----------

class FormulaError(Exception):
    """Base error for formula problems."""


class InvalidFormulaError(FormulaError, ValueError):
    """Raised when inputs/outputs are missing or hold invalid entries."""


class ProficiencyLimitError(FormulaError, RuntimeError):
    """Raised when the proficiency level can no longer be increased."""


ResourceMap = Dict[str, int]


def round_half_up(value: Union[int, float, Fraction]) -> int:
    """Round a non-negative quantity to the nearest int, halves going up (exact, no float error)."""
    exact = Fraction(value)
    n, d = exact.numerator, exact.denominator
    return (2 * n + d) // (2 * d)


def _validated_copy(label: str, resources) -> ResourceMap:
    if resources is None:
        raise InvalidFormulaError(f"{label} can not be None.")
    if not isinstance(resources, Mapping):
        raise InvalidFormulaError(f"{label} must be a mapping of name -> quantity.")

    for name, quantity in resources.items():
        if not isinstance(name, str) or not name:
            raise InvalidFormulaError(f"{label} resource names must be non-empty strings.")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidFormulaError(f"{label} quantity for {name!r} must be an integer.")
        if quantity < 0:
            raise InvalidFormulaError(f"{label} quantities can not be negative ({name!r}: {quantity}).")
    return dict(resources)


class Formula:
    """
    Converts `inputs` into `outputs`, with a stochastic yield.

    Args:
        inputs: resource name -> required quantity (non-negative ints).
        outputs: resource name -> base yield (non-negative ints).
        outcome_override: when set, every apply() uses this outcome and the
            random source is never consulted.
        rng: anything with a ``random()`` method returning a float in [0, 1).
            Each formula gets its own ``random.Random`` when omitted.
        rules: outcome table; defaults to DEFAULT_RULES.
        max_proficiency_level: highest level accepted by
            increase_proficiency_level() as a starting point.

    Raises:
        InvalidFormulaError
    """

    def __init__(
        self,
        inputs: Mapping,
        outputs: Mapping,
        outcome_override: Optional[FormulaOutcome] = None,
        *,
        rng=None,
        rules: Optional[OutcomeRules] = None,
        max_proficiency_level: int = MAX_PROFICIENCY_LEVEL,
    ) -> None:
        self._inputs = _validated_copy("Inputs", inputs)
        self._outputs = _validated_copy("Outputs", outputs)

        if outcome_override is not None and not isinstance(outcome_override, FormulaOutcome):
            raise InvalidFormulaError(f"Unknown outcome override: {outcome_override!r}")

        if isinstance(max_proficiency_level, bool) or not isinstance(max_proficiency_level, int):
            raise InvalidFormulaError(
                f"max_proficiency_level must be an integer, got {max_proficiency_level!r}."
            )
        if max_proficiency_level < START_PROFICIENCY_LEVEL:
            raise InvalidFormulaError(
                f"max_proficiency_level can not be below {START_PROFICIENCY_LEVEL} ({max_proficiency_level})."
            )

        self._outcome_override = outcome_override
        self._proficiency_level = START_PROFICIENCY_LEVEL
        self._max_proficiency_level = max_proficiency_level
        self._rules = rules if rules is not None else DEFAULT_RULES
        self._rng = rng if rng is not None else random.Random()

    def __repr__(self) -> str:
        return (
            f"Formula(inputs={self._inputs!r}, outputs={self._outputs!r}, "
            f"level={self._proficiency_level})"
        )

    # -------- Read-only views --------

    @property
    def inputs(self) -> ResourceMap:
        return dict(self._inputs)

    @property
    def outputs(self) -> ResourceMap:
        return dict(self._outputs)

    @property
    def proficiency_level(self) -> int:
        return self._proficiency_level

    @property
    def max_proficiency_level(self) -> int:
        return self._max_proficiency_level

    @property
    def outcome_override(self) -> Optional[FormulaOutcome]:
        return self._outcome_override

    @property
    def rules(self) -> OutcomeRules:
        return self._rules

    # -------- Proficiency --------

    def increase_proficiency_level(self) -> None:
        # `<=` lets the counter reach max + 1; lookups past the table clamp anyway.
        if self._proficiency_level <= self._max_proficiency_level:
            self._proficiency_level += 1
            return
        raise ProficiencyLimitError(
            f"Proficiency is already at maximum level ({self._proficiency_level})."
        )

    # -------- Application --------

    def roll_outcome(self) -> FormulaOutcome:
        """Pick the outcome of one application (one random draw unless overridden)."""
        if self._outcome_override is not None:
            return self._outcome_override
        chance = self._rng.random()
        outcome = self._rules.outcome_for(self._proficiency_level, chance)
        logging.debug(
            "[Formula] level=%d chance=%.4f -> %s",
            self._proficiency_level, chance, outcome.value,
        )
        return outcome

    def yields_for(self, outcome: FormulaOutcome) -> ResourceMap:
        """Output quantities for a given outcome, without any random draw."""
        # Decimal reading of the multiplier (1.1 -> 11/10) keeps big quantities exact.
        scale = Fraction(repr(self._rules.multiplier(outcome)))
        return {
            name: round_half_up(quantity * scale)
            for name, quantity in self._outputs.items()
        }

    def apply(self) -> ResourceMap:
        return self.yields_for(self.roll_outcome())
