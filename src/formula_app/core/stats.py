"""
Probability helpers for formulas:
- outcome probabilities per proficiency level (band widths of the table)
- expected yields of a formula
- Monte-Carlo sampling of outcomes
"""

from typing import Dict, Optional

from .formula import Formula
from .outcomes import BANDED_OUTCOMES, DEFAULT_RULES, FormulaOutcome, OutcomeRules

__all__ = [
    "outcome_probabilities",
    "expected_yields",
    "sample_outcomes",
]


def outcome_probabilities(
    level: int,
    rules: Optional[OutcomeRules] = None,
) -> Dict[FormulaOutcome, float]:
    """
    Probability of each outcome at `level` for a uniform chance in [0, 1).

      FAIL    : 0            <= chance < t_fail
      PARTIAL : t_fail       <= chance < t_partial
      NORMAL  : t_partial    <= chance < t_normal
      BONUS   : t_normal     <= chance < 1

    Returns: dict[outcome] -> probability (sums to 1).
    """
    rules = rules or DEFAULT_RULES
    probs: Dict[FormulaOutcome, float] = {}
    lower = 0.0
    for outcome, bound in zip(BANDED_OUTCOMES, rules.thresholds_for(level)):
        probs[outcome] = bound - lower
        lower = bound
    probs[FormulaOutcome.BONUS] = 1.0 - lower
    return probs


def expected_yields(formula: Formula) -> Dict[str, float]:
    """Mean output quantity per resource at the formula's current level."""
    if formula.outcome_override is not None:
        weights = {formula.outcome_override: 1.0}
    else:
        weights = outcome_probabilities(formula.proficiency_level, formula.rules)

    expected = {name: 0.0 for name in formula.outputs}
    for outcome, p in weights.items():
        if p <= 0:
            continue
        for name, qty in formula.yields_for(outcome).items():
            expected[name] += p * qty
    return expected


def sample_outcomes(formula: Formula, trials: int) -> Dict[FormulaOutcome, int]:
    """Roll the formula's outcome `trials` times and count each result."""
    if trials < 0:
        raise ValueError(f"trials must be >= 0, got {trials}")
    counts: Dict[FormulaOutcome, int] = {o: 0 for o in FormulaOutcome}
    for _ in range(trials):
        counts[formula.roll_outcome()] += 1
    return counts
