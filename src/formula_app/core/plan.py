# src/formula_app/core/plan.py
"""
Plan: an ordered sequence of formulas.

Formulas in a plan are applied one after another, each on its own; the outputs
of one are never fed into the next.
"""

from typing import Iterable, Iterator, List, Optional
import copy
import logging

from .formula import Formula, ResourceMap


class Plan:
    def __init__(self, formulas: Optional[Iterable[Formula]] = None) -> None:
        self._formulas: List[Formula] = []
        for formula in formulas or ():
            self.add_formula(formula)

    def __len__(self) -> int:
        return len(self._formulas)

    def __iter__(self) -> Iterator[Formula]:
        return iter(list(self._formulas))

    def __getitem__(self, index: int) -> Formula:
        return self._formulas[index]

    def add_formula(self, formula: Formula) -> None:
        """Append a formula to the end of the sequence."""
        if not isinstance(formula, Formula):
            raise TypeError(f"Plan accepts Formula objects only, got {type(formula).__name__}.")
        self._formulas.append(formula)

    def remove_last_formula(self) -> None:
        """Drop the last formula; does nothing on an empty plan."""
        if self._formulas:
            self._formulas.pop()

    def replace_formula(self, index: int, formula: Formula) -> None:
        if not isinstance(formula, Formula):
            raise TypeError(f"Plan accepts Formula objects only, got {type(formula).__name__}.")
        if not (0 <= index < len(self._formulas)):
            raise IndexError(f"index {index} out of bounds (plan has {len(self._formulas)} formulas)")
        self._formulas[index] = formula

    def apply_all(self) -> List[ResourceMap]:
        """Apply every formula in insertion order; one result dict per formula."""
        results = [formula.apply() for formula in self._formulas]
        logging.info("[Plan] applied %d formulas", len(results))
        return results

    def copy(self) -> "Plan":
        """Deep copy: formulas, their levels and random state are duplicated."""
        return copy.deepcopy(self)
