from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Mapping, Optional, Union
from types import MappingProxyType
from pathlib import Path
import math

from formula_app import paths
from formula_app.utils.jsonio import read_json


# ---------- Outcomes ----------

class FormulaOutcome(Enum):
    """Result of a single formula application."""
    FAIL = "Fail"
    PARTIAL = "Partial"
    NORMAL = "Normal"
    BONUS = "Bonus"


# Bands are checked in this order; BONUS takes whatever is left above NORMAL.
BANDED_OUTCOMES: Tuple[FormulaOutcome, ...] = (
    FormulaOutcome.FAIL,
    FormulaOutcome.PARTIAL,
    FormulaOutcome.NORMAL,
)


# ---------- Exceptions ----------

class RulesError(Exception):
    """Base error for outcome table problems."""


class InvalidRulesError(RulesError):
    """Raised when JSON is missing required keys or has wrong types."""


class LevelOutOfRange(RulesError):
    """Raised when a negative proficiency level is looked up."""


OutcomeMap = Mapping[FormulaOutcome, float]
Thresholds = Tuple[float, float, float]


# ---------- Data Model ----------

@dataclass(frozen=True)
class OutcomeRules:
    """
    Immutable outcome table.

    Fields:
        multipliers: yield multiplier per outcome.
        thresholds_by_level: per proficiency level, the exclusive upper bounds of
            the FAIL, PARTIAL and NORMAL bands (ascending). A chance at or above
            the last bound is a BONUS.
    """
    multipliers: OutcomeMap
    thresholds_by_level: Mapping[int, Thresholds]

    # -------- Construction / Validation --------
    @classmethod
    def from_dict(cls, data) -> "OutcomeRules":
        """
        Parse and normalize a raw JSON dict into an OutcomeRules object.
        Expected sections:
          - multipliers:          {"Fail": 0.0, "Partial": 0.75, ...}
          - thresholds_by_level:  {"0": {"Fail": 0.25, "Partial": 0.5, "Normal": 0.95}, ...}
        """
        if not isinstance(data, dict):
            raise InvalidRulesError("Rules JSON must be a dict.")

        raw_multipliers = data.get("multipliers") or {}
        raw_thresholds = data.get("thresholds_by_level") or {}
        if not isinstance(raw_multipliers, dict) or not isinstance(raw_thresholds, dict):
            raise InvalidRulesError("multipliers and thresholds_by_level must be objects.")

        try:
            multipliers = {
                outcome: float(raw_multipliers[outcome.value])
                for outcome in FormulaOutcome
                if outcome.value in raw_multipliers
            }
            thresholds = {}
            for raw_level, row in raw_thresholds.items():
                level = int(raw_level)
                if level in thresholds:
                    raise InvalidRulesError(f"Duplicate level key '{raw_level}' (level {level}).")
                thresholds[level] = tuple(float(row[o.value]) for o in BANDED_OUTCOMES)
        except KeyError as e:
            raise InvalidRulesError(f"Missing threshold for {e.args[0]!r}.") from e
        except (TypeError, ValueError) as e:
            raise InvalidRulesError(f"Failed to coerce values: {e}") from e

        rules = cls(
            multipliers=MappingProxyType(multipliers),
            thresholds_by_level=MappingProxyType(thresholds),
        )
        rules._validate()
        return rules

    def _validate(self) -> None:
        missing = [o.value for o in FormulaOutcome if o not in self.multipliers]
        if missing:
            raise InvalidRulesError(f"Missing multipliers: {', '.join(missing)}")
        if not all(math.isfinite(m) and m >= 0 for m in self.multipliers.values()):
            raise InvalidRulesError("multipliers must be finite and non-negative.")

        if not self.thresholds_by_level:
            raise InvalidRulesError("Missing or empty section: thresholds_by_level")
        if 0 not in self.thresholds_by_level:
            raise InvalidRulesError("thresholds_by_level must define level 0.")

        for level, bounds in self.thresholds_by_level.items():
            if level < 0:
                raise InvalidRulesError(f"Invalid level key '{level}' (expected >= 0).")
            if not all(math.isfinite(b) and 0.0 <= b <= 1.0 for b in bounds):
                raise InvalidRulesError(f"Level {level}: thresholds must be within [0, 1].")
            if list(bounds) != sorted(bounds):
                raise InvalidRulesError(f"Level {level}: thresholds must be ascending.")

    # mappingproxy fields can't be pickled; the table is immutable, so share it.
    def __copy__(self) -> "OutcomeRules":
        return self

    def __deepcopy__(self, memo) -> "OutcomeRules":
        return self

    # -------- Query Helpers (pure, no IO) --------

    def levels(self) -> Tuple[int, ...]:
        """Return defined levels sorted ascending (e.g., (0,1,2))."""
        return tuple(sorted(self.thresholds_by_level.keys()))

    def tier_for(self, level: int) -> int:
        """Highest defined level not above `level` (levels past the table reuse the last row)."""
        if level < 0:
            raise LevelOutOfRange(f"Invalid proficiency level {level}. Expected >= 0.")
        return max(lvl for lvl in self.thresholds_by_level if lvl <= level)

    def thresholds_for(self, level: int) -> Thresholds:
        return self.thresholds_by_level[self.tier_for(level)]

    def outcome_for(self, level: int, chance: float) -> FormulaOutcome:
        """Map a uniform draw in [0, 1) to an outcome; first band whose bound exceeds it wins."""
        if not (0.0 <= chance < 1.0):
            raise ValueError(f"chance must be in [0, 1), got {chance}")
        for outcome, bound in zip(BANDED_OUTCOMES, self.thresholds_for(level)):
            if chance < bound:
                return outcome
        return FormulaOutcome.BONUS

    def multiplier(self, outcome: FormulaOutcome) -> float:
        return self.multipliers[outcome]

    def to_dict(self) -> dict:
        """Serialize back to a JSON-safe dict."""
        return {
            "multipliers": {o.value: m for o, m in self.multipliers.items()},
            "thresholds_by_level": {
                str(level): {o.value: b for o, b in zip(BANDED_OUTCOMES, bounds)}
                for level, bounds in sorted(self.thresholds_by_level.items())
            },
        }


# ---------- IO (no caching) ----------

def load_rules(file_path: Optional[Union[str, Path]] = None) -> OutcomeRules:
    """
    Load an outcome table from JSON and return an immutable OutcomeRules instance.

    Args:
        file_path: Optional explicit path. Defaults to formula_app.paths.outcome_rules_json().

    Raises:
        InvalidRulesError, RuntimeError
    """
    rules_path = file_path or paths.outcome_rules_json()
    ok, data = read_json(rules_path)
    if not ok or not isinstance(data, dict):
        raise RuntimeError(f"Missing or invalid rules: {rules_path}")
    return OutcomeRules.from_dict(data)


# ---------- Built-in table (assets/rules/formula_outcomes.json) ----------

DEFAULT_RULES = load_rules()
