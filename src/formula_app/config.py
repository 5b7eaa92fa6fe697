# src/formula_app/config.py
from typing import Final

# =========================
# App metadata
# =========================
APP_NAME    = "Formula App"
APP_VERSION = "0.1.0"

# =========================
# Formula behavior
# =========================
# Highest proficiency level with its own row in the outcome table.
# increase_proficiency_level() still allows one step past it.
MAX_PROFICIENCY_LEVEL: Final[int] = 2
START_PROFICIENCY_LEVEL: Final[int] = 0

# =========================
# Logging
# =========================
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# =========================
# Charts (inches, matplotlib units)
# =========================
CHART_FIGSIZE = (6, 3.5)

# =========================
# Asset file names (inside the package)
# =========================
OUTCOME_RULES_JSON_NAME = "formula_outcomes.json"
