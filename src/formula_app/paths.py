"""
File & directory resolution helpers.

Centralizes how the package locates its read-only assets (rules JSON), both in
dev and when frozen (PyInstaller).
"""

from pathlib import Path
import sys

from formula_app.config import OUTCOME_RULES_JSON_NAME


def is_frozen() -> bool:
    """Return True if running under a PyInstaller-built executable."""
    return hasattr(sys, "_MEIPASS")  # type: ignore[attr-defined]


def base_dir() -> Path:
    """
    Root package directory that contains 'assets/'.
      Dev:     <repo>/src/formula_app
      Frozen:  <temp>/_MEIPASS/formula_app
    """
    if is_frozen():
        return Path(sys._MEIPASS) / "formula_app"  # type: ignore[attr-defined]
    return Path(__file__).resolve().parent

def assets_dir() -> Path:
    """formula_app/assets"""
    return base_dir() / "assets"

def rules_dir() -> Path:
    """formula_app/assets/rules"""
    return assets_dir() / "rules"


def outcome_rules_json() -> Path:
    """Return the packaged outcome-table JSON path."""
    return rules_dir() / OUTCOME_RULES_JSON_NAME
