# src/formula_app/utils/jsonio.py
from pathlib import Path
from typing import Any, Tuple, Union
import json
import logging


def read_json(path: Union[str, Path]) -> Tuple[bool, Any]:
    """
    Returns (ok, data). ok=False if file missing or invalid JSON.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return True, json.load(f)
    except FileNotFoundError:
        logging.warning("[jsonio] file not found: %s", path)
        return False, None
    except (OSError, ValueError) as exc:
        logging.warning("[jsonio] could not read %s: %s", path, exc)
        return False, None
