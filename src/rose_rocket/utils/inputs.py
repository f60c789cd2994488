"""Reading JSON request bodies supplied on the command line."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from rose_rocket.utils.errors import InvalidInput


def load_json_input(source: str) -> Any:
    """Parse JSON from a file path, or from stdin when ``source`` is "-"."""
    try:
        if source == "-":
            return json.load(sys.stdin)
        with open(Path(source)) as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise InvalidInput(f"JSON file not found: {source}") from e
    except ValueError as e:
        raise InvalidInput(f"Invalid JSON in {source}: {e}") from e
