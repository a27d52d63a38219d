import json
import logging
from pathlib import Path

from .errors import InvalidCatalog

log = logging.getLogger(__name__)


def load_recipes(path):
    """Load the raw recipe catalog from a JSON file.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: raw recipe dictionaries, not yet validated.

    Raises:
        InvalidCatalog: the file is missing or is not valid JSON.
    """
    p = Path(path)
    if not p.exists():
        raise InvalidCatalog(f"catalog file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidCatalog(f"catalog file is not valid JSON: {e}") from e
    log.info("Read catalog file %s", p)
    return data
