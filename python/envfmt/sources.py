"""
envfmt/sources.py

Loads local key/value source files for write mode.
"""

from __future__ import annotations

import logging
import os
from typing import List, Tuple

from dotenv.parser import parse_stream

from envfmt.errors import ConfigurationError
from envfmt.models.params import ParamBag

logger = logging.getLogger(__name__)


def load_dotenv_params(path: str) -> List[Tuple[str, str]]:
    """
    Read a .env style file, preserving file order.

    Every binding is returned, so a key repeated in the file appears once per
    occurrence. Values are taken literally; `${VAR}` is not expanded. Malformed
    lines and bare keys without a value are skipped.

    Raises:
        ConfigurationError: If the file does not exist.
    """
    if not os.path.isfile(path):
        raise ConfigurationError(f"Source file not found: {path}")

    with open(path, encoding="utf-8") as f:
        bindings = [b for b in parse_stream(f) if b.key is not None or b.error]

    pairs = [
        (b.key, b.value) for b in bindings if b.key is not None and b.value is not None
    ]
    skipped = len(bindings) - len(pairs)
    if skipped:
        logger.warning("Skipped %d malformed or valueless entries in %s", skipped, path)
    return pairs


def bag_from_dotenv(path: str, prefix: str = "") -> ParamBag:
    """Build a write-mode ParamBag from a .env file and a target prefix."""
    return ParamBag.from_pairs(load_dotenv_params(path), prefix)
