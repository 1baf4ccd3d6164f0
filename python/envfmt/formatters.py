"""
envfmt/formatters.py

Renders normalized params into process-environment configuration syntax:
  - dot-env:  KEY="value"
  - php-fpm:  env[KEY]="value"

Output has one line per param and no trailing newline. Each format has a
parser for its own grammar so rendered output can be read back.
"""

from __future__ import annotations

import io
import re
from typing import Callable, Dict, Iterable, List, Tuple

from dotenv import dotenv_values

from envfmt.models.params import Param
from envfmt.models.settings import OutputFormat

_DOT_ENV_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n"})
_PHP_FPM_LINE = re.compile(r'^env\[(?P<key>[^\]]+)\]="(?P<value>.*)"$')


def format_dot_env(params: Iterable[Param]) -> str:
    return "\n".join(
        f'{p.key}="{p.value.translate(_DOT_ENV_ESCAPES)}"' for p in params
    )


def format_php_fpm(params: Iterable[Param]) -> str:
    """Render env[KEY]="value" lines with values written raw.

    Raises:
        ValueError: If a value contains a line break, which a pool config
            line cannot hold.
    """
    lines = []
    for p in params:
        if "\n" in p.value or "\r" in p.value:
            raise ValueError(
                f"{p.key} contains a line break and cannot be written as php-fpm"
            )
        lines.append(f'env[{p.key}]="{p.value}"')
    return "\n".join(lines)


def parse_dot_env(text: str) -> List[Tuple[str, str]]:
    """Parse dot-env text with python-dotenv, dropping keys with no value."""
    values = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return [(k, v) for k, v in values.items() if v is not None]


def parse_php_fpm(text: str) -> List[Tuple[str, str]]:
    """Parse env[KEY]="value" lines, skipping anything else."""
    matches = (_PHP_FPM_LINE.match(line) for line in text.splitlines())
    return [(m.group("key"), m.group("value")) for m in matches if m]


_FORMATTERS: Dict[OutputFormat, Callable[[Iterable[Param]], str]] = {
    OutputFormat.DOT_ENV: format_dot_env,
    OutputFormat.PHP_FPM: format_php_fpm,
}


def get_formatter(name: str) -> Callable[[Iterable[Param]], str]:
    """Look up a formatter by its CLI name ('dot-env' or 'php-fpm').

    Raises:
        ValueError: If the name is not a known format.
    """
    try:
        return _FORMATTERS[OutputFormat(name)]
    except ValueError:
        raise ValueError(f"{name} is not a valid output format") from None
