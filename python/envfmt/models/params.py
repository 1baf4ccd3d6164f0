"""
envfmt/models/params.py

Pydantic models for parameter retrieval and write-back:
  - Param: a normalized (key, value) pair.
  - ParameterPage: one response of the paged "list under path" call.
  - FetchState (Enum): Empty / HasCursor / Done.
  - ParamBag: the accumulator for one retrieval or write run.
  - WriteOutcome: the independent result of writing one param.

Plus the two normalization helpers, normalize_path() and to_env_name().
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Root a path prefix with '/', leaving already-rooted paths unchanged."""
    if path.startswith("/"):
        return path
    return "/" + path


def to_env_name(name: str) -> str:
    """Reduce a fully-qualified parameter name to its upper-cased last segment.

    A name with no '/' is used whole.
    """
    return name[name.rfind("/") + 1 :].upper()


class Param(BaseModel):
    """
    A single parameter.

    Attributes:
        key (str): Normalized key (read mode) or source key (write mode).
        value (str): The parameter value.
    """

    key: str
    value: str


class ParameterPage(BaseModel):
    """
    One page from the remote listing call.

    Attributes:
        items (List[Tuple[Optional[str], Optional[str]]]): Raw (name, value) pairs.
            Either side may be missing on a malformed entry.
        next_token (Optional[str]): Continuation cursor, None on the last page.
    """

    items: List[Tuple[Optional[str], Optional[str]]] = Field(default_factory=list)
    next_token: Optional[str] = None


class FetchState(str, Enum):
    """
    Where a ParamBag is in the pagination state machine.
    """

    EMPTY = "empty"
    HAS_CURSOR = "has_cursor"
    DONE = "done"


class ParamBag(BaseModel):
    """
    Accumulates params for one run under a single path prefix.

    Attributes:
        prefix (str): Path prefix, always rooted with '/'.
        params (List[Param]): Params in arrival order (never sorted).
        next_token (Optional[str]): Cursor for the next page, if any.
        pages_fetched (int): Number of pages appended so far.
    """

    prefix: str
    params: List[Param] = Field(default_factory=list)
    next_token: Optional[str] = None
    pages_fetched: int = 0

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        """Root the prefix with '/'."""
        return normalize_path(value)

    @classmethod
    def new(cls, path: str) -> ParamBag:
        """Create an empty bag for reading everything under `path`."""
        return cls(prefix=path)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]], prefix: str) -> ParamBag:
        """Create a write-mode bag from local (key, value) pairs.

        Write-mode bags are never paginated.
        """
        return cls(
            prefix=prefix,
            params=[Param(key=key, value=value) for key, value in pairs],
        )

    @property
    def state(self) -> FetchState:
        if self.pages_fetched == 0:
            return FetchState.EMPTY
        if self.next_token is not None:
            return FetchState.HAS_CURSOR
        return FetchState.DONE

    def add_page(self, page: ParameterPage) -> None:
        """Append a page's well-formed entries and replace the cursor.

        Entries missing a name or a value are dropped.
        """
        for name, value in page.items:
            if name is None or value is None:
                logger.debug("Dropping malformed entry name=%r under %s", name, self.prefix)
                continue
            self.params.append(Param(key=to_env_name(name), value=value))
        self.next_token = page.next_token
        self.pages_fetched += 1

    def remote_path(self, param: Param) -> str:
        """The remote name a write-mode param is stored under."""
        return f"{self.prefix.rstrip('/')}/{param.key.lower()}"

    def resolved(self) -> List[Param]:
        """Collapse duplicate keys: the last arrival wins, placed where the key first appeared."""
        positions: Dict[str, int] = {}
        result: List[Param] = []
        for param in self.params:
            if param.key in positions:
                logger.warning(
                    "Duplicate key %s under %s, keeping the later value",
                    param.key,
                    self.prefix,
                )
                result[positions[param.key]] = param
            else:
                positions[param.key] = len(result)
                result.append(param)
        return result


class WriteOutcome(BaseModel):
    """
    The result of writing one param, reported independently of the others.

    Attributes:
        path (str): Remote name the param was written to.
        ok (bool): True if the put succeeded.
        error (Optional[str]): The failure message when ok is False.
    """

    path: str
    ok: bool
    error: Optional[str] = None
