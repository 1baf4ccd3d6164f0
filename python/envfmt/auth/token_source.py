"""
envfmt/auth/token_source.py

Where the MFA one-time code comes from:
  - SuppliedToken: a code given up front (e.g. --mfa-token), used verbatim.
  - InteractiveToken: prompts on the console and reads one line.

The interactive read blocks, so it runs on a worker thread via
asyncio.to_thread and never stalls the event loop. There is no timeout.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from envfmt.errors import TokenPromptError

MFA_PROMPT = "MFA token is required: "


class TokenSource(ABC):
    """Supplies an MFA one-time code."""

    @abstractmethod
    async def get_token(self) -> str:
        """Return the one-time code.

        Raises:
            TokenPromptError: If the code cannot be obtained.
        """


class SuppliedToken(TokenSource):
    def __init__(self, token: str) -> None:
        self._token = token

    async def get_token(self) -> str:
        return self._token


class InteractiveToken(TokenSource):
    """Prompt on stdout and read a line from stdin, trimming whitespace."""

    def __init__(
        self,
        prompt: str = MFA_PROMPT,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self._prompt = prompt
        self._stdin = stdin
        self._stdout = stdout

    def _read_blocking(self) -> str:
        stdin = self._stdin or sys.stdin
        stdout = self._stdout or sys.stdout
        try:
            stdout.write(self._prompt)
            stdout.flush()
            line = stdin.readline()
        except (OSError, ValueError) as exc:
            raise TokenPromptError(f"Failed to read MFA token: {exc}") from exc
        if not line:
            raise TokenPromptError("Failed to read MFA token: end of input")
        return line.strip()

    async def get_token(self) -> str:
        return await asyncio.to_thread(self._read_blocking)


def token_source_for(mfa_token: Optional[str]) -> TokenSource:
    """A SuppliedToken when a code is given, otherwise an InteractiveToken."""
    if mfa_token is not None:
        return SuppliedToken(mfa_token)
    return InteractiveToken()
