"""
Shared fakes and fixtures for the envfmt tests.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Tuple

import pytest

from envfmt.auth.sts import IdentityFederationService
from envfmt.errors import FederationExchangeError, ParameterStoreError
from envfmt.models.credentials import SessionCredentials
from envfmt.models.params import ParameterPage
from envfmt.ssm.client import ParameterStoreClient


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class PagedParameterStore(ParameterStoreClient):
    """In-memory ParameterStoreClient serving pages keyed by cursor.

    The first request (cursor None) is served from the "first" page.
    """

    def __init__(
        self,
        pages: Dict[str, ParameterPage],
        fail_on: Optional[str] = None,
    ) -> None:
        self.pages = pages
        self.fail_on = fail_on
        self.requests: List[Tuple[str, Optional[str]]] = []
        self.puts: List[Tuple[str, str, bool]] = []
        self.existing: Dict[str, str] = {}

    async def list_page(self, path: str, next_token: Optional[str]) -> ParameterPage:
        self.requests.append((path, next_token))
        key = next_token or "first"
        if key == self.fail_on:
            raise ParameterStoreError(f"ThrottlingException on page {key}", path)
        return self.pages.get(key, ParameterPage())

    async def put(self, name: str, value: str, overwrite: bool) -> None:
        self.puts.append((name, value, overwrite))
        if name in self.existing and not overwrite:
            raise ParameterStoreError(f"ParameterAlreadyExists: {name}", name)
        self.existing[name] = value


def one_page_store() -> PagedParameterStore:
    return PagedParameterStore(
        {
            "first": ParameterPage(
                items=[
                    ("/path/to/the/first_param", "first_param_value"),
                    ("/path/to/the/second_param", "second_param_value"),
                ],
            )
        }
    )


def two_page_store() -> PagedParameterStore:
    return PagedParameterStore(
        {
            "first": ParameterPage(
                items=[
                    ("/path/to/the/first_param", "a"),
                    ("/path/to/the/second_param", "b"),
                ],
                next_token="second",
            ),
            "second": ParameterPage(
                items=[("/path/to/the/third", "c"), ("/path/to/the/fourth", "d")],
            ),
        }
    )


@pytest.fixture
def one_page_client() -> PagedParameterStore:
    return one_page_store()


@pytest.fixture
def two_page_client() -> PagedParameterStore:
    return two_page_store()


class RecordingFederation(IdentityFederationService):
    """Returns a canned AssumeRole response and records each call."""

    def __init__(
        self,
        response: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def assume_role(
        self,
        *,
        role_arn: str,
        session_name: str,
        mfa_serial: str,
        token_code: str,
        caller: SessionCredentials,
    ) -> Dict[str, Any]:
        self.calls.append(
            {
                "role_arn": role_arn,
                "session_name": session_name,
                "mfa_serial": mfa_serial,
                "token_code": token_code,
                "caller": caller,
            }
        )
        if self.error:
            raise FederationExchangeError(self.error)
        assert self.response is not None
        return self.response


STS_OK_RESPONSE: Dict[str, Any] = {
    "Credentials": {
        "AccessKeyId": "ASIATEMPKEY",
        "SecretAccessKey": "temp-secret",
        "SessionToken": "temp-token",
    }
}


@pytest.fixture
def profiles() -> Dict[str, Dict[str, str]]:
    return {
        "root": {
            "aws_access_key_id": "AKIAROOT",
            "aws_secret_access_key": "root-secret",
            "region": "eu-west-1",
        },
        "middle": {"source_profile": "root"},
        "deploy": {
            "source_profile": "middle",
            "role_arn": "arn:aws:iam::123456789012:role/deploy",
            "mfa_serial": "arn:aws:iam::123456789012:mfa/alice",
        },
    }


@pytest.fixture(autouse=True)
def clear_aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("AWS_PROFILE", "AWS_REGION", "AWS_DEFAULT_REGION"):
        monkeypatch.delenv(var, raising=False)
    for var in [v for v in os.environ if v.upper().startswith("ENVFMT_")]:
        monkeypatch.delenv(var)


@pytest.fixture
def federation() -> RecordingFederation:
    return RecordingFederation(response=STS_OK_RESPONSE)
