"""
envfmt/auth/mfa_provider.py

Credential providers for MFA-gated access.

MfaCredentialProvider performs a full resolution on every call:
  1) Load the local profile set.
  2) Resolve the AssumeRoleRequest for the target profile.
  3) Pick the region (settings -> profile chain -> fallback).
  4) Build bootstrap credentials from the root key/secret pair.
  5) Obtain the one-time code from the TokenSource.
  6) AssumeRole with a fixed session name, authenticated as the bootstrap identity.
  7) Validate the response; a missing credential block is an error, never
     partial credentials.

CachingCredentialProvider wraps one provider and resolves it at most once for
the lifetime of the process.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from envfmt.auth.profile_chain import (
    ProfileSet,
    default_profile_name,
    load_profiles,
    resolve_assume_role_request,
    resolve_region,
)
from envfmt.auth.sts import BotoStsService, IdentityFederationService
from envfmt.auth.token_source import InteractiveToken, TokenSource
from envfmt.errors import MalformedFederationResponseError
from envfmt.models.credentials import SessionCredentials, StsCredentials
from envfmt.models.validator import validate_response_field

logger = logging.getLogger(__name__)

ROLE_SESSION_NAME = "envfmt"
BOOTSTRAP_PROVIDER_NAME = "assumed-role-credentials"
MFA_PROVIDER_NAME = "AssumeRoleWithMFAToken"


class CredentialProvider(ABC):
    """Asynchronously produces SessionCredentials."""

    @abstractmethod
    async def provide_credentials(self) -> SessionCredentials:
        """Resolve credentials, raising an EnvFmtError subclass on failure."""


class MfaCredentialProvider(CredentialProvider):
    def __init__(
        self,
        *,
        profile: Optional[str] = None,
        region: Optional[str] = None,
        token_source: Optional[TokenSource] = None,
        federation: Optional[IdentityFederationService] = None,
        profile_loader: Callable[[], ProfileSet] = load_profiles,
    ) -> None:
        """
        Initialize the provider.

        Args:
            profile: Profile to resolve (EnvFmtSettings.profile); defaults to 'default'.
            region: Region from EnvFmtSettings, ahead of the profile chain.
            token_source: Where the MFA code comes from; prompts by default.
            federation: The STS boundary; boto3-backed by default.
            profile_loader: Loads the local profile set.
        """
        self._profile = profile
        self._region = region
        self._token_source = token_source or InteractiveToken()
        self._federation = federation or BotoStsService()
        self._profile_loader = profile_loader

    async def provide_credentials(self) -> SessionCredentials:
        profiles = await asyncio.to_thread(self._profile_loader)
        profile_name = default_profile_name(self._profile)

        request = resolve_assume_role_request(profile_name, profiles)
        region = resolve_region(profile_name, profiles, self._region)
        logger.debug("Resolved role %s in region %s", request.role_arn, region)

        bootstrap = SessionCredentials(
            access_key_id=request.access_key_id,
            secret_access_key=request.secret_access_key,
            provider_name=BOOTSTRAP_PROVIDER_NAME,
            region=region,
        )

        token_code = await self._token_source.get_token()

        response = await self._federation.assume_role(
            role_arn=request.role_arn,
            session_name=ROLE_SESSION_NAME,
            mfa_serial=request.mfa_serial,
            token_code=token_code,
            caller=bootstrap,
        )
        return _credentials_from_response(response, region)


def _credentials_from_response(
    response: Dict[str, Any], region: str
) -> SessionCredentials:
    try:
        creds = validate_response_field(response, "Credentials", StsCredentials)
    except KeyError:
        raise MalformedFederationResponseError(
            "Successfully assumed role, but no credentials were returned"
        ) from None
    except ValueError as exc:
        raise MalformedFederationResponseError(
            f"Assume role response has incomplete credentials: {exc}"
        ) from exc

    return SessionCredentials(
        access_key_id=creds.access_key_id,
        secret_access_key=creds.secret_access_key,
        session_token=creds.session_token,
        provider_name=MFA_PROVIDER_NAME,
        region=region,
    )


class CachingCredentialProvider(CredentialProvider):
    """Resolve the inner provider once and reuse the result.

    Concurrent callers wait on the same resolution. A failed resolution is not
    cached, so the next call tries again.
    """

    def __init__(self, inner: CredentialProvider) -> None:
        self._inner = inner
        self._cached: Optional[SessionCredentials] = None
        self._lock = asyncio.Lock()

    async def provide_credentials(self) -> SessionCredentials:
        async with self._lock:
            if self._cached is None:
                self._cached = await self._inner.provide_credentials()
                logger.debug("Cached credentials from %s", self._cached.provider_name)
            return self._cached
