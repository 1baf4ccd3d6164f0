"""
envfmt/session.py

Builds the single boto3 Session an invocation uses for every remote call.

With MFA requested, credentials come from a CachingCredentialProvider wrapped
around MfaCredentialProvider. Otherwise the default boto3 credential chain is
used for the selected profile. Either way the session is built once, before
any fetch or write, and never changed afterwards.
"""

from __future__ import annotations

import logging
from typing import Optional

import boto3
from botocore.exceptions import ProfileNotFound

from envfmt.auth.mfa_provider import (
    CachingCredentialProvider,
    CredentialProvider,
    MfaCredentialProvider,
)
from envfmt.auth.token_source import token_source_for
from envfmt.errors import ProfileNotFoundError
from envfmt.models.settings import FALLBACK_REGION, EnvFmtSettings

logger = logging.getLogger(__name__)


def mfa_provider_for(settings: EnvFmtSettings) -> CredentialProvider:
    """The cached MFA provider configured from settings."""
    return CachingCredentialProvider(
        MfaCredentialProvider(
            profile=settings.profile,
            region=settings.region,
            token_source=token_source_for(settings.mfa_token),
        )
    )


async def build_session(
    settings: EnvFmtSettings,
    provider: Optional[CredentialProvider] = None,
) -> boto3.Session:
    """
    Build the boto3 Session for this run.

    Args:
        settings: Invocation settings.
        provider: Overrides the MFA provider; only used when MFA is requested.

    Returns:
        boto3.Session: Bound to the resolved credentials and region.
    """
    if settings.mfa_requested:
        provider = provider or mfa_provider_for(settings)
        creds = await provider.provide_credentials()
        logger.debug("Using %s", creds)
        return boto3.Session(
            aws_access_key_id=creds.access_key_id,
            aws_secret_access_key=creds.secret_access_key,
            aws_session_token=creds.session_token,
            region_name=creds.region,
        )

    try:
        session = boto3.Session(
            profile_name=settings.profile, region_name=settings.region
        )
    except ProfileNotFound as exc:
        raise ProfileNotFoundError(settings.profile or "default") from exc
    if session.region_name is None:
        logger.debug("No region configured, falling back to %s", FALLBACK_REGION)
        session = boto3.Session(profile_name=settings.profile, region_name=FALLBACK_REGION)
    return session
