"""
envfmt/auth/__init__.py

Identity resolution for MFA-gated access:

- profile_chain.py resolves the role, keys and MFA device from local profiles
- token_source.py supplies the one-time code (given up front or prompted)
- sts.py is the AssumeRole boundary
- mfa_provider.py ties them together and caches the result per run
"""

from envfmt.auth.profile_chain import (
    load_profiles,
    resolve_assume_role_request,
    resolve_region,
    walk_source_chain,
)
from envfmt.auth.token_source import InteractiveToken, SuppliedToken, TokenSource
from envfmt.auth.sts import BotoStsService, IdentityFederationService
from envfmt.auth.mfa_provider import (
    CachingCredentialProvider,
    CredentialProvider,
    MfaCredentialProvider,
)

__all__ = [
    "load_profiles",
    "resolve_assume_role_request",
    "resolve_region",
    "walk_source_chain",
    "TokenSource",
    "SuppliedToken",
    "InteractiveToken",
    "IdentityFederationService",
    "BotoStsService",
    "CredentialProvider",
    "MfaCredentialProvider",
    "CachingCredentialProvider",
]
