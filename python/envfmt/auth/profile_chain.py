"""
envfmt/auth/profile_chain.py

Resolves an AssumeRoleRequest from the local AWS profile store:

  1) Look up the named profile.
  2) Walk `source_profile` references iteratively until a profile with no
     further reference (the root) is reached. Cycles, missing links and
     chains longer than MAX_CHAIN_DEPTH fail with ProfileChainError.
  3) role_arn and mfa_serial come from the named profile only.
  4) The access key and secret are taken from the first of [named, root]
     that defines them.

Profiles are loaded through botocore, which merges ~/.aws/config and
~/.aws/credentials and honours AWS_CONFIG_FILE / AWS_SHARED_CREDENTIALS_FILE.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

import botocore.session

from envfmt.errors import (
    MissingProfileFieldError,
    ProfileChainError,
    ProfileNotFoundError,
)
from envfmt.models.credentials import AssumeRoleRequest
from envfmt.models.settings import DEFAULT_PROFILE, FALLBACK_REGION

logger = logging.getLogger(__name__)

MAX_CHAIN_DEPTH = 32

Profile = Mapping[str, str]
ProfileSet = Mapping[str, Profile]


def load_profiles() -> Dict[str, Dict[str, str]]:
    """Load every profile from the local AWS config and credentials files.

    Returns:
        Dict[str, Dict[str, str]]: profile name -> field name -> value.
    """
    session = botocore.session.Session()
    profiles = session.full_config.get("profiles", {})
    logger.debug("Loaded %d local profiles", len(profiles))
    return {
        name: {k: v for k, v in fields.items() if isinstance(v, str)}
        for name, fields in profiles.items()
    }


def default_profile_name(profile: Optional[str] = None) -> str:
    """The given profile, else 'default'.

    Callers pass EnvFmtSettings.profile, which already folds in $AWS_PROFILE.
    """
    return profile or DEFAULT_PROFILE


def walk_source_chain(profile_name: str, profiles: ProfileSet) -> List[str]:
    """Follow source_profile references from `profile_name` to its root.

    Args:
        profile_name: The profile to start from.
        profiles: The full set of loaded profiles.

    Returns:
        List[str]: Profile names in walk order; the last one is the root.

    Raises:
        ProfileNotFoundError: If `profile_name` itself does not exist.
        ProfileChainError: On a cycle, a dangling reference, or excessive depth.
    """
    if profile_name not in profiles:
        raise ProfileNotFoundError(profile_name)

    chain = [profile_name]
    seen = {profile_name}
    current = profile_name
    while True:
        source = profiles[current].get("source_profile")
        if source is None:
            return chain
        if source in seen:
            raise ProfileChainError(
                profile_name, f"cycle at '{source}' via {' -> '.join(chain)}"
            )
        if source not in profiles:
            raise ProfileChainError(
                profile_name, f"source profile '{source}' does not exist"
            )
        if len(chain) >= MAX_CHAIN_DEPTH:
            raise ProfileChainError(
                profile_name, f"chain exceeds {MAX_CHAIN_DEPTH} profiles"
            )
        chain.append(source)
        seen.add(source)
        current = source


def _extract_field(field: str, candidates: Sequence[Profile]) -> Optional[str]:
    return next((p[field] for p in candidates if field in p), None)


def resolve_assume_role_request(
    profile_name: str, profiles: ProfileSet
) -> AssumeRoleRequest:
    """Build the AssumeRoleRequest for `profile_name`.

    Raises:
        ProfileNotFoundError: If the profile is absent.
        ProfileChainError: If the source chain is broken.
        MissingProfileFieldError: If any of the four fields cannot be found.
    """
    chain = walk_source_chain(profile_name, profiles)
    profile = profiles[profile_name]
    root = profiles[chain[-1]]
    logger.debug("Profile '%s' resolves to root '%s'", profile_name, chain[-1])

    role_arn = profile.get("role_arn")
    if role_arn is None:
        raise MissingProfileFieldError("role_arn", profile_name)

    key = _extract_field("aws_access_key_id", [profile, root])
    if key is None:
        raise MissingProfileFieldError("aws_access_key_id", profile_name)

    secret = _extract_field("aws_secret_access_key", [profile, root])
    if secret is None:
        raise MissingProfileFieldError("aws_secret_access_key", profile_name)

    mfa_serial = profile.get("mfa_serial")
    if mfa_serial is None:
        raise MissingProfileFieldError("mfa_serial", profile_name)

    return AssumeRoleRequest(
        role_arn=role_arn,
        access_key_id=key,
        secret_access_key=secret,
        mfa_serial=mfa_serial,
    )


def resolve_region(
    profile_name: str,
    profiles: ProfileSet,
    explicit: Optional[str] = None,
) -> str:
    """Pick the operating region.

    Order: `explicit` (EnvFmtSettings.region, so a flag or $AWS_REGION /
    $AWS_DEFAULT_REGION), the `region` field along the profile chain (named
    profile first), then FALLBACK_REGION.
    """
    if explicit:
        return explicit

    if profile_name in profiles:
        chain = walk_source_chain(profile_name, profiles)
        from_chain = _extract_field("region", [profiles[name] for name in chain])
        if from_chain:
            return from_chain

    return FALLBACK_REGION
