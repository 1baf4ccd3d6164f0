"""
envfmt/errors.py

The closed error taxonomy for envfmt:

  EnvFmtError
    ConfigurationError           (fatal before any remote call)
      ProfileNotFoundError
      ProfileChainError
      MissingProfileFieldError
    FederationError              (fatal for the run, no retry)
      FederationExchangeError
      MalformedFederationResponseError
      TokenPromptError
    ParameterStoreError          (transport/remote failure for list or put)

Vendor exceptions are translated into these only inside the boto adapters.
"""

from __future__ import annotations

from typing import Optional


class EnvFmtError(Exception):
    """Base class for every error envfmt raises on purpose."""


class ConfigurationError(EnvFmtError):
    """Local configuration (profiles, source files) is missing or unusable."""


class ProfileNotFoundError(ConfigurationError):
    """The named profile does not exist in the local profile store.

    Attributes:
        profile (str): The profile name that was looked up.
    """

    def __init__(self, profile: str) -> None:
        super().__init__(f"Failed to find profile '{profile}'")
        self.profile = profile


class ProfileChainError(ConfigurationError):
    """Following source_profile references did not reach a root profile.

    Attributes:
        profile (str): The profile the walk started from.
        reason (str): Why the walk stopped (cycle, depth, missing link).
    """

    def __init__(self, profile: str, reason: str) -> None:
        super().__init__(
            f"Failed to resolve source profile chain for '{profile}': {reason}"
        )
        self.profile = profile
        self.reason = reason


class MissingProfileFieldError(ConfigurationError):
    """A field required for an MFA-gated role assumption is absent.

    Attributes:
        field (str): The missing profile key, e.g. "mfa_serial".
        profile (str): The profile that was being resolved.
    """

    _DESCRIPTIONS = {
        "role_arn": "a role to assume in selected profile",
        "aws_access_key_id": "an access key in source profile for selected profile",
        "aws_secret_access_key": "a secret key in source profile for selected profile",
        "mfa_serial": "a mfa serial to use in selected profile",
    }

    def __init__(self, field: str, profile: str) -> None:
        what = self._DESCRIPTIONS.get(field, f"'{field}'")
        super().__init__(f"Failed to find {what} ('{profile}')")
        self.field = field
        self.profile = profile


class FederationError(EnvFmtError):
    """The MFA role-assumption exchange could not produce credentials."""


class FederationExchangeError(FederationError):
    """The identity federation service rejected the assume-role call."""


class MalformedFederationResponseError(FederationError):
    """The assume-role call succeeded but returned no usable credentials."""


class TokenPromptError(FederationError):
    """Reading the MFA token from the console failed."""


class ParameterStoreError(EnvFmtError):
    """A list or put call against the parameter store failed.

    Attributes:
        path (Optional[str]): The parameter path or prefix the call concerned.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
