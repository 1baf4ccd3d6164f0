"""
envfmt/models/settings.py

Run configuration for a single envfmt invocation.

EnvFmtSettings is a pydantic-settings model. Values passed in explicitly (the
CLI flags) take precedence over the environment:

  - profile: ENVFMT_PROFILE, then AWS_PROFILE
  - region:  ENVFMT_REGION, then AWS_REGION, then AWS_DEFAULT_REGION
  - everything else: ENVFMT_<FIELD>, e.g. ENVFMT_WRITE_DELAY_SECONDS

The AWS_* variables are the ones boto3 itself honours; AwsEnvironment reads
them under their own prefix.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic.functional_validators import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROFILE = "default"
FALLBACK_REGION = "us-east-1"


class OutputFormat(str, Enum):
    """
    Serialization syntax for read output.
    """

    DOT_ENV = "dot-env"
    PHP_FPM = "php-fpm"


class AwsEnvironment(BaseSettings):
    """
    The standard AWS_PROFILE, AWS_REGION and AWS_DEFAULT_REGION variables.
    """

    profile: Optional[str] = None
    region: Optional[str] = None
    default_region: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="AWS_")


class EnvFmtSettings(BaseSettings):
    """
    Settings for one read or write run.

    `profile` and `region` stay None when neither a flag nor the AWS
    environment sets them; the profile chain and FALLBACK_REGION fill in
    the rest later.
    """

    model_config = SettingsConfigDict(env_prefix="ENVFMT_")

    profile: Optional[str] = None
    region: Optional[str] = None
    mfa: bool = False
    mfa_token: Optional[str] = None
    output_format: OutputFormat = OutputFormat.DOT_ENV
    out: Optional[str] = None
    recursive: bool = False
    with_decryption: bool = False
    write_delay_seconds: float = Field(default=0.2, ge=0.0)
    retries: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_exclusivity(self) -> EnvFmtSettings:
        """
        Ensure mfa (interactive prompt) and mfa_token are not both set.
        Runs after fields are validated, returning 'self' or raising an error.
        """
        if self.mfa and self.mfa_token:
            raise ValueError("mfa and mfa_token are mutually exclusive.")
        return self

    @model_validator(mode="after")
    def fill_from_aws_environment(self) -> EnvFmtSettings:
        """Fill profile and region from the AWS_* variables when still unset."""
        if self.profile is None or self.region is None:
            aws = AwsEnvironment()
            if self.profile is None:
                self.profile = aws.profile
            if self.region is None:
                self.region = aws.region or aws.default_region
        return self

    @property
    def mfa_requested(self) -> bool:
        """True when either MFA mode was asked for."""
        return self.mfa or self.mfa_token is not None
