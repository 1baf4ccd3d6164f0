"""
envfmt/models/credentials.py

Pydantic models for identity resolution:
  - AssumeRoleRequest: everything needed for an MFA-gated role assumption.
  - SessionCredentials: a usable credential set, bootstrap or temporary.
  - StsCredentials: the credential block inside an STS AssumeRole response.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AssumeRoleRequest(BaseModel):
    """
    The four values resolved from a profile chain for an MFA role assumption.

    Attributes:
        role_arn (str): Role to assume, read from the named profile only.
        access_key_id (str): Long-lived key from the named profile or its root.
        secret_access_key (str): Long-lived secret from the named profile or its root.
        mfa_serial (str): MFA device identifier, read from the named profile only.
    """

    role_arn: str
    access_key_id: str
    secret_access_key: str
    mfa_serial: str


class SessionCredentials(BaseModel):
    """
    Credentials held in memory for a single invocation. Never persisted.

    Attributes:
        access_key_id (str): AWS access key id.
        secret_access_key (str): AWS secret access key.
        session_token (Optional[str]): Present for temporary credentials.
        provider_name (str): Label for the method that issued these credentials.
        region (Optional[str]): Region the credentials were resolved for.
    """

    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None
    provider_name: str = "static"
    region: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"SessionCredentials(access_key_id={self.access_key_id!r}, "
            f"provider_name={self.provider_name!r}, region={self.region!r})"
        )

    __str__ = __repr__


class StsCredentials(BaseModel):
    """The 'Credentials' block of an STS AssumeRole response."""

    access_key_id: str = Field(alias="AccessKeyId", min_length=1)
    secret_access_key: str = Field(alias="SecretAccessKey", min_length=1)
    session_token: Optional[str] = Field(default=None, alias="SessionToken")
