"""
envfmt/auth/sts.py

The identity federation boundary. IdentityFederationService is the abstract
capability; BotoStsService implements it with a boto3 STS client built from
the caller's bootstrap credentials. The synchronous boto3 call runs on a
worker thread.

botocore exceptions are translated to FederationExchangeError here and
nowhere else.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from envfmt.errors import FederationExchangeError
from envfmt.models.credentials import SessionCredentials

logger = logging.getLogger(__name__)


class IdentityFederationService(ABC):
    """Exchanges a role ARN plus an MFA code for temporary credentials."""

    @abstractmethod
    async def assume_role(
        self,
        *,
        role_arn: str,
        session_name: str,
        mfa_serial: str,
        token_code: str,
        caller: SessionCredentials,
    ) -> Dict[str, Any]:
        """
        Call AssumeRole authenticated as `caller`.

        Returns:
            Dict[str, Any]: The raw response; validated by the caller.

        Raises:
            FederationExchangeError: If the service rejects the request.
        """


class BotoStsService(IdentityFederationService):
    """IdentityFederationService backed by boto3's STS client."""

    async def assume_role(
        self,
        *,
        role_arn: str,
        session_name: str,
        mfa_serial: str,
        token_code: str,
        caller: SessionCredentials,
    ) -> Dict[str, Any]:
        def do_assume_role() -> Dict[str, Any]:
            session = boto3.Session(
                aws_access_key_id=caller.access_key_id,
                aws_secret_access_key=caller.secret_access_key,
                aws_session_token=caller.session_token,
                region_name=caller.region,
            )
            sts = session.client("sts")
            return sts.assume_role(
                RoleArn=role_arn,
                RoleSessionName=session_name,
                SerialNumber=mfa_serial,
                TokenCode=token_code,
            )

        logger.debug("Assuming role %s with MFA device %s", role_arn, mfa_serial)
        try:
            return await asyncio.to_thread(do_assume_role)
        except (BotoCoreError, ClientError) as exc:
            raise FederationExchangeError(
                f"Unable to assume role {role_arn}: {exc}"
            ) from exc
