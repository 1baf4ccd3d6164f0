"""
envfmt/ssm/client.py

The parameter store boundary:
  - ParameterStoreClient: abstract list/put capability.
  - BotoParameterStoreClient: backed by a boto3 SSM client; each synchronous
    call runs on a worker thread.

botocore exceptions become ParameterStoreError here and nowhere else.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from envfmt.errors import ParameterStoreError
from envfmt.models.params import ParameterPage
from envfmt.models.validator import validate_response_field

logger = logging.getLogger(__name__)


class ParameterStoreClient(ABC):
    """Paged listing and single-item writes against a path-addressed store."""

    @abstractmethod
    async def list_page(self, path: str, next_token: Optional[str]) -> ParameterPage:
        """
        Fetch one page of parameters under `path`.

        Args:
            path: Rooted path prefix.
            next_token: Cursor from the previous page, None for the first.

        Raises:
            ParameterStoreError: On any transport or remote failure.
        """

    @abstractmethod
    async def put(self, name: str, value: str, overwrite: bool) -> None:
        """
        Store `value` at `name`.

        Raises:
            ParameterStoreError: If the write is rejected or fails.
        """


class BotoParameterStoreClient(ParameterStoreClient):
    """ParameterStoreClient for AWS Systems Manager Parameter Store."""

    def __init__(
        self,
        ssm_client: Any,
        *,
        recursive: bool = False,
        with_decryption: bool = False,
    ) -> None:
        """
        Initialize the client.

        Args:
            ssm_client: A boto3 'ssm' client.
            recursive: Include parameters nested below the path's direct children.
            with_decryption: Decrypt SecureString values.
        """
        self._ssm = ssm_client
        self._recursive = recursive
        self._with_decryption = with_decryption

    async def list_page(self, path: str, next_token: Optional[str]) -> ParameterPage:
        kwargs: Dict[str, Any] = {
            "Path": path,
            "Recursive": self._recursive,
            "WithDecryption": self._with_decryption,
        }
        if next_token is not None:
            kwargs["NextToken"] = next_token

        try:
            resp = await asyncio.to_thread(self._ssm.get_parameters_by_path, **kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise ParameterStoreError(
                f"Failed to list parameters under {path}: {exc}", path
            ) from exc

        try:
            raw_params = validate_response_field(
                resp, "Parameters", List[Dict[str, Any]], default=[]
            )
        except ValueError as exc:
            raise ParameterStoreError(
                f"Unexpected response listing {path}: {exc}", path
            ) from exc
        items = [(p.get("Name"), p.get("Value")) for p in raw_params]
        return ParameterPage(items=items, next_token=resp.get("NextToken"))

    async def put(self, name: str, value: str, overwrite: bool) -> None:
        try:
            await asyncio.to_thread(
                self._ssm.put_parameter,
                Name=name,
                Value=value,
                Type="String",
                Overwrite=overwrite,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ParameterStoreError(f"{exc}", name) from exc
