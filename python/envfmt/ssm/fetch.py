"""
envfmt/ssm/fetch.py

Cursor-driven retrieval of every parameter under a path.

Pages are fetched strictly one after another: each request carries the cursor
from the previous response. Any page failure aborts the whole fetch with
ParameterStoreError and no partial bag is returned. Nothing here retries.
"""

from __future__ import annotations

import logging

from envfmt.models.params import FetchState, ParamBag
from envfmt.ssm.client import ParameterStoreClient

logger = logging.getLogger(__name__)


async def fetch_page(bag: ParamBag, client: ParameterStoreClient) -> ParamBag:
    """Fetch the page at the bag's current cursor and append it to the bag."""
    page = await client.list_page(bag.prefix, bag.next_token)
    bag.add_page(page)
    return bag


async def fetch_all(client: ParameterStoreClient, path: str) -> ParamBag:
    """Fetch every parameter under `path` into a single bag.

    Args:
        client: The parameter store to read from.
        path: Path prefix; rooted with '/' if it is not already.

    Returns:
        ParamBag: Params in arrival order, with no cursor left.

    Raises:
        ParameterStoreError: If any page request fails.
    """
    bag = ParamBag.new(path)
    logger.debug("Created empty bag for %s", bag.prefix)

    while True:
        bag = await fetch_page(bag, client)
        logger.debug(
            "Fetched page %d under %s (%d params so far)",
            bag.pages_fetched,
            bag.prefix,
            len(bag.params),
        )
        if bag.state is FetchState.DONE:
            return bag
