from typing import List

import pytest

from envfmt.models.params import ParamBag
from envfmt.ssm.writer import WRITE_DELAY_SECONDS, ThrottledWriter


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.mark.anyio
async def test_writes_lowercased_keys_under_prefix(one_page_client):
    sleep = RecordingSleep()
    writer = ThrottledWriter(one_page_client, overwrite=False, sleep=sleep)
    bag = ParamBag.from_pairs([("DB_HOST", "db"), ("DB_PORT", "5432")], "/app")

    outcomes = await writer.write(bag)

    assert [o.path for o in outcomes] == ["/app/db_host", "/app/db_port"]
    assert all(o.ok for o in outcomes)
    assert one_page_client.puts == [
        ("/app/db_host", "db", False),
        ("/app/db_port", "5432", False),
    ]


@pytest.mark.anyio
async def test_rejected_item_does_not_stop_later_items(one_page_client):
    one_page_client.existing["/app/first"] = "already there"
    writer = ThrottledWriter(one_page_client, overwrite=False, sleep=RecordingSleep())
    bag = ParamBag.from_pairs([("FIRST", "1"), ("SECOND", "2")], "/app")

    outcomes = await writer.write(bag)

    assert outcomes[0].path == "/app/first"
    assert not outcomes[0].ok
    assert "ParameterAlreadyExists" in outcomes[0].error
    assert outcomes[1].path == "/app/second"
    assert outcomes[1].ok
    assert one_page_client.existing["/app/second"] == "2"


@pytest.mark.anyio
async def test_failed_writes_are_not_retried(one_page_client):
    one_page_client.existing["/app/first"] = "already there"
    writer = ThrottledWriter(one_page_client, overwrite=False, sleep=RecordingSleep())

    await writer.write(ParamBag.from_pairs([("FIRST", "1")], "/app"))

    assert len(one_page_client.puts) == 1


@pytest.mark.anyio
async def test_overwrite_flag_allows_replacing(one_page_client):
    one_page_client.existing["/app/first"] = "old"
    writer = ThrottledWriter(one_page_client, overwrite=True, sleep=RecordingSleep())

    outcomes = await writer.write(ParamBag.from_pairs([("FIRST", "new")], "/app"))

    assert outcomes[0].ok
    assert one_page_client.existing["/app/first"] == "new"


@pytest.mark.anyio
async def test_flat_delay_between_writes(one_page_client):
    sleep = RecordingSleep()
    writer = ThrottledWriter(one_page_client, overwrite=False, sleep=sleep)
    bag = ParamBag.from_pairs([("A", "1"), ("B", "2"), ("C", "3")], "/app")

    await writer.write(bag)

    assert sleep.delays == [WRITE_DELAY_SECONDS, WRITE_DELAY_SECONDS]


@pytest.mark.anyio
async def test_empty_bag_writes_nothing(one_page_client):
    sleep = RecordingSleep()
    writer = ThrottledWriter(one_page_client, overwrite=False, sleep=sleep)

    assert await writer.write(ParamBag.from_pairs([], "/app")) == []
    assert sleep.delays == []
