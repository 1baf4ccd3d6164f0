import pytest

from envfmt.errors import ParameterStoreError
from envfmt.models.params import FetchState, Param, ParamBag, ParameterPage
from envfmt.ssm.fetch import fetch_all, fetch_page


@pytest.mark.anyio
async def test_fetch_page_adds_results_to_bag(one_page_client):
    bag = ParamBag(prefix="/path/to/the/")

    bag = await fetch_page(bag, one_page_client)

    assert bag.params[0] == Param(key="FIRST_PARAM", value="first_param_value")
    assert bag.params[1] == Param(key="SECOND_PARAM", value="second_param_value")


@pytest.mark.anyio
async def test_fetch_page_updates_with_next_token(two_page_client):
    bag = await fetch_page(ParamBag(prefix="/path/to/the/"), two_page_client)

    assert bag.next_token == "second"
    assert bag.state is FetchState.HAS_CURSOR


@pytest.mark.anyio
async def test_fetch_page_updates_with_empty_token(two_page_client):
    bag = ParamBag(prefix="/path/to/the/")

    bag = await fetch_page(bag, two_page_client)
    bag = await fetch_page(bag, two_page_client)

    assert bag.next_token is None
    assert bag.state is FetchState.DONE


@pytest.mark.anyio
async def test_fetch_all_makes_single_call_without_cursor(one_page_client):
    bag = await fetch_all(one_page_client, "/path/to/the")

    assert len(bag.params) == 2
    assert one_page_client.requests == [("/path/to/the", None)]


@pytest.mark.anyio
async def test_fetch_all_calls_until_out_of_pages(two_page_client):
    bag = await fetch_all(two_page_client, "path/to/the")

    assert bag.params == [
        Param(key="FIRST_PARAM", value="a"),
        Param(key="SECOND_PARAM", value="b"),
        Param(key="THIRD", value="c"),
        Param(key="FOURTH", value="d"),
    ]
    assert bag.next_token is None
    assert two_page_client.requests == [
        ("/path/to/the", None),
        ("/path/to/the", "second"),
    ]


@pytest.mark.anyio
async def test_fetch_all_aborts_on_failed_page(two_page_client):
    two_page_client.fail_on = "second"

    with pytest.raises(ParameterStoreError):
        await fetch_all(two_page_client, "/path/to/the")

    # The failed page is not retried.
    assert len(two_page_client.requests) == 2


@pytest.mark.anyio
async def test_fetch_all_keeps_duplicates_in_arrival_order(two_page_client):
    two_page_client.pages["second"] = ParameterPage(
        items=[("/path/to/the/nested/first_param", "z")]
    )

    bag = await fetch_all(two_page_client, "/path/to/the")

    assert [p.key for p in bag.params] == ["FIRST_PARAM", "SECOND_PARAM", "FIRST_PARAM"]
    assert bag.resolved()[0] == Param(key="FIRST_PARAM", value="z")
