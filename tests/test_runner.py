from unittest import mock

import pytest

from conftest import FakePageSource, FakeRepository, make_record
from core.exceptions import AuthenticationError, InventoryFetchError
from core.reconcile.runner import run_stock_sync
from core.reconcile.variants import JoinVariantFactory

TEMPLATE = "http://store.test/details?product={key}"


def api_client_for(repository=None, sign_in_error=None):
    client = mock.Mock()
    if sign_in_error is not None:
        client.sign_in.side_effect = sign_in_error
    else:
        client.sign_in.return_value = repository
    return client


def test_character_variant_drains_listing_and_updates_matches(luffy):
    repository = FakeRepository([luffy])
    source = FakePageSource(
        pages=[[{"link": "/p/1", "join_key": "Luffy"}, {"link": "/p/2", "join_key": "Zoro"}]],
        stock_by_link={"/p/1": 12},
    )

    report = run_stock_sync(
        api_client_for(repository),
        "a@b.c",
        "pw",
        lambda: source,
        JoinVariantFactory.create_variant("character"),
        settle_delay_ms=0,
    )

    assert source.opened and source.closed
    assert source.navigations == ["/p/1"]
    assert [(w.record_id, w.payload) for w in repository.writes] == [
        (1, {"id": 1, "character": "Luffy", "quantityStock": 12})
    ]
    assert len(report.unmatched) == 1


def test_ref_id_variant_visits_each_referenced_product_without_walking_listing():
    records = [
        make_record(id=1, treasureBoxRefId="TB-1", quantityStock=1),
        make_record(id=2, character="No ref"),
        make_record(id=3, treasureBoxRefId="TB-3", quantityStock=1),
    ]
    repository = FakeRepository(records)
    source = FakePageSource(stock_by_link={"http://store.test/details?product=TB-3": 6})

    run_stock_sync(
        api_client_for(repository),
        "a@b.c",
        "pw",
        lambda: source,
        JoinVariantFactory.create_variant("ref-id", TEMPLATE),
    )

    assert not source.opened
    assert source.navigations == [
        "http://store.test/details?product=TB-1",
        "http://store.test/details?product=TB-3",
    ]
    assert [(w.record_id, w.quantity_stock) for w in repository.writes] == [(1, 0), (3, 6)]


def test_authentication_failure_aborts_before_scraping():
    open_source = mock.Mock()

    with pytest.raises(AuthenticationError):
        run_stock_sync(
            api_client_for(sign_in_error=AuthenticationError("bad password")),
            "a@b.c",
            "pw",
            open_source,
            JoinVariantFactory.create_variant("character"),
        )

    open_source.assert_not_called()


def test_inventory_fetch_failure_aborts_before_scraping():
    repository = mock.Mock()
    repository.list_records.side_effect = InventoryFetchError("timeout")
    open_source = mock.Mock()

    with pytest.raises(InventoryFetchError):
        run_stock_sync(
            api_client_for(repository),
            "a@b.c",
            "pw",
            open_source,
            JoinVariantFactory.create_variant("character"),
        )

    open_source.assert_not_called()
    repository.update_record.assert_not_called()
