import logging
from unittest import mock

import pytest
import requests

from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InventoryFetchError,
    UpdateError,
)
from core.inventory.api_client import InventoryAPIClient
from core.inventory.models import InventoryRecord

BASE_URL = "https://api.test/v1/"


def response(payload=None, status=200):
    resp = mock.Mock()
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def session():
    s = mock.Mock()
    s.headers = {}
    return s


def signed_in(session):
    session.post.return_value = response({"userToken": {"token": "tok-123"}})
    return InventoryAPIClient(BASE_URL, timeout=5, session=session).sign_in("a@b.c", "pw")


def test_sign_in_posts_credentials_and_returns_authenticated_client(session):
    client = signed_in(session)

    session.post.assert_called_once_with(
        "https://api.test/v1/auth/sign-in",
        json={"email": "a@b.c", "password": "pw"},
        timeout=5,
    )
    assert client.token == "tok-123"
    assert "Authorization" not in session.headers


def test_base_url_without_trailing_slash_keeps_version(session):
    client = InventoryAPIClient("https://api.test/v1", session=session)

    assert client.url("products") == "https://api.test/v1/products"


def test_sign_in_requires_credentials(session):
    with pytest.raises(ConfigurationError):
        InventoryAPIClient(BASE_URL, session=session).sign_in(None, "pw")
    session.post.assert_not_called()


def test_sign_in_without_token_fails(session):
    session.post.return_value = response({"userToken": {"token": ""}})

    with pytest.raises(AuthenticationError):
        InventoryAPIClient(BASE_URL, session=session).sign_in("a@b.c", "pw")


def test_sign_in_with_unexpected_body_fails(session):
    session.post.return_value = response({"message": "ok"})

    with pytest.raises(AuthenticationError):
        InventoryAPIClient(BASE_URL, session=session).sign_in("a@b.c", "pw")


def test_sign_in_http_error_fails(session):
    session.post.return_value = response(status=401)

    with pytest.raises(AuthenticationError):
        InventoryAPIClient(BASE_URL, session=session).sign_in("a@b.c", "pw")


def test_list_records_sends_bearer_token_and_parses_items(session):
    client = signed_in(session)
    session.get.return_value = response(
        {"items": [{"id": 1, "character": "Luffy", "quantityStock": 5}, {"id": 2}]}
    )

    records = client.list_records()

    session.get.assert_called_once_with(
        "https://api.test/v1/products",
        headers={"Authorization": "Bearer tok-123"},
        timeout=5,
    )
    assert [r.id for r in records] == [1, 2]
    assert records[0].character == "Luffy"


@pytest.mark.parametrize(
    "resp",
    [
        response(status=500),
        response({"data": []}),
        response({"items": {"id": 1}}),
        response(["not", "an", "object"]),
    ],
)
def test_list_records_failures_are_fatal(session, resp):
    client = signed_in(session)
    session.get.return_value = resp

    with pytest.raises(InventoryFetchError):
        client.list_records()


def test_list_records_connection_error_is_fatal(session):
    client = signed_in(session)
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(InventoryFetchError):
        client.list_records()


def test_update_record_puts_full_payload(session):
    client = signed_in(session)
    session.put.return_value = response({})
    request = InventoryRecord.model_validate({"id": 4, "character": "Nami"}).with_stock(9)

    client.update_record(request)

    session.put.assert_called_once_with(
        "https://api.test/v1/products/4",
        json={"id": 4, "character": "Nami", "quantityStock": 9},
        headers={"Authorization": "Bearer tok-123"},
        timeout=5,
    )


def test_update_record_failure_raises_update_error(session):
    client = signed_in(session)
    session.put.return_value = response(status=500)
    request = InventoryRecord.model_validate({"id": 4}).with_stock(1)

    with pytest.raises(UpdateError) as excinfo:
        client.update_record(request)

    assert excinfo.value.record_id == 4


def test_list_records_skips_invalid_products_and_keeps_the_rest(session, caplog):
    client = signed_in(session)
    session.get.return_value = response(
        {
            "items": [
                {"id": 1, "character": "Luffy", "quantityStock": 5},
                {"id": 2, "character": "Zoro", "quantityStock": None},
                {"id": 3, "character": "Nami", "quantityStock": -1},
                {"id": 4, "character": "Usopp", "quantityStock": 2.5},
                {"id": 5, "treasureBoxRefId": 12345},
                {"character": "no id"},
                "not a product",
            ]
        }
    )

    with caplog.at_level(logging.WARNING, logger="inventory.api"):
        records = client.list_records()

    assert [r.id for r in records] == [1, 2, 3, 4, 5]
    assert records[4].join_key("treasure_box_ref_id") == "12345"
    assert caplog.text.count("Skipping product") == 2
