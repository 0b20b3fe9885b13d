"""Tests for the mempool.space API client."""

import asyncio

import httpx
import pytest

from btcwatch.clients.mempool import MempoolClient
from btcwatch.domain.errors import (
    PRICES_FETCH_FAILED,
    TRANSACTIONS_FETCH_FAILED,
    UTXOS_FETCH_FAILED,
    ParseError,
    UpstreamFetchError,
)
from conftest import JAN_05_2024, OTHER, WATCHED

API_URL = "https://mempool.test/api"

TX_PAYLOAD = [
    {
        "txid": "f00d",
        "status": {"confirmed": True, "block_time": JAN_05_2024},
        "vin": [{"prevout": {"scriptpubkey_address": OTHER, "value": 150_000}}],
        "vout": [{"scriptpubkey_address": WATCHED, "value": 100_000}],
    }
]
UTXO_PAYLOAD = [{"txid": "f00d", "vout": 0, "status": {"confirmed": True}, "value": 100_000}]
PRICE_PAYLOAD = {"time": JAN_05_2024, "USD": 44000, "EUR": 40000}


def make_transport(statuses=None, bodies=None):
    """MockTransport serving the three endpoints for WATCHED."""
    statuses = statuses or {}
    bodies = bodies or {}
    routes = {
        f"/api/address/{WATCHED}/txs": ("txs", TX_PAYLOAD),
        f"/api/address/{WATCHED}/utxo": ("utxo", UTXO_PAYLOAD),
        "/api/v1/prices": ("prices", PRICE_PAYLOAD),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path not in routes:
            return httpx.Response(404, text="Not Found")
        name, payload = routes[request.url.path]
        status = statuses.get(name, 200)
        if name in bodies:
            return httpx.Response(status, content=bodies[name])
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


def run_with_client(transport, action):
    async def scenario():
        async with MempoolClient(base_url=API_URL, transport=transport) as client:
            return await action(client)

    return asyncio.run(scenario())


def test_fetch_transactions():
    txs = run_with_client(make_transport(), lambda c: c.fetch_transactions(WATCHED))

    assert len(txs) == 1
    assert txs[0].txid == "f00d"
    assert txs[0].outputs[0].address == WATCHED


def test_fetch_utxos():
    result = run_with_client(make_transport(), lambda c: c.fetch_utxos(WATCHED))

    assert [u.value for u in result] == [100_000]


def test_fetch_price():
    assert run_with_client(make_transport(), lambda c: c.fetch_price()) == 44000.0


def test_base_url_trailing_slash_is_ignored():
    async def scenario():
        async with MempoolClient(base_url=API_URL + "/", transport=make_transport()) as client:
            return await client.fetch_price()

    assert asyncio.run(scenario()) == 44000.0


@pytest.mark.parametrize(
    "name,action,message",
    [
        ("txs", lambda c: c.fetch_transactions(WATCHED), TRANSACTIONS_FETCH_FAILED),
        ("utxo", lambda c: c.fetch_utxos(WATCHED), UTXOS_FETCH_FAILED),
        ("prices", lambda c: c.fetch_price(), PRICES_FETCH_FAILED),
    ],
)
def test_non_success_status_raises_request_specific_error(name, action, message):
    transport = make_transport(statuses={name: 400}, bodies={name: b"Invalid Bitcoin address"})

    with pytest.raises(UpstreamFetchError) as excinfo:
        run_with_client(transport, action)

    assert str(excinfo.value) == message
    assert excinfo.value.status_code == 400


def test_transport_error_raises_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamFetchError, match="pricing data"):
        run_with_client(httpx.MockTransport(handler), lambda c: c.fetch_price())


def test_invalid_json_raises_parse_error():
    transport = make_transport(bodies={"utxo": b"<html>oops</html>"})

    with pytest.raises(ParseError):
        run_with_client(transport, lambda c: c.fetch_utxos(WATCHED))
