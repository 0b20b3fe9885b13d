"""Mapper functions to convert block-explorer JSON into domain entities.

The explorer follows the Esplora response layout: transactions carry a
``status`` object plus ``vin``/``vout`` lists, and each input embeds the
previous output it spends under ``prevout``.
"""

from typing import Any, Optional

from btcwatch.domain.entities import RawTransaction, TxInput, TxOutput, UnspentOutput
from btcwatch.domain.errors import ParseError


def _int_value(data: dict[str, Any], field: str) -> int:
    value = data.get(field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"Expected integer '{field}', got {value!r}")
    return value


def _address(data: dict[str, Any]) -> Optional[str]:
    return data.get("scriptpubkey_address")


def input_to_domain(data: dict[str, Any]) -> TxInput:
    """Convert a ``vin`` entry to a TxInput.

    Coinbase inputs have no previous output and map to an ownerless zero input.
    """
    prevout = data.get("prevout")
    if prevout is None:
        return TxInput(address=None, value=0)
    return TxInput(address=_address(prevout), value=_int_value(prevout, "value"))


def output_to_domain(data: dict[str, Any]) -> TxOutput:
    """Convert a ``vout`` entry to a TxOutput."""
    return TxOutput(address=_address(data), value=_int_value(data, "value"))


def transaction_to_domain(data: Any) -> RawTransaction:
    """Convert a transaction object to a RawTransaction."""
    if not isinstance(data, dict):
        raise ParseError(f"Expected transaction object, got {type(data).__name__}")
    try:
        txid = data["txid"]
        status = data.get("status") or {}
        confirmed = bool(status.get("confirmed", False))
        block_time = status.get("block_time") if confirmed else None
        return RawTransaction(
            txid=txid,
            confirmed=confirmed,
            block_time=block_time,
            inputs=tuple(input_to_domain(vin) for vin in data.get("vin", [])),
            outputs=tuple(output_to_domain(vout) for vout in data.get("vout", [])),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ParseError(f"Malformed transaction: {e}") from e


def utxo_to_domain(data: Any) -> UnspentOutput:
    """Convert a UTXO object to an UnspentOutput."""
    if not isinstance(data, dict):
        raise ParseError(f"Expected UTXO object, got {type(data).__name__}")
    status = data.get("status") or {}
    return UnspentOutput(
        value=_int_value(data, "value"),
        txid=data.get("txid"),
        vout=data.get("vout"),
        confirmed=status.get("confirmed"),
    )


def transactions_to_domain(payload: Any) -> list[RawTransaction]:
    """Convert a transaction list response."""
    if not isinstance(payload, list):
        raise ParseError("Expected a list of transactions")
    return [transaction_to_domain(item) for item in payload]


def utxos_to_domain(payload: Any) -> list[UnspentOutput]:
    """Convert a UTXO list response."""
    if not isinstance(payload, list):
        raise ParseError("Expected a list of unspent outputs")
    return [utxo_to_domain(item) for item in payload]


def price_from_payload(payload: Any, currency: str = "USD") -> float:
    """Extract the price in one currency from a prices response."""
    if not isinstance(payload, dict) or currency not in payload:
        raise ParseError(f"Price response has no '{currency}' field")
    price = payload[currency]
    if isinstance(price, bool) or not isinstance(price, (int, float)) or price <= 0:
        raise ParseError(f"Invalid {currency} price: {price!r}")
    return float(price)
