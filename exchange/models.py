# exchange/models.py
from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

from exchange.enums import Interval, OrderRespType, OrderType, Side, TimeInForce
from exchange.errors import SerializationError, SigningError
from utils.logger import mask
from utils.time import utc_ms

Number = Union[float, int, Decimal]

# wire names that are not the camelCase form of the attribute
_WIRE_RENAMES = {"order_type": "type"}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def wire_name(attr: str) -> str:
    return _WIRE_RENAMES.get(attr) or _camel(attr)


def _format_number(value: Number) -> str:
    # shortest positional form: 1.0 -> "1", 30.5 -> "30.5", 1e-7 -> "0.0000001"
    dec = value if isinstance(value, Decimal) else Decimal(repr(value))
    if not dec.is_finite():
        raise SerializationError(f"cannot encode non-finite number {value!r}")
    text = format(dec.normalize(), "f")
    return "0" if text == "-0" else text


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (float, Decimal)):
        return _format_number(value)
    if isinstance(value, str):
        return value
    raise SerializationError(f"unsupported parameter value {value!r} ({type(value).__name__})")


@dataclass
class Parameters:
    """
    Every optional field any endpoint accepts. Declaration order is the wire
    order; unset (None) fields are omitted when encoding.

    `timestamp` and `signature` are written only by `sign`.
    """
    symbol: Optional[str] = None
    side: Optional[Side] = None
    order_type: Optional[OrderType] = None
    price: Optional[Number] = None
    quantity: Optional[Number] = None
    time_in_force: Optional[TimeInForce] = None
    stop_price: Optional[Number] = None
    iceberg_qty: Optional[Number] = None
    new_client_order_id: Optional[str] = None
    new_order_resp_type: Optional[OrderRespType] = None
    order_id: Optional[int] = None
    orig_client_order_id: Optional[str] = None
    order_list_id: Optional[int] = None
    list_client_order_id: Optional[str] = None
    limit_client_order_id: Optional[str] = None
    limit_iceberg_qty: Optional[Number] = None
    stop_client_order_id: Optional[str] = None
    stop_limit_price: Optional[Number] = None
    stop_iceberg_qty: Optional[Number] = None
    stop_limit_time_in_force: Optional[TimeInForce] = None
    interval: Optional[Interval] = None
    from_id: Optional[int] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: Optional[int] = None
    listen_key: Optional[str] = None
    asset: Optional[str] = None
    address: Optional[str] = None
    address_tag: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[Number] = None
    status: Optional[Union[bool, int]] = None
    email: Optional[str] = None
    from_email: Optional[str] = None
    to_email: Optional[str] = None
    page: Optional[int] = None
    recv_window: Optional[int] = None
    timestamp: Optional[int] = field(default=None, init=False)
    signature: Optional[str] = field(default=None, init=False)

    def pairs(self) -> List[Tuple[str, str]]:
        out = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out.append((wire_name(f.name), _format_value(value)))
        return out

    def encode(self) -> str:
        """Canonical `application/x-www-form-urlencoded` form, also used as the query string."""
        return urlencode(self.pairs())

    def sign(self, secret: Union[str, bytes], timestamp: Optional[int] = None) -> "Parameters":
        """
        Stamp `timestamp` (epoch ms, now unless given) and set `signature` to the
        lowercase hex HMAC-SHA256 of the encoded record, keyed by `secret`.
        Both fields are replaced on every call.
        """
        key = _key_bytes(secret)
        ts = utc_ms() if timestamp is None else int(timestamp)

        self.signature = None
        self.timestamp = ts
        try:
            message = self.encode()
        except SerializationError:
            self.timestamp = None
            raise
        self.signature = hmac.new(key, message.encode("utf-8"), hashlib.sha256).hexdigest()
        return self

    @property
    def is_signed(self) -> bool:
        return self.signature is not None


def _key_bytes(secret: Union[str, bytes, None]) -> bytes:
    if isinstance(secret, str):
        key = secret.encode("utf-8")
    elif isinstance(secret, (bytes, bytearray)):
        key = bytes(secret)
    else:
        raise SigningError(f"secret key must be str or bytes, got {type(secret).__name__}")
    if not key:
        raise SigningError("secret key is empty")
    return key


@dataclass(frozen=True)
class Credentials:
    """API key (sent as a header) and secret key (used only to sign)."""
    api_key: Optional[str] = None
    secret_key: Optional[str] = None

    @classmethod
    def from_cfg(cls, cfg: Mapping[str, Any]) -> "Credentials":
        try:
            binance_cfg = cfg["binance"]
        except KeyError as e:
            raise ValueError(f"Invalid cfg missing key: {e}") from e
        return cls(
            api_key=binance_cfg.get("api_key") or None,
            secret_key=binance_cfg.get("secret_key") or None,
        )

    def __repr__(self) -> str:
        return f"Credentials(api_key={mask(self.api_key)!r}, secret_key={mask(self.secret_key)!r})"


OrderRef = Union[int, str]


def split_order_ref(ref: OrderRef) -> Tuple[Optional[int], Optional[str]]:
    """
    Integer references are exchange-assigned ids, strings are client-assigned ids.
    """
    if isinstance(ref, bool):
        raise TypeError("order reference must be an int id or a client id string")
    if isinstance(ref, int):
        return ref, None
    if isinstance(ref, str):
        return None, ref
    raise TypeError("order reference must be an int id or a client id string")
