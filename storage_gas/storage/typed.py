"""
Typed helpers over raw key-value storage.

Encodes namespaced keys and JSON values the way contract storage libraries
do, so gas measured in tests matches what real contract code would write.

Key layout:
- A namespace is stored with a 2-byte big-endian length prefix.
- Integer keys are 8-byte big-endian unsigned; str keys are UTF-8.
- In a composite (tuple) key every element but the last is length-prefixed.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from .backend import Order, Record, StorageBackend

KeyPart = Union[bytes, str, int]
Key = Union[KeyPart, Tuple[KeyPart, ...]]


def to_length_prefixed(namespace: bytes) -> bytes:
    """Prefix `namespace` with its length as 2 big-endian bytes."""
    if len(namespace) > 0xFFFF:
        raise ValueError("namespace must be at most 65535 bytes")
    return len(namespace).to_bytes(2, "big") + namespace


def _prefix_upper_bound(prefix: bytes) -> Optional[bytes]:
    """Smallest key greater than every key starting with `prefix`."""
    data = bytearray(prefix)
    while data:
        if data[-1] < 0xFF:
            data[-1] += 1
            return bytes(data)
        data.pop()
    return None


def _encode_key_part(part: KeyPart) -> bytes:
    if isinstance(part, bool):
        raise TypeError("bool is not a supported key type")
    if isinstance(part, int):
        if part < 0 or part > 2**64 - 1:
            raise ValueError("integer keys must fit in an unsigned 64-bit value")
        return part.to_bytes(8, "big")
    if isinstance(part, str):
        return part.encode("utf-8")
    if isinstance(part, (bytes, bytearray)):
        return bytes(part)
    raise TypeError(f"unsupported key type: {type(part).__name__}")


def encode_key(key: Key) -> bytes:
    """Encode a map key; tuples become length-prefixed composite keys."""
    if not isinstance(key, tuple):
        return _encode_key_part(key)
    if not key:
        raise ValueError("composite key must not be empty")
    parts = [_encode_key_part(part) for part in key]
    return b"".join(to_length_prefixed(part) for part in parts[:-1]) + parts[-1]


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_json(value: Any) -> bytes:
    """Compact JSON; bytes are written as an array of integers."""
    return json.dumps(value, separators=(",", ":"), default=_json_default).encode("utf-8")


def from_json(raw: bytes) -> Any:
    return json.loads(raw.decode("utf-8"))


def _range_prefixed(
    storage: StorageBackend,
    prefix: bytes,
    start: Optional[bytes],
    end: Optional[bytes],
    order: Order,
) -> Iterator[Record]:
    """Range over keys under `prefix`, yielding keys with the prefix stripped."""
    lower = prefix + (start or b"")
    upper = prefix + end if end is not None else _prefix_upper_bound(prefix)
    offset = len(prefix)
    for key, value in storage.range(lower, upper, order):
        yield key[offset:], value


class PrefixedStorage:
    """View of a store where every key lives under a length-prefixed namespace."""

    def __init__(self, storage: StorageBackend, namespace: bytes):
        self.storage = storage
        self.prefix = to_length_prefixed(namespace)

    def get(self, key: bytes) -> Optional[bytes]:
        return self.storage.get(self.prefix + key)

    def set(self, key: bytes, value: bytes) -> None:
        self.storage.set(self.prefix + key, value)

    def remove(self, key: bytes) -> None:
        self.storage.remove(self.prefix + key)

    def range(
        self,
        start: Optional[bytes] = None,
        end: Optional[bytes] = None,
        order: Order = Order.ASCENDING,
    ) -> Iterator[Record]:
        return _range_prefixed(self.storage, self.prefix, start, end, order)


class Map:
    """Namespaced map of JSON values stored in a key-value store.

    Example:
        balances = Map("balances")
        balances.save(storage, "alice", 100)
        balances.load(storage, "alice")  # 100
    """

    def __init__(self, namespace: str, decoder: Optional[Callable[[Any], Any]] = None):
        """Initialize the map.

        Args:
            namespace: Namespace shared by all entries of this map
            decoder: Optional callable applied to every decoded JSON value
        """
        if not namespace:
            raise ValueError("namespace is required and cannot be empty")
        self.namespace = namespace
        self.prefix = to_length_prefixed(namespace.encode("utf-8"))
        self.decoder = decoder

    def key(self, key: Key) -> bytes:
        """Full storage key for `key`."""
        return self.prefix + encode_key(key)

    def _decode(self, raw: bytes) -> Any:
        value = from_json(raw)
        return self.decoder(value) if self.decoder else value

    def save(self, storage: StorageBackend, key: Key, value: Any) -> None:
        storage.set(self.key(key), to_json(value))

    def may_load(self, storage: StorageBackend, key: Key) -> Optional[Any]:
        raw = storage.get(self.key(key))
        return None if raw is None else self._decode(raw)

    def load(self, storage: StorageBackend, key: Key) -> Any:
        """Load the value under `key`.

        Raises:
            KeyError: If nothing is stored under `key`
        """
        value = self.may_load(storage, key)
        if value is None:
            raise KeyError(f"{self.namespace}: key not found: {key!r}")
        return value

    def remove(self, storage: StorageBackend, key: Key) -> None:
        storage.remove(self.key(key))

    def range(
        self,
        storage: StorageBackend,
        start: Optional[Key] = None,
        end: Optional[Key] = None,
        order: Order = Order.ASCENDING,
    ) -> Iterator[Tuple[bytes, Any]]:
        """Iterate `(raw_key, value)` pairs, keys with the namespace stripped."""
        raw_start = encode_key(start) if start is not None else None
        raw_end = encode_key(end) if end is not None else None
        for key, raw in _range_prefixed(storage, self.prefix, raw_start, raw_end, order):
            yield key, self._decode(raw)


# Bank-style balances, laid out like a multi-test bank module
BANK_NAMESPACE = b"bank"
BALANCES = Map("balances")


@dataclass(frozen=True)
class Coin:
    """Amount of a single native denomination."""
    denom: str
    amount: int

    def __post_init__(self):
        if not self.denom:
            raise ValueError("denom is required and cannot be empty")
        if self.amount < 0:
            raise ValueError("amount must be >= 0")

    def to_json_obj(self) -> dict:
        # Amounts are serialized as strings, as 128-bit integers are on chain.
        return {"denom": self.denom, "amount": str(self.amount)}


def init_balance(storage: StorageBackend, address: str, coins: List[Coin]) -> None:
    """Set the full balance of `address` in a single write."""
    bank = PrefixedStorage(storage, BANK_NAMESPACE)
    BALANCES.save(bank, address, [coin.to_json_obj() for coin in coins])


def query_balance(storage: StorageBackend, address: str) -> List[Coin]:
    """Balance of `address`; an unknown address holds no coins."""
    bank = PrefixedStorage(storage, BANK_NAMESPACE)
    raw = BALANCES.may_load(bank, address) or []
    return [Coin(denom=c["denom"], amount=int(c["amount"])) for c in raw]
