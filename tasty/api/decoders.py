"""Turn JSON resource nodes into typed entities.

Decoding is driven by the entity dataclasses: each field carries its JSON
path in ``metadata["path"]`` and the coercion is chosen from its annotation.
Nested dataclass fields decode the sub-object at that path, tuple fields
decode every element of the array at that path in source order.
"""

from __future__ import annotations

import dataclasses
import typing
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Dict, List, Tuple, Type, TypeVar

from ..domain.entities import (
    Account,
    Balance,
    OrderResponse,
    OrderStatus,
    Position,
    Transaction,
)
from ..domain.enums import WireEnum
from ..errors import DecodeError
from . import jsonpath

T = TypeVar("T")

Reader = Callable[[Any, str], Any]

_SCALAR_READERS: Dict[Any, Reader] = {
    str: jsonpath.get_str,
    float: jsonpath.get_float,
    int: jsonpath.get_int,
    bool: jsonpath.get_bool,
    datetime: jsonpath.get_time,
}


def _enum_reader(enum_cls: Type[WireEnum]) -> Reader:
    def read(node: Any, json_path: str) -> WireEnum:
        return enum_cls.from_string(jsonpath.get_str(node, json_path))

    return read


def _nested_reader(entity_cls: type) -> Reader:
    def read(node: Any, json_path: str) -> Any:
        child = jsonpath.lookup(node, json_path)
        if child is not None and not isinstance(child, dict):
            raise DecodeError(f"expected an object at {json_path!r}, got {type(child).__name__}")
        return decode(entity_cls, child or {})

    return read


def _sequence_reader(entity_cls: type) -> Reader:
    def read(node: Any, json_path: str) -> Tuple[Any, ...]:
        return tuple(decode(entity_cls, item) for item in jsonpath.get_array(node, json_path))

    return read


def _reader_for(annotation: Any) -> Reader:
    if annotation in _SCALAR_READERS:
        return _SCALAR_READERS[annotation]
    if isinstance(annotation, type) and issubclass(annotation, WireEnum):
        return _enum_reader(annotation)
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return _nested_reader(annotation)
    if typing.get_origin(annotation) is tuple:
        item_type = typing.get_args(annotation)[0]
        return _sequence_reader(item_type)
    raise TypeError(f"no JSON reader for annotation {annotation!r}")


@lru_cache(maxsize=None)
def _schema(entity_cls: type) -> Tuple[Tuple[str, str, Reader], ...]:
    hints = typing.get_type_hints(entity_cls)
    return tuple(
        (f.name, f.metadata["path"], _reader_for(hints[f.name]))
        for f in dataclasses.fields(entity_cls)
    )


def decode(entity_cls: Type[T], node: Any) -> T:
    """Decode one JSON object into ``entity_cls``; absent fields take their zero value."""
    if node is None:
        node = {}
    if not isinstance(node, dict):
        raise DecodeError(f"expected an object for {entity_cls.__name__}, got {type(node).__name__}")
    values = {name: read(node, json_path) for name, json_path, read in _schema(entity_cls)}
    return entity_cls(**values)  # type: ignore[call-arg]


def decode_items(entity_cls: Type[T], document: Any, json_path: str = "data.items") -> List[T]:
    return [decode(entity_cls, item) for item in jsonpath.get_array(document, json_path)]


def decode_accounts(document: Any) -> List[Account]:
    return decode_items(Account, document)


def decode_balance(document: Any) -> Balance:
    return decode(Balance, jsonpath.lookup(document, "data"))


def decode_balance_snapshot(document: Any) -> Balance:
    items = jsonpath.get_array(document, "data.items")
    if items:
        return decode(Balance, items[0])
    return decode_balance(document)


def decode_positions(document: Any) -> List[Position]:
    return decode_items(Position, document)


def decode_transactions(document: Any) -> List[Transaction]:
    return decode_items(Transaction, document)


def decode_order_status(node: Any) -> OrderStatus:
    return decode(OrderStatus, node)


def decode_orders(document: Any) -> List[OrderStatus]:
    return decode_items(OrderStatus, document)


def decode_order_response(document: Any) -> OrderResponse:
    return decode(OrderResponse, jsonpath.lookup(document, "data"))
