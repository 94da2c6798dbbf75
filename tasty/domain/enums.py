"""Closed string vocabularies used on the wire.

Every enum has an ``UNDEFINED`` member rendered as ``"UNK"``. Decoding is
total: any string outside the vocabulary maps to ``UNDEFINED`` instead of
raising, so a new server-side value never breaks a response.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

UNDEFINED_WIRE_VALUE = "UNK"


class WireEnum(str, Enum):
    @classmethod
    def from_string(cls, value: Any):
        if not isinstance(value, str):
            return cls.UNDEFINED  # type: ignore[attr-defined]
        return cls._value2member_map_.get(value, cls.UNDEFINED)  # type: ignore[attr-defined]

    def __str__(self) -> str:
        return self.value


class InstrumentType(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    BOND = "Bond"
    CRYPTOCURRENCY = "Cryptocurrency"
    CURRENCY_PAIR = "Currency Pair"
    EQUITY = "Equity"
    EQUITY_OFFERING = "Equity Offering"
    EQUITY_OPTION = "Equity Option"
    FUTURE = "Future"
    FUTURE_OPTION = "Future Option"
    INDEX = "Index"
    UNKNOWN = "Unknown"
    WARRANT = "Warrant"


class ActionType(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    ALLOCATE = "Allocate"
    BUY = "Buy"
    BUY_TO_CLOSE = "Buy to Close"
    BUY_TO_OPEN = "Buy to Open"
    SELL = "Sell"
    SELL_TO_CLOSE = "Sell to Close"
    SELL_TO_OPEN = "Sell to Open"


class Effect(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    CREDIT = "Credit"
    DEBIT = "Debit"
    NONE = "None"


class OrderType(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    LIMIT = "Limit"
    MARKET = "Market"
    MARKETABLE_LIMIT = "Marketable Limit"
    STOP = "Stop"
    STOP_LIMIT = "Stop Limit"
    NOTIONAL_MARKET = "Notional Market"


class TimeInForce(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    DAY = "Day"
    GTC = "GTC"
    GTD = "GTD"
    EXT = "Ext"
    GTC_EXT = "GTC Ext"
    IOC = "IOC"


class ActionCondition(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    ROUTE = "route"
    CANCEL = "cancel"


class Indicator(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    LAST = "last"


class Comparator(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    GTE = "gte"
    LTE = "lte"


class SortOrder(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    DESC = "Desc"
    ASC = "Asc"


class TimeOfDay(WireEnum):
    UNDEFINED = UNDEFINED_WIRE_VALUE
    EOD = "EOD"
    BOD = "BOD"


ALL_ENUMS = (
    InstrumentType,
    ActionType,
    Effect,
    OrderType,
    TimeInForce,
    ActionCondition,
    Indicator,
    Comparator,
    SortOrder,
    TimeOfDay,
)
