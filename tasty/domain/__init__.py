"""Typed domain model: wire enums, resource snapshots, order requests and filters."""

from .entities import (
    Account,
    Balance,
    BuyingPowerChange,
    ConditionPriceComponent,
    ConditionStatus,
    ErrorMsg,
    FeeInfo,
    FillStatus,
    LegStatus,
    Lot,
    OrderResponse,
    OrderStatus,
    Position,
    RuleStatus,
    Transaction,
)
from .enums import (
    ActionCondition,
    ActionType,
    Comparator,
    Effect,
    Indicator,
    InstrumentType,
    OrderType,
    SortOrder,
    TimeInForce,
    TimeOfDay,
)
from .filters import OrdersFilter, PositionFilter, TransactionFilter
from .order_request import OrderCondition, OrderLeg, OrderRequest, OrderRules, PriceComponent

__all__ = [
    "Account",
    "ActionCondition",
    "ActionType",
    "Balance",
    "BuyingPowerChange",
    "Comparator",
    "ConditionPriceComponent",
    "ConditionStatus",
    "Effect",
    "ErrorMsg",
    "FeeInfo",
    "FillStatus",
    "Indicator",
    "InstrumentType",
    "LegStatus",
    "Lot",
    "OrderCondition",
    "OrderLeg",
    "OrderRequest",
    "OrderResponse",
    "OrderRules",
    "OrderStatus",
    "OrderType",
    "OrdersFilter",
    "Position",
    "PositionFilter",
    "PriceComponent",
    "RuleStatus",
    "SortOrder",
    "TimeInForce",
    "TimeOfDay",
    "Transaction",
    "TransactionFilter",
]
