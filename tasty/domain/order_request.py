from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator, model_validator

from .enums import (
    ActionCondition,
    ActionType,
    Comparator,
    Effect,
    Indicator,
    InstrumentType,
    OrderType,
    TimeInForce,
    WireEnum,
)


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class _WireModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        alias_generator=_kebab,
        populate_by_name=True,
    )

    @field_validator("*")
    @classmethod
    def _reject_undefined(cls, value: Any) -> Any:
        if isinstance(value, WireEnum) and value is type(value).UNDEFINED:
            raise ValueError(f"{value.value!r} is not part of the wire vocabulary")
        return value


class OrderLeg(_WireModel):
    instrument_type: InstrumentType
    symbol: str = Field(min_length=1)
    quantity: PositiveFloat | None = None
    action: ActionType


class PriceComponent(_WireModel):
    symbol: str = Field(min_length=1)
    instrument_type: InstrumentType
    quantity: PositiveFloat
    quantity_direction: str = "Long"


class OrderCondition(_WireModel):
    action: ActionCondition
    symbol: str = Field(min_length=1)
    instrument_type: InstrumentType
    indicator: Indicator = Indicator.LAST
    comparator: Comparator
    threshold: float
    price_components: List[PriceComponent] = Field(default_factory=list)


class OrderRules(_WireModel):
    route_after: datetime | None = None
    cancel_at: datetime | None = None
    conditions: List[OrderCondition] = Field(default_factory=list)


class OrderRequest(_WireModel):
    """Order submission payload; dumps to the API's kebab-case JSON body."""

    time_in_force: TimeInForce
    order_type: OrderType
    legs: List[OrderLeg] = Field(min_length=1)

    gtc_date: date | None = None
    stop_trigger: PositiveFloat | None = None
    price: float | None = None
    price_effect: Effect | None = None
    value: float | None = None
    value_effect: Effect | None = None
    partition_key: str | None = None
    preflight_id: str | None = None
    source: str | None = None
    rules: OrderRules | None = None

    @field_validator("partition_key", "preflight_id", "source", mode="before")
    @classmethod
    def _normalize_optional_str(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("price", "value")
    @classmethod
    def _check_amount_precision(cls, value: float | None) -> float | None:
        # Prices on the wire never carry more than 8 decimals.
        if value is None:
            return None
        if value < 0:
            raise ValueError("amount must not be negative")
        return round(value, 8)

    @model_validator(mode="after")
    def _validate_order_type_fields(self) -> "OrderRequest":
        if self.order_type in (OrderType.LIMIT, OrderType.STOP_LIMIT, OrderType.MARKETABLE_LIMIT):
            if self.price is None or self.price_effect is None:
                raise ValueError(f"price and price_effect are required when order_type={self.order_type}")

        if self.order_type is OrderType.MARKET and self.price is not None:
            raise ValueError("price must be omitted when order_type=Market")

        if self.order_type in (OrderType.STOP, OrderType.STOP_LIMIT) and self.stop_trigger is None:
            raise ValueError(f"stop_trigger is required when order_type={self.order_type}")

        if self.order_type is OrderType.NOTIONAL_MARKET and (self.value is None or self.value_effect is None):
            raise ValueError("value and value_effect are required when order_type=Notional Market")

        if self.time_in_force is TimeInForce.GTD and self.gtc_date is None:
            raise ValueError("gtc_date is required when time_in_force=GTD")

        if self.price is not None and self.price_effect is None:
            raise ValueError("price_effect is required when price is set")

        return self

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, payload: str) -> "OrderRequest":
        return cls.model_validate_json(payload)
