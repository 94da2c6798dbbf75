"""Query filters for the list endpoints.

Each filter serializes only the fields that differ from their defaults.
List-valued filters become repeated ``name[]`` parameters, and dates are
sent only when later than 1900-01-01 so an unset date never reaches the
server as a zero value.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActionType, InstrumentType, SortOrder

QueryParams = List[Tuple[str, str]]

DATE_FLOOR = datetime(1900, 1, 1, tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_rfc3339(value: datetime) -> str:
    return _as_utc(value).isoformat(timespec="seconds").replace("+00:00", "Z")


def _add_date(params: QueryParams, name: str, value: datetime | None) -> None:
    if value is not None and _as_utc(value) > DATE_FLOOR:
        params.append((name, format_rfc3339(value)))


def _add_repeated(params: QueryParams, name: str, values: List[str]) -> None:
    params.extend((name, v) for v in values)


class _Filter(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, frozen=True)

    def to_params(self) -> QueryParams:
        raise NotImplementedError


class _PagedFilter(_Filter):
    per_page: int = Field(default=0, ge=0)
    page_offset: int = Field(default=0, ge=0)
    sort: SortOrder = SortOrder.DESC
    start_date: datetime | None = None
    end_date: datetime | None = None

    def _paging_params(self) -> QueryParams:
        params: QueryParams = []
        if self.per_page > 0:
            params.append(("per-page", str(self.per_page)))
        if self.page_offset > 0:
            params.append(("page-offset", str(self.page_offset)))
        params.append(("sort", str(self.sort)))
        return params


class PositionFilter(_Filter):
    underlying_symbols: List[str] = Field(default_factory=list)
    symbol: str = ""
    instrument_type: InstrumentType = InstrumentType.UNDEFINED
    include_closed_positions: bool = False
    underlying_product_code: str = ""
    partition_keys: List[str] = Field(default_factory=list)
    net_positions: bool = False
    include_marks: bool = False

    def to_params(self) -> QueryParams:
        params: QueryParams = []
        _add_repeated(params, "underlying-symbol[]", self.underlying_symbols)
        if self.symbol:
            params.append(("symbol", self.symbol))
        if self.instrument_type is not InstrumentType.UNDEFINED:
            params.append(("instrument-type", str(self.instrument_type)))
        if self.include_closed_positions:
            params.append(("include-closed-positions", "true"))
        if self.underlying_product_code:
            params.append(("underlying-product-code", self.underlying_product_code))
        _add_repeated(params, "partition-keys[]", self.partition_keys)
        if self.net_positions:
            params.append(("net-positions", "true"))
        if self.include_marks:
            params.append(("include-marks", "true"))
        return params


class TransactionFilter(_PagedFilter):
    transaction_types: List[str] = Field(default_factory=list)
    transaction_sub_types: List[str] = Field(default_factory=list)
    symbol: str = ""
    instrument_type: InstrumentType = InstrumentType.UNDEFINED
    underlying_symbol: str = ""
    action: ActionType = ActionType.UNDEFINED
    partition_key: str = ""
    futures_symbol: str = ""

    def to_params(self) -> QueryParams:
        params = self._paging_params()
        if len(self.transaction_types) == 1:
            params.append(("type", self.transaction_types[0]))
        else:
            _add_repeated(params, "types[]", self.transaction_types)
        _add_repeated(params, "sub-type[]", self.transaction_sub_types)
        _add_date(params, "start-date", self.start_date)
        _add_date(params, "end-date", self.end_date)
        if self.symbol:
            params.append(("symbol", self.symbol))
        if self.instrument_type is not InstrumentType.UNDEFINED:
            params.append(("instrument-type", str(self.instrument_type)))
        if self.underlying_symbol:
            params.append(("underlying-symbol", self.underlying_symbol))
        if self.action is not ActionType.UNDEFINED:
            params.append(("action", str(self.action)))
        if self.partition_key:
            params.append(("partition-key", self.partition_key))
        if self.futures_symbol:
            params.append(("futures-symbol", self.futures_symbol))
        return params


class OrdersFilter(_PagedFilter):
    statuses: List[str] = Field(default_factory=list)
    underlying_symbol: str = ""
    underlying_instrument_type: InstrumentType = InstrumentType.UNDEFINED
    futures_symbol: str = ""

    def to_params(self) -> QueryParams:
        params = self._paging_params()
        _add_repeated(params, "status[]", self.statuses)
        _add_date(params, "start-date", self.start_date)
        _add_date(params, "end-date", self.end_date)
        if self.underlying_symbol:
            params.append(("underlying-symbol", self.underlying_symbol))
        if self.underlying_instrument_type is not InstrumentType.UNDEFINED:
            params.append(("underlying-instrument-type", str(self.underlying_instrument_type)))
        if self.futures_symbol:
            params.append(("futures-symbol", self.futures_symbol))
        return params
