"""Read-only snapshots of API resources.

Each field names its JSON path once through :func:`path`; the decoder in
``tasty.api.decoders`` derives the coercion from the field's annotation.
Nested sequences are tuples in source order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from .enums import (
    ActionCondition,
    ActionType,
    Comparator,
    Effect,
    Indicator,
    InstrumentType,
    OrderType,
)

TERMINAL_ORDER_STATUSES = frozenset({"Filled", "Cancelled", "Rejected", "Expired", "Removed", "Partially Removed"})


def path(json_path: str):
    return field(metadata={"path": json_path})


@dataclass(frozen=True)
class Account:
    account_number: str = path("account.account-number")
    external_id: str = path("account.external-id")
    opened_at: datetime = path("account.opened-at")
    nickname: str = path("account.nickname")
    account_type: str = path("account.account-type-name")
    day_trader_status: bool = path("account.day-trader-status")
    margin_or_cash: str = path("account.margin-or-cash")
    authority_level: str = path("authority-level")
    is_firm_error: bool = path("account.is-firm-error")
    is_firm_proprietary: bool = path("account.is-firm-proprietary")
    is_test_drive: bool = path("account.is-test-drive")
    is_foreign: bool = path("account.is-foreign")
    funding_date: datetime = path("account.funding-date")


@dataclass(frozen=True)
class Balance:
    account_number: str = path("account-number")
    cash_balance: float = path("cash-balance")
    long_equity_value: float = path("long-equity-value")
    short_equity_value: float = path("short-equity-value")
    long_derivative_value: float = path("long-derivative-value")
    short_derivative_value: float = path("short-derivative-value")
    long_futures_value: float = path("long-futures-value")
    short_futures_value: float = path("short-futures-value")
    long_futures_derivative_value: float = path("long-futures-derivative-value")
    short_futures_derivative_value: float = path("short-futures-derivative-value")
    long_margineable_value: float = path("long-margineable-value")
    short_margineable_value: float = path("short-margineable-value")
    margin_equity: float = path("margin-equity")
    equity_buying_power: float = path("equity-buying-power")
    derivative_buying_power: float = path("derivative-buying-power")
    day_trading_buying_power: float = path("day-trading-buying-power")
    futures_margin_requirement: float = path("futures-margin-requirement")
    available_trading_funds: float = path("available-trading-funds")
    maintenance_requirement: float = path("maintenance-requirement")
    maintenance_call_value: float = path("maintenance-call-value")
    reg_t_call_value: float = path("reg-t-call-value")
    day_trading_call_value: float = path("day-trading-call-value")
    day_equity_call_value: float = path("day-equity-call-value")
    net_liquidating_value: float = path("net-liquidating-value")
    cash_available_to_withdraw: float = path("cash-available-to-withdraw")
    day_trade_excess: float = path("day-trade-excess")
    pending_cash: float = path("pending-cash")
    pending_cash_effect: str = path("pending-cash-effect")
    long_cryptocurrency_value: float = path("long-cryptocurrency-value")
    short_cryptocurrency_value: float = path("short-cryptocurrency-value")
    cryptocurrency_margin_requirement: float = path("cryptocurrency-margin-requirement")
    unsettled_cryptocurrency_fiat_amount: float = path("unsettled-cryptocurrency-fiat-amount")
    unsettled_cryptocurrency_fiat_effect: str = path("unsettled-cryptocurrency-fiat-effect")
    closed_loop_available_balance: float = path("closed-loop-available-balance")
    equity_offering_margin_requirement: float = path("equity-offering-margin-requirement")
    long_bond_value: float = path("long-bond-value")
    bond_margin_requirement: float = path("bond-margin-requirement")
    used_derivative_buying_power: float = path("used-derivative-buying-power")
    snapshot_date: datetime = path("snapshot-date")
    reg_t_margin_requirement: float = path("reg-t-margin-requirement")
    futures_overnight_margin_requirement: float = path("futures-overnight-margin-requirement")
    futures_intraday_margin_requirement: float = path("futures-intraday-margin-requirement")
    maintenance_excess: float = path("maintenance-excess")
    pending_margin_interest: float = path("pending-margin-interest")
    effective_cryptocurrency_buying_power: float = path("effective-cryptocurrency-buying-power")
    updated_at: datetime = path("updated-at")


@dataclass(frozen=True)
class Position:
    account_number: str = path("account-number")
    symbol: str = path("symbol")
    instrument_type: str = path("instrument-type")
    underlying_symbol: str = path("underlying-symbol")
    quantity: float = path("quantity")
    quantity_direction: str = path("quantity-direction")
    close_price: float = path("close-price")
    average_open_price: float = path("average-open-price")
    average_yearly_market_close_price: float = path("average-yearly-market-close-price")
    average_daily_market_close_price: float = path("average-daily-market-close-price")
    multiplier: float = path("multiplier")
    cost_effect: str = path("cost-effect")
    is_suppressed: bool = path("is-suppressed")
    is_frozen: bool = path("is-frozen")
    restricted_quantity: float = path("restricted-quantity")
    realized_day_gain: float = path("realized-day-gain")
    realized_day_gain_effect: str = path("realized-day-gain-effect")
    realized_day_gain_date: datetime = path("realized-day-gain-date")
    realized_today: float = path("realized-today")
    realized_today_effect: str = path("realized-today-effect")
    realized_today_date: datetime = path("realized-today-date")
    expires_at: datetime = path("expires-at")
    created_at: datetime = path("created-at")
    updated_at: datetime = path("updated-at")


@dataclass(frozen=True)
class Lot:
    id: str = path("id")
    transaction_id: int = path("transaction-id")
    quantity: float = path("quantity")
    price: float = path("price")
    quantity_direction: str = path("quantity-direction")
    executed_at: datetime = path("executed-at")
    transaction_date: datetime = path("transaction-date")


@dataclass(frozen=True)
class Transaction:
    id: int = path("id")
    account_number: str = path("account-number")
    executed_at: datetime = path("executed-at")
    transaction_date: datetime = path("transaction-date")
    transaction_type: str = path("transaction-type")
    transaction_sub_type: str = path("transaction-sub-type")
    description: str = path("description")
    underlying_symbol: str = path("underlying-symbol")
    instrument_type: InstrumentType = path("instrument-type")
    symbol: str = path("symbol")
    action: ActionType = path("action")
    quantity: float = path("quantity")
    price: float = path("price")
    value: float = path("value")
    value_effect: Effect = path("value-effect")
    regulatory_fees: float = path("regulatory-fees")
    regulatory_fees_effect: Effect = path("regulatory-fees-effect")
    clearing_fees: float = path("clearing-fees")
    clearing_fees_effect: Effect = path("clearing-fees-effect")
    other_charge: float = path("other-charge")
    other_charge_effect: Effect = path("other-charge-effect")
    other_charge_description: str = path("other-charge-description")
    net_value: float = path("net-value")
    net_value_effect: Effect = path("net-value-effect")
    commission: float = path("commission")
    commission_effect: Effect = path("commission-effect")
    proprietary_index_option_fees: float = path("proprietary-index-option-fees")
    proprietary_index_option_fees_effect: Effect = path("proprietary-index-option-fees-effect")
    is_estimated_fee: bool = path("is-estimated-fee")
    order_id: int = path("order-id")
    lots: Tuple[Lot, ...] = path("lots")
    leg_count: int = path("leg-count")
    destination_venue: str = path("destination-venue")
    agency_price: float = path("agency-price")
    principal_price: float = path("principal-price")
    external_exchange_order_number: str = path("ext-exchange-order-number")
    external_global_order_number: int = path("ext-global-order-number")
    external_group_id: str = path("ext-group-id")
    external_group_fill_id: str = path("ext-group-fill-id")
    external_execution_id: str = path("ext-exec-id")
    execution_id: str = path("exec-id")
    exchange: str = path("exchange")
    reverses_id: int = path("reverses-id")
    exchange_affiliation_id: str = path("exchange-affiliation-identifier")
    cost_basis_reconciliation_date: datetime = path("cost-basis-reconciliation-date")


@dataclass(frozen=True)
class FillStatus:
    external_group_fill_id: str = path("ext-group-fill-id")
    external_execution_id: str = path("ext-exec-id")
    fill_id: str = path("fill-id")
    quantity: str = path("quantity")
    fill_price: float = path("fill-price")
    filled_at: datetime = path("filled-at")
    destination_venue: str = path("destination-venue")


@dataclass(frozen=True)
class LegStatus:
    instrument_type: InstrumentType = path("instrument-type")
    symbol: str = path("symbol")
    quantity: str = path("quantity")
    remaining_quantity: str = path("remaining-quantity")
    action: ActionType = path("action")
    fills: Tuple[FillStatus, ...] = path("fills")


@dataclass(frozen=True)
class ConditionPriceComponent:
    symbol: str = path("symbol")
    instrument_type: InstrumentType = path("instrument-type")
    quantity: str = path("quantity")
    quantity_direction: str = path("quantity-direction")


@dataclass(frozen=True)
class ConditionStatus:
    id: str = path("id")
    action: ActionCondition = path("action")
    triggered_at: datetime = path("triggered-at")
    triggered_value: float = path("triggered-value")
    symbol: str = path("symbol")
    instrument_type: InstrumentType = path("instrument-type")
    indicator: Indicator = path("indicator")
    comparator: Comparator = path("comparator")
    threshold: float = path("threshold")
    is_threshold_based_on_notional: bool = path("is-threshold-based-on-notional")
    price_components: Tuple[ConditionPriceComponent, ...] = path("price-components")


@dataclass(frozen=True)
class RuleStatus:
    route_after: datetime = path("route-after")
    routed_at: datetime = path("routed-at")
    cancel_at: datetime = path("cancel-at")
    cancelled_at: datetime = path("cancelled-at")
    conditions: Tuple[ConditionStatus, ...] = path("conditions")


@dataclass(frozen=True)
class OrderStatus:
    id: str = path("id")
    account_number: str = path("account-number")
    status: str = path("status")
    size: str = path("size")
    time_in_force: str = path("time-in-force")
    order_type: OrderType = path("order-type")
    price: float = path("price")
    price_effect: Effect = path("price-effect")
    value: float = path("value")
    value_effect: Effect = path("value-effect")
    stop_trigger: str = path("stop-trigger")
    underlying_symbol: str = path("underlying-symbol")
    underlying_instrument_type: InstrumentType = path("underlying-instrument-type")
    legs: Tuple[LegStatus, ...] = path("legs")
    order_rule: Tuple[RuleStatus, ...] = path("order-rule")
    editable: bool = path("editable")
    edited: bool = path("edited")
    cancellable: bool = path("cancellable")
    contingent_status: str = path("contingent-status")
    confirmation_status: str = path("confirmation-status")
    reject_reason: str = path("reject-reason")
    replaces_order_id: str = path("replaces-order-id")
    replacing_order_id: str = path("replacing-order-id")
    complex_order_id: str = path("complex-order-id")
    complex_order_tag: str = path("complex-order-tag")
    preflight_id: str = path("preflight-id")
    username: str = path("username")
    user_id: str = path("user-id")
    cancel_username: str = path("cancel-username")
    cancel_user_id: str = path("cancel-user-id")
    gtc_date: datetime = path("gtc-date")
    received_at: datetime = path("received-at")
    updated_at: str = path("updated-at")
    in_flight_at: datetime = path("in-flight-at")
    live_at: datetime = path("live-at")
    cancelled_at: datetime = path("cancelled-at")
    terminal_at: datetime = path("terminal-at")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_ORDER_STATUSES


@dataclass(frozen=True)
class BuyingPowerChange:
    change_in_margin_requirement: float = path("change-in-margin-requirement")
    change_in_margin_requirement_effect: Effect = path("change-in-margin-requirement-effect")
    change_in_buying_power: float = path("change-in-buying-power")
    change_in_buying_power_effect: Effect = path("change-in-buying-power-effect")
    current_buying_power: float = path("current-buying-power")
    current_buying_power_effect: Effect = path("current-buying-power-effect")
    new_buying_power: float = path("new-buying-power")
    new_buying_power_effect: Effect = path("new-buying-power-effect")
    isolated_order_margin_requirement: float = path("isolated-order-margin-requirement")
    isolated_order_margin_requirement_effect: Effect = path("isolated-order-margin-requirement-effect")
    is_spread: bool = path("is-spread")
    impact: float = path("impact")
    effect_on_cash: Effect = path("effect")


@dataclass(frozen=True)
class FeeInfo:
    regulatory_fees: float = path("regulatory-fees")
    regulatory_fees_effect: Effect = path("regulatory-fees-effect")
    clearing_fees: float = path("clearing-fees")
    clearing_fees_effect: Effect = path("clearing-fees-effect")
    commission: float = path("commission")
    commission_effect: Effect = path("commission-effect")
    proprietary_index_option_fees: float = path("proprietary-index-option-fees")
    proprietary_index_option_fees_effect: Effect = path("proprietary-index-option-fees-effect")
    total_fees: float = path("total-fees")
    total_fees_effect: Effect = path("total-fees-effect")


@dataclass(frozen=True)
class ErrorMsg:
    code: str = path("code")
    message: str = path("message")
    preflight_id: str = path("preflight-id")


@dataclass(frozen=True)
class OrderResponse:
    order: OrderStatus = path("order")
    buying_power_effect: BuyingPowerChange = path("buying-power-effect")
    fee_calculation: FeeInfo = path("fee-calculation")
    errors: Tuple[ErrorMsg, ...] = path("errors")
    warnings: Tuple[ErrorMsg, ...] = path("warnings")
