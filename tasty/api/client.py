from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, List, Optional

from ..config import Config, load_config
from ..domain.entities import Account, Balance, OrderResponse, OrderStatus, Position, Transaction
from ..domain.enums import TimeOfDay
from ..domain.filters import OrdersFilter, PositionFilter, QueryParams, TransactionFilter
from ..domain.order_request import OrderRequest
from ..errors import ApiError
from . import decoders, jsonpath
from .credential import Credential
from .session import SessionManager, TransportFactory
from .transport import Transport, auth_headers


class TastyClient:
    """Authenticated access to the account, balance, position, transaction and order endpoints."""

    def __init__(
        self,
        credential: Credential,
        *,
        sessions: SessionManager | None = None,
        config: Config | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.credential = credential
        self._logger = logger or logging.getLogger(__name__)
        self.sessions = sessions or SessionManager(config or load_config(), logger=self._logger)
        self._transport: Transport | None = None

    @classmethod
    def login(
        cls,
        username: str,
        password: str,
        *,
        remember_me: bool = False,
        sandbox: bool | None = None,
        debug: bool | None = None,
        config: Config | None = None,
        transport_factory: TransportFactory | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> "TastyClient":
        sessions = SessionManager(config or load_config(), transport_factory=transport_factory, logger=logger)
        credential = sessions.login(username, password, remember_me=remember_me, sandbox=sandbox, debug=debug)
        return cls(credential, sessions=sessions, logger=logger)

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = self.sessions.open_transport(self.credential)
        return self._transport

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self) -> "TastyClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: Optional[QueryParams] = None,
        json_body: Any = None,
    ) -> Any:
        token = self.sessions.ensure_valid(self.credential)
        response = self.transport.request(
            method,
            path,
            params=params,
            json_body=json_body,
            headers=auth_headers(token),
        )
        if response.status_code >= 400:
            self._logger.warning(
                "api_error",
                extra={"operation": operation, "method": method, "path": path, "status": response.status_code},
            )
            raise ApiError(response.status_code, response.body, operation)
        return response.json()

    def accounts(self) -> List[Account]:
        document = self._request("GET", "/customers/me/accounts", operation="accounts")
        return decoders.decode_accounts(document)

    def balance(self, account_number: str) -> Balance:
        document = self._request("GET", f"/accounts/{account_number}/balances", operation="balances")
        return decoders.decode_balance(document)

    def balance_snapshot(
        self,
        account_number: str,
        time_of_day: TimeOfDay = TimeOfDay.EOD,
        snapshot_date: date | datetime | None = None,
    ) -> Balance:
        params: QueryParams = []
        if time_of_day is not TimeOfDay.UNDEFINED:
            params.append(("time-of-day", str(time_of_day)))
        if snapshot_date is not None:
            day = snapshot_date.date() if isinstance(snapshot_date, datetime) else snapshot_date
            params.append(("snapshot-date", day.isoformat()))
        document = self._request(
            "GET",
            f"/accounts/{account_number}/balance-snapshots",
            operation="balance-snapshots",
            params=params,
        )
        return decoders.decode_balance_snapshot(document)

    def positions(self, account_number: str, filters: PositionFilter | None = None) -> List[Position]:
        document = self._request(
            "GET",
            f"/accounts/{account_number}/positions",
            operation="positions",
            params=filters.to_params() if filters else None,
        )
        return decoders.decode_positions(document)

    def transactions(self, account_number: str, filters: TransactionFilter | None = None) -> List[Transaction]:
        document = self._request(
            "GET",
            f"/accounts/{account_number}/transactions",
            operation="transactions",
            params=filters.to_params() if filters else None,
        )
        return decoders.decode_transactions(document)

    def orders(self, account_number: str, filters: OrdersFilter | None = None) -> List[OrderStatus]:
        document = self._request(
            "GET",
            f"/accounts/{account_number}/orders",
            operation="orders",
            params=filters.to_params() if filters else None,
        )
        return decoders.decode_orders(document)

    def submit_order(self, account_number: str, order: OrderRequest, *, dry_run: bool = False) -> OrderResponse:
        """Send ``order`` for execution (or validation only with ``dry_run``).

        Rejections and warnings that the API reports inside a successful
        response come back on ``OrderResponse.errors`` / ``warnings``; only
        HTTP statuses >= 400 raise.
        """
        suffix = "/dry-run" if dry_run else ""
        document = self._request(
            "POST",
            f"/accounts/{account_number}/orders{suffix}",
            operation="dry-run order" if dry_run else "submit order",
            json_body=order.to_payload(),
        )
        result = decoders.decode_order_response(document)
        self._logger.info(
            "order_submitted",
            extra={
                "account_number": account_number,
                "order_id": result.order.id,
                "status": result.order.status,
                "dry_run": dry_run,
                "errors": len(result.errors),
                "warnings": len(result.warnings),
            },
        )
        return result

    def delete_order(self, account_number: str, order_id: str | int) -> OrderStatus:
        document = self._request(
            "DELETE",
            f"/accounts/{account_number}/orders/{order_id}",
            operation="cancel order",
        )
        # Cancel responses carry the order under data.order or directly under data.
        node = jsonpath.lookup(document, "data.order")
        if node is None:
            node = jsonpath.lookup(document, "data")
        return decoders.decode_order_status(node)

    def logout(self) -> None:
        self.sessions.logout(self.credential)
