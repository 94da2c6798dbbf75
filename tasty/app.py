from __future__ import annotations

import argparse
import dataclasses
import getpass
import json
import os
import sys
from typing import Any, Callable, Dict, Iterable

from pydantic import ValidationError

from .api import SessionManager, SessionStore, TastyClient
from .config import load_config
from .domain import InstrumentType, OrderRequest, OrdersFilter, PositionFilter, TransactionFilter
from .errors import ApiError, TastyError
from .logging import configure_logging

INSTRUMENT_TYPE_CHOICES = [t.value for t in InstrumentType if t is not InstrumentType.UNDEFINED]


def _print_json(payload: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, default=str) + "\n")


def _to_dict(entity: Any) -> Dict[str, Any]:
    return dataclasses.asdict(entity)


def _to_dicts(entities: Iterable[Any]) -> list[Dict[str, Any]]:
    return [_to_dict(e) for e in entities]


def _read_payload(args: argparse.Namespace) -> str:
    if args.json:
        return args.json
    if args.json_file:
        with open(args.json_file, "r", encoding="utf-8") as fh:
            return fh.read()
    raise ValueError("Either --json or --json-file is required")


def _username(args: argparse.Namespace) -> str:
    username = args.username or os.getenv("TASTY_USERNAME")
    if not username:
        raise ValueError("--username or TASTY_USERNAME is required")
    return username


def _error_payload(exc: Exception) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"ok": False, "error": str(exc), "type": type(exc).__name__}
    if isinstance(exc, ApiError):
        payload["status"] = exc.status
    return payload


def _with_client(
    args: argparse.Namespace,
    action: Callable[[TastyClient], Dict[str, Any]],
) -> int:
    config = load_config()
    logger = configure_logging(config.log_level)
    store = SessionStore(config.session_db_path, config)

    try:
        username = _username(args)
    except ValueError as exc:
        _print_json(_error_payload(exc))
        return 1

    credential = store.load(username)
    if credential is None:
        _print_json({"ok": False, "error": f"no stored session for {username}; run login first"})
        return 1

    client = TastyClient(credential, sessions=SessionManager(config, logger=logger), logger=logger)
    try:
        _print_json({"ok": True, **action(client)})
        return 0
    except TastyError as exc:
        _print_json(_error_payload(exc))
        return 1
    finally:
        client.close()
        # A refresh rotates the single-use renewal token; persist it even when the call failed.
        store.save(client.credential)


def cmd_login(args: argparse.Namespace) -> int:
    config = load_config()
    logger = configure_logging(config.log_level)
    store = SessionStore(config.session_db_path, config)

    try:
        username = _username(args)
    except ValueError as exc:
        _print_json(_error_payload(exc))
        return 1
    password = os.getenv("TASTY_PASSWORD") or getpass.getpass("tastytrade password: ")

    sessions = SessionManager(config, logger=logger)
    try:
        credential = sessions.login(
            username,
            password,
            remember_me=args.remember_me,
            sandbox=True if args.sandbox else None,
            debug=True if args.debug else None,
        )
    except TastyError as exc:
        _print_json(_error_payload(exc))
        return 1

    store.save(credential)
    tokens = credential.tokens
    _print_json(
        {
            "ok": True,
            "username": credential.username,
            "api_url": credential.api_url,
            "session_expires_on": tokens.session_expires_on,
            "renewal_expires_on": tokens.renewal_expires_on,
        }
    )
    return 0


def cmd_logout(args: argparse.Namespace) -> int:
    def action(client: TastyClient) -> Dict[str, Any]:
        client.logout()
        return {"logged_out": client.credential.username}

    code = _with_client(args, action)
    if code == 0:
        config = load_config()
        SessionStore(config.session_db_path, config).delete(_username(args))
    return code


def cmd_accounts(args: argparse.Namespace) -> int:
    return _with_client(args, lambda client: {"accounts": _to_dicts(client.accounts())})


def cmd_balance(args: argparse.Namespace) -> int:
    return _with_client(args, lambda client: {"balance": _to_dict(client.balance(args.account))})


def cmd_positions(args: argparse.Namespace) -> int:
    filters = PositionFilter(
        symbol=args.symbol or "",
        underlying_symbols=args.underlying_symbol or [],
        instrument_type=InstrumentType(args.instrument_type) if args.instrument_type else InstrumentType.UNDEFINED,
        include_closed_positions=args.include_closed,
    )
    return _with_client(args, lambda client: {"positions": _to_dicts(client.positions(args.account, filters))})


def cmd_transactions(args: argparse.Namespace) -> int:
    filters = TransactionFilter(
        per_page=args.per_page,
        page_offset=args.page_offset,
        symbol=args.symbol or "",
        transaction_types=args.type or [],
    )
    return _with_client(
        args,
        lambda client: {"transactions": _to_dicts(client.transactions(args.account, filters))},
    )


def cmd_orders(args: argparse.Namespace) -> int:
    filters = OrdersFilter(
        per_page=args.per_page,
        page_offset=args.page_offset,
        statuses=args.status or [],
        underlying_symbol=args.underlying_symbol or "",
    )
    return _with_client(args, lambda client: {"orders": _to_dicts(client.orders(args.account, filters))})


def _parse_order_request(args: argparse.Namespace) -> OrderRequest:
    return OrderRequest.from_json(_read_payload(args))


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        req = _parse_order_request(args)
    except ValidationError as exc:
        _print_json({"valid": False, "errors": exc.errors(include_url=False, include_context=False)})
        return 1
    except (OSError, ValueError) as exc:
        _print_json({"valid": False, "errors": [{"type": "runtime", "msg": str(exc)}]})
        return 1

    _print_json({"valid": True, "order_request": req.to_payload()})
    return 0


def cmd_place(args: argparse.Namespace) -> int:
    try:
        req = _parse_order_request(args)
    except ValidationError as exc:
        _print_json({"ok": False, "errors": exc.errors(include_url=False, include_context=False)})
        return 1
    except (OSError, ValueError) as exc:
        _print_json({"ok": False, "errors": [{"type": "runtime", "msg": str(exc)}]})
        return 1

    def action(client: TastyClient) -> Dict[str, Any]:
        result = client.submit_order(args.account, req, dry_run=args.dry_run)
        return {"dry_run": args.dry_run, "order_response": _to_dict(result)}

    return _with_client(args, action)


def cmd_cancel(args: argparse.Namespace) -> int:
    return _with_client(args, lambda client: {"order": _to_dict(client.delete_order(args.account, args.order_id))})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasty-cli")
    parser.add_argument("--username", type=str, default=None, help="tastytrade login (defaults to TASTY_USERNAME)")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Create a session and store it locally")
    login.add_argument("--remember-me", action="store_true", help="Request a renewal token (28 days)")
    login.add_argument("--sandbox", action="store_true", help="Use the certification environment")
    login.add_argument("--debug", action="store_true", help="Log every HTTP request and response")
    login.set_defaults(func=cmd_login)

    logout = sub.add_parser("logout", help="Invalidate the stored session")
    logout.set_defaults(func=cmd_logout)

    accounts = sub.add_parser("accounts", help="List customer accounts")
    accounts.set_defaults(func=cmd_accounts)

    balance = sub.add_parser("balance", help="Show account balances")
    balance.add_argument("--account", type=str, required=True)
    balance.set_defaults(func=cmd_balance)

    positions = sub.add_parser("positions", help="List account positions")
    positions.add_argument("--account", type=str, required=True)
    positions.add_argument("--symbol", type=str, default=None)
    positions.add_argument("--underlying-symbol", action="append", help="Repeatable")
    positions.add_argument("--instrument-type", choices=INSTRUMENT_TYPE_CHOICES, default=None)
    positions.add_argument("--include-closed", action="store_true")
    positions.set_defaults(func=cmd_positions)

    transactions = sub.add_parser("transactions", help="List account transactions")
    transactions.add_argument("--account", type=str, required=True)
    transactions.add_argument("--per-page", type=int, default=0)
    transactions.add_argument("--page-offset", type=int, default=0)
    transactions.add_argument("--symbol", type=str, default=None)
    transactions.add_argument("--type", action="append", help="Transaction type, repeatable")
    transactions.set_defaults(func=cmd_transactions)

    orders = sub.add_parser("orders", help="List account orders")
    orders.add_argument("--account", type=str, required=True)
    orders.add_argument("--per-page", type=int, default=0)
    orders.add_argument("--page-offset", type=int, default=0)
    orders.add_argument("--status", action="append", help="Order status, repeatable")
    orders.add_argument("--underlying-symbol", type=str, default=None)
    orders.set_defaults(func=cmd_orders)

    validate = sub.add_parser("validate", help="Validate structured order JSON input")
    validate_input = validate.add_mutually_exclusive_group(required=True)
    validate_input.add_argument("--json", type=str, help="Inline JSON payload")
    validate_input.add_argument("--json-file", type=str, help="Path to JSON payload file")
    validate.set_defaults(func=cmd_validate)

    place = sub.add_parser("place", help="Submit an order")
    place.add_argument("--account", type=str, required=True)
    place_input = place.add_mutually_exclusive_group(required=True)
    place_input.add_argument("--json", type=str, help="Inline JSON payload")
    place_input.add_argument("--json-file", type=str, help="Path to JSON payload file")
    place.add_argument("--dry-run", action="store_true", help="Ask the API to validate without routing")
    place.set_defaults(func=cmd_place)

    cancel = sub.add_parser("cancel", help="Cancel an open order")
    cancel.add_argument("--account", type=str, required=True)
    cancel.add_argument("--order-id", type=str, required=True)
    cancel.set_defaults(func=cmd_cancel)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
