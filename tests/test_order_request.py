from __future__ import annotations

import json
import unittest

from pydantic import ValidationError

from tasty.domain import Effect, OrderRequest, OrderType, TimeInForce


def _payload(**overrides):
    payload = {
        "time-in-force": "Day",
        "order-type": "Limit",
        "price": 1.5,
        "price-effect": "Debit",
        "legs": [{"instrument-type": "Equity", "symbol": "AAPL", "quantity": 5, "action": "Buy to Open"}],
    }
    payload.update(overrides)
    return payload


class OrderRequestTestCase(unittest.TestCase):
    def test_limit_order_payload_is_kebab_case(self) -> None:
        req = OrderRequest.model_validate(_payload(source=" desk-1 "))

        self.assertEqual(req.order_type, OrderType.LIMIT)
        self.assertEqual(
            req.to_payload(),
            {
                "time-in-force": "Day",
                "order-type": "Limit",
                "price": 1.5,
                "price-effect": "Debit",
                "source": "desk-1",
                "legs": [{"instrument-type": "Equity", "symbol": "AAPL", "quantity": 5.0, "action": "Buy to Open"}],
            },
        )

    def test_from_json_accepts_field_names(self) -> None:
        req = OrderRequest.from_json(
            json.dumps(
                {
                    "time_in_force": "GTC",
                    "order_type": "Market",
                    "legs": [{"instrument_type": "Equity", "symbol": "MSFT", "quantity": 1, "action": "Sell to Close"}],
                }
            )
        )

        self.assertEqual(req.time_in_force, TimeInForce.GTC)
        self.assertNotIn("price", req.to_payload())

    def test_limit_requires_price_and_effect(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(price=None))
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"price-effect": None}))

    def test_market_rejects_price(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"order-type": "Market"}))

    def test_stop_requires_trigger(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"order-type": "Stop Limit"}))

        req = OrderRequest.model_validate(_payload(**{"order-type": "Stop Limit", "stop-trigger": 1.4}))
        self.assertEqual(req.to_payload()["stop-trigger"], 1.4)

    def test_notional_market_requires_value(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(
                _payload(**{"order-type": "Notional Market", "price": None, "price-effect": None})
            )

        req = OrderRequest.model_validate(
            _payload(**{"order-type": "Notional Market", "price": None, "price-effect": None, "value": 100, "value-effect": "Debit"})
        )
        self.assertEqual(req.value_effect, Effect.DEBIT)

    def test_gtd_requires_date(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"time-in-force": "GTD"}))

        req = OrderRequest.model_validate(_payload(**{"time-in-force": "GTD", "gtc-date": "2024-03-15"}))
        self.assertEqual(req.to_payload()["gtc-date"], "2024-03-15")

    def test_undefined_vocabulary_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"order-type": "UNK"}))
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(
                _payload(legs=[{"instrument-type": "UNK", "symbol": "AAPL", "quantity": 1, "action": "Buy"}])
            )

    def test_undefined_effect_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(**{"price-effect": "UNK"}))
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(
                _payload(**{"order-type": "Notional Market", "price": None, "price-effect": None, "value": 100, "value-effect": "UNK"})
            )

    def test_undefined_rule_vocabulary_is_rejected(self) -> None:
        condition = {
            "action": "route",
            "symbol": "SPY",
            "instrument-type": "Equity",
            "indicator": "last",
            "comparator": "lte",
            "threshold": 465.5,
            "price-components": [{"symbol": "SPY", "instrument-type": "Equity", "quantity": 1}],
        }
        overrides = [
            {"action": "UNK"},
            {"instrument-type": "UNK"},
            {"indicator": "UNK"},
            {"comparator": "UNK"},
            {"price-components": [{"symbol": "SPY", "instrument-type": "UNK", "quantity": 1}]},
        ]
        for override in overrides:
            with self.subTest(override=override):
                with self.assertRaises(ValidationError):
                    OrderRequest.model_validate(_payload(rules={"conditions": [{**condition, **override}]}))

        req = OrderRequest.model_validate(_payload(rules={"conditions": [condition]}))
        self.assertNotIn("UNK", json.dumps(req.to_payload()))

    def test_rejects_empty_legs_and_unknown_fields(self) -> None:
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(legs=[]))
        with self.assertRaises(ValidationError):
            OrderRequest.model_validate(_payload(account="5WT00001"))

    def test_rules_serialize_nested(self) -> None:
        req = OrderRequest.model_validate(
            _payload(
                rules={
                    "route-after": "2024-01-02T14:45:00Z",
                    "conditions": [
                        {
                            "action": "route",
                            "symbol": "SPY",
                            "instrument-type": "Equity",
                            "comparator": "lte",
                            "threshold": 465.5,
                            "price-components": [{"symbol": "SPY", "instrument-type": "Equity", "quantity": 1}],
                        }
                    ],
                }
            )
        )

        condition = req.to_payload()["rules"]["conditions"][0]
        self.assertEqual(condition["indicator"], "last")
        self.assertEqual(condition["price-components"][0]["quantity-direction"], "Long")


if __name__ == "__main__":
    unittest.main()
