from __future__ import annotations

import unittest

from tasty.domain.enums import ALL_ENUMS, Effect, InstrumentType, OrderType, TimeInForce


class WireEnumTestCase(unittest.TestCase):
    def test_every_value_round_trips(self) -> None:
        for enum_cls in ALL_ENUMS:
            for member in enum_cls:
                self.assertIs(enum_cls.from_string(str(member)), member)

    def test_unknown_strings_decode_to_undefined(self) -> None:
        for enum_cls in ALL_ENUMS:
            self.assertIs(enum_cls.from_string("definitely-not-a-value"), enum_cls.UNDEFINED)
            self.assertIs(enum_cls.from_string(""), enum_cls.UNDEFINED)
            self.assertIs(enum_cls.from_string(None), enum_cls.UNDEFINED)

    def test_matching_is_exact(self) -> None:
        self.assertIs(InstrumentType.from_string("equity option"), InstrumentType.UNDEFINED)
        self.assertIs(InstrumentType.from_string("Equity Option"), InstrumentType.EQUITY_OPTION)

    def test_rendering(self) -> None:
        self.assertEqual(str(InstrumentType.UNDEFINED), "UNK")
        self.assertEqual(str(OrderType.NOTIONAL_MARKET), "Notional Market")
        self.assertEqual(str(TimeInForce.GTC_EXT), "GTC Ext")
        self.assertEqual(str(Effect.NONE), "None")


if __name__ == "__main__":
    unittest.main()
