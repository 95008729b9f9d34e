from decimal import Decimal

from golfbets.money import scale_amounts, split_evenly


def test_split_evenly_hands_leftover_cents_out_in_order():
    assert split_evenly(Decimal("-4"), ["bob", "carol", "dave"]) == {
        "bob": Decimal("-1.34"),
        "carol": Decimal("-1.33"),
        "dave": Decimal("-1.33"),
    }


def test_scale_amounts_keeps_exact_multiples():
    shares = scale_amounts(
        {"alice": Decimal("4.00"), "bob": Decimal("-1.34"), "carol": Decimal("-1.33")},
        Decimal("3"),
    )
    assert shares == {
        "alice": Decimal("12.00"),
        "bob": Decimal("-4.02"),
        "carol": Decimal("-3.99"),
    }


def test_scale_amounts_returns_rounding_cents():
    shares = scale_amounts(
        {
            "alice": Decimal("4.00"),
            "bob": Decimal("-1.34"),
            "carol": Decimal("-1.33"),
            "dave": Decimal("-1.33"),
        },
        Decimal("0.5"),
    )
    assert sum(shares.values()) == 0
    assert shares["bob"] == Decimal("-0.67")
    assert shares["carol"] == Decimal("-0.66")
    assert shares["dave"] == Decimal("-0.67")


def test_scale_amounts_preserves_a_non_zero_total():
    shares = scale_amounts({"alice": Decimal("0.50"), "bob": Decimal("0.50")}, Decimal("0.33"))
    assert sum(shares.values()) == Decimal("0.33")
