"""Tests de normalisation."""

from menuconcorde.normalize import norm_name, safe_str


def test_norm_name_lower_strip() -> None:
    assert norm_name("  Chicken WINGS \t") == "chicken wings"


def test_norm_name_keeps_inner_spaces() -> None:
    assert norm_name("Ice  Cream") == "ice  cream"


def test_norm_name_none_and_nan() -> None:
    assert norm_name(None) == ""
    assert norm_name(float("nan")) == ""


def test_norm_name_numeric() -> None:
    assert norm_name(42) == "42"


def test_safe_str() -> None:
    assert safe_str(None) == ""
    assert safe_str(float("nan")) == ""
    assert safe_str(3) == "3"
    assert safe_str("abc") == "abc"
