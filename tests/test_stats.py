import pytest

from opensheet.stats import FORMULAS, geomean, harmean, kurt, skew

DATA = [1.0, 2.0, 3.0, 4.0, 10.0, 25.0]


@pytest.mark.parametrize("fn", [geomean, harmean, skew, kurt])
def test_empty_returns_zero(fn):
    assert fn([]) == 0.0


def test_geomean_of_constant_is_the_constant():
    assert geomean([4, 4, 4]) == pytest.approx(4)


def test_geomean_ignores_non_positive_and_non_numeric():
    assert geomean([4, 9, -3, 0, "x", None]) == pytest.approx(geomean([4, 9]))


def test_geomean_parses_numeric_strings():
    assert geomean(["4", " 9 "]) == pytest.approx(geomean([4, 9]))


def test_mean_ordering():
    arithmetic = sum(DATA) / len(DATA)
    assert harmean(DATA) <= geomean(DATA) <= arithmetic


def test_harmean_of_constant_is_the_constant():
    assert harmean([2, 2, 2]) == pytest.approx(2)


def test_harmean_skips_zero():
    assert harmean([0, 5, 5]) == pytest.approx(5)


def test_harmean_opposite_values_cancel_to_zero():
    assert harmean([2, -2]) == 0.0


def test_skew_needs_three_values():
    assert skew([1, 100]) == 0.0


def test_skew_zero_for_constant_and_symmetric():
    assert skew([7, 7, 7, 7]) == 0.0
    assert skew([1, 2, 3, 4, 5]) == pytest.approx(0.0, abs=1e-12)


def test_skew_sign_flips_on_negation():
    assert skew(DATA) > 0
    assert skew([-v for v in DATA]) == pytest.approx(-skew(DATA))


def test_skew_is_scale_and_shift_invariant():
    assert skew([3 * v + 10 for v in DATA]) == pytest.approx(skew(DATA))


def test_kurt_needs_four_values():
    assert kurt([1, 2, 30]) == 0.0


def test_kurt_zero_for_constant():
    assert kurt([5, 5, 5, 5, 5]) == 0.0


def test_kurt_is_scale_and_shift_invariant():
    assert kurt([2 * v - 7 for v in DATA]) == pytest.approx(kurt(DATA))


def test_kurt_ignores_text():
    assert kurt(DATA + ["n/a"]) == pytest.approx(kurt(DATA))


def test_formula_registry():
    assert sorted(FORMULAS) == ["GEOMEAN", "HARMEAN", "KURT", "SKEW"]
    assert FORMULAS["SKEW"](DATA) == pytest.approx(skew(DATA))