import pytest

from modular_equations.arith import ModArith, mod_inverse
from modular_equations.errors import ArithmeticOverflow, InvalidModulus, NoInverseExists


def test_mod_inverse():
    assert mod_inverse(3, 7) == 5
    assert mod_inverse(-3, 7) == 2
    assert (mod_inverse(123456789, 2**61 - 1) * 123456789) % (2**61 - 1) == 1


def test_mod_inverse_reports_gcd():
    with pytest.raises(NoInverseExists) as e:
        mod_inverse(21, 77)
    assert e.value.value == 7
    assert e.value.modulus == 77


@pytest.mark.parametrize("modulus, coefficients, bits", [
    (255, (1, -127, 255), 8),
    (256, (1,), 16),
    (100, (-128,), 16),
    (2**32 - 1, (0,), 32),
    (2**63, (-(2**63 - 1),), 64),
    (2**64 - 1, (2**64 - 1,), 64),
    (2**64, (1,), 128),
    (2**127 + 1, (-(2**127 - 1),), 128),
])
def test_for_values_picks_narrowest_width(modulus, coefficients, bits):
    assert ModArith.for_values(modulus, *coefficients).bits == bits


def test_for_values_rejects_small_modulus():
    for n in (1, 0, -5):
        with pytest.raises(InvalidModulus):
            ModArith.for_values(n, 1, 2)


def test_for_values_overflow():
    with pytest.raises(ArithmeticOverflow):
        ModArith.for_values(2**128, 1)
    with pytest.raises(ArithmeticOverflow):
        ModArith.for_values(7, -(2**127))
    with pytest.raises(ArithmeticOverflow):
        ModArith.for_values(7, 2**128)
    with pytest.raises(ArithmeticOverflow):
        ModArith.for_values(300, 1, bits=8)


def test_for_values_unchecked_takes_widest():
    arith = ModArith.for_values(2**130, 1, checked=False)
    assert arith.bits == 128
    assert not arith.checked


def test_unsupported_width():
    with pytest.raises(ValueError):
        ModArith(24)


def test_checked_operations():
    arith = ModArith(8)
    assert arith.add(200, 100, 251) == 49
    assert arith.sub(3, 5, 7) == 5
    assert arith.mul(255, 255, 251) == (255 * 255) % 251
    assert arith.pow(3, 200, 251) == pow(3, 200, 251)
    assert arith.inverse(2, 251) == 126
    assert arith.gcd(84, 36) == 12
    with pytest.raises(ArithmeticOverflow):
        arith.add(256, 1, 7)
    with pytest.raises(ArithmeticOverflow):
        arith.mul(-1, 1, 7)


def test_unchecked_is_exact():
    arith = ModArith(8, checked=False)
    assert arith.mul(10**30, 10**30, 97) == (10**60) % 97


def test_residue_of_signed_coefficient():
    arith = ModArith(8)
    assert arith.residue(-127, 125) == 123
    assert arith.residue(250, 125) == 0
    with pytest.raises(ArithmeticOverflow):
        arith.residue(-128, 125)
