import math

import mpmath
import pytest

from fwdiff import function as fwf
from fwdiff.autodiff.dual import Dual


class Tagged:
    def __init__(self, value):
        self.value = value

    def _fwdiff_overload_(self, fun, *args):
        if fun is fwf.exp:
            return ("exp", self.value)

        if fun is fwf.atan2:
            return ("atan2", tuple(getattr(x, "value", x) for x in args))

        return NotImplemented


def test_float():
    assert fwf.exp(1.0) == math.exp(1.0)
    assert fwf.log(8, 2) == pytest.approx(3.0)
    assert fwf.atan2(1.0, 2.0) == math.atan2(1.0, 2.0)
    assert fwf.sin_cos(0.5) == (math.sin(0.5), math.cos(0.5))
    assert fwf.pi(1) == math.pi
    assert fwf.exp2(3) == 8.0


def test_mpmath():
    with mpmath.workdps(30):
        x = mpmath.mpf(2)
        assert fwf.exp(x) == mpmath.exp(x)
        assert abs(fwf.log(x, 2) - 1) < mpmath.mpf(10) ** -28
        assert fwf.pow(x, 10) == 1024
        assert fwf.pow(2.0, x) == 4
        assert fwf.pi(x) == +mpmath.pi
        assert isinstance(fwf.cbrt(x), mpmath.mpf)


def test_dual():
    y = fwf.exp(Dual(0.0, 2.0))
    assert y == Dual(1.0, 2.0)
    assert fwf.sin(Dual(0.0, 1.0)) == Dual(0.0, 1.0)


def test_overload_hook():
    assert fwf.exp(Tagged(3)) == ("exp", 3)
    assert fwf.atan2(1.0, Tagged(2)) == ("atan2", (1.0, 2))

    with pytest.raises(TypeError):
        fwf.sin(Tagged(3))


def test_unsupported_type():
    with pytest.raises(TypeError):
        fwf.exp("1")

    with pytest.raises(TypeError):
        fwf.hypot(1.0, "2")


def test_rounding():
    assert fwf.floor(2.5) == 2.0
    assert fwf.ceil(2.5) == 3.0
    assert fwf.trunc(-2.5) == -2.0
    assert fwf.fract(2.25) == 0.25
    assert fwf.fmod(-7.0, 3.0) == -1.0

    x = mpmath.mpf(-2.75)
    assert fwf.trunc(x) == -2
    assert fwf.fract(x) == mpmath.mpf(-0.75)
    assert fwf.floor(x) == -3


def test_signum():
    assert fwf.signum(-0.5) == -1.0
    assert fwf.signum(0.0) == 0.0
    assert fwf.signum(math.nan) == 0.0
    assert fwf.signum(mpmath.mpf(3)) == 1
    assert isinstance(fwf.signum(mpmath.mpf(3)), mpmath.mpf)
    assert fwf.signum(Dual(-2.0, 5.0)) == Dual(-1.0)
