"""
###############################################
Mathematical functions (:mod:`fwdiff.function`)
###############################################

.. currentmodule:: fwdiff.function

This module provides mathematical functions that accept built-in numbers,
:mod:`mpmath` numbers and dual numbers alike, so that a function written with them
can be differentiated without modification.

A type takes part in the dispatch by defining ``_fwdiff_overload_(self, fun, *args)``,
which returns the result of `fun` applied to `args` or :data:`NotImplemented`.

Constant functions
==================

.. autosummary::
    :toctree: generated/

    e
    ln2
    pi

Power, exponents, and logarithmic functions
===========================================

.. autosummary::
    :toctree: generated/

    cbrt
    exp
    exp2
    expm1
    hypot
    log
    log1p
    log2
    log10
    pow
    sqrt

Trigonometric and hyperbolic functions
======================================

.. autosummary::
    :toctree: generated/

    acos
    acosh
    asin
    asinh
    atan
    atan2
    atanh
    cos
    cosh
    degrees
    radians
    sin
    sin_cos
    sinh
    tan
    tanh

Rounding functions
==================

.. autosummary::
    :toctree: generated/

    ceil
    floor
    fmod
    fract
    signum
    trunc

"""

import math
from collections.abc import Callable
from typing import Any

import mpmath
import mpmath.ctx_mp_python


def _overload(fun: Callable, *args: Any) -> Any:
    for z in args:
        if hook := getattr(type(z), "_fwdiff_overload_", None):
            if (res := hook(z, fun, *args)) is not NotImplemented:
                return res

    return NotImplemented


def _unary(fun: Callable, x: Any, real: Callable, mp: Callable) -> Any:
    if (res := _overload(fun, x)) is not NotImplemented:
        return res

    match x:
        case mpmath.ctx_mp_python.mpnumeric():
            return mp(x)

        case float() | int():
            return real(x)

        case _:
            raise TypeError(f"unsupported operand type for {fun.__name__}: {type(x)!r}")


def _binary(fun: Callable, x: Any, y: Any, real: Callable, mp: Callable) -> Any:
    if (res := _overload(fun, x, y)) is not NotImplemented:
        return res

    mpnumeric = mpmath.ctx_mp_python.mpnumeric

    match x, y:
        case (mpnumeric(), _) | (_, mpnumeric()):
            return mp(x, y)

        case (float() | int(), float() | int()):
            return real(x, y)

        case _:
            raise TypeError(
                f"unsupported operand types for {fun.__name__}: "
                f"{type(x)!r} and {type(y)!r}"
            )


def e(x, /):
    """Napier's constant in the number system of `x`.

    Examples
    --------
    >>> print(format(e(1.0), ".6f"))
    2.718282
    """
    return _unary(e, x, lambda _: math.e, lambda _: +mpmath.e)


def ln2(x, /):
    """Natural logarithm of 2 in the number system of `x`.

    Examples
    --------
    >>> print(format(ln2(1.0), ".6f"))
    0.693147
    """
    return _unary(ln2, x, lambda _: math.log(2.0), lambda _: +mpmath.ln2)


def pi(x, /):
    """Pi in the number system of `x`.

    Examples
    --------
    >>> print(format(pi(1.0), ".6f"))
    3.141593
    """
    return _unary(pi, x, lambda _: math.pi, lambda _: +mpmath.pi)


def exp(x, /):
    """Exponential.

    Examples
    --------
    >>> print(format(exp(2), ".6f"))
    7.389056
    >>> from fwdiff.autodiff import Dual
    >>> exp(Dual(0.0, 1.0))
    Dual(real=1.0, dual=1.0)
    """
    return _unary(exp, x, math.exp, mpmath.exp)


def exp2(x, /):
    """2 raised to the power `x`."""
    return _unary(exp2, x, lambda x: math.pow(2.0, x), lambda x: mpmath.power(2, x))


def expm1(x, /):
    """``exp(x) - 1``, accurate for small `x`."""
    return _unary(expm1, x, math.expm1, mpmath.expm1)


def log(x, base=None, /):
    """Logarithm of `x` to the given base, natural if `base` is omitted.

    Examples
    --------
    >>> print(format(log(5), ".6f"))
    1.609438
    >>> print(format(log(8, 2), ".6f"))
    3.000000
    """
    if base is None:
        return _unary(log, x, math.log, mpmath.log)

    return _binary(log, x, base, math.log, mpmath.log)


def log1p(x, /):
    """``log(1 + x)``, accurate for small `x`."""
    return _unary(log1p, x, math.log1p, mpmath.log1p)


def log2(x, /):
    """Base-2 logarithm."""
    return _unary(log2, x, math.log2, lambda x: mpmath.log(x, 2))


def log10(x, /):
    """Base-10 logarithm."""
    return _unary(log10, x, math.log10, mpmath.log10)


def pow(x, y, /):
    """`x` raised to the power `y`.

    Examples
    --------
    >>> print(format(pow(3.25, 1.25), ".6f"))
    4.363693
    """
    return _binary(pow, x, y, math.pow, mpmath.power)


def sqrt(x, /):
    """Square root.

    Examples
    --------
    >>> print(format(sqrt(2.0), ".6f"))
    1.414214
    """
    return _unary(sqrt, x, math.sqrt, mpmath.sqrt)


def cbrt(x, /):
    """Cube root."""
    return _unary(cbrt, x, math.cbrt, mpmath.cbrt)


def hypot(x, y, /):
    """Euclidean norm ``sqrt(x*x + y*y)``."""
    return _binary(hypot, x, y, math.hypot, mpmath.hypot)


def sin(x, /):
    """Sine.

    Examples
    --------
    >>> print(format(sin(1.0), ".6f"))
    0.841471
    """
    return _unary(sin, x, math.sin, mpmath.sin)


def cos(x, /):
    """Cosine."""
    return _unary(cos, x, math.cos, mpmath.cos)


def sin_cos(x, /):
    """Sine and cosine of `x` as a pair.

    Dual numbers compute both from a single evaluation on their real part.

    Examples
    --------
    >>> s, c = sin_cos(0.0)
    >>> s, c
    (0.0, 1.0)
    """
    return _unary(
        sin_cos,
        x,
        lambda x: (math.sin(x), math.cos(x)),
        lambda x: (mpmath.sin(x), mpmath.cos(x)),
    )


def tan(x, /):
    """Tangent."""
    return _unary(tan, x, math.tan, mpmath.tan)


def asin(x, /):
    """Inverse sine."""
    return _unary(asin, x, math.asin, mpmath.asin)


def acos(x, /):
    """Inverse cosine."""
    return _unary(acos, x, math.acos, mpmath.acos)


def atan(x, /):
    """Inverse tangent."""
    return _unary(atan, x, math.atan, mpmath.atan)


def atan2(y, x, /):
    """Angle of the point ``(x, y)``, in radians."""
    return _binary(atan2, y, x, math.atan2, mpmath.atan2)


def sinh(x, /):
    """Hyperbolic sine."""
    return _unary(sinh, x, math.sinh, mpmath.sinh)


def cosh(x, /):
    """Hyperbolic cosine."""
    return _unary(cosh, x, math.cosh, mpmath.cosh)


def tanh(x, /):
    """Hyperbolic tangent."""
    return _unary(tanh, x, math.tanh, mpmath.tanh)


def asinh(x, /):
    """Inverse hyperbolic sine."""
    return _unary(asinh, x, math.asinh, mpmath.asinh)


def acosh(x, /):
    """Inverse hyperbolic cosine."""
    return _unary(acosh, x, math.acosh, mpmath.acosh)


def atanh(x, /):
    """Inverse hyperbolic tangent."""
    return _unary(atanh, x, math.atanh, mpmath.atanh)


def degrees(x, /):
    """Convert `x` from radians to degrees."""
    return _unary(degrees, x, math.degrees, mpmath.degrees)


def radians(x, /):
    """Convert `x` from degrees to radians."""
    return _unary(radians, x, math.radians, mpmath.radians)


def _mp_trunc(x):
    return mpmath.floor(x) if x >= 0 else mpmath.ceil(x)


def floor(x, /):
    """Largest integral value not greater than `x`, in the number system of `x`.

    Raises
    ------
    NotImplementedError
        If `x` is a dual number.
    """
    return _unary(floor, x, lambda x: float(math.floor(x)), mpmath.floor)


def ceil(x, /):
    """Smallest integral value not less than `x`, in the number system of `x`.

    Raises
    ------
    NotImplementedError
        If `x` is a dual number.
    """
    return _unary(ceil, x, lambda x: float(math.ceil(x)), mpmath.ceil)


def trunc(x, /):
    """Integral part of `x`, rounded towards zero.

    Raises
    ------
    NotImplementedError
        If `x` is a dual number.
    """
    return _unary(trunc, x, lambda x: float(math.trunc(x)), _mp_trunc)


def fmod(x, y, /):
    """Remainder of `x` divided by `y`, with the sign of `x`.

    Raises
    ------
    NotImplementedError
        If `x` or `y` is a dual number.
    """
    return _binary(fmod, x, y, math.fmod, mpmath.fmod)


def fract(x, /):
    """Fractional part ``x - trunc(x)``.

    Raises
    ------
    NotImplementedError
        If `x` is a dual number.

    Examples
    --------
    >>> fract(-2.75)
    -0.75
    """
    return _unary(fract, x, lambda x: x - math.trunc(x), lambda x: x - _mp_trunc(x))


def _signum(x):
    if x > 0:
        return x * 0 + 1

    if x < 0:
        return x * 0 - 1

    return x * 0


def signum(x, /):
    """Sign of `x` as ``1``, ``-1`` or ``0`` in the number system of `x`.

    Zero and NaN map to zero.

    Examples
    --------
    >>> signum(-3.5), signum(0.0), signum(2)
    (-1.0, 0.0, 1)
    """
    if (res := _overload(signum, x)) is not NotImplemented:
        return res

    if x != x:
        return type(x)(0)

    return _signum(x)
