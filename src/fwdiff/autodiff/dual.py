import numbers
from typing import Any, Generic, NoReturn, Self, TypeVar

from fwdiff import function as fwf
from fwdiff.typing import ExtendedReal, Scalar


T = TypeVar("T", bound=Scalar)


class UnsupportedOperationError(NotImplementedError):
    """Raised by operations that have no derivative rule for dual numbers.

    Rounding and remainder operations are not differentiable at their jumps, so
    :class:`Dual` refuses them instead of returning a derivative that is silently
    wrong.
    """


def _zero(x: Any) -> Any:
    if isinstance(x, Dual):
        return Dual(_zero(x.real))

    return type(x)(0)


def _level(x: Any) -> int:
    return x.level if isinstance(x, Dual) else 0


def _lift(x: Any, level: int) -> Any:
    while _level(x) < level:
        x = Dual(x)

    return x


def _maxlevel(args) -> int:
    return max(_level(x) for x in args)


class Dual(ExtendedReal, Generic[T]):
    r"""Dual number.

    Parameters
    ----------
    real : T
        Value.
    dual : T, optional
        Derivative part. If omitted, it is the zero of the type of `real`, i.e. the
        dual number is a constant.

    Attributes
    ----------
    real : T
    dual : T

    Notes
    -----
    Instances of this class behave like elements of the ring :math:`T[\varepsilon]
    /(\varepsilon^2)`. If `real` is itself a :class:`Dual`, the instance is a dual
    number over dual numbers, which is how second derivatives are computed. The depth
    of such nesting is given by :attr:`level`.

    Dual numbers are ordered by their real parts only. Consequently :meth:`signum`,
    :func:`abs`, :meth:`min` and :meth:`max` have no meaningful derivative at the
    points where the ordering switches.

    Examples
    --------
    >>> x = Dual(2.0, 1.0)
    >>> y = x * x + 3 * x
    >>> y
    Dual(real=10.0, dual=7.0)
    >>> Dual(2.0)
    Dual(real=2.0, dual=0.0)
    """

    __slots__ = ("real", "dual")
    real: T
    dual: T

    def __init__(self, real: T, dual: T | None = None):
        self.real = real
        self.dual = _zero(real) if dual is None else dual

    @property
    def level(self) -> int:
        """Nesting depth; 1 for a dual number over a non-dual scalar."""
        return _level(self.real) + 1

    @classmethod
    def zero(cls, like: T = 0.0) -> Self:  # type: ignore
        """Return the constant zero in the number system of `like`."""
        return cls(_zero(like))

    @classmethod
    def one(cls, like: T = 0.0) -> Self:  # type: ignore
        """Return the constant one in the number system of `like`."""
        return cls(_zero(like) + 1)

    @classmethod
    def variable(cls, value: T) -> Self:
        """Return a dual number whose derivative part is one.

        Examples
        --------
        >>> Dual.variable(3.0)
        Dual(real=3.0, dual=1.0)
        """
        return cls(value, _zero(value) + 1)

    def _const(self, value: int | float) -> T:
        return _zero(self.real) + value

    def _unsupported(self, name: str) -> NoReturn:
        raise UnsupportedOperationError(
            f"{name} has no derivative rule for {type(self).__name__}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(real={self.real!r}, dual={self.dual!r})"

    def __str__(self) -> str:
        return f"{type(self).__name__}(real={self.real}, dual={self.dual})"

    def __float__(self) -> float:
        return float(self.real)  # type: ignore

    def __int__(self) -> int:
        return int(self.real)  # type: ignore

    def __bool__(self) -> bool:
        return bool(self.real)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dual) or other.level < self.level:
            return self.real == other and self.dual == 0

        if other.level > self.level:
            return NotImplemented

        return other.real == self.real and other.dual == self.dual

    def __lt__(self, rhs) -> bool:
        if isinstance(rhs, Dual) and rhs.level > self.level:
            return NotImplemented

        if isinstance(rhs, Dual) and rhs.level == self.level:
            return self.real < rhs.real

        return self.real < rhs

    def __le__(self, rhs) -> bool:
        if isinstance(rhs, Dual) and rhs.level > self.level:
            return NotImplemented

        if isinstance(rhs, Dual) and rhs.level == self.level:
            return self.real <= rhs.real

        return self.real <= rhs

    def __gt__(self, rhs) -> bool:
        if isinstance(rhs, Dual) and rhs.level > self.level:
            return NotImplemented

        if isinstance(rhs, Dual) and rhs.level == self.level:
            return self.real > rhs.real

        return self.real > rhs

    def __ge__(self, rhs) -> bool:
        if isinstance(rhs, Dual) and rhs.level > self.level:
            return NotImplemented

        if isinstance(rhs, Dual) and rhs.level == self.level:
            return self.real >= rhs.real

        return self.real >= rhs

    def __add__(self, rhs) -> Self:
        if not isinstance(rhs, Dual) or rhs.level < self.level:
            return self.__class__(self.real + rhs, self.dual)

        if rhs.level > self.level:
            return self.__class__(self + rhs.real, rhs.dual)

        return self.__class__(self.real + rhs.real, self.dual + rhs.dual)

    def __sub__(self, rhs) -> Self:
        if not isinstance(rhs, Dual) or rhs.level < self.level:
            return self.__class__(self.real - rhs, self.dual)

        if rhs.level > self.level:
            return self.__class__(self - rhs.real, -rhs.dual)

        return self.__class__(self.real - rhs.real, self.dual - rhs.dual)

    def __mul__(self, rhs) -> Self:
        if not isinstance(rhs, Dual) or rhs.level < self.level:
            return self.__class__(self.real * rhs, self.dual * rhs)

        if rhs.level > self.level:
            return self.__class__(self * rhs.real, self * rhs.dual)

        dual = self.real * rhs.dual + self.dual * rhs.real
        return self.__class__(self.real * rhs.real, dual)

    def __truediv__(self, rhs) -> Self:
        if not isinstance(rhs, Dual) or rhs.level < self.level:
            return self.__class__(self.real / rhs, self.dual / rhs)

        if rhs.level > self.level:
            dual = -self * rhs.dual / (rhs.real * rhs.real)
            return self.__class__(self / rhs.real, dual)

        dual = (self.dual * rhs.real - self.real * rhs.dual) / (rhs.real * rhs.real)
        return self.__class__(self.real / rhs.real, dual)

    def __pow__(self, rhs) -> Self:
        if isinstance(rhs, Dual) and rhs.level > self.level:
            return _lift(self, rhs.level).powf(rhs)

        if isinstance(rhs, numbers.Integral):
            return self.powi(int(rhs))

        return self.powf(rhs)

    def __neg__(self) -> Self:
        return self.__class__(-self.real, -self.dual)

    def __pos__(self) -> Self:
        return self.__class__(+self.real, +self.dual)

    def __abs__(self) -> Self:
        return self * self.signum()

    def __radd__(self, lhs) -> Self:
        return self.__class__(lhs + self.real, self.dual)

    def __rsub__(self, lhs) -> Self:
        return self.__class__(lhs - self.real, -self.dual)

    def __rmul__(self, lhs) -> Self:
        return self.__class__(lhs * self.real, lhs * self.dual)

    def __rtruediv__(self, lhs) -> Self:
        dual = -lhs * self.dual / (self.real * self.real)
        return self.__class__(lhs / self.real, dual)

    def __rpow__(self, lhs) -> Self:
        return (self * fwf.log(lhs)).exp()

    def __floor__(self) -> NoReturn:
        self._unsupported("floor")

    def __ceil__(self) -> NoReturn:
        self._unsupported("ceil")

    def __trunc__(self) -> NoReturn:
        self._unsupported("trunc")

    def __round__(self, ndigits: int | None = None) -> NoReturn:
        self._unsupported("round")

    def __mod__(self, rhs) -> NoReturn:
        self._unsupported("remainder")

    def __rmod__(self, lhs) -> NoReturn:
        self._unsupported("remainder")

    def __floordiv__(self, rhs) -> NoReturn:
        self._unsupported("floor division")

    def __rfloordiv__(self, lhs) -> NoReturn:
        self._unsupported("floor division")

    def __divmod__(self, rhs) -> NoReturn:
        self._unsupported("divmod")

    def __rdivmod__(self, lhs) -> NoReturn:
        self._unsupported("divmod")

    def _fwdiff_overload_(self, fun, *args):
        match fun:
            case fwf.e | fwf.ln2 | fwf.pi:
                return self.__class__(fun(self.real))

            case fwf.exp:
                return self.exp()

            case fwf.exp2:
                return self.exp2()

            case fwf.expm1:
                return self.exp_m1()

            case fwf.log if len(args) == 1:
                return self.ln()

            case fwf.log:
                x, base = (_lift(z, _maxlevel(args)) for z in args)
                return x.log(base)

            case fwf.log1p:
                return self.ln_1p()

            case fwf.log2:
                return self.log2()

            case fwf.log10:
                return self.log10()

            case fwf.pow:
                return args[0] ** args[1]

            case fwf.sqrt:
                return self.sqrt()

            case fwf.cbrt:
                return self.cbrt()

            case fwf.hypot:
                x, y = (_lift(z, _maxlevel(args)) for z in args)
                return x.hypot(y)

            case fwf.sin:
                return self.sin()

            case fwf.cos:
                return self.cos()

            case fwf.sin_cos:
                return self.sin_cos()

            case fwf.tan:
                return self.tan()

            case fwf.asin:
                return self.asin()

            case fwf.acos:
                return self.acos()

            case fwf.atan:
                return self.atan()

            case fwf.atan2:
                y, x = (_lift(z, _maxlevel(args)) for z in args)
                return y.atan2(x)

            case fwf.sinh:
                return self.sinh()

            case fwf.cosh:
                return self.cosh()

            case fwf.tanh:
                return self.tanh()

            case fwf.asinh:
                return self.asinh()

            case fwf.acosh:
                return self.acosh()

            case fwf.atanh:
                return self.atanh()

            case fwf.degrees:
                return self.to_degrees()

            case fwf.radians:
                return self.to_radians()

            case fwf.floor:
                return self.floor()

            case fwf.ceil:
                return self.ceil()

            case fwf.trunc:
                return self.trunc()

            case fwf.fract:
                return self.fract()

            case fwf.fmod:
                self._unsupported("remainder")

            case fwf.signum:
                return self.signum()

        return NotImplemented

    def exp(self) -> Self:
        """Exponential."""
        r = fwf.exp(self.real)
        return self.__class__(r, r * self.dual)

    def exp2(self) -> Self:
        """2 raised to the power of the dual number."""
        return (self * fwf.log(self._const(2))).exp()

    def exp_m1(self) -> Self:
        """``exp(x) - 1``."""
        return self.__class__(fwf.expm1(self.real), fwf.exp(self.real) * self.dual)

    def ln(self) -> Self:
        """Natural logarithm."""
        return self.__class__(fwf.log(self.real), self.dual / self.real)

    def ln_1p(self) -> Self:
        """``ln(1 + x)``."""
        return self.__class__(fwf.log1p(self.real), self.dual / (1 + self.real))

    def log(self, base=None) -> Self:
        """Logarithm to the given base, natural if `base` is omitted."""
        if base is None:
            return self.ln()

        return self.ln() / fwf.log(base)

    def log2(self) -> Self:
        """Base-2 logarithm."""
        return self.ln() / fwf.log(self._const(2))

    def log10(self) -> Self:
        """Base-10 logarithm."""
        return self.ln() / fwf.log(self._const(10))

    def powi(self, n: int) -> Self:
        """Raise the dual number to the integer power `n` by repeated squaring.

        Negative exponents are computed as the positive power of the reciprocal.

        Examples
        --------
        >>> Dual(2.0, 1.0).powi(3)
        Dual(real=8.0, dual=12.0)
        >>> Dual(2.0, 1.0).powi(-1)
        Dual(real=0.5, dual=-0.25)
        """
        if n < 0:
            return self.recip().powi(-n)

        result = self.one(self.real)
        tmp = self

        while n != 0:
            if n % 2 != 0:
                result *= tmp

            n //= 2

            if n != 0:
                tmp *= tmp

        return result

    def powf(self, e) -> Self:
        """Raise the dual number to the real power `e` as ``exp(e * ln(x))``.

        The result is correct only where the natural logarithm is defined, i.e. for a
        positive real part.
        """
        return (e * self.ln()).exp()

    def sqrt(self) -> Self:
        """Square root."""
        return self.powf(self._const(0.5))

    def cbrt(self) -> Self:
        """Cube root."""
        return self.powf(self._const(1.0 / 3.0))

    def recip(self) -> Self:
        """Reciprocal."""
        return 1 / self

    def mul_add(self, a, b) -> Self:
        """``x * a + b``."""
        return self * a + b

    def hypot(self, other) -> Self:
        """``sqrt(x*x + other*other)``."""
        return (self * self + other * other).sqrt()

    def abs_sub(self, other) -> Self:
        """``abs(x - other)``."""
        return abs(self - other)

    def signum(self) -> Self:
        """Return the constant ``1``, ``-1`` or ``0`` according to the real part.

        An unordered real part (NaN) yields ``0``.
        """
        if self.real > 0:
            return self.one(self.real)

        if self.real < 0:
            return -self.one(self.real)

        return self.zero(self.real)

    def is_sign_positive(self) -> bool:
        return self.signum() > 0

    def is_sign_negative(self) -> bool:
        return self.signum() < 0

    def max(self, other) -> Self:
        return other if self < other else self

    def min(self, other) -> Self:
        return other if self > other else self

    def sin_cos(self) -> tuple[Self, Self]:
        """Sine and cosine, sharing one evaluation on the real part."""
        s, c = fwf.sin_cos(self.real)
        return self.__class__(s, self.dual * c), self.__class__(c, -self.dual * s)

    def sin(self) -> Self:
        """Sine."""
        s, c = fwf.sin_cos(self.real)
        return self.__class__(s, self.dual * c)

    def cos(self) -> Self:
        """Cosine."""
        s, c = fwf.sin_cos(self.real)
        return self.__class__(c, -self.dual * s)

    def tan(self) -> Self:
        """Tangent."""
        s, c = self.sin_cos()
        return s / c

    def asin(self) -> Self:
        r = self.real
        return self.__class__(fwf.asin(r), self.dual / fwf.sqrt(1 - r * r))

    def acos(self) -> Self:
        r = self.real
        return self.__class__(fwf.acos(r), -self.dual / fwf.sqrt(1 - r * r))

    def atan(self) -> Self:
        r = self.real
        return self.__class__(fwf.atan(r), self.dual / (1 + r * r))

    def atan2(self, other) -> Self:
        """Angle of the point ``(other, x)``."""
        if _level(other) > self.level:
            return _lift(self, other.level).atan2(other)

        y, x = self, _lift(other, self.level)
        dual = (x.real * y.dual - y.real * x.dual) / (x.real * x.real + y.real * y.real)
        return self.__class__(fwf.atan2(y.real, x.real), dual)

    def sinh(self) -> Self:
        return self.__class__(fwf.sinh(self.real), self.dual * fwf.cosh(self.real))

    def cosh(self) -> Self:
        return self.__class__(fwf.cosh(self.real), self.dual * fwf.sinh(self.real))

    def tanh(self) -> Self:
        t = fwf.tanh(self.real)
        return self.__class__(t, self.dual * (1 - t * t))

    def asinh(self) -> Self:
        r = self.real
        return self.__class__(fwf.asinh(r), self.dual / fwf.sqrt(r * r + 1))

    def acosh(self) -> Self:
        r = self.real
        return self.__class__(fwf.acosh(r), self.dual / fwf.sqrt(r * r - 1))

    def atanh(self) -> Self:
        r = self.real
        return self.__class__(fwf.atanh(r), self.dual / (1 - r * r))

    def to_degrees(self) -> Self:
        return self.__class__(fwf.degrees(self.real), fwf.degrees(self.dual))

    def to_radians(self) -> Self:
        return self.__class__(fwf.radians(self.real), fwf.radians(self.dual))

    def floor(self) -> NoReturn:
        self._unsupported("floor")

    def ceil(self) -> NoReturn:
        self._unsupported("ceil")

    def round(self) -> NoReturn:
        self._unsupported("round")

    def trunc(self) -> NoReturn:
        self._unsupported("trunc")

    def fract(self) -> NoReturn:
        self._unsupported("fract")


def buffer(n: int, depth: int = 1, zero: Any = 0.0) -> list[Dual]:
    """Return a list of `n` zero-valued dual numbers nested `depth` levels deep.

    Each element is a distinct object, so the list can serve as the scratch buffer of
    the differential operators.

    Parameters
    ----------
    n : int
        Length of the buffer.
    depth : int, default=1
        Nesting level of the elements. Use ``depth=2`` for the nested buffer of
        :func:`fwdiff.autodiff.hessian`.
    zero : Scalar, default=0.0
        Zero of the underlying scalar type.

    Examples
    --------
    >>> buffer(2)
    [Dual(real=0.0, dual=0.0), Dual(real=0.0, dual=0.0)]
    >>> buffer(1, depth=2)[0].level
    2
    """
    if n < 0 or depth < 1:
        raise ValueError("n must be non-negative and depth must be positive")

    result: list[Dual] = []

    for _ in range(n):
        value = zero

        for _ in range(depth):
            value = Dual(value)

        result.append(value)

    return result
