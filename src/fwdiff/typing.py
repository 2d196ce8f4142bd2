"""
#############################
Typing (:mod:`fwdiff.typing`)
#############################

This module provides the capability protocols shared between modules.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

.. autoclass:: Real
    :show-inheritance:
    :no-members:

.. autoclass:: ExtendedReal
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self, SupportsAbs


class Scalar(Protocol):
    """Protocol that ensures scalar-like behavior.

    Objects implementing this protocol must have four arithmetic operations and
    integer power defined, and four arithmetic operations must be compatible with
    integers.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | int) -> Self: ...

    @abstractmethod
    def __pow__(self, rhs: int) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | int) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...

    @abstractmethod
    def __pos__(self) -> Self: ...


class ComparableScalar(Scalar, SupportsAbs, Protocol):
    """Protocol for comparable :class:`Scalar`, like a real number."""

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __ge__(self, rhs: Self) -> bool: ...


class Real(ComparableScalar, Protocol):
    """Protocol for the capabilities every differentiable number must provide.

    Besides the field operations and the ordering of :class:`ComparableScalar`, a
    real number must support the exponential, the natural logarithm, sine and cosine,
    and integer powers. Any type satisfying this protocol can be used as the
    coefficient type of :class:`fwdiff.autodiff.Dual`, and
    :class:`fwdiff.autodiff.Dual` satisfies it as well.
    """

    __slots__ = ()

    @abstractmethod
    def exp(self) -> Self: ...

    @abstractmethod
    def ln(self) -> Self: ...

    @abstractmethod
    def sin(self) -> Self: ...

    @abstractmethod
    def cos(self) -> Self: ...

    @abstractmethod
    def sin_cos(self) -> tuple[Self, Self]: ...

    @abstractmethod
    def powi(self, n: int) -> Self: ...

    @abstractmethod
    def powf(self, e: Self) -> Self: ...

    @abstractmethod
    def sqrt(self) -> Self: ...

    @abstractmethod
    def signum(self) -> Self: ...


class ExtendedReal(Real, Protocol):
    """Protocol for the optional capabilities of a real number.

    Implementations may decline any of these operations, but only by raising
    :class:`NotImplementedError` (or a subclass), never by returning an incorrect
    value.
    """

    __slots__ = ()

    @abstractmethod
    def asin(self) -> Self: ...

    @abstractmethod
    def acos(self) -> Self: ...

    @abstractmethod
    def atan(self) -> Self: ...

    @abstractmethod
    def sinh(self) -> Self: ...

    @abstractmethod
    def cosh(self) -> Self: ...

    @abstractmethod
    def tanh(self) -> Self: ...

    @abstractmethod
    def floor(self) -> Self: ...

    @abstractmethod
    def ceil(self) -> Self: ...

    @abstractmethod
    def trunc(self) -> Self: ...

    @abstractmethod
    def fract(self) -> Self: ...
