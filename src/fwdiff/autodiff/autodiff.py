import logging
from collections.abc import Callable, MutableSequence, Sequence
from typing import Any, TypeVar

import numpy as np
import numpy.typing as npt

from fwdiff.autodiff.dual import Dual, _zero, buffer
from fwdiff.context import getcontext

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ShapeError(ValueError):
    """Raised when the lengths of a point, its buffers and the output storage do not
    agree."""


def _check_length(name: str, actual: int, expected: int) -> None:
    if actual != expected:
        raise ShapeError(f"{name} has length {actual}, expected {expected}")


def _check_buffer(name: str, buf: Sequence[Any]) -> None:
    if not all(isinstance(b, Dual) for b in buf):
        raise TypeError(f"{name} must contain only Dual instances")


def _dual_part(value: Any, level: int, zero: Any) -> Any:
    # A result that does not depend on the seeded input is a constant.
    if not isinstance(value, Dual) or value.level < level:
        return zero

    if value.level > level:
        raise TypeError("function returned a dual number nested deeper than its input")

    return value.dual


def _seed(buf: Sequence[Dual], x: Sequence[Any]) -> tuple[Any, Any]:
    zero = _zero(x[0])
    one = zero + 1

    for b, value in zip(buf, x):
        b.real = value
        b.dual = zero

    return zero, one


def diff(fun: Callable[[Dual[T]], Any], x: T) -> T:
    """Return the derivative of the univariate scalar-valued function `fun` at `x`.

    `fun` is evaluated once on a dual number seeded with derivative one.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It must accept a :class:`Dual` in place of a number.
    x : Scalar
        Point of evaluation.

    Returns
    -------
    Scalar
        Derivative of `fun` at `x`. If `fun` does not depend on its argument, the
        zero of the type of `x`.

    Examples
    --------
    >>> diff(lambda x: (x - 1) / (x + 1), 1.0)
    0.5

    Passing an :mod:`mpmath` number computes in its precision.

    >>> import mpmath
    >>> from fwdiff import function as fwf
    >>> print(diff(fwf.exp, mpmath.mpf(1)))
    2.71828182845905
    """
    seed = Dual.variable(x)
    return _dual_part(fun(seed), seed.level, _zero(x))


def make_diff_fn(fun: Callable[[Dual[T]], Any]) -> Callable[[T], T]:
    """Return a function that evaluates the derivative of the univariate scalar-valued
    function.

    Parameters
    ----------
    fun : Callable
        Differentiated function.

    Returns
    -------
    Callable
        Derivative of `fun`.

    Warnings
    --------
    `fun` must not contain conditional branches on its argument: dual numbers are
    ordered by their values only, so the derivative of a branch point is that of the
    branch taken.

    Examples
    --------
    The derivative of the derivative is the second-order derivative, at the cost of
    one more level of nesting.

    >>> df = make_diff_fn(lambda x: x**3)
    >>> ddf = make_diff_fn(df)
    >>> df(2.0), ddf(2.0)
    (12.0, 12.0)
    """

    def result(x):
        return diff(fun, x)

    return result


def grad(
    fun: Callable[[Sequence[Dual[T]]], Any],
    x: Sequence[T],
    g: MutableSequence[T],
    buf: Sequence[Dual[T]],
) -> MutableSequence[T]:
    """Compute the gradient of the multivariate scalar-valued function `fun` at `x`.

    Each coordinate is seeded in turn, so `fun` is evaluated ``len(x)`` times. The
    buffer is reused across the evaluations and must not be shared with a concurrent
    call.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It receives `buf` and returns a dual number.
    x : Sequence
        Point of evaluation.
    g : MutableSequence
        Output storage. ``g[i]`` receives the partial derivative with respect to
        ``x[i]``.
    buf : Sequence[Dual]
        Scratch buffer of dual numbers, e.g. made by :func:`buffer`.

    Returns
    -------
    MutableSequence
        `g`.

    Raises
    ------
    ShapeError
        If `x`, `g` and `buf` differ in length.

    Examples
    --------
    >>> from fwdiff import function as fwf
    >>> f = lambda x: x[0] * fwf.exp(x[0] * x[1])
    >>> g = grad(f, [1.0, 1.0], [0.0, 0.0], buffer(2))
    >>> print(format(g[0], ".6f"), format(g[1], ".6f"))
    5.436564 2.718282
    """
    n = len(x)
    _check_length("buf", len(buf), n)
    _check_length("g", len(g), n)
    _check_buffer("buf", buf)
    logger.debug("grad: %d inputs, %d evaluations", n, n)

    if n == 0:
        return g

    zero, one = _seed(buf, x)
    level = buf[0].level

    for i in range(n):
        buf[i].dual = one
        g[i] = _dual_part(fun(buf), level, zero)
        buf[i].dual = zero

    return g


def make_grad_fn(
    fun: Callable[[Sequence[Dual[T]]], Any], buf: Sequence[Dual[T]]
) -> Callable[[Sequence[T], MutableSequence[T]], MutableSequence[T]]:
    """Return a function ``(x, g) -> grad(fun, x, g, buf)``.

    The returned function owns `buf` for as long as it is used.
    """

    def result(x, g):
        return grad(fun, x, g, buf)

    return result


def grad_static(
    fun: Callable[[Sequence[Dual[T]]], Any], x: Sequence[T]
) -> tuple[T, ...]:
    """Return the gradient of `fun` at `x`, allocating the buffers on each call.

    Examples
    --------
    >>> grad_static(lambda x: x[0] * x[1] + x[1], (2.0, 3.0))
    (3.0, 3.0)
    """
    n = len(x)
    g: list[Any] = [None] * n
    grad(fun, x, g, buffer(n))
    return tuple(g)


def make_grad_fn_static(
    fun: Callable[[Sequence[Dual[T]]], Any], n: int
) -> Callable[[Sequence[T]], tuple[T, ...]]:
    """Return a function that evaluates the gradient of a function of `n` variables.

    Raises
    ------
    ShapeError
        When the returned function is called with a point of another length.
    """

    def result(x):
        _check_length("x", len(x), n)
        return grad_static(fun, x)

    return result


def jacobian(
    fun: Callable[[Sequence[Dual[T]], MutableSequence[Any]], Any],
    x: Sequence[T],
    buf_in: Sequence[Dual[T]],
    buf_out: MutableSequence[Any],
    jac: npt.NDArray | None = None,
) -> npt.NDArray:
    """Compute the Jacobian matrix of the multivariate vector-valued function `fun`.

    `fun` is evaluated ``len(x)`` times regardless of the number of outputs.

    Parameters
    ----------
    fun : Callable
        Differentiated function. It is called as ``fun(buf_in, buf_out)`` and must
        store its outputs in `buf_out`.
    x : Sequence
        Point of evaluation.
    buf_in : Sequence[Dual]
        Scratch buffer for the inputs, of the same length as `x`.
    buf_out : MutableSequence
        Scratch buffer for the outputs; its length is the number of outputs.
    jac : numpy.ndarray, optional
        Output matrix of shape ``(len(buf_out), len(buf_in))``. If omitted, a zero
        matrix is allocated with the data type of the current
        :class:`~fwdiff.context.Context`.

    Returns
    -------
    numpy.ndarray
        Jacobian matrix; the entry ``(j, i)`` is the derivative of output `j` with
        respect to input `i`.

    Raises
    ------
    ShapeError
        If the lengths of `x` and `buf_in` differ or `jac` has a wrong shape.

    Examples
    --------
    >>> def f(x, y):
    ...     y[0] = x[0] * x[1]
    ...     y[1] = x[0] + 2 * x[1]
    >>> print(jacobian(f, [3.0, 4.0], buffer(2), buffer(2)))
    [[4. 3.]
     [1. 2.]]
    """
    n_in = len(buf_in)
    n_out = len(buf_out)
    _check_length("x", len(x), n_in)
    _check_buffer("buf_in", buf_in)

    if buf_in is buf_out:
        raise ValueError("buf_in and buf_out must be distinct buffers")

    if jac is None:
        dtype = getcontext().resolve_dtype(x)
        jac = np.zeros((n_out, n_in), dtype)
    elif np.shape(jac) != (n_out, n_in):
        raise ShapeError(f"jac has shape {np.shape(jac)}, expected {(n_out, n_in)}")

    logger.debug("jacobian: %d inputs, %d outputs, %d evaluations", n_in, n_out, n_in)

    if n_in == 0:
        return jac

    zero, one = _seed(buf_in, x)
    level = buf_in[0].level

    for i in range(n_in):
        buf_in[i].dual = one
        fun(buf_in, buf_out)

        # Outputs may alias entries of buf_in, so read them before resetting.
        for j in range(n_out):
            jac[j, i] = _dual_part(buf_out[j], level, zero)

        buf_in[i].dual = zero

    return jac


def make_jacobian_fn(
    fun: Callable[[Sequence[Dual[T]], MutableSequence[Any]], Any],
    buf_in: Sequence[Dual[T]],
    buf_out: MutableSequence[Any],
) -> Callable[..., npt.NDArray]:
    """Return a function ``(x, jac=None) -> jacobian(fun, x, buf_in, buf_out, jac)``."""

    def result(x, jac=None):
        return jacobian(fun, x, buf_in, buf_out, jac)

    return result


def hessian(
    fun: Callable[[Sequence[Dual[Dual[T]]]], Any],
    x: Sequence[T],
    buf_in: Sequence[Dual[T]],
    buf_out: MutableSequence[Any],
    buf_nested: Sequence[Dual[Dual[T]]],
    hess: npt.NDArray | None = None,
) -> npt.NDArray:
    """Compute the Hessian matrix of the multivariate scalar-valued function `fun`.

    The Hessian matrix is computed as the Jacobian matrix of the gradient: the
    gradient of `fun` is evaluated on dual numbers over dual numbers, which makes it
    a vector-valued function that :func:`jacobian` can differentiate.

    Parameters
    ----------
    fun : Callable
        Differentiated function, called with `buf_nested`.
    x : Sequence
        Point of evaluation.
    buf_in, buf_out : Sequence[Dual]
        Scratch buffers of the Jacobian pass, each of the same length as `x`.
    buf_nested : Sequence[Dual]
        Scratch buffer of the gradient pass, of the same length as `x`. Its elements
        hold dual numbers over dual numbers (see ``buffer(n, depth=2)``).
    hess : numpy.ndarray, optional
        Output matrix of shape ``(len(x), len(x))``.

    Returns
    -------
    numpy.ndarray
        Hessian matrix. Symmetry is not enforced, so an asymmetric result indicates a
        function that is not twice continuously differentiable at `x`.

    Examples
    --------
    >>> f = lambda x: x[0] ** 2 * x[1]
    >>> print(hessian(f, [1.0, 2.0], buffer(2), buffer(2), buffer(2, depth=2)))
    [[4. 2.]
     [2. 0.]]
    """
    n = len(x)
    _check_length("buf_in", len(buf_in), n)
    _check_length("buf_out", len(buf_out), n)
    _check_length("buf_nested", len(buf_nested), n)
    logger.debug("hessian: %d inputs, %d gradient passes", n, n)

    def gradient(xs, ys):
        grad(fun, xs, ys, buf_nested)

    return jacobian(gradient, x, buf_in, buf_out, hess)


def make_hessian_fn(
    fun: Callable[[Sequence[Dual[Dual[T]]]], Any],
    buf_in: Sequence[Dual[T]],
    buf_out: MutableSequence[Any],
    buf_nested: Sequence[Dual[Dual[T]]],
) -> Callable[..., npt.NDArray]:
    """Return a function ``(x, hess=None) -> hessian(fun, x, ...)`` over the given
    buffers."""

    def result(x, hess=None):
        return hessian(fun, x, buf_in, buf_out, buf_nested, hess)

    return result
