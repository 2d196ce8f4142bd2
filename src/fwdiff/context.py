"""
###############################
Context (:mod:`fwdiff.context`)
###############################

.. currentmodule:: fwdiff.context

This module provides the configuration of the differential operators.

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

"""

import contextlib
import contextvars
from collections.abc import Iterable
from typing import Any, Self

import numpy as np
import numpy.typing as npt

_REAL = (float, int, np.integer, np.float16, np.float32)


class Context:
    """Create a new context.

    Parameters
    ----------
    dtype : numpy.typing.DTypeLike, optional
        Data type of the matrices allocated by :func:`fwdiff.autodiff.jacobian` and
        :func:`fwdiff.autodiff.hessian`. If omitted, the data type is inferred from
        the point of evaluation: :class:`numpy.float64` if every coordinate is a
        built-in or numpy integer or a float no wider than double precision, and
        :class:`object` otherwise, so that :mod:`mpmath` numbers, extended
        precision floats and dual numbers are stored without conversion.
    """

    __slots__ = ("_dtype",)
    _dtype: np.dtype | None

    def __init__(self, dtype: npt.DTypeLike | None = None):
        self._dtype = None if dtype is None else np.dtype(dtype)

    @property
    def dtype(self) -> np.dtype | None:
        return self._dtype

    def copy(self) -> Self:
        return self.__class__(self._dtype)

    def resolve_dtype(self, values: Iterable[Any]) -> np.dtype:
        """Return the data type of a matrix holding derivatives at `values`.

        Examples
        --------
        >>> Context().resolve_dtype([1.0, 2])
        dtype('float64')
        >>> Context("float32").resolve_dtype([1.0, 2])
        dtype('float32')
        """
        if self._dtype is not None:
            return self._dtype

        if all(isinstance(x, _REAL) for x in values):
            return np.dtype(np.float64)

        return np.dtype(object)

    def __str__(self):
        return f"{type(self).__name__}({self._dtype!r})"

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("fwdiff")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    _var.set(ctx)


@contextlib.contextmanager
def localcontext(ctx: Context | None = None, *, dtype: npt.DTypeLike | None = None):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> with localcontext(dtype=object) as ctx:
    ...     print(ctx.dtype)
    object
    """
    if ctx is None:
        ctx = getcontext()

    if dtype is None:
        dtype = ctx._dtype

    ctx = Context(dtype)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
