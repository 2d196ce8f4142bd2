import mpmath
import numpy as np

from fwdiff import Context, getcontext, localcontext, setcontext
from fwdiff.autodiff.dual import Dual


def test_getcontext():
    ctx = getcontext()
    assert ctx is getcontext()
    assert isinstance(ctx, Context)


def test_setcontext():
    prev = getcontext()

    try:
        ctx = Context(np.float32)
        setcontext(ctx)
        assert getcontext() is ctx
    finally:
        setcontext(prev)

    assert getcontext() is prev


def test_localcontext():
    prev = getcontext()

    with localcontext(dtype=object) as ctx:
        assert getcontext() is ctx
        assert ctx.dtype == np.dtype(object)

        with localcontext() as inner:
            assert inner is not ctx
            assert inner.dtype == np.dtype(object)

        assert getcontext() is ctx

    assert getcontext() is prev


def test_localcontext_copies():
    base = Context("float32")

    with localcontext(base) as ctx:
        assert ctx is not base
        assert ctx.dtype == np.dtype("float32")


def test_resolve_dtype():
    ctx = Context()
    assert ctx.dtype is None
    assert ctx.resolve_dtype([1.0, 2, 3.5]) == np.dtype(np.float64)
    assert ctx.resolve_dtype([]) == np.dtype(np.float64)
    assert ctx.resolve_dtype([np.float32(1.5), np.int64(2)]) == np.dtype(np.float64)
    assert ctx.resolve_dtype([np.longdouble(1.5)]) == np.dtype(object)
    assert ctx.resolve_dtype([1.0, mpmath.mpf(2)]) == np.dtype(object)
    assert ctx.resolve_dtype([Dual(1.0)]) == np.dtype(object)
    assert Context(object).resolve_dtype([1.0]) == np.dtype(object)


def test_copy():
    ctx = Context("float32")
    other = ctx.copy()
    assert other is not ctx
    assert other.dtype == ctx.dtype
    assert str(Context()) == "Context(None)"
