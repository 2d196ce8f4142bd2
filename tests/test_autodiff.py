import math

import mpmath
import numpy as np
import pytest

from fwdiff import function as fwf
from fwdiff import localcontext
from fwdiff.autodiff import autodiff
from fwdiff.autodiff.dual import Dual, buffer


def f_rational(x):
    return (x - 1) / (x + 1)


def f_fancy(x):
    return fwf.sin(fwf.exp(x * fwf.cos(x / 3)) * fwf.log(fwf.cos(x) + 1.5))


def f_grad(x):
    return x[0] * fwf.exp(x[0] * x[1])


def f_jac(x, y):
    x2my2 = x[0] ** 2 - x[1] ** 2
    xy = x[0] * x[1]
    y[0] = x2my2 * fwf.sin(xy)
    y[1] = xy * fwf.cos(x2my2)


def test_diff():
    assert autodiff.diff(f_rational, 1.0) == pytest.approx(0.5)
    assert autodiff.diff(f_rational, 0.0) == pytest.approx(2.0)


def test_diff_nested():
    d1f = autodiff.make_diff_fn(f_rational)
    d2f = autodiff.make_diff_fn(d1f)
    d3f = autodiff.make_diff_fn(d2f)

    for x in (0.0, 0.5, 1.0):
        assert d1f(x) == pytest.approx(2 / (x + 1) ** 2)
        assert d2f(x) == pytest.approx(-4 / (x + 1) ** 3)
        assert d3f(x) == pytest.approx(12 / (x + 1) ** 4)


def test_diff_nested_polynomial_vanishes():
    deriv = autodiff.make_diff_fn(lambda x: 3 * x**3 - 2 * x**2 + x - 7)

    for _ in range(3):
        deriv = autodiff.make_diff_fn(deriv)

    assert deriv(0.7) == 0
    assert deriv(-2.0) == 0


def test_diff_fancy():
    d1f = autodiff.make_diff_fn(f_fancy)
    d2f = autodiff.make_diff_fn(d1f)
    h = 1e-5

    for x in (0.5, 2.0, 4.0):
        central = (f_fancy(x + h) - f_fancy(x - h)) / (2 * h)
        assert d1f(x) == pytest.approx(central, rel=1e-6, abs=1e-8)
        central = (d1f(x + h) - d1f(x - h)) / (2 * h)
        assert d2f(x) == pytest.approx(central, rel=1e-5, abs=1e-5)


def test_diff_constant():
    assert autodiff.diff(lambda x: 4.0, 2.0) == 0.0
    assert autodiff.make_diff_fn(autodiff.make_diff_fn(lambda x: 5 * x))(1.0) == 0.0


def test_diff_mpmath():
    with mpmath.workdps(40):
        d = autodiff.diff(fwf.exp, mpmath.mpf(1))
        assert isinstance(d, mpmath.mpf)
        assert abs(d - mpmath.e) < mpmath.mpf(10) ** -35


def test_grad():
    x = [1.0, 1.0]
    g = [0.0, 0.0]
    buf = buffer(2)
    autodiff.grad(f_grad, x, g, buf)
    assert g == pytest.approx([2 * math.e, math.e])


def test_grad_reuse():
    buf = buffer(2)
    g0 = autodiff.grad(f_grad, [1.0, 1.0], [0.0, 0.0], buf)
    g1 = autodiff.grad(f_grad, [1.0, 1.0], [0.0, 0.0], buf)
    assert g0 == g1
    assert all(b.dual == 0 for b in buf)

    g2 = autodiff.grad(f_grad, [0.5, 2.0], [0.0, 0.0], buf)
    assert g2 == pytest.approx([math.exp(1.0) * 2.0, 0.25 * math.exp(1.0)])


def test_grad_fn():
    df = autodiff.make_grad_fn(f_grad, buffer(2))
    g = [0.0, 0.0]
    assert df([1.0, 1.0], g) is g
    assert g == pytest.approx([2 * math.e, math.e])


def test_grad_static():
    assert autodiff.grad_static(f_grad, (1.0, 1.0)) == pytest.approx(
        (2 * math.e, math.e)
    )

    df = autodiff.make_grad_fn_static(f_grad, 2)
    assert df([1.0, 1.0]) == pytest.approx((2 * math.e, math.e))

    with pytest.raises(autodiff.ShapeError):
        df([1.0, 1.0, 1.0])


def test_grad_shape_mismatch():
    calls = []

    def f(x):
        calls.append(1)
        return x[0] + x[1]

    with pytest.raises(autodiff.ShapeError):
        autodiff.grad(f, [1.0, 2.0, 3.0], [0.0, 0.0], buffer(2))

    with pytest.raises(autodiff.ShapeError):
        autodiff.grad(f, [1.0, 2.0], [0.0, 0.0, 0.0], buffer(2))

    assert not calls


def test_grad_invalid_buffer():
    with pytest.raises(TypeError):
        autodiff.grad(f_grad, [1.0, 1.0], [0.0, 0.0], [0.0, 0.0])


def test_grad_evaluation_count():
    calls = []

    def f(x):
        calls.append(1)
        return x[0] * x[1] * x[2]

    g = autodiff.grad(f, [1.0, 2.0, 3.0], [0.0] * 3, buffer(3))
    assert len(calls) == 3
    assert g == pytest.approx([6.0, 3.0, 2.0])


def test_grad_mpmath():
    with mpmath.workdps(30):
        x = [mpmath.mpf(1), mpmath.mpf(1)]
        g = autodiff.grad(f_grad, x, [0, 0], buffer(2, zero=mpmath.mpf(0)))
        assert abs(g[0] - 2 * mpmath.e) < mpmath.mpf(10) ** -25
        assert abs(g[1] - mpmath.e) < mpmath.mpf(10) ** -25


def test_jacobian():
    x, y = 1.0, 2.0
    jac = autodiff.jacobian(f_jac, [x, y], buffer(2), buffer(2))

    u, v = x**2 - y**2, x * y
    expected = [
        [
            2 * x * math.sin(v) + u * y * math.cos(v),
            -2 * y * math.sin(v) + u * x * math.cos(v),
        ],
        [
            y * math.cos(u) - v * 2 * x * math.sin(u),
            x * math.cos(u) + v * 2 * y * math.sin(u),
        ],
    ]

    assert jac.shape == (2, 2)
    assert jac.dtype == np.float64
    assert jac[0].tolist() == pytest.approx(expected[0])
    assert jac[1].tolist() == pytest.approx(expected[1])


def test_jacobian_matches_grad():
    jac = autodiff.jacobian(f_jac, [1.0, 2.0], buffer(2), buffer(2))

    for j in range(2):

        def component(x, j=j):
            y = [None, None]
            f_jac(x, y)
            return y[j]

        row = autodiff.grad(component, [1.0, 2.0], [0.0, 0.0], buffer(2))
        assert list(jac[j]) == row


def test_jacobian_rectangular():
    def f(x, y):
        y[0] = x[0] * x[1] * x[2]
        y[1] = x[0] + x[2]

    jac = autodiff.jacobian(f, [1.0, 2.0, 3.0], buffer(3), buffer(2))
    assert jac.shape == (2, 3)
    assert jac[0].tolist() == pytest.approx([6.0, 3.0, 2.0])
    assert jac[1].tolist() == pytest.approx([1.0, 0.0, 1.0])


def test_jacobian_output_matrix():
    out = np.full((2, 2), np.nan)
    jac = autodiff.jacobian(f_jac, [1.0, 2.0], buffer(2), buffer(2), out)
    assert jac is out
    assert not np.isnan(out).any()

    with pytest.raises(autodiff.ShapeError):
        autodiff.jacobian(f_jac, [1.0, 2.0], buffer(2), buffer(2), np.zeros((2, 3)))

    with pytest.raises(autodiff.ShapeError):
        autodiff.jacobian(f_jac, [1.0, 2.0, 3.0], buffer(2), buffer(2))


def test_jacobian_identity():
    def f(x, y):
        y[0] = x[1]
        y[1] = x[0]

    jac = autodiff.jacobian(f, [1.0, 2.0], buffer(2), buffer(2))
    assert jac.tolist() == [[0.0, 1.0], [1.0, 0.0]]


def test_jacobian_distinct_buffers():
    buf = buffer(2)

    with pytest.raises(ValueError):
        autodiff.jacobian(f_jac, [1.0, 2.0], buf, buf)


def test_jacobian_fn():
    jf = autodiff.make_jacobian_fn(f_jac, buffer(2), buffer(2))
    j0 = jf([1.0, 2.0])
    j1 = jf([1.0, 2.0])
    assert (j0 == j1).all()


def test_jacobian_dtype():
    with localcontext(dtype=object):
        jac = autodiff.jacobian(f_jac, [1.0, 2.0], buffer(2), buffer(2))

    assert jac.dtype == object

    with mpmath.workdps(30):
        x = [mpmath.mpf(1), mpmath.mpf(2)]
        jac = autodiff.jacobian(f_jac, x, buffer(2), buffer(2))
        assert jac.dtype == object
        assert isinstance(jac[0, 0], mpmath.mpf)


def test_hessian():
    h = autodiff.hessian(f_grad, [1.0, 1.0], buffer(2), buffer(2), buffer(2, depth=2))
    assert h[0].tolist() == pytest.approx([3 * math.e, 3 * math.e])
    assert h[1].tolist() == pytest.approx([3 * math.e, math.e])


def test_hessian_symmetric():
    def f(x):
        return fwf.sin(x[0] * x[1]) * fwf.exp(x[2]) + x[0] ** 3 / (1 + x[1] ** 2)

    n = 3
    h = autodiff.hessian(f, [0.3, -1.2, 0.7], buffer(n), buffer(n), buffer(n, depth=2))

    for i in range(n):
        for j in range(n):
            assert h[i, j] == pytest.approx(h[j, i])


def test_hessian_matches_nested_diff():
    def f(x):
        return x[0] ** 4 * fwf.cos(x[1])

    h = autodiff.hessian(f, [1.5, 0.4], buffer(2), buffer(2), buffer(2, depth=2))
    d2x = autodiff.make_diff_fn(autodiff.make_diff_fn(lambda t: t**4 * math.cos(0.4)))
    assert h[0, 0] == pytest.approx(d2x(1.5))
    assert h[0, 1] == pytest.approx(-4 * 1.5**3 * math.sin(0.4))
    assert h[1, 1] == pytest.approx(-(1.5**4) * math.cos(0.4))


def test_hessian_roots():
    n = 2
    expected = [[16 / 125, -12 / 125], [-12 / 125, 9 / 125]]

    for f in (
        lambda x: fwf.sqrt(x[0] ** 2 + x[1] ** 2),
        lambda x: fwf.hypot(x[0], x[1]),
    ):
        h = autodiff.hessian(f, [3.0, 4.0], buffer(n), buffer(n), buffer(n, depth=2))
        assert h[0].tolist() == pytest.approx(expected[0])
        assert h[1].tolist() == pytest.approx(expected[1])

    h = autodiff.hessian(
        lambda x: fwf.cbrt(x[0] * x[1]), [2.0, 4.0], buffer(n), buffer(n), buffer(n, 2)
    )
    # cbrt(xy) = 2 at (2, 4)
    assert h[0, 0] == pytest.approx(-2 / 9 * 2 / 4)
    assert h[0, 1] == pytest.approx(1 / 9 * 2 / 8)
    assert h[1, 1] == pytest.approx(-2 / 9 * 2 / 16)


def test_hessian_atan2():
    h = autodiff.hessian(
        lambda x: fwf.atan2(x[0], x[1]), [1.0, 2.0], buffer(2), buffer(2), buffer(2, 2)
    )
    assert h[0].tolist() == pytest.approx([-4 / 25, -3 / 25])
    assert h[1].tolist() == pytest.approx([-3 / 25, 4 / 25])


def test_second_derivatives():
    def second(f):
        return autodiff.make_diff_fn(autodiff.make_diff_fn(f))

    assert second(fwf.sqrt)(4.0) == pytest.approx(-1 / 32)
    assert second(fwf.cbrt)(8.0) == pytest.approx(-1 / 144)
    assert second(fwf.exp2)(1.0) == pytest.approx(2 * math.log(2) ** 2)
    assert second(lambda x: x**2.5)(4.0) == pytest.approx(7.5)
    assert second(lambda x: 2**x)(1.0) == pytest.approx(2 * math.log(2) ** 2)
    assert second(lambda x: fwf.log(x, 3.0))(2.0) == pytest.approx(
        -1 / (4 * math.log(3))
    )
    assert second(lambda x: fwf.atan2(1.0, x))(2.0) == pytest.approx(0.16)
    assert second(lambda x: fwf.hypot(x, 4.0))(3.0) == pytest.approx(16 / 125)


def test_hessian_fn():
    hf = autodiff.make_hessian_fn(f_grad, buffer(2), buffer(2), buffer(2, depth=2))
    out = np.zeros((2, 2))
    assert hf([1.0, 1.0], out) is out
    assert (hf([1.0, 1.0]) == out).all()


def test_hessian_shape_mismatch():
    with pytest.raises(autodiff.ShapeError):
        autodiff.hessian(f_grad, [1.0, 1.0], buffer(2), buffer(2), buffer(3, depth=2))


def test_hessian_mpmath():
    with mpmath.workdps(30):
        x = [mpmath.mpf(1), mpmath.mpf(1)]
        h = autodiff.hessian(f_grad, x, buffer(2), buffer(2), buffer(2, depth=2))
        assert abs(h[1, 1] - mpmath.e) < mpmath.mpf(10) ** -25


def test_nested_dual_value():
    x = Dual(Dual(2.0, 1.0), Dual(1.0, 0.0))
    y = x * x * x
    assert y.real == Dual(8.0, 12.0)
    assert y.dual == Dual(12.0, 12.0)
