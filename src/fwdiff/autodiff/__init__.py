"""
##################################################
Automatic differentiation (:mod:`fwdiff.autodiff`)
##################################################

.. currentmodule:: fwdiff.autodiff

This module provides forward-mode automatic differentiation.

Differential operators
----------------------

.. autosummary::
    :toctree: generated/

    diff
    grad
    grad_static
    jacobian
    hessian
    make_diff_fn
    make_grad_fn
    make_grad_fn_static
    make_jacobian_fn
    make_hessian_fn

Number system containing infinitesimals
---------------------------------------

.. autosummary::
    :toctree: generated/

    Dual
    buffer

Exceptions
----------

.. autosummary::
    :toctree: generated/

    ShapeError
    UnsupportedOperationError

"""

from .autodiff import (
    ShapeError,
    diff,
    grad,
    grad_static,
    hessian,
    jacobian,
    make_diff_fn,
    make_grad_fn,
    make_grad_fn_static,
    make_hessian_fn,
    make_jacobian_fn,
)
from .dual import Dual, UnsupportedOperationError, buffer

__all__ = [
    "diff",
    "grad",
    "grad_static",
    "hessian",
    "jacobian",
    "make_diff_fn",
    "make_grad_fn",
    "make_grad_fn_static",
    "make_hessian_fn",
    "make_jacobian_fn",
    "Dual",
    "buffer",
    "ShapeError",
    "UnsupportedOperationError",
]
