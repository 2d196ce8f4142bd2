import logging

from .autodiff import Dual, diff, grad, hessian, jacobian
from .context import Context, getcontext, localcontext, setcontext

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Dual",
    "diff",
    "grad",
    "hessian",
    "jacobian",
    "Context",
    "getcontext",
    "localcontext",
    "setcontext",
]
