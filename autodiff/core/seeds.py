# autodiff/core/seeds.py

#-----------------------------------------------------------------------------
# One-shot helpers: wrap plain numbers as Parameters, build the expression,
# and read value/gradient from a fresh Context.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional

from .context import Context
from .node import Node, Parameter, as_node


def value(x: Any, ctx: Optional[Context] = None) -> Any:
    """Return the numeric value of a node; pass through plain numbers unchanged."""
    if not isinstance(x, Node):
        return x
    return x.value(ctx if ctx is not None else Context())


def gradient(x: Any, ctx: Optional[Context] = None) -> Dict[Parameter, float]:
    """Gradient mapping of a node (empty for plain numbers)."""
    if not isinstance(x, Node):
        return {}
    return x.gradient(ctx if ctx is not None else Context())


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Parameter], Any], x0: float) -> float:
    """
    Derivative of y=f(x) at x0 (single input).
    Returns 0.0 when y does not depend on x.
    """
    x = Parameter(x0, name="x")
    y = as_node(f(x))
    return y.gradient(Context()).get(x, 0.0)


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Parameter]], Any],
          inputs: Dict[str, float]) -> Dict[str, float]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from one pass.

    Parameters
    ----------
    f       : function taking a dict {name: Parameter} and returning a node
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: partial}  # same key order as `inputs`
    """
    params = {k: Parameter(v, name=k) for k, v in inputs.items()}
    y = as_node(f(params))
    g = y.gradient(Context())
    return {k: g.get(params[k], 0.0) for k in inputs}


def grads_list(f: Callable[[List[Parameter]], Any],
               x0_list: Iterable[float]) -> List[float]:
    """
    List form of grads(): one Parameter per input value (named x0, x1, ...),
    one gradient pass on a fresh Context, partials returned in input order.
    Inputs the result does not depend on get 0.0.

        grads_list(lambda ps: ps[0].square() + ps[1] * 3.0, [2.0, 4.0])  # [4.0, 3.0]
    """
    xs = [Parameter(v, name=f"x{i}") for i, v in enumerate(x0_list)]
    y = as_node(f(xs))
    g = y.gradient(Context())
    return [g.get(x, 0.0) for x in xs]
