# autodiff/__init__.py
# Memoized expression-graph automatic differentiation

from .config import ParallelConfig, OptimizerConfig
from .core import (
    Node,
    Parameter,
    Constant,
    Composite,
    as_node,
    constant,
    Context,
    use_context,
    AutodiffError,
    RankMismatchError,
    EmptyReductionError,
    value,
    gradient,
    grad,
    grads,
    grads_list,
)
from .core.graph_utils import graph_summary, print_graph_summary

# Operator / math library (abs and pow stay in autodiff.ops: they shadow builtins)
from . import ops
from .ops import (
    add, sub, mul, div, neg, reciprocal, square, int_pow,
    exp, log, sqrt, erf,
    minimum, maximum, norm_cdf,
)

# Vectors and optimizers
from .vector import (
    Vector, ParameterVector, ConstantVector, ComputedVector,
    dot, reduce_sum, reduce_mean,
)
from .optim import Optimizer, GradientDescent, update_parameters

__version__ = "0.1.0"

__all__ = [
    # Config
    'ParallelConfig',
    'OptimizerConfig',
    # Core
    'Node',
    'Parameter',
    'Constant',
    'Composite',
    'as_node',
    'constant',
    'Context',
    'use_context',
    'AutodiffError',
    'RankMismatchError',
    'EmptyReductionError',
    'value',
    'gradient',
    'grad',
    'grads',
    'grads_list',
    'graph_summary',
    'print_graph_summary',
    # Ops
    'ops',
    'add', 'sub', 'mul', 'div', 'neg', 'reciprocal', 'square',
    'int_pow',
    'exp', 'log', 'sqrt', 'erf',
    'minimum', 'maximum', 'norm_cdf',
    # Vectors
    'Vector',
    'ParameterVector',
    'ConstantVector',
    'ComputedVector',
    'dot',
    'reduce_sum',
    'reduce_mean',
    # Optimization
    'Optimizer',
    'GradientDescent',
    'update_parameters',
]
