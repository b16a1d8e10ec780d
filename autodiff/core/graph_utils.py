"""
Expression graph inspection helpers.
Walk the operands of composite nodes and summarize the graph structure.
"""

from collections import Counter
from typing import Dict, Iterator

from .node import Composite, Constant, Node, Parameter


def iter_nodes(root: Node) -> Iterator[Node]:
    """
    Yield every distinct node reachable from `root` (root first, depth-first).
    A node shared by several parents is yielded once.
    """
    seen = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        yield node
        if isinstance(node, Composite):
            stack.extend(reversed(node.operands))


def graph_summary(root: Node) -> Dict:
    """
    Structure statistics for the graph under `root`.

    Returns
    -------
    dict with keys
        nodes, edges, parameters, constants, composites, max_fan_in, ops
    where `ops` is a Counter of composite op tags.
    """
    n_nodes = n_edges = n_params = n_consts = 0
    max_fan_in = 0
    ops = Counter()
    for node in iter_nodes(root):
        n_nodes += 1
        if isinstance(node, Parameter):
            n_params += 1
        elif isinstance(node, Constant):
            n_consts += 1
        elif isinstance(node, Composite):
            ops[node.op_tag] += 1
            n_edges += len(node.operands)
            max_fan_in = max(max_fan_in, len(node.operands))

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'parameters': n_params,
        'constants': n_consts,
        'composites': sum(ops.values()),
        'max_fan_in': max_fan_in,
        'ops': ops,
    }


def print_graph_summary(root: Node) -> Dict:
    """Print graph_summary(root) as a table and return it."""
    summary = graph_summary(root)
    n_nodes = summary['nodes']

    rows = [
        ("nodes", n_nodes),
        ("edges", summary['edges']),
        ("parameters", summary['parameters']),
        ("constants", summary['constants']),
        ("max fan-in", summary['max_fan_in']),
    ]
    print(f"graph rooted at node #{root.uid}")
    for label, count in rows:
        print(f"  {label:<12} {count:>8}")
    if summary['ops']:
        print("  ops:")
        for op_tag, count in sorted(summary['ops'].items(), key=lambda kv: (-kv[1], kv[0])):
            print(f"    {op_tag:<12} {count:>6}  {count / n_nodes:6.1%}")

    return summary
