"""
Graph utilities: print and analyse the node graph of one evaluated pass.
"""

from collections import Counter
from typing import Dict, List

import numpy as np

from .node import Node


def collect_nodes(root: Node) -> List[Node]:
    """
    Unique nodes reachable from `root` (by id), operands before consumers.
    """
    order: List[Node] = []
    seen = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if node.id in seen:
            continue
        seen.add(node.id)
        stack.append((node, True))
        for p in reversed(node.operands):
            if p.id not in seen:
                stack.append((p, False))
    return order


def get_graph_stats(root: Node) -> Dict:
    """
    Graph statistics for the pass rooted at `root` (no printing).

    Returns:
        dict with node/edge counts, fan-in/fan-out figures and the op-tag
        breakdown
    """
    nodes = collect_nodes(root)
    n_nodes = len(nodes)
    n_edges = sum(len(node.operands) for node in nodes)

    fan_ins = [len(node.operands) for node in nodes]

    fan_outs = Counter()
    for node in nodes:
        for p in node.operands:
            fan_outs[p.id] += 1
    fan_out_list = [fan_outs[node.id] for node in nodes]

    op_counter = Counter(node.op_tag for node in nodes)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': sum(1 for node in nodes if node.is_leaf()),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_out_list),
        'avg_fan_out': float(np.mean(fan_out_list)),
        'operations': dict(op_counter)
    }


def _summary_lines(root: Node, stats: Dict, detailed: bool) -> List[str]:
    n_nodes = stats['nodes']
    rule = "-" * 60
    lines = [rule, f"Pass rooted at node {root.id} ({root.op_tag})", rule]
    for label, key in (("nodes", 'nodes'), ("edges", 'edges'), ("leaves", 'leaves'),
                       ("max fan-in", 'max_fan_in'), ("max fan-out", 'max_fan_out')):
        lines.append(f"{label:>12} = {stats[key]}")
    lines.append(f"{'avg fan-in':>12} = {stats['avg_fan_in']:.2f}")
    lines.append(f"{'avg fan-out':>12} = {stats['avg_fan_out']:.2f}")
    lines.append("op tags:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        lines.append(f"  {op_type:<12} x{count} ({100.0 * count / n_nodes:.1f}%)")

    if detailed and n_nodes <= 100:
        lines.append(rule)
        for node in collect_nodes(root):
            inputs = ", ".join(str(p.id) for p in node.operands) or "-"
            lines.append(f"  #{node.id:<4} {node.op_tag:<12} inputs: {inputs}")
    lines.append(rule)
    return lines


def print_graph_summary(root: Node, detailed: bool = False) -> Dict:
    """
    Print node/edge counts and the op-tag breakdown of the pass rooted at
    `root`; with `detailed`, also one line per node (graphs of at most 100
    nodes). Returns the get_graph_stats dict.
    """
    stats = get_graph_stats(root)
    print("\n".join(_summary_lines(root, stats, detailed)))
    return stats


def analyze_graph_complexity(root: Node) -> str:
    """Text report on the size and shape of the pass rooted at `root`."""
    stats = get_graph_stats(root)

    report = []
    report.append("Graph Complexity Analysis:")
    report.append(f"  Total operations: {stats['nodes']:,}")
    report.append(f"  Total connections: {stats['edges']:,}")
    report.append(f"  Average branching: {stats['avg_fan_out']:.2f}")

    if stats['nodes'] < 1000:
        complexity = "Low"
    elif stats['nodes'] < 10000:
        complexity = "Medium"
    else:
        complexity = "High"

    report.append(f"  Complexity level: {complexity}")

    top_ops = sorted(stats['operations'].items(), key=lambda x: x[1], reverse=True)[:3]
    report.append("  Top operations:")
    for op, count in top_ops:
        pct = 100.0 * count / stats['nodes']
        report.append(f"    - {op}: {pct:.1f}%")

    return "\n".join(report)
