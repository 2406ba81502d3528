from aad_backprop.aad import Context
from aad_backprop.aad.core.graph_utils import (
    analyze_graph_complexity,
    collect_nodes,
    get_graph_stats,
    print_graph_summary,
)
from aad_backprop.aad.ops import sin


def _root():
    ctx = Context()
    x = ctx.create_variable(0.5)
    y = ctx.create_variable(2.0)
    return (x * y + x).eval(ctx)


def test_collect_nodes_lists_operands_first():
    root = _root()
    nodes = collect_nodes(root)
    assert [n.id for n in nodes] == [0, 1, 2, 3]
    assert nodes[-1] is root


def test_graph_stats():
    stats = get_graph_stats(_root())
    assert stats['nodes'] == 4
    assert stats['edges'] == 4
    assert stats['leaves'] == 2
    assert stats['max_fan_in'] == 2
    assert stats['max_fan_out'] == 2
    assert stats['operations'] == {'var': 2, 'mul': 1, 'add': 1}


def test_single_leaf_graph():
    ctx = Context()
    x = ctx.create_variable(1.0)
    stats = get_graph_stats(x.eval(ctx))
    assert stats['nodes'] == 1
    assert stats['edges'] == 0
    assert stats['max_fan_out'] == 0


def test_shared_nodes_counted_once():
    ctx = Context()
    x = ctx.create_variable(0.5)
    s = sin(x)
    stats = get_graph_stats((s * s + s).eval(ctx))
    assert stats['nodes'] == 4
    assert stats['operations']['sin'] == 1


def test_print_graph_summary(capsys):
    stats = print_graph_summary(_root(), detailed=True)
    out = capsys.readouterr().out
    assert "Pass rooted at node 3 (add)" in out
    assert "#3    add          inputs: 2, 0" in out
    assert "#1    var          inputs: -" in out
    assert stats['nodes'] == 4


def test_analyze_graph_complexity():
    report = analyze_graph_complexity(_root())
    assert "Total operations: 4" in report
    assert "Complexity level: Low" in report
