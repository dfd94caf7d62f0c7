from core.document_tree import NODE_TEXT
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    AccessibilitySeverity,
    IndicatorCandidate,
    Rect,
)
from tools.accessibility_checker.indicator_detector import (
    analyze_cluster,
    build_candidates,
    check_color_independence,
    cluster_candidates,
    collect_nodes,
    color_key,
    find_indicator_groups,
    is_indicator_candidate,
)

from factories import DARK_GRAY, LIGHT_GRAY, WHITE, context, frame, indicator_row, page, shape, solid, text


def run_on_all_shapes(root, ctx):
    for node in root.walk():
        check_color_independence(node, ctx)


def test_three_dot_row_with_one_active_color_is_flagged():
    root = page("Home", [frame("pager", indicator_row(), fill=WHITE)])
    ctx = context()

    run_on_all_shapes(root, ctx)

    assert len(ctx.issues) == 1
    issue = ctx.issues[0]
    assert issue.node_id == "dot1"
    assert issue.check_type == AccessibilityCheckType.COLOR_INDEPENDENCE
    assert issue.severity == AccessibilitySeverity.WARNING
    assert issue.page_name == "Home"


def test_two_dots_are_not_a_cluster():
    root = page("p", [frame("pager", indicator_row(colors=(LIGHT_GRAY, DARK_GRAY)))])
    ctx = context()
    run_on_all_shapes(root, ctx)
    assert ctx.issues == []


def test_uniform_color_row_is_not_flagged():
    root = page("p", [frame("pager", indicator_row(colors=(LIGHT_GRAY,) * 4))])
    ctx = context()
    run_on_all_shapes(root, ctx)
    assert ctx.issues == []


def test_row_reachable_from_parent_and_grandparent_reports_once():
    inner = frame("inner", indicator_row(), fill=WHITE)
    root = page("p", [frame("outer", [inner])])
    ctx = context()

    run_on_all_shapes(root, ctx)
    run_on_all_shapes(root, ctx)

    assert [i.node_id for i in ctx.issues] == ["dot1"]
    assert {"inner", "outer"} <= ctx.checked_indicator_containers


def test_stroked_dots_are_not_candidates():
    dot = shape("d", 0, 0, 8, 8, strokes=[solid(DARK_GRAY)], stroke_weight=1)
    root = page("p", [frame("f", [dot])])
    assert not is_indicator_candidate(dot)

    dot.stroke_weight = 0
    assert is_indicator_candidate(dot)
    assert root is not None


def test_candidate_size_gates():
    root = page("p", [frame("f", [
        shape("tiny", 0, 0, 1, 1),
        shape("big", 0, 0, 40, 40),
        shape("bar", 0, 0, 641, 4),
        shape("dot", 0, 0, 8, 8),
        shape("pill", 0, 0, 24, 8),
    ])])
    by_id = {n.id: n for n in root.walk()}
    assert not is_indicator_candidate(by_id["tiny"])
    assert not is_indicator_candidate(by_id["big"])
    assert not is_indicator_candidate(by_id["bar"])
    assert is_indicator_candidate(by_id["dot"])
    assert is_indicator_candidate(by_id["pill"])


def test_effects_and_missing_fill_disqualify():
    shadowed = shape("s", 0, 0, 8, 8, effects=[{"type": "DROP_SHADOW", "visible": True}])
    unfilled = shape("u", 0, 0, 8, 8, fill=None)
    label = text("t", "1", w=8, h=8)
    root = page("p", [frame("f", [shadowed, unfilled, label])])
    assert not is_indicator_candidate(shadowed)
    assert not is_indicator_candidate(unfilled)
    assert label.type == NODE_TEXT and not is_indicator_candidate(label)
    assert root is not None


def test_hidden_dots_are_ignored():
    dots = indicator_row()
    dots[1].visible = False
    root = page("p", [frame("pager", dots)])
    assert find_indicator_groups(root.children[0]) == []


def test_far_apart_dots_split_into_separate_clusters():
    left = indicator_row("a", colors=(LIGHT_GRAY, LIGHT_GRAY))
    right = indicator_row("b", colors=(DARK_GRAY,), x=500)
    root = page("p", [frame("f", left + right, w=800)])
    candidates = build_candidates(root.children[0])
    clusters = cluster_candidates(candidates)
    assert sorted(len(c) for c in clusters) == [1, 2]


def test_diagonal_scatter_is_not_aligned():
    dots = [
        shape("d0", 0, 0, 8, 8, fill=LIGHT_GRAY),
        shape("d1", 40, 40, 8, 8, fill=DARK_GRAY),
        shape("d2", 80, 80, 8, 8, fill=LIGHT_GRAY),
    ]
    root = page("p", [frame("f", dots)])
    assert find_indicator_groups(root.children[0]) == []


def test_vertical_row_is_flagged():
    dots = [
        shape("d0", 0, 0, 8, 8, fill=LIGHT_GRAY),
        shape("d1", 0, 16, 8, 8, fill=LIGHT_GRAY),
        shape("d2", 0, 32, 8, 8, fill=DARK_GRAY),
    ]
    root = page("p", [frame("f", dots)])
    groups = find_indicator_groups(root.children[0])
    assert len(groups) == 1
    assert [item.node.id for item in groups[0].focus_items] == ["d2"]


def test_active_pill_of_different_size_is_not_a_focus_item():
    dots = [
        shape("d0", 0, 0, 8, 8, fill=LIGHT_GRAY),
        shape("d1", 16, 0, 8, 8, fill=LIGHT_GRAY),
        shape("d2", 32, 0, 24, 8, fill=DARK_GRAY),
    ]
    root = page("p", [frame("f", dots)])
    assert find_indicator_groups(root.children[0]) == []


def test_analyze_cluster_with_no_majority_color_uses_every_item():
    colors = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]
    items = [
        IndicatorCandidate(node=shape(f"d{i}", i * 16, 0, 8, 8, fill=c), rect=Rect(i * 16, 0, 8, 8),
                           fill=solid(c))
        for i, c in enumerate(colors)
    ]
    analysis = analyze_cluster(items)
    assert analysis is not None
    assert len(analysis.focus_items) == 3


def test_color_key_quantizes_channels():
    assert color_key(solid((0.12345, 0.5, 1.0))) == "0.123|0.500|1.000"
    assert color_key(None) == ""


def test_collect_nodes_prunes_hidden_subtrees():
    hidden = frame("hidden", [shape("inside", 0, 0, 8, 8)], visible=False)
    root = page("p", [frame("f", [hidden, shape("outside", 0, 0, 8, 8)])])
    found = collect_nodes(root, lambda n: n.id in ("inside", "outside"))
    assert [n.id for n in found] == ["outside"]


def test_non_indicator_types_are_ignored():
    root = page("p", [frame("pager", indicator_row())])
    ctx = context()
    check_color_independence(root.children[0], ctx)
    assert ctx.issues == []
    assert ctx.checked_indicator_containers == set()


def candidates(specs):
    """IndicatorCandidates from (x, y, w, h, color) tuples"""
    return [
        IndicatorCandidate(node=shape(f"c{i}", x, y, w, h, fill=c), rect=Rect(x, y, w, h), fill=solid(c))
        for i, (x, y, w, h, c) in enumerate(specs)
    ]


def spread_row(step):
    colors = [LIGHT_GRAY] * 7 + [DARK_GRAY]
    return candidates([(i * step, 0, 24, 24, c) for i, c in enumerate(colors)])


def test_cluster_within_maximum_spread_is_kept():
    analysis = analyze_cluster(spread_row(100))
    assert analysis is not None
    assert [item.node.id for item in analysis.focus_items] == ["c7"]


def test_cluster_beyond_maximum_spread_is_rejected():
    assert analyze_cluster(spread_row(104.3)) is None


def sparse_row(step):
    return candidates([(i * step, 0, 8, 8, c) for i, c in enumerate((LIGHT_GRAY, DARK_GRAY, LIGHT_GRAY))])


def test_dense_row_along_axis_is_kept():
    assert analyze_cluster(sparse_row(30)) is not None


def test_sparse_row_along_axis_is_rejected():
    assert analyze_cluster(sparse_row(70)) is None


def stretched_row(focus_w, focus_h):
    specs = [(i * 16, 0, 10, 10, LIGHT_GRAY) for i in range(8)]
    specs.append((8 * 16, 0, focus_w, focus_h, DARK_GRAY))
    return candidates(specs)


def test_focus_item_with_similar_aspect_is_kept():
    analysis = analyze_cluster(stretched_row(12, 8))
    assert analysis is not None
    assert [item.node.id for item in analysis.focus_items] == ["c8"]


def test_focus_item_with_different_aspect_is_rejected():
    assert analyze_cluster(stretched_row(13.8, 7.4)) is None


def test_row_placed_directly_on_a_page_is_flagged():
    root = page("p", indicator_row())
    ctx = context()
    run_on_all_shapes(root, ctx)
    assert [i.node_id for i in ctx.issues] == ["dot1"]
