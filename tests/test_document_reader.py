import pytest

from core.document_reader import DocumentLoadError, DocumentReader, load_document
from core.document_tree import NODE_GROUP, NODE_PAGE, NODE_ROOT
from tools.accessibility_checker.geometry import bounding_rect


def rest_response(children):
    return {
        "name": "Shop",
        "document": {
            "id": "0:0",
            "type": "DOCUMENT",
            "children": [{"id": "1:1", "type": "CANVAS", "name": "Home", "children": children}],
        },
    }


def offset(x, y):
    return [[1, 0, x], [0, 1, y]]


def test_rest_types_are_mapped():
    doc = DocumentReader().load_dict(rest_response([
        {"id": "2:1", "type": "RECTANGLE", "name": "Box",
         "absoluteBoundingBox": {"x": 10, "y": 20, "width": 30, "height": 40}},
    ]))
    assert doc.name == "Shop"
    assert doc.root.type == NODE_ROOT
    assert [p.type for p in doc.pages] == [NODE_PAGE]

    box = doc.get_node_by_id("2:1")
    rect = bounding_rect(box)
    assert (rect.x, rect.y, rect.width, rect.height) == (10, 20, 30, 40)
    assert box.page_name() == "Home"


def test_relative_transforms_compose_through_frames():
    doc = DocumentReader().load_dict(rest_response([
        {"id": "f", "type": "FRAME", "relativeTransform": offset(100, 50), "size": {"x": 200, "y": 100},
         "children": [
             {"id": "c", "type": "RECTANGLE", "relativeTransform": offset(10, 5), "size": {"x": 5, "y": 5}},
             {"id": "g", "type": "GROUP", "relativeTransform": offset(1, 1), "size": {"x": 5, "y": 5},
              "children": [
                  {"id": "gc", "type": "ELLIPSE", "relativeTransform": offset(1, 1), "size": {"x": 5, "y": 5}},
              ]},
         ]},
    ]))
    child = bounding_rect(doc.get_node_by_id("c"))
    assert (child.x, child.y) == (110, 55)

    # group children stay in the enclosing frame's space
    assert doc.get_node_by_id("g").type == NODE_GROUP
    grouped = bounding_rect(doc.get_node_by_id("gc"))
    assert (grouped.x, grouped.y) == (101, 51)


def test_absolute_transform_wins():
    doc = DocumentReader().load_dict(rest_response([
        {"id": "n", "type": "RECTANGLE", "width": 4, "height": 4,
         "absoluteTransform": offset(7, 8), "relativeTransform": offset(100, 100),
         "absoluteBoundingBox": {"x": 0, "y": 0, "width": 4, "height": 4}},
    ]))
    rect = bounding_rect(doc.get_node_by_id("n"))
    assert (rect.x, rect.y) == (7, 8)


def test_lone_page_gets_a_synthetic_root():
    doc = DocumentReader().load_dict({"id": "1:1", "type": "PAGE", "name": "Only", "children": []},
                                     fallback_name="export")
    assert doc.root.id == "0:0"
    assert [p.id for p in doc.pages] == ["1:1"]
    assert doc.name == "export"


def test_plugin_wrapper_sets_current_page_and_selection():
    data = {
        "name": "Wrapped",
        "currentPageId": "p2",
        "selection": ["n2", 7],
        "document": {"id": "0:0", "type": "ROOT", "children": [
            {"id": "p1", "type": "PAGE", "children": [{"id": "n1", "type": "FRAME"}]},
            {"id": "p2", "type": "PAGE", "children": [{"id": "n2", "type": "FRAME"}]},
        ]},
    }
    doc = DocumentReader().load_dict(data)
    assert doc.current_page.id == "p2"
    assert [n.id for n in doc.selection] == ["n2"]


def test_nodes_without_ids_are_skipped():
    reader = DocumentReader()
    doc = reader.load_dict(rest_response([
        {"type": "RECTANGLE", "name": "anonymous"},
        {"id": "kept", "type": "RECTANGLE", "fills": "not a list", "strokeWeight": "thick"},
    ]))
    assert reader.skipped_nodes == 1
    kept = doc.get_node_by_id("kept")
    assert kept.fills is None
    assert kept.stroke_weight is None


def test_paints_are_parsed():
    doc = DocumentReader().load_dict(rest_response([
        {"id": "n", "type": "RECTANGLE",
         "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0.5, "b": 0}, "visible": False},
                   {"type": "GRADIENT_LINEAR"},
                   "junk"]},
    ]))
    fills = doc.get_node_by_id("n").fills
    assert len(fills) == 2
    assert fills[0].color.r == 1 and fills[0].color.g == 0.5
    assert fills[0].visible is False
    assert fills[1].color is None


@pytest.mark.parametrize("data", [
    [],
    "document",
    {"type": "FRAME", "id": "x"},
    {"document": {"type": "DOCUMENT"}},
])
def test_unrecognized_documents_raise(data):
    with pytest.raises(DocumentLoadError):
        DocumentReader().load_dict(data)


def test_load_file(write_json):
    path = write_json(rest_response([]), name="shop.json")
    doc = load_document(str(path))
    assert doc.name == "Shop"


def test_load_file_errors(tmp_path, write_json):
    with pytest.raises(DocumentLoadError, match="does not exist"):
        load_document(str(tmp_path / "missing.json"))

    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    with pytest.raises(DocumentLoadError, match="Invalid JSON"):
        load_document(str(bad))

    wrong = write_json(rest_response([]), name="shop.txt")
    with pytest.raises(DocumentLoadError, match=".json"):
        load_document(str(wrong))


def test_validate_document_file(tmp_path, write_json):
    reader = DocumentReader()
    assert reader.validate_document_file(str(tmp_path))["valid"] is False
    path = write_json({})
    assert reader.validate_document_file(str(path)) == {"valid": True, "path": str(path)}
