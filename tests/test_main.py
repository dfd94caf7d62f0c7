import csv
import json

import pytest

import main


def fill(value):
    return [{"type": "SOLID", "color": {"r": value, "g": value, "b": value}}]


def document_json(text_gray):
    return {
        "name": "Sample",
        "document": {"id": "0:0", "type": "ROOT", "children": [
            {"id": "p1", "type": "PAGE", "name": "Home", "children": [
                {"id": "card", "type": "FRAME", "name": "Card", "width": 400, "height": 300,
                 "absoluteTransform": [[1, 0, 0], [0, 1, 0]], "fills": fill(1.0),
                 "children": [
                     {"id": "label", "type": "TEXT", "name": "Label", "characters": "Hello",
                      "width": 100, "height": 20, "absoluteTransform": [[1, 0, 10], [0, 1, 10]],
                      "fills": fill(text_gray)},
                 ]},
            ]},
        ]},
    }


@pytest.fixture
def faint_doc(write_json):
    return write_json(document_json(0.8), name="faint.json")


@pytest.fixture
def clean_doc(write_json):
    return write_json(document_json(0.0), name="clean.json")


def test_json_report_and_exit_code(faint_doc, capsys):
    code = main.main(["check", str(faint_doc), "--format", "json"])
    assert code == main.EXIT_ISSUES

    report = json.loads(capsys.readouterr().out)
    assert report["document_name"] == "Sample"
    assert report["scope"] == "document"
    assert [i["nodeId"] for i in report["issues"]] == ["label"]


def test_clean_document_exits_zero(clean_doc, capsys):
    assert main.main(["check", str(clean_doc)]) == main.EXIT_OK
    assert "No issues found." in capsys.readouterr().out


def test_missing_document_exits_two(tmp_path, capsys):
    assert main.main(["check", str(tmp_path / "nope.json")]) == main.EXIT_LOAD_ERROR
    assert "Error:" in capsys.readouterr().err


def test_figma_source_without_token_exits_two(capsys):
    assert main.main(["check", "--figma-file", "abc"]) == main.EXIT_LOAD_ERROR
    assert "FIGMA_TOKEN" in capsys.readouterr().err


def test_disabled_rule_is_skipped(faint_doc):
    assert main.main(["check", str(faint_doc), "--disable", "contrast"]) == main.EXIT_OK


def test_min_contrast_option(faint_doc):
    assert main.main(["check", str(faint_doc), "--min-contrast", "1.5"]) == main.EXIT_OK


def test_csv_output_file(faint_doc, tmp_path):
    out = tmp_path / "report.csv"
    assert main.main(["check", str(faint_doc), "--format", "csv", "-o", str(out)]) == main.EXIT_ISSUES

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Check Type"
    assert rows[1][4] == "label"


def test_text_report(faint_doc, capsys):
    main.main(["check", str(faint_doc), "--locale", "ko"])
    out = capsys.readouterr().out
    assert "Total: 1 issues" in out


def test_parser_requires_a_source():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["check"])
