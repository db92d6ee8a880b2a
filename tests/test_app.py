from __future__ import annotations

import io
import json
import logging
from datetime import date
from pathlib import Path

import pytest
from PIL import Image

from lane_timeline import app

RECORDS = [
    {"id": 1, "name": "Design", "start": "2021-01-01", "end": "2021-01-05"},
    {"id": 2, "name": "Review", "start": "2021-01-03", "end": "2021-01-04"},
    {"id": 3, "name": "Backwards", "start": "2021-01-09", "end": "2021-01-02"},
]


def fixed_today() -> date:
    return date(2021, 1, 1)


@pytest.fixture(autouse=True)
def clean_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "GRANULARITY",
        "PADDING_BEFORE",
        "PADDING_AFTER",
        "VIEWPORT_WIDTH",
        "LANE_HEIGHT",
        "ITEM_HEIGHT",
    ):
        monkeypatch.delenv(f"TIMELINE_{name}", raising=False)


@pytest.fixture
def items_file(tmp_path: Path) -> Path:
    path = tmp_path / "items.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


def test_print_layout_reports_lanes_and_rects(items_file: Path, caplog) -> None:
    out = io.StringIO()

    with caplog.at_level(logging.WARNING):
        exit_code = app.main([str(items_file), "--print-layout"], today=fixed_today, stdout=out)

    assert exit_code == 0
    summary = json.loads(out.getvalue())
    assert summary["granularity"] == "day"
    assert summary["window"] == {"min": "2021-01-01", "max": "2021-01-05"}
    assert summary["columns"][0] == "2020-12-25"
    assert summary["columns"][-1] == "2021-01-12"
    assert summary["lanes"] == 2
    assert [item["id"] for item in summary["items"]] == [1, 2]
    first = summary["items"][0]
    assert first["lane"] == 0
    assert first["rect"] == {"left": 423.0, "width": 297.0, "top": 5, "height": 50}
    assert summary["focus"] is None
    assert "Rejected timeline item #2" in caplog.text


def test_print_layout_keeps_rects_of_items_sharing_an_id(tmp_path: Path) -> None:
    path = tmp_path / "shared.json"
    records = [
        {"id": 1, "name": "a", "start": "2021-01-01", "end": "2021-01-05"},
        {"id": 1, "name": "b", "start": "2021-01-03", "end": "2021-01-04"},
    ]
    path.write_text(json.dumps(records), encoding="utf-8")
    out = io.StringIO()

    app.main([str(path), "--print-layout"], today=fixed_today, stdout=out)

    first, second = json.loads(out.getvalue())["items"]
    assert (first["name"], first["lane"], first["rect"]["top"]) == ("a", 0, 5)
    assert (second["name"], second["lane"], second["rect"]["top"]) == ("b", 1, 65)
    assert first["rect"]["left"] == 423.0
    assert second["rect"]["left"] == 543.0


def test_items_wrapped_in_object_are_accepted(tmp_path: Path) -> None:
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"items": RECORDS[:1]}), encoding="utf-8")
    out = io.StringIO()

    assert app.main([str(path), "--print-layout"], today=fixed_today, stdout=out) == 0
    assert json.loads(out.getvalue())["lanes"] == 1


def test_focus_extends_window_and_is_reported(items_file: Path) -> None:
    out = io.StringIO()

    app.main(
        [str(items_file), "--print-layout", "--focus", "2021-02-01", "--granularity", "week"],
        today=fixed_today,
        stdout=out,
    )

    summary = json.loads(out.getvalue())
    assert summary["granularity"] == "week"
    assert summary["window"]["max"] >= "2021-02-01"
    assert summary["focus"]["date"] == "2021-02-01"


def test_output_renders_with_configured_viewport(tmp_path: Path, items_file: Path) -> None:
    rendered = []

    class RecordingRenderer:
        def render(self, state, *, scroll_left, viewport_width):
            rendered.append((state, scroll_left, viewport_width))
            return Image.new("L", (viewport_width, 10), 255)

    (tmp_path / ".env").write_text("TIMELINE_VIEWPORT_WIDTH=640\n", encoding="utf-8")
    output = tmp_path / "out" / "timeline.png"

    exit_code = app.main(
        [str(items_file), "--output", str(output), "--scroll-left", "30"],
        renderer_factory=RecordingRenderer,
        today=fixed_today,
    )

    assert exit_code == 0
    assert output.exists()
    state, scroll_left, viewport_width = rendered[0]
    assert viewport_width == 640
    assert scroll_left == 30
    assert len(state.items) == 2


def test_invalid_json_returns_error(tmp_path: Path, caplog) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert app.main([str(path)], today=fixed_today) == 1
    assert "Failed to lay out" in caplog.text


def test_missing_file_returns_error(tmp_path: Path) -> None:
    assert app.main([str(tmp_path / "absent.json")], today=fixed_today) == 1


def test_invalid_focus_is_a_usage_error(items_file: Path) -> None:
    with pytest.raises(SystemExit):
        app.main([str(items_file), "--focus", "01/02/2021"], today=fixed_today)


def test_non_positive_viewport_is_a_usage_error(items_file: Path) -> None:
    with pytest.raises(SystemExit):
        app.main([str(items_file), "--viewport-width", "0"], today=fixed_today)
