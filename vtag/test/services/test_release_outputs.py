from __future__ import annotations

from pathlib import Path

from vtag.services.release.outputs import format_output, write_step_outputs


def test_format_single_line() -> None:
    assert format_output("tag", "v1.0.0") == "tag=v1.0.0\n"


def test_format_multiline_uses_delimiter() -> None:
    text = format_output("notes", "a\nb")
    first, *rest = text.splitlines()
    assert first.startswith("notes<<")
    delimiter = first.removeprefix("notes<<")
    assert rest == ["a", "b", delimiter]


def test_write_appends(tmp_path: Path) -> None:
    out = tmp_path / "github_output"
    out.write_text("earlier=1\n", encoding="utf-8")

    written = write_step_outputs(
        {"version": "2.0.0", "tag": "v2.0.0", "release_url": None},
        environ={"GITHUB_OUTPUT": str(out)},
    )

    assert written == out
    assert out.read_text(encoding="utf-8") == "earlier=1\nversion=2.0.0\ntag=v2.0.0\n"


def test_outside_actions_is_noop() -> None:
    assert write_step_outputs({"version": "1.0.0"}, environ={}) is None
