"""Tests for the command-line entrypoints.

Runs ``main(argv)`` in-process and checks exit codes and outputs.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from icon_transcoder.scripts import batch_convert, transcode
from icon_transcoder.utils.logging_config import pop_context, setup_logging


def _scene_doc(rgba: list[int]) -> dict[str, Any]:
    return {
        "schema": "scene.v1",
        "width": 24,
        "height": 24,
        "root": {
            "type": "shape",
            "geometry": {"type": "ellipse", "x": 2, "y": 2, "width": 20, "height": 20},
            "painters": [{"type": "fill", "paint": {"type": "color", "rgba": rgba}}],
        },
    }


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    pop_context()
    setup_logging(to_stderr=False, capture_warnings=False)


@pytest.fixture()
def scene_file(tmp_path: Path) -> Path:
    path = tmp_path / "dot.scene.yaml"
    path.write_text(yaml.safe_dump(_scene_doc([255, 0, 0, 255])), encoding="utf-8")
    return path


class TestTranscodeScript:
    def test_stdout(self, scene_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = transcode.main([str(scene_file), "-n", "Dot", "-p", "org.icons"])
        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith("package org.icons;")
        assert "public class Dot implements Icon" in out
        assert "Ellipse2D.Double" in out

    def test_output_file(self, scene_file: Path, tmp_path: Path) -> None:
        target = tmp_path / "out" / "Dot.java"
        code = transcode.main([str(scene_file), "-n", "Dot", "--resizable", "-o", str(target)])
        assert code == 0
        text = target.read_text(encoding="utf-8")
        assert "setDimension" in text
        assert not text.startswith("package")

    def test_invalid_scene(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.scene.yaml"
        bad.write_text(yaml.safe_dump(_scene_doc([300, 0, 0, 255])), encoding="utf-8")
        target = tmp_path / "Bad.java"
        assert transcode.main([str(bad), "-n", "Bad", "-o", str(target)]) == 1
        assert not target.exists()

    def test_missing_scene(self, tmp_path: Path) -> None:
        assert transcode.main([str(tmp_path / "nope.scene.yaml"), "-n", "Nope"]) == 1

    def test_zero_threshold_rejected(self, scene_file: Path, tmp_path: Path) -> None:
        target = tmp_path / "Dot.java"
        code = transcode.main([str(scene_file), "-n", "Dot", "--threshold", "0", "-o", str(target)])
        assert code == 1
        assert not target.exists()

    def test_invalid_class_name(self, scene_file: Path) -> None:
        assert transcode.main([str(scene_file), "-n", "not-valid"]) == 1

    def test_missing_config(self, scene_file: Path, tmp_path: Path) -> None:
        code = transcode.main([str(scene_file), "-n", "Dot", "-c", str(tmp_path / "none.yaml")])
        assert code == 1


class TestBatchScript:
    def test_all_converted(self, tmp_path: Path) -> None:
        src = tmp_path / "icons"
        src.mkdir()
        (src / "red-dot.scene.yaml").write_text(
            yaml.safe_dump(_scene_doc([255, 0, 0, 255])), encoding="utf-8",
        )
        out = tmp_path / "java"
        assert batch_convert.main([str(src), "org.icons", "-o", str(out)]) == 0
        assert (out / "RedDot.java").exists()

    def test_failure_exit_code(self, tmp_path: Path) -> None:
        (tmp_path / "good.scene.yaml").write_text(
            yaml.safe_dump(_scene_doc([0, 0, 0, 255])), encoding="utf-8",
        )
        (tmp_path / "bad.scene.yaml").write_text("schema: scene.v1\n", encoding="utf-8")
        assert batch_convert.main([str(tmp_path), "org.icons", "--naming", "identifier"]) == 1
        assert (tmp_path / "good.java").exists()

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert batch_convert.main([str(tmp_path / "nope"), "org.icons"]) == 1
