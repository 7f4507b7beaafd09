from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from pydantic import ValidationError

from bg_removal import run as run_mod
from bg_removal.contracts import ProcessingSettings, settings_from_env


def test_defaults():
    s = ProcessingSettings()
    assert s.mode == "smart"
    assert s.edge_channel == "red"
    assert (s.color_tolerance, s.edge_sensitivity, s.feather_radius) == (30, 5, 2)


def test_out_of_range_values_are_clamped():
    s = ProcessingSettings(color_tolerance=500, edge_sensitivity=0, feather_radius=-3, smoothing=9)
    assert s.color_tolerance == 100
    assert s.edge_sensitivity == 1
    assert s.feather_radius == 0
    assert s.smoothing == 5
    assert ProcessingSettings(feather_radius=2.7).feather_radius == 2


def test_non_numeric_rejected():
    with pytest.raises(ValidationError):
        ProcessingSettings(color_tolerance="lots")
    with pytest.raises(ValidationError):
        ProcessingSettings(edge_sensitivity=None)
    with pytest.raises(ValidationError):
        ProcessingSettings(mode="magic")


def test_settings_are_frozen():
    s = ProcessingSettings()
    with pytest.raises(ValidationError):
        s.color_tolerance = 50


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("BG_REMOVAL_TOLERANCE", "45")
    monkeypatch.setenv("BG_REMOVAL_FEATHER", "not-a-number")
    monkeypatch.setenv("BG_REMOVAL_EDGE_SENSITIVITY", "99")
    monkeypatch.setenv("BG_REMOVAL_MODE", "Simple")
    s = settings_from_env()
    assert s.color_tolerance == 45
    assert s.feather_radius == 2
    assert s.edge_sensitivity == 10
    assert s.mode == "simple"


def _write_ring(path: Path) -> None:
    img = np.zeros((10, 10, 4), dtype=np.uint8)
    img[..., :3] = (0, 0, 255)
    img[1:9, 1:9, :3] = (255, 0, 0)
    img[..., 3] = 255
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(img).save(str(path), format="PNG")


def test_cli_directory(monkeypatch, tmp_path: Path, capsys):
    for key in ("MODE", "TOLERANCE", "EDGE_SENSITIVITY", "FEATHER", "EDGE_CHANNEL"):
        monkeypatch.delenv(f"BG_REMOVAL_{key}", raising=False)
    monkeypatch.setattr(run_mod, "load_dotenv", lambda: False)

    _write_ring(tmp_path / "in" / "a.png")
    _write_ring(tmp_path / "in" / "sub" / "b.png")
    (tmp_path / "in" / "notes.txt").write_text("skip me", encoding="utf-8")

    rc = run_mod.main(
        [
            "--input", str(tmp_path / "in"),
            "--output", str(tmp_path / "out"),
            "--tolerance", "30",
            "--edge-sensitivity", "1",
            "--feather", "0",
        ]
    )
    assert rc == 0
    assert (tmp_path / "out" / "a.png").exists()
    assert (tmp_path / "out" / "sub" / "b.png").exists()
    assert not (tmp_path / "out" / "notes.png").exists()

    with Image.open(tmp_path / "out" / "a.png") as img:
        arr = np.array(img)
    assert arr[0, 0, 3] == 0
    assert arr[4, 4, 3] == 255
    assert "Done. 2 images" in capsys.readouterr().out


def test_cli_single_file_and_env_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(run_mod, "load_dotenv", lambda: False)
    monkeypatch.setenv("BG_REMOVAL_MODE", "simple")

    seen = {}

    real = run_mod.process_image

    def _fake_process(image_path, out_path, settings):
        seen["settings"] = settings
        seen["out"] = out_path
        return real(image_path, out_path, settings)

    monkeypatch.setattr(run_mod, "process_image", _fake_process)

    src = tmp_path / "one.png"
    _write_ring(src)
    rc = run_mod.main(["--input", str(src), "--output", str(tmp_path / "out"), "--smoothing", "3"])
    assert rc == 0
    assert seen["settings"].mode == "simple"
    assert seen["settings"].smoothing == 3
    assert Path(seen["out"]) == tmp_path / "out" / "one.png"
    assert Path(seen["out"]).exists()


def test_cli_missing_input(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(run_mod, "load_dotenv", lambda: False)
    with pytest.raises(FileNotFoundError):
        run_mod.main(["--input", str(tmp_path / "nope"), "--output", str(tmp_path / "out")])


def test_unknown_env_names_fall_back(monkeypatch):
    monkeypatch.setenv("BG_REMOVAL_MODE", "fast")
    monkeypatch.setenv("BG_REMOVAL_EDGE_CHANNEL", "hue")
    monkeypatch.setenv("BG_REMOVAL_TOLERANCE", "inf")
    s = settings_from_env()
    assert s.mode == "smart"
    assert s.edge_channel == "red"
    assert s.color_tolerance == 30


def test_cli_flag_wins_over_bad_env_mode(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(run_mod, "load_dotenv", lambda: False)
    monkeypatch.setenv("BG_REMOVAL_MODE", "fast")

    seen = {}
    real = run_mod.process_image

    def _fake_process(image_path, out_path, settings):
        seen["settings"] = settings
        return real(image_path, out_path, settings)

    monkeypatch.setattr(run_mod, "process_image", _fake_process)

    src = tmp_path / "one.png"
    _write_ring(src)
    rc = run_mod.main(["--input", str(src), "--output", str(tmp_path / "out"), "--mode", "simple"])
    assert rc == 0
    assert seen["settings"].mode == "simple"


def test_cli_same_stem_inputs_do_not_overwrite(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(run_mod, "load_dotenv", lambda: False)
    _write_ring(tmp_path / "in" / "a.png")
    with Image.open(tmp_path / "in" / "a.png") as img:
        img.convert("RGB").save(str(tmp_path / "in" / "a.bmp"))
    _write_ring(tmp_path / "in" / "b.png")

    rc = run_mod.main(["--input", str(tmp_path / "in"), "--output", str(tmp_path / "out")])
    assert rc == 0
    outputs = sorted(p.name for p in (tmp_path / "out").iterdir())
    assert outputs == ["a_bmp.png", "a_png.png", "b.png"]
