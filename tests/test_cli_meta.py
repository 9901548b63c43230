from __future__ import annotations

import json
import re

import pytest

from cli.main import main
from cli.view import main as view_main
from worldgen.config import GeneratorConfig
from worldgen.io import BIOME_FILE, INT16_FILES, SEED_FILE

_SMALL = GeneratorConfig(width=96, height=64)


def test_export_files_and_meta_json(tmp_path, capsys) -> None:
    out_dir = tmp_path / "data"
    code = main(["--seed", "MistyForge", "--out", str(out_dir), "--previews"], config=_SMALL)
    assert code == 0

    for name in (*INT16_FILES.values(), BIOME_FILE, SEED_FILE, "meta.json"):
        assert (out_dir / name).exists(), name
    for name in ("composite.png", "biome.png", "height.png"):
        assert (out_dir / name).exists(), name
    assert (out_dir / "elevation.bin").stat().st_size == 96 * 64 * 2
    assert (out_dir / SEED_FILE).read_text(encoding="utf-8") == "MistyForge"

    meta = json.loads((out_dir / "meta.json").read_text(encoding="utf-8"))
    assert meta["seed"] == "MistyForge"
    assert (meta["width"], meta["height"]) == (96, 64)
    assert meta["generation_seconds"] >= 0.0
    assert "generated_at_utc" in meta
    assert meta["config"]["erosion"]["iterations"] == 6
    assert len(meta["metrics"]["biome_histogram"]) == 15

    printed = capsys.readouterr().out
    assert "World generated with seed: MistyForge" in printed

    # Only the staged files end up in the output root.
    assert not [p for p in tmp_path.iterdir() if p.name.startswith(".staging-")]


def test_non_empty_output_requires_overwrite(tmp_path) -> None:
    out_dir = tmp_path / "data"
    args = ["--seed", "MistyForge", "--out", str(out_dir)]
    assert main(args, config=_SMALL) == 0

    with pytest.raises(SystemExit) as excinfo:
        main(args, config=_SMALL)
    assert excinfo.value.code == 2


def test_overwrite_cleans_stale_outputs(tmp_path) -> None:
    out_dir = tmp_path / "data"
    args = ["--seed", "MistyForge", "--out", str(out_dir), "--overwrite"]
    assert main(args + ["--previews"], config=_SMALL) == 0
    assert (out_dir / "composite.png").exists()

    assert main(args + ["--no-json"], config=_SMALL) == 0
    assert not (out_dir / "composite.png").exists()
    assert not (out_dir / "meta.json").exists()
    assert (out_dir / "river.bin").exists()


def test_overwrite_in_working_directory_keeps_unrelated_files(tmp_path, monkeypatch) -> None:
    work = tmp_path / "work"
    work.mkdir()
    (work / "notes.txt").write_text("keep me", encoding="utf-8")
    (work / "composite.png").write_bytes(b"stale preview")
    monkeypatch.chdir(work)

    assert main(["--seed", "x", "--out", ".", "--overwrite"], config=_SMALL) == 0

    assert (work / "notes.txt").read_text(encoding="utf-8") == "keep me"
    assert not (work / "composite.png").exists()
    assert (work / SEED_FILE).read_text(encoding="utf-8") == "x"
    for name in INT16_FILES.values():
        assert (work / name).exists(), name
    assert not [p for p in tmp_path.iterdir() if p.name.startswith(".staging-")]


def test_random_seed_when_omitted(tmp_path, capsys) -> None:
    out_dir = tmp_path / "data"
    assert main(["--out", str(out_dir)], config=_SMALL) == 0

    seed = (out_dir / SEED_FILE).read_text(encoding="utf-8")
    assert re.fullmatch(r"[0-9a-z]+_[0-9a-z]{6}", seed)
    assert f"World generated with seed: {seed}" in capsys.readouterr().out


def test_validate_flag_checks_routing(tmp_path, capsys) -> None:
    out_dir = tmp_path / "data"
    assert main(["--seed", "test-1", "--out", str(out_dir), "--validate"], config=_SMALL) == 0
    assert "Flow validation passed" in capsys.readouterr().out


def test_view_renders_exported_data(tmp_path, capsys) -> None:
    out_dir = tmp_path / "data"
    assert main(["--seed", "viewer", "--out", str(out_dir)], config=_SMALL) == 0

    code = view_main(["--data", str(out_dir), "--mode", "biome", "--w", "96", "--h", "64"])

    assert code == 0
    assert (out_dir / "biome.png").exists()
    assert "biome rendered" in capsys.readouterr().out


def test_view_reports_load_failure(tmp_path, capsys) -> None:
    code = view_main(["--data", str(tmp_path / "missing"), "--w", "96", "--h", "64"])

    assert code == 1
    printed = capsys.readouterr().out
    assert "loading fields from" in printed
    assert "error:" in printed
