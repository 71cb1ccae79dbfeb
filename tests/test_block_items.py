# tests/test_block_items.py

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from item_models.block_items import BLOCKS_SUBDIR, generate_block_model, run_block_item_stage
from item_models.dispatch import load_dispatch_table, table_path
from item_models.schema import MODELS_SUBDIR, TEXTURES_SUBDIR
from item_models.stage import run_item_model_stage
from pipeline.context import StagingQueue
from pipeline.errors import DefinitionError
from vanilla.testing import FakeFallbackSource


def _block(pack: Path, rel: str, details: dict) -> Path:
    path = pack / BLOCKS_SUBDIR / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(details), encoding="utf-8")
    return path


def test_flat_cube_maps_every_face_to_full_texture() -> None:
    model = generate_block_model("flat", "oak_crate.png")

    assert model["textures"] == {"0": "oak_crate", "particle": "oak_crate"}
    faces = model["elements"][0]["faces"]
    assert set(faces) == {"north", "east", "south", "west", "up", "down"}
    assert all(face["uv"] == [0, 0, 16, 16] and face["texture"] == "#0" for face in faces.values())
    assert "texture_size" not in model


def test_cardinal_cube_uses_quarter_uvs() -> None:
    model = generate_block_model("cardinal", "oak_crate")

    assert model["texture_size"] == [32, 32]
    assert model["elements"][0]["faces"]["north"]["uv"] == [8, 0, 16, 8]
    assert model["display"]["fixed"]["rotation"] == [-90, 0, 0]


def test_unknown_uv_mode_is_rejected() -> None:
    with pytest.raises(DefinitionError):
        generate_block_model("spherical", "x.png")


def test_block_stage_queues_one_definition_per_type(tmp_path: Path) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    path = _block(pack, "crates/oak_crate/oak_crate.smodel", {"types": ["chest", "barrel"], "uv": "flat"})
    (path.parent / "oak_crate.png").write_bytes(b"crate")
    queue: StagingQueue[dict] = StagingQueue("item_model")

    assert run_block_item_stage(pack, build, queue) == 2

    queued = queue.drain()
    assert [d["type"] for d in queued] == ["chest", "barrel"]
    assert queued[0]["textures"] == {"0": "oak_crate.png"}
    assert queued[0]["model"]["name"] == "oak_crate"
    assert queued[0]["model"]["parent"] == "crates"
    assert (build / TEXTURES_SUBDIR / "crates" / "oak_crate" / "oak_crate.png").read_bytes() == b"crate"


def test_invalid_block_definition_is_logged_and_skipped(tmp_path: Path, caplog) -> None:
    pack = tmp_path / "pack"
    _block(pack, "bad/bad.smodel", {"type": "stone", "uv": "sideways"})
    _block(pack, "untyped/untyped.smodel", {"uv": "flat"})
    queue: StagingQueue[dict] = StagingQueue("item_model")

    with caplog.at_level(logging.ERROR, logger="item_models.block_items"):
        assert run_block_item_stage(pack, tmp_path / "build", queue) == 0

    assert len(queue) == 0
    messages = " ".join(rec.getMessage() for rec in caplog.records)
    assert "bad.smodel" in messages and "untyped.smodel" in messages


def test_block_definitions_flow_into_item_stage(tmp_path: Path) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    path = _block(pack, "crates/oak_crate/oak_crate.smodel", {"type": "chest", "uv": "cardinal"})
    (path.parent / "oak_crate.png").write_bytes(b"crate")
    queue: StagingQueue[dict] = StagingQueue("item_model")

    run_block_item_stage(pack, build, queue)
    summary = run_item_model_stage(pack, build, queue, fallback_source=FakeFallbackSource())

    assert summary["chest"][0].threshold == 3680427
    model = json.loads((build / MODELS_SUBDIR / "crates" / "oak_crate" / "oak_crate.json").read_text(encoding="utf-8"))
    # resolved texture map replaces the cube's own slots
    assert model["textures"] == {"0": "supermodel:item/crates/oak_crate/oak_crate"}
    assert model["elements"][0]["faces"]["north"]["uv"] == [8, 0, 16, 8]
    table = load_dispatch_table(table_path(build, "chest"))
    assert table["model"]["entries"][0]["model"]["model"] == "supermodel:item/crates/oak_crate/oak_crate"


def test_wrongly_typed_texture_skips_only_that_block(tmp_path: Path, caplog) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    good = _block(pack, "crates/oak_crate/oak_crate.smodel", {"type": "chest", "uv": "flat"})
    (good.parent / "oak_crate.png").write_bytes(b"crate")
    _block(pack, "zbad/zbad.smodel", {"type": "barrel", "uv": "flat", "texture": 5})
    queue: StagingQueue[dict] = StagingQueue("item_model")

    with caplog.at_level(logging.ERROR, logger="item_models.block_items"):
        assert run_block_item_stage(pack, build, queue) == 1

    assert [d["type"] for d in queue.drain()] == ["chest"]
    assert any("zbad.smodel" in rec.getMessage() for rec in caplog.records)
