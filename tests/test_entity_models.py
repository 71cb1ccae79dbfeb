# tests/test_entity_models.py

from __future__ import annotations

import json
import logging
from pathlib import Path

from entity_models.cem import (
    CEM_SUBDIR,
    SOURCE_SUBDIR,
    build_properties_entry,
    get_entity_types,
    run_entity_model_stage,
)
from pipeline.context import StagingQueue


def _zombie_hat(pack: Path, details: dict) -> Path:
    src = pack / SOURCE_SUBDIR / "zombie_hat"
    src.mkdir(parents=True)
    (src / "zombie_hat.smodel").write_text(json.dumps(details), encoding="utf-8")
    (src / "zombie_hat.jem").write_text('{"models": []}', encoding="utf-8")
    (src / "zombie_hat.png").write_bytes(b"hat")
    return src


def test_properties_entry_replaces_caret_with_index() -> None:
    section = build_properties_entry("zombie_hat.smodel", {"properties": {"name.^": "Hat ^"}}, "4")

    assert section == "\n# [SM] Generated from zombie_hat.smodel\nmodels.4=4\nname.4=Hat 4\n"


def test_entity_types_precedence() -> None:
    assert get_entity_types({"type": "zombie"}) == ["zombie"]
    assert get_entity_types({"types": ["zombie", "husk"]}) == ["zombie", "husk"]
    assert get_entity_types({"models": {"skeleton": {}}, "type": "zombie"}) == ["skeleton"]


def test_file_definition_writes_jem_texture_and_properties(tmp_path: Path) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    _zombie_hat(pack, {"type": "zombie", "properties": {"name.^": "Hat Zombie"}})

    assert run_entity_model_stage(pack, build, StagingQueue("entity_model")) == 1

    cem = build / CEM_SUBDIR
    assert (cem / "zombie2.jem").read_text(encoding="utf-8") == '{"models": []}'
    assert (cem / "zombie_hat.png").read_bytes() == b"hat"
    assert (cem / "zombie.properties").read_text(encoding="utf-8") == (
        "# [SM] Generated from zombie_hat.smodel\nmodels.2=2\nname.2=Hat Zombie\n"
    )


def test_indices_continue_after_existing_properties(tmp_path: Path) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    _zombie_hat(pack, {"types": ["zombie", "husk"]})
    cem = build / CEM_SUBDIR
    cem.mkdir(parents=True)
    (cem / "zombie.properties").write_text("models.2=2\nmodels.3=3\n", encoding="utf-8")

    run_entity_model_stage(pack, build, StagingQueue("entity_model"))

    assert (cem / "zombie4.jem").is_file()
    assert (cem / "husk2.jem").is_file()
    zombie = (cem / "zombie.properties").read_text(encoding="utf-8")
    assert zombie.startswith("models.2=2\nmodels.3=3\n")
    assert "models.4=4" in zombie


def test_queued_inline_models_follow_load_priority(tmp_path: Path) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    _zombie_hat(pack, {"type": "zombie"})
    queue: StagingQueue[dict] = StagingQueue("entity_model")
    queue.add({"type": "zombie", "model": {"models": ["late"]}, "loadPriority": 9})

    assert run_entity_model_stage(pack, build, queue) == 2
    assert len(queue) == 0

    cem = build / CEM_SUBDIR
    # file definition has the default priority (5) and is numbered first
    assert (cem / "zombie2.jem").read_text(encoding="utf-8") == '{"models": []}'
    assert json.loads((cem / "zombie3.jem").read_text(encoding="utf-8")) == {"models": ["late"]}
    properties = (cem / "zombie.properties").read_text(encoding="utf-8")
    assert "# [SM] Generated internally\nmodels.3=3" in properties


def test_untyped_definition_is_logged(tmp_path: Path, caplog) -> None:
    queue: StagingQueue[dict] = StagingQueue("entity_model")
    queue.add({"model": {"models": []}})

    with caplog.at_level(logging.ERROR, logger="entity_models.cem"):
        assert run_entity_model_stage(tmp_path / "pack", tmp_path / "build", queue) == 0

    assert any("no defined entity type" in rec.getMessage() for rec in caplog.records)


def test_malformed_properties_skip_only_that_definition(tmp_path: Path, caplog) -> None:
    pack, build = tmp_path / "pack", tmp_path / "build"
    _zombie_hat(pack, {"type": "zombie"})
    queue: StagingQueue[dict] = StagingQueue("entity_model")
    queue.add({"type": "zombie", "model": {"models": []}, "properties": ["name.^"]})
    queue.add({"type": "husk", "model": {"models": []}, "textures": [3]})

    with caplog.at_level(logging.ERROR, logger="entity_models.cem"):
        assert run_entity_model_stage(pack, build, queue) == 1

    cem = build / CEM_SUBDIR
    assert (cem / "zombie2.jem").is_file()
    assert not (cem / "zombie3.jem").exists()
    assert not (cem / "husk.properties").exists()
    assert (cem / "zombie.properties").read_text(encoding="utf-8").count("models.") == 1
    messages = " ".join(rec.getMessage() for rec in caplog.records)
    assert '"properties" must be an object' in messages
    assert '"textures" must be a list' in messages
