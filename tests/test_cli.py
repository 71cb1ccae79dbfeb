# tests/test_cli.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from app.logging_config import BUILDER_LOGGERS, QUIET_LOGGERS, configure_logging
from app.main import main


def _config(tmp_path: Path, generators: str) -> Path:
    (tmp_path / generators).mkdir()
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "pack_name: fruitpack\n"
        "version: '1.0'\n"
        "minecraft_version: '1.21.4'\n"
        f"generators_dir: {generators}\n",
        encoding="utf-8",
    )
    return cfg


def test_missing_config_exits_non_zero(tmp_path: Path) -> None:
    assert main(["build", "--config", str(tmp_path / "absent.yaml")]) == 1


def test_incomplete_config_exits_non_zero(tmp_path: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("pack_name: fruitpack\n", encoding="utf-8")
    assert main(["--config", str(cfg)]) == 1


def test_build_succeeds(tmp_path: Path) -> None:
    cfg = _config(tmp_path, "generators")

    assert main(["build", "--config", str(cfg)]) == 0
    assert (tmp_path / "build" / "fruitpack-1.0").is_dir()


def test_fatal_generator_exits_non_zero(tmp_path: Path) -> None:
    cfg = _config(tmp_path, "generators")
    (tmp_path / "generators" / "fatal.py").write_text(
        "from pipeline.errors import FatalPipelineError\n"
        "\n"
        "def generate(pack_path, build_path, context):\n"
        "    raise FatalPipelineError('no vanilla assets')\n",
        encoding="utf-8",
    )

    assert main(["build", "--config", str(cfg)]) == 1


def test_watch_without_deploy_path_exits_non_zero(tmp_path: Path) -> None:
    cfg = _config(tmp_path, "generators")
    assert main(["watch", "--config", str(cfg)]) == 1


@pytest.fixture
def fresh_logging(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    names = ("",) + BUILDER_LOGGERS + QUIET_LOGGERS
    saved = {name: logging.getLogger(name).level for name in names}
    yield root
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_configure_logging_is_idempotent(fresh_logging) -> None:
    root = fresh_logging
    httpx_logger = logging.getLogger("httpx")

    configure_logging(logging.DEBUG)
    configure_logging(logging.INFO)

    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert httpx_logger.level == logging.WARNING


def test_verbose_lowers_only_builder_loggers(fresh_logging) -> None:
    configure_logging(logging.INFO, verbose=True)

    assert fresh_logging.level == logging.INFO
    assert logging.getLogger("item_models").level == logging.DEBUG
    assert logging.getLogger("item_models.dispatch").isEnabledFor(logging.DEBUG)
    assert not logging.getLogger("httpcore").isEnabledFor(logging.INFO)

    configure_logging(logging.INFO)

    assert logging.getLogger("item_models").level == logging.NOTSET
    assert not logging.getLogger("item_models.dispatch").isEnabledFor(logging.DEBUG)
