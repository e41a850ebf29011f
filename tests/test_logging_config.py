"""Unit tests for logging setup."""

import gzip
import logging

import pytest

from utils.logging_config import _gzip_rotator, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


class TestSetupLogging:
    def test_writes_latest_log(self, tmp_path, restore_root_logger) -> None:
        setup_logging(str(tmp_path / "logs"), "DEBUG")
        logging.getLogger("dice_bot").debug("hello dice")
        for h in restore_root_logger.handlers:
            h.flush()
        text = (tmp_path / "logs" / "latest.log").read_text(encoding="utf-8")
        assert "hello dice" in text
        assert "| DEBUG | dice_bot |" in text
        assert restore_root_logger.level == logging.DEBUG

    def test_idempotent(self, tmp_path, restore_root_logger) -> None:
        setup_logging(str(tmp_path), "INFO")
        setup_logging(str(tmp_path), "INFO")
        ours = [h for h in restore_root_logger.handlers if getattr(h, "_dice_bot", False)]
        assert len(ours) == 2


def test_gzip_rotator(tmp_path) -> None:
    source = tmp_path / "latest.log"
    source.write_text("old lines\n", encoding="utf-8")
    _gzip_rotator(str(source), str(tmp_path / "latest.log.2025-08-13"))
    assert not source.exists()
    with gzip.open(tmp_path / "2025-08-13.log.gz", "rt", encoding="utf-8") as f:
        assert f.read() == "old lines\n"


def test_gzip_rotator_prunes_old_archives(tmp_path) -> None:
    for day in range(1, 5):
        (tmp_path / f"2025-08-0{day}.log.gz").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("keep me", encoding="utf-8")
    source = tmp_path / "latest.log"
    source.write_text("new\n", encoding="utf-8")

    _gzip_rotator(str(source), str(tmp_path / "latest.log.2025-08-05"), backup_count=2)

    archives = sorted(p.name for p in tmp_path.glob("*.log.gz"))
    assert archives == ["2025-08-04.log.gz", "2025-08-05.log.gz"]
    assert (tmp_path / "notes.txt").exists()
