# utils/logging_config.py
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import gzip
import os
import shutil
from datetime import datetime
from functools import partial

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_BACKUP_COUNT = 30


def _prune_archives(log_dir: Path, keep: int):
    # TimedRotatingFileHandler 只認 latest.log.<日期>，壓過的 .gz 要自己清
    archives = sorted(log_dir.glob("????-??-??.log.gz"))
    for old in archives[:-keep] if keep > 0 else archives:
        old.unlink()


def _gzip_rotator(source: str, dest: str, backup_count: int = _BACKUP_COUNT):
    """把旋轉出的檔案壓成 .gz：logs/latest.log 輪替成 logs/2025-08-13.log.gz"""
    # dest 是預設命名 logs/latest.log.YYYY-MM-DD
    date_str = Path(dest).name.split(".")[-1]
    if date_str[:1].isdigit():
        out = Path(source).with_name(f"{date_str}.log.gz")
    else:
        out = Path(dest).with_suffix(".gz")

    with open(source, "rb") as f_in, gzip.open(out, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)
    _prune_archives(out.parent, backup_count)


def setup_logging(log_dir: str = "logs", level: str = "INFO"):
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # 重複呼叫時先拆掉上次裝的 handler
    for h in list(root.handlers):
        if getattr(h, "_dice_bot", False):
            root.removeHandler(h)
            h.close()

    # 檔案：latest.log（午夜輪替，保留 30 份，歷史自動 .gz）
    fh = TimedRotatingFileHandler(
        str(Path(log_dir) / "latest.log"),
        when="midnight",
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
        utc=False,
    )
    fh.rotator = partial(_gzip_rotator, backup_count=_BACKUP_COUNT)
    fh.setFormatter(formatter)

    # 終端
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)

    for h in (fh, sh):
        h._dice_bot = True
        root.addHandler(h)

    # 開機時打一行，方便看分隔
    root.info("==== Bot started at %s ====", datetime.now().strftime(_DATEFMT))
