from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger("dice_bot")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class BotConfig:
    token: str = ""
    command_prefix: str = "rpg!"
    max_rolls: int = 50      # 單次指令最多幾組（含 NxExpr 展開後）
    max_dice: int = 500      # 單次指令所有骰子顆數加總上限
    max_sides: int = 1000    # 單顆骰子面數上限
    max_shown: int = 10      # 回覆中最多列出幾組明細
    log_level: str = "INFO"
    log_dir: str = "logs"


def _read_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning(f"設定 {key}={raw!r} 不是整數，使用預設值 {default}")
        return default


def _read_level(env: Mapping[str, str]) -> str:
    level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    if level not in _LOG_LEVELS:
        logger.warning(f"未知的日誌等級 {level!r}，改用 INFO")
        return "INFO"
    return level


def load_config(env: Optional[Mapping[str, str]] = None) -> BotConfig:
    # 預設讀環境變數（main.py 會先用 .env 補上）
    if env is None:
        env = os.environ
    defaults = BotConfig()
    return BotConfig(
        token=env.get("DISCORD_TOKEN", "").strip(),
        command_prefix=env.get("BOT_PREFIX") or defaults.command_prefix,
        max_rolls=_read_int(env, "DICE_MAX_ROLLS", defaults.max_rolls),
        max_dice=_read_int(env, "DICE_MAX_DICE", defaults.max_dice),
        max_sides=_read_int(env, "DICE_MAX_SIDES", defaults.max_sides),
        max_shown=_read_int(env, "DICE_MAX_SHOWN", defaults.max_shown),
        log_level=_read_level(env),
        log_dir=env.get("LOG_DIR") or defaults.log_dir,
    )
