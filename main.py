import logging
from dotenv import load_dotenv, find_dotenv
import discord
from discord.ext import commands

from cogs.dice import DiceCog
from cogs.help import HelpCog
from utils.config import BotConfig, load_config
from utils.logging_config import setup_logging

logger = logging.getLogger("dice_bot")


def create_bot(config: BotConfig) -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = True  # 需要讀取訊息內容才能解析擲骰
    bot = commands.Bot(command_prefix=config.command_prefix, intents=intents, help_command=None)

    @bot.event
    async def setup_hook():
        await bot.add_cog(DiceCog(bot, config))
        await bot.add_cog(HelpCog(bot))

    @bot.event
    async def on_ready():
        logger.info(f"Logged in as {bot.user} (id={bot.user.id})")
        try:
            await bot.tree.sync()
        except discord.HTTPException as e:
            logger.warning(f"App commands sync failed: {e}")

    return bot


def main():
    # --- 啟動階段 ---
    load_dotenv(find_dotenv())
    config = load_config()
    setup_logging(config.log_dir, config.log_level)

    if not config.token:
        raise RuntimeError("請在 .env 設定 DISCORD_TOKEN")

    # 日誌已交給 setup_logging，不讓 discord.py 再裝一次
    create_bot(config).run(config.token, log_handler=None)


if __name__ == "__main__":
    main()
