# cogs/dice.py
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import discord
from discord.ext import commands

from utils.config import BotConfig
from utils.dice import DiceError, Roll, RollResult, render, roll_expression

logger = logging.getLogger("dice_bot")

# Discord embed description 上限
EMBED_DESCRIPTION_LIMIT = 4096


def fit_description(lines: Sequence[str], limit: int = EMBED_DESCRIPTION_LIMIT) -> str:
    text = "\n".join(lines)
    if len(text) > limit:
        text = text[:limit - 1] + "…"
    return text


def format_roll_lines(results: Sequence[Tuple[Roll, RollResult]], max_shown: int) -> List[str]:
    shown = min(max_shown, len(results))
    lines = [
        f"{i + 1:>2}: `{render(roll)}` → {r.detail} = **{r.total}**"
        for i, (roll, r) in enumerate(results[:shown])
    ]
    if len(results) > shown:
        lines.append(f"...（僅顯示前 {shown} 筆）")
    if len(results) > 1:
        lines.append(f"— 合計 {len(results)} 組：**{sum(r.total for _, r in results)}**")
    return lines


class DiceCog(commands.Cog, name="Dice"):
    def __init__(self, bot: commands.Bot, config: BotConfig):
        self.bot = bot
        self.config = config

    @commands.Cog.listener()
    async def on_ready(self):
        logger.info("DiceCog ready.")

    @commands.command(
        name="roll",
        aliases=["r", "dnd"],
        help="擲骰：rpg!roll <骰式> 例：rpg!roll 2d6+1 / rpg!roll 4x3d8-5 / rpg!roll d20 ; 2d6 & d4",
    )
    async def roll(self, ctx: commands.Context, *, expr: str):
        try:
            results = roll_expression(
                expr,
                max_rolls=self.config.max_rolls,
                max_dice=self.config.max_dice,
                max_sides=self.config.max_sides,
            )
        except DiceError as e:
            logger.info(f"Bad roll by {ctx.author} in #{ctx.channel}: {e}")
            return await ctx.reply(str(e))

        logger.info(
            f"{ctx.author} rolled {expr!r}: "
            + "; ".join(f"{render(roll)}={r.total}" for roll, r in results)
        )

        title = "🎲 擲骰結果" if len(results) == 1 else f"🎲 擲骰結果 x{len(results)}"
        lines = [f"表達式：`{expr.strip()}`", *format_roll_lines(results, self.config.max_shown)]
        embed = discord.Embed(title=title, description=fit_description(lines), color=discord.Color.random())
        embed.set_footer(text=f"{ctx.author} • #{ctx.channel}")
        await ctx.reply(embed=embed)

    @roll.error
    async def roll_error(self, ctx: commands.Context, error):
        if isinstance(error, commands.MissingRequiredArgument):
            await ctx.reply(f"用法：`{ctx.prefix or self.config.command_prefix}roll <骰式>`，例如 `2d6+1`")
        else:
            logger.error(f"roll error: {error}")
            await ctx.reply(f"擲骰失敗：{error}")
