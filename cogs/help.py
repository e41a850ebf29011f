# cogs/help.py
from __future__ import annotations

import logging
import discord
from discord.ext import commands

logger = logging.getLogger("dice_bot")

# ---- 內部：產生各頁 Embed ----
def _embed_home(prefix: str) -> discord.Embed:
    e = discord.Embed(
        title="📖 指令總覽",
        description="按下方按鈕切換分類；大小寫、空白都不影響骰式。",
        color=discord.Color.blurple(),
    )
    e.add_field(
        name="🎲 擲骰",
        value=f"`{prefix}roll <骰式>`（別名 `{prefix}r`、`{prefix}dnd`）",
        inline=False,
    )
    e.add_field(
        name="📖 說明",
        value=f"`{prefix}help [dice|all]`",
        inline=False,
    )
    e.set_footer(text=f"提示：例如 `{prefix}roll 4x3d8-5`、`{prefix}roll d20+5 ; 2d6 & d4`")
    return e

def _embed_dice(prefix: str) -> discord.Embed:
    e = discord.Embed(title="🎲 骰式語法", color=discord.Color.green())
    e.add_field(
        name="NdS±B",
        value=(
            "擲 N 顆 S 面骰再加減 B；N 省略為 1，B 省略為 0。\n"
            f"例：`{prefix}roll d6`、`{prefix}roll 2d6+1`、`{prefix}roll 8d12-15`"
        ),
        inline=False,
    )
    e.add_field(
        name="MxExpr（重複）",
        value=f"同一骰式獨立擲 M 次，各自列出結果。例：`{prefix}roll 4x3d8-5`",
        inline=False,
    )
    e.add_field(
        name="A & B（合計）",
        value=f"分別擲再加總成一組結果，可串多個。例：`{prefix}roll 12d10+5 & 4d6+2`",
        inline=False,
    )
    e.add_field(
        name="A ; B（連續）",
        value=f"用分號分隔多組互不相干的擲骰。例：`{prefix}roll d6 ; 2d4+3`",
        inline=False,
    )
    e.add_field(
        name="注意",
        value="骰式裡只要有一段不合法（如 `4d4d4`、`4d6 + xyzzy`），整串都不會擲。",
        inline=False,
    )
    return e

def _embed_all(prefix: str) -> discord.Embed:
    e = discord.Embed(title="📚 全部指令速覽", color=discord.Color.light_grey())
    e.description = (
        f"**擲骰**：`{prefix}roll <骰式>`（例：`{prefix}roll 2d6+1`，`{prefix}roll 4x3d8-5`）\n"
        f"**別名**：`{prefix}r ...`、`{prefix}dnd ...`\n"
        f"**語法**：`NdS±B`、`MxExpr`、`A & B`、`A ; B`\n"
        f"**說明**：`{prefix}help`"
    )
    return e

# 頁面代號 → (按鈕文字, 產生 Embed 的函式)
_PAGES = {
    "home": ("總覽", _embed_home),
    "dice": ("骰式", _embed_dice),
    "all": ("全部", _embed_all),
}

# `help <section>` 可用的別名；沒對到就回總覽
_SECTION_ALIASES = {"roll": "dice", "r": "dice", "dnd": "dice", "syntax": "dice"}


def resolve_page(section: str | None) -> str:
    sec = (section or "").lower().strip()
    sec = _SECTION_ALIASES.get(sec, sec)
    return sec if sec in _PAGES else "home"


def render_page(page: str, prefix: str) -> discord.Embed:
    return _PAGES[resolve_page(page)][1](prefix)


# ---- 互動面板 ----
class _PageButton(discord.ui.Button):
    def __init__(self, page: str, label: str):
        style = discord.ButtonStyle.primary if page == "dice" else discord.ButtonStyle.secondary
        super().__init__(label=label, style=style)
        self.page = page

    async def callback(self, interaction: discord.Interaction):
        view: HelpView = self.view
        view.page = self.page
        await interaction.response.edit_message(embed=render_page(self.page, view.prefix), view=view)


class HelpView(discord.ui.View):
    def __init__(self, author_id: int, prefix: str, page: str = "home", timeout: float = 180.0):
        super().__init__(timeout=timeout)
        self.author_id = author_id
        self.prefix = prefix
        self.page = page
        self.message: discord.Message | None = None
        for key, (label, _) in _PAGES.items():
            self.add_item(_PageButton(key, label))

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.author_id:
            await interaction.response.send_message("只有發起者可以操作這個幫助面板。", ephemeral=True)
            return False
        return True

    async def on_timeout(self) -> None:
        if self.message is None:
            return
        try:
            await self.message.edit(view=None)
        except discord.HTTPException as e:
            logger.debug(f"收起說明面板失敗：{e}")

    @discord.ui.button(label="關閉", style=discord.ButtonStyle.danger, row=1)
    async def btn_close(self, interaction: discord.Interaction, _: discord.ui.Button):
        await interaction.response.edit_message(content="（已關閉說明）", embed=None, view=None)
        self.stop()

# ---- Cog ----
class HelpCog(commands.Cog, name="Help"):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_ready(self):
        logger.info("HelpCog ready.")

    @commands.command(name="help", aliases=["h"], help="顯示互動式說明")
    async def help_cmd(self, ctx: commands.Context, *, section: str | None = None):
        prefix = ctx.prefix or "rpg!"
        page = resolve_page(section)
        view = HelpView(author_id=ctx.author.id, prefix=prefix, page=page)
        view.message = await ctx.reply(embed=render_page(page, prefix), view=view)
