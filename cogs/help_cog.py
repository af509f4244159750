import discord
from discord.ext import commands


HELP_DETAILS = (
    "**.r[h][s][b|p[n]] [表達式] [原因][#次數]**\n"
    "擲骰。支援 `3d6+2`、`d`（默認面數）、`4d6k3`（取最大的三個）、`(5d80k2+10)x5` 等格式。\n"
    "`h` 暗骰（結果私訊）、`s` 只顯示結果、`b`/`p` 獎勵骰/懲罰骰，`#3` 重複三次。\n\n"

    "**.ra[h] [b|p[n]] <屬性名或數值> [+/-修正][#次數]**\n"
    "技能檢定，按本服務器的檢定規則判定大成功、極限/困難/普通成功、失敗與大失敗。\n"
    "只給屬性名時使用 `.st` 錄入的數值。\n\n"

    "**.dnd [次數]** / **.coc [次數]**\n"
    "生成 D&D 冒險者屬性（4d6k3）或 CoC 7e 調查員屬性。\n\n"

    "**.st <屬性名><數值>...**\n"
    "`.st 力量60 敏捷50`：錄入屬性。\n"
    "`.st show [屬性名]`：查看屬性。\n"
    "`.st clr`：確認後清除所有屬性。\n\n"

    "**.sc <成功損失>/<失敗損失> [理智值]**\n"
    "理智檢定，例如 `.sc 1/1d6`。未給出理智值時使用 `.st` 錄入的理智並寫回結果。\n\n"

    "**.hp / .mp / .san <+|-><表達式> [原因]**\n"
    "增減已錄入的體力、魔法或理智，例如 `.hp -1d6 被咬`。\n\n"

    "**設置指令**\n"
    "`.set [面數]`：設定本服務器的默認骰子面數，留空則重置。\n"
    "`.setcoc [編號]`：選擇檢定規則，留空則列出所有規則。"
)


class HelpCog(commands.Cog, name="Help"):
    """幫助相關指令"""
    def __init__(self, bot, config_manager):
        self.bot = bot
        self.config_manager = config_manager

    @commands.hybrid_command(name="help", description="顯示指令說明")
    async def help_command(self, ctx):
        """顯示幫助信息"""
        embed = discord.Embed(
            title="DiceRobot 指令說明",
            description="請點擊下方按鈕查看各指令的詳細說明。\n支援 `.r`、`.ra`、`.dnd`、`.coc`、`.st`、`.sc`、`.hp`、`.mp`、`.san`、`.set`、`.setcoc`。",
            color=0x1abc9c
        )

        view = HelpView()
        await ctx.send(embed=embed, view=view)


class HelpView(discord.ui.View):
    """幫助視圖"""
    def __init__(self):
        super().__init__(timeout=120)  # 2分鐘後超時

    @discord.ui.button(label="查看詳細說明", style=discord.ButtonStyle.green, emoji="ℹ️")
    async def show_help(self, interaction: discord.Interaction, button: discord.ui.Button):
        details_embed = discord.Embed(
            title="指令詳細說明",
            description=HELP_DETAILS,
            color=0x1abc9c
        )
        await interaction.response.send_message(embed=details_embed, ephemeral=True)
