import discord
from discord.ext import commands
from typing import Optional

from utils.dice import Dice
from utils.exceptions import DiceRobotError
from utils.generate import format_attribute_sets, generate_coc, generate_dnd
from utils.logger import get_logger
from utils.orders import parse_check_order, parse_count, parse_repeat
from utils.repeat import run_repeat
from utils.replies import format_reply
from utils.skill_check import format_check_results, roll_check


logger = get_logger()


class DiceCog(commands.Cog, name="Dice"):
    """擲骰相關指令"""
    def __init__(self, bot, config_manager, attributes_db):
        self.bot = bot
        self.config_manager = config_manager
        self.attributes_db = attributes_db

    def reply(self, key: str, **values) -> str:
        return format_reply(self.config_manager.replies, key, **values)

    async def send_error(self, ctx, error: DiceRobotError):
        """將擲骰錯誤轉換為回覆"""
        logger.order_failed(ctx.author, ctx.message.content, error)

        embed = discord.Embed(
            title="擲骰錯誤",
            description=f"{self.reply(error.reply_key)}\n{error}",
            color=0xff0000
        )
        await ctx.send(embed=embed)

    async def send_private(self, ctx, private_reply: str, public_reply: str):
        """暗骰：結果私訊給發送者，頻道中只顯示提示"""
        try:
            await ctx.author.send(private_reply)
        except discord.Forbidden:
            await ctx.send(self.reply("privateMessageFailed"))
            return

        await ctx.send(public_reply)

    @commands.hybrid_command(name="r", description="擲骰，例如 .r 3d6+2 攻擊#3")
    async def dicing_command(self, ctx, *, order: str = ""):
        """擲骰指令"""
        guild_id = ctx.guild.id if ctx.guild else None
        limits = self.config_manager.limits
        default_surface_number = self.config_manager.get_default_surface_number(guild_id)

        try:
            expression, repeat = parse_repeat(order)
            result = run_repeat(
                lambda: Dice(expression, limits, default_surface_number),
                repeat,
                limits
            )
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        logger.order(ctx.author, order, f"{repeat} 次擲骰")

        dice = result.runs[0]
        nickname = ctx.author.display_name
        reply = self.reply(
            "dicingResultWithReason" if dice.reason else "dicingResult",
            nickname=nickname,
            reason=dice.reason,
            detail=("\n" if repeat > 1 else "") + result.detail
        )

        if not dice.hidden:
            embed = discord.Embed(
                title="擲骰結果",
                description=reply,
                color=0x7289da
            )
            await ctx.send(embed=embed)
        elif ctx.guild is None:
            await ctx.send(self.reply("dicingPrivateNotInGuild"))
        else:
            await self.send_private(
                ctx,
                self.reply("dicingPrivateResult", guild=ctx.guild.name, detail=reply),
                self.reply(
                    "dicingPrivateWithReason" if dice.reason else "dicingPrivate",
                    nickname=nickname,
                    reason=dice.reason,
                    repeat=repeat
                )
            )

    @commands.hybrid_command(name="ra", description="技能檢定，例如 .ra b 偵查 60 +10")
    async def check_command(self, ctx, *, order: str = ""):
        """技能檢定指令"""
        guild_id = ctx.guild.id if ctx.guild else None
        limits = self.config_manager.limits
        rule = self.config_manager.get_check_rule(guild_id)

        try:
            check = parse_check_order(order)

            value: Optional[int] = check.value
            if value is None:
                attribute = self.attributes_db.get_attribute(guild_id or 0, ctx.author.id, check.name)
                if attribute is None:
                    await ctx.send(self.reply("checkValueNotFound", name=check.name))
                    return
                value = attribute.value

            results = roll_check(check, value, rule, limits)
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        logger.order(ctx.author, order, f"{len(results)} 次檢定，規則 {rule.name}")

        nickname = ctx.author.display_name
        heading = self.reply("checkResultHeading", nickname=nickname, name=check.name or value)
        detail = format_check_results(results, self.config_manager.replies)
        reply = f"{heading}\n{detail}"

        if not check.hidden:
            embed = discord.Embed(
                title="檢定結果",
                description=reply,
                color=0x7289da
            )
            await ctx.send(embed=embed)
        elif ctx.guild is None:
            await ctx.send(self.reply("dicingPrivateNotInGuild"))
        else:
            await self.send_private(
                ctx,
                self.reply("dicingPrivateResult", guild=ctx.guild.name, detail=reply),
                self.reply("checkPrivate", nickname=nickname, repeat=check.repeat)
            )

    @commands.hybrid_command(name="dnd", description="生成 D&D 冒險者屬性")
    async def dnd_command(self, ctx, *, order: str = ""):
        """D&D 屬性生成指令"""
        try:
            sets = generate_dnd(parse_count(order), self.config_manager.limits)
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        logger.order(ctx.author, order, f"生成 {len(sets)} 組冒險者屬性")

        embed = discord.Embed(
            title="D&D 冒險者屬性",
            description=self.reply("dndGenerateHeading", nickname=ctx.author.display_name)
            + "\n" + format_attribute_sets(sets),
            color=0x7289da
        )
        await ctx.send(embed=embed)

    @commands.hybrid_command(name="coc", description="生成 CoC 7e 調查員屬性")
    async def coc_command(self, ctx, *, order: str = ""):
        """CoC 7e 屬性生成指令"""
        try:
            sets = generate_coc(parse_count(order), self.config_manager.limits)
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        logger.order(ctx.author, order, f"生成 {len(sets)} 組調查員屬性")

        embed = discord.Embed(
            title="CoC 7e 調查員屬性",
            description=self.reply("cocGenerateHeading", nickname=ctx.author.display_name)
            + "\n" + format_attribute_sets(sets),
            color=0x7289da
        )
        await ctx.send(embed=embed)
