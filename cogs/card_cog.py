import discord
from discord.ext import commands

from utils.check import format_check_level
from utils.exceptions import DiceRobotError
from utils.logger import get_logger
from utils.orders import parse_attribute_change, parse_sanity_order
from utils.replies import format_reply
from utils.sanity import CHANGE_ATTRIBUTES, SANITY_NAMES, change_attribute, sanity_check


logger = get_logger()


class CardCog(commands.Cog, name="Card"):
    """理智檢定與角色數值增減指令，結果寫回 .st 錄入的屬性"""
    def __init__(self, bot, config_manager, attributes_db):
        self.bot = bot
        self.config_manager = config_manager
        self.attributes_db = attributes_db

    def reply(self, key: str, **values) -> str:
        return format_reply(self.config_manager.replies, key, **values)

    async def send_error(self, ctx, error: DiceRobotError):
        logger.order_failed(ctx.author, ctx.message.content, error)

        embed = discord.Embed(
            title="擲骰錯誤",
            description=f"{self.reply(error.reply_key)}\n{error}",
            color=0xff0000
        )
        await ctx.send(embed=embed)

    @commands.hybrid_command(name="sc", description="理智檢定，例如 .sc 1/1d6")
    async def sanity_check_command(self, ctx, *, order: str = ""):
        """理智檢定指令"""
        guild_id = ctx.guild.id if ctx.guild else None
        limits = self.config_manager.limits
        rule = self.config_manager.get_check_rule(guild_id)
        attribute = None

        try:
            sanity_order = parse_sanity_order(order)

            sanity = sanity_order.value
            if sanity is None:
                attribute = self.attributes_db.find_attribute(guild_id or 0, ctx.author.id, SANITY_NAMES)
                if attribute is None:
                    await ctx.send(self.reply("checkValueNotFound", name=SANITY_NAMES[-1]))
                    return
                sanity = attribute.value

            result = sanity_check(
                sanity_order, sanity, rule, limits,
                self.config_manager.get_default_surface_number(guild_id)
            )
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        # 直接給出理智值時不修改角色屬性
        if attribute is not None:
            self.attributes_db.set_attribute(guild_id or 0, ctx.author.id, attribute.name, result.after_sanity)

        logger.order(ctx.author, order, f"理智 {result.before_sanity} -> {result.after_sanity}")

        embed = discord.Embed(
            title="理智檢定結果",
            description=self.reply(
                "sanityCheckResult",
                nickname=ctx.author.display_name,
                check=f"{result.check.detail}/{result.check.value}",
                level=format_check_level(result.check.level),
                loss_detail=result.loss_detail,
                before=result.before_sanity,
                after=result.after_sanity
            ),
            color=0x7289da if result.check_success else 0xe74c3c
        )
        await ctx.send(embed=embed)

    async def change_command(self, ctx, key: str, order: str):
        """增減 hp / mp / san"""
        guild_id = ctx.guild.id if ctx.guild else None
        names = CHANGE_ATTRIBUTES[key]

        try:
            sign, expression = parse_attribute_change(order)

            attribute = self.attributes_db.find_attribute(guild_id or 0, ctx.author.id, names)
            if attribute is None:
                await ctx.send(self.reply("checkValueNotFound", name=names[-1]))
                return

            result = change_attribute(
                attribute.name, attribute.value, sign, expression, self.config_manager.limits,
                self.config_manager.get_default_surface_number(guild_id)
            )
        except DiceRobotError as e:
            await self.send_error(ctx, e)
            return

        self.attributes_db.set_attribute(guild_id or 0, ctx.author.id, attribute.name, result.after)
        logger.order(ctx.author, order, f"{result.name} {result.before} -> {result.after}")

        embed = discord.Embed(
            title="屬性變化",
            description=self.reply(
                "attributeChangeResultWithReason" if result.reason else "attributeChangeResult",
                nickname=ctx.author.display_name,
                reason=result.reason,
                name=result.name,
                sign=sign,
                detail=result.detail,
                before=result.before,
                after=result.after
            ),
            color=0x7289da
        )
        await ctx.send(embed=embed)

    @commands.hybrid_command(name="hp", description="增減體力，例如 .hp -1d6")
    async def hp_command(self, ctx, *, order: str = ""):
        await self.change_command(ctx, "hp", order)

    @commands.hybrid_command(name="mp", description="增減魔法值，例如 .mp -2")
    async def mp_command(self, ctx, *, order: str = ""):
        await self.change_command(ctx, "mp", order)

    @commands.hybrid_command(name="san", description="增減理智，例如 .san +1d10")
    async def san_command(self, ctx, *, order: str = ""):
        await self.change_command(ctx, "san", order)
