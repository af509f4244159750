import discord
from discord.ext import commands

from utils.exceptions import DiceRobotError
from utils.logger import get_logger
from utils.orders import parse_optional_number
from utils.replies import format_reply


logger = get_logger()


class SettingsCog(commands.Cog, name="Settings"):
    """聊天設置相關指令"""
    def __init__(self, bot, config_manager):
        self.bot = bot
        self.config_manager = config_manager

    def reply(self, key: str, **values) -> str:
        return format_reply(self.config_manager.replies, key, **values)

    async def send_error(self, ctx, description: str):
        embed = discord.Embed(
            title="錯誤",
            description=description,
            color=0xff0000
        )
        await ctx.send(embed=embed)

    @commands.hybrid_command(name="set", description="設定默認骰子面數，留空則重置")
    async def set_command(self, ctx, *, order: str = ""):
        """設定默認骰子面數"""
        if not ctx.guild:
            await self.send_error(ctx, self.reply("guildOnly"))
            return

        max_surface_number = self.config_manager.limits.max_surface_number

        try:
            surface_number = parse_optional_number(order)
        except DiceRobotError:
            await self.send_error(ctx, self.reply("setSurfaceNumberInvalid", max=max_surface_number))
            return

        if surface_number is not None and not 1 <= surface_number <= max_surface_number:
            await self.send_error(ctx, self.reply("setSurfaceNumberInvalid", max=max_surface_number))
            return

        guild_config = self.config_manager.get_guild_config(ctx.guild.id)
        guild_config.default_surface_number = surface_number
        self.config_manager.set_guild_config(ctx.guild.id, guild_config)
        logger.info(f"服務器 {ctx.guild.id} 的默認骰子面數設為 {surface_number}")

        if surface_number:
            description = self.reply("setSurfaceNumberSet", surface_number=surface_number)
        else:
            description = self.reply(
                "setSurfaceNumberReset",
                surface_number=self.config_manager.global_config.default_surface_number
            )

        embed = discord.Embed(
            title="默認骰子面數已更新",
            description=description,
            color=0x7289da
        )
        await ctx.send(embed=embed)

    @commands.hybrid_command(name="setcoc", description="選擇檢定規則，留空則列出所有規則")
    async def setcoc_command(self, ctx, *, order: str = ""):
        """選擇檢定規則"""
        if not ctx.guild:
            await self.send_error(ctx, self.reply("guildOnly"))
            return

        rules = self.config_manager.check_rules
        max_index = len(rules) - 1

        try:
            index = parse_optional_number(order)
        except DiceRobotError:
            await self.send_error(ctx, self.reply("setCheckRuleInvalid", max=max_index))
            return

        if index is None:
            current = self.config_manager.get_guild_config(ctx.guild.id).check_rule
            embed = discord.Embed(
                title="檢定規則",
                color=0x7289da
            )
            for i, rule in enumerate(rules):
                marker = " ✅" if i == current else ""
                embed.add_field(name=f"{i}. {rule.name}{marker}", value=rule.description or "-", inline=False)
            await ctx.send(embed=embed)
            return

        if not 0 <= index <= max_index:
            await self.send_error(ctx, self.reply("setCheckRuleInvalid", max=max_index))
            return

        guild_config = self.config_manager.get_guild_config(ctx.guild.id)
        guild_config.check_rule = index
        self.config_manager.set_guild_config(ctx.guild.id, guild_config)
        logger.info(f"服務器 {ctx.guild.id} 的檢定規則設為 {rules[index].name}")

        embed = discord.Embed(
            title="檢定規則已更新",
            description=self.reply("setCheckRuleSet", index=index, name=rules[index].name),
            color=0x7289da
        )
        await ctx.send(embed=embed)
