import discord
from discord.ext import commands

from utils.exceptions import DiceRobotError
from utils.logger import get_logger
from utils.orders import parse_attributes
from utils.replies import format_reply


logger = get_logger()


class AttributesCog(commands.Cog, name="Attributes"):
    """角色屬性相關指令"""
    def __init__(self, bot, config_manager, attributes_db):
        self.bot = bot
        self.config_manager = config_manager
        self.attributes_db = attributes_db

    def reply(self, key: str, **values) -> str:
        return format_reply(self.config_manager.replies, key, **values)

    @commands.hybrid_command(name="st", description="錄入角色屬性，例如 .st 力量60 敏捷50")
    async def st_command(self, ctx, *, order: str = ""):
        """屬性指令"""
        guild_id = ctx.guild.id if ctx.guild else 0
        action, _, argument = order.strip().partition(" ")

        if action.lower() in ("", "show"):
            await self.show_attributes(ctx, guild_id, argument.strip())
            return

        if action.lower() == "clr":
            attributes = self.attributes_db.get_all_attributes(guild_id, ctx.author.id)
            if not attributes:
                await ctx.send(self.reply("attributesEmpty"))
                return

            view = AttributesClearView(ctx.author.id, guild_id, ctx.author.mention,
                                       self.attributes_db, self.config_manager.replies)
            embed = discord.Embed(
                title="確認清除屬性",
                description=f"{ctx.author.mention} 共有 {len(attributes)} 項屬性，確認全部清除？",
                color=0xe74c3c
            )
            await ctx.send(embed=embed, view=view)
            return

        try:
            attributes = parse_attributes(order)
        except DiceRobotError as e:
            logger.order_failed(ctx.author, order, e)
            embed = discord.Embed(
                title="錯誤",
                description=self.reply("orderError"),
                color=0xff0000
            )
            await ctx.send(embed=embed)
            return

        for name, value in attributes:
            self.attributes_db.set_attribute(guild_id, ctx.author.id, name, value)
        logger.order(ctx.author, order, f"錄入 {len(attributes)} 項屬性")

        embed = discord.Embed(
            title="屬性已儲存",
            description=self.reply("attributesSaved", count=len(attributes)),
            color=0x2ecc71
        )
        for name, value in attributes:
            embed.add_field(name=name, value=str(value), inline=True)

        await ctx.send(embed=embed)

    async def show_attributes(self, ctx, guild_id: int, name: str):
        """顯示全部屬性或單個屬性"""
        if name:
            attribute = self.attributes_db.get_attribute(guild_id, ctx.author.id, name)
            attributes = [attribute] if attribute else []
        else:
            attributes = self.attributes_db.get_all_attributes(guild_id, ctx.author.id)

        if not attributes:
            await ctx.send(self.reply("checkValueNotFound", name=name) if name else self.reply("attributesEmpty"))
            return

        embed = discord.Embed(
            title=f"{ctx.author.display_name} 的屬性",
            color=0x7289da
        )
        for attribute in attributes:
            embed.add_field(name=attribute.name, value=str(attribute.value), inline=True)

        await ctx.send(embed=embed)


class AttributesClearView(discord.ui.View):
    """屬性清除確認視圖"""
    def __init__(self, author_id: int, guild_id: int, author_mention: str, attributes_db, replies):
        super().__init__(timeout=30)
        self.author_id = author_id
        self.guild_id = guild_id
        self.author_mention = author_mention
        self.attributes_db = attributes_db
        self.replies = replies

    @discord.ui.button(label="確認清除", style=discord.ButtonStyle.danger, emoji="🗑️")
    async def confirm_clear(self, interaction: discord.Interaction, button: discord.ui.Button):
        if interaction.user.id != self.author_id:
            await interaction.response.send_message(
                format_reply(self.replies, "attributesConfirmOwnerOnly"), ephemeral=True)
            return

        deleted = self.attributes_db.clear_attributes(self.guild_id, self.author_id)
        logger.info(f"用戶 {self.author_id} 在 {self.guild_id} 清除了 {deleted} 項屬性")

        embed = discord.Embed(
            title="屬性已清除",
            description=f"{self.author_mention} " + format_reply(self.replies, "attributesCleared", count=deleted),
            color=0x2ecc71
        )

        await interaction.response.edit_message(embed=embed, view=None)

    @discord.ui.button(label="取消", style=discord.ButtonStyle.secondary)
    async def cancel_clear(self, interaction: discord.Interaction, button: discord.ui.Button):
        if interaction.user.id != self.author_id:
            await interaction.response.send_message(
                format_reply(self.replies, "attributesConfirmOwnerOnly"), ephemeral=True)
            return

        embed = discord.Embed(
            title="操作已取消",
            description=format_reply(self.replies, "attributesClearCancelled"),
            color=0xf39c12
        )

        await interaction.response.edit_message(embed=embed, view=None)
