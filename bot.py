import discord
from discord.ext import commands
import os
from pathlib import Path
from typing import Optional

from utils.config import ConfigManager
from utils.logger import get_logger
from utils.orders import split_order
from models.database import AttributesDB


logger = get_logger()


class DiceRobot:
    """TRPG擲骰機器人類"""
    def __init__(self, prefix: str = "."):
        # 查找項目根目錄
        root_dir = self.find_project_root()

        # 查找環境變量文件
        env_file = root_dir / ".env"
        if env_file.is_file():
            from dotenv import load_dotenv
            load_dotenv(dotenv_path=env_file)

        # 從環境變量獲取token
        token = os.getenv("DISCORD_TOKEN")
        if not token:
            logger.error("未找到 DISCORD_TOKEN 環境變量")
            logger.error("請在項目根目錄創建 .env 文件，並添加 DISCORD_TOKEN=your_token_here")
            raise ValueError("未找到 DISCORD_TOKEN 環境變量")

        self.token = token
        self.prefix = prefix

        # 查找配置和數據庫文件
        config_path = os.getenv("DICEROBOT_CONFIG", str(root_dir / "config.json"))
        db_path = os.getenv("DICEROBOT_DB", str(root_dir / "attributes.db"))

        self.config_manager = ConfigManager(config_path=config_path)
        self.attributes_db = AttributesDB(db_path=db_path)

        # 設置機器人
        intents = discord.Intents.default()
        intents.message_content = True  # 需要讀取消息內容
        intents.guilds = True  # 需要訪問服務器信息

        self.bot = commands.Bot(
            command_prefix=prefix,
            intents=intents,
            help_command=None,
            case_insensitive=True,
            description="專為TRPG設計的擲骰機器人"
        )

        self.setup_events()

    def find_project_root(self) -> Path:
        """查找項目根目錄"""
        current_path = Path(__file__).resolve()

        # 搜索包含 .git 目錄的父目錄，這是更可靠的項目根目錄標誌
        for parent in current_path.parents:
            if (parent / '.git').exists():
                return parent

        # 如果沒找到，使用 bot.py 所在目錄
        return current_path.parent

    def normalize_order(self, message: discord.Message) -> Optional[str]:
        """將 ".rd" 之類沒有空格的指令改寫為 ".r d"，返回指令名"""
        split = split_order(message.content, self.prefix)
        if split is None:
            return None

        name, order = split
        message.content = f"{self.prefix}{name} {order}".rstrip()
        return name

    def setup_events(self):
        """設置事件處理器"""
        @self.bot.event
        async def on_ready():
            logger.info(f'{self.bot.user} 已經上線!')
            logger.info(f'已連接到 {len(self.bot.guilds)} 個服務器')

            # 同步應用命令
            try:
                await self.bot.tree.sync()
                logger.info("應用命令已同步")
            except discord.HTTPException as e:
                logger.error(f"同步應用命令時出錯: {e}")

        @self.bot.event
        async def on_guild_join(guild):
            """當機器人加入服務器時的處理"""
            logger.info(f'加入了服務器: {guild.name} (ID: {guild.id})')

        @self.bot.event
        async def on_message(message):
            if message.author.bot:
                return

            if self.normalize_order(message):
                await self.bot.process_commands(message)

        @self.bot.event
        async def on_command_error(ctx, error):
            if isinstance(error, commands.CommandNotFound):
                return
            logger.error(f"指令 {ctx.message.content!r} 出錯: {error!r}")

    async def add_cogs(self):
        """添加Cog模塊"""
        from cogs.dice_cog import DiceCog
        from cogs.attributes_cog import AttributesCog
        from cogs.card_cog import CardCog
        from cogs.settings_cog import SettingsCog
        from cogs.help_cog import HelpCog

        await self.bot.add_cog(DiceCog(self.bot, self.config_manager, self.attributes_db))
        await self.bot.add_cog(AttributesCog(self.bot, self.config_manager, self.attributes_db))
        await self.bot.add_cog(CardCog(self.bot, self.config_manager, self.attributes_db))
        await self.bot.add_cog(SettingsCog(self.bot, self.config_manager))
        await self.bot.add_cog(HelpCog(self.bot, self.config_manager))

    async def start(self):
        """啟動機器人"""
        async with self.bot:
            await self.add_cogs()
            await self.bot.start(self.token)
