import logging
import os
from logging.handlers import RotatingFileHandler


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DiceRobotLogger:
    """擲骰機器人的日誌系統，寫入輪換文件並輸出到控制台"""

    def __init__(self, log_file: str = None, level: int = logging.INFO):
        self.logger = logging.getLogger('DiceRobot')
        self.logger.setLevel(level)

        if not self.logger.handlers:
            # 文件在第一條日誌寫入時才創建
            file_handler = RotatingFileHandler(
                log_file or os.getenv("DICEROBOT_LOG", "bot.log"),
                maxBytes=1024*1024,
                backupCount=5,
                encoding='utf-8',
                delay=True
            )
            console_handler = logging.StreamHandler()

            formatter = logging.Formatter(LOG_FORMAT)
            for handler in (file_handler, console_handler):
                handler.setFormatter(formatter)
                self.logger.addHandler(handler)

    def set_level(self, level: int):
        self.logger.setLevel(level)

    def order(self, author, order: str, summary: str):
        """記錄一條已處理的指令"""
        self.logger.debug(f"{author} 指令 {order!r}: {summary}")

    def order_failed(self, author, order: str, error: Exception):
        """記錄一條因參數錯誤而被拒絕的指令"""
        self.logger.info(f"{author} 指令 {order!r} 失敗 ({type(error).__name__}): {error}")

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def debug(self, message: str):
        self.logger.debug(message)


logger = DiceRobotLogger()


def get_logger() -> DiceRobotLogger:
    """獲取日誌實例"""
    return logger
