#!/usr/bin/env python3
"""
DiceRobot - TRPG 擲骰機器人 Discord 版
"""

import asyncio
import logging
import os
import sys
from dotenv import load_dotenv

# 加載環境變量
load_dotenv()

# 確保路徑正確
sys.path.insert(0, os.path.dirname(__file__))

from bot import DiceRobot
from utils.logger import get_logger


def main():
    """主函數"""
    logger = get_logger()
    logger.set_level(getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))

    logger.info("正在啟動 DiceRobot...")

    # 創建並啟動機器人（機器人會自己查找環境變量）
    try:
        bot = DiceRobot()
    except ValueError as e:
        logger.error(f"錯誤：{e}")
        sys.exit(1)

    try:
        asyncio.run(bot.start())
    except KeyboardInterrupt:
        logger.info("收到中斷信號，正在關閉機器人...")
    finally:
        logger.info("機器人已關閉")


if __name__ == "__main__":
    main()
