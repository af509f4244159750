import sqlite3
from typing import Optional, List
from dataclasses import dataclass


@dataclass
class Attribute:
    guild_id: int
    user_id: int
    name: str
    normalized_name: str
    value: int


class AttributesDB:
    """角色屬性數據庫類"""
    def __init__(self, db_path: str = "attributes.db"):
        self.db_path = db_path
        self.init_db()

    def init_db(self):
        """初始化數據庫"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        # 創建屬性表
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS attributes (
                guild_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                normalized_name TEXT NOT NULL,
                value INTEGER NOT NULL,
                UNIQUE(guild_id, user_id, normalized_name)
            )
        ''')

        conn.commit()
        conn.close()

    def set_attribute(self, guild_id: int, user_id: int, name: str, value: int):
        """添加或更新屬性"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        normalized = name.lower()

        cursor.execute('''
            INSERT INTO attributes (guild_id, user_id, name, normalized_name, value)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(guild_id, user_id, normalized_name)
            DO UPDATE SET name=excluded.name, value=excluded.value
        ''', (guild_id, user_id, name, normalized, value))

        conn.commit()
        conn.close()

    def get_attribute(self, guild_id: int, user_id: int, name: str) -> Optional[Attribute]:
        """查找用戶的屬性，名稱不區分大小寫"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute('''
            SELECT name, normalized_name, value
            FROM attributes
            WHERE guild_id = ? AND user_id = ? AND normalized_name = ?
        ''', (guild_id, user_id, name.lower()))

        row = cursor.fetchone()
        conn.close()

        if row:
            return Attribute(
                guild_id=guild_id,
                user_id=user_id,
                name=row[0],
                normalized_name=row[1],
                value=row[2]
            )
        return None

    def find_attribute(self, guild_id: int, user_id: int, names) -> Optional[Attribute]:
        """按順序查找第一個已錄入的屬性，例如 ("san", "理智")"""
        for name in names:
            attribute = self.get_attribute(guild_id, user_id, name)
            if attribute:
                return attribute
        return None

    def get_all_attributes(self, guild_id: int, user_id: int) -> List[Attribute]:
        """獲取用戶的所有屬性"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute('''
            SELECT name, normalized_name, value
            FROM attributes
            WHERE guild_id = ? AND user_id = ?
            ORDER BY rowid
        ''', (guild_id, user_id))

        rows = cursor.fetchall()
        conn.close()

        attributes = []
        for row in rows:
            attributes.append(Attribute(
                guild_id=guild_id,
                user_id=user_id,
                name=row[0],
                normalized_name=row[1],
                value=row[2]
            ))

        return attributes

    def clear_attributes(self, guild_id: int, user_id: int) -> int:
        """刪除用戶的所有屬性，返回刪除的數量"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute('''
            DELETE FROM attributes
            WHERE guild_id = ? AND user_id = ?
        ''', (guild_id, user_id))
        deleted = cursor.rowcount

        conn.commit()
        conn.close()

        return deleted
