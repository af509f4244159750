import json
import os
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict, field, fields

from utils.check import CheckRule, DEFAULT_CHECK_RULES, load_check_rules
from utils.replies import DEFAULT_REPLIES


@dataclass(frozen=True)
class ConfigLimits:
    """擲骰範圍限制（啟動時載入，之後唯讀）"""
    max_dice_number: int = 100
    max_surface_number: int = 1000
    max_repeat_times: int = 100
    max_attribute: int = 1000
    max_reply_character: int = 1000
    max_generate_count: int = 20

    def __post_init__(self):
        for item in fields(self):
            value = getattr(self, item.name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"無效的限制值 {item.name}: {value!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigLimits":
        """從配置字典建立，未知的鍵會被忽略"""
        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class GlobalConfig:
    """全局配置"""
    default_surface_number: int = 100
    limits: ConfigLimits = field(default_factory=ConfigLimits)

    def __post_init__(self):
        if not 1 <= self.default_surface_number <= self.limits.max_surface_number:
            raise ValueError(f"無效的默認骰子面數: {self.default_surface_number}")


@dataclass
class GuildConfig:
    """公會配置"""
    default_surface_number: Optional[int] = None
    check_rule: int = 0


class ConfigManager:
    """配置管理器"""
    def __init__(self, config_path: str = "config.json"):
        self.config_path = config_path
        self.global_config = GlobalConfig()
        self.guild_configs: Dict[int, GuildConfig] = {}
        self.check_rules: List[CheckRule] = list(DEFAULT_CHECK_RULES)
        self.custom_check_rules: Optional[List[Dict[str, Any]]] = None
        self.replies: Dict[str, str] = dict(DEFAULT_REPLIES)
        self.custom_replies: Dict[str, str] = {}
        self.load_config()

    @property
    def limits(self) -> ConfigLimits:
        return self.global_config.limits

    def load_config(self):
        """加載配置"""
        if os.path.exists(self.config_path):
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            # 加載全局配置
            global_data = data.get('global', {})
            self.global_config = GlobalConfig(
                default_surface_number=global_data.get('default_surface_number', 100),
                limits=ConfigLimits.from_dict(global_data.get('limits', {}))
            )

            # 加載公會配置
            guild_data = data.get('guilds', {})
            for guild_id, cfg in guild_data.items():
                self.guild_configs[int(guild_id)] = GuildConfig(
                    default_surface_number=cfg.get('default_surface_number'),
                    check_rule=cfg.get('check_rule', 0)
                )

            # 自定義檢定規則
            if data.get('check_rules'):
                self.custom_check_rules = data['check_rules']
                self.check_rules = load_check_rules(self.custom_check_rules)

            # 自定義回覆模板
            self.custom_replies = data.get('replies', {})
            self.replies.update(self.custom_replies)
        else:
            # 如果配置文件不存在，創建默認配置
            self.save_config()

    def save_config(self):
        """保存配置"""
        data = {
            'global': asdict(self.global_config),
            'guilds': {str(guild_id): asdict(config)
                      for guild_id, config in self.guild_configs.items()}
        }
        if self.custom_check_rules:
            data['check_rules'] = self.custom_check_rules
        if self.custom_replies:
            data['replies'] = self.custom_replies

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_guild_config(self, guild_id: Optional[int]) -> GuildConfig:
        """獲取公會配置"""
        if guild_id is None:
            return GuildConfig()
        return self.guild_configs.get(guild_id, GuildConfig())

    def set_guild_config(self, guild_id: int, config: GuildConfig):
        """設置公會配置"""
        self.guild_configs[guild_id] = config
        self.save_config()

    def get_default_surface_number(self, guild_id: Optional[int]) -> int:
        """獲取聊天的默認骰子面數，未設置時使用機器人默認值"""
        surface_number = self.get_guild_config(guild_id).default_surface_number
        return surface_number or self.global_config.default_surface_number

    def get_check_rule(self, guild_id: Optional[int]) -> CheckRule:
        """獲取聊天選用的檢定規則，索引無效時退回第一條規則"""
        index = self.get_guild_config(guild_id).check_rule
        if 0 <= index < len(self.check_rules):
            return self.check_rules[index]
        return self.check_rules[0]
