"""
配置管理模块
"""
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# 加载环境变量
load_dotenv()


class Settings(BaseModel):
    """应用配置"""

    # API 配置
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    cors_origins: list = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    # 日志
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # 战斗节奏（毫秒）
    # 逻辑即时结算，这些值只作为展示事件的建议时长和收尾延迟
    settle_delay_ms: int = int(os.getenv("SETTLE_DELAY_MS", "2000"))
    turn_delay_ms: int = int(os.getenv("TURN_DELAY_MS", "1000"))
    animation_ms: int = int(os.getenv("ANIMATION_MS", "500"))

    # 野外遭遇
    spawn_interval_ms: int = int(os.getenv("SPAWN_INTERVAL_MS", "3000"))

    # 新角色
    starter_health_potions: int = int(os.getenv("STARTER_HEALTH_POTIONS", "3"))
    starter_gold: int = int(os.getenv("STARTER_GOLD", "100"))

    model_config = ConfigDict(case_sensitive=False)


# 全局配置实例
settings = Settings()
