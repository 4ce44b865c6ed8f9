import asyncio
import json
import logging
import os

from dotenv import load_dotenv

from SymPepTracker.logic.ProposalLogic import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REGISTRY_RETRIES,
    ProposalLogic,
)
from SymPepTracker.registry.RegistryPublisher import RegistryPublisher
from SymPepTracker.share.DatabaseHandler import get_db_handler, initialize_db_handler
from SymPepTracker.share.LoggingConfigurator import LoggingConfigurator

# --- .env 和 日志配置 ---
load_dotenv()
log_level = os.getenv("LOG_LEVEL", "INFO")
configurator = LoggingConfigurator(rootLogLevel=log_level)
configurator.configure()

logger = logging.getLogger("sympep_tracker")
# --- 日志配置结束 ---


def load_config(path: str = "config.json") -> dict:
    """读取可选的 config.json；文件不存在时返回空配置。"""
    if not os.path.exists(path):
        logger.info(f"未找到 '{path}'，使用默认配置。")
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_logic(config: dict) -> ProposalLogic:
    """根据配置组装 ProposalLogic 及其注册表发布器。"""
    registry = RegistryPublisher(
        index_path=os.getenv("REGISTRY_PATH", config.get("registry_path", "data/index.md")),
        json_path=os.getenv("REGISTRY_JSON_PATH", config.get("registry_json_path")) or None,
        title=config.get("registry_title", "SymPEP Index"),
    )
    return ProposalLogic(
        get_db_handler(),
        registry=registry,
        max_retries=int(config.get("max_retries", DEFAULT_MAX_RETRIES)),
        registry_retries=int(config.get("registry_retries", DEFAULT_REGISTRY_RETRIES)),
    )


async def main_async():
    """初始化数据库并重新发布注册表索引。"""
    config = load_config()

    initialize_db_handler()
    db_handler = get_db_handler()
    logger.info("正在检查数据库表...")
    try:
        await db_handler.init_db()
        logger.info("数据库表处理成功。")

        logic = build_logic(config)
        if await logic.rebuild_registry():
            logger.info("------ 注册表索引已更新 ------")
    finally:
        await db_handler.close()


def main():
    """主入口函数"""
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
