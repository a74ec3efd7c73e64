"""日志初始化。"""

import logging

from sab_api.core.config import get_settings

logger = logging.getLogger("sab_api")


def setup_logging() -> None:
    """初始化日志输出格式与级别。"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
