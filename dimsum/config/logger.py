"""
module: logger.py
description: loguru 기반 로깅 설정
"""
import os
import sys

from loguru import logger

from dimsum.config.settings import settings

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

if settings.LOG_TO_FILE:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    logger.add(
        f"{settings.LOG_DIR}/app.log",
        rotation="1 week",
        encoding="utf-8",
        level=settings.LOG_LEVEL,
    )
