"""
module: health_api.py
description: 헬스체크 및 디버그 정보 API
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dimsum.config.logger import logger
from dimsum.config.settings import settings
from dimsum.core.database import get_db

router = APIRouter(tags=["Health"])


async def fetch_server_info(db: AsyncSession) -> dict:
    """DB 서버 시각과 버전 문자열을 조회한다."""
    db_time = (await db.execute(select(func.now()))).scalar_one()
    dialect = db.get_bind().dialect
    if dialect.name == "postgresql":
        version = (await db.execute(text("SELECT version()"))).scalar_one()
    else:
        version_info = dialect.server_version_info or ()
        version = f"{dialect.name} {'.'.join(str(part) for part in version_info)}".strip()
    return {"time": db_time, "version": version}


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    DB에 SELECT 1을 보내 서버/DB 상태를 반환한다.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "ERROR",
                "message": "Server error",
                "error": str(e),
                "database": "disconnected",
            },
        )
    return {
        "status": "OK",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected",
    }


@router.get("/debug")
async def debug_info(request: Request, db: AsyncSession = Depends(get_db)):
    """
    DB 연결 정보, 부팅 상태, 실행 환경을 반환한다.
    """
    try:
        server = await fetch_server_info(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Debug endpoint database error: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": str(e), "database": "disconnected"},
        )

    state = request.app.state
    return {
        "status": "running",
        "time": datetime.now(timezone.utc).isoformat(),
        "database": {"connected": True, **server},
        "startup": {
            "database_ready": getattr(state, "db_ready", False),
            "last_error": getattr(state, "db_last_error", None),
        },
        "env": {
            "environment": settings.ENVIRONMENT,
            "port": settings.PORT,
            "database_url_set": bool(settings.DATABASE_URL),
        },
    }
