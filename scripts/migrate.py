#!/usr/bin/env python
"""
배포 시 스키마 마이그레이션 실행 스크립트

Usage:
    python scripts/migrate.py              # 미적용 마이그레이션 실행
    python scripts/migrate.py --status     # 적용 상태만 출력
    python scripts/migrate.py --seed-admin # 실행 후 admin 테이블이 비어 있으면 기본 관리자 생성
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 프로젝트 루트 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from dimsum.config.logger import logger
from dimsum.core.bootstrap import seed_default_admin
from dimsum.core.database import AsyncSessionLocal, engine
from dimsum.core.migrations import MIGRATIONS, applied_versions, run_migrations


async def main(status_only: bool, seed_admin: bool) -> int:
    try:
        if status_only:
            done = set(await applied_versions(engine))
            for migration in MIGRATIONS:
                mark = "x" if migration.version in done else " "
                print(f"[{mark}] {migration.version:>3}  {migration.description}")
            return 0

        await run_migrations(engine)
        if seed_admin:
            await seed_default_admin(AsyncSessionLocal)
        return 0
    except Exception as e:
        logger.opt(exception=e).error("Migration failed")
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Apply versioned schema migrations")
    parser.add_argument("--status", action="store_true", help="적용 상태만 출력")
    parser.add_argument("--seed-admin", action="store_true", help="기본 관리자 생성")
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.status, args.seed_admin)))
