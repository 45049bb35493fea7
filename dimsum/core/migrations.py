"""
module: migrations.py
description: 버전별 스키마 마이그레이션 (배포 시 1회 실행, 요청 처리 경로 밖)

적용된 버전은 schema_migrations 테이블에 기록되며,
각 마이그레이션은 버전 순서대로 최대 한 번만 실행된다.
"""

from dataclasses import dataclass
from typing import Callable

from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    func,
    insert,
    inspect,
    select,
)
from sqlalchemy.ext.asyncio import AsyncEngine

from dimsum.config.logger import logger
from dimsum.core.models import Admin, Base, Product

# 애플리케이션 테이블과 분리된 메타데이터
migration_metadata = MetaData()

schema_migrations = Table(
    "schema_migrations",
    migration_metadata,
    Column("version", Integer, primary_key=True),
    Column("description", String(255), nullable=False),
    Column("applied_at", DateTime, server_default=func.now()),
)

# 이전 버전 서버가 만든 테이블에 빠져 있을 수 있는 컬럼
LEGACY_OPTIONAL_COLUMNS = {
    "admin": ("created_at",),
    "products": ("image_url", "deskripsi", "created_at", "updated_at"),
}


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    apply: Callable[[Connection], None]


def _create_tables(conn: Connection) -> None:
    Base.metadata.create_all(conn, tables=[Admin.__table__, Product.__table__])


def _add_missing_columns(conn: Connection) -> None:
    inspector = inspect(conn)
    preparer = conn.dialect.identifier_preparer

    for table_name, column_names in LEGACY_OPTIONAL_COLUMNS.items():
        table = Base.metadata.tables[table_name]
        existing = {col["name"] for col in inspector.get_columns(table_name)}

        for name in column_names:
            if name in existing:
                continue
            column = table.c[name]
            ddl = (
                f"ALTER TABLE {preparer.quote(table_name)} "
                f"ADD COLUMN {preparer.quote(name)} {column.type.compile(dialect=conn.dialect)}"
            )
            # SQLite의 ADD COLUMN은 CURRENT_TIMESTAMP 같은 비상수 기본값을 허용하지 않음
            if column.server_default is not None and conn.dialect.name != "sqlite":
                ddl += " DEFAULT CURRENT_TIMESTAMP"
            conn.exec_driver_sql(ddl)
            logger.info(f"Added missing column {table_name}.{name}")


MIGRATIONS: list[Migration] = [
    Migration(1, "create admin and products tables", _create_tables),
    Migration(2, "add columns missing from tables created by older deployments", _add_missing_columns),
]


async def applied_versions(db_engine: AsyncEngine) -> list[int]:
    """이미 적용된 마이그레이션 버전 목록 (오름차순)"""
    async with db_engine.begin() as conn:
        await conn.run_sync(migration_metadata.create_all)
        result = await conn.execute(
            select(schema_migrations.c.version).order_by(schema_migrations.c.version)
        )
        return list(result.scalars().all())


async def run_migrations(db_engine: AsyncEngine) -> list[int]:
    """
    아직 적용되지 않은 마이그레이션을 버전 순으로 하나의 트랜잭션에서 실행한다.

    Returns:
        list[int]: 이번에 적용된 버전 목록.
    """
    done = set(await applied_versions(db_engine))
    applied = []

    async with db_engine.begin() as conn:
        for migration in sorted(MIGRATIONS, key=lambda m: m.version):
            if migration.version in done:
                continue
            logger.info(f"Applying migration {migration.version}: {migration.description}")
            await conn.run_sync(migration.apply)
            await conn.execute(
                insert(schema_migrations).values(
                    version=migration.version,
                    description=migration.description,
                )
            )
            applied.append(migration.version)

    if applied:
        logger.info(f"Applied migrations: {applied}")
    else:
        logger.info("Schema is up to date")
    return applied
