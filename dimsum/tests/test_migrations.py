import pytest
from sqlalchemy import inspect

from dimsum.core.migrations import MIGRATIONS, applied_versions, run_migrations


async def table_columns(engine, table_name):
    async with engine.connect() as conn:
        return await conn.run_sync(
            lambda sync_conn: {col["name"] for col in inspect(sync_conn).get_columns(table_name)}
        )


@pytest.mark.asyncio
async def test_migrations_create_schema_once(bare_engine):
    assert await applied_versions(bare_engine) == []

    applied = await run_migrations(bare_engine)
    assert applied == [m.version for m in MIGRATIONS]
    assert await run_migrations(bare_engine) == []
    assert await applied_versions(bare_engine) == applied

    assert await table_columns(bare_engine, "admin") == {"id", "username", "password", "created_at"}
    assert await table_columns(bare_engine, "products") == {
        "id", "nama_produk", "harga", "image_url", "deskripsi", "created_at", "updated_at",
    }


@pytest.mark.asyncio
async def test_migrations_add_columns_to_legacy_tables(bare_engine):
    async with bare_engine.begin() as conn:
        await conn.exec_driver_sql(
            "CREATE TABLE admin (id INTEGER PRIMARY KEY, username VARCHAR(50) UNIQUE NOT NULL, "
            "password VARCHAR(255) NOT NULL, created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        await conn.exec_driver_sql(
            "CREATE TABLE products (id INTEGER PRIMARY KEY, nama_produk VARCHAR(100) NOT NULL, "
            "harga NUMERIC(10, 2) NOT NULL, created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP, "
            "updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )

    await run_migrations(bare_engine)

    columns = await table_columns(bare_engine, "products")
    assert {"image_url", "deskripsi"} <= columns


@pytest.mark.asyncio
async def test_migrations_add_timestamp_columns_to_legacy_tables(bare_engine):
    async with bare_engine.begin() as conn:
        await conn.exec_driver_sql(
            "CREATE TABLE admin (id INTEGER PRIMARY KEY, username VARCHAR(50) UNIQUE NOT NULL, "
            "password VARCHAR(255) NOT NULL)"
        )
        await conn.exec_driver_sql(
            "CREATE TABLE products (id INTEGER PRIMARY KEY, nama_produk VARCHAR(100) NOT NULL, "
            "harga NUMERIC(10, 2) NOT NULL)"
        )
        await conn.exec_driver_sql(
            "INSERT INTO products (nama_produk, harga) VALUES ('Hakau', 18000)"
        )

    await run_migrations(bare_engine)

    assert "created_at" in await table_columns(bare_engine, "admin")
    assert await table_columns(bare_engine, "products") == {
        "id", "nama_produk", "harga", "image_url", "deskripsi", "created_at", "updated_at",
    }

    async with bare_engine.connect() as conn:
        name = (await conn.exec_driver_sql("SELECT nama_produk FROM products")).scalar_one()
    assert name == "Hakau"
