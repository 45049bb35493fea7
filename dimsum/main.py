import asyncio
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from dimsum.api import admin_api, health_api, product_api
from dimsum.config.constants import PUBLIC_ENDPOINTS
from dimsum.config.logger import logger
from dimsum.config.settings import settings
from dimsum.core.bootstrap import init_database
from dimsum.core.database import engine
from dimsum.core.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=== APP STARTING ===")
    logger.info(f"PORT: {settings.PORT}, ENVIRONMENT: {settings.ENVIRONMENT}")

    # 연결될 때까지 백그라운드에서 재시도, 요청 처리는 막지 않음
    init_task = asyncio.create_task(init_database(app.state))
    try:
        yield
    finally:
        init_task.cancel()
        try:
            await init_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"Database init task failed: {e}")
        finally:
            await engine.dispose()
            logger.info("=== APP STOPPED ===")


app = FastAPI(
    title="Dimsum Backend API",
    description="Admin and product management backend",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.db_ready = False
app.state.db_last_error = None

# CORS 설정 (프론트 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


register_exception_handlers(app)

app.include_router(admin_api.router)
app.include_router(product_api.router)
app.include_router(health_api.router)


@app.get("/")
def root():
    return {
        "message": "Welcome to Dimsum Backend API",
        "endpoints": {
            "admin": "/api/admin",
            "products": "/api/products",
            "health": "/health",
            "debug": "/debug",
        },
        "available": PUBLIC_ENDPOINTS,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dimsum.main:app", host="0.0.0.0", port=settings.PORT)
