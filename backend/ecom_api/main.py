from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecom_api.api.api import api_router
from ecom_api.core.config import settings
from ecom_api.core.errors import CatalogError
from ecom_api.core.logging_config import setup_logging, get_logger
from ecom_api.db.init_db import ensure_tables_exist

# 初始化日志系统
setup_logging(
    settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR,
    to_file=settings.LOG_TO_FILE,
    tz=settings.LOG_TIMEZONE,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("🚀 应用启动中...")
    await ensure_tables_exist()
    logger.info("📊 数据库表已就绪")
    yield
    logger.info("🛑 应用关闭中...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="电商目录服务 - 分类层级与商品关联",
    lifespan=lifespan
)

# CORS配置
if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"配置CORS，允许的源: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 失败: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


logger.info(f"注册API路由，前缀: {settings.API_PREFIX}")
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}
