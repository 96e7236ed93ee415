"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.providers.factory import build_generation_provider
from src.app.routes import menu
from src.app.services.sessions import SessionStore

logger = logging.getLogger(__name__)

# 설정 파일 경로 환경변수 (미지정 시 프로젝트 루트 default.yaml)
CONFIG_ENV_VAR = "MENU_STUDIO_CONFIG"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드 (파일이 없으면 빈 설정 = 코드 기본값)."""
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            # 프로젝트 루트의 default.yaml
            config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def configure_logging(config: dict) -> None:
    """logging.level 설정 적용."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src").setLevel(level)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, provider/세션 저장소 초기화
    종료 시: 세션 정리 (진행 중인 이미지 작업은 취소하지 않음)
    """
    # Startup
    config = load_config()
    configure_logging(config)
    app.state.config = config

    provider = build_generation_provider(config)
    app.state.sessions = SessionStore.from_config(provider, config)
    logger.info("Menu Photo Studio started")

    yield

    # Shutdown
    logger.info(f"Shutting down with {len(app.state.sessions)} sessions in memory")


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Menu Photo Studio",
    description="Restaurant menu text → AI food photos per dish",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(menu.router, prefix="", tags=["Menu"])

# API 라우트
app.include_router(menu.api_router, prefix="/api/menu", tags=["Menu API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
