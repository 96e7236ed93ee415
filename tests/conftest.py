"""
Pytest fixtures for menu photo generation tests.

구성:
- 샘플 요리 목록, 가짜 provider (tests/fakes.py)
- 브라우저 테스트용 live server
"""

import asyncio
import threading
import time
from collections.abc import Generator

import pytest
import uvicorn
from fakes import ControlledProvider

from src.domain.errors import ErrorCodes, ParseError
from src.domain.schemas import Dish

# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def sample_dishes() -> list[Dish]:
    """정상 케이스 요리 3개."""
    return [
        Dish("Spaghetti Carbonara", "Creamy pasta with pancetta and pecorino."),
        Dish("Margherita Pizza", "Tomato, mozzarella, and fresh basil."),
        Dish("Grilled Salmon", "Salmon fillet with asparagus."),
    ]


@pytest.fixture
def provider(sample_dishes: list[Dish]) -> ControlledProvider:
    """즉시 성공하는 provider."""
    return ControlledProvider(dishes=sample_dishes)


@pytest.fixture
def held_provider(sample_dishes: list[Dish]) -> ControlledProvider:
    """이미지 응답을 release 전까지 보류하는 provider."""
    return ControlledProvider(dishes=sample_dishes, hold_images=True)


@pytest.fixture
def failing_parse_provider() -> ControlledProvider:
    """parse_menu가 실패하는 provider."""
    return ControlledProvider(
        parse_error=ParseError(ErrorCodes.MALFORMED_RESPONSE, "not JSON"),
    )


# =============================================================================
# Browser Test Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def live_server() -> Generator[str, None, None]:
    """
    FastAPI 앱을 백그라운드에서 실행하는 fixture.

    Returns:
        서버 URL (예: "http://localhost:8765")
    """
    from src.app.main import app

    # 테스트용 포트
    port = 8765
    host = "127.0.0.1"

    # 별도 스레드에서 서버 실행
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    def run_server() -> None:
        asyncio.run(server.serve())

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    # 서버가 준비될 때까지 대기
    base_url = f"http://{host}:{port}"
    max_attempts = 30
    for _ in range(max_attempts):
        try:
            import httpx
            response = httpx.get(f"{base_url}/health", timeout=1.0)
            if response.status_code == 200:
                break
        except Exception:
            time.sleep(0.1)
    else:
        raise RuntimeError("Failed to start test server")

    yield base_url

    # 서버 종료
    server.should_exit = True
