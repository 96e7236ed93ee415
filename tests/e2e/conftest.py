"""
E2E 테스트용 Playwright 설정.

설정 항목:
- 뷰포트: 1280x720
- 기본 타임아웃: 15초 (이미지 생성은 외부 API라 e2e에서 호출하지 않음)
- 실패 시 스크린샷 + HTML 덤프 저장 (API 키 마스킹)
"""

import re
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

# Playwright는 선택적 의존성 (e2e extra) - 설치되어 있을 때만 fixture 등록
try:
    import playwright.sync_api  # noqa: F401

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False

ARTIFACTS_DIR = Path(__file__).parent / "artifacts"

# 덤프에서 가릴 패턴 (Google / Anthropic API 키, data URI 본문)
SENSITIVE_PATTERNS = [
    (r"AIza[0-9A-Za-z_-]{35}", "[MASKED_GOOGLE_KEY]"),
    (r"sk-ant-[0-9A-Za-z_-]{20,}", "[MASKED_ANTHROPIC_KEY]"),
    (r"(data:image/[a-z]+;base64,)[0-9A-Za-z+/=]{64,}", r"\1[TRUNCATED]"),
]


def mask_sensitive_data(content: str) -> str:
    """민감 정보를 마스킹한 문자열 반환."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        content = re.sub(pattern, replacement, content)
    return content


if PLAYWRIGHT_AVAILABLE:

    @pytest.fixture(scope="session")
    def browser_context_args(browser_context_args: dict) -> dict:
        """브라우저 컨텍스트 설정."""
        return {**browser_context_args, "viewport": {"width": 1280, "height": 720}}

    @pytest.fixture
    def page(context) -> Generator:
        """타임아웃이 설정된 페이지."""
        page = context.new_page()
        page.set_default_timeout(15000)
        yield page
        page.close()


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """테스트 실패 시 스크린샷/HTML 저장."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call" or not rep.failed:
        return
    page = item.funcargs.get("page")
    if page is None:
        return

    ARTIFACTS_DIR.mkdir(exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base_name = f"{item.name.split('[')[0]}_{timestamp}"

    try:
        page.screenshot(path=str(ARTIFACTS_DIR / f"{base_name}.png"), full_page=True)
        html_path = ARTIFACTS_DIR / f"{base_name}.html"
        html_path.write_text(mask_sensitive_data(page.content()), encoding="utf-8")
        print(f"\n📸 Artifacts saved: {ARTIFACTS_DIR / base_name}.*")
    except Exception as e:
        print(f"\n⚠️ Failed to save artifacts: {e}")
