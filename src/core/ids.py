"""
ID 생성: session_id, run_id

규칙:
- session_id는 브라우저 페이지 로드마다 새로 발급
- run_id는 submit마다 새로 발급
"""

import uuid
from datetime import UTC, datetime

from src.domain.constants import RUN_ID_PREFIX, SESSION_ID_PREFIX


def generate_session_id() -> str:
    """
    Session ID 생성.

    고유성 보장: UUID v4 전체 사용 (추측 불가)
    포맷: SES-{uuid hex}

    Returns:
        session_id 문자열
    """
    return f"{SESSION_ID_PREFIX}{uuid.uuid4().hex}"


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"{RUN_ID_PREFIX}{timestamp}-{unique}"


def is_valid_session_id(value: str) -> bool:
    """외부 입력 session_id 형식 검사."""
    if not value.startswith(SESSION_ID_PREFIX):
        return False
    body = value[len(SESSION_ID_PREFIX):]
    return len(body) == 32 and all(c in "0123456789abcdef" for c in body)
