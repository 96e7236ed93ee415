"""
Core layer: 실행 식별자와 run log.

역할:
- session_id, run_id 발급
- run 단위 이벤트/경고 기록
"""

from .ids import generate_run_id, generate_session_id, is_valid_session_id
from .logging import (
    complete_run_log,
    create_run_log,
    emit_warning,
    record_dish_result,
    settle_result,
    summarize_run_log,
)

__all__ = [
    # ids
    "generate_session_id",
    "generate_run_id",
    "is_valid_session_id",
    # logging
    "create_run_log",
    "emit_warning",
    "record_dish_result",
    "complete_run_log",
    "settle_result",
    "summarize_run_log",
]
