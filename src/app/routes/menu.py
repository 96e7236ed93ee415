"""
Menu Routes: 메뉴 붙여넣기 → 요리 사진 생성 화면.

- GET / → 메인 화면 (Jinja2 + HTMX)
- POST /api/menu/submit → 메뉴 제출 (파싱 후 결과 조각 반환, 이미지는 백그라운드)
- POST /api/menu/style → 스타일 선택
- GET /api/menu/results → 결과 조각 (진행 중이면 1초마다 자기 자신을 다시 요청,
  세션이 만료되면 polling 없는 만료 안내 조각)
- GET /api/menu/state → 세션 상태 JSON

화면에 들어가는 사용자 텍스트는 모두 escape.
"""

import html as html_escape_module
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.app.services.generation import MenuGenerationController
from src.app.services.sessions import SessionStore
from src.core.ids import is_valid_session_id
from src.domain.constants import (
    SAMPLE_MENU_TEXT,
    SESSION_EXPIRED_MESSAGE,
    STYLE_BY_ID,
    STYLE_OPTIONS,
)
from src.domain.errors import EmptyInputError, RunInProgressError
from src.domain.schemas import (
    DisplayEntry,
    EntryStatus,
    OverallStatus,
    PhotoStyle,
    SessionState,
)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

# 진행 중 결과 조각 재요청 주기
RESULTS_POLL_INTERVAL = "1s"


# =============================================================================
# Session Helpers
# =============================================================================


def get_session_store(request: Request) -> SessionStore:
    """app.state에 등록된 SessionStore."""
    store: SessionStore = request.app.state.sessions
    return store


def get_controller(
    request: Request,
    session_id: str,
    create: bool = False,
) -> MenuGenerationController:
    """
    session_id에 대응하는 컨트롤러.

    Args:
        create: True면 없는 세션을 같은 ID로 생성 (submit/style)

    Raises:
        HTTPException: 400 (형식 오류), 404 (세션 없음, create=False)
    """
    if not is_valid_session_id(session_id):
        raise HTTPException(status_code=400, detail="Invalid session_id")

    store = get_session_store(request)
    if create:
        return store.get_or_create(session_id)

    controller = store.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return controller


def parse_style(value: str) -> PhotoStyle:
    """폼 입력 → PhotoStyle (알 수 없으면 400)."""
    if value not in STYLE_BY_ID:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown style {value!r}. Choose one of: {', '.join(STYLE_BY_ID)}",
        )
    return PhotoStyle(value)


# =============================================================================
# HTML Generation Helpers
# =============================================================================


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html_escape_module.escape(text)


def build_style_selector_html(selected: PhotoStyle) -> str:
    """스타일 선택 버튼 3개."""
    buttons = []
    for option in STYLE_OPTIONS:
        is_selected = option.id == selected.value
        css_class = "style-option selected" if is_selected else "style-option"
        buttons.append(
            f'<button type="button" class="{css_class}" name="style" '
            f'value="{escape_html(option.id)}" '
            f'aria-pressed="{"true" if is_selected else "false"}" '
            f'data-testid="style-{escape_html(option.id)}" '
            f'hx-post="/api/menu/style" hx-include="#session-id" '
            f'hx-target="#style-selector" hx-swap="outerHTML">'
            f'<strong>{escape_html(option.name)}</strong>'
            f'<span>{escape_html(option.description)}</span>'
            f"</button>"
        )
    return (
        '<div id="style-selector" class="style-selector">'
        + "".join(buttons)
        + "</div>"
    )


def build_entry_html(index: int, entry: DisplayEntry) -> str:
    """요리 카드 1개."""
    name = escape_html(entry.dish.name)
    description = escape_html(entry.dish.description)

    if entry.status is EntryStatus.READY and entry.image_ref:
        visual = f'<img src="{escape_html(entry.image_ref)}" alt="{name}">'
    elif entry.status is EntryStatus.FAILED:
        visual = f'<div class="dish-error">{escape_html(entry.error_message or "")}</div>'
    else:
        visual = '<div class="dish-loading">Generating photo…</div>'

    return (
        f'<article class="dish-card {entry.status.value}" '
        f'data-index="{index}" data-status="{entry.status.value}">'
        f"{visual}"
        f"<h3>{name}</h3>"
        f'<p>{description}</p>'
        f"</article>"
    )


def build_results_html(
    session_id: str,
    state: SessionState,
    notice: str | None = None,
) -> str:
    """
    결과 영역 조각.

    이미지 대기 중이면 hx-trigger로 주기적으로 자기 자신을 교체.

    Args:
        notice: 상태와 별개로 이번 응답에만 보여줄 안내 (재제출 잠금 등)
    """
    view_status = state.view_status
    polling = ""
    if view_status in (OverallStatus.PARSING_MENU, OverallStatus.AWAITING_IMAGES):
        polling = (
            f' hx-get="/api/menu/results?session_id={escape_html(session_id)}"'
            f' hx-trigger="every {RESULTS_POLL_INTERVAL}" hx-swap="outerHTML"'
        )

    parts = []
    if notice:
        parts.append(
            f'<div class="error" role="alert" data-testid="run-notice">'
            f"{escape_html(notice)}</div>"
        )
    if state.overall_error:
        parts.append(
            f'<div class="error" role="alert" data-testid="overall-error">'
            f"{escape_html(state.overall_error)}</div>"
        )
    if state.entries:
        cards = "".join(
            build_entry_html(index, entry) for index, entry in enumerate(state.entries)
        )
        parts.append(f'<div class="dish-grid">{cards}</div>')

    return (
        f'<section id="results" data-status="{view_status.value}"{polling}>'
        + "".join(parts)
        + "</section>"
    )


def build_expired_results_html() -> str:
    """만료된 세션용 결과 조각 (polling 속성 없음 → 재요청 중단)."""
    return (
        '<section id="results" data-status="expired">'
        f'<div class="error" role="alert" data-testid="session-expired">'
        f"{escape_html(SESSION_EXPIRED_MESSAGE)}</div>"
        "</section>"
    )


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def menu_page(request: Request) -> HTMLResponse:
    """
    메인 화면.

    페이지 로드마다 새 세션 발급.
    """
    session_id, controller = get_session_store(request).create()

    return jinja_templates.TemplateResponse(
        request,
        "index.html",
        {
            "session_id": session_id,
            "menu_text": SAMPLE_MENU_TEXT,
            "style_selector_html": build_style_selector_html(
                controller.state.selected_style
            ),
            "results_html": build_results_html(session_id, controller.state),
        },
    )


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("/submit", response_class=HTMLResponse)
async def submit_menu(
    request: Request,
    session_id: str = Form(...),
    menu_text: str = Form(""),
    style: str | None = Form(None),
) -> HTMLResponse:
    """
    메뉴 제출.

    파싱이 끝나면 결과 조각을 반환하고, 요리별 사진은 백그라운드에서 생성.
    빈 입력/파싱 실패/요리 없음은 에러 문구가 포함된 조각으로 반환.
    잠금 중 재제출은 현재 진행 상황 조각 + 안내 문구 (HTMX가 4xx는 교체하지 않음).

    Args:
        session_id: 세션 ID
        menu_text: 메뉴 텍스트
        style: 스타일 (없으면 세션에서 선택된 스타일)
    """
    selected = parse_style(style) if style else None
    controller = get_controller(request, session_id, create=True)

    try:
        await controller.submit(menu_text, selected)
    except EmptyInputError:
        pass  # overall_error에 기록됨 → 조각으로 표시
    except RunInProgressError as e:
        return HTMLResponse(
            build_results_html(session_id, controller.state, notice=e.user_message)
        )

    return HTMLResponse(build_results_html(session_id, controller.state))


@api_router.post("/style", response_class=HTMLResponse)
async def select_style(
    request: Request,
    session_id: str = Form(...),
    style: str = Form(...),
) -> HTMLResponse:
    """스타일 선택 (다음 submit부터 적용)."""
    selected = parse_style(style)
    controller = get_controller(request, session_id, create=True)
    controller.select_style(selected)
    return HTMLResponse(build_style_selector_html(controller.state.selected_style))


@api_router.get("/results", response_class=HTMLResponse)
async def get_results(request: Request, session_id: str) -> HTMLResponse:
    """
    결과 조각 (HTMX polling).

    세션이 없으면(만료/제거) 404 대신 polling 없는 만료 조각 반환.
    HTMX는 4xx 응답을 교체하지 않으므로 404면 이전 조각이 계속 polling함.
    """
    if not is_valid_session_id(session_id):
        raise HTTPException(status_code=400, detail="Invalid session_id")

    controller = get_session_store(request).get(session_id)
    if controller is None:
        return HTMLResponse(build_expired_results_html())
    return HTMLResponse(build_results_html(session_id, controller.state))


@api_router.get("/state")
async def get_state(request: Request, session_id: str) -> dict[str, Any]:
    """세션 상태 JSON."""
    controller = get_controller(request, session_id)
    return {"session_id": session_id, **controller.state.to_dict()}
