"""
App layer: UI 서버 (FastAPI + HTMX).

역할:
- 메뉴 입력, 스타일 선택, 결과 표시
- 텍스트/이미지 모델 호출 (providers)
- 요리별 비동기 사진 생성 상태 머신 (services/generation.py)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML (HTMX)
- src/app/static/ → CSS
"""
