"""
Domain Constants: 빌드 엔진 전역 상수.

파일명 정책, 확장자, 저장소 구조 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Output (출력 파일명 정책)
# =============================================================================
# 출력 경로가 .html로 끝나지 않으면 디렉터리로 취급:
# reports → reports/index.html

HTML_SUFFIX = ".html"
INDEX_FILENAME = "index.html"

# =============================================================================
# Data Files
# =============================================================================

JSON_SUFFIX = ".json"

# =============================================================================
# Templates
# =============================================================================
# .py → Python 컴포넌트 모듈
# .jinja / .j2 / .html → Jinja2 템플릿
# 스키마 사이드카: card.py → card.schema.json

PYTHON_TEMPLATE_SUFFIXES = (".py",)
JINJA_TEMPLATE_SUFFIXES = (".jinja", ".j2", ".html")
TEMPLATE_SUFFIXES = PYTHON_TEMPLATE_SUFFIXES + JINJA_TEMPLATE_SUFFIXES
SCHEMA_SUFFIX = ".schema.json"

# 렌더 가능한 export 이름 (우선순위 순)
DEFAULT_EXPORT_NAME = "default"
APP_EXPORT_NAME = "App"
MODULE_RENDER_FUNCTION = "render"

# =============================================================================
# Storage Structure (저장소 구조)
# =============================================================================
# storage/
# ├── templates/   # 템플릿 파일
# ├── data/        # JSON 데이터
# ├── output/      # 빌드 결과 (HTML)
# └── .locks/      # 전역 빌드 락

DEFAULT_STORAGE_DIR = "storage"
DEFAULT_TEMPLATES_DIR = "templates"
DEFAULT_DATA_DIR = "data"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_LOCK_DIR = ".locks"
BUILD_LOCK_FILENAME = "build.lock"
DEFAULT_LOCK_TIMEOUT = 30.0

# JSON 쓰기 들여쓰기 (fs/write)
JSON_WRITE_INDENT = 4
