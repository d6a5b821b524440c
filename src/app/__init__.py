"""
App layer: HTTP 서버 (FastAPI).

역할:
- 빌드 요청, 파일 관리, 미리보기 엔드포인트
- ⚠️ 빌드 로직 없음 (core에 위임)

주의: 폴더 구분
- src/templates/ → 코드 (registry.py, manager.py)
- storage/templates/ → 사용자 템플릿 저장소
"""
