"""
Data source resolver: JSON 파일 로드 + deep merge.

병합 규칙 (오른쪽 우선):
- dict ↔ dict: 키 단위로 재귀 병합
- list, 스칼라: 통째로 교체 (이어붙이지 않음)
- 입력은 변경하지 않음 (결과는 새 dict)
"""

import copy
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from src.core.fileio import read_json
from src.core.sandbox import resolve_safe_path
from src.domain.errors import ErrorCodes, NotFound, ParseError
from src.domain.schemas import DataSourceSpec

logger = logging.getLogger(__name__)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    두 mapping을 재귀적으로 병합.

    Args:
        base: 기본 값
        override: 덮어쓸 값 (충돌 시 우선)

    Returns:
        병합된 새 dict
    """
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class DataSourceResolver:
    """
    data/ 루트 아래 JSON 파일들을 순서대로 읽어 하나의 props로 병합.

    Usage:
        resolver = DataSourceResolver(roots.data)
        props = resolver.resolve([DataSourceSpec("site.json"), DataSourceSpec("page.json", key="hero")])
    """

    def __init__(self, data_root: Path):
        self.data_root = data_root

    def load(self, filename: str) -> Any:
        """
        데이터 파일 1개 로드.

        Raises:
            SecurityViolation: 루트 밖 경로
            NotFound: 파일 없음
            ParseError: JSON 파싱 실패
        """
        path = resolve_safe_path(self.data_root, filename)
        try:
            return read_json(path)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFound(
                ErrorCodes.DATA_NOT_FOUND,
                f"Data file not found: {filename}",
                filename=filename,
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(
                ErrorCodes.DATA_PARSE_ERROR,
                f"Invalid JSON in {filename}: {e}",
                filename=filename,
            ) from e

    def resolve(self, specs: Iterable[DataSourceSpec]) -> dict[str, Any]:
        """
        데이터 소스 목록 → 병합된 props.

        key 가 지정되면 content[key] (없거나 null 이면 {}) 만 병합.

        Raises:
            ParseError: 병합 대상이 JSON object가 아님
        """
        props: dict[str, Any] = {}
        for spec in specs:
            if not spec.filename:
                continue

            content = self.load(spec.filename)
            if spec.key:
                if not isinstance(content, Mapping):
                    raise ParseError(
                        ErrorCodes.DATA_NOT_OBJECT,
                        f"Cannot select key '{spec.key}' from non-object data in {spec.filename}",
                        filename=spec.filename,
                        key=spec.key,
                    )
                content = content.get(spec.key)
                if content is None:
                    content = {}

            if not isinstance(content, Mapping):
                raise ParseError(
                    ErrorCodes.DATA_NOT_OBJECT,
                    f"Data source must be a JSON object: {spec.filename}",
                    filename=spec.filename,
                    key=spec.key,
                )

            props = deep_merge(props, content)
            logger.debug(f"Merged data source {spec.filename} (key={spec.key})")

        return props
