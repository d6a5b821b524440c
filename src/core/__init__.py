"""
Core layer: 빌드 엔진 핵심 모듈.

이 모듈만 건드리면 운영사고 → 가장 보수적으로 관리

역할:
- 샌드박스 경로 해석, 설정/저장소 루트
- 데이터 소스 병합, 원자적 쓰기
- 단일/배치 빌드 오케스트레이션 + 전역 빌드 락
"""

from .batch import BatchOrchestrator, discover_data_files, run_batch_build
from .build import BuildOrchestrator, coerce_data_sources, run_build
from .datasource import DataSourceResolver, deep_merge
from .fileio import atomic_write_json, atomic_write_text, read_json
from .sandbox import is_within, resolve_safe_path, to_relative
from .settings import StorageRoots, get_lock_timeout, load_config

__all__ = [
    # sandbox
    "resolve_safe_path",
    "is_within",
    "to_relative",
    # settings
    "StorageRoots",
    "load_config",
    "get_lock_timeout",
    # fileio
    "atomic_write_text",
    "atomic_write_json",
    "read_json",
    # datasource
    "DataSourceResolver",
    "deep_merge",
    # build
    "BuildOrchestrator",
    "coerce_data_sources",
    "run_build",
    # batch
    "BatchOrchestrator",
    "discover_data_files",
    "run_batch_build",
]
