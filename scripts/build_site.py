#!/usr/bin/env python3
"""
build_site.py - 서버 없이 빌드 실행

default.yaml 의 storage 설정(또는 FORGE_STORAGE_ROOT)을 그대로 사용.
결과는 JSON 으로 stdout 에 출력.

사용법:
    # 단일 빌드 (데이터 소스는 순서대로 병합, 뒤가 우선)
    uv run python scripts/build_site.py single cards/profile.py team/index \\
        --data site.json --data team/alice.json:profile

    # 배치 빌드 (data/team/*.json → output/team/<이름>/index.html)
    uv run python scripts/build_site.py batch cards/profile.py team team

종료 코드:
    0: 성공
    1: 빌드 실패 또는 배치 항목 중 하나 이상 실패
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.core.batch import BatchOrchestrator, run_batch_build
from src.core.build import BuildOrchestrator, run_build
from src.core.settings import StorageRoots, get_lock_timeout, load_config
from src.domain.schemas import DataSourceSpec

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_data_source(value: str) -> DataSourceSpec:
    """'file.json' 또는 'file.json:key' → DataSourceSpec."""
    filename, sep, key = value.partition(":")
    return DataSourceSpec(filename=filename, key=key if sep and key else None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="템플릿 + JSON 데이터 → 정적 HTML 빌드",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    single = subparsers.add_parser("single", help="단일 빌드")
    single.add_argument("template", help="templates/ 기준 템플릿 경로")
    single.add_argument("output", help="output/ 기준 출력 경로 (.html 또는 폴더)")
    single.add_argument(
        "--data",
        action="append",
        default=[],
        type=parse_data_source,
        help="데이터 소스 (file.json[:key]), 여러 번 지정 가능",
    )

    batch = subparsers.add_parser("batch", help="폴더 내 JSON 파일마다 빌드")
    batch.add_argument("template", help="templates/ 기준 템플릿 경로")
    batch.add_argument("data_folder", help="data/ 기준 폴더")
    batch.add_argument("output_base", help="output/ 기준 출력 폴더")

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = load_config(Path(args.config) if args.config else None)
    roots = StorageRoots.from_config(config)
    roots.ensure()
    orchestrator = BuildOrchestrator(roots, lock_timeout=get_lock_timeout(config))

    if args.command == "single":
        result = run_build(orchestrator, args.template, args.data, args.output)
        print(json.dumps(result, ensure_ascii=False, indent=2))
        return 1 if "error" in result else 0

    result = run_batch_build(
        BatchOrchestrator(orchestrator),
        args.template,
        args.data_folder,
        args.output_base,
    )
    print(json.dumps(result, ensure_ascii=False, indent=2))
    if "error" in result:
        return 1

    failed = [r for r in result["results"] if r["status"] == "error"]
    if failed:
        logger.warning(f"{len(failed)}/{len(result['results'])} item(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
