import argparse
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import connect, make_engine
from .errors import SetupError
from .provision import bootstrap_admin, seed_test_data
from .schema import apply_schema, list_tables
from .settings import Settings, load_settings
from .statements import SqlScript
from .stats import collect_stats, report_stats

log = logging.getLogger("kixidb")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def run(
    settings: Settings,
    *,
    seed: Optional[bool] = None,
    engine: Optional[Engine] = None,
) -> int:
    """
    스키마 적용 → 테이블 확인 → 관리자 생성 → (선택) 테스트 데이터 → 통계.
    성공 0, 치명적 오류 1. seed 가 None 이면 app_env 로 결정.
    """
    if seed is None:
        seed = settings.is_development

    own_engine = engine is None
    try:
        # 스키마 파일은 연결 전에 확인
        script = SqlScript.from_path(settings.schema_path)
        log.info("Starting database setup (schema: %s)", script.source)

        if own_engine:
            engine = make_engine(settings)

        with connect(engine) as conn:
            apply_schema(conn, script)
            list_tables(conn)
            bootstrap_admin(conn, settings)
            if seed:
                seed_test_data(conn, settings)
            report_stats(collect_stats(conn))
    except (SetupError, SQLAlchemyError, OSError):
        log.exception("Database setup failed")
        return 1
    finally:
        if own_engine and engine is not None:
            engine.dispose()

    log.info("Database setup completed successfully")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kixidb-setup",
        description="Apply schema.sql and provision the bootstrap accounts.",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="also create the test user and its demo data",
    )
    parser.add_argument("--schema", help="path to the schema file (default: bundled)")
    parser.add_argument("--env-file", default=".env", help="dotenv file (default: .env)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.schema:
        overrides["schema_path"] = args.schema
    try:
        settings = load_settings(env_file=args.env_file, **overrides)
    except ValueError as e:
        # pydantic ValidationError (예: DATABASE_URL 누락)
        configure_logging("info")
        log.error("Invalid configuration: %s", e)
        return 1

    configure_logging(settings.log_level)
    seed = True if args.seed else None
    return run(settings, seed=seed)


if __name__ == "__main__":
    sys.exit(main())
