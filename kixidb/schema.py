# kixidb/schema.py
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError

log = logging.getLogger(__name__)

# duplicate_cursor, duplicate_database, duplicate_prepared_statement,
# duplicate_schema, duplicate_table(인덱스 포함), duplicate_column,
# duplicate_object, duplicate_alias, duplicate_function
DUPLICATE_OBJECT_SQLSTATES = frozenset(
    {"42P03", "42P04", "42P05", "42P06", "42P07", "42701", "42710", "42712", "42723"}
)

# 23xxx: 무결성 제약 위반 (데이터 중복이지 DDL 중복이 아님)
INTEGRITY_VIOLATION_CLASS = "23"

ALREADY_EXISTS = "already exists"

PREVIEW_LEN = 100


@dataclass
class ApplyResult:
    total: int = 0
    executed: int = 0
    skipped: int = 0


def _sqlstate(exc: BaseException) -> Optional[str]:
    orig = getattr(exc, "orig", None) or exc
    # psycopg 3 -> sqlstate, psycopg2 -> pgcode
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_already_exists(exc: BaseException) -> bool:
    """
    이미 존재하는 객체에 대한 DDL 실패인지 판정.
    SQLSTATE 가 중복 객체 코드면 허용, 23xxx(무결성 위반)면 거부,
    그 외에는 메시지의 "already exists" 로 판정.
    """
    code = _sqlstate(exc)
    if code is not None:
        if code in DUPLICATE_OBJECT_SQLSTATES:
            return True
        if code.startswith(INTEGRITY_VIOLATION_CLASS):
            return False
    return ALREADY_EXISTS in str(exc)


def _preview(stmt: str) -> str:
    flat = " ".join(stmt.split())
    if len(flat) > PREVIEW_LEN:
        return flat[:PREVIEW_LEN] + "..."
    return flat


def apply_schema(conn: Connection, statements: Iterable[str]) -> ApplyResult:
    stmts = list(statements)
    result = ApplyResult(total=len(stmts))
    log.info("Found %d SQL statements", result.total)

    for i, stmt in enumerate(stmts, start=1):
        log.info("Executing statement %d/%d", i, result.total)
        log.debug("   %s", _preview(stmt))
        try:
            conn.exec_driver_sql(stmt, execution_options={"no_parameters": True})
        except DBAPIError as e:
            if is_already_exists(e):
                log.warning("Statement %d: object already exists (skipped)", i)
                result.skipped += 1
                continue
            log.error("Statement %d failed: %s", i, _preview(stmt))
            raise
        result.executed += 1

    log.info(
        "Schema applied: %d executed, %d already present",
        result.executed,
        result.skipped,
    )
    return result


def list_tables(conn: Connection, schema: Optional[str] = None) -> List[str]:
    """대상 스키마(기본: 커넥션의 기본 스키마, PG 는 public)의 테이블 목록."""
    tables = sorted(inspect(conn).get_table_names(schema=schema))
    log.info("%d tables found:", len(tables))
    for i, name in enumerate(tables, start=1):
        log.info("   %d. %s", i, name)
    return tables
