# kixidb/db.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .errors import ConnectivityError
from .settings import Settings

log = logging.getLogger(__name__)

_PG_DRIVER = "postgresql+psycopg"


def normalize_url(url: str) -> str:
    """
    postgres:// , postgresql:// 형태의 URL 을 psycopg(3) 드라이버로 고정.
    다른 드라이버가 명시돼 있거나 postgres 가 아니면 그대로 둔다.
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = _PG_DRIVER + "://" + url[len("postgresql://"):]
    return url


def connect_args(url: URL, settings: Settings) -> dict:
    args = {}
    if url.get_backend_name() == "postgresql" and settings.db_ssl:
        # TLS 사용, 인증서 검증은 하지 않음 (sslmode=require)
        if "sslmode" not in url.query:
            args["sslmode"] = "require"
    return args


def make_engine(settings: Settings) -> Engine:
    url = make_url(normalize_url(settings.database_url))
    return create_engine(url, connect_args=connect_args(url, settings))


@contextmanager
def connect(engine: Engine) -> Iterator[Connection]:
    """
    실행 전체에서 쓰는 단일 커넥션. 문장 사이에 트랜잭션을 걸지 않도록
    AUTOCOMMIT 으로 열고, 어떤 경로로 나가든 한 번만 반환한다.
    """
    try:
        conn = engine.connect()
    except SQLAlchemyError as e:
        raise ConnectivityError(f"cannot connect to database: {e}") from e

    try:
        conn = conn.execution_options(isolation_level="AUTOCOMMIT")
        try:
            conn.exec_driver_sql("SELECT 1")
        except SQLAlchemyError as e:
            raise ConnectivityError(f"database did not answer: {e}") from e
        log.info("Connection established (%s)", engine.url.render_as_string())
        yield conn
    finally:
        conn.close()
