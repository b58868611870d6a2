import pytest
from sqlalchemy import create_engine, text

from kixidb.settings import Settings
from kixidb.statements import SqlScript

# SQLite 판 테이블 (provision/stats 가 쓰는 컬럼만)
SQLITE_SCHEMA = """
-- users
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email VARCHAR(255) UNIQUE NOT NULL,
    password_hash VARCHAR(255),
    full_name VARCHAR(255) NOT NULL,
    birth_date DATE,
    document_number VARCHAR(50) UNIQUE,
    document_type VARCHAR(20),
    is_email_verified BOOLEAN DEFAULT 0,
    email_verified_at TIMESTAMP
);

CREATE TABLE wallets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    account_number VARCHAR(20) UNIQUE NOT NULL,
    available_balance DECIMAL(15, 2) DEFAULT 0,
    total_deposited DECIMAL(15, 2) DEFAULT 0,
    total_fees_paid DECIMAL(15, 2) DEFAULT 0,
    UNIQUE(user_id)
);

CREATE TABLE daily_limits (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    deposit_limit DECIMAL(15, 2) DEFAULT 200000,
    withdrawal_limit DECIMAL(15, 2) DEFAULT 100000,
    UNIQUE(user_id)
);

CREATE TABLE kyc (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    document_type VARCHAR(20) NOT NULL,
    document_number VARCHAR(50) NOT NULL,
    document_front_url TEXT,
    document_back_url TEXT,
    selfie_url TEXT,
    verification_status VARCHAR(20) DEFAULT 'PENDING',
    verified_at TIMESTAMP,
    expires_at TIMESTAMP,
    UNIQUE(user_id)
);

CREATE TABLE bonuses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    bonus_type VARCHAR(50) NOT NULL,
    amount DECIMAL(15, 2) NOT NULL,
    status VARCHAR(20) DEFAULT 'PENDING',
    expires_at TIMESTAMP,
    UNIQUE(user_id, bonus_type)
);

CREATE TABLE groups (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name VARCHAR(255) NOT NULL
);

CREATE TABLE transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    amount DECIMAL(15, 2) NOT NULL
);

CREATE INDEX idx_users_email ON users(email);
"""


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'kixidb.sqlite3'}"


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.sql"
    path.write_text(SQLITE_SCHEMA, encoding="utf-8")
    return path


@pytest.fixture
def settings(db_url, schema_file):
    return Settings(
        _env_file=None,
        database_url=db_url,
        app_env="test",
        schema_path=schema_file,
    )


@pytest.fixture
def engine(db_url):
    eng = create_engine(db_url)
    yield eng
    eng.dispose()


@pytest.fixture
def conn(engine):
    """테이블이 만들어진 AUTOCOMMIT 커넥션."""
    with engine.connect() as c:
        c = c.execution_options(isolation_level="AUTOCOMMIT")
        for stmt in SqlScript(SQLITE_SCHEMA):
            c.exec_driver_sql(stmt)
        yield c


@pytest.fixture
def count(conn):
    def _count(table, where="", **params):
        sql = f"SELECT COUNT(*) FROM {table}"
        if where:
            sql += f" WHERE {where}"
        return conn.execute(text(sql), params).scalar_one()

    return _count
