import logging
from typing import Dict

from sqlalchemy import text
from sqlalchemy.engine import Connection

log = logging.getLogger(__name__)

# (결과 키, 테이블, 출력 라벨)
COUNTED_TABLES = [
    ("total_users", "users", "Users"),
    ("total_wallets", "wallets", "Wallets"),
    ("total_kyc", "kyc", "KYC"),
    ("total_groups", "groups", "Groups"),
    ("total_transactions", "transactions", "Transactions"),
]

_STATS_SQL = text(
    "SELECT "
    + ", ".join(
        f"(SELECT COUNT(*) FROM {table}) AS {key}" for key, table, _ in COUNTED_TABLES
    )
)


def collect_stats(conn: Connection) -> Dict[str, int]:
    row = conn.execute(_STATS_SQL).mappings().one()
    return {key: int(row[key]) for key, _, _ in COUNTED_TABLES}


def report_stats(stats: Dict[str, int]) -> None:
    log.info("Database statistics:")
    for key, _, label in COUNTED_TABLES:
        log.info("   %s: %s", label, stats[key])
