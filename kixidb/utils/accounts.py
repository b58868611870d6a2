# kixidb/utils/accounts.py
import time
from typing import Optional

__all__ = ["account_number"]

DIGITS = 10


def account_number(prefix: str, now_ms: Optional[int] = None) -> str:
    """
    지갑 계좌번호 라벨: prefix + 현재 밀리초 타임스탬프의 끝 10자리.
    예) account_number("ADMIN", 1700000000123) -> "ADMIN0000000123"
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return prefix + str(now_ms)[-DIGITS:]
