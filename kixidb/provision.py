# kixidb/provision.py
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.engine import Connection

from .settings import Settings
from .utils.accounts import account_number
from .utils.hashing import hash_password

log = logging.getLogger(__name__)

# ---------- 관리자 계정 ----------
ADMIN_EMAIL = "admin@kixikilahub.com"
ADMIN_PASSWORD = "Admin@123"
ADMIN_FULL_NAME = "System Administrator"
ADMIN_DOCUMENT = ("000000000A", "BI")
ADMIN_ACCOUNT_PREFIX = "ADMIN"
ADMIN_DEPOSIT_LIMIT = 500000
ADMIN_WITHDRAWAL_LIMIT = 500000

# ---------- 테스트 데이터 ----------
TEST_EMAIL = "teste@kixikilahub.com"
TEST_PASSWORD = "Teste@123"
TEST_FULL_NAME = "Usuário Teste"
TEST_BIRTH_DATE = date(1990, 1, 1)
TEST_DOCUMENT = ("123456789A", "BI")
TEST_ACCOUNT_PREFIX = "TEST"
TEST_DOCUMENT_URLS = (
    "/uploads/test/front.jpg",
    "/uploads/test/back.jpg",
    "/uploads/test/selfie.jpg",
)
KYC_VALIDITY = timedelta(days=5 * 365)
WELCOME_BONUS_AMOUNT = 1000
WELCOME_BONUS_VALIDITY = timedelta(days=90)
TEST_WALLET_BALANCES = {
    "available_balance": 10000,
    "total_deposited": 9000,
    "total_fees_paid": 100,
}


@dataclass
class ProvisionResult:
    email: str
    created: bool
    user_id: Optional[Any] = None


# ---------- SQL ----------
_FIND_USER = text("SELECT id FROM users WHERE email = :email")

_INSERT_ADMIN = text(
    """
    INSERT INTO users (
        email, password_hash, full_name,
        is_email_verified, email_verified_at,
        document_number, document_type
    ) VALUES (
        :email, :password_hash, :full_name,
        :verified, :verified_at,
        :document_number, :document_type
    )
    RETURNING id
"""
).bindparams(bindparam("verified_at", type_=DateTime()))

_INSERT_TEST_USER = text(
    """
    INSERT INTO users (
        email, password_hash, full_name,
        birth_date, document_number, document_type,
        is_email_verified, email_verified_at
    ) VALUES (
        :email, :password_hash, :full_name,
        :birth_date, :document_number, :document_type,
        :verified, :verified_at
    )
    ON CONFLICT (email) DO NOTHING
    RETURNING id
"""
).bindparams(
    bindparam("birth_date", type_=Date()),
    bindparam("verified_at", type_=DateTime()),
)

_INSERT_WALLET = text(
    "INSERT INTO wallets (user_id, account_number) VALUES (:user_id, :account_number)"
)
_ENSURE_WALLET = text(
    """
    INSERT INTO wallets (user_id, account_number)
    VALUES (:user_id, :account_number)
    ON CONFLICT (user_id) DO NOTHING
"""
)

_INSERT_LIMITS = text(
    """
    INSERT INTO daily_limits (user_id, deposit_limit, withdrawal_limit)
    VALUES (:user_id, :deposit_limit, :withdrawal_limit)
"""
)
_ENSURE_LIMITS = text(
    """
    INSERT INTO daily_limits (user_id)
    VALUES (:user_id)
    ON CONFLICT (user_id) DO NOTHING
"""
)

_INSERT_KYC = text(
    """
    INSERT INTO kyc (
        user_id, document_type, document_number,
        document_front_url, document_back_url, selfie_url,
        verification_status, verified_at, expires_at
    ) VALUES (
        :user_id, :document_type, :document_number,
        :front_url, :back_url, :selfie_url,
        :status, :verified_at, :expires_at
    )
"""
).bindparams(
    bindparam("verified_at", type_=DateTime()),
    bindparam("expires_at", type_=DateTime()),
)

_INSERT_BONUS = text(
    """
    INSERT INTO bonuses (user_id, bonus_type, amount, status, expires_at)
    VALUES (:user_id, :bonus_type, :amount, :status, :expires_at)
"""
).bindparams(bindparam("expires_at", type_=DateTime()))

_SET_WALLET_BALANCES = text(
    """
    UPDATE wallets
    SET available_balance = :available_balance,
        total_deposited = :total_deposited,
        total_fees_paid = :total_fees_paid
    WHERE user_id = :user_id
"""
)


def bootstrap_admin(conn: Connection, settings: Settings) -> ProvisionResult:
    """
    관리자 계정이 없을 때만 users → wallets → daily_limits 순으로 생성.
    wallet/limit 은 users INSERT 가 돌려준 id 를 참조하므로 반드시 그 뒤에 실행.
    """
    log.info("Creating bootstrap admin account...")

    existing = conn.execute(_FIND_USER, {"email": ADMIN_EMAIL}).first()
    if existing is not None:
        log.info("Admin account already exists (id=%s)", existing[0])
        return ProvisionResult(email=ADMIN_EMAIL, created=False, user_id=existing[0])

    password_hash = hash_password(ADMIN_PASSWORD, settings.bcrypt_rounds)
    document_number, document_type = ADMIN_DOCUMENT

    admin_id = conn.execute(
        _INSERT_ADMIN,
        {
            "email": ADMIN_EMAIL,
            "password_hash": password_hash,
            "full_name": ADMIN_FULL_NAME,
            "verified": True,
            "verified_at": datetime.now(),
            "document_number": document_number,
            "document_type": document_type,
        },
    ).scalar_one()

    conn.execute(
        _INSERT_WALLET,
        {"user_id": admin_id, "account_number": account_number(ADMIN_ACCOUNT_PREFIX)},
    )
    conn.execute(
        _INSERT_LIMITS,
        {
            "user_id": admin_id,
            "deposit_limit": ADMIN_DEPOSIT_LIMIT,
            "withdrawal_limit": ADMIN_WITHDRAWAL_LIMIT,
        },
    )

    log.info("Admin account created with id: %s", admin_id)
    log.info("Email: %s", ADMIN_EMAIL)
    log.info("Password: %s", ADMIN_PASSWORD)
    log.warning("Change the admin password after the first login!")
    return ProvisionResult(email=ADMIN_EMAIL, created=True, user_id=admin_id)


def seed_test_data(conn: Connection, settings: Settings) -> ProvisionResult:
    """
    개발용 테스트 사용자 + KYC(승인) + 웰컴 보너스 + 지갑 잔액.
    email 충돌(이미 존재) 시 나머지 단계는 건너뜀. 트랜잭션으로 묶지 않는다.
    """
    log.info("Creating test data...")

    now = datetime.now()
    document_number, document_type = TEST_DOCUMENT

    row = conn.execute(
        _INSERT_TEST_USER,
        {
            "email": TEST_EMAIL,
            "password_hash": hash_password(TEST_PASSWORD, settings.bcrypt_rounds),
            "full_name": TEST_FULL_NAME,
            "birth_date": TEST_BIRTH_DATE,
            "document_number": document_number,
            "document_type": document_type,
            "verified": True,
            "verified_at": now,
        },
    ).first()

    if row is None:
        log.info("Test user already exists")
        return ProvisionResult(email=TEST_EMAIL, created=False)

    user_id = row[0]

    # 스키마 트리거가 이미 만들었을 수도 있으므로 충돌 시 무시
    conn.execute(
        _ENSURE_WALLET,
        {"user_id": user_id, "account_number": account_number(TEST_ACCOUNT_PREFIX)},
    )
    conn.execute(_ENSURE_LIMITS, {"user_id": user_id})

    front_url, back_url, selfie_url = TEST_DOCUMENT_URLS
    conn.execute(
        _INSERT_KYC,
        {
            "user_id": user_id,
            "document_type": document_type,
            "document_number": document_number,
            "front_url": front_url,
            "back_url": back_url,
            "selfie_url": selfie_url,
            "status": "APPROVED",
            "verified_at": now,
            "expires_at": now + KYC_VALIDITY,
        },
    )

    conn.execute(
        _INSERT_BONUS,
        {
            "user_id": user_id,
            "bonus_type": "WELCOME",
            "amount": WELCOME_BONUS_AMOUNT,
            "status": "ACTIVATED",
            "expires_at": now + WELCOME_BONUS_VALIDITY,
        },
    )

    conn.execute(_SET_WALLET_BALANCES, {"user_id": user_id, **TEST_WALLET_BALANCES})

    log.info("Test user created: %s / %s", TEST_EMAIL, TEST_PASSWORD)
    return ProvisionResult(email=TEST_EMAIL, created=True, user_id=user_id)
