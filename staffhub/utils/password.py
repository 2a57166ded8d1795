"""비밀번호 및 일회성 토큰 유틸리티 모듈.

Password hashing and one-time token helpers.
Passwords are hashed with bcrypt; onboarding links use URL-safe random tokens.
"""

import secrets

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Args:
        password: 평문 비밀번호 (Plain text password)

    Returns:
        str: bcrypt 해시 문자열 (Salted bcrypt hash)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교합니다 (Constant-time bcrypt check)."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def generate_onboarding_token() -> str:
    """온보딩 링크용 무작위 토큰 (URL-safe token for onboarding links)."""
    return secrets.token_urlsafe(32)
