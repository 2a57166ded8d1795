"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",          # 사용자 ID (User identifier)
        "role": "Admin",             # 역할 이름 (Role name at issue time)
        "exp": 1234567890,           # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh"   # 토큰 유형 (Token type discriminator)
    }

The role claim is informational only; every request reloads the user row
so a role change or archive takes effect immediately.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from staffhub.config import settings


def _encode(data: dict[str, Any], lifetime: timedelta, token_type: str) -> str:
    to_encode: dict[str, Any] = data.copy()
    # 만료 시간 — 현재 UTC + 수명 (Expiry from current UTC + lifetime)
    expire: datetime = datetime.now(timezone.utc) + lifetime
    # jti — 같은 초에 발급된 토큰도 서로 다름 (Tokens issued in the same second stay unique)
    to_encode.update({"exp": expire, "type": token_type, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a JWT access token. Expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES.

    Args:
        data: 페이로드 — 보통 {"sub": user_id, "role": role} (JWT payload data)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    return _encode(data, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a JWT refresh token. Expires after JWT_REFRESH_TOKEN_EXPIRE_DAYS;
    the token string is also persisted so logout can revoke it.

    Args:
        data: 페이로드 (Same structure as the access token payload)

    Returns:
        str: 인코딩된 JWT 리프레시 토큰 문자열 (Encoded refresh token)
    """
    return _encode(data, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS), "refresh")


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
