"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Services raise these directly; FastAPI turns them into JSON error bodies
of the form ``{"detail": "..."}``.

Usage:
    from staffhub.utils.exceptions import NotFoundError, BadRequestError
    raise NotFoundError("Time entry not found")
    raise BadRequestError("Already clocked in")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a time entry, shift, document or other resource does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 고유 제약 위반 (username, email, group name, setting key)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 또는 잠긴 리소스.

    Raised when the caller's role lacks a permission, when a non-admin
    touches someone else's record, or when a locked time entry is modified.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 토큰 누락/만료/무효 또는 잘못된 자격증명."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 비즈니스 규칙 위반.

    Raised for rule violations Pydantic cannot see: clocking in twice,
    clocking out with no active entry, clock_out before clock_in.
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidTransitionError(BadRequestError):
    """정의되지 않은 상태 전이 — Undefined state transition (400).

    Args:
        entity: 엔티티 이름 (e.g. "time entry", "timesheet")
        current: 현재 상태 (Current state)
        action: 시도한 동작 (Attempted action)
    """

    def __init__(self, entity: str, current: str, action: str) -> None:
        super().__init__(f"Cannot {action} {entity} in status '{current}'")
