"""그룹 SQLAlchemy ORM 모델 정의.

Group SQLAlchemy ORM model definitions.
Groups are named audiences for knowledge articles and updates. Membership
is stored on ``User.groups``; program memberships are derived as
``auto-program-<program>`` tags at read time.

Tables:
    - groups: 그룹 (Named user groups)
"""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Group(Base):
    """그룹 모델 — 콘텐츠 대상 지정용 사용자 그룹.

    Group model — Named audience used to target content.

    Attributes:
        name: 그룹 이름, 고유 (Unique group name)
        category: 분류 (Free-form category, e.g. "Program", "Department")
        created_by: 생성자 FK (Creator)
        administered_by: 관리자 FK (Administering user)
    """

    __tablename__ = "groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    administered_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
