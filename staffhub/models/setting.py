"""설정 SQLAlchemy ORM 모델 정의.

Setting SQLAlchemy ORM model definitions.

Tables:
    - settings: 키-값 설정 (Runtime key/value settings)
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffhub.database import Base, UTCDateTime, utcnow


class Setting(Base):
    """런타임 설정 — 고유 키와 JSON 값.

    Runtime setting — Unique key with a JSON value. Values here override
    the matching ``staffhub.config`` defaults (e.g. ``auto_clock_out_max_hours``).
    """

    __tablename__ = "settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
