"""Coach library: focuses, drills and drill media."""
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.database import Base
from app.models.enums import DrillCategory, DrillMediaKind, enum_values
from app.models.program import JSONList


class Focus(Base):
    """A named theme for a day (e.g. "Stay closed"), referenced by days and overrides."""

    __tablename__ = "program_focuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(String(64), nullable=False, index=True)
    coach_user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    cues = Column(JSONList, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Drill(Base):
    __tablename__ = "program_drills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(String(64), nullable=False, index=True)
    coach_user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(140), nullable=False)
    category = Column(
        SQLEnum(
            DrillCategory,
            name="drill_category",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=DrillCategory.OTHER,
    )
    goal = Column(Text, nullable=True)
    equipment = Column(JSONList, nullable=False, default=list)
    cues = Column(JSONList, nullable=False, default=list)
    common_mistakes = Column(JSONList, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    media = relationship(
        "DrillMedia",
        back_populates="drill",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DrillMedia.sort_order",
        lazy="selectin",
    )


class DrillMedia(Base):
    """Instructional media attached to a drill: an internal video or an external link."""

    __tablename__ = "program_drill_media"

    id = Column(Integer, primary_key=True, autoincrement=True)
    drill_id = Column(
        Integer, ForeignKey("program_drills.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(
        SQLEnum(
            DrillMediaKind,
            name="drill_media_kind",
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        nullable=False,
    )
    title = Column(String(140), nullable=True)
    video_id = Column(String(64), nullable=True)
    external_url = Column(String(2000), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    drill = relationship("Drill", back_populates="media")

    @property
    def target(self) -> str | None:
        """The video id or URL this media points at, depending on kind."""
        if self.kind == DrillMediaKind.INTERNAL_VIDEO:
            return self.video_id
        return self.external_url
