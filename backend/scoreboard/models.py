from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base


class Faculty(Base):
    __tablename__ = "faculties"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), unique=True, nullable=False)
    short_name = Column(String(32), nullable=False)
    color = Column(String(32), default="gray", nullable=False)

    standings = relationship("FacultyStanding", back_populates="faculty")


class Competition(Base):
    __tablename__ = "competitions"

    id = Column(String(64), primary_key=True)
    name = Column(String(120), unique=True, nullable=False)
    kind = Column(String(16), nullable=False, index=True)
    format = Column(String(16), nullable=False)
    category = Column(String(16), default="team", nullable=False)
    icon = Column(String(64), nullable=True)

    matches = relationship("Match", back_populates="competition")

    __table_args__ = (
        CheckConstraint("kind in ('sport', 'art')", name="ck_competition_kind_valid"),
        CheckConstraint("format in ('elimination', 'table')", name="ck_competition_format_valid"),
        CheckConstraint(
            "category in ('individual', 'team', 'mixed')",
            name="ck_competition_category_valid",
        ),
    )


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    competition_id = Column(String(64), ForeignKey("competitions.id"), nullable=False, index=True)

    # Arts matches historically carry a placeholder pair here; their real
    # results live in arts_scores.
    faculty1_id = Column(String(64), ForeignKey("faculties.id"), nullable=False, index=True)
    faculty2_id = Column(String(64), ForeignKey("faculties.id"), nullable=False, index=True)

    score1 = Column(Integer, default=0, nullable=False)
    score2 = Column(Integer, default=0, nullable=False)
    status = Column(String(16), default="scheduled", nullable=False, index=True)

    date = Column(String(10), nullable=True)
    time = Column(String(5), nullable=True)
    location = Column(String(120), nullable=True)
    round = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    competition = relationship("Competition", back_populates="matches")
    faculty1 = relationship("Faculty", foreign_keys=[faculty1_id])
    faculty2 = relationship("Faculty", foreign_keys=[faculty2_id])
    arts_scores = relationship(
        "ArtsPerformanceScore",
        back_populates="match",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("score1 >= 0", name="ck_match_score1_nonnegative"),
        CheckConstraint("score2 >= 0", name="ck_match_score2_nonnegative"),
        CheckConstraint(
            "status in ('scheduled', 'live', 'completed')",
            name="ck_match_status_valid",
        ),
    )


class ArtsPerformanceScore(Base):
    __tablename__ = "arts_scores"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    faculty_id = Column(String(64), ForeignKey("faculties.id"), nullable=False, index=True)
    score = Column(Float, nullable=False)

    match = relationship("Match", back_populates="arts_scores")
    faculty = relationship("Faculty")

    __table_args__ = (
        UniqueConstraint("match_id", "faculty_id", name="uq_arts_score_match_faculty"),
        CheckConstraint("score >= 0", name="ck_arts_score_nonnegative"),
    )


class MedalAward(Base):
    # Source of truth for faculty_standings. match_id is not a foreign key;
    # awards of a deleted match are retracted by the match-deleted handler.
    __tablename__ = "medal_awards"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, nullable=False, index=True)
    faculty_id = Column(String(64), ForeignKey("faculties.id"), nullable=False, index=True)
    competition_id = Column(String(64), ForeignKey("competitions.id"), nullable=False, index=True)
    tier = Column(String(8), nullable=False)
    # "<competition_id>:<tier>" for sport elimination medals, NULL for arts.
    podium_slot = Column(String(80), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    faculty = relationship("Faculty")

    __table_args__ = (
        UniqueConstraint("match_id", "tier", name="uq_medal_award_match_tier"),
        UniqueConstraint("podium_slot", name="uq_medal_award_podium_slot"),
        CheckConstraint("tier in ('gold', 'silver', 'bronze')", name="ck_medal_award_tier_valid"),
    )


class FacultyStanding(Base):
    __tablename__ = "faculty_standings"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(String(64), ForeignKey("faculties.id"), nullable=False, index=True)
    competition_id = Column(String(64), ForeignKey("competitions.id"), nullable=False, index=True)

    gold = Column(Integer, default=0, nullable=False)
    silver = Column(Integer, default=0, nullable=False)
    bronze = Column(Integer, default=0, nullable=False)
    total_points = Column(Integer, default=0, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    faculty = relationship("Faculty", back_populates="standings")
    competition = relationship("Competition")

    __table_args__ = (
        UniqueConstraint("faculty_id", "competition_id", name="uq_standing_faculty_competition"),
        CheckConstraint("gold >= 0 and silver >= 0 and bronze >= 0", name="ck_standing_counts_nonnegative"),
        CheckConstraint(
            "total_points = gold * 3 + silver * 2 + bronze",
            name="ck_standing_total_points_weighted",
        ),
    )
