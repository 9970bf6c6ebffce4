from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ORMBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


MatchStatus = Literal["scheduled", "live", "completed"]
CompetitionKind = Literal["sport", "art"]
CompetitionFormat = Literal["elimination", "table"]
CompetitionCategory = Literal["individual", "team", "mixed"]
MedalTier = Literal["gold", "silver", "bronze"]


class FacultyRead(ORMBaseModel):
    id: str
    name: str
    short_name: str
    color: str


class CompetitionRead(ORMBaseModel):
    id: str
    name: str
    kind: CompetitionKind
    format: CompetitionFormat
    category: CompetitionCategory
    icon: str | None = None


class MatchCreate(BaseModel):
    competition_id: str = Field(min_length=1, max_length=64)
    faculty1_id: str = Field(min_length=1, max_length=64)
    faculty2_id: str = Field(min_length=1, max_length=64)

    score1: int = Field(default=0, ge=0)
    score2: int = Field(default=0, ge=0)
    status: MatchStatus = "scheduled"

    date: str | None = Field(default=None, max_length=10)
    time: str | None = Field(default=None, max_length=5)
    location: str | None = Field(default=None, max_length=120)
    round: str | None = Field(default=None, max_length=64)
    notes: str | None = None


class MatchUpdate(BaseModel):
    competition_id: str | None = Field(default=None, min_length=1, max_length=64)
    faculty1_id: str | None = Field(default=None, min_length=1, max_length=64)
    faculty2_id: str | None = Field(default=None, min_length=1, max_length=64)

    score1: int | None = Field(default=None, ge=0)
    score2: int | None = Field(default=None, ge=0)
    status: MatchStatus | None = None

    date: str | None = Field(default=None, max_length=10)
    time: str | None = Field(default=None, max_length=5)
    location: str | None = Field(default=None, max_length=120)
    round: str | None = Field(default=None, max_length=64)
    notes: str | None = None


class ScoreUpdate(BaseModel):
    score1: int = Field(ge=0)
    score2: int = Field(ge=0)
    status: MatchStatus = "completed"


class MatchRead(BaseModel):
    id: int

    competition_id: str
    competition: str
    competition_kind: CompetitionKind
    competition_format: CompetitionFormat

    faculty1_id: str
    faculty1: str
    faculty1_short_name: str

    faculty2_id: str
    faculty2: str
    faculty2_short_name: str

    score1: int
    score2: int
    status: MatchStatus

    date: str | None = None
    time: str | None = None
    location: str | None = None
    round: str | None = None
    notes: str | None = None

    medal_round: bool = False


class ArtsScoreEntry(BaseModel):
    faculty_id: str = Field(min_length=1, max_length=64)
    score: float = Field(ge=0)


class ArtsScoresUpdate(BaseModel):
    scores: list[ArtsScoreEntry] = Field(default_factory=list)


class RankedScoreRead(BaseModel):
    rank: int
    faculty_id: str
    faculty: str
    short_name: str
    color: str
    score: float


class PodiumRead(BaseModel):
    match_id: int
    judging_in_progress: bool
    podium: list[RankedScoreRead] = Field(default_factory=list)


class FacultyStandingRead(BaseModel):
    faculty_id: str
    faculty: str
    short_name: str
    competition_id: str
    competition: str

    gold: int
    silver: int
    bronze: int
    total_points: int


class MedalTallyRow(BaseModel):
    rank: int
    faculty_id: str
    faculty_name: str
    faculty_short_name: str
    color: str

    total_gold: int = 0
    total_silver: int = 0
    total_bronze: int = 0
    total_points: int = 0


class TableStandingRow(BaseModel):
    rank: int
    faculty_id: str
    faculty: str
    short_name: str
    points: float
    performances: int


class SyncReport(BaseModel):
    matches_considered: int
    matches_awarded: int
    matches_skipped: int
    awards_granted: int


class TallyResetResponse(BaseModel):
    standings_deleted: int
    awards_deleted: int
