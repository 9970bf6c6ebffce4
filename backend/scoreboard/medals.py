import logging
from collections.abc import Iterable
from typing import Literal, NamedTuple

logger = logging.getLogger(__name__)

MedalTier = Literal["gold", "silver", "bronze"]

ROUND_FINAL = "Final"
ROUND_THIRD_PLACE = "3rd Place"
ROUND_LOWER_FINAL = "Lower Final"
MEDAL_ROUNDS = frozenset({ROUND_FINAL, ROUND_THIRD_PLACE, ROUND_LOWER_FINAL})

PODIUM_TIERS: tuple[MedalTier, ...] = ("gold", "silver", "bronze")
MEDAL_POINTS: dict[str, int] = {"gold": 3, "silver": 2, "bronze": 1}


class MedalAssignment(NamedTuple):
    faculty_id: str
    competition_id: str
    tier: MedalTier


class RankedScore(NamedTuple):
    faculty_id: str
    score: float


def compute_total_points(gold: int, silver: int, bronze: int) -> int:
    return (
        gold * MEDAL_POINTS["gold"]
        + silver * MEDAL_POINTS["silver"]
        + bronze * MEDAL_POINTS["bronze"]
    )


def normalize_round(value: str | None) -> str | None:
    if value is None:
        return None
    clean = " ".join(value.split())
    return clean or None


def rank_scores(scores: Iterable[tuple[str, float]]) -> list[RankedScore]:
    ranked = [RankedScore(str(faculty_id), float(score)) for faculty_id, score in scores]
    ranked.sort(key=lambda item: (-item.score, item.faculty_id))
    return ranked


def is_arts_final(competition, round_label: str | None) -> bool:
    return competition.kind == "art" and normalize_round(round_label) == ROUND_FINAL


def is_medal_round(competition, round_label: str | None) -> bool:
    if is_arts_final(competition, round_label):
        return True
    return competition.format == "elimination" and normalize_round(round_label) in MEDAL_ROUNDS


def has_single_podium(competition) -> bool:
    return competition.kind == "sport" and competition.format == "elimination"


def podium_slot(round_label: str | None) -> str | None:
    # 3rd Place and Lower Final compete for the same single bronze.
    label = normalize_round(round_label)
    if label == ROUND_FINAL:
        return "final"
    if label in (ROUND_THIRD_PLACE, ROUND_LOWER_FINAL):
        return "bronze"
    return None


def podium_slot_rounds(slot: str) -> tuple[str, ...]:
    if slot == "final":
        return (ROUND_FINAL,)
    return (ROUND_THIRD_PLACE, ROUND_LOWER_FINAL)


def winner_and_loser(match) -> tuple[str, str] | None:
    score1 = match.score1 or 0
    score2 = match.score2 or 0
    if score1 == score2:
        return None
    if score1 > score2:
        return match.faculty1_id, match.faculty2_id
    return match.faculty2_id, match.faculty1_id


def _evaluate_arts_final(competition, arts_scores) -> list[MedalAssignment]:
    ranked = rank_scores(arts_scores or [])
    if not ranked:
        logger.debug("Arts final for %s has no scores yet; judging in progress", competition.id)
        return []

    return [
        MedalAssignment(entry.faculty_id, competition.id, tier)
        for entry, tier in zip(ranked, PODIUM_TIERS)
    ]


def _evaluate_elimination(match, competition) -> list[MedalAssignment]:
    round_label = normalize_round(match.round)
    if round_label not in MEDAL_ROUNDS:
        return []

    result = winner_and_loser(match)
    if result is None:
        logger.warning(
            "Match %s (%s) is level at %s-%s; no medals granted",
            match.id,
            round_label,
            match.score1,
            match.score2,
        )
        return []

    winner_id, loser_id = result
    if round_label == ROUND_FINAL:
        return [
            MedalAssignment(winner_id, competition.id, "gold"),
            MedalAssignment(loser_id, competition.id, "silver"),
        ]
    if round_label == ROUND_THIRD_PLACE:
        return [MedalAssignment(winner_id, competition.id, "bronze")]
    return [MedalAssignment(loser_id, competition.id, "bronze")]


def evaluate(match, competition, arts_scores: Iterable[tuple[str, float]] | None = None) -> list[MedalAssignment]:
    """Return the medals ``match`` grants; an empty list means nothing to award."""
    if match.status != "completed":
        return []

    if competition is None:
        logger.info("Skipping medals for match %s: competition not found", match.id)
        return []

    if is_arts_final(competition, match.round):
        return _evaluate_arts_final(competition, arts_scores)

    if competition.format == "elimination":
        return _evaluate_elimination(match, competition)

    logger.debug(
        "Skipping medals for match %s: %s/%s round %r is not a medal round",
        match.id,
        competition.kind,
        competition.format,
        match.round,
    )
    return []
