from . import medals, models, schemas


def match_to_read(match: models.Match) -> schemas.MatchRead:
    competition = match.competition
    faculty1 = match.faculty1
    faculty2 = match.faculty2

    return schemas.MatchRead(
        id=match.id,
        competition_id=match.competition_id,
        competition=competition.name if competition else match.competition_id,
        competition_kind=competition.kind if competition else "sport",
        competition_format=competition.format if competition else "elimination",
        faculty1_id=match.faculty1_id,
        faculty1=faculty1.name if faculty1 else "TBD",
        faculty1_short_name=faculty1.short_name if faculty1 else "TBD",
        faculty2_id=match.faculty2_id,
        faculty2=faculty2.name if faculty2 else "TBD",
        faculty2_short_name=faculty2.short_name if faculty2 else "TBD",
        score1=match.score1,
        score2=match.score2,
        status=match.status,
        date=match.date,
        time=match.time,
        location=match.location,
        round=match.round,
        notes=match.notes,
        medal_round=bool(competition and medals.is_medal_round(competition, match.round)),
    )


def arts_entries_to_pairs(entries: list[schemas.ArtsScoreEntry]) -> list[tuple[str, float]]:
    return [(entry.faculty_id, entry.score) for entry in entries]
