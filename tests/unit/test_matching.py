from vagasrmc.core.matching import calculate_match_score, skill_matches, tokenize

DESCRIPTION = "Procuramos desenvolvedor Python com Django para APIs REST no time de backend."


def test_half_of_skills_present_scores_fifty() -> None:
    assert calculate_match_score(["Python", "Django", "React", "Docker"], DESCRIPTION) == 50


def test_no_skills_scores_zero() -> None:
    assert calculate_match_score([], DESCRIPTION) == 0
    assert calculate_match_score(["", "   "], DESCRIPTION) == 0


def test_matching_is_case_insensitive() -> None:
    assert calculate_match_score(["PYTHON"], "python developer") == 100


def test_skill_matches_by_containment_in_either_direction() -> None:
    tokens = tokenize("Experiência com PostgreSQL")
    assert skill_matches("postgres", tokens)
    assert skill_matches("sql", tokens)
    assert skill_matches("postgresql16", tokens)
    assert not skill_matches("kotlin", tokens)


def test_short_skills_over_match_substrings() -> None:
    assert calculate_match_score(["go"], "we are going places") == 100


def test_score_rounds_half_up() -> None:
    # 1 of 8 skills -> 12.5% -> 13
    skills = ["python", "a1", "b2", "c3", "d4", "e5", "f6", "g7"]
    assert calculate_match_score(skills, "python") == 13
    # 2 of 3 skills -> 66.67% -> 67
    assert calculate_match_score(["python", "django", "kotlin"], "python django") == 67


def test_score_is_bounded() -> None:
    score = calculate_match_score(["python", "django"], DESCRIPTION)
    assert 0 <= score <= 100
