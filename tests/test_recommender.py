"""
Tests for skill recommendations and progress insights.
"""
from datetime import datetime, timezone

import pytest

from career_matcher.models import (
    CareerGoals,
    CareerProgressionEntry,
    GrowthTrend,
    JobPosting,
    Profile,
    SkillAssessment,
)
from career_matcher.recommender import (
    SkillRecommender,
    add_progression_entry,
    adopt_skill,
    growth_trend,
    recommend_skills,
    skill_insights,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _job(*skills):
    return JobPosting(title="Engineer", company="Acme", required_skills=frozenset(skills))


@pytest.fixture
def catalog():
    return [
        _job("javascript", "react", "python"),
        _job("javascript", "sql"),
        _job("react", "cobol"),
        _job("docker"),
    ]


@pytest.fixture
def frontend_profile():
    return Profile(
        user_id="u1",
        skills=("Python",),
        career_goals=CareerGoals(target_roles=("Frontend Developer",)),
    )


def test_recommendations_ranked_by_relevance(frontend_profile, catalog):
    recommendations = recommend_skills(frontend_profile, catalog)

    assert [r.skill for r in recommendations] == ["javascript", "react", "docker", "sql"]

    javascript = recommendations[0]
    assert javascript.relevance == pytest.approx(0.7)
    assert javascript.reason == "Required for Frontend Developer roles"
    assert javascript.required_by == 2
    assert javascript.growth_trend is GrowthTrend.STABLE
    assert javascript.difficulty == 2

    docker = recommendations[2]
    assert docker.relevance == pytest.approx(0.25 + 0.1)
    assert docker.reason == "Complements your current skill set"

    sql = recommendations[3]
    assert sql.relevance == pytest.approx(0.25 + 0.3 / 7)


def test_never_recommends_current_skills(frontend_profile, catalog):
    skills = {r.skill for r in recommend_skills(frontend_profile, catalog)}

    assert "python" not in skills


def test_unknown_skills_are_skipped(frontend_profile, catalog):
    skills = {r.skill for r in recommend_skills(frontend_profile, catalog)}

    assert "cobol" not in skills


def test_limit_truncates(frontend_profile, catalog):
    recommendations = recommend_skills(frontend_profile, catalog, limit=2)

    assert [r.skill for r in recommendations] == ["javascript", "react"]


def test_empty_catalog_gives_no_recommendations(frontend_profile):
    assert recommend_skills(frontend_profile, []) == []
    assert recommend_skills(frontend_profile, None) == []


def test_in_demand_fallback_reason():
    profile = Profile(user_id="u2")

    recommendations = recommend_skills(profile, [_job("aws")])

    assert recommendations[0].reason == "In-demand skill in your target industry"
    assert recommendations[0].growth_trend is GrowthTrend.RISING
    # frequency share capped at 0.3
    assert recommendations[0].relevance == pytest.approx(0.3)


def test_injected_tables():
    recommender = SkillRecommender(
        skill_metadata={"rust": {"category": "programming", "difficulty": 4}},
        role_skills={"systems": ["rust", "c"]},
    )
    profile = Profile(
        user_id="u3",
        skills=("c",),
        career_goals=CareerGoals(target_roles=("Systems Programmer",)),
    )

    recommendations = recommender.recommend(profile, [_job("rust"), _job("python")])

    assert [r.skill for r in recommendations] == ["rust"]
    assert recommendations[0].difficulty == 4
    assert recommendations[0].relevance == pytest.approx(0.4 + 0.3 + 0.15)


@pytest.mark.parametrize(
    "frequency,total,expected",
    [
        (6, 10, GrowthTrend.RISING),
        (5, 10, GrowthTrend.STABLE),
        (3, 10, GrowthTrend.STABLE),
        (2, 10, GrowthTrend.DECLINING),
    ],
)
def test_growth_trend_thresholds(frequency, total, expected):
    assert growth_trend(frequency, total) is expected


# ---------- Insights ----------
def _entry(date, *skills):
    return CareerProgressionEntry(date=date, title="Engineer", skills_gained=skills)


def test_insights():
    profile = Profile(
        user_id="u1",
        skill_assessments=(
            SkillAssessment(skill="python", level=4),
            SkillAssessment(skill="sql", level=1),
            SkillAssessment(skill="docker", level=2),
            SkillAssessment(skill="go", level=1),
        ),
        career_progression=(
            _entry(datetime(2024, 4, 2, tzinfo=timezone.utc), "python"),
            _entry(datetime(2023, 6, 1, tzinfo=timezone.utc), "sql"),
            _entry(datetime(2024, 5, 22, tzinfo=timezone.utc), "go"),
        ),
    )

    insights = skill_insights(profile, now=NOW)

    assert [(i.skill, i.type) for i in insights] == [
        ("python", "fast-progress"),
        ("sql", "stagnant"),
    ]
    assert insights[0].message == "Great progress in python! You're learning this skill quickly."


def test_insights_use_earliest_mention():
    profile = Profile(
        user_id="u1",
        skill_assessments=(SkillAssessment(skill="python", level=2),),
        career_progression=(
            _entry(datetime(2024, 5, 2, tzinfo=timezone.utc), "python"),
            _entry(datetime(2023, 1, 1, tzinfo=timezone.utc), "python"),
        ),
    )

    insights = skill_insights(profile, now=NOW)

    assert [i.type for i in insights] == ["stagnant"]


def test_same_day_progress():
    profile = Profile(
        user_id="u1",
        skill_assessments=(
            SkillAssessment(skill="python", level=3),
            SkillAssessment(skill="sql", level=1),
        ),
        career_progression=(_entry(NOW, "python", "sql"),),
    )

    insights = skill_insights(profile, now=NOW)

    assert [(i.skill, i.type) for i in insights] == [("python", "fast-progress")]


def test_future_dated_entry_gives_no_insight():
    profile = Profile(
        user_id="u1",
        skill_assessments=(SkillAssessment(skill="python", level=3),),
        career_progression=(_entry(datetime(2024, 9, 1, tzinfo=timezone.utc), "python"),),
    )

    assert skill_insights(profile, now=NOW) == []


def test_naive_entry_date_compares_with_aware_now():
    profile = Profile(
        user_id="u1",
        skill_assessments=(SkillAssessment(skill="python", level=4),),
        career_progression=(_entry(datetime(2024, 5, 1), "python"),),
    )

    insights = skill_insights(profile, now=NOW)

    assert [(i.skill, i.type) for i in insights] == [("python", "fast-progress")]


# ---------- Profile Updates ----------
def test_adopt_skill(frontend_profile):
    updated = adopt_skill(frontend_profile, "react", now=NOW)

    assert updated.skills == ("Python", "react")
    assert updated.skill_assessments[-1].skill == "react"
    assert updated.skill_assessments[-1].level == 1
    assert frontend_profile.skills == ("Python",)


def test_adopt_existing_skill_is_noop(frontend_profile):
    assert adopt_skill(frontend_profile, "python") is frontend_profile


def test_add_progression_entry():
    profile = Profile(user_id="u1", job_title="Data Analyst")

    updated = add_progression_entry(profile, "Shipped dashboard", ["sql"], now=NOW)

    entry = updated.career_progression[0]
    assert entry.title == "Data Analyst"
    assert entry.achievements == ("Shipped dashboard",)
    assert entry.skills_gained == ("sql",)


def test_add_progression_entry_requires_achievement():
    with pytest.raises(ValueError):
        add_progression_entry(Profile(user_id="u1"), "  ")
