# ranker.py
import logging
from typing import List, Optional, Sequence

from tabulate import tabulate

from .config import DEFAULT_RECOMMENDATION_LIMIT, JOB_MATCH_STORE_LIMIT
from .db import MongoDBManager
from .errors import CatalogUnavailable
from .extractor import parse_resume_source
from .models import JobMatch, Profile, SkillRecommendation
from .recommender import SkillRecommender, add_progression_entry, adopt_skill
from .scorer import match_jobs

logger = logging.getLogger(__name__)


def _print_matches(matches: List[JobMatch]) -> None:
    table = [
        [
            idx + 1,
            m.title,
            m.company,
            round(m.score, 4),
            round(m.skill_match_percentage, 4),
            round(m.experience_match.years, 2) if m.experience_match else "-",
            m.education_match.degree_level if m.education_match else "-",
            ", ".join(m.matching_skills),
        ]
        for idx, m in enumerate(matches)
    ]
    print(
        tabulate(
            table,
            headers=["Rank", "Title", "Company", "Score", "Skills", "Years", "Degree", "Matching"],
            tablefmt="github",
        )
    )


def _print_recommendations(recommendations: List[SkillRecommendation]) -> None:
    table = [
        [
            r.skill,
            round(r.relevance, 3),
            r.required_by,
            r.growth_trend.value,
            r.difficulty,
            r.reason,
        ]
        for r in recommendations
    ]
    print(
        tabulate(
            table,
            headers=["Skill", "Relevance", "Jobs", "Trend", "Difficulty", "Reason"],
            tablefmt="github",
        )
    )


# ---------- Pipelines ----------
def analyze_resume(
    user_id: str,
    source: str,
    db: Optional[MongoDBManager] = None,
) -> List[JobMatch]:
    """Parse a resume, store it on the profile, then store the best job matches."""
    db = db or MongoDBManager()

    record = parse_resume_source(source)
    db.save_parsed_resume(user_id, record)

    matches = match_jobs(record, db)
    db.save_job_matches(user_id, matches[:JOB_MATCH_STORE_LIMIT])
    logger.info("Found %d potential job matches for %s", len(matches), user_id)
    return matches


def rank_jobs_for_user(
    user_id: str,
    top_k: int = JOB_MATCH_STORE_LIMIT,
    quick: bool = False,
    db: Optional[MongoDBManager] = None,
) -> List[JobMatch]:
    db = db or MongoDBManager()

    profile = db.get_profile(user_id)
    if profile.parsed_resume is None:
        raise ValueError(f"No parsed resume stored for user {user_id}")

    preferences = (
        profile.job_preferences.to_candidate_preferences()
        if profile.job_preferences
        else None
    )
    matches = match_jobs(profile.parsed_resume, db, preferences, quick=quick)
    top_matches = matches[:top_k]
    db.save_job_matches(user_id, top_matches)

    if not top_matches:
        print("No jobs found.")
    else:
        _print_matches(top_matches)
    return top_matches


def recommend_for_user(
    user_id: str,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    db: Optional[MongoDBManager] = None,
) -> List[SkillRecommendation]:
    db = db or MongoDBManager()
    profile = db.get_profile(user_id)

    try:
        jobs = db.get_jobs()
    except CatalogUnavailable as exc:
        # recommendations degrade to empty instead of failing
        logger.warning("Job catalog unavailable, no recommendations: %s", exc)
        jobs = []

    recommender = SkillRecommender()
    recommendations = recommender.recommend(profile, jobs, limit)
    insights = recommender.insights(profile)

    if recommendations:
        _print_recommendations(recommendations)
    else:
        print("No skill recommendations.")
    for insight in insights:
        print(f"[{insight.type}] {insight.message}")
    return recommendations


def adopt_skill_for_user(
    user_id: str,
    skill: str,
    db: Optional[MongoDBManager] = None,
) -> Profile:
    db = db or MongoDBManager()
    profile = db.get_profile(user_id)

    updated = adopt_skill(profile, skill)
    if updated is not profile:
        fields = updated.to_dict()
        db.update_profile_fields(
            user_id,
            {
                "skills": fields["skills"],
                "skill_assessments": fields["skill_assessments"],
            },
        )
        logger.info("Added %s to the learning journey of %s", skill, user_id)
    return updated


def add_progress_for_user(
    user_id: str,
    achievement: str,
    skills_gained: Sequence[str] = (),
    db: Optional[MongoDBManager] = None,
) -> Profile:
    """Record an achievement (and the skills it brought) in the career history."""
    db = db or MongoDBManager()
    profile = db.get_profile(user_id)

    updated = add_progression_entry(profile, achievement, skills_gained)
    db.update_profile_fields(
        user_id,
        {"career_progression": updated.to_dict()["career_progression"]},
    )
    logger.info("Recorded progress for %s: %s", user_id, achievement)
    return updated
