# recommender.py
import logging
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from .config import (
    COMPLEMENTARY_WEIGHT,
    DEFAULT_RECOMMENDATION_LIMIT,
    FAST_PROGRESS_PER_MONTH,
    FREQUENCY_CAP,
    RISING_THRESHOLD,
    ROLE_SKILLS,
    SKILL_METADATA,
    STABLE_THRESHOLD,
    STAGNANT_MIN_DAYS,
    STAGNANT_PER_MONTH,
    TARGET_ROLE_WEIGHT,
)
from .models import (
    CareerProgressionEntry,
    GrowthTrend,
    JobPosting,
    Profile,
    SkillAssessment,
    SkillInsight,
    SkillRecommendation,
    normalize_skills,
)

logger = logging.getLogger(__name__)

FAST_PROGRESS = "fast-progress"
STAGNANT = "stagnant"


def growth_trend(frequency: int, total_jobs: int) -> GrowthTrend:
    if frequency > total_jobs * RISING_THRESHOLD:
        return GrowthTrend.RISING
    if frequency > total_jobs * STABLE_THRESHOLD:
        return GrowthTrend.STABLE
    return GrowthTrend.DECLINING


def skill_frequency(jobs: Iterable[JobPosting]) -> Counter:
    counts: Counter = Counter()
    for job in jobs:
        counts.update(sorted(normalize_skills(job.required_skills)))
    return counts


class SkillRecommender:
    """Ranks skills a candidate is missing against what the job catalog asks for."""

    def __init__(
        self,
        skill_metadata: Optional[Dict[str, Dict]] = None,
        role_skills: Optional[Dict[str, Sequence[str]]] = None,
    ) -> None:
        self.skill_metadata = {
            k.lower(): v for k, v in (skill_metadata or SKILL_METADATA).items()
        }
        self.role_skills = {
            k.lower(): tuple(s.lower() for s in v)
            for k, v in (role_skills or ROLE_SKILLS).items()
        }

    def relevant_skills(self, target_roles: Iterable[str]) -> set:
        relevant = set()
        for role in target_roles:
            role = role.lower()
            key = next((k for k in self.role_skills if k in role), None)
            if key:
                relevant.update(self.role_skills[key])
        return relevant

    def complementary_score(self, skill: str, current_skills: frozenset) -> float:
        related = [
            s
            for group in self.role_skills.values()
            if skill in group
            for s in group
        ]
        if not related:
            return 0.0
        return sum(1 for s in related if s in current_skills) / len(related)

    def recommend(
        self,
        profile: Profile,
        jobs: Optional[Sequence[JobPosting]],
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    ) -> List[SkillRecommendation]:
        jobs = jobs or []
        if not jobs:
            return []

        current_skills = normalize_skills(profile.skills)
        target_roles = profile.target_roles
        relevant = self.relevant_skills(target_roles)
        frequencies = skill_frequency(jobs)
        total_jobs = len(jobs)

        recommendations = []
        for skill, frequency in frequencies.items():
            if frequency <= 0 or skill in current_skills:
                continue
            info = self.skill_metadata.get(skill)
            if not info:
                continue

            is_relevant = skill in relevant
            complementary = self.complementary_score(skill, current_skills)
            relevance = (
                (TARGET_ROLE_WEIGHT if is_relevant else 0.0)
                + min(frequency / total_jobs, FREQUENCY_CAP)
                + complementary * COMPLEMENTARY_WEIGHT
            )

            if is_relevant:
                reason = f"Required for {' or '.join(target_roles)} roles"
            elif complementary > 0:
                reason = "Complements your current skill set"
            else:
                reason = "In-demand skill in your target industry"

            recommendations.append(
                SkillRecommendation(
                    skill=skill,
                    relevance=relevance,
                    reason=reason,
                    required_by=frequency,
                    growth_trend=growth_trend(frequency, total_jobs),
                    difficulty=int(info["difficulty"]),
                )
            )

        recommendations.sort(key=lambda r: r.relevance, reverse=True)
        return recommendations[:limit]

    @staticmethod
    def insights(profile: Profile, now: Optional[datetime] = None) -> List[SkillInsight]:
        now = now or datetime.now(timezone.utc)
        results = []

        for assessment in profile.skill_assessments:
            mentions = [
                p for p in profile.career_progression
                if assessment.skill in p.skills_gained
            ]
            if not mentions:
                continue
            first = min(mentions, key=lambda p: p.date)

            days = (now - first.date).days
            gained = assessment.level - 1
            if days == 0:
                # same-day entries: any gain counts as fast
                velocity = float("inf") if gained > 0 else None
            else:
                velocity = gained / (days / 30)

            if velocity is None:
                continue
            if velocity > FAST_PROGRESS_PER_MONTH:
                results.append(
                    SkillInsight(
                        skill=assessment.skill,
                        type=FAST_PROGRESS,
                        message=f"Great progress in {assessment.skill}! You're learning this skill quickly.",
                    )
                )
            elif velocity < STAGNANT_PER_MONTH and days > STAGNANT_MIN_DAYS:
                results.append(
                    SkillInsight(
                        skill=assessment.skill,
                        type=STAGNANT,
                        message=f"Consider focusing more on {assessment.skill} - progress has been slow.",
                    )
                )

        return results


def recommend_skills(
    profile: Profile,
    jobs: Optional[Sequence[JobPosting]],
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> List[SkillRecommendation]:
    return SkillRecommender().recommend(profile, jobs, limit)


def skill_insights(profile: Profile, now: Optional[datetime] = None) -> List[SkillInsight]:
    return SkillRecommender.insights(profile, now)


# ---------- Profile Updates ----------
def adopt_skill(profile: Profile, skill: str, now: Optional[datetime] = None) -> Profile:
    """Add a recommended skill to the profile with a level 1 assessment."""
    skill = skill.strip()
    if skill.lower() in normalize_skills(profile.skills):
        return profile

    assessment = SkillAssessment(
        skill=skill,
        level=1,
        last_assessed=now or datetime.now(timezone.utc),
    )
    return replace(
        profile,
        skills=profile.skills + (skill,),
        skill_assessments=profile.skill_assessments + (assessment,),
    )


def add_progression_entry(
    profile: Profile,
    achievement: str,
    skills_gained: Sequence[str] = (),
    now: Optional[datetime] = None,
) -> Profile:
    achievement = achievement.strip()
    if not achievement:
        raise ValueError("achievement must not be empty")

    entry = CareerProgressionEntry(
        date=now or datetime.now(timezone.utc),
        title=profile.job_title,
        achievements=(achievement,),
        skills_gained=tuple(skills_gained),
    )
    return replace(profile, career_progression=profile.career_progression + (entry,))
