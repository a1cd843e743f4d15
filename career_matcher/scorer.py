# scorer.py
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence

from .config import (
    DEGREE_LEVEL_WEIGHT,
    DEGREE_RELEVANCY_WEIGHT,
    DEGREE_STOP_WORDS,
    EDUCATION_LEVELS,
    EDUCATION_WEIGHT,
    EXPERIENCE_RELEVANCY_WEIGHT,
    EXPERIENCE_WEIGHT,
    EXPERIENCE_YEARS_WEIGHT,
    FIELD_KEYWORDS,
    PREFERENCE_WEIGHT,
    QUICK_COVERAGE_WEIGHT,
    QUICK_EXPERIENCE_WEIGHT,
    QUICK_SIMILARITY_WEIGHT,
    SKILL_COVERAGE_WEIGHT,
    SKILL_RELEVANCE_WEIGHT,
    SKILL_WEIGHT,
    TITLE_OVERLAP_THRESHOLD,
)
from .models import (
    CandidatePreferences,
    EducationEntry,
    EducationMatch,
    ExperienceEntry,
    ExperienceMatch,
    JobMatch,
    JobPosting,
    ResumeRecord,
    normalize_skills,
)

logger = logging.getLogger(__name__)

YEARS_PATTERN = re.compile(r"(\d+)\s*year", re.IGNORECASE)
MONTHS_PATTERN = re.compile(r"(\d+)\s*month", re.IGNORECASE)
SALARY_PATTERN = re.compile(r"\d+(?:,\d{3})*")
WORD_SPLIT = re.compile(r"\W+")
DEGREE_FIELD_SPLIT = re.compile(r"[\s,]+")


# ---------- Skill Score ----------
def skill_match_percentage(
    candidate_skills: Iterable[str],
    required_skills: Iterable[str],
) -> float:
    candidate = normalize_skills(candidate_skills)
    required = normalize_skills(required_skills)
    matching = candidate & required

    coverage = len(matching) / len(required) if required else 0.0
    relevance = len(matching) / len(candidate) if candidate else 0.0

    return coverage * SKILL_COVERAGE_WEIGHT + relevance * SKILL_RELEVANCE_WEIGHT


def matching_skills(
    candidate_skills: Iterable[str],
    required_skills: Iterable[str],
) -> tuple:
    required = normalize_skills(required_skills)
    return tuple(sorted(s for s in candidate_skills if s.lower() in required))


# ---------- Experience Score ----------
def parse_duration_years(duration: str) -> float:
    years = 0.0
    year_match = YEARS_PATTERN.search(duration or "")
    month_match = MONTHS_PATTERN.search(duration or "")
    if year_match:
        years += int(year_match.group(1))
    if month_match:
        years += int(month_match.group(1)) / 12
    return years


def _title_words(title: str) -> set:
    return {w for w in WORD_SPLIT.split(title.lower()) if w}


def is_experience_relevant(
    experience_title: str,
    job_title: str,
    threshold: float = TITLE_OVERLAP_THRESHOLD,
) -> bool:
    job_words = _title_words(job_title)
    exp_words = _title_words(experience_title)
    if not job_words or not exp_words:
        return False

    overlap = len(job_words & exp_words)
    return overlap / min(len(job_words), len(exp_words)) >= threshold


def experience_match(
    experience: Sequence[ExperienceEntry],
    job: JobPosting,
) -> ExperienceMatch:
    total_years = 0.0
    relevant_years = 0.0

    for entry in experience:
        years = parse_duration_years(entry.duration)
        total_years += years
        if is_experience_relevant(entry.title, job.title):
            relevant_years += years

    return ExperienceMatch(
        years=total_years,
        relevancy=relevant_years / total_years if total_years > 0 else 0.0,
    )


# ---------- Education Score ----------
def degree_level(degree: str, levels: Optional[Dict[str, int]] = None) -> int:
    normalized = degree.lower()
    for name, value in (levels or EDUCATION_LEVELS).items():
        if name in normalized:
            return value
    return 0


def highest_degree(
    education: Sequence[EducationEntry],
    levels: Optional[Dict[str, int]] = None,
) -> Optional[EducationEntry]:
    if not education:
        return None

    best = education[0]
    for entry in education[1:]:
        if degree_level(entry.degree, levels) > degree_level(best.degree, levels):
            best = entry
    return best


def extract_job_fields(
    title: str,
    description: str,
    field_keywords: Iterable[str] = FIELD_KEYWORDS,
) -> List[str]:
    title = title.lower()
    description = description.lower()
    return [f for f in field_keywords if f in title or f in description]


def extract_degree_fields(degree: str) -> List[str]:
    stop_words = "|".join(re.escape(w) for w in DEGREE_STOP_WORDS)
    # whole words only: "engineering" keeps its "in", "software" its "of"
    cleaned = re.sub(rf"\b(?:{stop_words})\b", "", degree.lower()).strip()
    return list(dict.fromkeys(f for f in DEGREE_FIELD_SPLIT.split(cleaned) if f))


def degree_relevancy(
    degree: str,
    job: JobPosting,
    field_keywords: Iterable[str] = FIELD_KEYWORDS,
) -> float:
    job_fields = extract_job_fields(job.title, job.description, field_keywords)
    degree_fields = extract_degree_fields(degree)

    overlap = sum(
        1 for f in job_fields
        if any(f in d for d in degree_fields)
    )
    return overlap / max(len(job_fields), 1)


def education_match(
    education: Sequence[EducationEntry],
    job: JobPosting,
    levels: Optional[Dict[str, int]] = None,
    field_keywords: Iterable[str] = FIELD_KEYWORDS,
) -> EducationMatch:
    best = highest_degree(education, levels)
    if best is None:
        return EducationMatch(degree_level="none", relevancy=0.0)

    return EducationMatch(
        degree_level=best.degree,
        relevancy=degree_relevancy(best.degree, job, field_keywords),
    )


# ---------- Preference Score ----------
def extract_min_salary(salary_range: str) -> int:
    numbers = [int(n.replace(",", "")) for n in SALARY_PATTERN.findall(salary_range or "")]
    return min(numbers) if numbers else 0


def preference_score(
    job: JobPosting,
    preferences: Optional[CandidatePreferences],
) -> float:
    if preferences is None:
        return 1.0

    score = 0
    factors = 0
    location = (job.location or "").lower()

    if preferences.preferred_locations:
        factors += 1
        if any(loc.lower() in location for loc in preferences.preferred_locations):
            score += 1

    if preferences.minimum_salary and job.salary_range:
        factors += 1
        if extract_min_salary(job.salary_range) >= preferences.minimum_salary:
            score += 1

    if preferences.remote_only is not None:
        factors += 1
        if not preferences.remote_only or "remote" in location:
            score += 1

    return score / factors if factors > 0 else 1.0


# ---------- Final Score ----------
def compute_overall_score(
    skill_percentage: float,
    experience: ExperienceMatch,
    education: EducationMatch,
    pref_score: float,
    levels: Optional[Dict[str, int]] = None,
) -> float:
    # years is a raw count, so the result is not bounded to [0, 1]
    experience_score = (
        experience.years * EXPERIENCE_YEARS_WEIGHT
        + experience.relevancy * EXPERIENCE_RELEVANCY_WEIGHT
    )
    education_score = (
        degree_level(education.degree_level, levels) / 5 * DEGREE_LEVEL_WEIGHT
        + education.relevancy * DEGREE_RELEVANCY_WEIGHT
    )

    return (
        skill_percentage * SKILL_WEIGHT
        + experience_score * EXPERIENCE_WEIGHT
        + education_score * EDUCATION_WEIGHT
        + pref_score * PREFERENCE_WEIGHT
    )


# ---------- Quick Score ----------
def quick_experience_score(
    experience: Sequence[ExperienceEntry],
    job: JobPosting,
) -> float:
    if not experience:
        return 0.0

    years = 0.0
    for entry in experience:
        duration = entry.duration.lower()
        number = re.search(r"\d+", duration)
        value = int(number.group(0)) if number else 0
        years += value if "year" in duration else value / 12

    job_words = [w for w in job.title.lower().split(" ") if len(w) > 3]
    title_match = any(
        word in entry.title.lower()
        for entry in experience
        for word in job_words
    )
    return (0.7 if years > 3 else 0.3) + (0.3 if title_match else 0.0)


def quick_score(resume: ResumeRecord, job: JobPosting) -> JobMatch:
    """Basic matcher: overall overlap, required coverage and a coarse experience bucket."""
    matched = matching_skills(resume.skills, job.required_skills)
    required_count = len(job.required_skills)

    coverage = len(matched) / required_count if required_count else 0.0
    larger = max(len(resume.skills), required_count)
    similarity = len(matched) / larger if larger else 0.0

    score = (
        similarity * QUICK_SIMILARITY_WEIGHT
        + coverage * QUICK_COVERAGE_WEIGHT
        + quick_experience_score(resume.experience, job) * QUICK_EXPERIENCE_WEIGHT
    )
    return JobMatch(
        title=job.title,
        company=job.company,
        score=score,
        matching_skills=matched,
        skill_match_percentage=coverage,
    )


# ---------- Scorer ----------
class JobMatchScorer:
    """Scores a resume against job postings.

    ``education_levels`` and ``field_keywords`` default to the tables in
    ``config`` and can be swapped for tests or other catalogs.
    """

    def __init__(
        self,
        education_levels: Optional[Dict[str, int]] = None,
        field_keywords: Optional[Iterable[str]] = None,
    ) -> None:
        self.education_levels = dict(education_levels or EDUCATION_LEVELS)
        self.field_keywords = tuple(field_keywords or FIELD_KEYWORDS)

    def score_job(
        self,
        resume: ResumeRecord,
        job: JobPosting,
        preferences: Optional[CandidatePreferences] = None,
    ) -> JobMatch:
        skill_percentage = skill_match_percentage(resume.skills, job.required_skills)
        experience = experience_match(resume.experience, job)
        education = education_match(
            resume.education, job, self.education_levels, self.field_keywords
        )
        overall = compute_overall_score(
            skill_percentage,
            experience,
            education,
            preference_score(job, preferences),
            self.education_levels,
        )

        return JobMatch(
            title=job.title,
            company=job.company,
            score=overall,
            matching_skills=matching_skills(resume.skills, job.required_skills),
            skill_match_percentage=skill_percentage,
            experience_match=experience,
            education_match=education,
        )

    def score(
        self,
        resume: ResumeRecord,
        jobs: Sequence[JobPosting],
        preferences: Optional[CandidatePreferences] = None,
        quick: bool = False,
    ) -> List[JobMatch]:
        if quick:
            matches = [quick_score(resume, job) for job in jobs]
        else:
            matches = [self.score_job(resume, job, preferences) for job in jobs]

        # sorted() is stable, ties keep catalog order
        return sorted(matches, key=lambda m: m.score, reverse=True)


def score_jobs(
    resume: ResumeRecord,
    jobs: Sequence[JobPosting],
    preferences: Optional[CandidatePreferences] = None,
    quick: bool = False,
) -> List[JobMatch]:
    return JobMatchScorer().score(resume, jobs, preferences, quick=quick)


def match_jobs(
    resume: ResumeRecord,
    catalog,
    preferences: Optional[CandidatePreferences] = None,
    quick: bool = False,
    scorer: Optional[JobMatchScorer] = None,
) -> List[JobMatch]:
    """Fetch the catalog and rank it. CatalogUnavailable propagates."""
    jobs = catalog.get_jobs()
    logger.info("Scoring %d jobs", len(jobs))
    return (scorer or JobMatchScorer()).score(resume, jobs, preferences, quick=quick)
