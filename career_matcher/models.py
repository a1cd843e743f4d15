# models.py
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


def _pick(data: Dict, *keys: str, default: Any = None) -> Any:
    # stored documents use snake_case, the web app writes camelCase
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


# ---------- Resume ----------
@dataclass(frozen=True)
class ExperienceEntry:
    title: str
    company: str = ""
    duration: str = ""
    description: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EducationEntry:
    degree: str
    institution: str = ""
    year: str = ""


@dataclass(frozen=True)
class ResumeRecord:
    skills: frozenset = frozenset()
    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "skills": sorted(self.skills),
            "experience": [
                {**asdict(e), "description": list(e.description)}
                for e in self.experience
            ],
            "education": [asdict(e) for e in self.education],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ResumeRecord":
        return cls(
            skills=frozenset(s.lower() for s in data.get("skills") or []),
            experience=tuple(
                ExperienceEntry(
                    title=e.get("title") or "",
                    company=e.get("company") or "",
                    duration=e.get("duration") or "",
                    description=tuple(e.get("description") or ()),
                )
                for e in data.get("experience") or []
            ),
            education=tuple(
                EducationEntry(
                    degree=e.get("degree") or "",
                    institution=e.get("institution") or "",
                    year=e.get("year") or "",
                )
                for e in data.get("education") or []
            ),
        )


# ---------- Jobs ----------
@dataclass(frozen=True)
class JobPosting:
    title: str
    company: str
    required_skills: frozenset = frozenset()
    location: str = ""
    salary_range: str = ""
    description: str = ""
    job_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "JobPosting":
        if not data.get("title"):
            raise ValueError("Job posting requires a title")
        return cls(
            title=data["title"],
            company=data.get("company") or "",
            required_skills=frozenset(
                s.strip().lower()
                for s in _pick(data, "required_skills", "requiredSkills", default=[])
                if s and s.strip()
            ),
            location=data.get("location") or "",
            salary_range=_pick(data, "salary_range", "salaryRange", default=""),
            description=data.get("description") or "",
            job_id=_pick(data, "job_id", "id"),
        )

    def to_dict(self) -> Dict:
        return {
            "job_id": self.job_id,
            "title": self.title,
            "company": self.company,
            "required_skills": sorted(self.required_skills),
            "location": self.location,
            "salary_range": self.salary_range,
            "description": self.description,
        }


@dataclass(frozen=True)
class CandidatePreferences:
    preferred_locations: Tuple[str, ...] = ()
    minimum_salary: Optional[float] = None
    remote_only: Optional[bool] = None


# ---------- Match Results ----------
@dataclass(frozen=True)
class ExperienceMatch:
    years: float
    relevancy: float


@dataclass(frozen=True)
class EducationMatch:
    degree_level: str
    relevancy: float


@dataclass(frozen=True)
class JobMatch:
    title: str
    company: str
    score: float
    matching_skills: Tuple[str, ...]
    skill_match_percentage: float = 0.0
    # not computed by the quick matcher
    experience_match: Optional[ExperienceMatch] = None
    education_match: Optional[EducationMatch] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["matching_skills"] = list(self.matching_skills)
        return data


class GrowthTrend(str, Enum):
    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class SkillRecommendation:
    skill: str
    relevance: float
    reason: str
    required_by: int
    growth_trend: GrowthTrend
    difficulty: int


@dataclass(frozen=True)
class SkillInsight:
    skill: str
    type: str
    message: str


# ---------- Profile Fields ----------
@dataclass(frozen=True)
class CareerGoals:
    short_term: Tuple[str, ...] = ()
    long_term: Tuple[str, ...] = ()
    target_roles: Tuple[str, ...] = ()
    industries: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict) -> "CareerGoals":
        return cls(
            short_term=tuple(_pick(data, "short_term", "shortTerm", default=())),
            long_term=tuple(_pick(data, "long_term", "longTerm", default=())),
            target_roles=tuple(_pick(data, "target_roles", "targetRoles", default=())),
            industries=tuple(data.get("industries") or ()),
        )


@dataclass(frozen=True)
class JobPreferences:
    preferred_locations: Tuple[str, ...] = ()
    minimum_salary: Optional[float] = None
    remote_only: Optional[bool] = None
    industries: Tuple[str, ...] = ()
    company_types: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.minimum_salary is not None and self.minimum_salary < 0:
            raise ValueError("minimum_salary must not be negative")

    @classmethod
    def from_dict(cls, data: Dict) -> "JobPreferences":
        return cls(
            preferred_locations=tuple(
                _pick(data, "preferred_locations", "preferredLocations", default=())
            ),
            minimum_salary=_pick(data, "minimum_salary", "minimumSalary"),
            remote_only=_pick(data, "remote_only", "remoteOnly"),
            industries=tuple(data.get("industries") or ()),
            company_types=tuple(_pick(data, "company_types", "companyTypes", default=())),
        )

    def to_candidate_preferences(self) -> CandidatePreferences:
        return CandidatePreferences(
            preferred_locations=self.preferred_locations,
            minimum_salary=self.minimum_salary,
            remote_only=self.remote_only,
        )


@dataclass(frozen=True)
class SkillAssessment:
    skill: str
    level: int
    last_assessed: Optional[datetime] = None
    endorsements: int = 0

    def __post_init__(self) -> None:
        if not self.skill or not self.skill.strip():
            raise ValueError("SkillAssessment requires a skill")
        if not 1 <= self.level <= 5:
            raise ValueError(f"Skill level must be between 1 and 5, got {self.level}")
        if self.endorsements < 0:
            raise ValueError("endorsements must not be negative")

    @classmethod
    def from_dict(cls, data: Dict) -> "SkillAssessment":
        last = _pick(data, "last_assessed", "lastAssessed")
        return cls(
            skill=data.get("skill") or "",
            level=int(data.get("level", 0)),
            last_assessed=parse_timestamp(last) if last else None,
            endorsements=int(data.get("endorsements") or 0),
        )


@dataclass(frozen=True)
class CareerProgressionEntry:
    date: datetime
    title: str
    company: str = ""
    achievements: Tuple[str, ...] = ()
    skills_gained: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.date, datetime):
            raise ValueError("CareerProgressionEntry requires a date")
        if self.date.tzinfo is None:
            object.__setattr__(self, "date", self.date.replace(tzinfo=timezone.utc))

    @classmethod
    def from_dict(cls, data: Dict) -> "CareerProgressionEntry":
        return cls(
            date=parse_timestamp(data.get("date")),
            title=data.get("title") or "",
            company=data.get("company") or "",
            achievements=tuple(data.get("achievements") or ()),
            skills_gained=tuple(_pick(data, "skills_gained", "skillsGained", default=())),
        )


@dataclass(frozen=True)
class Profile:
    user_id: str
    skills: Tuple[str, ...] = ()
    skill_assessments: Tuple[SkillAssessment, ...] = ()
    career_goals: Optional[CareerGoals] = None
    job_preferences: Optional[JobPreferences] = None
    career_progression: Tuple[CareerProgressionEntry, ...] = ()
    parsed_resume: Optional[ResumeRecord] = None
    job_matches: Tuple[Dict, ...] = ()
    job_title: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Profile":
        user_id = _pick(data, "user_id", "userId")
        if not user_id:
            raise ValueError("Profile requires a user_id")
        goals = _pick(data, "career_goals", "careerGoals")
        prefs = _pick(data, "job_preferences", "jobPreferences")
        resume = _pick(data, "parsed_resume", "parsedResume")
        return cls(
            user_id=str(user_id),
            skills=tuple(data.get("skills") or ()),
            skill_assessments=tuple(
                SkillAssessment.from_dict(a)
                for a in _pick(data, "skill_assessments", "skillAssessments", default=[])
            ),
            career_goals=CareerGoals.from_dict(goals) if goals else None,
            job_preferences=JobPreferences.from_dict(prefs) if prefs else None,
            career_progression=tuple(
                CareerProgressionEntry.from_dict(p)
                for p in _pick(data, "career_progression", "careerProgression", default=[])
            ),
            parsed_resume=ResumeRecord.from_dict(resume) if resume else None,
            job_matches=tuple(_pick(data, "job_matches", "jobMatches", default=())),
            job_title=_pick(data, "job_title", "jobTitle", default=""),
        )

    def to_dict(self) -> Dict:
        return {
            "user_id": self.user_id,
            "skills": list(self.skills),
            "skill_assessments": [asdict(a) for a in self.skill_assessments],
            "career_goals": asdict(self.career_goals) if self.career_goals else None,
            "job_preferences": asdict(self.job_preferences) if self.job_preferences else None,
            "career_progression": [asdict(p) for p in self.career_progression],
            "parsed_resume": self.parsed_resume.to_dict() if self.parsed_resume else None,
            "job_matches": list(self.job_matches),
            "job_title": self.job_title,
        }

    @property
    def target_roles(self) -> List[str]:
        return list(self.career_goals.target_roles) if self.career_goals else []


def normalize_skills(skills: Iterable[str]) -> frozenset:
    return frozenset(s.strip().lower() for s in skills if s and s.strip())
