import pytest

from career_matcher.models import (
    EducationEntry,
    ExperienceEntry,
    JobPosting,
    ResumeRecord,
)


SAMPLE_RESUME = """Jane Doe
Skills: Python, React, Node.js, Docker and CI/CD pipelines. Machine Learning.
Jan 2019 - Dec 2021
Senior Software Engineer
Built distributed data pipelines serving millions of users daily
2015-2018
Developer
Maintained internal tooling for the finance department team
Bachelor of Science in Computer Science at State University, 2014
"""


@pytest.fixture
def sample_resume_text():
    return SAMPLE_RESUME


@pytest.fixture
def backend_job():
    return JobPosting(
        title="Backend Engineer",
        company="Acme",
        required_skills=frozenset({"python", "sql"}),
        location="Remote",
        salary_range="$90,000 - $120,000",
    )


@pytest.fixture
def resume():
    return ResumeRecord(
        skills=frozenset({"python"}),
        experience=(ExperienceEntry(title="Backend Engineer", duration="2 years"),),
        education=(EducationEntry(degree="Bachelor of Science in Computer Science"),),
    )
