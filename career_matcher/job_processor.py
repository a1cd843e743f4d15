# job_processor.py
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .db import MongoDBManager
from .extractor import ResumeInterpreter, fetch_document
from .models import JobPosting

logger = logging.getLogger(__name__)


# ---------- Normalization ----------
def normalize_job(data: Dict) -> Optional[JobPosting]:
    try:
        return JobPosting.from_dict(data)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.error("Failed to normalize job %s", data.get("title"), exc_info=exc)
        return None


def job_from_text(
    job_id: str,
    text: str,
    interpreter: Optional[ResumeInterpreter] = None,
) -> JobPosting:
    """Build a posting from a plain job description: first line is the title."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        raise ValueError(f"Job description {job_id} is empty")

    skills = (interpreter or ResumeInterpreter()).extract_skills(text)
    return JobPosting(
        title=lines[0],
        company="",
        required_skills=skills,
        description="\n".join(lines[1:]),
        job_id=job_id,
    )


# ---------- Public API ----------
def load_jobs(path: Path, db: Optional[MongoDBManager] = None) -> List[JobPosting]:
    """Insert every job of a JSON file (a list of postings or a single one)."""
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]

    db = db or MongoDBManager()
    inserted = []
    for item in data:
        job = normalize_job(item)
        if job is None:
            continue
        db.insert_job(job)
        inserted.append(job)

    logger.info("Inserted %d of %d jobs from %s", len(inserted), len(data), path.name)
    return inserted


def add_job(job_id: str, jd_file: Path, db: Optional[MongoDBManager] = None) -> JobPosting:
    if not jd_file.exists():
        raise FileNotFoundError(f"JD file not found: {jd_file}")

    job = job_from_text(job_id, fetch_document(str(jd_file)))
    (db or MongoDBManager()).insert_job(job)
    logger.info("Inserted job %s into DB", job_id)
    return job
