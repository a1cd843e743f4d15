# db.py
from typing import List, Dict, Optional, Sequence
from datetime import datetime, timezone
from pymongo import MongoClient, errors
import logging

from .config import (
    MONGO_URI,
    DB_NAME,
    PROFILE_COLLECTION,
    JOB_COLLECTION,
    LOG_COLLECTION,
)
from .errors import CatalogUnavailable, ProfileMissing
from .models import JobMatch, JobPosting, Profile, ResumeRecord

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoDBManager:
    """Profile store and job catalog backed by MongoDB."""

    def __init__(
        self,
        uri: str = MONGO_URI,
        db_name: str = DB_NAME,
        client: Optional[MongoClient] = None,
    ) -> None:
        try:
            self.client = client or MongoClient(uri)
            self.db = self.client[db_name]

            self.profiles = self.db[PROFILE_COLLECTION]
            self.jobs = self.db[JOB_COLLECTION]
            self.logs = self.db[LOG_COLLECTION]

        except errors.PyMongoError as exc:
            raise RuntimeError(f"MongoDB connection failed: {exc}") from exc

    # ---------- Jobs ----------
    def insert_job(self, job: JobPosting) -> None:
        doc = job.to_dict()
        doc["updated_at"] = _now()
        if job.job_id:
            self.jobs.replace_one({"job_id": job.job_id}, doc, upsert=True)
        else:
            self.jobs.insert_one(doc)

    def get_jobs(self) -> List[JobPosting]:
        try:
            docs = list(self.jobs.find({}, {"_id": 0}))
        except errors.PyMongoError as exc:
            raise CatalogUnavailable(f"Job catalog read failed: {exc}") from exc

        jobs = []
        for doc in docs:
            try:
                jobs.append(JobPosting.from_dict(doc))
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("Skipping malformed job %s: %s", doc.get("job_id"), exc)
        return jobs

    # ---------- Profiles ----------
    def get_profile(self, user_id: str) -> Profile:
        doc = self.profiles.find_one({"user_id": user_id}, {"_id": 0})
        if not doc:
            raise ProfileMissing(f"No profile for user {user_id}")
        return Profile.from_dict(doc)

    def update_profile_fields(self, user_id: str, fields: Dict) -> None:
        fields = {**fields, "updated_at": _now()}
        self.profiles.update_one(
            {"user_id": user_id},
            {"$set": fields},
            upsert=True,
        )

    def save_parsed_resume(self, user_id: str, record: ResumeRecord) -> None:
        self.update_profile_fields(user_id, {"parsed_resume": record.to_dict()})

    def save_job_matches(self, user_id: str, matches: Sequence[JobMatch]) -> None:
        self.update_profile_fields(
            user_id, {"job_matches": [m.to_dict() for m in matches]}
        )

    # ---------- Logs ----------
    def log(
        self,
        level: str,
        module: str,
        message: str,
        meta: Optional[Dict] = None
    ) -> None:
        log_entry = {
            "level": level,
            "module": module,
            "message": message,
            "meta": meta or {},
            "timestamp": _now(),
        }
        self.logs.insert_one(log_entry)
