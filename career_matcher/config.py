# config.py
import os
from pathlib import Path

# ---------- Project Paths ----------
BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = Path(os.getenv("CAREER_MATCHER_LOG_DIR", BASE_DIR / "logs"))
LOG_FILE = LOG_DIR / "app.log"

# ---------- MongoDB ----------
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("CAREER_MATCHER_DB", "career_matcher_db")

PROFILE_COLLECTION = "profiles"
JOB_COLLECTION = "jobs"
LOG_COLLECTION = "logs"

# ---------- Document Fetch ----------
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
RESUME_SUFFIXES = {".pdf", ".docx", ".txt", ".png", ".jpg", ".jpeg"}
INGEST_WORKERS = int(os.getenv("INGEST_WORKERS", "3"))

# ---------- Scoring Weights ----------
SKILL_WEIGHT = 0.4
EXPERIENCE_WEIGHT = 0.3
EDUCATION_WEIGHT = 0.2
PREFERENCE_WEIGHT = 0.1

SKILL_COVERAGE_WEIGHT = 0.7
SKILL_RELEVANCE_WEIGHT = 0.3

EXPERIENCE_YEARS_WEIGHT = 0.4
EXPERIENCE_RELEVANCY_WEIGHT = 0.6

DEGREE_LEVEL_WEIGHT = 0.4
DEGREE_RELEVANCY_WEIGHT = 0.6

TITLE_OVERLAP_THRESHOLD = 0.3

# quick (basic) matcher
QUICK_SIMILARITY_WEIGHT = 0.4
QUICK_COVERAGE_WEIGHT = 0.4
QUICK_EXPERIENCE_WEIGHT = 0.2

# ---------- Recommendations ----------
TARGET_ROLE_WEIGHT = 0.4
FREQUENCY_CAP = 0.3
COMPLEMENTARY_WEIGHT = 0.3

RISING_THRESHOLD = 0.5
STABLE_THRESHOLD = 0.2

FAST_PROGRESS_PER_MONTH = 0.5
STAGNANT_PER_MONTH = 0.1
STAGNANT_MIN_DAYS = 90

JOB_MATCH_STORE_LIMIT = 10
DEFAULT_RECOMMENDATION_LIMIT = 10

# ---------- Lookup Tables ----------
# Defaults only; every component accepts its own table.
SKILL_DICTIONARY = (
    "javascript", "typescript", "python", "java", "c++", "react", "angular", "vue",
    "node.js", "express", "mongodb", "sql", "postgresql", "aws", "azure", "docker",
    "kubernetes", "git", "agile", "scrum", "machine learning", "data science",
    "artificial intelligence", "devops", "ci/cd", "test driven development",
)

# order matters: first substring hit wins
EDUCATION_LEVELS = {
    "phd": 5,
    "master": 4,
    "bachelor": 3,
    "associate": 2,
    "certificate": 1,
}

FIELD_KEYWORDS = (
    "computer science", "software", "engineering", "data science",
    "mathematics", "physics", "information technology", "business",
    "finance", "marketing", "design",
)

DEGREE_STOP_WORDS = ("bachelor", "master", "phd", "degree", "of", "in")

SKILL_METADATA = {
    "javascript": {"category": "programming", "difficulty": 2},
    "python": {"category": "programming", "difficulty": 2},
    "react": {"category": "frontend", "difficulty": 3},
    "node.js": {"category": "backend", "difficulty": 3},
    "sql": {"category": "database", "difficulty": 2},
    "aws": {"category": "cloud", "difficulty": 4},
    "docker": {"category": "devops", "difficulty": 3},
    "machine learning": {"category": "ai", "difficulty": 4},
    "data analysis": {"category": "data", "difficulty": 3},
    "product management": {"category": "business", "difficulty": 4},
    "agile": {"category": "methodology", "difficulty": 2},
    "ui/ux": {"category": "design", "difficulty": 3},
}

ROLE_SKILLS = {
    "frontend": ("javascript", "react", "ui/ux"),
    "backend": ("node.js", "python", "sql"),
    "fullstack": ("javascript", "react", "node.js", "sql"),
    "data science": ("python", "machine learning", "data analysis"),
    "devops": ("docker", "aws", "python"),
    "product": ("agile", "product management", "ui/ux"),
}
