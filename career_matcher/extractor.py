# extractor.py
import asyncio
import io
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytesseract
import requests
from docx import Document
from PIL import Image
from PyPDF2 import PdfReader
from tqdm import tqdm

from .config import HTTP_TIMEOUT_SECONDS, INGEST_WORKERS, RESUME_SUFFIXES, SKILL_DICTIONARY
from .errors import DocumentUnavailable
from .models import EducationEntry, ExperienceEntry, ResumeRecord

logger = logging.getLogger(__name__)

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*"
_RANGE = r"\s*(?:-|–|to)\s*"

DATE_PATTERN = re.compile(
    rf"\b{_MONTH} \d{{4}}{_RANGE}{_MONTH} \d{{4}}"
    rf"|\b\d{{4}}{_RANGE}\d{{4}}"
    rf"|\b\d{{4}}{_RANGE}present\b",
    re.IGNORECASE,
)
TITLE_PATTERN = re.compile(
    r"\b(senior|lead|principal|software|developer|engineer|architect|manager|director|consultant)\b",
    re.IGNORECASE,
)
EDUCATION_PATTERN = re.compile(
    r"\b(?:Bachelor|Master|PhD|B\.?S\.?|M\.?S\.?|Ph\.?D\.?|Degree)\b.*?\b(?:19|20)\d{2}\b",
    re.IGNORECASE,
)
EDUCATION_SPLIT = re.compile(r"\s+at\s+|\s+from\s+|\s*,\s*", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

MIN_DESCRIPTION_LENGTH = 30


# ---------- Resume Interpreter ----------
class ResumeInterpreter:
    """Keyword and pattern based resume parser.

    ``skill_dictionary`` replaces the default known-skill phrases. Single
    alphanumeric skills are matched against tokens, phrases with spaces or
    punctuation (``node.js``, ``ci/cd``) against the lower-cased text.
    """

    def __init__(self, skill_dictionary: Optional[Iterable[str]] = None) -> None:
        skills = [s.lower() for s in (skill_dictionary or SKILL_DICTIONARY)]
        self.token_skills = frozenset(s for s in skills if s.isalnum())
        self.phrase_skills = tuple(s for s in skills if s not in self.token_skills)

    def parse(self, text: str) -> ResumeRecord:
        return ResumeRecord(
            skills=self.extract_skills(text),
            experience=self.extract_experience(text),
            education=self.extract_education(text),
        )

    def extract_skills(self, text: str) -> frozenset:
        lowered = text.lower()
        tokens = set(t for t in TOKEN_SPLIT.split(lowered) if t)

        found = {t for t in tokens if t in self.token_skills}
        found.update(p for p in self.phrase_skills if p in lowered)
        return frozenset(found)

    @staticmethod
    def extract_experience(text: str) -> Tuple[ExperienceEntry, ...]:
        entries: List[ExperienceEntry] = []
        current: dict = {}

        def flush() -> None:
            if current.get("title"):
                entries.append(
                    ExperienceEntry(
                        title=current["title"],
                        company="",
                        duration=current.get("duration", ""),
                        description=tuple(current.get("description", ())),
                    )
                )

        for raw in text.splitlines():
            line = raw.strip()
            date_match = DATE_PATTERN.search(line)
            if date_match:
                flush()
                current = {"duration": date_match.group(0), "description": []}
            elif TITLE_PATTERN.search(line):
                # company is not recoverable from plain text
                current["title"] = line
            elif len(line) > MIN_DESCRIPTION_LENGTH and current.get("title"):
                current.setdefault("description", []).append(line)

        flush()
        return tuple(entries)

    @staticmethod
    def extract_education(text: str) -> Tuple[EducationEntry, ...]:
        entries = []
        for match in EDUCATION_PATTERN.finditer(text):
            span = match.group(0)
            parts = EDUCATION_SPLIT.split(span)
            year = YEAR_PATTERN.search(span)
            entries.append(
                EducationEntry(
                    degree=parts[0],
                    institution=parts[1] if len(parts) > 1 else "",
                    year=year.group(0) if year else "",
                )
            )
        return tuple(entries)


_default_interpreter: Optional[ResumeInterpreter] = None


def parse_resume(text: str) -> ResumeRecord:
    global _default_interpreter
    if _default_interpreter is None:
        _default_interpreter = ResumeInterpreter()
    return _default_interpreter.parse(text)


# ---------- Text Extraction ----------
def extract_text_from_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def extract_text_from_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def extract_text_from_image(data: bytes) -> str:
    image = Image.open(io.BytesIO(data))
    return pytesseract.image_to_string(image)


def decode_document(data: bytes, suffix: str) -> str:
    suffix = suffix.lower()
    if suffix == ".pdf":
        return extract_text_from_pdf(data)
    if suffix == ".docx":
        return extract_text_from_docx(data)
    if suffix in {".png", ".jpg", ".jpeg"}:
        return extract_text_from_image(data)
    if suffix in {".txt", ""}:
        return data.decode("utf-8")
    raise ValueError(f"Unsupported document type: {suffix}")


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _download(url: str) -> Tuple[bytes, str]:
    response = requests.get(url, timeout=HTTP_TIMEOUT_SECONDS)
    response.raise_for_status()

    suffix = Path(url.split("?", 1)[0]).suffix
    if not suffix:
        content_type = response.headers.get("Content-Type", "")
        if "pdf" in content_type:
            suffix = ".pdf"
        elif "wordprocessingml" in content_type:
            suffix = ".docx"
    return response.content, suffix


def fetch_document(source: str) -> str:
    """Return the text of a resume given a URL or a local path.

    Raises DocumentUnavailable when the document cannot be read, decoded,
    or holds no text.
    """
    try:
        if _is_url(source):
            data, suffix = _download(source)
        else:
            path = Path(source)
            data, suffix = path.read_bytes(), path.suffix
        text = decode_document(data, suffix)
    except Exception as exc:
        logger.error("Document fetch failed for %s", source, exc_info=exc)
        raise DocumentUnavailable(f"Could not read document: {source}") from exc

    if not text or not text.strip():
        raise DocumentUnavailable(f"No text extracted from document: {source}")
    return text


def parse_resume_source(
    source: str,
    interpreter: Optional[ResumeInterpreter] = None,
) -> ResumeRecord:
    text = fetch_document(source)
    record = (interpreter or ResumeInterpreter()).parse(text)
    logger.info(
        "Parsed %s: %d skills, %d experience, %d education entries",
        source,
        len(record.skills),
        len(record.experience),
        len(record.education),
    )
    return record


# ---------- Async Worker ----------
async def process_resume(
    queue: asyncio.Queue,
    store,
    interpreter: ResumeInterpreter,
    progress: tqdm,
) -> None:
    while True:
        try:
            path: Path = await queue.get()
        except asyncio.CancelledError:
            break

        try:
            record = await asyncio.to_thread(parse_resume_source, str(path), interpreter)
            store.save_parsed_resume(path.stem, record)
            logger.info("Stored parsed resume for %s", path.stem)
        except DocumentUnavailable as exc:
            store.log(
                level="ERROR",
                module="extractor",
                message=str(exc),
                meta={"file": path.name},
            )
        except Exception:
            logger.exception("Failed to store parsed resume for %s", path.name)
        finally:
            progress.update(1)
            queue.task_done()


# ---------- Public API ----------
async def ingest_resumes(
    folder: Path,
    store,
    interpreter: Optional[ResumeInterpreter] = None,
    workers: int = INGEST_WORKERS,
) -> int:
    """Parse every resume in ``folder`` and store it under the file stem as user id."""
    interpreter = interpreter or ResumeInterpreter()
    queue: asyncio.Queue = asyncio.Queue()

    resume_files = sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() in RESUME_SUFFIXES
    )
    for path in resume_files:
        queue.put_nowait(path)

    with tqdm(total=len(resume_files), desc="Resumes", unit="file") as progress:
        tasks = [
            asyncio.create_task(process_resume(queue, store, interpreter, progress))
            for _ in range(workers)
        ]
        await queue.join()

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    return len(resume_files)
