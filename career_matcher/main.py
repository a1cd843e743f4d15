# main.py
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import (
    DEFAULT_RECOMMENDATION_LIMIT,
    JOB_MATCH_STORE_LIMIT,
    LOG_DIR,
    LOG_FILE,
)

# Pipelines are imported inside CLI branches so --help works without a database


# ---------- Logging Setup ----------
def setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
        ],
    )


# ---------- CLI ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Career matching: resume parsing, job ranking and skill recommendations"
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- load-jobs ----
    load_parser = subparsers.add_parser(
        "load-jobs", help="Load a JSON job catalog"
    )
    load_parser.add_argument(
        "--file",
        required=True,
        help="Path to a JSON file with one posting or a list of postings",
    )

    # ---- add-job ----
    job_parser = subparsers.add_parser(
        "add-job", help="Add a job description"
    )
    job_parser.add_argument(
        "--id",
        required=True,
        help="Job ID (e.g. JD001)",
    )
    job_parser.add_argument(
        "--file",
        required=True,
        help="Path to job description file (first line is the title)",
    )

    # ---- parse ----
    parse_parser = subparsers.add_parser(
        "parse", help="Parse a resume from a path or URL"
    )
    parse_parser.add_argument(
        "--source",
        required=True,
        help="Resume path or http(s) URL",
    )
    parse_parser.add_argument(
        "--user-id",
        help="Store the parsed resume and job matches on this profile",
    )

    # ---- ingest ----
    ingest_parser = subparsers.add_parser(
        "ingest", help="Parse every resume in a folder (file name is the user id)"
    )
    ingest_parser.add_argument(
        "--folder",
        required=True,
        help="Path to folder containing resumes",
    )

    # ---- match ----
    match_parser = subparsers.add_parser(
        "match", help="Rank jobs for a user's stored resume"
    )
    match_parser.add_argument("--user-id", required=True)
    match_parser.add_argument(
        "--top",
        type=int,
        default=JOB_MATCH_STORE_LIMIT,
        help=f"How many top jobs to show (default {JOB_MATCH_STORE_LIMIT})",
    )
    match_parser.add_argument(
        "--quick",
        action="store_true",
        help="Use the basic skill-overlap matcher",
    )

    # ---- recommend ----
    rec_parser = subparsers.add_parser(
        "recommend", help="Recommend skills and show progress insights"
    )
    rec_parser.add_argument("--user-id", required=True)
    rec_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_RECOMMENDATION_LIMIT,
    )

    # ---- adopt ----
    adopt_parser = subparsers.add_parser(
        "adopt", help="Add a recommended skill to a user's learning journey"
    )
    adopt_parser.add_argument("--user-id", required=True)
    adopt_parser.add_argument("--skill", required=True)

    # ---- progress ----
    progress_parser = subparsers.add_parser(
        "progress", help="Record an achievement in a user's career history"
    )
    progress_parser.add_argument("--user-id", required=True)
    progress_parser.add_argument("--achievement", required=True)
    progress_parser.add_argument(
        "--skill",
        action="append",
        default=[],
        help="Skill gained with this achievement (repeatable)",
    )

    return parser


def main(argv=None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "load-jobs":
            from .job_processor import load_jobs

            load_jobs(Path(args.file))

        elif args.command == "add-job":
            from .job_processor import add_job

            add_job(args.id, Path(args.file))

        elif args.command == "parse":
            if args.user_id:
                from .ranker import analyze_resume

                matches = analyze_resume(args.user_id, args.source)
                print(f"Found {len(matches)} potential job matches")
            else:
                from .extractor import parse_resume_source

                record = parse_resume_source(args.source)
                print(json.dumps(record.to_dict(), indent=2))

        elif args.command == "ingest":
            from .db import MongoDBManager
            from .extractor import ingest_resumes

            folder = Path(args.folder)
            if not folder.exists():
                raise FileNotFoundError(
                    f"Resume folder not found: {folder}"
                )
            asyncio.run(ingest_resumes(folder, MongoDBManager()))

        elif args.command == "match":
            from .ranker import rank_jobs_for_user

            rank_jobs_for_user(args.user_id, top_k=args.top, quick=args.quick)

        elif args.command == "recommend":
            from .ranker import recommend_for_user

            recommend_for_user(args.user_id, limit=args.limit)

        elif args.command == "adopt":
            from .ranker import adopt_skill_for_user

            adopt_skill_for_user(args.user_id, args.skill)

        elif args.command == "progress":
            from .ranker import add_progress_for_user

            add_progress_for_user(args.user_id, args.achievement, args.skill)

        else:
            parser.print_help()

    except Exception as exc:
        logging.error("Command failed", exc_info=exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
