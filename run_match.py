#!/usr/bin/env python3
"""Match one résumé against the job catalog and print a Markdown report.

    python run_match.py resume.pdf --location Remote --experience 3-5 --profile
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from resume_rag.accounts import AccountApi
from resume_rag.catalog import load_catalog
from resume_rag.config import ensure_dirs, load_settings
from resume_rag.errors import AccountError, ConfigurationError, InputError
from resume_rag.log import configure as configure_logging, get_logger
from resume_rag.models import DATE_WINDOWS, EXPERIENCE_BRACKETS
from resume_rag.oracle import build_oracle
from resume_rag.report import build_session_report, write_session_report
from resume_rag.saved_jobs import SavedJobsSynchronizer
from resume_rag.session import ResumeSession
from resume_rag.store import JsonFileStore

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Score the job catalog against a resume.")
    p.add_argument("resume", type=Path, help="PDF, DOCX, or TXT resume")
    p.add_argument("--location", default="all")
    p.add_argument("--type", dest="employment_type", default="all")
    p.add_argument("--posted", dest="date_posted", choices=DATE_WINDOWS, default="all")
    p.add_argument("--experience", choices=EXPERIENCE_BRACKETS, default="all")
    p.add_argument("--min-salary", default="", help="thousands, e.g. 80")
    p.add_argument("--max-salary", default="", help="thousands, e.g. 150")
    p.add_argument("--email", help="log in to load and update saved jobs")
    p.add_argument("--password", default="")
    p.add_argument("--save", action="append", default=[], metavar="JOB_ID",
                   help="toggle a saved job (repeatable, needs --email)")
    p.add_argument("--saved-only", action="store_true")
    p.add_argument("--profile", action="store_true", help="also generate a smart profile")
    p.add_argument("--top", type=int, default=15)
    p.add_argument("--report", action="store_true", help="write the report under reports/")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging on the console")
    return p.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = load_settings()
    ensure_dirs(settings)

    api = AccountApi(JsonFileStore(settings.store_path), latency=settings.api_latency)
    session = ResumeSession(
        oracle=build_oracle(settings),
        catalog=load_catalog(settings.catalog_path),
        saved_jobs=SavedJobsSynchronizer(api),
        min_resume_chars=settings.min_resume_chars,
    )

    if args.email:
        try:
            await session.set_user(await api.login(args.email, args.password))
        except AccountError as exc:
            log.error("Login failed: %s", exc)
            return 1

    try:
        await session.submit_file(args.resume)
    except InputError as exc:
        log.error("%s", exc)
        return 1

    state = session.state
    if state.query_error:
        log.error("Matching failed: %s", state.query_error)

    for job_id in args.save:
        session.toggle_save_job(job_id)
    session.update_filters(
        location=args.location,
        employment_type=args.employment_type,
        date_posted=args.date_posted,
        experience=args.experience,
        min_salary=args.min_salary,
        max_salary=args.max_salary,
        show_saved_only=args.saved_only,
    )
    if args.profile:
        await session.generate_smart_profile()
    await session.saved_jobs.flush()

    report = build_session_report(session.state, session.saved_job_ids, top=args.top)
    if args.report:
        write_session_report(report, settings.reports_dir)
    else:
        print(report)
    return 0 if not state.query_error else 2


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        configure_logging("DEBUG")
    try:
        return asyncio.run(run(args))
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
