"""Streamlit UI for the résumé screening assistant."""
from __future__ import annotations

import asyncio
import html

import streamlit as st

from resume_rag.accounts import AccountApi
from resume_rag.catalog import load_catalog
from resume_rag.config import ensure_dirs, load_settings
from resume_rag.errors import AccountError, InputError
from resume_rag.highlight import highlight_segments
from resume_rag.log import get_logger
from resume_rag.models import Job, UserSettings
from resume_rag.oracle import build_oracle
from resume_rag.report import format_salary, score_label
from resume_rag.saved_jobs import SavedJobsSynchronizer
from resume_rag.session import ResumeSession
from resume_rag.store import JsonFileStore

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

DATE_OPTIONS: dict[str, str] = {"all": "Any Time", "past-week": "Past Week", "past-month": "Past Month"}
EXPERIENCE_OPTIONS: dict[str, str] = {
    "all": "Any Experience",
    "0-2": "Entry-Level (0-2 years)",
    "3-5": "Mid-Level (3-5 years)",
    "5+": "Senior-Level (5+ years)",
}
LOG_ICONS: dict[str, str] = {"info": "ℹ️", "success": "✅", "warning": "⚠️", "error": "❌", "summary": "📊"}

_CSS = """
<style>
mark.skill {
    background: rgba(74,144,217,0.22);
    font-weight: 600;
    border-radius: 4px;
    padding: 0 3px;
    cursor: help;
}
.job-meta { color: #555; font-size: 0.9rem; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _api() -> AccountApi:
    settings = load_settings()
    ensure_dirs(settings)
    return AccountApi(JsonFileStore(settings.store_path), latency=settings.api_latency)


def _session() -> ResumeSession:
    if "session" not in st.session_state:
        settings = load_settings()
        api = _api()
        session = ResumeSession(
            oracle=build_oracle(settings),
            catalog=load_catalog(settings.catalog_path),
            saved_jobs=SavedJobsSynchronizer(api),
            min_resume_chars=settings.min_resume_chars,
        )
        restored = api.current_user()
        if restored:
            asyncio.run(session.set_user(restored))
        st.session_state["session"] = session
    return st.session_state["session"]


def _highlight_html(job: Job, session: ResumeSession) -> str:
    analysis = session.state.analysis
    skills = analysis.skills if analysis else ()
    parts: list[str] = []
    for seg in highlight_segments(job.description, skills):
        text = html.escape(seg.text)
        if seg.is_match:
            tip = html.escape(f"From your resume: \"{seg.context}\"", quote=True)
            parts.append(f'<mark class="skill" title="{tip}">{text}</mark>')
        else:
            parts.append(text)
    return "".join(parts)


def _job_card(job: Job, session: ResumeSession) -> None:
    saved = job.id in session.saved_job_ids
    with st.container(border=True):
        c1, c2 = st.columns([5, 1])
        with c1:
            new = " 🆕" if job.is_new else ""
            st.markdown(f"#### {job.title}{new}")
            st.markdown(
                f'<div class="job-meta">{html.escape(job.company)} · {html.escape(job.location)} · '
                f"{format_salary(job.min_salary, job.max_salary)} · {job.employment_type} · "
                f"{html.escape(job.posted_date)}</div>",
                unsafe_allow_html=True,
            )
        with c2:
            st.metric(score_label(job.relevance_score), f"{round(job.relevance_score)}%")
            if session.user is not None:
                label = "★ Saved" if saved else "☆ Save"
                if st.button(label, key=f"save-{job.id}", use_container_width=True):
                    session.toggle_save_job(job.id)
                    st.rerun()

        st.markdown(_highlight_html(job, session), unsafe_allow_html=True)
        matches = session.matched_skills(job)
        if matches:
            st.markdown("**Matches your skills:** " + ", ".join(f"`{m}`" for m in matches))
        st.link_button("View Job", job.url)


def _filters(session: ResumeSession) -> None:
    f = session.state.filters
    with st.expander("Filters", expanded=False):
        c1, c2, c3, c4 = st.columns(4)
        locations = ["all"] + session.available_locations()
        types = ["all"] + session.available_employment_types()
        location = c1.selectbox(
            "Location", locations,
            index=locations.index(f.location) if f.location in locations else 0,
            format_func=lambda v: "All Locations" if v == "all" else v,
        )
        employment_type = c2.selectbox(
            "Job Type", types,
            index=types.index(f.employment_type) if f.employment_type in types else 0,
            format_func=lambda v: "All Types" if v == "all" else v,
        )
        date_posted = c3.selectbox(
            "Date Posted", list(DATE_OPTIONS),
            index=list(DATE_OPTIONS).index(f.date_posted), format_func=DATE_OPTIONS.get,
        )
        experience = c4.selectbox(
            "Experience", list(EXPERIENCE_OPTIONS),
            index=list(EXPERIENCE_OPTIONS).index(f.experience), format_func=EXPERIENCE_OPTIONS.get,
        )
        s1, s2, s3 = st.columns([2, 2, 1])
        min_salary = s1.text_input("Min Salary ($k)", value=str(f.min_salary), placeholder="e.g. 80")
        max_salary = s2.text_input("Max Salary ($k)", value=str(f.max_salary), placeholder="e.g. 150")
        saved_only = st.toggle("Show saved jobs only", value=f.show_saved_only, disabled=session.user is None)
        if s3.button("Reset", use_container_width=True):
            session.reset_filters()
            st.rerun()

    session.update_filters(
        location=location,
        employment_type=employment_type,
        date_posted=date_posted,
        experience=experience,
        min_salary=min_salary.strip(),
        max_salary=max_salary.strip(),
        show_saved_only=saved_only,
    )


# ── Page: Match ──────────────────────────────────────────────────────────


def page_match() -> None:
    session = _session()
    state = session.state
    st.header("Resume Job Matcher")

    if not state.resume_text:
        uploaded = st.file_uploader(
            "Drop your resume here (PDF, DOCX, or TXT)",
            type=["pdf", "docx", "txt"],
            key=f"resume-upload-{st.session_state.get('upload_nonce', 0)}",
        )
        # the widget keeps its file across reruns; each upload is submitted once
        if uploaded is not None and st.session_state.get("last_upload") != uploaded.file_id:
            st.session_state["last_upload"] = uploaded.file_id
            st.session_state.pop("upload_error", None)
            with st.spinner("Analyzing your resume…"):
                try:
                    asyncio.run(session.submit_upload(uploaded.name, uploaded.getvalue()))
                except InputError as exc:
                    log.warning("Upload rejected: %s", exc)
                    st.session_state["upload_error"] = str(exc)
            state = session.state
            if state.resume_text:
                st.rerun()
        if st.session_state.get("upload_error"):
            st.error(st.session_state["upload_error"])
        if state.query_error:
            st.error(state.query_error)
    else:
        if st.button("Start New Search"):
            session.reset_session()
            st.session_state["upload_nonce"] = st.session_state.get("upload_nonce", 0) + 1
            st.session_state.pop("last_upload", None)
            st.rerun()

    analysis = state.analysis
    if analysis:
        with st.expander("Your Profile", expanded=True):
            st.write(analysis.summary)
            c1, c2 = st.columns([1, 3])
            c1.metric("Experience", f"{analysis.experience_years:g} yrs")
            c2.markdown("**Skills:** " + ", ".join(analysis.skill_names()))

            if state.smart_profile is None:
                if st.button("Generate Smart Profile", disabled=state.is_generating_profile):
                    with st.spinner("Generating AI career advice…"):
                        asyncio.run(session.generate_smart_profile())
                    st.rerun()
            else:
                profile = state.smart_profile
                st.markdown("**Enhanced summary**")
                st.write(profile.enhanced_summary)
                for s in profile.suggested_skills:
                    st.markdown(f"- **{s.name}** — {s.reason}")
                for i, point in enumerate(profile.interview_talking_points, 1):
                    st.markdown(f"{i}. {point}")
            if state.profile_error:
                st.error(state.profile_error)

    if state.all_jobs:
        _filters(session)
        st.subheader(f"{len(state.jobs)} of {len(state.all_jobs)} jobs")
        if not state.jobs:
            st.info("No jobs match your current filters. Try adjusting or resetting the filters above.")
        for job in state.jobs:
            _job_card(job, session)

    if state.log_entries:
        with st.expander("Extraction Log", expanded=False):
            for e in state.log_entries:
                st.markdown(f"`{e.timestamp}` {LOG_ICONS.get(e.status, '')} **{e.label}:** {e.value}")


# ── Page: Account ────────────────────────────────────────────────────────


def page_account() -> None:
    session = _session()
    api = _api()
    st.header("Account")

    if session.user is None:
        tab_login, tab_signup = st.tabs(["Log in", "Sign up"])
        with tab_login, st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in", type="primary"):
                try:
                    asyncio.run(session.set_user(asyncio.run(api.login(email, password))))
                    st.rerun()
                except AccountError as exc:
                    st.error(str(exc))
        with tab_signup, st.form("signup"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="signup-email")
            password = st.text_input("Password", type="password", key="signup-password")
            if st.form_submit_button("Create account", type="primary"):
                try:
                    asyncio.run(session.set_user(asyncio.run(api.signup(name, email, password))))
                    st.rerun()
                except AccountError as exc:
                    st.error(str(exc))
        return

    user = session.user
    st.write(f"Signed in as **{user.name or user.email}** ({user.email})")
    st.caption(f"{len(session.saved_job_ids)} saved job(s)")

    with st.form("profile"):
        name = st.text_input("Name", value=user.name)
        if st.form_submit_button("Update name"):
            try:
                asyncio.run(api.update_profile(user.email, name))
                reloaded = asyncio.run(api.reload_user(user.email))
                session.user = reloaded or user
                st.success("Profile updated.")
            except AccountError as exc:
                st.error(str(exc))

    with st.form("password"):
        old = st.text_input("Current password", type="password")
        new = st.text_input("New password", type="password")
        if st.form_submit_button("Change password"):
            try:
                asyncio.run(api.change_password(user.email, old, new))
                st.success("Password changed.")
            except AccountError as exc:
                st.error(str(exc))

    current = asyncio.run(api.get_user_settings(user.email))
    with st.form("settings"):
        theme = st.selectbox("Theme", ["light", "dark"], index=0 if current.theme == "light" else 1)
        alerts = st.checkbox("Email me job alerts", value=current.job_alerts)
        if st.form_submit_button("Save settings"):
            asyncio.run(api.update_user_settings(user.email, UserSettings(theme=theme, job_alerts=alerts)))
            st.success("Settings saved.")

    c1, c2 = st.columns(2)
    if c1.button("Log out", use_container_width=True):
        asyncio.run(api.logout())
        asyncio.run(session.set_user(None))
        st.rerun()
    if c2.button("Delete account", type="secondary", use_container_width=True):
        asyncio.run(api.delete_account(user.email))
        asyncio.run(session.set_user(None))
        st.rerun()


def _wrap_match():
    st.markdown(_CSS, unsafe_allow_html=True)
    page_match()


pages = [
    st.Page(_wrap_match, title="Match", icon="🔎", url_path="match", default=True),
    st.Page(page_account, title="Account", icon="👤", url_path="account"),
]

nav = st.navigation(pages)
nav.run()
