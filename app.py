from __future__ import annotations

import json
from dataclasses import asdict

import pandas as pd
import streamlit as st

from skillpath.analytics import hiring_analytics, team_skill_risk
from skillpath.assessment import apply_assessment, grade_assessment
from skillpath.catalog import DATA_DIR, load_candidates, load_jobs, load_profile, load_roles, load_skills
from skillpath.career import build_career_path, recommend_roles
from skillpath.confidence import ConfidenceEngine, interpret_sci
from skillpath.config import load_config
from skillpath.freshness import utc_now
from skillpath.gap_analysis import analyze_skill_gap, build_upskilling_guidance, recommend_upskilling
from skillpath.logger import setup_logger
from skillpath.normalize import resolve_skill_ref
from skillpath.ranking import explain_ranking, rank_candidates, score_applications

APP_TITLE = "SkillPath Studio"
APP_SUBTITLE = "Explainable skill confidence, gaps and career paths"
BAND_LABELS = {
    "ready": "Ready",
    "nearly_ready": "Nearly Ready",
    "developing": "Developing",
    "long_term": "Long Term",
}

logger = setup_logger()


def as_pct_label(value: float) -> str:
    return f"{value:.0f}%"


def ensure_state(profile):
    if "profile" not in st.session_state:
        st.session_state["profile"] = profile


def inject_styles():
    st.markdown(
        """
        <style>
        .hero-wrap {
            background: radial-gradient(circle at 20% 20%, #38bdf8 0%, #1d4ed8 35%, #0f172a 100%);
            border-radius: 18px;
            padding: 28px;
            color: #f8fafc;
            margin-bottom: 18px;
        }
        .hero-title { font-size: 2.2rem; font-weight: 700; margin-bottom: 0.4rem; }
        .hero-sub { opacity: 0.92; font-size: 1.03rem; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_tree(node, level: int = 0):
    marker = " (cycle)" if node.cycle else ""
    st.write(f"{'  ' * level}- **{node.title}**{marker}")
    for child in node.children:
        render_tree(child, level + 1)


def render_profile(engine, profile, skills_by_id):
    rows = []
    for entry in profile:
        result = engine.compute(entry.assessment_score, entry.last_used_date, entry.scenario_score)
        rows.append(
            {
                "Skill": resolve_skill_ref(entry.skill).display_name,
                "Assessment": entry.assessment_score,
                "Freshness": result.breakdown.freshness_score,
                "Scenario": entry.scenario_score,
                "SCI": result.sci,
                "Level": interpret_sci(result.sci).level,
                "Days Since Use": result.breakdown.days_ago,
            }
        )
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

    st.markdown("Add or update a skill")
    with st.form("skill_usage_form"):
        new_skill_id = st.selectbox("Catalog skill", list(skills_by_id), format_func=lambda key: skills_by_id[key].name)
        used_on = st.date_input("Last used", value=utc_now().date())
        rating = st.slider("Self rating", 1, 5, 3)
        if st.form_submit_button("Save skill"):
            owned = [resolve_skill_ref(entry.skill).skill_id for entry in profile]
            if new_skill_id in owned:
                index = owned.index(new_skill_id)
                profile[index] = engine.touch(profile[index], last_used_date=used_on, self_rating=rating)
            else:
                profile.append(engine.new_entry(skills_by_id[new_skill_id], used_on, self_rating=rating))
            st.session_state["profile"] = profile
            st.success(f"Saved {skills_by_id[new_skill_id].name}")

    st.markdown("Retake an assessment")
    refs = [resolve_skill_ref(entry.skill) for entry in profile]
    options = [ref.skill_id for ref in refs]
    names = {ref.skill_id: ref.display_name for ref in refs}
    skill_id = st.selectbox("Skill", options, format_func=lambda key: names.get(key, "Unknown"))
    skill = skills_by_id.get(skill_id)
    if skill is None or not skill.questions:
        st.info("No assessment is available for this skill yet.")
        return
    with st.form("assessment_form"):
        answers = [
            (q.question_id, st.radio(q.question, q.options, key=f"answer_{q.question_id}"))
            for q in skill.questions
        ]
        if st.form_submit_button("Submit answers"):
            outcome = grade_assessment(skill, answers)
            index = options.index(skill_id)
            profile[index] = apply_assessment(engine, profile[index], outcome)
            st.session_state["profile"] = profile
            st.success(f"Scored {outcome.score_percentage:.0f}% - new SCI {profile[index].sci:.2f}")


def render_role_views(profile, roles, roles_by_title, config):
    role_title = st.selectbox("Target role", list(roles_by_title))
    role = roles_by_title[role_title]
    gap = analyze_skill_gap(profile, role.requirements, config)

    c1, c2 = st.columns(2)
    c1.metric("Readiness", as_pct_label(gap.readiness_percentage), BAND_LABELS[gap.band])
    c1.progress(gap.readiness_percentage / 100.0)
    c2.write(gap.overall_assessment)

    gap_df = pd.DataFrame(
        [
            {"Skill": g.skill_name, "Status": status, "Required": g.required_sci, "Current": g.user_sci}
            for status, entries in (("missing", gap.missing_skills), ("weak", gap.weak_skills), ("strong", gap.strong_skills))
            for g in entries
        ]
    )
    st.dataframe(gap_df, hide_index=True, use_container_width=True)

    st.markdown("Upskilling Priorities")
    for rec in recommend_upskilling(gap, config):
        st.write(f"- [{rec.priority}] {rec.skill_name}: {rec.reason}")

    st.markdown("Role Recommendations")
    recommendations = recommend_roles(profile, roles, config)
    cols = st.columns(len(BAND_LABELS))
    for col, (band, label) in zip(cols, BAND_LABELS.items()):
        col.markdown(f"**{label}**")
        for rec in recommendations.categorized[band]:
            col.write(f"- {rec.title} ({as_pct_label(rec.readiness_percentage)})")

    st.markdown("Career Path")
    tree = build_career_path(role, roles, config=config)
    if tree:
        render_tree(tree)


def render_hiring(jobs, candidates, config):
    job = st.selectbox("Job posting", jobs, format_func=lambda j: f"{j.title} ({j.status})")
    ranked = rank_candidates(candidates, job.requirements, config)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Rank": r.ranking,
                    "Candidate": r.candidate_name,
                    "Match %": r.match_percentage,
                    "Experience": r.experience,
                    "Explanation": explain_ranking(r),
                }
                for r in ranked
            ]
        ),
        hide_index=True,
        use_container_width=True,
    )

    scored_jobs = [score_applications(j, candidates, config) for j in jobs]
    analytics = hiring_analytics(scored_jobs)
    a, b, c = st.columns(3)
    a.metric("Open Jobs", analytics.open_jobs, f"{analytics.total_jobs} total")
    b.metric("Applications", analytics.total_applications)
    c.metric("Avg Match", as_pct_label(analytics.avg_candidate_match_percentage))

    risk = team_skill_risk(scored_jobs)
    st.markdown(f"Team Skill Risk: **{risk.overall_risk}**")
    st.dataframe(pd.DataFrame(risk.skill_risks), hide_index=True, use_container_width=True)
    st.caption(risk.recommendation)
    st.download_button(
        "Download Ranking JSON",
        data=json.dumps([asdict(r) for r in ranked], indent=2, default=str),
        file_name=f"{job.job_id}_ranking.json",
        mime="application/json",
    )


st.set_page_config(page_title=APP_TITLE, layout="wide")
inject_styles()
st.title(APP_TITLE)
st.caption(APP_SUBTITLE)

config = load_config()
engine = ConfidenceEngine(config.weights)
skills = load_skills()
skills_by_id = {skill.skill_id: skill for skill in skills}
roles = load_roles(skills=skills)
roles_by_title = {role.title: role for role in roles}
candidates = load_candidates(skills=skills)
jobs = load_jobs(skills=skills)
ensure_state([engine.update(entry, now=utc_now()) for entry in load_profile(DATA_DIR / "profile.json", skills)])
profile = st.session_state["profile"]
logger.info("Loaded %d skills, %d roles, %d jobs", len(skills), len(roles), len(jobs))

st.markdown(
    """
    <div class="hero-wrap">
      <div class="hero-title">SkillPath Studio</div>
      <div class="hero-sub">Every score is the sum of its displayed parts.</div>
    </div>
    """,
    unsafe_allow_html=True,
)

with st.expander("Section A - Skill Confidence Profile", expanded=True):
    render_profile(engine, profile, skills_by_id)

with st.expander("Section B - Gap Analysis + Career Paths", expanded=True):
    render_role_views(profile, roles, roles_by_title, config)

with st.expander("Section C - Upskilling Guidance", expanded=False):
    guidance = build_upskilling_guidance(profile)
    if guidance:
        st.dataframe(pd.DataFrame([asdict(g) for g in guidance]), hide_index=True, use_container_width=True)
    else:
        st.info("All skills are current and above the confidence floor.")

with st.expander("Section D - Candidate Ranking + Hiring Analytics", expanded=True):
    render_hiring(jobs, candidates, config)
