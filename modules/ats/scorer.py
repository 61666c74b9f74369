"""Two-stage resume/job relevance scoring.

Stage 1 applies boolean eligibility gates (location, work authorization,
experience, education). Only a resume that clears every gate reaches stage 2,
where six 0-100 sub-scores are combined with role-specific weights. Skill
analysis, feedback and recommendations are produced either way.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from modules.shared.config import BATCH_SCORE_LIMIT
from modules.shared.logging import get_logger
from modules.shared.utils import round2
from . import config
from .schemas import (
    AnalysisResult,
    BatchScoreItem,
    BatchScoreResult,
    HardFilterResult,
    JobPosting,
    QuickScore,
    RelevanceScore,
    ResumeProfile,
    ScoringWeights,
    SkillAnalysis,
)
from .skills import extract_skills_from_text, match_skills
from .text import keyword_overlap, similarity

logger = get_logger("ats.scorer")


def analyze(
    resume: ResumeProfile,
    job: JobPosting,
    custom_weights: Optional[ScoringWeights] = None,
) -> AnalysisResult:
    hard_filters = evaluate_hard_filters(resume, job)

    relevance: Optional[RelevanceScore] = None
    overall = 0.0
    if hard_filters.passed:
        relevance = relevance_score(resume, job, custom_weights)
        overall = relevance.weighted_total

    skill_analysis = match_skills(resume.skills, job.required_skills or [], job.preferred_skills)

    return AnalysisResult(
        hard_filters=hard_filters,
        relevance_score=relevance,
        overall_match_percentage=round2(overall),
        matched_skills=skill_analysis.matched_required,
        missing_skills=skill_analysis.missing_required,
        skill_analysis=skill_analysis,
        feedback=_feedback(hard_filters, relevance, skill_analysis),
        recommendations=_recommendations(skill_analysis, relevance, resume, job),
        analysis_timestamp=datetime.now(timezone.utc),
        role_type=job.role_type or "default",
    )


# Stage 1

def evaluate_hard_filters(resume: ResumeProfile, job: JobPosting) -> HardFilterResult:
    reasons: List[str] = []

    # location gate is disabled
    location_ok = True

    work_auth_ok = check_work_authorization(resume.work_authorization, job.description)
    if not work_auth_ok:
        reasons.append("Work authorization requirement not clearly stated")

    experience_ok = check_experience(resume.years_of_experience, job.min_experience)
    if not experience_ok:
        reasons.append(
            f"Experience requirement not met: Requires {_years(job.min_experience)}+ years, "
            f"resume shows {_years(resume.years_of_experience)} years"
        )

    education_ok = check_education(resume.highest_degree, resume.education, job.required_education)
    if not education_ok:
        reasons.append(f"Education requirement not met: {job.required_education}")

    return HardFilterResult(
        passed=location_ok and work_auth_ok and experience_ok and education_ok,
        location_match=location_ok,
        work_authorization_match=work_auth_ok,
        experience_match=experience_ok,
        education_match=education_ok,
        failure_reasons=reasons,
    )


def check_work_authorization(resume_work_auth: Optional[str], job_description: Optional[str]) -> bool:
    jd = (job_description or "").lower()
    if not any(k in jd for k in config.WORK_AUTH_KEYWORDS):
        return True
    stated = (resume_work_auth or "").lower()
    return any(k in stated for k in config.WORK_AUTH_KEYWORDS)


def check_experience(resume_years: float, min_required: float) -> bool:
    if (min_required or 0) <= config.ENTRY_LEVEL_MAX_YEARS:
        return True
    return (resume_years or 0) >= min_required * config.MIN_EXPERIENCE_MATCH_RATIO


def check_education(
    highest_degree: Optional[str],
    education: Optional[List[str]],
    required_education: Optional[str],
) -> bool:
    if not required_education:
        return True
    required_level = config.first_degree_level(required_education)
    if required_level == 0:
        return True
    return candidate_degree_level(highest_degree, education) >= required_level


def candidate_degree_level(highest_degree: Optional[str], education: Optional[List[str]]) -> int:
    entries = [highest_degree] + list(education or [])
    return max((config.max_degree_level(e) for e in entries if e), default=0)


# Stage 2

def relevance_score(
    resume: ResumeProfile,
    job: JobPosting,
    custom_weights: Optional[ScoringWeights] = None,
) -> RelevanceScore:
    weights = custom_weights or config.get_weights(job.role_type)

    scores = {
        "skills": _score_skills(resume, job),
        "experience": _score_experience(resume, job),
        "projects": _score_projects(resume, job),
        "keywords": _score_keywords(resume, job),
        "summary": _score_summary(resume, job),
        "education": _score_education(resume, job),
    }
    total = sum(v * getattr(weights, k) for k, v in scores.items())
    scores = {k: round2(v) for k, v in scores.items()}

    return RelevanceScore(
        skills_score=scores["skills"],
        experience_score=scores["experience"],
        projects_score=scores["projects"],
        keywords_score=scores["keywords"],
        summary_score=scores["summary"],
        education_score=scores["education"],
        weighted_total=round2(total),
        weights_used=weights,
    )


def _score_skills(resume: ResumeProfile, job: JobPosting) -> float:
    return match_skills(resume.skills, job.required_skills or [], job.preferred_skills).overall_skill_score


def _score_experience(resume: ResumeProfile, job: JobPosting) -> float:
    min_exp = max(job.min_experience or 0, 1)
    years_part = min(100.0, 100.0 * (resume.years_of_experience or 0) / min_exp)
    relevance = similarity(" ".join(resume.work_experience), job.description)
    return min(100.0, years_part * 0.4 + relevance * 0.6)


def _score_projects(resume: ResumeProfile, job: JobPosting) -> float:
    if not resume.projects:
        return 0.0
    relevance = similarity(" ".join(resume.projects), job.description)
    bonus = min(20, 5 * len(resume.projects))
    return min(100.0, relevance + bonus)


def _score_keywords(resume: ResumeProfile, job: JobPosting) -> float:
    text = " ".join([
        " ".join(resume.skills),
        " ".join(resume.work_experience),
        " ".join(resume.projects),
        resume.summary or "",
    ])
    return min(100.0, keyword_overlap(text, job.description))


def _score_summary(resume: ResumeProfile, job: JobPosting) -> float:
    if not resume.summary:
        return 50.0
    return similarity(resume.summary, job.description)


def _score_education(resume: ResumeProfile, job: JobPosting) -> float:
    if not job.required_education:
        return 100.0
    if not resume.education and not resume.highest_degree:
        return 0.0
    if check_education(resume.highest_degree, resume.education, job.required_education):
        return 100.0
    return 50.0


# Feedback

def _feedback(
    hard_filters: HardFilterResult,
    relevance: Optional[RelevanceScore],
    skills: SkillAnalysis,
) -> str:
    if not hard_filters.passed:
        return "Resume did not pass initial screening. Issues: " + ", ".join(hard_filters.failure_reasons)
    if relevance is None:
        return "Unable to calculate relevance score."

    total = relevance.weighted_total
    if total >= 80:
        parts = ["Excellent match! Your profile aligns very well with the job requirements."]
    elif total >= 60:
        parts = ["Good match! You meet most of the requirements with room for improvement."]
    elif total >= 40:
        parts = ["Moderate match. Consider strengthening key areas to improve your chances."]
    else:
        parts = ["Limited match. Significant gaps exist between your profile and requirements."]

    if relevance.skills_score < 70:
        parts.append(f"Your skills match score is {relevance.skills_score:.0f}%.")
    if skills.total_missing > 0:
        parts.append(f"You're missing {skills.total_missing} required/preferred skills.")
    if relevance.experience_score < 70:
        parts.append("Consider highlighting more relevant experience.")
    return " ".join(parts)


def _recommendations(
    skills: SkillAnalysis,
    relevance: Optional[RelevanceScore],
    resume: ResumeProfile,
    job: JobPosting,
) -> List[str]:
    recs: List[str] = []
    if skills.missing_required:
        recs.append(f"Acquire or highlight these critical skills: {', '.join(skills.missing_required[:3])}")

    if relevance is not None:
        if relevance.experience_score < 70:
            recs.append("Emphasize experience more relevant to this role in your resume")
        if relevance.projects_score < 50 and (job.role_type or "").lower() != "manager":
            recs.append("Add relevant projects that demonstrate required skills")
        if relevance.keywords_score < 60:
            recs.append("Include more industry-specific keywords from the job description")
        if not resume.summary or relevance.summary_score < 50:
            recs.append("Write or improve your professional summary to align with this role")

    if not resume.certifications and skills.missing_required:
        recs.append("Consider getting certifications in missing skill areas")
    return recs[:5]


def _years(value: float) -> str:
    return f"{value:g}"


# Bulk ranking

def quick_score(resume: ResumeProfile, job: JobPosting) -> QuickScore:
    """Skill + keyword score without hard filters, for ranking many postings."""
    job_skills = job.required_skills or extract_skills_from_text(job.description)
    skills = match_skills(resume.skills, job_skills, [])

    resume_text = " ".join([
        " ".join(resume.skills),
        " ".join(resume.work_experience),
        resume.summary or "",
    ])
    keyword_pct = keyword_overlap(resume_text, job.description)

    return QuickScore(
        score=round2(skills.overall_skill_score * 0.6 + keyword_pct * 0.4),
        matched_skills=skills.matched_required,
        missing_skills=skills.missing_required,
        skill_match_percentage=skills.required_match_percentage,
        keyword_match_percentage=round2(keyword_pct),
    )


def batch_score(resume: ResumeProfile, jobs: List[Dict[str, Any]], limit: int = BATCH_SCORE_LIMIT) -> BatchScoreResult:
    items: List[BatchScoreItem] = []
    for index, raw in enumerate(jobs[:limit]):
        raw = raw if isinstance(raw, dict) else {}
        job_id = raw.get("id") or raw.get("_id")
        title = raw.get("title") or raw.get("job_title") or "Unknown"
        company = raw.get("company") or raw.get("employer_name") or "Unknown"
        base = {
            "job_index": index,
            "job_id": str(job_id) if job_id is not None else str(index),
            "job_title": str(title),
            "company": str(company),
        }
        try:
            # ids arrive as numbers from some callers
            posting = JobPosting.model_validate({**raw, "id": str(job_id) if job_id is not None else None})
            scored = quick_score(resume, posting)
            items.append(BatchScoreItem(**base, **scored.model_dump()))
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"batch score failed for job #{index}: {e}")
            items.append(BatchScoreItem(**base, error=str(e), score=0))

    items.sort(key=lambda it: it.score, reverse=True)
    return BatchScoreResult(total_jobs=len(jobs), scored_jobs=len(items), scores=items)
