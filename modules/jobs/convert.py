from typing import List, Optional

from modules.ats.schemas import AnalysisResult, JobPosting, ResumeProfile
from modules.ats.skills import extract_skills_from_text
from modules.shared.utils import parse_float
from .schemas import AtsSummary, JobListing, ResumeRecord


def determine_role_type(title: Optional[str], min_years: float) -> str:
    t = (title or "").lower()
    if "intern" in t:
        return "intern"
    if min_years == 0 or "fresher" in t or "junior" in t:
        return "fresher"
    if "manager" in t or min_years > 8:
        return "manager"
    if "lead" in t or "senior" in t or min_years > 5:
        return "lead"
    return "software_engineer"


def _experience_line(title, company, start, end, description) -> str:
    return f"{title or ''} at {company or ''} ({start or ''} - {end or 'Present'}): {description or ''}"


def resume_to_profile(record: ResumeRecord) -> ResumeProfile:
    experience: List[str] = [
        _experience_line(e.title, e.company, e.start_date, e.end_date, e.description)
        for e in record.experience
    ]
    education = [f"{e.degree or ''}, {e.institution or ''} ({e.year or ''})" for e in record.education]
    projects = []
    for p in record.projects:
        tech = ", ".join(p.technologies)
        projects.append(f"{p.name or ''}: {p.description or ''}" + (f" [{tech}]" if tech else ""))

    info = record.personal_info
    return ResumeProfile(
        full_name=info.full_name,
        email=info.email,
        phone=info.phone,
        location=info.location,
        summary=record.summary or None,
        skills=record.skills,
        work_experience=experience,
        projects=projects,
        education=education,
        certifications=record.certifications,
        years_of_experience=max(0.0, parse_float(record.total_experience)),
        work_authorization=record.work_authorization or None,
        highest_degree=record.education[0].degree if record.education else None,
    )


def listing_to_posting(listing: JobListing) -> JobPosting:
    """Scoring input for a provider listing.

    Listings rarely carry a structured skill list, so one is extracted from the
    description when missing.
    """
    min_years = listing.experience_required.min
    max_years = listing.experience_required.max or None
    return JobPosting(
        id=listing.id,
        title=listing.title,
        company=listing.company,
        location=listing.location or "Any",
        description=listing.description,
        required_skills=listing.required_skills or extract_skills_from_text(listing.description),
        preferred_skills=[],
        min_experience=min_years,
        max_experience=max_years,
        required_education=listing.required_education,
        role_type=determine_role_type(listing.title, min_years),
    )


def summarize(result: AnalysisResult) -> AtsSummary:
    return AtsSummary(
        overall_match_percentage=result.overall_match_percentage,
        matched_skills=result.matched_skills,
        missing_skills=result.missing_skills,
        feedback=result.feedback,
        recommendations=result.recommendations,
        hard_filters=result.hard_filters,
    )
