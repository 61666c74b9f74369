from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from modules.ats.schemas import HardFilterResult, ScoringWeights


TaskStatus = Literal["searching", "analyzing", "completed", "failed"]
ErrorKind = Literal["rate_limited", "auth", "bad_request", "provider", "internal"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ExperienceRange(BaseModel):
    min: int = 0
    max: int = 0


class Salary(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"
    period: str = "YEAR"


class Highlights(BaseModel):
    qualifications: List[str] = []
    responsibilities: List[str] = []
    benefits: List[str] = []


class JobListing(BaseModel):
    id: str
    title: str = ""
    company: str = ""
    company_logo: Optional[str] = None
    location: Optional[str] = None
    description: str = ""
    highlights: Highlights = Highlights()
    employment_type: Optional[str] = None
    is_remote: bool = False
    posted_at: Optional[str] = None
    expires_at: Optional[str] = None
    experience_required: ExperienceRange = ExperienceRange()
    experience_match: str = "unknown"
    salary: Optional[Salary] = None
    apply_link: Optional[str] = None
    required_skills: List[str] = []
    required_education: Optional[str] = None
    publisher: Optional[str] = None
    source: str = "jsearch"
    fetched_at: datetime = Field(default_factory=_now)


class ResumeExperience(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class ResumeEducation(BaseModel):
    degree: Optional[str] = None
    institution: Optional[str] = None
    year: Optional[str] = None


class ResumeProject(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    technologies: List[str] = []


class PersonalInfo(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class ResumeRecord(BaseModel):
    """Stored resume snapshot as handed over by the resume store."""
    personal_info: PersonalInfo = PersonalInfo()
    summary: Optional[str] = None
    skills: List[str] = []
    experience: List[ResumeExperience] = []
    education: List[ResumeEducation] = []
    projects: List[ResumeProject] = []
    certifications: List[str] = []
    total_experience: Optional[str] = None
    work_authorization: Optional[str] = None


class AtsSummary(BaseModel):
    overall_match_percentage: float = 0
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    feedback: str = ""
    recommendations: List[str] = []
    hard_filters: Optional[HardFilterResult] = None


class ScoredJob(BaseModel):
    job: JobListing
    ats_score: Optional[float] = None
    ats_analysis: Optional[AtsSummary] = None


class NoJobsGuidance(BaseModel):
    title: str = "No Job Vacancies Found"
    message: str
    suggestions: List[str]
    wish_message: str = "Best wishes for your job search! Try again with different criteria."


class SearchRequest(BaseModel):
    role: Optional[str] = None
    designation: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    platform: Optional[str] = None
    experience_level: float = Field(default=0, ge=0)
    resume: Optional[ResumeRecord] = None
    custom_weights: Optional[ScoringWeights] = None

    @property
    def keyword(self) -> str:
        return (self.role or self.designation or "").strip()


class SearchStarted(BaseModel):
    task_id: str
    poll_url: str
    message: str = "Job search started"


class SearchTask(BaseModel):
    task_id: str
    status: TaskStatus = "searching"
    status_message: str = ""
    progress: int = 0
    found_jobs: int = 0
    total_jobs: int = 0
    processed_jobs: int = 0
    jobs: List[ScoredJob] = []
    completed: bool = False
    ats_analyzed: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    retry_after: Optional[str] = None
    no_jobs_message: Optional[NoJobsGuidance] = None
    started_at: datetime = Field(default_factory=_now)
    last_update: datetime = Field(default_factory=_now)


class ProviderStatus(BaseModel):
    status: str
    requests_limit: Optional[str] = None
    requests_remaining: Optional[str] = None
    requests_reset: Optional[str] = None
    error: Optional[str] = None
