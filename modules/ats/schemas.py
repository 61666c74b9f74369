from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoringWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    skills: float = Field(ge=0)
    experience: float = Field(ge=0)
    projects: float = Field(ge=0)
    keywords: float = Field(ge=0)
    summary: float = Field(ge=0)
    education: float = Field(ge=0)

    @model_validator(mode="after")
    def _sums_to_one(self):
        total = self.skills + self.experience + self.projects + self.keywords + self.summary + self.education
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"weights must sum to 1.0, got {total:.4f}")
        return self


class ResumeProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = []
    work_experience: List[str] = []
    projects: List[str] = []
    education: List[str] = []
    certifications: List[str] = []
    years_of_experience: float = Field(default=0, ge=0)
    work_authorization: Optional[str] = None
    highest_degree: Optional[str] = None


class JobPosting(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    # None means the posting carries no structured skill list
    required_skills: Optional[List[str]] = None
    preferred_skills: List[str] = []
    min_experience: float = Field(default=0, ge=0)
    max_experience: Optional[float] = None
    required_education: Optional[str] = None
    role_type: str = "default"


class HardFilterResult(BaseModel):
    passed: bool
    location_match: bool
    work_authorization_match: bool
    experience_match: bool
    education_match: bool
    failure_reasons: List[str] = []


class RelevanceScore(BaseModel):
    skills_score: float
    experience_score: float
    projects_score: float
    keywords_score: float
    summary_score: float
    education_score: float
    weighted_total: float
    weights_used: ScoringWeights


class SkillAnalysis(BaseModel):
    matched_required: List[str] = []
    matched_preferred: List[str] = []
    missing_required: List[str] = []
    missing_preferred: List[str] = []
    required_match_percentage: float = 0
    preferred_match_percentage: float = 0
    overall_skill_score: float = 0
    total_matched: int = 0
    total_missing: int = 0


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    hard_filters: HardFilterResult
    relevance_score: Optional[RelevanceScore] = None
    overall_match_percentage: float = 0
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    skill_analysis: SkillAnalysis
    feedback: str = ""
    recommendations: List[str] = []
    analysis_timestamp: datetime
    role_type: str = "default"


class QuickScore(BaseModel):
    score: float = 0
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    skill_match_percentage: float = 0
    keyword_match_percentage: float = 0


class BatchScoreItem(QuickScore):
    job_index: int
    job_id: Optional[str] = None
    job_title: str = "Unknown"
    company: str = "Unknown"
    error: Optional[str] = None


class BatchScoreResult(BaseModel):
    total_jobs: int = 0
    scored_jobs: int = 0
    scores: List[BatchScoreItem] = []


class AnalyzeInput(BaseModel):
    resume: ResumeProfile
    job: JobPosting
    custom_weights: Optional[ScoringWeights] = None


class QuickScoreInput(BaseModel):
    resume: ResumeProfile
    job: JobPosting


class BatchScoreInput(BaseModel):
    resume: ResumeProfile
    # validated one by one so a malformed job does not reject the batch
    jobs: List[Dict[str, Any]]


class ExtractSkillsInput(BaseModel):
    text: str = ""


class ExtractSkillsOutput(BaseModel):
    skills: List[str] = []
    count: int = 0


class MatchSkillsInput(BaseModel):
    resume_skills: List[str]
    required_skills: List[str]
    preferred_skills: List[str] = []
