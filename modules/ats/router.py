from fastapi import APIRouter, HTTPException
from .schemas import (
    AnalysisResult,
    AnalyzeInput,
    BatchScoreInput,
    BatchScoreResult,
    ExtractSkillsInput,
    ExtractSkillsOutput,
    MatchSkillsInput,
    QuickScore,
    QuickScoreInput,
    SkillAnalysis,
)
from .scorer import analyze as run_analyze, quick_score as run_quick_score, batch_score as run_batch_score
from .skills import extract_skills_from_text, match_skills as run_match_skills


router = APIRouter()


@router.post("/analyze", response_model=AnalysisResult)
def analyze(input: AnalyzeInput):
    return run_analyze(input.resume, input.job, input.custom_weights)


@router.post("/quick-score", response_model=QuickScore)
def quick_score(input: QuickScoreInput):
    return run_quick_score(input.resume, input.job)


@router.post("/batch-score", response_model=BatchScoreResult)
def batch_score(input: BatchScoreInput):
    return run_batch_score(input.resume, input.jobs)


@router.post("/extract-skills", response_model=ExtractSkillsOutput)
def extract_skills(input: ExtractSkillsInput):
    if not input.text.strip():
        raise HTTPException(status_code=400, detail="text required")
    skills = extract_skills_from_text(input.text)
    return ExtractSkillsOutput(skills=skills, count=len(skills))


@router.post("/match-skills", response_model=SkillAnalysis)
def match_skills(input: MatchSkillsInput):
    return run_match_skills(input.resume_skills, input.required_skills, input.preferred_skills)
