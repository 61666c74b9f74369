"""
Unit tests for the two-stage relevance scorer.
"""

import unittest

from pydantic import ValidationError

from modules.ats import config
from modules.ats.schemas import JobPosting, ResumeProfile, ScoringWeights
from modules.ats.scorer import (
    analyze,
    batch_score,
    check_education,
    check_experience,
    check_work_authorization,
    evaluate_hard_filters,
    quick_score,
    relevance_score,
)


SAMPLE_RESUME = ResumeProfile(
    full_name="Asha Rao",
    summary="Backend engineer building Python and Django services on AWS with Docker.",
    skills=["Python", "Django", "PostgreSQL", "Docker", "AWS"],
    work_experience=[
        "Software Engineer at Acme (2020 - Present): Built Django REST services in Python, "
        "deployed with Docker on AWS, tuned PostgreSQL queries",
    ],
    projects=["Inventory API: Django REST API with PostgreSQL [Python, Docker]"],
    education=["B.Tech Computer Science, NIT (2019)"],
    certifications=[],
    years_of_experience=4,
    highest_degree="B.Tech",
)

SAMPLE_JOB = JobPosting(
    title="Backend Developer",
    company="Globex",
    description=(
        "We are hiring a backend developer to build Python Django services. "
        "You will deploy with Docker on AWS and design PostgreSQL schemas. 3+ years required."
    ),
    required_skills=["Python", "Django", "PostgreSQL"],
    preferred_skills=["Docker", "Kubernetes"],
    min_experience=3,
    required_education="Bachelor's degree in Computer Science",
    role_type="developer",
)


class TestHardFilters(unittest.TestCase):

    def test_entry_level_experience_always_passes(self):
        for required in (0, 1):
            self.assertTrue(check_experience(0, required))

    def test_experience_ratio(self):
        self.assertFalse(check_experience(5, 10))
        self.assertTrue(check_experience(8, 10))

    def test_work_authorization_only_checked_when_mentioned(self):
        self.assertTrue(check_work_authorization(None, "Build APIs in Python"))
        self.assertFalse(check_work_authorization(None, "Must be authorized to work in the US"))
        self.assertFalse(check_work_authorization("Happy to relocate", "Visa sponsorship not available"))
        self.assertTrue(check_work_authorization("US citizen", "Must be eligible to work in the US"))

    def test_education_levels(self):
        self.assertTrue(check_education(None, [], None))
        self.assertTrue(check_education(None, [], "Relevant certification preferred"))
        self.assertFalse(check_education(None, [], "Bachelor's degree"))
        self.assertFalse(check_education("Diploma", [], "Bachelor's degree"))
        self.assertTrue(check_education(None, ["MSc Data Science, Oxford (2020)"], "Bachelor's degree"))
        self.assertFalse(check_education("B.Tech", [], "Master's or PhD"))

    def test_first_match_wins_for_requirement(self):
        # "bachelor" is declared before "master", so the requirement reads as level 3
        self.assertEqual(config.first_degree_level("Bachelor or Master in CS"), 3)
        self.assertEqual(config.max_degree_level("Bachelor and Master in CS"), 4)

    def test_all_checks_reported(self):
        job = SAMPLE_JOB.model_copy(update={
            "min_experience": 10,
            "description": "Applicants must hold a valid work permit.",
            "required_education": "PhD",
        })
        result = evaluate_hard_filters(SAMPLE_RESUME, job)
        self.assertFalse(result.passed)
        self.assertTrue(result.location_match)
        self.assertFalse(result.work_authorization_match)
        self.assertFalse(result.experience_match)
        self.assertFalse(result.education_match)
        self.assertEqual(len(result.failure_reasons), 3)
        self.assertIn("Requires 10+ years, resume shows 4 years", result.failure_reasons[1])

    def test_passed_is_and_of_checks(self):
        result = evaluate_hard_filters(SAMPLE_RESUME, SAMPLE_JOB)
        self.assertEqual(
            result.passed,
            result.location_match and result.work_authorization_match
            and result.experience_match and result.education_match,
        )
        self.assertTrue(result.passed)
        self.assertEqual(result.failure_reasons, [])

    def test_zero_experience_job_passes_any_resume(self):
        bare = ResumeProfile()
        job = JobPosting(description="Junior role", min_experience=0)
        self.assertTrue(evaluate_hard_filters(bare, job).passed)


class TestRelevanceScore(unittest.TestCase):

    def test_sub_scores_and_total_in_range(self):
        score = relevance_score(SAMPLE_RESUME, SAMPLE_JOB)
        for value in (
            score.skills_score, score.experience_score, score.projects_score,
            score.keywords_score, score.summary_score, score.education_score,
            score.weighted_total,
        ):
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 100)
        self.assertEqual(score.weights_used, config.SOFTWARE_ENGINEER)

    def test_skills_and_education_components(self):
        score = relevance_score(SAMPLE_RESUME, SAMPLE_JOB)
        # required 3/3, preferred 1/2 -> 0.7 * 100 + 0.3 * 50
        self.assertEqual(score.skills_score, 85.0)
        self.assertEqual(score.education_score, 100.0)

    def test_defaults_without_summary_or_projects(self):
        resume = SAMPLE_RESUME.model_copy(update={"summary": None, "projects": []})
        score = relevance_score(resume, SAMPLE_JOB)
        self.assertEqual(score.summary_score, 50.0)
        self.assertEqual(score.projects_score, 0.0)

    def test_education_score_without_any_degree(self):
        resume = SAMPLE_RESUME.model_copy(update={"education": [], "highest_degree": None})
        self.assertEqual(relevance_score(resume, SAMPLE_JOB).education_score, 0.0)

    def test_education_score_partial(self):
        resume = SAMPLE_RESUME.model_copy(update={"education": ["Diploma in IT"], "highest_degree": "Diploma"})
        self.assertEqual(relevance_score(resume, SAMPLE_JOB).education_score, 50.0)

    def test_weighted_total_uses_custom_weights(self):
        only_skills = ScoringWeights(skills=1, experience=0, projects=0, keywords=0, summary=0, education=0)
        score = relevance_score(SAMPLE_RESUME, SAMPLE_JOB, only_skills)
        self.assertEqual(score.weighted_total, score.skills_score)

    def test_weight_sets_sum_to_one(self):
        for weights in (config.SOFTWARE_ENGINEER, config.FRESHER_INTERN, config.MANAGER_LEAD, config.DEFAULT):
            total = sum(weights.model_dump().values())
            self.assertAlmostEqual(total, 1.0, places=6)

    def test_invalid_custom_weights_rejected(self):
        with self.assertRaises(ValidationError):
            ScoringWeights(skills=0.5, experience=0.5, projects=0.5, keywords=0, summary=0, education=0)

    def test_role_lookup(self):
        self.assertEqual(config.get_weights("MANAGER"), config.MANAGER_LEAD)
        self.assertEqual(config.get_weights("intern"), config.FRESHER_INTERN)
        self.assertEqual(config.get_weights("astronaut"), config.DEFAULT)
        self.assertEqual(config.get_weights(None), config.DEFAULT)


class TestAnalyze(unittest.TestCase):

    def test_passing_analysis(self):
        result = analyze(SAMPLE_RESUME, SAMPLE_JOB)
        self.assertTrue(result.hard_filters.passed)
        self.assertIsNotNone(result.relevance_score)
        self.assertEqual(result.overall_match_percentage, result.relevance_score.weighted_total)
        self.assertEqual(result.matched_skills, ["python", "django", "postgresql"])
        self.assertEqual(result.missing_skills, [])
        self.assertEqual(result.role_type, "developer")
        self.assertLessEqual(len(result.recommendations), 5)

    def test_failed_filters_skip_relevance(self):
        job = SAMPLE_JOB.model_copy(update={"min_experience": 10})
        result = analyze(SAMPLE_RESUME, job)
        self.assertIsNone(result.relevance_score)
        self.assertEqual(result.overall_match_percentage, 0)
        self.assertTrue(result.feedback.startswith("Resume did not pass initial screening. Issues: "))
        # skill analysis is still reported
        self.assertEqual(result.skill_analysis.matched_required, ["python", "django", "postgresql"])

    def test_feedback_bands(self):
        weak = ResumeProfile(skills=["cobol"], years_of_experience=0)
        job = JobPosting(description="Python Django developer", required_skills=["python", "django"], min_experience=0)
        result = analyze(weak, job)
        self.assertTrue(result.feedback.startswith("Limited match."))
        self.assertIn("You're missing 2 required/preferred skills.", result.feedback)
        self.assertTrue(result.recommendations[0].startswith("Acquire or highlight these critical skills: python, django"))

    def test_screened_out_recommendations(self):
        weak = ResumeProfile(skills=["cobol"])
        job = JobPosting(description="Python developer", required_skills=["python"], min_experience=10)
        result = analyze(weak, job)
        self.assertEqual(result.recommendations, [
            "Acquire or highlight these critical skills: python",
            "Consider getting certifications in missing skill areas",
        ])

    def test_recommendations_capped(self):
        weak = ResumeProfile(skills=["cobol"])
        job = JobPosting(
            description="Senior python go rust kafka engineer",
            required_skills=["python", "go", "rust", "kafka"],
            role_type="software_engineer",
        )
        result = analyze(weak, job)
        self.assertEqual(len(result.recommendations), 5)
        self.assertIn("python, go, rust", result.recommendations[0])

    def test_manager_role_skips_projects_tip(self):
        job = SAMPLE_JOB.model_copy(update={"role_type": "manager"})
        resume = SAMPLE_RESUME.model_copy(update={"projects": []})
        result = analyze(resume, job)
        self.assertNotIn("Add relevant projects that demonstrate required skills", result.recommendations)

    def test_idempotent_except_timestamp(self):
        first = analyze(SAMPLE_RESUME, SAMPLE_JOB).model_dump(exclude={"analysis_timestamp"})
        second = analyze(SAMPLE_RESUME, SAMPLE_JOB).model_dump(exclude={"analysis_timestamp"})
        self.assertEqual(first, second)


class TestQuickScore(unittest.TestCase):

    def test_uses_structured_skills(self):
        result = quick_score(SAMPLE_RESUME, SAMPLE_JOB)
        self.assertEqual(result.matched_skills, ["python", "django", "postgresql"])
        self.assertEqual(result.skill_match_percentage, 100.0)
        # preferred list is ignored: skills part is 0.7 * 100
        expected = round(70.0 * 0.6 + result.keyword_match_percentage * 0.4, 2)
        self.assertAlmostEqual(result.score, expected, places=1)

    def test_extracts_skills_when_missing(self):
        job = JobPosting(description="Looking for Kubernetes and Terraform experience on AWS")
        result = quick_score(SAMPLE_RESUME, job)
        # "AWS" is matched under its expanded name
        self.assertEqual(result.matched_skills, ["amazon web services"])
        self.assertIn("kubernetes", result.missing_skills)
        self.assertIn("terraform", result.missing_skills)

    def test_no_hard_filters(self):
        job = SAMPLE_JOB.model_copy(update={"min_experience": 30})
        self.assertGreater(quick_score(SAMPLE_RESUME, job).score, 0)


class TestBatchScore(unittest.TestCase):

    def test_sorted_and_isolated(self):
        jobs = [
            {"id": "a", "title": "Unrelated", "description": "Cobol mainframe", "required_skills": ["cobol"]},
            {"id": "b", "title": "Broken", "min_experience": "lots"},
            SAMPLE_JOB.model_dump(),
        ]
        result = batch_score(SAMPLE_RESUME, jobs)
        self.assertEqual(result.total_jobs, 3)
        self.assertEqual(result.scored_jobs, 3)
        self.assertEqual(result.scores[0].job_title, "Backend Developer")
        broken = [s for s in result.scores if s.job_id == "b"][0]
        self.assertIsNotNone(broken.error)
        self.assertEqual(broken.score, 0)

    def test_numeric_ids_are_scored(self):
        jobs = [
            {"id": 7, "title": "Python dev", "description": "python django"},
            {"_id": 12, "title": "Django dev", "description": "django python"},
        ]
        result = batch_score(ResumeProfile(skills=["python"]), jobs)
        self.assertEqual(sorted(s.job_id for s in result.scores), ["12", "7"])
        for item in result.scores:
            self.assertIsNone(item.error)
            self.assertGreater(item.score, 0)
            self.assertEqual(item.matched_skills, ["python"])

    def test_limit(self):
        jobs = [{"title": f"job {i}", "description": "python"} for i in range(60)]
        result = batch_score(SAMPLE_RESUME, jobs)
        self.assertEqual(result.total_jobs, 60)
        self.assertEqual(result.scored_jobs, 50)


if __name__ == "__main__":
    unittest.main()
