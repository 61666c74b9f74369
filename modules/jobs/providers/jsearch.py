"""JSearch (RapidAPI) job listings.

Free plan is hard-limited per month; one search call fetches one page of
roughly ten postings.
"""
import re
from typing import List, Optional

import httpx

from modules.shared.config import JSEARCH_API_KEY, JSEARCH_BASE_URL, JSEARCH_TIMEOUT_SEC
from modules.shared.logging import get_logger
from modules.shared.utils import dedup_hash
from ..schemas import ExperienceRange, Highlights, JobListing, ProviderStatus, Salary
from .base import JobProvider, ProviderAuthError, ProviderError, ProviderRequestError, RateLimitError

logger = get_logger("jobs.jsearch")

API_HOST = "jsearch.p.rapidapi.com"
MAX_PAGES = 10

_RANGE_RE = re.compile(r"(\d+)\+?\s*(?:to|-)\s*(\d+)\s*years?")
_PLUS_RE = re.compile(r"(\d+)\+\s*years?")
_SINGLE_RE = re.compile(r"(\d+)\s*years?")


def build_query(keyword: str, location: str = "", company: Optional[str] = None, platform: Optional[str] = None) -> str:
    query = keyword
    if company:
        query = f"{query} at {company}"
    if location:
        query = f"{query} in {location}"
    if platform and platform.lower() != "all":
        query = f"{query} via {platform}"
    return query


def extract_experience(description: Optional[str]) -> ExperienceRange:
    """Years asked for by a posting: "3-5 years", "3+ years" or "3 years"."""
    text = (description or "").lower()
    m = _RANGE_RE.search(text)
    if m:
        return ExperienceRange(min=int(m.group(1)), max=int(m.group(2)))
    m = _PLUS_RE.search(text)
    if m:
        return ExperienceRange(min=int(m.group(1)), max=int(m.group(1)) + 10)
    m = _SINGLE_RE.search(text)
    if m:
        return ExperienceRange(min=int(m.group(1)), max=int(m.group(1)))
    return ExperienceRange()


def match_experience(user_years: float, required: ExperienceRange) -> str:
    if not required.min and not required.max:
        return "unknown"
    if required.min <= user_years <= required.max:
        return "perfect"
    if required.min - 1 <= user_years <= required.max + 1:
        return "good"
    if user_years < required.min:
        return "underqualified"
    return "overqualified"


def _salary(hit: dict) -> Optional[Salary]:
    if not hit.get("job_min_salary") and not hit.get("job_max_salary"):
        return None
    return Salary(
        min=hit.get("job_min_salary"),
        max=hit.get("job_max_salary"),
        currency=hit.get("job_salary_currency") or "USD",
        period=hit.get("job_salary_period") or "YEAR",
    )


def _location(hit: dict) -> Optional[str]:
    if hit.get("job_city") and hit.get("job_state"):
        return f"{hit['job_city']}, {hit['job_state']}, {hit.get('job_country') or ''}".rstrip(", ")
    return hit.get("job_country")


def _education(value) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        # JSearch reports flags such as {"bachelors_degree": true}
        wanted = [k.replace("_", " ") for k, v in value.items() if v is True and "degree" in k]
        return ", ".join(wanted) or None
    return None


def to_listing(hit: dict, user_years: float = 0) -> JobListing:
    title = hit.get("job_title") or ""
    company = hit.get("employer_name") or ""
    description = hit.get("job_description") or ""
    location = _location(hit)
    experience = extract_experience(description)
    logo = hit.get("employer_logo") or (
        f"https://logo.clearbit.com/{hit.get('employer_website') or company.lower().replace(' ', '')}.com"
    )
    highlights = hit.get("job_highlights") or {}
    return JobListing(
        id=str(hit.get("job_id") or dedup_hash(title, company, location or "", hit.get("job_apply_link") or "")),
        title=title,
        company=company,
        company_logo=logo,
        location=location,
        description=description,
        highlights=Highlights(
            qualifications=highlights.get("Qualifications") or [],
            responsibilities=highlights.get("Responsibilities") or [],
            benefits=highlights.get("Benefits") or [],
        ),
        employment_type=hit.get("job_employment_type"),
        is_remote=bool(hit.get("job_is_remote")),
        posted_at=hit.get("job_posted_at_datetime_utc"),
        expires_at=hit.get("job_offer_expiration_datetime_utc"),
        experience_required=experience,
        experience_match=match_experience(user_years, experience),
        salary=_salary(hit),
        apply_link=hit.get("job_apply_link"),
        required_skills=hit.get("job_required_skills") or [],
        required_education=_education(hit.get("job_required_education")),
        publisher=hit.get("job_publisher"),
        source="jsearch",
    )


class JSearchProvider(JobProvider):
    def __init__(
        self,
        api_key: str = JSEARCH_API_KEY,
        base_url: str = JSEARCH_BASE_URL,
        timeout: float = JSEARCH_TIMEOUT_SEC,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        if not api_key:
            logger.warning("JSEARCH_API_KEY not set; provider requests will be rejected")

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=self.transport,
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": API_HOST},
        )

    def search(
        self,
        keyword: str,
        location: str = "",
        experience: float = 0,
        page: int = 1,
        num_pages: int = 1,
        company: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> List[JobListing]:
        params = {
            "query": build_query(keyword, location, company, platform),
            "page": str(page),
            "num_pages": str(min(num_pages, MAX_PAGES)),
            "date_posted": "all",
        }
        logger.debug(f"jsearch params: {params}")
        try:
            with self._client(self.timeout) as client:
                resp = client.get("/search", params=params)
        except httpx.HTTPError as e:
            raise ProviderError(f"JSearch API unreachable: {e}") from e

        if resp.status_code == 429:
            reset = resp.headers.get("x-ratelimit-requests-reset")
            logger.warning(f"jsearch rate limit hit, resets in {reset}s")
            raise RateLimitError(f"Rate limit exceeded. Try again in {reset} seconds", retry_after=reset)
        if resp.status_code == 403:
            logger.warning("jsearch rejected credentials; check JSEARCH_API_KEY")
            raise ProviderAuthError("JSearch API authentication failed")
        if resp.status_code == 400:
            detail = _message(resp) or "Invalid request parameters"
            logger.warning(f"jsearch bad request: {detail}")
            raise ProviderRequestError(detail)
        if resp.status_code >= 400:
            raise ProviderError(f"JSearch API returned HTTP {resp.status_code}")

        data = resp.json()
        if data.get("status") == "ERROR":
            raise ProviderError((data.get("error") or {}).get("message") or "JSearch API returned error")
        hits = data.get("data") or []
        logger.info(f"jsearch returned {len(hits)} jobs for {params['query']!r}")
        return [to_listing(h, experience) for h in hits]

    def status(self) -> ProviderStatus:
        try:
            with self._client(10.0) as client:
                resp = client.get("/search", params={"query": "test", "page": "1", "num_pages": "1"})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            return ProviderStatus(status="ERROR", error=str(e))
        return ProviderStatus(
            status="OK",
            requests_limit=resp.headers.get("x-ratelimit-requests-limit"),
            requests_remaining=resp.headers.get("x-ratelimit-requests-remaining"),
            requests_reset=resp.headers.get("x-ratelimit-requests-reset"),
        )


def _message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("message") if isinstance(body, dict) else None
