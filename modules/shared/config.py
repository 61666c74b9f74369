import os

from dotenv import load_dotenv

load_dotenv()  # reads .env from project root if available

JSEARCH_API_KEY = os.getenv("JSEARCH_API_KEY", "")
JSEARCH_BASE_URL = os.getenv("JSEARCH_BASE_URL", "https://jsearch.p.rapidapi.com")
JSEARCH_TIMEOUT_SEC = float(os.getenv("JSEARCH_TIMEOUT_SEC", "30"))
DEFAULT_SEARCH_LOCATION = os.getenv("DEFAULT_SEARCH_LOCATION", "India")
ATS_BATCH_SIZE = int(os.getenv("ATS_BATCH_SIZE", "3"))  # jobs scored concurrently per batch
ATS_MAX_JOBS = int(os.getenv("ATS_MAX_JOBS", "20"))
BATCH_SCORE_LIMIT = int(os.getenv("BATCH_SCORE_LIMIT", "50"))
TASK_RETENTION_SEC = int(os.getenv("TASK_RETENTION_SEC", "300"))
