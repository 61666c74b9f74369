"""Synonym-aware skill matching and skill extraction from free text."""
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from pydantic import BaseModel

from modules.shared.utils import round2
from .schemas import SkillAnalysis
from .text import extract_keywords, extract_technical_terms


ABBREVIATIONS: Dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "k8s": "kubernetes",
    "aws": "amazon web services",
    "gcp": "google cloud platform",
    "ml": "machine learning",
    "ai": "artificial intelligence",
    "ci/cd": "continuous integration continuous deployment",
    "api": "application programming interface",
}

SKILL_SYNONYMS: Dict[str, List[str]] = {
    "javascript": ["js", "ecmascript", "node.js", "nodejs"],
    "typescript": ["ts"],
    "python": ["py"],
    "kubernetes": ["k8s"],
    "docker": ["containerization", "containers"],
    "aws": ["amazon web services", "amazon cloud"],
    "gcp": ["google cloud platform", "google cloud"],
    "azure": ["microsoft azure"],
    "postgresql": ["postgres", "psql"],
    "mongodb": ["mongo"],
    "react": ["reactjs", "react.js"],
    "angular": ["angularjs", "angular.js"],
    "vue": ["vuejs", "vue.js"],
    "machine learning": ["ml", "deep learning", "neural networks"],
    "artificial intelligence": ["ai"],
    "continuous integration": ["ci", "ci/cd"],
    "continuous deployment": ["cd", "ci/cd"],
    "node": ["nodejs", "node.js"],
    "express": ["expressjs", "express.js"],
    "next": ["nextjs", "next.js"],
    "mysql": ["sql"],
    "sql server": ["mssql"],
    "restful": ["rest", "rest api"],
    "graphql": ["gql"],
}

TECH_VOCABULARY: FrozenSet[str] = frozenset({
    # languages
    "python", "java", "javascript", "typescript", "c++", "c#", "c", "ruby",
    "php", "go", "golang", "rust", "swift", "kotlin", "scala", "perl", "r",
    "matlab", "julia", "dart", "elixir", "haskell", "clojure", "objective-c",
    "groovy", "lua", "shell", "bash", "powershell", "vba", "cobol", "fortran",
    # frontend
    "react", "reactjs", "react.js", "angular", "angularjs", "vue", "vuejs",
    "vue.js", "svelte", "next.js", "nextjs", "nuxt", "gatsby", "ember",
    "backbone", "jquery", "bootstrap", "tailwind", "material-ui", "mui",
    "ant design", "chakra ui", "sass", "scss", "less", "styled-components",
    "emotion", "redux", "mobx", "recoil", "zustand", "webpack", "vite",
    "rollup", "parcel", "babel", "eslint", "prettier", "jest", "cypress",
    "playwright", "selenium", "webdriver", "storybook",
    # backend
    "node", "nodejs", "node.js", "express", "expressjs", "nestjs", "fastify",
    "koa", "django", "flask", "fastapi", "pyramid", "tornado", "spring",
    "spring boot", "springboot", "hibernate", "struts", "jsf", "play",
    "laravel", "symfony", "codeigniter", "yii", "rails", "ruby on rails",
    "sinatra", "asp.net", ".net", "dotnet", ".net core", "entity framework",
    "gin", "echo", "beego", "fiber", "actix", "rocket", "warp",
    # mobile
    "react native", "flutter", "ionic", "xamarin", "cordova", "phonegap",
    "android", "ios", "swift ui", "jetpack compose", "kotlin multiplatform",
    # sql
    "sql", "mysql", "postgresql", "postgres", "oracle", "sql server", "mssql",
    "sqlite", "mariadb", "db2", "teradata", "snowflake", "redshift",
    "bigquery", "aurora", "cockroachdb",
    # nosql
    "nosql", "mongodb", "cassandra", "couchdb", "dynamodb", "neo4j",
    "redis", "memcached", "elasticsearch", "solr", "firebase", "firestore",
    "realm", "couchbase", "hbase", "riak",
    # cloud
    "aws", "amazon web services", "ec2", "s3", "lambda", "cloudformation",
    "cloudfront", "route53", "rds", "sqs", "sns", "kinesis",
    "azure", "microsoft azure", "azure devops", "gcp", "google cloud",
    "google cloud platform", "heroku", "digitalocean", "linode",
    "vultr", "cloudflare", "vercel", "netlify", "render",
    # devops
    "docker", "kubernetes", "k8s", "openshift", "rancher", "helm", "istio",
    "jenkins", "gitlab ci", "github actions", "circleci", "travis ci",
    "teamcity", "bamboo", "azure pipelines", "argo cd", "flux", "spinnaker",
    "terraform", "ansible", "puppet", "chef", "saltstack", "vagrant",
    "packer", "consul", "vault", "prometheus", "grafana", "datadog",
    "new relic", "splunk", "elk stack", "logstash", "kibana", "fluentd",
    # version control
    "git", "github", "gitlab", "bitbucket", "svn", "mercurial", "perforce",
    "git flow", "trunk based development",
    # testing
    "junit", "testng", "mockito", "pytest", "unittest", "nose",
    "mocha", "jasmine", "karma", "protractor", "cucumber", "behave", "rspec",
    "xunit", "nunit", "mstest", "postman", "insomnia", "jmeter", "gatling",
    "locust", "k6",
    # messaging
    "kafka", "rabbitmq", "activemq", "zeromq", "nats", "pulsar", "mqtt",
    "redis pub/sub", "amazon sqs", "google pub/sub", "azure service bus",
    # protocols
    "rest", "restful", "graphql", "grpc", "soap", "websocket",
    "http", "https", "tcp", "udp", "oauth", "jwt", "saml", "openid",
    # architecture
    "microservices", "monolith", "serverless", "event driven", "cqrs",
    "event sourcing", "domain driven design", "ddd", "clean architecture",
    "hexagonal architecture", "mvc", "mvvm", "mvp", "soa", "rest api",
    # ml / ai
    "machine learning", "ml", "deep learning", "neural networks", "cnn",
    "rnn", "lstm", "gru", "transformer", "bert", "gpt", "llm", "nlp",
    "computer vision", "opencv", "tensorflow", "pytorch", "keras",
    "scikit-learn", "sklearn", "xgboost", "lightgbm", "catboost",
    "pandas", "numpy", "scipy", "matplotlib", "seaborn", "plotly",
    "hugging face", "langchain", "llama", "stable diffusion", "yolo",
    # data engineering
    "hadoop", "spark", "pyspark", "hive", "pig", "sqoop", "flume",
    "airflow", "luigi", "prefect", "dagster", "dbt", "databricks",
    "presto", "trino", "flink", "storm", "samza", "beam", "dataflow",
    # os / editors
    "linux", "unix", "ubuntu", "centos", "rhel", "debian", "fedora",
    "windows", "macos", "vim", "emacs", "vscode",
    "intellij", "eclipse", "netbeans", "pycharm", "webstorm",
    # practices
    "agile", "scrum", "kanban", "lean", "devops", "ci/cd", "tdd",
    "test driven development", "bdd", "behavior driven development",
    "pair programming", "code review", "solid", "design patterns",
    # misc
    "webscraping", "web scraping", "beautifulsoup", "scrapy",
    "nginx", "apache", "tomcat", "iis", "load balancing", "caching",
    "cdn", "oauth2", "authentication", "authorization", "encryption",
    "ssl", "tls", "vpn", "api gateway", "service mesh", "etl",
    "data warehouse", "data lake", "olap", "oltp", "indexing",
    "sharding", "replication", "partitioning", "normalization",
})


class SynonymMatch(BaseModel):
    matched: List[str] = []
    missing: List[str] = []
    match_pct: float = 0.0


def canonical_skill(skill: Optional[str]) -> str:
    low = (skill or "").strip().lower()
    return ABBREVIATIONS.get(low, low)


def canonical_skills(skills: Optional[Iterable[str]]) -> List[str]:
    """Canonical forms in first-seen order, blanks dropped."""
    out: List[str] = []
    for s in skills or []:
        c = canonical_skill(s)
        if c and c not in out:
            out.append(c)
    return out


def normalize_skills(skills: Optional[Iterable[str]]) -> Set[str]:
    """Canonical forms plus every synonym they are known by."""
    normalized: Set[str] = set()
    for c in canonical_skills(skills):
        normalized.add(c)
        normalized.update(SKILL_SYNONYMS.get(c, []))
    return normalized


def match_with_synonyms(resume_skills: Optional[List[str]], job_skills: Optional[List[str]]) -> SynonymMatch:
    job = canonical_skills(job_skills)
    # an empty side is a 0% match rather than "unknown"
    if not resume_skills or not job:
        return SynonymMatch(missing=job)

    have = normalize_skills(resume_skills)
    matched = [s for s in job if s in have]
    missing = [s for s in job if s not in have]
    return SynonymMatch(matched=matched, missing=missing, match_pct=len(matched) / len(job))


def match_skills(
    resume_skills: Optional[List[str]],
    required_skills: Optional[List[str]],
    preferred_skills: Optional[List[str]] = None,
) -> SkillAnalysis:
    req = match_with_synonyms(resume_skills, required_skills)
    pref = match_with_synonyms(resume_skills, preferred_skills or [])

    required_pct = req.match_pct * 100
    preferred_pct = pref.match_pct * 100
    overall = required_pct * 0.7 + preferred_pct * 0.3

    return SkillAnalysis(
        matched_required=req.matched,
        matched_preferred=pref.matched,
        missing_required=req.missing,
        missing_preferred=pref.missing,
        required_match_percentage=round2(required_pct),
        preferred_match_percentage=round2(preferred_pct),
        overall_skill_score=round2(overall),
        total_matched=len(req.matched) + len(pref.matched),
        total_missing=len(req.missing) + len(pref.missing),
    )


def extract_skills_from_text(text: Optional[str]) -> List[str]:
    """Recognized technical skills mentioned in ``text``, sorted."""
    if not text:
        return []
    terms = extract_technical_terms(text) | extract_keywords(text)
    return sorted(t for t in terms if t in TECH_VOCABULARY)
