"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Dict, List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "orgstats"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Persistent store and rendered artifacts
    DATABASE_URL: str = "sqlite:///database.sqlite"
    OUTPUT_DIR: str = "web"

    # GitHub API
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PER_PAGE: int = 100
    GITHUB_TIMEOUT_SECONDS: float = 30.0
    GITHUB_MAX_ATTEMPTS: int = 1  # 1 = no retry, any API error aborts the run
    GITHUB_BACKOFF_BASE_SECONDS: float = 1.0
    GITHUB_BACKOFF_MAX_SECONDS: float = 16.0
    USER_AGENT: str = "orgstats/1.0"

    # OpenAI narrative drafts (skipped when the key is missing)
    OPENAI_API_KEY: Optional[str] = None
    NARRATIVE_MODEL: str = "gpt-4"
    CHANGELOG_URL: str = "https://lichess.org/changelog"

    # Repositories whose commit history is pulled for the direct-commit digest
    COMMIT_REPOS: List[str] = ["lila", "mobile"]

    # Direct-commit digest allow-list and message filters
    CURATED_COMMIT_AUTHORS: List[str] = [
        "ornicar",
        "veloce",
        "lakinwecker",
        "fitztrev",
        "niklasf",
        "lenguyenthanh",
        "lukhas",
        "isaacl",
        "trevorbayless",
        "thomas-daniels",
        "benediktwerner",
        "kraktus",
        "fituby",
        "schlawg",
    ]
    EXCLUDED_COMMIT_PHRASES: List[str] = [
        "Merge",
        "New Crowdin updates",
        "New translations",
        "golf",
        "tweak",
        "refactor",
    ]

    # Changelog display names
    CORE_REPOS: List[str] = ["lila", "lila-ws", "lifat"]
    REPO_PREFIX_OVERRIDES: Dict[str, str] = {"api": "API Docs"}

    # Static file server
    SERVE_HOST: str = "0.0.0.0"
    SERVE_PORT: int = 8080

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
