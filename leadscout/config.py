"""Configuration settings for Lead Scout."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "leadscout.db"

    # API Keys
    google_places_api_key: str = ""
    pagespeed_api_key: str = ""
    anthropic_api_key: str = ""

    # HTTP Client Settings
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    navigation_timeout: float = 20.0
    tls_timeout: float = 20.0
    pagespeed_timeout: float = 60.0
    discovery_timeout: float = 30.0

    # LLM Settings
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 1500
    llm_timeout: float = 60.0

    # Caller profile used to bias insight prompts
    business_type: str = "Digital Marketer"
    service_areas: list[str] = []

    # Enrichment Settings
    enrichment_concurrency: int = 5
    enrichment_max_retries: int = 2
    enrichment_attempt_timeout: float = 300.0

    # Scoring Settings
    low_rating_threshold: float = 4.5
    low_performance_threshold: float = 40.0
    webmail_domains: list[str] = [
        "gmail.com",
        "yahoo.com",
        "hotmail.com",
        "outlook.com",
        "aol.com",
        "icloud.com",
    ]
    clamp_scores: bool = False

    # Search Settings
    default_result_count: int = 20
    max_result_count: int = 60
    page_token_delay: float = 2.0

    # Database URL
    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
