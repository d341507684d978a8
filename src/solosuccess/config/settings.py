from functools import lru_cache
from typing import Literal
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Every field can be overridden with an environment variable of the same
    name (case-insensitive) or through a local `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SoloSuccess AI"
    app_version: str = "0.1.0"
    environment: Literal["local", "dev", "staging", "prod"] = "local"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: SecretStr | None = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo_sql: bool = False

    # Redis (rate limit storage and health checks)
    redis_url: SecretStr | None = None

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/minute"
    rate_limit_login: str = "10/minute"
    rate_limit_alert_create: str = "30/minute"
    rate_limit_brand_guidelines: str = "5/minute"

    # Auth
    secret_key: SecretStr | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = 12

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"
    log_pii_masking_enabled: bool = True
    metrics_enabled: bool = True

    # Security Headers Settings
    security_hsts_enabled: bool = True  # Only applied in production
    security_hsts_max_age: int = 31536000
    security_csp_policy: str = "default-src 'self'"
    security_frame_options: str = "DENY"

    # CORS Settings
    cors_origins: list[str] = Field(default_factory=list)
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
    )
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    cors_max_age: int = 600

    # Sentry Error Tracking
    sentry_dsn: str | None = None
    sentry_environment: str | None = None
    sentry_sample_rate: float = 1.0
    sentry_traces_sample_rate: float = 0.1

    # OpenAI
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 30.0
    openai_max_tokens: int = 1000
    chat_history_limit: int = 20

    # Email provider
    email_api_url: str = "https://api.resend.com/emails"
    email_api_key: SecretStr | None = None
    email_from: str = "SoloSuccess AI <hello@solosuccess.ai>"
    app_base_url: str = "http://localhost:3000"

    # Briefcase
    briefcase_max_upload_bytes: int = 10 * 1024 * 1024
    briefcase_default_folder_name: str = "My Briefcase"

    # Social media processor
    social_processor_autostart: bool = False
    social_processor_interval_minutes: int = 15
    social_analysis_window_days: int = 30
    social_analysis_retention_days: int = 30

    # Scraping
    scraping_timeout: float = 20.0
    scraping_user_agent: str = "SoloSuccessBot/1.0 (+https://solosuccess.ai/bot)"
    scraping_history_limit: int = 10

    # Celery Background Jobs Settings
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"
    celery_task_default_queue: str = "default"
    celery_task_default_retry_delay: int = 60
    celery_task_max_retries: int = 3
    celery_task_time_limit: int = 600
    celery_task_soft_time_limit: int = 540
    celery_worker_prefetch_multiplier: int = 4
    celery_worker_max_tasks_per_child: int = 1000
    celery_task_always_eager: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
