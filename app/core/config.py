"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Airtable table ids are read per logical table
(AIRTABLE_<NAME>_TABLE_ID); a table left empty is reported as a
configuration error the first time a repository asks for it.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Everything has a default so the app can boot without a record store
    (health checks still answer); validate_storage only rejects settings
    that can never work.
    """

    # App
    app_name: str = "cohort-dashboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # Airtable
    airtable_api_key: SecretStr = SecretStr("")
    airtable_base_id: str = ""
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float = 30.0
    airtable_max_retries: int = 3
    airtable_backoff_seconds: float = 0.5

    # Airtable table ids (logical name -> tblXXXX)
    airtable_contacts_table_id: str = ""
    airtable_education_table_id: str = ""
    airtable_institutions_table_id: str = ""
    airtable_programs_table_id: str = ""
    airtable_initiatives_table_id: str = ""
    airtable_cohorts_table_id: str = ""
    airtable_participation_table_id: str = ""
    airtable_teams_table_id: str = ""
    airtable_partnerships_table_id: str = ""
    airtable_applications_table_id: str = ""
    airtable_milestones_table_id: str = ""
    airtable_submissions_table_id: str = ""
    airtable_resources_table_id: str = ""
    airtable_events_table_id: str = ""
    airtable_points_table_id: str = ""
    airtable_rewards_table_id: str = ""
    airtable_claimed_rewards_table_id: str = ""

    # Auth0
    auth0_domain: str = ""
    auth0_audience: str = ""
    auth0_algorithms: str = "RS256"
    auth0_jwks_cache_seconds: int = 3600
    # Custom claim namespace some tenants use for email in access tokens
    auth0_email_claim: str = "https://xfoundry.org/email"
    # Roles claim; defaults to "<audience>/roles" when empty
    auth0_roles_claim: str = ""
    admin_roles: str = "admin,superadmin,program-admin"

    # Read-through cache TTLs (seconds)
    cache_ttl_default: int = 300
    cache_ttl_profile: int = 300
    cache_ttl_cohorts: int = 600
    cache_ttl_participation: int = 600
    cache_ttl_education: int = 3600
    cache_ttl_institutions: int = 86400

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Storage (uploaded deliverables)
    storage_backend: str = "local"
    storage_root: str = "/var/dashboard/uploads"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    max_upload_size: int = 5 * 1024 * 1024  # 5MB
    allowed_mime_types: str = (
        "application/pdf,"
        "application/msword,"
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
        "application/vnd.ms-powerpoint,"
        "application/vnd.openxmlformats-officedocument.presentationml.presentation,"
        "application/vnd.ms-excel,"
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet,"
        "image/jpeg,image/png,image/gif,"
        "application/zip,application/x-zip-compressed,"
        "text/plain"
    )

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate storage backend and retry bounds.

        - s3 requires S3_BUCKET.
        - airtable_max_retries must not be negative.
        """
        if self.storage_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when storage_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.storage_backend != "local":
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local', 's3'"
            )
        if self.airtable_max_retries < 0:
            raise ValueError("AIRTABLE_MAX_RETRIES must be >= 0")
        return self

    @property
    def auth0_configured(self) -> bool:
        return bool(self.auth0_domain and self.auth0_audience)

    @property
    def auth0_issuer(self) -> str:
        return f"https://{self.auth0_domain.strip().rstrip('/')}/"

    @property
    def roles_claim(self) -> str:
        return self.auth0_roles_claim or f"{self.auth0_audience.rstrip('/')}/roles"

    @property
    def airtable_configured(self) -> bool:
        """True when both API key and base id are set."""
        return bool(self.airtable_api_key.get_secret_value() and self.airtable_base_id)

    def airtable_table_ids(self) -> dict[str, str]:
        """Return logical table name -> configured table id (empty when unset)."""
        prefix, suffix = "airtable_", "_table_id"
        return {
            name[len(prefix) : -len(suffix)]: getattr(self, name)
            for name in type(self).model_fields
            if name.startswith(prefix) and name.endswith(suffix)
        }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
