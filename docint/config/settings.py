from pydantic_settings import BaseSettings, SettingsConfigDict

from docint.config.exceptions import ConfigurationError

_LAYOUT_ANALYZE_PATH = "/formrecognizer/v2.1/layout/analyze"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_key: str = ""
    endpoint: str = ""
    analyze_url: str = ""

    upload_dir: str = "uploads"
    max_upload_bytes: int = 60 * 1024 * 1024

    max_size_bytes: int = 10 * 1024 * 1024
    remote_max_bytes: int = 50 * 1024 * 1024

    timeout_seconds: float = 120.0
    poll_interval_seconds: float = 1.0
    max_backoff_seconds: float = 30.0
    server_error_delay_seconds: float = 2.0
    submit_timeout_seconds: float = 60.0

    image_max_dimension: int = 4000
    image_quality: int = 80

    pdf_engine: str = "ghostscript"
    pdf_quality_preset: str = "screen"
    ghostscript_commands: list[str] = ["gs", "gswin64c"]

    @property
    def resolved_analyze_url(self) -> str:
        """Explicit analyze URL, or the layout endpoint under the service base URL."""
        if self.analyze_url:
            return self.analyze_url
        if not self.endpoint:
            return ""
        return f"{self.endpoint.rstrip('/')}{_LAYOUT_ANALYZE_PATH}"

    def require_remote(self) -> None:
        """Refuse to run without a reachable analysis service.

        Raises:
            ConfigurationError: if the analyze URL or the API key is missing.
        """
        if not self.resolved_analyze_url or not self.api_key:
            raise ConfigurationError(
                "Set ANALYZE_URL (or ENDPOINT) and API_KEY in the environment."
            )
