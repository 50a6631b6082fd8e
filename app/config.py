"""Edge Functions configuration — loaded from environment / .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SUPABASE_", extra="ignore")

    log_level: str = "INFO"

    # Root of the self-hosted functions volume (holds .env + one dir per function)
    functions_dir: Path | None = None
    functions_source_ext: str = "ts"

    # Backend used to invoke deployed functions
    url: str = "http://localhost:8000"
    service_role_key: str = ""
    invoke_timeout: float = 60.0

    # Edge Runtime process control
    runtime_restart_command: str = "docker restart supabase-edge-functions"
    runtime_restart_timeout: float = 30.0

    @property
    def functions_url(self) -> str:
        return f"{self.url.rstrip('/')}/functions/v1"


settings = Settings()
