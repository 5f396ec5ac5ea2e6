from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Logging
    log_level: str = "WARNING"

    # GitHub API (rate limit probe)
    github_api_url: str = "https://api.github.com"
    github_token: str = ""  # optional, raises the anonymous 60/h limit
    github_timeout: float = 10.0

    # Alternate executables probed in addition to the catalog
    python3_host_prog: str = ""
    java_home: str = ""  # read from JAVA_HOME

    # Extra checks (YAML list, see health.catalog.load_checks_file)
    checks_file: str = ""

    # Registries, as "github:<owner>/<repo>" or "file:<path>". None by default.
    registries: list[str] = []
    data_dir: str = "~/.local/share/toolcheck"

    # Seconds before a check is killed and reported as not available.
    # None keeps waiting for as long as the process runs.
    check_timeout: float | None = None


settings = Settings()
