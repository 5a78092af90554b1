"""Runtime settings loaded from environment variables.

All variables use the ``VERTRETUNGSPLAN_`` prefix, e.g.
``VERTRETUNGSPLAN_REQUEST_TIMEOUT=10``. A ``.env`` file in the working
directory is read as well.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Download and logging settings."""

    # {week} is the zero-padded ISO week, {code} the grade's web code
    download_url: str = Field(
        default="http://mpg-vertretungsplan.de/w/{week}/w000{code}.htm",
        description="Address template of the weekly substitution page",
    )
    request_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )
    user_agent: str = Field(
        default="vertretungsplan/0.1",
        description="User-Agent header sent with every request",
    )
    encoding: str = Field(
        default="iso-8859-1",
        description="Character set the site serves its pages in",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )

    model_config = {
        "env_prefix": "VERTRETUNGSPLAN_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
