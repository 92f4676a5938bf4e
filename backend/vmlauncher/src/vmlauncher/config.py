"""
Application Configuration
This module centralizes all configuration for the vmlauncher application.
It uses Pydantic's BaseSettings to load settings from environment variables
and a .env file, providing validation and type hints.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_DIRECTORY = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from the environment and the .env file.

    Attributes:
        app_env (str): Runtime environment (e.g. 'dev', 'prod').
        api_host (str): Host the API server binds to.
        api_port (int): Port the API server binds to.
        log_level (str): Logging level.
        log_json (bool): Whether logs are emitted as JSON.
        vm_req_template (str | None): Template rendered into an InsertInstanceRequest.
        vm_kill_template (str | None): Template rendered into a DeleteInstanceRequest.
        operation_timeout (float | None): Seconds to wait for a compute operation, None waits forever.
    """

    app_env: str = "prod"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    log_json: bool = False

    # Instance request templates
    vm_req_template: Optional[str] = None
    vm_kill_template: Optional[str] = None
    operation_timeout: Optional[float] = None

    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=PROJECT_DIRECTORY / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    # Re-read on every call so template changes in the environment are picked up
    return Settings()
