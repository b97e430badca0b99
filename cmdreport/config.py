"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is driven by environment variables."""

    # WP-CLI
    report_wp_cli_path: str = "wp"
    report_site_path: str = ""
    report_site_url: str = ""

    # Report commands
    report_backup_command: str = "wp-backup"
    report_db_cleanup_command: str = "wp-db-cleanup"
    report_db_tables_command: str = "wp db size --tables --size_format=b"
    report_auto_commands: dict[str, str] = Field(
        default_factory=dict,
        description='Section name to command, e.g. {"php_version": "php -v"}',
    )
    report_auto_allow_failure: list[str] = Field(
        default_factory=list,
        description="Auto-command sections whose nonzero exit is still shown",
    )

    # Cache
    report_cache_ttl_seconds: int = 300
    report_sr_cache_ttl_seconds: int = 0

    # Runner
    report_command_timeout_seconds: int = 600
    report_runner_workers: int = 4

    # API key
    report_api_key: str = ""

    # Server
    report_host: str = "127.0.0.1"
    report_port: int = 8000

    # Logging
    report_log_level: str = "INFO"
    report_log_json: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def search_replace_ttl(self) -> int:
        return self.report_sr_cache_ttl_seconds or self.report_cache_ttl_seconds


# Singleton, import this from anywhere
settings = Settings()
