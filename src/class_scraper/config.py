"""Pipeline configuration loaded from environment variables.

Airtable credentials are optional: when any of them is missing the run
writes local JSON files only.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ClassScraperConfig(BaseSettings):
    """Scraper and sync configuration loaded from environment variables.

    For local development, put overrides in a .env file in the project root.
    """

    # Airtable (all three needed for remote sync)
    airtable_api_key: str = Field(
        default="",
        description="Airtable personal access token",
    )
    airtable_base_id: str = Field(
        default="",
        description="Airtable base ID (appXXXXXXXX)",
    )
    airtable_table_id: str = Field(
        default="",
        description="Airtable table ID or name",
    )
    airtable_api_url: str = Field(
        default="https://api.airtable.com/v0",
        description="Airtable REST API root",
    )

    # Sync behaviour
    batch_size: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Records per create/delete request (Airtable max is 10)",
    )
    batch_delay_seconds: float = Field(
        default=0.25,
        ge=0,
        description="Pause between batch requests (Airtable allows 5 req/s)",
    )
    replace_existing: bool = Field(
        default=True,
        description="Delete every existing remote record before inserting",
    )

    # Paths
    output_dir: str = Field(
        default="data",
        description="Directory for dated JSON snapshots and summaries",
    )
    sources_file: str = Field(
        default="",
        description="Optional JSON source table replacing the built-in one",
    )

    # Browser
    headless: bool = Field(default=True, description="Run Chromium headless")
    navigation_timeout_ms: int = Field(
        default=30000,
        description="Timeout for page navigation",
    )
    wait_timeout_ms: int = Field(
        default=10000,
        description="Timeout for client-rendered listings to appear",
    )
    card_wait_timeout_ms: int = Field(
        default=15000,
        description="Timeout for card listings to appear",
    )

    # Dataset
    region: str = Field(
        default="Southern California",
        description="Region stamped on every class record",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def has_store_credentials(self) -> bool:
        return bool(
            self.airtable_api_key and self.airtable_base_id and self.airtable_table_id
        )


_config: ClassScraperConfig | None = None


def get_config() -> ClassScraperConfig:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = ClassScraperConfig()
    return _config
