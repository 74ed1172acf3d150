"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from familyroots.models import SpouseStatus


class DatabaseSettings(BaseSettings):
    """Database path settings."""

    model_config = SettingsConfigDict(env_prefix="FAMILYROOTS_DB_")

    graph_db_path: str = "data/family_graph.db"
    persons_db_path: str = "data/persons.db"

    def ensure_dirs(self) -> None:
        """Create data directories if needed."""
        for path in (self.graph_db_path, self.persons_db_path):
            Path(path).parent.mkdir(parents=True, exist_ok=True)


class GraphSettings(BaseSettings):
    """Limits and policies applied by graph mutations."""

    model_config = SettingsConfigDict(env_prefix="FAMILYROOTS_GRAPH_")

    max_parents: int = 4
    demoted_spouse_status: SpouseStatus = SpouseStatus.DIVORCED

    @field_validator("demoted_spouse_status")
    @classmethod
    def _not_current(cls, value: SpouseStatus) -> SpouseStatus:
        if value == SpouseStatus.CURRENT:
            raise ValueError("demoted spouse status cannot be current")
        return value


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database: DatabaseSettings = DatabaseSettings()
    graph: GraphSettings = GraphSettings()


settings = Settings()
