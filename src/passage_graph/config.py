"""Configuration management for Passage Graph."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PASSAGE_GRAPH_",
    )

    # New passage defaults
    default_passage_name: str = Field(default="Untitled Passage")
    default_passage_text: str = Field(default="Double-click this passage to edit it.")
    touch_passage_text: str = Field(
        default="Tap this passage, then the pencil icon to edit it."
    )
    primary_touch_ui: bool = Field(
        default=False, description="Use touch wording for placeholder text"
    )

    # Publishing
    default_story_format: str = Field(default="Harlowe")
    default_story_format_version: str = Field(default="3.3.8")
    creator: str = Field(default="passage-graph")
    creator_version: str = Field(default="0.1.0")

    # Canvas
    grid_size: int = Field(default=25, description="Snap grid spacing in pixels")

    # Link graph
    suggestion_threshold: float = Field(
        default=80.0, description="Minimum rapidfuzz score for name suggestions"
    )

    # Logging
    log_verbosity: int = Field(default=0, description="0=WARNING, 1=INFO, 2+=DEBUG")

    @property
    def placeholder_text(self) -> str:
        """Instructional text for a freshly created passage."""
        if self.primary_touch_ui:
            return self.touch_passage_text
        return self.default_passage_text


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
