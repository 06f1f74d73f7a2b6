from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class MarkupSourceConfig(BaseModel):
    """Where the bundled or on-disk XML quiz document is read from."""

    asset_name: str = Field("geology1.xml", description="Name of the XML quiz document.")
    asset_dir: Path | None = Field(
        None, description="Directory to read the document from; bundled assets when unset."
    )
    fallback_title: str = Field("Quiz", description="Title used when the root tag has none.")


class RemoteSourceConfig(BaseModel):
    """Endpoint and transport controls for the JSON quiz source."""

    url: str = Field("https://example.com/api/quizzes/science.json")
    timeout_seconds: float = Field(10.0, gt=0)
    simulate: bool = Field(True, description="Serve the bundled sample instead of calling the URL.")
    simulated_delay_seconds: float = Field(2.0, ge=0)

    @field_validator("url")
    @classmethod
    def url_has_scheme(cls, value: str) -> str:
        """Reject endpoints that requests would not know how to fetch."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return value


class LoggingConfig(BaseModel):
    """Controls for log level and format."""

    level: str = Field("INFO")
    use_json: bool = False


class Settings(BaseModel):
    """Top-level project configuration aggregating all sub-settings."""

    project_name: str = Field("Quiz Engine")
    markup: MarkupSourceConfig = Field(default_factory=MarkupSourceConfig)
    remote: RemoteSourceConfig = Field(default_factory=RemoteSourceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
