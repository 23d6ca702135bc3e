"""Pydantic models validating the pymig.yaml configuration file."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AdapterModel(BaseModel):
    """Pydantic model for the ``adapter`` section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["sqlite", "file"] = "sqlite"
    path: str | None = None
    table: str = Field(default="migrations", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")

    @field_validator("type", mode="before")
    @classmethod
    def casefold_type(cls, v: object) -> object:
        """Accept SQLite/File in any case."""
        return v.casefold() if isinstance(v, str) else v


class CollectionModel(BaseModel):
    """Pydantic model for one entry of ``collections``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str | None = None
    migrations: list[str] = Field(default_factory=list)
    namespace: str = Field(default="root", min_length=1)
    version_prefix: str = ""

    @model_validator(mode="after")
    def require_source(self) -> CollectionModel:
        """A collection needs a directory or explicit files."""
        if self.path is None and not self.migrations:
            raise ValueError("collection needs 'path' or 'migrations'")
        return self


class LoggingModel(BaseModel):
    """Pydantic model for the ``logging`` section."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: Literal["debug", "info", "warning", "error"] = "info"
    file: str | None = None
    format: Literal["text", "json"] = "text"
    include_stderr: bool = False
    max_bytes: int = Field(default=10_485_760, ge=1)
    backup_count: int = Field(default=5, ge=0)


class ConfigFileModel(BaseModel):
    """Pydantic model for the whole configuration file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    adapter: AdapterModel = Field(default_factory=AdapterModel)
    migrations_path: str | None = None
    migrations: list[str] = Field(default_factory=list)
    collections: list[CollectionModel] = Field(default_factory=list)
    logging: LoggingModel = Field(default_factory=LoggingModel)
