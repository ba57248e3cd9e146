"""Configuration schema using Pydantic."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHAIN_NAME = "post_process"


class StageConfig(BaseModel):
    """One stage registration inside a configured chain."""

    model_config = ConfigDict(extra="ignore")

    stage: str
    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    before: str | None = None
    after: str | None = None
    enabled: bool = True

    @field_validator("stage")
    @classmethod
    def _validate_stage(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("stage path must not be empty")
        return value

    @model_validator(mode="after")
    def _validate_anchor(self) -> "StageConfig":
        if self.before and self.after:
            raise ValueError(f"stage {self.stage}: set either before or after, not both")
        return self


class ChainConfig(BaseModel):
    """Ordered stage list for one named chain."""

    model_config = ConfigDict(extra="ignore")

    relocation: Literal["keep", "replace"] = "keep"
    stages: list[StageConfig] = Field(default_factory=list)


def _default_chains() -> dict[str, ChainConfig]:
    return {DEFAULT_CHAIN_NAME: ChainConfig()}


class Config(BaseSettings):
    """Root configuration for stagechain."""

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_prefix="STAGECHAIN_",
        env_nested_delimiter="__",
    )

    config_version: int = 1
    chains: dict[str, ChainConfig] = Field(default_factory=_default_chains)

    def chain(self, name: str) -> ChainConfig | None:
        return self.chains.get(name)
