from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class GeometryModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # point identity, boundary containment and funnel classification all use it
    tolerance: float = 1e-5

    @field_validator("tolerance")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not v > 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1

    @field_validator("sample_every")
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("sample_every must be >= 1")
        return v


class RecorderModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["none", "memory", "jsonl"] = "none"


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # how Pathfinder.find_path picks the start triangle when none is passed
    start_lookup: Literal["given", "contain", "nearest"] = "contain"


class PathfinderModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "tpa_star"
    run_id: str = "local"
    geometry: GeometryModel = Field(default_factory=GeometryModel)
    log: LogModel = Field(default_factory=LogModel)
    recorder: RecorderModel = Field(default_factory=RecorderModel)
    search: SearchModel = Field(default_factory=SearchModel)
