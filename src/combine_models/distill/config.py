"""Distillation configuration: the typed core config and its textual surface."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from combine_models.errors import InvalidConfiguration
from combine_models.models.base import Classifier
from combine_models.models.factory import DEFAULT_META, DEFAULT_SURROGATE, ClassifierFactory


@dataclass(frozen=True)
class DistillationConfig:
    """Immutable settings consumed by ``DistillationOrchestrator.build``.

    ``meta`` and ``surrogate`` are untrained templates; every build trains
    its own fresh copies of them.
    """

    meta: Classifier
    surrogate: Classifier
    resample_fraction: float = 1.0
    seed: int = 1
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.meta, Classifier):
            raise InvalidConfiguration(f"meta must be a Classifier, got {type(self.meta).__name__}")
        if not isinstance(self.surrogate, Classifier):
            raise InvalidConfiguration(
                f"surrogate must be a Classifier, got {type(self.surrogate).__name__}"
            )
        fraction = self.resample_fraction
        if isinstance(fraction, bool) or not isinstance(fraction, (int, float)):
            raise InvalidConfiguration(f"resample_fraction must be a number, got {fraction!r}")
        if not math.isfinite(fraction) or fraction <= 0:
            raise InvalidConfiguration(f"resample_fraction must be positive, got {fraction}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise InvalidConfiguration(f"seed must be an integer, got {self.seed!r}")

    @classmethod
    def from_percent(
        cls,
        meta: Classifier,
        surrogate: Classifier,
        resample_percent: float = 100.0,
        seed: int = 1,
        debug: bool = False,
    ) -> "DistillationConfig":
        return cls(
            meta=meta,
            surrogate=surrogate,
            resample_fraction=resample_percent / 100.0,
            seed=seed,
            debug=debug,
        )

    @property
    def resample_percent(self) -> float:
        return self.resample_fraction * 100.0


class ClassifierSpec(BaseModel):
    """Classifier identifier plus the options forwarded to its constructor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Registered name or dotted import path")
    options: dict[str, Any] = Field(default_factory=dict)

    def build(self, seed: int | None = None) -> Classifier:
        return ClassifierFactory.create(self.name, self.options, seed=seed)


class DistillationSettings(BaseModel):
    """Validated textual configuration (YAML / CLI flags)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    resample_percent: float = Field(
        100.0, gt=0, description="Size of the generated training set, % of the training set"
    )
    seed: int = Field(1, description="Random number seed for resampling")
    meta: ClassifierSpec = Field(default_factory=lambda: ClassifierSpec(name=DEFAULT_META))
    surrogate: ClassifierSpec = Field(
        default_factory=lambda: ClassifierSpec(name=DEFAULT_SURROGATE)
    )
    class_column: Optional[str] = Field(None, description="Class column of tabular input")
    debug: bool = False

    @field_validator("resample_percent")
    @classmethod
    def check_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"resample_percent must be finite, got {v}")
        return v

    @field_validator("meta", "surrogate", mode="before")
    @classmethod
    def accept_bare_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {"name": v}
        return v

    @classmethod
    def from_mapping(cls, raw: dict[str, Any] | None) -> "DistillationSettings":
        """Validate *raw*, reporting problems as ``InvalidConfiguration``."""
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise InvalidConfiguration(str(exc)) from exc

    def merged(self, **overrides: Any) -> "DistillationSettings":
        """Copy with non-None *overrides* applied (and re-validated)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_mapping(data)

    def to_config(self) -> DistillationConfig:
        return DistillationConfig.from_percent(
            meta=self.meta.build(seed=self.seed),
            surrogate=self.surrogate.build(seed=self.seed),
            resample_percent=self.resample_percent,
            seed=self.seed,
            debug=self.debug,
        )

    def to_options(self) -> list[str]:
        """Effective settings as command-line style options."""
        options = [
            "--resample-percent",
            f"{self.resample_percent:g}",
            "--seed",
            str(self.seed),
            "--meta",
            self.meta.name,
            "--surrogate",
            self.surrogate.name,
        ]
        if self.class_column:
            options += ["--class-column", self.class_column]
        if self.debug:
            options.append("--debug")
        return options
