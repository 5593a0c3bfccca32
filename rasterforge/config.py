"""Default tuning values for the pixel operations.

Every operation takes its parameters as keyword arguments; when a caller
leaves one out the value comes from :data:`DEFAULT_SETTINGS`. Deployments can
build their own :class:`Settings` (or read one from the environment with
:meth:`Settings.from_env`) and pass the fields through explicitly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional


ENV_PREFIX = "RASTERFORGE_"


@dataclass(frozen=True)
class Settings:
    # Seed for random dithering when no generator is supplied.
    random_seed: int = 0
    # Half-width of the uniform noise added to normalized luma.
    random_noise: float = 0.2
    # Normalized luma cut-off for plain threshold dithering.
    threshold: float = 0.5
    # The legacy edge filter runs the high-pass kernel three times.
    edge_passes: int = 3
    popularity_palette_size: int = 256
    # Bits kept per channel by the popularity pre-pass (5 -> 32 levels).
    popularity_bits: int = 5

    def __post_init__(self) -> None:
        if self.random_noise < 0:
            raise ValueError("random_noise must be >= 0")
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must be within [0, 1]")
        if self.edge_passes < 1:
            raise ValueError("edge_passes must be >= 1")
        if self.popularity_palette_size < 1:
            raise ValueError("popularity_palette_size must be >= 1")
        if not 1 <= self.popularity_bits <= 8:
            raise ValueError("popularity_bits must be within [1, 8]")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``RASTERFORGE_<FIELD>`` environment variables.

        Unset variables keep their defaults. Values are converted with the
        type of the field's default.
        """
        env = os.environ if environ is None else environ
        base = cls()
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            kind = type(getattr(base, f.name))
            try:
                overrides[f.name] = kind(raw)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()}: invalid value {raw!r}") from e
        return replace(base, **overrides)


DEFAULT_SETTINGS = Settings()


__all__ = ["Settings", "DEFAULT_SETTINGS", "ENV_PREFIX"]
