"""
settings.py: runtime configuration.
Values come from the environment (or a .env file next to where the tool runs).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_FENTANYL_NOMINAL_MG = 1000.0


def _get_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name, default)
    if val is None or val == "":
        return default
    return val


@dataclass(frozen=True)
class Settings:
    # fixed per-dose mass used for fentanyl instead of the entered dose
    fentanyl_nominal_mg: float = DEFAULT_FENTANYL_NOMINAL_MG
    log_level: str = "WARNING"
    # pins the peak-width jitter of the spectrum when set
    spectrum_seed: int | None = None


def load_settings(*, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    seed = _get_env("NARC_SPECTRUM_SEED")
    return Settings(
        fentanyl_nominal_mg=float(_get_env("NARC_FENTANYL_NOMINAL_MG", str(DEFAULT_FENTANYL_NOMINAL_MG))),
        log_level=_get_env("NARC_LOG_LEVEL", "WARNING").upper(),
        spectrum_seed=int(seed) if seed is not None else None,
    )
