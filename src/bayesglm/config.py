"""
Sampler configuration.

The sampling settings that the tutorial sets globally (number of chains,
parallel cores, random seed) are collected here into one explicit value that
is handed to ``NUTSSampler``. Environment variables can supply defaults for
scripted runs.
"""

from dataclasses import dataclass
from typing import Optional
import os


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer. Got {raw!r}")


@dataclass(frozen=True)
class SamplerConfig:
    """
    Settings for one NUTS sampling run.

    Attributes
    ----------
    draws : int
        Post-warmup draws per chain. Default 1000.
    tune : int
        Warmup steps per chain. Default 1000.
    chains : int
        Number of independent chains. Default 4.
    cores : int
        Parallel computation units the sampler may use. Default 1.
    target_accept : float
        NUTS acceptance rate target. Default 0.85.
    random_seed : int, optional
        Seed for sampling and posterior predictive simulation.
    progressbar : bool
        Show the PyMC progress bar. Default False.
    """

    draws: int = 1000
    tune: int = 1000
    chains: int = 4
    cores: int = 1
    target_accept: float = 0.85
    random_seed: Optional[int] = None
    progressbar: bool = False

    def __post_init__(self) -> None:
        if self.draws <= 0:
            raise ValueError(f"draws must be positive. Got {self.draws}")
        if self.tune < 0:
            raise ValueError(f"tune must be non-negative. Got {self.tune}")
        if self.chains <= 0:
            raise ValueError(f"chains must be positive. Got {self.chains}")
        if self.cores <= 0:
            raise ValueError(f"cores must be positive. Got {self.cores}")
        if not (0.5 < self.target_accept < 1.0):
            raise ValueError(
                f"target_accept must be in (0.5, 1.0). Got {self.target_accept}"
            )

    @property
    def total_draws(self) -> int:
        return self.draws * self.chains

    @classmethod
    def from_env(cls, **overrides) -> "SamplerConfig":
        """
        Build a config from ``BAYESGLM_*`` environment variables.

        Explicit keyword overrides take precedence over the environment,
        which takes precedence over the dataclass defaults.
        """
        values = {}
        for field_name, env_name in (
            ("draws", "BAYESGLM_DRAWS"),
            ("tune", "BAYESGLM_TUNE"),
            ("chains", "BAYESGLM_CHAINS"),
            ("cores", "BAYESGLM_CORES"),
            ("random_seed", "BAYESGLM_SEED"),
        ):
            value = _env_int(env_name)
            if value is not None:
                values[field_name] = value
        values.update(overrides)
        return cls(**values)
