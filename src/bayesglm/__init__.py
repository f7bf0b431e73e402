"""
bayesglm: posterior summaries for Bayesian regression tutorials.

Core components (pure NumPy/SciPy, no sampler import):
- spec: ModelSpec and PriorSpec
- posterior: PosteriorDrawSet, PosteriorSummarizer, PriorPosteriorComparator
- comparison: ModelComparator for LOO-style model ranking

The PyMC/ArviZ sampling backend lives in ``bayesglm.inference`` and is
imported explicitly.
"""

from bayesglm.config import SamplerConfig
from bayesglm.errors import (
    BayesGLMError,
    SpecError,
    DrawSetError,
    EmptySampleError,
    InvalidProbabilityError,
    InvalidDrawError,
    UnsupportedFamilyError,
    EmptyComparisonError,
    DuplicateLabelError,
)
from bayesglm.spec import ModelSpec, PriorSpec
from bayesglm.posterior import (
    PosteriorDrawSet,
    PosteriorSummarizer,
    SummaryResult,
    PriorPosteriorComparator,
    QuantilePair,
)
from bayesglm.comparison import ModelComparator, ModelScore, RankedModel

__version__ = "0.1.0"

__all__ = [
    "SamplerConfig",
    "BayesGLMError",
    "SpecError",
    "DrawSetError",
    "EmptySampleError",
    "InvalidProbabilityError",
    "InvalidDrawError",
    "UnsupportedFamilyError",
    "EmptyComparisonError",
    "DuplicateLabelError",
    "ModelSpec",
    "PriorSpec",
    "PosteriorDrawSet",
    "PosteriorSummarizer",
    "SummaryResult",
    "PriorPosteriorComparator",
    "QuantilePair",
    "ModelComparator",
    "ModelScore",
    "RankedModel",
]
