"""
Posterior draw handling and derived statistics.

- PosteriorDrawSet: immutable, equal-length draws per parameter
- PosteriorSummarizer: mean/median, equal-tailed intervals, P(theta > t)
- PriorPosteriorComparator: analytic prior vs. empirical posterior quantiles
"""

from bayesglm.posterior.draws import PosteriorDrawSet
from bayesglm.posterior.summarizer import (
    PosteriorSummarizer,
    SummaryResult,
    quantile,
)
from bayesglm.posterior.prior_comparison import (
    PriorPosteriorComparator,
    QuantilePair,
)

__all__ = [
    "PosteriorDrawSet",
    "PosteriorSummarizer",
    "SummaryResult",
    "quantile",
    "PriorPosteriorComparator",
    "QuantilePair",
]
