"""
Prior versus posterior quantiles.

For each probability on a grid, pairs the analytic prior quantile
(inverse CDF of the declared prior) with the empirical posterior quantile
(type 7, same as ``PosteriorSummarizer``). A rendering layer can plot the
pairs to show how far the data pulled the posterior away from the prior.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence
import numpy as np
from numpy.typing import ArrayLike

from bayesglm.errors import InvalidProbabilityError
from bayesglm.posterior.draws import PosteriorDrawSet
from bayesglm.posterior.summarizer import as_draws, check_probability
from bayesglm.spec.model_spec import AUXILIARY, CENTERED_INTERCEPT, INTERCEPT, ModelSpec
from bayesglm.spec.priors import PriorSpec

DEFAULT_GRID = (0.025, 0.25, 0.5, 0.75, 0.975)


@dataclass(frozen=True)
class QuantilePair:
    """Prior and posterior quantile at one probability level."""

    probability: float
    prior_quantile: float
    posterior_quantile: float

    @property
    def difference(self) -> float:
        return self.posterior_quantile - self.prior_quantile


def _check_grid(quantile_grid: Sequence[float]) -> List[float]:
    grid = [check_probability(p) for p in quantile_grid]
    if any(b < a for a, b in zip(grid, grid[1:])):
        raise InvalidProbabilityError(f"Quantile grid must be in ascending order. Got {grid}")
    return grid


class PriorPosteriorComparator:
    """Paired prior/posterior quantile series for shrinkage reporting."""

    @staticmethod
    def compare(
        prior: PriorSpec,
        posterior_draws: ArrayLike,
        quantile_grid: Sequence[float] = DEFAULT_GRID,
        positive: bool = False,
    ) -> List[QuantilePair]:
        """
        Compare prior and posterior quantiles on a probability grid.

        Parameters
        ----------
        prior : PriorSpec
            Declared prior of the parameter.
        posterior_draws : array-like
            Posterior draws of the same parameter.
        quantile_grid : sequence of float
            Ascending probabilities in [0, 1].
        positive : bool
            Compare against the half-distribution, for parameters the
            backend samples on the positive half-line.

        Returns
        -------
        list of QuantilePair
            One pair per grid probability, in grid order.

        Raises
        ------
        UnsupportedFamilyError
            If the prior family has no inverse CDF.
        EmptySampleError
            If there are no posterior draws.
        InvalidProbabilityError
            If a grid probability is outside [0, 1] or the grid is unordered.
        """
        grid = _check_grid(quantile_grid)
        prior.frozen_distribution()  # raises for families without an inverse CDF
        draws = as_draws(posterior_draws)
        if not grid:
            return []

        prior_q = prior.ppf(grid, positive=positive)
        post_q = np.quantile(draws, grid, method="linear")
        return [
            QuantilePair(probability=p, prior_quantile=float(a), posterior_quantile=float(b))
            for p, a, b in zip(grid, prior_q, post_q)
        ]

    @staticmethod
    def compare_model(
        spec: ModelSpec,
        draw_set: PosteriorDrawSet,
        quantile_grid: Sequence[float] = DEFAULT_GRID,
    ) -> Dict[str, List[QuantilePair]]:
        """
        Compare every model parameter that has posterior draws.

        Each prior is paired with the draws of the variable it was placed on:
        the intercept prior with ``intercept_centered`` (skipped when those
        draws are missing), and the auxiliary prior with its half-distribution
        when the family is normal or student_t. Parameters without an explicit
        prior are compared against the default prior. Autoscaled priors are
        compared on their declared (unscaled) scale.
        """
        result: Dict[str, List[QuantilePair]] = {}
        for name in spec.parameter_names:
            source = CENTERED_INTERCEPT if name == INTERCEPT else name
            if source not in draw_set:
                continue
            result[name] = PriorPosteriorComparator.compare(
                spec.prior_for(name),
                draw_set[source],
                quantile_grid,
                positive=name == AUXILIARY,
            )
        return result

    @staticmethod
    def shrinkage(
        prior: PriorSpec,
        posterior_draws: ArrayLike,
        mass: float = 0.9,
        positive: bool = False,
    ) -> float:
        """
        Ratio of posterior to prior central-interval width.

        Values well below 1 mean the data concentrated the posterior relative
        to the prior.
        """
        mass = check_probability(mass)
        if mass == 0.0:
            raise InvalidProbabilityError("Interval mass must be positive")
        tail = (1.0 - mass) / 2.0
        lo, hi = tail, 1.0 - tail
        pairs = PriorPosteriorComparator.compare(prior, posterior_draws, [lo, hi], positive=positive)
        prior_width = pairs[1].prior_quantile - pairs[0].prior_quantile
        post_width = pairs[1].posterior_quantile - pairs[0].posterior_quantile
        return float(post_width / prior_width)
