"""
Posterior summaries: point estimates, credible intervals, tail probabilities.

Intervals are equal-tailed: the bounds are empirical quantiles at the two
requested probabilities, not a highest-density interval. Quantiles use
linear interpolation between order statistics ("type 7"):

    h = (n - 1) * p                      (0-indexed rank)
    Q(p) = x_(floor h) + (h - floor h) * (x_(floor h + 1) - x_(floor h))

which is NumPy's ``method="linear"`` and the default of most statistical
software, so results match numerically.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import numpy as np
from numpy.typing import ArrayLike, NDArray
import pandas as pd

from bayesglm.errors import EmptySampleError, InvalidDrawError, InvalidProbabilityError
from bayesglm.posterior.draws import PosteriorDrawSet

DEFAULT_INTERVAL = (0.05, 0.95)


def as_draws(draws: ArrayLike, reject_nan: bool = False) -> NDArray[np.float64]:
    """
    Coerce draws to a non-empty 1-D float64 array.

    Raises
    ------
    EmptySampleError
        If there are no draws.
    InvalidDrawError
        If draws are not 1-D, or contain NaN and ``reject_nan`` is set.
    """
    arr = np.asarray(draws, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidDrawError(f"Draws must be a 1-D sequence. Got shape {arr.shape}")
    if arr.size == 0:
        raise EmptySampleError("Cannot summarize an empty draw sequence")
    if reject_nan and np.isnan(arr).any():
        raise InvalidDrawError(f"Draws contain {int(np.isnan(arr).sum())} NaN value(s)")
    return arr


def check_probability(p: float) -> float:
    p = float(p)
    if not (0.0 <= p <= 1.0):
        raise InvalidProbabilityError(f"Probability must be in [0, 1]. Got {p}")
    return p


def quantile(draws: ArrayLike, p: ArrayLike) -> NDArray[np.float64]:
    """
    Type-7 empirical quantile(s) of ``draws``.

    Parameters
    ----------
    draws : array-like
        Non-empty 1-D draws.
    p : float or array-like
        Probabilities in [0, 1].

    Returns
    -------
    NDArray[np.float64]
        Quantiles with the shape of ``p`` (0-d for a scalar).
    """
    arr = as_draws(draws)
    probs = np.asarray(p, dtype=np.float64)
    if np.any((probs < 0.0) | (probs > 1.0)) or np.isnan(probs).any():
        raise InvalidProbabilityError(f"Probabilities must be in [0, 1]. Got {probs}")
    return np.quantile(arr, probs, method="linear")


@dataclass(frozen=True)
class SummaryResult:
    """
    Summary of one parameter's posterior draws.

    Attributes
    ----------
    point_estimate : float
        Arithmetic mean of the draws.
    median : float
        Posterior median, for callers that prefer it as the point estimate.
    interval : tuple of float
        Equal-tailed credible interval ``(lower, upper)``.
    probabilities : tuple of float
        The probability levels the interval was computed at.
    n_draws : int
        Number of draws summarized.
    """

    point_estimate: float
    median: float
    interval: Tuple[float, float]
    probabilities: Tuple[float, float]
    n_draws: int
    _draws: NDArray[np.float64] = field(repr=False, compare=False)

    @property
    def lower(self) -> float:
        return self.interval[0]

    @property
    def upper(self) -> float:
        return self.interval[1]

    @property
    def width(self) -> float:
        return self.interval[1] - self.interval[0]

    def point(self, kind: str = "mean") -> float:
        """Point estimate by kind: ``"mean"`` or ``"median"``."""
        if kind == "mean":
            return self.point_estimate
        if kind == "median":
            return self.median
        raise ValueError(f"kind must be 'mean' or 'median'. Got {kind!r}")

    def threshold_probability(self, threshold: float) -> float:
        """Posterior probability that the parameter exceeds ``threshold``."""
        return PosteriorSummarizer.threshold_probability(self._draws, threshold)


class PosteriorSummarizer:
    """
    Derived statistics over posterior draws.

    All methods are pure; input sequences are never modified.
    """

    @staticmethod
    def summarize(
        draws: ArrayLike,
        interval_probs: Tuple[float, float] = DEFAULT_INTERVAL,
        reject_nan: bool = False,
    ) -> SummaryResult:
        """
        Mean, median and equal-tailed credible interval of ``draws``.

        Parameters
        ----------
        draws : array-like
            Posterior draws for one parameter.
        interval_probs : (p_lo, p_hi)
            Interval probability levels with ``0 <= p_lo < p_hi <= 1``.
            Default (0.05, 0.95), a 90% interval.
        reject_nan : bool
            Raise InvalidDrawError instead of propagating NaN. Default False.

        Returns
        -------
        SummaryResult

        Raises
        ------
        EmptySampleError
            If ``draws`` is empty.
        InvalidProbabilityError
            If a probability is outside [0, 1] or ``p_lo >= p_hi``.
        """
        try:
            p_lo, p_hi = interval_probs
        except (TypeError, ValueError):
            raise InvalidProbabilityError(
                f"interval_probs must be a pair (p_lo, p_hi). Got {interval_probs!r}"
            ) from None
        p_lo = check_probability(p_lo)
        p_hi = check_probability(p_hi)
        if not p_lo < p_hi:
            raise InvalidProbabilityError(
                f"Interval probabilities must satisfy p_lo < p_hi. Got ({p_lo}, {p_hi})"
            )

        arr = as_draws(draws, reject_nan=reject_nan)
        lower, median, upper = np.quantile(arr, [p_lo, 0.5, p_hi], method="linear")
        frozen = arr.copy()
        frozen.setflags(write=False)

        return SummaryResult(
            point_estimate=float(np.mean(arr)),
            median=float(median),
            interval=(float(lower), float(upper)),
            probabilities=(p_lo, p_hi),
            n_draws=int(arr.size),
            _draws=frozen,
        )

    @staticmethod
    def threshold_probability(draws: ArrayLike, threshold: float) -> float:
        """
        Fraction of draws strictly greater than ``threshold``.

        Ties at the threshold do not count. No smoothing is applied.

        Raises
        ------
        EmptySampleError
            If ``draws`` is empty.
        """
        arr = as_draws(draws)
        return float(np.count_nonzero(arr > threshold) / arr.size)

    @staticmethod
    def summarize_draw_set(
        draw_set: PosteriorDrawSet,
        interval_probs: Tuple[float, float] = DEFAULT_INTERVAL,
        reject_nan: bool = False,
    ) -> Dict[str, SummaryResult]:
        """Summarize every parameter of a draw set, in draw-set order."""
        return {
            name: PosteriorSummarizer.summarize(draw_set[name], interval_probs, reject_nan)
            for name in draw_set.parameter_names
        }

    @staticmethod
    def summary_table(
        draw_set: PosteriorDrawSet,
        interval_probs: Tuple[float, float] = DEFAULT_INTERVAL,
        var_names: Optional[list] = None,
    ) -> pd.DataFrame:
        """
        Summary DataFrame indexed by parameter.

        Columns are ``mean``, ``median`` and one column per interval bound
        named by percentile (e.g. ``5%`` and ``95%``).
        """
        names = var_names if var_names is not None else list(draw_set.parameter_names)
        lo_col = _percent_label(interval_probs[0])
        hi_col = _percent_label(interval_probs[1])

        rows = []
        for name in names:
            s = PosteriorSummarizer.summarize(draw_set[name], interval_probs)
            rows.append(
                {"mean": s.point_estimate, "median": s.median, lo_col: s.lower, hi_col: s.upper}
            )
        return pd.DataFrame(rows, index=pd.Index(names, name="parameter"))


def _percent_label(p: float) -> str:
    return f"{float(p) * 100:g}%"
