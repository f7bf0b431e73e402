"""
Model ranking by predictive accuracy.

Each fitted model arrives with an opaque predictive score, typically the
approximate leave-one-out expected log predictive density (ELPD) from
``az.loo``, plus its standard error and, optionally, the per-observation
contributions. Higher scores are better.

For every model the ranking reports the difference to the best model and an
approximate standard error of that difference:

    with pointwise contributions  se_diff = sd(elpd_i - elpd_best_i) / sqrt(n)
    without                       se_diff = the model's own stderr (upper-bound
                                            approximation, not exact)
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union
import logging
import numpy as np
from numpy.typing import NDArray
import pandas as pd

from bayesglm.errors import DuplicateLabelError, EmptyComparisonError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ModelScore:
    """
    Predictive score of one fitted model.

    Attributes
    ----------
    label : str
        Model name used in reports.
    score : float
        Predictive score, higher is better (e.g. ``elpd_loo``).
    stderr : float
        Standard error of ``score``.
    pointwise : NDArray[np.float64], optional
        Per-observation score contributions.
    """

    label: str
    score: float
    stderr: float
    pointwise: Optional[NDArray[np.float64]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "score", float(self.score))
        object.__setattr__(self, "stderr", float(self.stderr))
        if self.pointwise is not None:
            pw = np.array(self.pointwise, dtype=np.float64).ravel()
            pw.setflags(write=False)
            object.__setattr__(self, "pointwise", pw)

    @classmethod
    def from_loo(cls, label: str, elpd_data) -> "ModelScore":
        """
        Build a score from an ArviZ ``az.loo`` result.

        Pointwise contributions are taken from ``loo_i`` when the result was
        computed with ``pointwise=True``.
        """
        loo_i = getattr(elpd_data, "loo_i", None)
        pointwise = None if loo_i is None else np.asarray(loo_i, dtype=np.float64)
        return cls(
            label=label,
            score=float(elpd_data.elpd_loo),
            stderr=float(elpd_data.se),
            pointwise=pointwise,
        )


class RankedModel(NamedTuple):
    """One row of a model ranking."""

    label: str
    score: float
    delta_from_best: float
    delta_stderr: float


ScoreLike = Union[ModelScore, Tuple]


def _as_score(entry: ScoreLike) -> ModelScore:
    if isinstance(entry, ModelScore):
        return entry
    if len(entry) not in (3, 4):
        raise ValueError(
            f"Model entries must be (label, score, stderr[, pointwise]). Got {entry!r}"
        )
    return ModelScore(*entry)


class ModelComparator:
    """Ranks models by predictive score, best first."""

    @staticmethod
    def difference_stderr(best: ModelScore, other: ModelScore) -> float:
        """
        Approximate standard error of ``other.score - best.score``.

        Uses the pointwise differences when both models carry pointwise
        contributions over the same observations, otherwise propagates
        ``other.stderr`` unchanged. The two results are on different scales
        (per observation versus aggregate); see ``rank``.
        """
        if best.pointwise is not None and other.pointwise is not None:
            if best.pointwise.shape == other.pointwise.shape and best.pointwise.size > 0:
                diff = other.pointwise - best.pointwise
                return float(np.std(diff) / np.sqrt(diff.size))
            logger.warning(
                f"Pointwise scores of '{other.label}' ({other.pointwise.size}) and "
                f"'{best.label}' ({best.pointwise.size}) differ in length; "
                f"using aggregate stderr"
            )
        return other.stderr

    @staticmethod
    def rank(models: Sequence[ScoreLike]) -> List[RankedModel]:
        """
        Rank models by descending predictive score.

        Parameters
        ----------
        models : sequence of ModelScore or (label, score, stderr[, pointwise])
            Models to compare. On exact score ties the earlier entry ranks
            higher.

        Returns
        -------
        list of RankedModel
            ``(label, score, delta_from_best, delta_stderr)`` rows, best first.
            The best model has zero delta and zero delta stderr.

        Raises
        ------
        EmptyComparisonError
            If ``models`` is empty.
        DuplicateLabelError
            If two entries share a label.

        Notes
        -----
        ``delta_stderr`` comes from one of two sources and the two are not on
        the same scale. With pointwise contributions on both sides it is
        ``sd(diff) / sqrt(n)``, the standard error of the mean per-observation
        difference. Otherwise it is the other model's aggregate ``stderr``,
        which for a summed ELPD is roughly ``n`` times larger. Compare rows
        only when they were computed the same way.
        """
        scores = [_as_score(m) for m in models]
        if not scores:
            raise EmptyComparisonError("Need at least one model to rank")

        seen = set()
        for s in scores:
            if s.label in seen:
                raise DuplicateLabelError(f"Duplicate model label '{s.label}'")
            seen.add(s.label)

        # sorted() is stable, so ties keep input order
        ordered = sorted(scores, key=lambda s: -s.score)
        best = ordered[0]

        ranked = [RankedModel(best.label, best.score, 0.0, 0.0)]
        for s in ordered[1:]:
            ranked.append(
                RankedModel(
                    label=s.label,
                    score=s.score,
                    delta_from_best=s.score - best.score,
                    delta_stderr=ModelComparator.difference_stderr(best, s),
                )
            )

        logger.info(
            f"Ranked {len(ranked)} models; best is '{best.label}' (score={best.score:.2f})"
        )
        return ranked

    @staticmethod
    def ranking_table(ranked: Sequence[RankedModel]) -> pd.DataFrame:
        """Ranking as a DataFrame indexed by model label."""
        return pd.DataFrame(
            [r._asdict() for r in ranked],
            columns=list(RankedModel._fields),
        ).set_index("label")
