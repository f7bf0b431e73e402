"""
Model comparison by predictive score (e.g. LOO ELPD).

- ModelScore: a model's score, stderr, and optional pointwise contributions
- ModelComparator: ranking with deltas to the best model
- RankedModel: one ranking row
"""

from bayesglm.comparison.ranking import ModelComparator, ModelScore, RankedModel

__all__ = [
    "ModelComparator",
    "ModelScore",
    "RankedModel",
]
