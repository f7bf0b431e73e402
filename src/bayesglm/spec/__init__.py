"""
Model and prior specifications.

- PriorSpec: normal / student_t / exponential priors with closed-form quantiles
- ModelSpec: outcome, covariates, likelihood family, link, and priors
"""

from bayesglm.spec.priors import (
    PriorSpec,
    PRIOR_FAMILIES,
    default_auxiliary_prior,
    default_coefficient_prior,
)
from bayesglm.spec.model_spec import (
    ModelSpec,
    INTERCEPT,
    AUXILIARY,
    GAUSSIAN,
    BINOMIAL,
)

__all__ = [
    "PriorSpec",
    "PRIOR_FAMILIES",
    "default_auxiliary_prior",
    "default_coefficient_prior",
    "ModelSpec",
    "INTERCEPT",
    "AUXILIARY",
    "GAUSSIAN",
    "BINOMIAL",
]
