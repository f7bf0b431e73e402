"""
PyMC model builder for generalized linear models.

Turns a ModelSpec and a data frame into a PyMC model:

    x_c = x - mean(x)                                 # centered covariates
    alpha_c ~ prior["intercept"]                      # intercept at mean(x)
    beta_j  ~ prior[covariate_j]
    eta     = alpha_c + sum_j beta_j x_c,j
    y ~ Normal(eta, sigma),  sigma ~ prior["auxiliary"]     (gaussian)
    y ~ Bernoulli(logit^-1(eta))                            (binomial)
    intercept = alpha_c - sum_j beta_j mean(x_j)      # reported, uncentered

Autoscaling (only for priors with ``autoscale=True``):

    gaussian  beta_j: scale * sd(y) / sd(x_j)   intercept, sigma: scale * sd(y)
    binomial  beta_j: scale / sd(x_j)           intercept: unchanged

Covariates with zero spread are never rescaled.
"""

from typing import Dict, Optional
import logging
import numpy as np
import pandas as pd
import pymc as pm
import pytensor.tensor as pt

from bayesglm.spec.model_spec import (
    AUXILIARY,
    BINOMIAL,
    CENTERED_INTERCEPT,
    DESIGN_MATRIX,
    GAUSSIAN,
    INTERCEPT,
    ModelSpec,
)
from bayesglm.spec.priors import EXPONENTIAL, NORMAL, STUDENT_T, PriorSpec

logger = logging.getLogger(__name__)


class ModelBuilder:
    """
    Bayesian GLM builder.

    Attributes
    ----------
    spec : ModelSpec
        Validated model specification.
    prior_scales : Dict[str, float]
        Effective prior scale per parameter after autoscaling (set by build).
    model : pm.Model or None
        PyMC model (None until built)
    """

    def __init__(self, spec: ModelSpec) -> None:
        """
        Initialize model builder.

        Parameters
        ----------
        spec : ModelSpec
            Model specification, validated on construction.

        Raises
        ------
        SpecError
            If the spec is malformed.
        """
        spec.validate()
        self.spec = spec
        self.prior_scales: Dict[str, float] = {}
        self.model: Optional[pm.Model] = None

    def _extract(self, data: pd.DataFrame):
        """
        Pull outcome and covariate columns as float arrays.

        Raises
        ------
        ValueError
            On missing or non-numeric columns, missing values, or a binomial
            outcome that is not 0/1.
        """
        columns = [self.spec.outcome, *self.spec.covariates]
        missing = [c for c in columns if c not in data.columns]
        if missing:
            raise ValueError(f"Data is missing columns {missing}. Got {list(data.columns)}")
        if len(data) == 0:
            raise ValueError("Data has no rows")

        try:
            frame = data[columns].astype(np.float64)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Model columns must be numeric: {e}") from e
        if frame.isna().any().any():
            bad = frame.columns[frame.isna().any()].tolist()
            raise ValueError(f"Columns {bad} contain missing values")

        y = frame[self.spec.outcome].to_numpy()
        X = frame[list(self.spec.covariates)].to_numpy().reshape(len(frame), len(self.spec.covariates))

        if self.spec.family == BINOMIAL and not np.all((y == 0) | (y == 1)):
            raise ValueError(f"Binomial outcome '{self.spec.outcome}' must contain only 0 and 1")

        return y, X

    def _effective_scale(self, prior: PriorSpec, y_sd: float, x_sd: Optional[float]) -> float:
        if not prior.autoscale:
            return prior.scale

        scale = prior.scale
        if self.spec.family == GAUSSIAN and y_sd > 0:
            scale *= y_sd
        if x_sd is not None and x_sd > 0:
            scale /= x_sd
        return float(scale)

    @staticmethod
    def _prior_variable(name: str, prior: PriorSpec, scale: float, positive: bool = False):
        """Create the PyMC random variable for one prior."""
        if prior.family == EXPONENTIAL:
            return pm.Exponential(name, lam=1.0 / scale)
        if positive:
            # Dispersion parameters get the half-distribution
            if prior.family == NORMAL:
                return pm.HalfNormal(name, sigma=scale)
            if prior.family == STUDENT_T:
                return pm.HalfStudentT(name, nu=prior.degrees_of_freedom, sigma=scale)
        if prior.family == NORMAL:
            return pm.Normal(name, mu=prior.location, sigma=scale)
        if prior.family == STUDENT_T:
            return pm.StudentT(name, nu=prior.degrees_of_freedom, mu=prior.location, sigma=scale)
        raise ValueError(f"No PyMC distribution for prior family '{prior.family}'")

    def build(self, data: pd.DataFrame) -> pm.Model:
        """
        Build the full PyMC model.

        Parameters
        ----------
        data : pd.DataFrame
            One row per observation; must contain the outcome and all
            covariate columns.

        Returns
        -------
        model : pm.Model
            PyMC model ready for inference. The observed variable is named
            after the outcome.
        """
        y, X = self._extract(data)
        n_obs = y.shape[0]
        spec = self.spec

        y_sd = float(np.std(y, ddof=1)) if n_obs > 1 else 0.0
        x_mean = X.mean(axis=0) if X.shape[1] else np.zeros(0)
        x_sd = X.std(axis=0, ddof=1) if n_obs > 1 else np.zeros(X.shape[1])
        X_c = X - x_mean if spec.intercept else X

        self.prior_scales = {}
        coords = {"obs_id": np.arange(n_obs), "term": list(spec.covariates)}

        with pm.Model(coords=coords) as model:
            betas = []
            for j, cov in enumerate(spec.covariates):
                prior = spec.prior_for(cov)
                scale = self._effective_scale(prior, y_sd, float(x_sd[j]))
                self.prior_scales[cov] = scale
                betas.append(self._prior_variable(cov, prior, scale))

            if betas:
                X_data = pm.Data(DESIGN_MATRIX, X_c, dims=("obs_id", "term"))
                beta = pt.stack(betas)
                eta = pt.dot(X_data, beta)
            else:
                eta = pt.zeros(n_obs)

            if spec.intercept:
                prior = spec.prior_for(INTERCEPT)
                scale = self._effective_scale(prior, y_sd, None)
                self.prior_scales[INTERCEPT] = scale
                alpha_c = self._prior_variable(CENTERED_INTERCEPT, prior, scale)
                eta = eta + alpha_c
                if betas:
                    pm.Deterministic(INTERCEPT, alpha_c - pt.dot(pt.as_tensor(x_mean), beta))
                else:
                    pm.Deterministic(INTERCEPT, alpha_c)

            if spec.family == GAUSSIAN:
                prior = spec.prior_for(AUXILIARY)
                scale = self._effective_scale(prior, y_sd, None)
                self.prior_scales[AUXILIARY] = scale
                sigma = self._prior_variable(AUXILIARY, prior, scale, positive=True)
                pm.Normal(spec.outcome, mu=eta, sigma=sigma, observed=y, dims="obs_id")
            else:
                pm.Bernoulli(spec.outcome, logit_p=eta, observed=y, dims="obs_id")

        logger.info(
            f"Built {spec.family} model for '{spec.outcome}' with "
            f"{len(spec.covariates)} covariate(s) on {n_obs} observations"
        )
        logger.debug(f"Effective prior scales: {self.prior_scales}")

        self.model = model
        return model

    def get_model(self) -> pm.Model:
        """
        Get the built model.

        Raises
        ------
        RuntimeError
            If model has not been built yet.
        """
        if self.model is None:
            raise RuntimeError("Model has not been built. Call .build() first.")
        return self.model

    def __repr__(self) -> str:
        return f"ModelBuilder(spec={self.spec!r}, built={self.model is not None})"
