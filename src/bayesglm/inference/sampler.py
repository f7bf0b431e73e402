"""
NUTS sampling, posterior extraction and convergence diagnostics.

Runs PyMC's NUTS sampler with an explicit SamplerConfig, flattens the
resulting InferenceData into a PosteriorDrawSet, and scores fitted models
with ArviZ's PSIS leave-one-out estimate.

Convergence problems are reported, not raised: sampling completes and the
summary carries the diagnostics.

Key diagnostics:
- Rhat (potential scale reduction): <1.01 indicates convergence
- Divergences: <2% of draws acceptable
"""

from typing import Dict, List, Optional, Sequence
import logging
import time
import numpy as np
from numpy.typing import NDArray
import pymc as pm
import arviz as az

from bayesglm.comparison.ranking import ModelScore
from bayesglm.config import SamplerConfig
from bayesglm.posterior.draws import PosteriorDrawSet

logger = logging.getLogger(__name__)

RHAT_THRESHOLD = 1.01
DIVERGENCE_WARN_RATE = 0.02


class InferenceSummary:
    """Sampling results and diagnostics from one NUTS run."""

    def __init__(
        self,
        idata,  # arviz.InferenceData
        config: SamplerConfig,
        sampling_time: float,
        divergence_rate: float = 0.0,
        rhat: Optional[Dict[str, float]] = None,
    ) -> None:
        """
        Initialize inference summary.

        Parameters
        ----------
        idata : arviz.InferenceData
            Posterior inference data from PyMC
        config : SamplerConfig
            Settings the run used
        sampling_time : float
            Total sampling time (seconds)
        divergence_rate : float
            Fraction of post-warmup draws that diverged
        rhat : Dict[str, float], optional
            Potential scale reduction factor per parameter
        """
        self.idata = idata
        self.config = config
        self.n_draws = config.draws
        self.n_tune = config.tune
        self.n_chains = config.chains
        self.sampling_time = sampling_time
        self.total_samples = config.draws * config.chains
        self.divergence_rate = divergence_rate
        self.rhat = rhat or {}

    @property
    def converged(self) -> bool:
        """All Rhat values below the threshold (NaN entries are skipped)."""
        defined = [r for r in self.rhat.values() if not np.isnan(r)]
        return all(r < RHAT_THRESHOLD for r in defined)

    def __repr__(self) -> str:
        return (
            f"InferenceSummary(draws={self.n_draws}, tune={self.n_tune}, "
            f"chains={self.n_chains}, time={self.sampling_time:.1f}s, "
            f"divergences={self.divergence_rate:.1%})"
        )


def draw_set_from_idata(idata, var_names: Optional[Sequence[str]] = None) -> PosteriorDrawSet:
    """
    Flatten the posterior group into a PosteriorDrawSet.

    Chains are concatenated in order and their lengths recorded as
    ``chain_boundaries``. Non-scalar variables are split into one entry per
    element, named ``name[i]``, or ``name[label]`` when the variable has a
    single labelled dimension.

    Parameters
    ----------
    idata : arviz.InferenceData
        Must contain a ``posterior`` group.
    var_names : sequence of str, optional
        Variables to extract. Default: all posterior variables.
    """
    posterior = idata.posterior
    names = list(var_names) if var_names is not None else list(posterior.data_vars)
    n_chains = posterior.sizes["chain"]
    n_draw = posterior.sizes["draw"]

    draws: Dict[str, NDArray[np.float64]] = {}
    for name in names:
        if name not in posterior:
            raise KeyError(f"'{name}' not found in posterior. Available: {list(posterior.data_vars)}")
        da = posterior[name]
        values = np.asarray(da.values, dtype=np.float64).reshape(n_chains * n_draw, -1)
        if values.shape[1] == 1 and da.ndim == 2:
            draws[name] = values[:, 0]
            continue
        extra_dims = [d for d in da.dims if d not in ("chain", "draw")]
        if len(extra_dims) == 1 and extra_dims[0] in da.coords:
            labels = [f"{name}[{v}]" for v in da.coords[extra_dims[0]].values]
        else:
            labels = [f"{name}[{i}]" for i in range(values.shape[1])]
        for i, label in enumerate(labels):
            draws[label] = values[:, i]

    return PosteriorDrawSet(draws, chain_boundaries=[n_draw] * n_chains)


def loo_score(label: str, idata) -> ModelScore:
    """
    Approximate leave-one-out ELPD of a fitted model.

    Requires a ``log_likelihood`` group (NUTSSampler stores one).
    """
    elpd = az.loo(idata, pointwise=True)
    if getattr(elpd, "warning", False):
        logger.warning(f"Pareto k diagnostics for '{label}' indicate unreliable LOO estimates")
    return ModelScore.from_loo(label, elpd)


class DiagnosticsComputer:
    """Convergence diagnostics from posterior draws."""

    @staticmethod
    def rhat(draw_set: PosteriorDrawSet, name: str) -> float:
        """
        Compute Rhat (potential scale reduction factor) for one parameter.

        Rhat measures whether multiple chains have converged to the same
        posterior distribution. Rhat < 1.01 indicates convergence. Chains that are
        each constant but stuck at different values give ``inf``.

        Raises
        ------
        ValueError
            If the draw set has fewer than 2 chains or unequal chain lengths.
        """
        chains = draw_set.chains(name)
        if len(chains) < 2:
            raise ValueError("Need at least 2 chains for Rhat")
        if len({len(c) for c in chains}) != 1:
            raise ValueError(f"Rhat needs equal chain lengths. Got {draw_set.chain_boundaries}")

        samples = np.vstack(chains)
        n_draws = samples.shape[1]
        if n_draws < 2:
            raise ValueError(f"Need at least 2 draws per chain for Rhat. Got {n_draws}")

        # Between-chain variance
        chain_means = np.mean(samples, axis=1)
        B = n_draws * np.var(chain_means, ddof=1)

        # Within-chain variance
        W = np.mean(np.var(samples, axis=1, ddof=1))

        if W == 0:
            # Constant chains: agreement only if they sit at the same value
            return float("inf") if B > 0 else 1.0

        var_hat = ((n_draws - 1) / n_draws) * W + (1 / n_draws) * B
        return float(np.sqrt(var_hat / W))

    @staticmethod
    def rhat_all(draw_set: PosteriorDrawSet) -> Dict[str, float]:
        """Rhat for every parameter; empty for a single chain or single-draw chains."""
        if draw_set.n_chains < 2 or draw_set.n_draws < 2 * draw_set.n_chains:
            return {}
        return {name: DiagnosticsComputer.rhat(draw_set, name) for name in draw_set}

    @staticmethod
    def divergence_rate(idata) -> float:
        """
        Fraction of post-warmup draws that diverged.

        Divergences indicate areas of high curvature in parameter space
        where NUTS struggles. <2% is acceptable, <0.5% is good.
        """
        if not hasattr(idata, "sample_stats") or "diverging" not in idata.sample_stats:
            return 0.0
        n_divergences = idata.sample_stats.diverging.sum().item()
        n_total = idata.posterior.sizes["draw"] * idata.posterior.sizes["chain"]
        return float(n_divergences / n_total)


class NUTSSampler:
    """
    NUTS sampler for GLMs built by ModelBuilder.

    Orchestrates PyMC MCMC sampling with an explicit configuration and
    attaches convergence diagnostics to the result.
    """

    def __init__(self, config: Optional[SamplerConfig] = None) -> None:
        self.config = config or SamplerConfig()

    def sample(self, model: pm.Model, var_names: Optional[List[str]] = None) -> InferenceSummary:
        """
        Run NUTS sampling on a PyMC model.

        Pointwise log-likelihood is stored so the fit can be scored with
        ``loo_score``.

        Parameters
        ----------
        model : pm.Model
            PyMC model (from ModelBuilder.build())
        var_names : list of str, optional
            Parameters to check for convergence. Default: all.

        Returns
        -------
        summary : InferenceSummary
            Posterior, diagnostics, timing.
        """
        cfg = self.config
        logger.info(
            f"Sampling {cfg.chains} chain(s) x {cfg.draws} draws "
            f"(tune={cfg.tune}, cores={cfg.cores}, seed={cfg.random_seed})"
        )
        start_time = time.time()

        with model:
            idata = pm.sample(
                draws=cfg.draws,
                tune=cfg.tune,
                chains=cfg.chains,
                cores=cfg.cores,
                random_seed=cfg.random_seed,
                progressbar=cfg.progressbar,
                target_accept=cfg.target_accept,
                return_inferencedata=True,
                discard_tuned_samples=True,
                idata_kwargs={"log_likelihood": True},
            )

        sampling_time = time.time() - start_time

        div_rate = DiagnosticsComputer.divergence_rate(idata)
        if div_rate > DIVERGENCE_WARN_RATE:
            logger.warning(
                f"Divergence rate {div_rate:.1%} exceeds {DIVERGENCE_WARN_RATE:.0%}. "
                f"Consider increasing target_accept or reparameterizing."
            )

        rhat = DiagnosticsComputer.rhat_all(draw_set_from_idata(idata, var_names))
        for name, value in rhat.items():
            if value >= RHAT_THRESHOLD:
                logger.warning(f"Rhat for '{name}' is {value:.3f} (>= {RHAT_THRESHOLD})")

        summary = InferenceSummary(
            idata=idata,
            config=cfg,
            sampling_time=sampling_time,
            divergence_rate=div_rate,
            rhat=rhat,
        )
        logger.info(f"Sampling finished: {summary}")
        return summary

    def posterior_predictive(self, model: pm.Model, idata):
        """
        Simulate replicated outcomes from the posterior.

        The ``posterior_predictive`` group is added to ``idata`` in place and
        ``idata`` is returned.
        """
        with model:
            pm.sample_posterior_predictive(
                idata,
                random_seed=self.config.random_seed,
                progressbar=self.config.progressbar,
                extend_inferencedata=True,
            )
        return idata

    def __repr__(self) -> str:
        return f"NUTSSampler(config={self.config})"
