"""
Sampling backend: PyMC model construction and NUTS inference.

**Usage:**
```python
from bayesglm.config import SamplerConfig
from bayesglm.spec import ModelSpec
from bayesglm.inference import ModelBuilder, NUTSSampler, draw_set_from_idata

spec = ModelSpec.from_formula("kid_score ~ mom_iq", family="gaussian")
model = ModelBuilder(spec).build(data)

sampler = NUTSSampler(SamplerConfig(chains=4, cores=4, random_seed=123))
summary = sampler.sample(model)
draws = draw_set_from_idata(summary.idata, spec.parameter_names)
```

**Key Classes:**
- ModelBuilder: ModelSpec + DataFrame -> PyMC model
- NUTSSampler: NUTS sampling and posterior predictive simulation
- DiagnosticsComputer: Rhat, divergence rate
- InferenceSummary: Sampling results and diagnostics
"""

from bayesglm.inference.model_builder import ModelBuilder
from bayesglm.inference.sampler import (
    NUTSSampler,
    DiagnosticsComputer,
    InferenceSummary,
    draw_set_from_idata,
    loo_score,
)

__all__ = [
    "ModelBuilder",
    "NUTSSampler",
    "DiagnosticsComputer",
    "InferenceSummary",
    "draw_set_from_idata",
    "loo_score",
]
