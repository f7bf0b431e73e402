"""
Typed failures raised by bayesglm components.

Every error subclasses ``ValueError`` so callers validating inputs the usual
way keep working, and ``BayesGLMError`` so library failures can be caught
as a group. Errors are raised synchronously; no partial result is ever
returned alongside one.
"""


class BayesGLMError(ValueError):
    """Base class for all bayesglm input errors."""


class SpecError(BayesGLMError):
    """Malformed ModelSpec or PriorSpec."""


class DrawSetError(BayesGLMError):
    """Posterior draws that violate the draw-set shape invariants."""


class EmptySampleError(BayesGLMError):
    """A summary was requested over zero draws."""


class InvalidProbabilityError(BayesGLMError):
    """Probability levels outside [0, 1] or in the wrong order."""


class InvalidDrawError(BayesGLMError):
    """Draw values that cannot be summarized (NaN)."""


class UnsupportedFamilyError(BayesGLMError):
    """Prior family with no closed-form inverse CDF."""


class EmptyComparisonError(BayesGLMError):
    """Model ranking requested over zero models."""


class DuplicateLabelError(BayesGLMError):
    """Two models in a comparison share a label."""
