"""
Unit tests for model and prior specifications.

Tests cover:
- PriorSpec constructors, validation and quantiles
- ModelSpec validation, defaults and immutability
- Formula front-end
"""

import dataclasses

import pytest
import numpy as np
from numpy.testing import assert_allclose

from bayesglm.errors import SpecError, UnsupportedFamilyError
from bayesglm.spec import ModelSpec, PriorSpec, default_auxiliary_prior, default_coefficient_prior


def kidiq_spec() -> ModelSpec:
    """Linear model from the tutorial: kid_score ~ mom_hs + mom_iq."""
    return ModelSpec(
        outcome="kid_score",
        covariates=("mom_hs", "mom_iq"),
        family="gaussian",
        priors={
            "mom_hs": PriorSpec.normal(0, 2.5, autoscale=True),
            "mom_iq": PriorSpec.normal(0, 2.5, autoscale=True),
            "intercept": PriorSpec.normal(0, 10, autoscale=True),
            "auxiliary": PriorSpec.exponential(rate=1, autoscale=True),
        },
    )


def wells_spec() -> ModelSpec:
    """Logistic model from the tutorial: switch ~ dist100 + arsenic."""
    return ModelSpec(
        outcome="switch",
        covariates=("dist100", "arsenic"),
        family="binomial",
        link="logit",
        priors={
            "dist100": PriorSpec.student_t(7, 0, 2.5),
            "arsenic": PriorSpec.student_t(7, 0, 2.5),
            "intercept": PriorSpec.normal(0, 5),
        },
    )


class TestPriorSpec:
    """Tests for PriorSpec."""

    def test_normal_constructor(self) -> None:
        prior = PriorSpec.normal(1.0, 2.0)
        assert prior.family == "normal"
        assert prior.location == 1.0
        assert prior.scale == 2.0
        assert prior.autoscale is False

    def test_exponential_uses_rate(self) -> None:
        prior = PriorSpec.exponential(rate=2.0)
        assert prior.scale == 0.5
        assert prior.rate == 2.0

    def test_exponential_non_positive_rate_raises(self) -> None:
        with pytest.raises(SpecError, match="rate"):
            PriorSpec.exponential(rate=0.0)

    def test_zero_scale_rejected(self) -> None:
        with pytest.raises(SpecError, match="scale"):
            PriorSpec("normal", 0.0, 0.0).validate()

    def test_student_t_requires_positive_df(self) -> None:
        with pytest.raises(SpecError, match="degrees_of_freedom"):
            PriorSpec("student_t", 0.0, 1.0, degrees_of_freedom=0.0).validate()
        with pytest.raises(SpecError, match="degrees_of_freedom"):
            PriorSpec("student_t", 0.0, 1.0).validate()

    def test_unknown_family_rejected(self) -> None:
        with pytest.raises(SpecError, match="Unknown prior family"):
            PriorSpec("cauchy", 0.0, 1.0).validate()

    def test_ppf_normal(self) -> None:
        prior = PriorSpec.normal(0, 1)
        assert prior.ppf(0.5) == pytest.approx(0.0)
        assert prior.ppf(0.975) == pytest.approx(1.959964, abs=1e-6)

    def test_ppf_exponential(self) -> None:
        prior = PriorSpec.exponential(rate=1.0)
        # Median of Exp(1) is ln 2
        assert prior.ppf(0.5) == pytest.approx(np.log(2.0))

    def test_ppf_student_t_array(self) -> None:
        prior = PriorSpec.student_t(3, location=1.0, scale=2.0)
        q = prior.ppf([0.25, 0.5, 0.75])
        assert q.shape == (3,)
        assert q[1] == pytest.approx(1.0)
        # Symmetric around the location
        assert_allclose(q[2] - 1.0, 1.0 - q[0])

    def test_ppf_unknown_family(self) -> None:
        with pytest.raises(UnsupportedFamilyError):
            PriorSpec("laplace", 0.0, 1.0).ppf(0.5)

    def test_immutable(self) -> None:
        prior = PriorSpec.normal()
        with pytest.raises(dataclasses.FrozenInstanceError):
            prior.scale = 5.0

    def test_str(self) -> None:
        assert str(PriorSpec.exponential(rate=1, autoscale=True)) == "exponential(rate=1, autoscale)"


class TestModelSpecValidation:
    """Tests for ModelSpec.validate()."""

    def test_tutorial_specs_are_valid(self) -> None:
        kidiq_spec().validate()
        wells_spec().validate()

    def test_zero_scale_prior_rejected(self) -> None:
        spec = ModelSpec("y", ("x",), priors={"x": PriorSpec("normal", 0.0, 0.0)})
        with pytest.raises(SpecError, match="scale"):
            spec.validate()

    def test_student_t_zero_df_rejected(self) -> None:
        spec = ModelSpec("y", ("x",), priors={"x": PriorSpec.student_t(0.0)})
        with pytest.raises(SpecError, match="degrees_of_freedom"):
            spec.validate()

    def test_empty_covariate_rejected(self) -> None:
        with pytest.raises(SpecError, match="non-empty"):
            ModelSpec("y", ("x", "")).validate()

    def test_duplicate_covariate_rejected(self) -> None:
        with pytest.raises(SpecError, match="Duplicate"):
            ModelSpec("y", ("x", "x")).validate()

    def test_unsupported_family_rejected(self) -> None:
        with pytest.raises(SpecError, match="Unsupported family"):
            ModelSpec("y", ("x",), family="poisson").validate()

    def test_wrong_link_rejected(self) -> None:
        with pytest.raises(SpecError, match="Link"):
            ModelSpec("y", ("x",), family="binomial", link="probit").validate()

    def test_prior_for_unknown_parameter_rejected(self) -> None:
        spec = ModelSpec("y", ("x",), priors={"z": PriorSpec.normal()})
        with pytest.raises(SpecError, match="unknown parameter"):
            spec.validate()

    def test_auxiliary_prior_on_binomial_rejected(self) -> None:
        spec = ModelSpec("y", ("x",), family="binomial", priors={"auxiliary": PriorSpec.exponential()})
        with pytest.raises(SpecError, match="auxiliary"):
            spec.validate()

    def test_reserved_names_rejected(self) -> None:
        with pytest.raises(SpecError, match="reserved"):
            ModelSpec("y", ("intercept",)).validate()
        with pytest.raises(SpecError, match="reserved"):
            ModelSpec("auxiliary", ("x",)).validate()

    def test_backend_names_rejected(self) -> None:
        with pytest.raises(SpecError, match="reserved"):
            ModelSpec("y", ("intercept_centered",)).validate()
        with pytest.raises(SpecError, match="reserved"):
            ModelSpec("design_matrix", ("x",)).validate()

    def test_outcome_as_covariate_rejected(self) -> None:
        with pytest.raises(SpecError, match="Outcome"):
            ModelSpec("y", ("x", "y")).validate()

    def test_empty_outcome_rejected(self) -> None:
        with pytest.raises(SpecError, match="Outcome"):
            ModelSpec("", ("x",)).validate()


class TestModelSpecBehavior:
    """Tests for defaults, parameter naming and immutability."""

    def test_default_links(self) -> None:
        assert ModelSpec("y", ("x",)).link == "identity"
        assert ModelSpec("y", ("x",), family="binomial").link == "logit"

    def test_parameter_names_gaussian(self) -> None:
        assert kidiq_spec().parameter_names == ("intercept", "mom_hs", "mom_iq", "auxiliary")

    def test_parameter_names_binomial(self) -> None:
        assert wells_spec().parameter_names == ("intercept", "dist100", "arsenic")

    def test_default_priors(self) -> None:
        spec = ModelSpec("y", ("x",))
        assert spec.prior_for("x") == default_coefficient_prior()
        assert spec.prior_for("intercept").family == "normal"
        assert spec.prior_for("intercept").location == 0.0
        assert spec.prior_for("auxiliary") == default_auxiliary_prior()
        assert spec.prior_for("auxiliary").family == "normal"
        assert spec.prior_for("auxiliary").location == 0.0

    def test_explicit_prior_wins(self) -> None:
        spec = kidiq_spec()
        assert spec.prior_for("intercept").scale == 10

    def test_prior_for_unknown_parameter(self) -> None:
        with pytest.raises(KeyError):
            ModelSpec("y", ("x",)).prior_for("z")

    def test_autoscale_threaded_through(self) -> None:
        spec = ModelSpec("y", ("x",), priors={"x": PriorSpec.normal(0, 1, autoscale=False)})
        assert spec.prior_for("x").autoscale is False

    def test_immutable_after_construction(self) -> None:
        priors = {"x": PriorSpec.normal()}
        spec = ModelSpec("y", ["x"], priors=priors)

        # Caller-side mutation is not observed
        priors["x"] = PriorSpec.normal(0, 100)
        assert spec.prior_for("x").scale == 2.5

        with pytest.raises(TypeError):
            spec.priors["x"] = PriorSpec.normal(0, 100)
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.family = "binomial"
        assert isinstance(spec.covariates, tuple)

    def test_describe_marks_defaults(self) -> None:
        text = ModelSpec("y", ("x",), priors={"x": PriorSpec.normal(0, 1)}).describe()
        assert "x: normal(location=0, scale=1)" in text
        assert "(default)" in text


class TestFormula:
    """Tests for ModelSpec.from_formula."""

    def test_simple_formula(self) -> None:
        spec = ModelSpec.from_formula("kid_score ~ mom_hs + mom_iq")
        assert spec.outcome == "kid_score"
        assert spec.covariates == ("mom_hs", "mom_iq")
        assert spec.intercept is True
        spec.validate()

    def test_explicit_intercept_term(self) -> None:
        spec = ModelSpec.from_formula("y ~ 1 + x")
        assert spec.covariates == ("x",)
        assert spec.intercept is True

    def test_intercept_only(self) -> None:
        spec = ModelSpec.from_formula("y ~ 1")
        assert spec.covariates == ()
        assert spec.parameter_names == ("intercept", "auxiliary")

    def test_drop_intercept(self) -> None:
        assert ModelSpec.from_formula("y ~ x - 1").intercept is False
        assert ModelSpec.from_formula("y ~ 0 + x").intercept is False
        assert ModelSpec.from_formula("y ~ 0 + x").covariates == ("x",)

    def test_leading_minus_one(self) -> None:
        spec = ModelSpec.from_formula("y ~ -1 + x")
        assert spec.intercept is False
        assert spec.covariates == ("x",)

    def test_trailing_plus_rejected(self) -> None:
        with pytest.raises(SpecError, match="Unsupported formula term"):
            ModelSpec.from_formula("y ~ x +")

    def test_family_and_priors_passed_through(self) -> None:
        spec = ModelSpec.from_formula(
            "switch ~ dist100",
            family="binomial",
            priors={"dist100": PriorSpec.student_t(7)},
        )
        assert spec.family == "binomial"
        assert spec.link == "logit"
        assert spec.prior_for("dist100").family == "student_t"

    def test_interaction_rejected(self) -> None:
        with pytest.raises(SpecError, match="Unsupported formula term"):
            ModelSpec.from_formula("y ~ x1 * x2")

    def test_missing_tilde_rejected(self) -> None:
        with pytest.raises(SpecError, match="~"):
            ModelSpec.from_formula("y x")

    def test_missing_outcome_rejected(self) -> None:
        with pytest.raises(SpecError, match="outcome"):
            ModelSpec.from_formula(" ~ x")
