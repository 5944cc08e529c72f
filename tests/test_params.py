"""Tests for ParameterStore validation and enum parsing."""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from spinlab.core.enums import AlgorithmKind, BoundaryKind, ModelKind
from spinlab.core.params import ParameterStore
from spinlab.errors import InvalidParameterError


class TestDefaults:
    def test_defaults(self):
        p = ParameterStore()
        assert p.boundary == BoundaryKind.PERIODIC
        assert p.algorithm == AlgorithmKind.LOCAL
        assert p.model_kind == ModelKind.BINARY
        assert p.field == 0.0
        assert p.state_count == 3
        assert p.steps_per_frame == 1
        assert p.beta == pytest.approx(1 / 2.5)

    def test_current_is_a_frozen_copy(self):
        p = ParameterStore(temperature=2.0)
        snap = p.current()
        p.set_temperature(4.0)
        assert snap.beta == pytest.approx(0.5)
        assert snap.temperature == pytest.approx(2.0)
        assert p.current().beta == pytest.approx(0.25)
        with pytest.raises(AttributeError):
            snap.beta = 1.0  # type: ignore[misc]


class TestTemperature:
    def test_stored_as_inverse(self):
        p = ParameterStore()
        p.set_temperature(0.5)
        assert p.beta == pytest.approx(2.0)
        assert p.temperature == pytest.approx(0.5)

    @pytest.mark.parametrize("bad", [0, -1.0, float("nan"), float("inf"), "hot", None, True])
    def test_invalid_rejected_and_prior_kept(self, bad):
        p = ParameterStore(temperature=3.0)
        with pytest.raises(InvalidParameterError):
            p.set_temperature(bad)
        assert p.beta == pytest.approx(1 / 3.0)
        assert math.isfinite(p.beta)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            ParameterStore().set_temperature(-2)

    def test_constructor_rejects_bad_temperature(self):
        with pytest.raises(InvalidParameterError):
            ParameterStore(temperature=0.0)


class TestField:
    def test_any_finite_value(self):
        p = ParameterStore()
        assert p.set_field(-3.5) == -3.5
        assert p.field == -3.5

    def test_non_finite_rejected(self):
        p = ParameterStore(field=0.25)
        with pytest.raises(InvalidParameterError):
            p.set_field(float("nan"))
        assert p.field == 0.25


class TestStateCount:
    @pytest.mark.parametrize("raw, expected", [(1, 2), (2, 2), (8, 8), (10, 10), (42, 10), (-5, 2)])
    def test_clamps(self, raw, expected):
        p = ParameterStore()
        assert p.set_state_count(raw) == expected
        assert p.state_count == expected

    def test_non_number_rejected(self):
        p = ParameterStore()
        with pytest.raises(InvalidParameterError):
            p.set_state_count("three")
        assert p.state_count == 3


class TestStepsPerFrame:
    def test_capped_at_max(self):
        p = ParameterStore()
        assert p.set_steps_per_frame(500) == 30
        assert p.steps_per_frame == 30

    def test_custom_max(self):
        p = ParameterStore(max_steps_per_frame=5)
        assert p.set_steps_per_frame(7) == 5

    @pytest.mark.parametrize("bad", [0, -2, 1.5, "4"])
    def test_rejected(self, bad):
        p = ParameterStore(steps_per_frame=4)
        with pytest.raises(InvalidParameterError):
            p.set_steps_per_frame(bad)
        assert p.steps_per_frame == 4


class TestEnums:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("binary", ModelKind.BINARY),
            ("ising", ModelKind.BINARY),
            ("rotator", ModelKind.CONTINUOUS),
            ("Continuous", ModelKind.CONTINUOUS),
            ("potts", ModelKind.MULTI_STATE),
            ("multi-state", ModelKind.MULTI_STATE),
            (ModelKind.MULTI_STATE, ModelKind.MULTI_STATE),
            (2, ModelKind.MULTI_STATE),
        ],
    )
    def test_model_parse(self, raw, expected):
        assert ParameterStore().set_model_kind(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("periodic", BoundaryKind.PERIODIC),
            ("fixedUp", BoundaryKind.FIXED_HIGH),
            ("fixed_high", BoundaryKind.FIXED_HIGH),
            ("fixedDown", BoundaryKind.FIXED_LOW),
            ("fixed-low", BoundaryKind.FIXED_LOW),
        ],
    )
    def test_boundary_parse(self, raw, expected):
        assert ParameterStore().set_boundary(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("metropolis", AlgorithmKind.LOCAL), ("wolff", AlgorithmKind.CLUSTER), ("cluster", AlgorithmKind.CLUSTER)],
    )
    def test_algorithm_parse(self, raw, expected):
        assert ParameterStore().set_algorithm(raw) == expected

    def test_unknown_names_rejected_and_prior_kept(self):
        p = ParameterStore(boundary="fixed_low")
        with pytest.raises(InvalidParameterError):
            p.set_boundary("mirror")
        with pytest.raises(InvalidParameterError):
            p.set_model_kind(7)
        assert p.boundary == BoundaryKind.FIXED_LOW
        assert p.model_kind == ModelKind.BINARY

    def test_label(self):
        assert BoundaryKind.FIXED_HIGH.label == "fixed_high"
