"""Tests for the local energy changes and the Metropolis acceptance rule."""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from spinlab.core.enums import BoundaryKind, ModelKind
from spinlab.core.lattice import LatticeState
from spinlab.engine.energy import (
    binary_flip_delta,
    cluster_field_delta,
    metropolis_accepts,
    potts_delta,
    rotator_delta,
)


def _uniform(kind: ModelKind, value, size: int = 3, states: int = 3) -> LatticeState:
    return LatticeState.filled(size, kind, value, states)


class TestBinaryDelta:
    def test_aligned_interior_site(self):
        lat = _uniform(ModelKind.BINARY, 1)
        assert binary_flip_delta(lat, 1, 1, BoundaryKind.PERIODIC, 0.0) == 8.0

    def test_field_term(self):
        lat = _uniform(ModelKind.BINARY, 1)
        assert binary_flip_delta(lat, 1, 1, BoundaryKind.PERIODIC, 0.5) == 9.0
        assert binary_flip_delta(lat, 1, 1, BoundaryKind.PERIODIC, -10.0) == -12.0

    def test_corner_sees_fixed_low_boundary(self):
        lat = _uniform(ModelKind.BINARY, 1)
        # Two in-grid neighbours (+1) and two ghost neighbours (-1)
        assert binary_flip_delta(lat, 0, 0, BoundaryKind.FIXED_LOW, 0.0) == 0.0
        assert binary_flip_delta(lat, 0, 0, BoundaryKind.FIXED_HIGH, 0.0) == 8.0

    def test_antiparallel_site_gains_from_flip(self):
        lat = _uniform(ModelKind.BINARY, 1)
        lat.set(4, -1)
        assert binary_flip_delta(lat, 1, 1, BoundaryKind.PERIODIC, 0.0) == -8.0


class TestRotatorDelta:
    def test_reversal_against_aligned_neighbours(self):
        lat = _uniform(ModelKind.CONTINUOUS, 0.0)
        delta = rotator_delta(lat, 1, 1, BoundaryKind.PERIODIC, 0.0, 0.0, math.pi)
        assert delta == pytest.approx(8.0)

    def test_field_adds_cosine_term(self):
        lat = _uniform(ModelKind.CONTINUOUS, 0.0)
        delta = rotator_delta(lat, 1, 1, BoundaryKind.PERIODIC, 1.0, 0.0, math.pi)
        assert delta == pytest.approx(10.0)

    def test_fixed_low_boundary_is_pi(self):
        lat = _uniform(ModelKind.CONTINUOUS, 0.0)
        # Corner: two neighbours at 0, two ghosts at pi, so turning to pi/2 costs nothing
        delta = rotator_delta(lat, 0, 0, BoundaryKind.FIXED_LOW, 0.0, 0.0, math.pi / 2)
        assert delta == pytest.approx(0.0, abs=1e-12)

    def test_same_angle_is_free(self):
        lat = _uniform(ModelKind.CONTINUOUS, 1.0)
        assert rotator_delta(lat, 2, 0, BoundaryKind.PERIODIC, 0.3, 1.0, 1.0) == pytest.approx(0.0)


class TestPottsDelta:
    def test_leaving_majority_state(self):
        lat = _uniform(ModelKind.MULTI_STATE, 0)
        assert potts_delta(lat, 1, 1, BoundaryKind.PERIODIC, 0.0, 0, 1) == 4.0

    def test_field_favours_state_zero_only(self):
        lat = _uniform(ModelKind.MULTI_STATE, 1)
        lat.set(4, 2)
        # Moving between two non-zero states ignores the field
        assert potts_delta(lat, 1, 1, BoundaryKind.PERIODIC, 3.0, 2, 1) == -4.0
        # Moving into state zero picks it up
        assert potts_delta(lat, 1, 1, BoundaryKind.PERIODIC, 3.0, 2, 0) == -3.0

    def test_fixed_high_ghosts_are_state_zero(self):
        lat = _uniform(ModelKind.MULTI_STATE, 1)
        assert potts_delta(lat, 0, 0, BoundaryKind.FIXED_HIGH, 0.0, 1, 0) == 0.0


class TestClusterFieldDelta:
    def test_sum_of_spins(self):
        lat = _uniform(ModelKind.BINARY, 1, size=4)
        assert cluster_field_delta(lat, range(16), 0.5) == 16.0
        assert cluster_field_delta(lat, {0, 1, 2}, -1.0) == -6.0


class TestMetropolisRule:
    def test_non_positive_delta_accepted_without_draw(self):
        def draw():
            raise AssertionError("no draw expected")

        assert metropolis_accepts(0.0, 1.0, draw)
        assert metropolis_accepts(-3.0, 100.0, draw)

    def test_positive_delta_compares_against_boltzmann_factor(self):
        threshold = math.exp(-0.5 * 2.0)
        assert metropolis_accepts(2.0, 0.5, lambda: threshold - 1e-9)
        assert not metropolis_accepts(2.0, 0.5, lambda: threshold + 1e-9)

    def test_huge_delta_never_accepted(self):
        assert not metropolis_accepts(1e6, 10.0, lambda: 0.0)
