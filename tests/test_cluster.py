"""Tests for Wolff cluster growth and the field-only cluster acceptance."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from spinlab.core.enums import BoundaryKind, Domain, ModelKind
from spinlab.core.lattice import LatticeState
from spinlab.core.params import ParameterStore
from spinlab.engine.cluster import bond_probability, cluster_supported, grow_cluster, wolff_step
from spinlab.systems.rng import DeterministicRNG
from tests.helpers.scripted_rng import ScriptedRNG


def _params(**kwargs):
    kwargs.setdefault("algorithm", "cluster")
    return ParameterStore(**kwargs).current()


def _connected(lattice: LatticeState, sites, boundary: BoundaryKind) -> bool:
    sites = set(sites)
    start = next(iter(sites))
    seen = {start}
    stack = [start]
    L = lattice.size
    while stack:
        i, j = divmod(stack.pop(), L)
        for ni, nj in ((i + 1, j), (i - 1, j), (i, j + 1), (i, j - 1)):
            n = lattice.neighbor_index(ni, nj, boundary)
            if n in sites and n not in seen:
                seen.add(n)
                stack.append(n)
    return seen == sites


class TestSupport:
    @pytest.mark.parametrize(
        "kind, field, expected",
        [
            (ModelKind.BINARY, 0.5, True),
            (ModelKind.BINARY, -1e-9, True),
            (ModelKind.BINARY, 0.0, False),
            (ModelKind.BINARY, 1e-11, False),
            (ModelKind.CONTINUOUS, 1.0, False),
            (ModelKind.MULTI_STATE, 1.0, False),
        ],
    )
    def test_cluster_supported(self, kind, field, expected):
        assert cluster_supported(kind, field) is expected

    def test_bond_probability(self):
        assert bond_probability(0.0) == 0.0
        assert bond_probability(0.5) == pytest.approx(1 - 2.718281828459045 ** -1.0)


class TestGrowCluster:
    def test_cold_uniform_lattice_joins_everything(self):
        lat = LatticeState.filled(5, ModelKind.BINARY, 1)
        cluster = grow_cluster(lat, 7, beta=50.0, boundary=BoundaryKind.PERIODIC, rng=DeterministicRNG(1))
        assert cluster.sites == frozenset(range(25))
        assert cluster.bonds_added == 24
        assert cluster.spin == 1

    def test_hot_lattice_keeps_only_the_seed(self):
        lat = LatticeState.filled(5, ModelKind.BINARY, -1)
        cluster = grow_cluster(lat, 12, beta=1e-12, boundary=BoundaryKind.PERIODIC, rng=DeterministicRNG(1))
        assert cluster.sites == frozenset({12})
        assert cluster.bonds_tested == 4
        assert cluster.bonds_added == 0

    def test_fixed_boundary_ghosts_never_join(self):
        lat = LatticeState.filled(4, ModelKind.BINARY, 1)
        rng = ScriptedRNG(seed=1)
        cluster = grow_cluster(lat, 0, beta=1e-12, boundary=BoundaryKind.FIXED_HIGH, rng=rng)
        # Corner seed: only the two in-grid neighbours are tested
        assert cluster.bonds_tested == 2
        assert rng.calls[Domain.CLUSTER_BOND] == 2
        assert all(0 <= idx < 16 for idx in cluster.sites)

    def test_members_share_seed_value_and_are_connected(self):
        lat = LatticeState.create(10, ModelKind.BINARY, 3, DeterministicRNG(21))
        rng = DeterministicRNG(22)
        for seed in (0, 33, 57, 99):
            cluster = grow_cluster(lat, seed, beta=0.6, boundary=BoundaryKind.PERIODIC, rng=rng)
            assert seed in cluster.sites
            assert all(lat.at(idx) == cluster.spin for idx in cluster.sites)
            assert _connected(lat, cluster.sites, BoundaryKind.PERIODIC)

    def test_bond_acceptance_rate_matches_p_add(self):
        beta = 0.3
        lat = LatticeState.filled(8, ModelKind.BINARY, 1)
        rng = DeterministicRNG(31)
        tested = added = 0
        for trial in range(1000):
            cluster = grow_cluster(lat, trial % 64, beta, BoundaryKind.PERIODIC, rng)
            tested += cluster.bonds_tested
            added += cluster.bonds_added
        assert added / tested == pytest.approx(bond_probability(beta), abs=0.03)


class TestWolffStep:
    def test_zero_field_is_a_no_op_without_draws(self):
        lat = LatticeState.create(6, ModelKind.BINARY, 3, DeterministicRNG(5))
        before = lat.values()
        rng = ScriptedRNG(seed=3)
        cluster, flipped = wolff_step(lat, _params(field=0.0), rng)
        assert cluster is None and not flipped
        assert lat.values() == before
        assert rng.calls == {}

    def test_non_binary_is_a_no_op(self):
        lat = LatticeState.create(6, ModelKind.MULTI_STATE, 3, DeterministicRNG(5))
        before = lat.values()
        cluster, flipped = wolff_step(lat, _params(field=1.0, model_kind="potts"), DeterministicRNG(3))
        assert cluster is None and not flipped
        assert lat.values() == before

    def test_field_aligned_flip_accepted_without_draw(self):
        lat = LatticeState.filled(4, ModelKind.BINARY, 1)
        rng = ScriptedRNG(seed=4, scripted={Domain.ACCEPTANCE: [0.999999]})
        cluster, flipped = wolff_step(lat, _params(temperature=0.02, field=-1.0), rng)
        assert flipped
        assert len(cluster) == 16
        assert set(lat.values()) == {-1}
        assert rng.calls.get(Domain.ACCEPTANCE, 0) == 0

    def test_flip_against_field_rejected(self):
        lat = LatticeState.filled(4, ModelKind.BINARY, 1)
        rng = ScriptedRNG(seed=4, scripted={Domain.ACCEPTANCE: [0.5]})
        cluster, flipped = wolff_step(lat, _params(temperature=0.1, field=1.0), rng)
        assert cluster is not None
        assert not flipped
        assert set(lat.values()) == {1}
        assert rng.calls[Domain.ACCEPTANCE] == 1

    def test_flipped_cluster_changes_exactly_its_sites(self):
        lat = LatticeState.create(8, ModelKind.BINARY, 3, DeterministicRNG(40))
        before = lat.values()
        rng = ScriptedRNG(seed=41, scripted={Domain.ACCEPTANCE: [0.0]})
        cluster, flipped = wolff_step(lat, _params(temperature=1.0, field=0.2), rng)
        assert flipped
        after = lat.values()
        changed = {idx for idx in range(64) if before[idx] != after[idx]}
        assert changed == set(cluster.sites)
