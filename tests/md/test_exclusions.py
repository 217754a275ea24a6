"""Tests for nonbonded exclusions, 1-4 scaling and the array layout."""

import jax.numpy as jnp
import numpy as np
import pytest
from conftest import chain_bonds, make_atom

from parmox.core.topology import Bond, build_adjacency_list
from parmox.md.bridge import (
    build_exclusion_and_scaled_sets,
    build_indexed_parameters,
    build_scale_matrices,
)
from parmox.physics.force_fields import NonbondedGlobalParams


def _indexed(params, atoms, bonds):
    adjacency = build_adjacency_list(bonds, len(atoms))
    return build_indexed_parameters(params, atoms, bonds, adjacency)


def test_pentane_pairs(alkane_params, pentane_atoms, pentane_bonds):
    """Bonded and 1-3 pairs are excluded; torsion ends are scaled."""
    excluded, scaled = build_exclusion_and_scaled_sets(
        _indexed(alkane_params, pentane_atoms, pentane_bonds),
    )
    assert excluded == {(0, 1), (1, 2), (2, 3), (3, 4), (0, 2), (1, 3), (2, 4)}
    assert scaled == {(0, 3), (1, 4)}


def test_ring_pairs_are_disjoint(alkane_params):
    """In a five membered ring 1-3 and 1-4 pairs coincide; scaling wins."""
    atoms = [make_atom(i + 1, "C", "CT") for i in range(5)]
    bonds = [*chain_bonds(5), Bond(4, 0)]
    excluded, scaled = build_exclusion_and_scaled_sets(_indexed(alkane_params, atoms, bonds))

    assert excluded.isdisjoint(scaled)
    assert (0, 3) in scaled
    assert (0, 1) in excluded
    assert all(i < j for i, j in excluded | scaled)


def test_impropers_do_not_scale(alkane_params):
    """Only proper torsions contribute 1-4 pairs."""
    atoms = [make_atom(i + 1, "C", "CT") for i in range(4)]
    hub = alkane_params.dihedral[("X", "CT", "CT", "X")]
    params = alkane_params.replace(dihedral_improper={("X", "X", "CT", "X"): hub})
    indexed = _indexed(params, atoms, [Bond(0, 1), Bond(0, 2), Bond(0, 3)])

    assert set(indexed.improper) == {(1, 2, 0, 3)}
    assert indexed.dihedral == {}
    excluded, scaled = build_exclusion_and_scaled_sets(indexed)
    assert scaled == set()
    assert excluded == {(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)}


def test_scale_matrices():
    """Self and excluded pairs are zero, scaled pairs carry the 1-4 factors."""
    global_params = NonbondedGlobalParams()
    vdw, elec = build_scale_matrices(4, {(0, 1), (0, 2)}, {(0, 3)}, global_params)

    assert vdw.shape == (4, 4)
    np.testing.assert_allclose(jnp.diag(vdw), 0.0)
    np.testing.assert_allclose(vdw, vdw.T)
    np.testing.assert_allclose(elec, elec.T)
    assert vdw[1, 0] == 0.0
    assert elec[2, 0] == 0.0
    assert vdw[3, 0] == pytest.approx(0.5)
    assert elec[0, 3] == pytest.approx(0.833333)
    assert vdw[1, 2] == 1.0


def test_to_system_params(alkane_params, pentane_atoms, pentane_bonds):
    """The indexed set lays out as arrays in key order."""
    indexed = _indexed(alkane_params, pentane_atoms, pentane_bonds)
    excluded, scaled = build_exclusion_and_scaled_sets(indexed)
    system = indexed.to_system_params(excluded, scaled, charges=[0.1, -0.1, 0.0, 0.0, 0.0])

    assert system["masses"].shape == (5,)
    assert system["bonds"].shape == (4, 2)
    assert system["bond_params"].shape == (4, 2)
    assert system["angles"].shape == (3, 3)
    assert system["dihedrals"].shape == (2, 4)
    assert system["dihedral_params"].shape == (2, 3)
    assert system["impropers"].shape == (0, 4)
    assert system["improper_params"].shape == (0, 3)
    np.testing.assert_allclose(system["bond_params"][0], [1.526, 310.0], rtol=1e-6)
    np.testing.assert_allclose(system["dihedral_params"][:, 2], 1.4 / 9, rtol=1e-6)
    np.testing.assert_allclose(system["charges"][:2], [0.1, -0.1], rtol=1e-6)

    mask = system["exclusion_mask"]
    assert not mask[0, 1]
    assert not mask[0, 2]
    assert mask[0, 3]
    assert mask[0, 4]
    assert system["scale_matrix_vdw"][1, 4] == pytest.approx(0.5)
