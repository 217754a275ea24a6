"""Tests for resolving keyed parameters onto atom indices."""

import pytest
from conftest import chain_bonds, make_atom

from parmox.core.topology import Bond, build_adjacency_list
from parmox.errors import MissingTorsionError, MissingTypeError, TopologyError
from parmox.md.bridge.core import (
    build_indexed_parameters,
    canonical_torsion,
    iter_angles,
    iter_impropers,
    iter_proper_torsions,
)
from parmox.physics.force_fields import (
    DihedralParams,
    ForceFieldParamsKeyed,
    MassParams,
    VdwParams,
    merge_params,
)


def _build(params, atoms, bonds, config=None):
    adjacency = build_adjacency_list(bonds, len(atoms))
    return build_indexed_parameters(params, atoms, bonds, adjacency, config)


def test_pentane_terms(alkane_params, pentane_atoms, pentane_bonds):
    """A five atom chain has four bonds, three angles and two proper torsions."""
    indexed = _build(alkane_params, pentane_atoms, pentane_bonds)

    assert set(indexed.bond_stretching) == {(0, 1), (1, 2), (2, 3), (3, 4)}
    assert set(indexed.angle) == {(0, 1, 2), (1, 2, 3), (2, 3, 4)}
    assert set(indexed.dihedral) == {(0, 1, 2, 3), (1, 2, 3, 4)}
    assert indexed.improper == {}

    assert indexed.bond_stretching[(0, 1)].k_b == 310.0
    assert indexed.angle[(1, 2, 3)].theta_0 == 1.9111
    assert indexed.mass[2].mass == 12.01
    assert indexed.van_der_waals[4].sigma == 1.908
    assert indexed.diagnostics == ()


def test_torsion_divider_folded_in(alkane_params, pentane_atoms, pentane_bonds):
    """Stored torsions carry barrier / divider and divider 1."""
    indexed = _build(alkane_params, pentane_atoms, pentane_bonds)
    for dihe in indexed.dihedral.values():
        assert dihe.divider == 1
        assert dihe.barrier_height == pytest.approx(1.4 / 9)
    # The keyed store is not touched.
    assert alkane_params.dihedral[("X", "CT", "CT", "X")].divider == 9


def test_build_is_deterministic(alkane_params, pentane_atoms, pentane_bonds):
    """Same inputs give the same output, regardless of bond order."""
    first = _build(alkane_params, pentane_atoms, pentane_bonds)
    shuffled = [Bond(b.atom_1, b.atom_0) for b in reversed(pentane_bonds)]
    second = _build(alkane_params, pentane_atoms, shuffled)

    assert set(first.bond_stretching) == set(second.bond_stretching)
    assert first.dihedral == second.dihedral
    assert first.angle == second.angle


def test_key_canonical_forms(alkane_params):
    """Bond keys are sorted, angle ends ascend, torsion inner pairs ascend."""
    atoms = [make_atom(i + 1, "C", "CT") for i in range(6)]
    # Branched: 0-1, 1-2, 1-3, 3-4, 3-5
    bonds = [Bond(1, 0), Bond(2, 1), Bond(1, 3), Bond(4, 3), Bond(5, 3)]
    hub = DihedralParams(
        ("X", "X", "CT", "X"),
        divider=1,
        barrier_height=1.1,
        phase=3.14159,
        periodicity=2,
    )
    params = alkane_params.replace(dihedral_improper={hub.atom_types: hub})
    indexed = _build(params, atoms, bonds)

    assert all(i < j for i, j in indexed.bond_stretching)
    assert all(a < b for a, _, b in indexed.angle)
    assert all(j < k for _, j, k, _ in indexed.dihedral)
    assert len(indexed.dihedral) == 4
    assert set(indexed.improper) == {(0, 2, 1, 3), (1, 4, 3, 5)}


def test_canonical_torsion_reverses():
    assert canonical_torsion(4, 3, 2, 1) == (1, 2, 3, 4)
    assert canonical_torsion(1, 2, 3, 4) == (1, 2, 3, 4)


def test_enumeration_counts_on_ring():
    """In a six membered ring every atom is a torsion end twice."""
    adjacency = build_adjacency_list([*chain_bonds(6), Bond(5, 0)], 6)
    assert len(list(iter_angles(adjacency))) == 6
    torsions = list(iter_proper_torsions(adjacency))
    assert len(torsions) == 6
    assert len(set(torsions)) == 6
    assert list(iter_impropers(adjacency)) == []


def test_improper_enumeration():
    """A hub with four neighbors yields one improper per neighbor triple."""
    adjacency = build_adjacency_list([Bond(0, 1), Bond(0, 2), Bond(0, 3), Bond(0, 4)], 5)
    impropers = list(iter_impropers(adjacency))
    assert len(impropers) == 4
    assert all(key[2] == 0 for key in impropers)
    assert (1, 2, 0, 3) in impropers


def test_missing_torsion_is_fatal(alkane_params, pentane_atoms, pentane_bonds):
    """A proper torsion without parameters aborts the build."""
    params = alkane_params.replace(dihedral={})
    with pytest.raises(MissingTorsionError, match="Missing dihedral") as exc_info:
        _build(params, pentane_atoms, pentane_bonds)
    assert not exc_info.value.improper


@pytest.fixture
def carbonyl():
    """CT-C(=O)-N: C is a hub with three neighbors and no proper torsions."""
    atoms = [
        make_atom(1, "C", "CT", [0.0, 0.0, 0.0]),
        make_atom(2, "C", "C", [1.5, 0.0, 0.0]),
        make_atom(3, "O", "O", [2.2, 1.0, 0.0]),
        make_atom(4, "N", "N", [2.2, -1.2, 0.0]),
    ]
    bonds = [Bond(0, 1), Bond(1, 2), Bond(1, 3)]
    return atoms, bonds


def test_improper_on_hub(alkane_params, carbonyl):
    """The improper key puts the hub third and is matched via wildcards."""
    atoms, bonds = carbonyl
    improper = DihedralParams(
        ("X", "X", "C", "N"),
        divider=1,
        barrier_height=10.5,
        phase=3.14159,
        periodicity=2,
    )
    specific = ForceFieldParamsKeyed(dihedral_improper={improper.atom_types: improper})
    params = merge_params(alkane_params, specific)
    indexed = _build(params, atoms, bonds)

    assert set(indexed.improper) == {(0, 2, 1, 3)}
    assert indexed.improper[(0, 2, 1, 3)].barrier_height == 10.5
    assert indexed.dihedral == {}


def test_missing_improper_is_fatal(alkane_params, carbonyl):
    atoms, bonds = carbonyl
    with pytest.raises(MissingTorsionError, match="improper") as exc_info:
        _build(alkane_params, atoms, bonds)
    assert exc_info.value.improper


def test_missing_bonded_type_is_fatal(alkane_params):
    """Atoms without a type may borrow element mass, but not bonded terms."""
    atoms = [make_atom(1, "C", "CT"), make_atom(2, "C")]
    with pytest.raises(MissingTypeError, match="Bond"):
        _build(alkane_params, atoms, [Bond(0, 1)])


def test_inconsistent_adjacency(alkane_params, pentane_atoms, pentane_bonds):
    adjacency = build_adjacency_list(pentane_bonds, 5)
    with pytest.raises(TopologyError, match="Adjacency"):
        build_indexed_parameters(alkane_params, pentane_atoms[:4], pentane_bonds[:3], adjacency)


def test_bond_outside_atoms(alkane_params, pentane_atoms):
    adjacency = [[] for _ in pentane_atoms]
    with pytest.raises(TopologyError, match="outside"):
        build_indexed_parameters(alkane_params, pentane_atoms, [Bond(0, 9)], adjacency)


def test_methane_like_end_to_end(alkane_params):
    """A carbon with two hydrogens: two bonds, one angle, no torsions."""
    atoms = [
        make_atom(1, "C", "CT", [0.0, 0.0, 0.0]),
        make_atom(2, "H", "HC", [1.09, 0.0, 0.0]),
        make_atom(3, "H", "HC", [-0.36, 1.03, 0.0]),
    ]
    indexed = _build(alkane_params, atoms, [Bond(0, 1), Bond(0, 2)])

    assert set(indexed.bond_stretching) == {(0, 1), (0, 2)}
    assert indexed.bond_stretching[(0, 1)].r_0 == 1.09
    assert list(indexed.angle) == [(1, 0, 2)]
    assert indexed.angle[(1, 0, 2)].k == 35.0
    assert indexed.dihedral == {}
    assert indexed.improper == {}
    assert indexed.mass[1].mass == 1.008


def test_only_given_atoms_are_indexed():
    """A small custom store resolves every atom with no fallbacks."""
    params = ForceFieldParamsKeyed(
        mass={"CT": MassParams("CT", 12.01)},
        van_der_waals={"CT": VdwParams("CT", 1.9, 0.1)},
    )
    atoms = [make_atom(1, "C", "CT")]
    indexed = _build(merge_params(params), atoms, [])
    assert indexed.n_atoms == 1
    assert set(indexed.mass) == {0}
    assert indexed.bond_stretching == {}
