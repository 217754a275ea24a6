"""Resolve keyed force field parameters onto the atoms of a topology.

Turns type-keyed tables (`ForceFieldParamsKeyed`) into tables keyed by atom
index (`ForceFieldParamsIndexed`) for a specific set of atoms, bonds and their
adjacency. Bonds come from the topology; angles, proper torsions and improper
torsions are enumerated from the adjacency list.

Most of the logic here handles missing parameters. Mass, van der Waals, bond
and angle gaps are filled by the strategies in `fallbacks` and reported as
diagnostics; a missing torsion aborts the build.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from parmox.errors import MissingTorsionError, MissingTypeError, TopologyError
from parmox.md.bridge import fallbacks
from parmox.md.bridge.config import ParameterizationConfig
from parmox.md.bridge.types import Diagnostic, ForceFieldParamsIndexed

if TYPE_CHECKING:
  from parmox.core.topology import Atom, Bond
  from parmox.physics.force_fields.components import (
    AngleBendingParams,
    BondStretchingParams,
    DihedralParams,
    MassParams,
    VdwParams,
  )
  from parmox.physics.force_fields.keyed import ForceFieldParamsKeyed
  from parmox.types import AngleKey, BondKey, TorsionKey

logger = logging.getLogger(__name__)


# --- Canonical index keys ---


def canonical_bond(i: int, j: int) -> BondKey:
  """Sorted index pair."""
  return (i, j) if i < j else (j, i)


def canonical_angle(a: int, ctr: int, b: int) -> AngleKey:
  """Center stays in the middle; ends ascending."""
  return (a, ctr, b) if a < b else (b, ctr, a)


def canonical_torsion(i: int, j: int, k: int, l_idx: int) -> TorsionKey:
  """Reverse the chain if needed so the inner pair is ascending."""
  return (i, j, k, l_idx) if j < k else (l_idx, k, j, i)


def improper_key(sat0: int, sat1: int, hub: int, sat2: int) -> TorsionKey:
  """Hub in third position; satellite order is kept as given (it sets the sign)."""
  return (sat0, sat1, hub, sat2)


# --- Enumeration over the adjacency list ---


def iter_angles(adjacency: Sequence[Sequence[int]]) -> Iterator[AngleKey]:
  """Every (end, center, end) with two distinct neighbors of the center."""
  for ctr, neighbors in enumerate(adjacency):
    if len(neighbors) < 2:  # noqa: PLR2004
      continue
    for n0, n1 in itertools.combinations(neighbors, 2):
      yield canonical_angle(n0, ctr, n1)


def iter_proper_torsions(adjacency: Sequence[Sequence[int]]) -> Iterator[TorsionKey]:
  """Every chain i-j-k-l with i != l, each j-k bond visited once (j < k)."""
  for j, nbr_j in enumerate(adjacency):
    for k in nbr_j:
      if j >= k:
        continue  # handle each j-k bond once
      for i in adjacency[j]:
        if i == k:
          continue
        for l_idx in adjacency[k]:
          if l_idx in (j, i):
            continue
          yield canonical_torsion(i, j, k, l_idx)


def iter_impropers(adjacency: Sequence[Sequence[int]]) -> Iterator[TorsionKey]:
  """Every hub with three or more neighbors, once per unordered neighbor triple."""
  for hub, satellites in enumerate(adjacency):
    if len(satellites) < 3:  # noqa: PLR2004
      continue
    for sat0, sat1, sat2 in itertools.combinations(satellites, 3):
      yield improper_key(sat0, sat1, hub, sat2)


def _ff_type(atoms: Sequence[Atom], idx: int, descriptor: str) -> str:
  """Force field type of a bonded-term atom; no element fallback here."""
  ff_type = atoms[idx].force_field_type
  if not ff_type:
    msg = f"MD failure: Atom missing FF type on {descriptor}: {atoms[idx]}"
    raise MissingTypeError(msg)
  return ff_type


def _check_topology(
  atoms: Sequence[Atom],
  bonds: Sequence[Bond],
  adjacency: Sequence[Sequence[int]],
) -> None:
  n_atoms = len(atoms)
  if len(adjacency) != n_atoms:
    msg = f"Adjacency list has {len(adjacency)} entries for {n_atoms} atoms"
    raise TopologyError(msg)
  for bond in bonds:
    if not (0 <= bond.atom_0 < n_atoms and 0 <= bond.atom_1 < n_atoms):
      msg = f"Bond {bond.atom_0}-{bond.atom_1} references an atom outside 0..{n_atoms - 1}"
      raise TopologyError(msg)
  for i, neighbors in enumerate(adjacency):
    if any(not 0 <= n < n_atoms or n == i for n in neighbors):
      msg = f"Adjacency entry {i} has invalid neighbors {list(neighbors)}"
      raise TopologyError(msg)


def build_indexed_parameters(  # noqa: C901, PLR0912
  params: ForceFieldParamsKeyed,
  atoms: Sequence[Atom],
  bonds: Sequence[Bond],
  adjacency: Sequence[Sequence[int]],
  config: ParameterizationConfig | None = None,
) -> ForceFieldParamsIndexed:
  """Associate keyed force field data with the atom indices of a topology.

  Args:
      params: Merged keyed parameters (see `merge_params`).
      atoms: Atoms; their position in this sequence is their index.
      bonds: Bonds over `atoms`.
      adjacency: Neighbor lists derived from `bonds` (see `build_adjacency_list`).
      config: Fallback policy; defaults to `ParameterizationConfig()`.

  Returns:
      ForceFieldParamsIndexed with every term resolved.

  Raises:
      TopologyError: If bonds or adjacency reference atoms that do not exist.
      MissingTypeError: If an atom has no force field type and no element
          fallback applies, or if a bonded-term atom has no force field type.
      MissingMassError: If no mass can be found or derived for an atom.
      MissingTorsionError: If a proper or improper torsion has no parameters.

  """
  config = config or ParameterizationConfig()
  _check_topology(atoms, bonds, adjacency)

  diagnostics: list[Diagnostic] = []

  def note(category: str, message: str | None, indices: tuple[int, ...]) -> None:
    if message is None:
      return
    logger.warning(message)
    diagnostics.append(Diagnostic(category=category, message=message, atoms=indices))

  # Mass and Lennard-Jones / van der Waals
  mass: dict[int, MassParams] = {}
  van_der_waals: dict[int, VdwParams] = {}
  for i, atom in enumerate(atoms):
    ff_type, type_note = fallbacks.atom_lookup_type(atom)
    note("type", type_note, (i,))

    mass[i], mass_note = fallbacks.resolve_mass(ff_type, atom, params, config)
    note("mass", mass_note, (i,))

    van_der_waals[i], vdw_note = fallbacks.resolve_vdw(ff_type, atom, params, config)
    note("vdw", vdw_note, (i,))

  # Bond lengths
  bond_stretching: dict[BondKey, BondStretchingParams] = {}
  for bond in bonds:
    i0, i1 = bond.atom_0, bond.atom_1
    types = (_ff_type(atoms, i0, "Bond"), _ff_type(atoms, i1, "Bond"))
    data, bond_note = fallbacks.resolve_bond(types, (atoms[i0], atoms[i1]), params, config)
    key = canonical_bond(i0, i1)
    note("bond", bond_note, key)
    bond_stretching[key] = data

  # Valence angles: every connection between 3 atoms bonded linearly
  angle: dict[AngleKey, AngleBendingParams] = {}
  for key in iter_angles(adjacency):
    n0, ctr, n1 = key
    types = (
      _ff_type(atoms, n0, "Angle"),
      _ff_type(atoms, ctr, "Angle"),
      _ff_type(atoms, n1, "Angle"),
    )
    data, angle_note = fallbacks.resolve_angle(
      types,
      (atoms[n0], atoms[ctr], atoms[n1]),
      params,
      config,
    )
    note("angle", angle_note, key)
    angle[key] = data

  # Proper and improper torsions share one key space
  seen: set[TorsionKey] = set()

  dihedral: dict[TorsionKey, DihedralParams] = {}
  for key in iter_proper_torsions(adjacency):
    if key in seen:
      continue
    seen.add(key)

    types = tuple(_ff_type(atoms, idx, "Dihedral") for idx in key)
    dihe = params.get_dihedral(types, proper=True)
    if dihe is None:
      msg = "MD failure: Missing dihedral params for {}-{}-{}-{} on atoms {}".format(*types, key)
      raise MissingTorsionError(msg, improper=False)
    # Divide here; then don't do it during the dynamics run.
    dihedral[key] = dihe.normalized()

  # Atom 3 is the hub, with the other 3 atoms bonded to it.
  improper: dict[TorsionKey, DihedralParams] = {}
  for key in iter_impropers(adjacency):
    if key in seen:
      continue
    seen.add(key)

    types = tuple(_ff_type(atoms, idx, "Improper dihedral") for idx in key)
    dihe = params.get_dihedral(types, proper=False)
    if dihe is None:
      msg = "MD failure: Missing improper parameters for {}-{}-{}-{} on atoms {}".format(
        *types,
        key,
      )
      raise MissingTorsionError(msg, improper=True)
    improper[key] = dihe.normalized()

  logger.debug(
    "Indexed %d atoms: %d bonds, %d angles, %d dihedrals, %d impropers, %d fallbacks",
    len(atoms),
    len(bond_stretching),
    len(angle),
    len(dihedral),
    len(improper),
    len(diagnostics),
  )

  return ForceFieldParamsIndexed(
    n_atoms=len(atoms),
    mass=mass,
    van_der_waals=van_der_waals,
    bond_stretching=bond_stretching,
    angle=angle,
    dihedral=dihedral,
    improper=improper,
    diagnostics=tuple(diagnostics),
  )
