"""Topology containers consumed by the parameter builder.

This module defines:
- Atom, Bond, Residue: the molecular topology as read from a structure file
- ResidueEnd: position of a residue within its chain
- build_adjacency_list: neighbor lists derived from bonds
- select_atoms: sub-topology extraction with bond remapping
- SerialCounter: explicit serial number source for newly created atoms
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import numpy as np

from parmox.errors import TopologyError

logger = logging.getLogger(__name__)


class ResidueEnd(enum.Enum):
  """Where a residue sits in its chain; selects the charge table to use."""

  INTERNAL = "internal"
  N_TERMINUS = "n_terminus"
  C_TERMINUS = "c_terminus"
  HETERO = "hetero"


@dataclass
class Atom:
  """A single atom of the topology.

  The atom's position in the owning sequence is its identity; `serial_number`
  is carried for reporting and bond remapping only.

  Attributes:
      serial_number: Serial number from the structure file.
      element: Element symbol (e.g. "C", "Cl").
      posit: Cartesian position in Angstroms, shape (3,), if known.
      force_field_type: Force field type (e.g. "CT", "ca").
      partial_charge: Partial charge in elementary charge units.
      type_in_res: Residue-local atom name (e.g. "CB", "HB2").
      residue: Index of the owning residue.
      hetero: True for HETATM records.

  """

  serial_number: int
  element: str
  posit: np.ndarray | None = None
  force_field_type: str | None = None
  partial_charge: float | None = None
  type_in_res: str | None = None
  residue: int | None = None
  hetero: bool = False

  def __str__(self) -> str:
    parts = [f"#{self.serial_number}", self.element]
    if self.type_in_res:
      parts.append(self.type_in_res)
    if self.force_field_type:
      parts.append(f"ff={self.force_field_type}")
    if self.residue is not None:
      parts.append(f"res={self.residue}")
    return "Atom(" + " ".join(parts) + ")"


@dataclass
class Bond:
  """An unordered bond between two atom indices."""

  atom_0: int
  atom_1: int
  bond_type: str = "single"

  @property
  def key(self) -> tuple[int, int]:
    """The bond as a sorted index pair."""
    return (min(self.atom_0, self.atom_1), max(self.atom_0, self.atom_1))


@dataclass
class Residue:
  """A residue and the indices of its atoms.

  Attributes:
      serial_number: Residue number from the structure file.
      res_type: Three-letter amino acid code, or None for non-amino-acid residues.
      atoms: Indices of member atoms.
      end: Position of the residue within its chain.

  """

  serial_number: int
  res_type: str | None
  atoms: list[int] = field(default_factory=list)
  end: ResidueEnd = ResidueEnd.INTERNAL


class SerialCounter:
  """Hands out serial numbers for atoms created during a build.

  The counter is owned by the caller, so repeated builds over the same input
  produce the same serial numbers.
  """

  def __init__(self, start: int) -> None:
    self._next = start

  @classmethod
  def after(cls, atoms: Sequence[Atom]) -> SerialCounter:
    """Start numbering after the highest serial number in `atoms`."""
    highest = max((a.serial_number for a in atoms), default=0)
    return cls(highest + 1)

  def __call__(self) -> int:
    value = self._next
    self._next += 1
    return value

  @property
  def peek(self) -> int:
    """The serial number the next call will return."""
    return self._next


def build_adjacency_list(bonds: Sequence[Bond], n_atoms: int) -> list[list[int]]:
  """Build per-atom neighbor lists from bonds.

  Neighbor lists are sorted ascending so that enumeration over them is
  independent of bond order. Duplicate bonds collapse to one neighbor entry.

  Args:
      bonds: Bonds of the topology.
      n_atoms: Number of atoms in the topology.

  Returns:
      List of length `n_atoms`; entry i holds the indices bonded to atom i.

  Raises:
      TopologyError: If a bond references an index outside the atom range,
          or bonds an atom to itself.

  """
  neighbors: list[set[int]] = [set() for _ in range(n_atoms)]
  for bond in bonds:
    i, j = bond.atom_0, bond.atom_1
    if not (0 <= i < n_atoms and 0 <= j < n_atoms):
      msg = f"Bond {i}-{j} references an atom outside 0..{n_atoms - 1}"
      raise TopologyError(msg)
    if i == j:
      msg = f"Bond {i}-{j} bonds an atom to itself"
      raise TopologyError(msg)
    neighbors[i].add(j)
    neighbors[j].add(i)
  return [sorted(n) for n in neighbors]


def select_atoms(
  atoms: Sequence[Atom],
  bonds: Sequence[Bond],
  keep: Callable[[Atom], bool],
) -> tuple[list[Atom], list[Bond], list[int]]:
  """Extract the atoms passing `keep` and remap bonds onto the new indices.

  Bonds with neither atom kept are dropped.

  Args:
      atoms: Full atom sequence.
      bonds: Bonds over `atoms`.
      keep: Predicate selecting atoms to retain.

  Returns:
      Tuple of (selected atoms, remapped bonds, original index of each selected atom).

  Raises:
      TopologyError: If a bond joins a kept atom to a dropped one.

  """
  original_indices = [i for i, atom in enumerate(atoms) if keep(atom)]
  new_index = {old: new for new, old in enumerate(original_indices)}
  selected = [atoms[i] for i in original_indices]

  remapped = []
  for bond in bonds:
    i = new_index.get(bond.atom_0)
    j = new_index.get(bond.atom_1)
    if i is None and j is None:
      continue
    if i is None or j is None:
      msg = (
        f"Problem remapping bond {bond.atom_0}-{bond.atom_1}: "
        f"{atoms[bond.atom_0]} and {atoms[bond.atom_1]} are not both selected"
      )
      raise TopologyError(msg)
    remapped.append(Bond(i, j, bond.bond_type))

  logger.debug("Selected %d of %d atoms, %d bonds", len(selected), len(atoms), len(remapped))
  return selected, remapped, original_indices
