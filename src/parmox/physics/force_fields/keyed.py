"""Force field parameters keyed by force field type.

`ForceFieldParamsKeyed` holds the five lookup tables of a force field (mass,
van der Waals, bond, angle, proper and improper torsion). `merge_params`
combines a generic table with a molecule-specific one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flax.struct import dataclass, field

from parmox.core.topology import ResidueEnd
from parmox.errors import TopologyError
from parmox.physics.force_fields.components import (
  AngleBendingParams,
  BondStretchingParams,
  ChargeParams,
  DihedralParams,
  MassParams,
  VdwParams,
)

if TYPE_CHECKING:
  from collections.abc import Mapping, Sequence

  from parmox.types import AngleTypeKey, BondTypeKey, TorsionTypeKey

WILDCARD = "X"


def _match_types(types: Sequence[str], pattern: Sequence[str]) -> bool:
  """Check if atom types match a pattern (with wildcard support)."""
  if len(types) != len(pattern):
    return False
  return all(p == WILDCARD or p == t for t, p in zip(types, pattern, strict=True))


def _specificity(pattern: Sequence[str]) -> int:
  return sum(1 for p in pattern if p != WILDCARD)


@dataclass(frozen=True)
class ForceFieldParamsKeyed:
  """Force field lookup tables keyed by type strings.

  This is a data container; the dictionaries are treated as read-only once
  the store is built. Bond keys are unordered pairs, angle keys have the
  center type in the middle, torsion keys are reversible.
  """

  mass: dict[str, MassParams] = field(default_factory=dict, pytree_node=False)
  van_der_waals: dict[str, VdwParams] = field(default_factory=dict, pytree_node=False)
  bond: dict[BondTypeKey, BondStretchingParams] = field(default_factory=dict, pytree_node=False)
  angle: dict[AngleTypeKey, AngleBendingParams] = field(default_factory=dict, pytree_node=False)
  dihedral: dict[TorsionTypeKey, DihedralParams] = field(default_factory=dict, pytree_node=False)
  dihedral_improper: dict[TorsionTypeKey, DihedralParams] = field(
    default_factory=dict,
    pytree_node=False,
  )

  def get_bond(self, types: BondTypeKey) -> BondStretchingParams | None:
    """Get bond parameters for a type pair in either order."""
    t0, t1 = types
    return self.bond.get((t0, t1)) or self.bond.get((t1, t0))

  def get_angle(self, types: AngleTypeKey) -> AngleBendingParams | None:
    """Get angle parameters for (end, center, end) in either end order."""
    t0, ctr, t1 = types
    return self.angle.get((t0, ctr, t1)) or self.angle.get((t1, ctr, t0))

  def get_dihedral(self, types: TorsionTypeKey, proper: bool) -> DihedralParams | None:
    """Get torsion parameters for four types.

    Exact keys win over wildcard ("X") entries; among wildcard entries the one
    with the fewest wildcards wins, and the first in table order breaks ties.
    Proper torsions also match the reversed key. Improper keys hold the hub in
    the third position and are matched in the given order only.

    Args:
        types: Force field types of the four atoms, in key order.
        proper: Look in the proper table if True, else in the improper table.

    Returns:
        The matching parameters, or None.

    """
    table = self.dihedral if proper else self.dihedral_improper
    candidates = [tuple(types)]
    if proper:
      candidates.append(tuple(reversed(types)))

    for key in candidates:
      if key in table:
        return table[key]

    best: DihedralParams | None = None
    best_score = -1
    for pattern, params in table.items():
      if WILDCARD not in pattern:
        continue
      if any(_match_types(key, pattern) for key in candidates):
        score = _specificity(pattern)
        if score > best_score:
          best_score = score
          best = params
    return best


def merge_params(
  generic: ForceFieldParamsKeyed,
  specific: ForceFieldParamsKeyed | None = None,
) -> ForceFieldParamsKeyed:
  """Build a single lookup table in which specific entries replace or add to generic ones.

  Nothing from `generic` is ever removed; inputs are not modified.

  Args:
      generic: Organism- or element-wide parameters (e.g. parm19 + frcmod, gaff2).
      specific: Optional molecule-specific parameters (e.g. a ligand frcmod).

  Returns:
      A new keyed store.

  """
  if specific is None:
    specific = ForceFieldParamsKeyed()
  return ForceFieldParamsKeyed(
    mass={**generic.mass, **specific.mass},
    van_der_waals={**generic.van_der_waals, **specific.van_der_waals},
    bond={**generic.bond, **specific.bond},
    angle={**generic.angle, **specific.angle},
    dihedral={**generic.dihedral, **specific.dihedral},
    dihedral_improper={**generic.dihedral_improper, **specific.dihedral_improper},
  )


@dataclass(frozen=True)
class ProteinChargeTable:
  """Per amino acid force field types and partial charges.

  One table per residue position, as in Amber's amino19 / aminont12 /
  aminoct12 libraries. Keys are three-letter residue codes, including
  protonation variants such as "HID", "HIE" and "HIP".
  """

  internal: dict[str, list[ChargeParams]] = field(default_factory=dict, pytree_node=False)
  n_terminus: dict[str, list[ChargeParams]] = field(default_factory=dict, pytree_node=False)
  c_terminus: dict[str, list[ChargeParams]] = field(default_factory=dict, pytree_node=False)

  def for_end(self, end: ResidueEnd) -> Mapping[str, list[ChargeParams]]:
    """Select the table matching a residue's chain position."""
    if end is ResidueEnd.N_TERMINUS:
      return self.n_terminus
    if end is ResidueEnd.C_TERMINUS:
      return self.c_terminus
    if end is ResidueEnd.INTERNAL:
      return self.internal
    msg = f"No charge table for residue end {end}"
    raise TopologyError(msg)
