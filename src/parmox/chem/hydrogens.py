"""Canonical names for hydrogens added to amino acids.

Structure files for proteins usually lack hydrogens. Once a geometry builder
has placed them, each needs the residue-local name (type in residue) that
Amber's amino acid libraries use, e.g. "HB2" and "HB3" on the CB of Asp, so
that force field types and charges can be assigned downstream.

Naming Scheme
-------------
A sidechain hydrogen is named "H" + designator + digit:

- The designator is the position letter of the parent heavy atom
  (CB -> "B", OG1 -> "G", NE2 -> "E", ...).
- The digit comes from the digit map: for every amino acid, the sorted digit
  suffixes that the reference table uses under each designator. The first
  hydrogen placed on a parent gets the smallest digit, the second the next.

Example:
    >>> digit_map = build_digit_map(charge_table.internal)
    >>> digit_map["ASP"]["B"]
    [2, 3]
    >>> resolve_hydrogen_type(0, "CB", "ASP", charge_table.internal, digit_map)
    'HB2'

"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Final

import numpy as np

from parmox.chem.elements import normalize_element
from parmox.core.topology import Atom, ResidueEnd, SerialCounter
from parmox.errors import (
  HydrogenLabelError,
  HydrogenOrdinalError,
  InvalidHydrogenParentError,
  TopologyError,
)
from parmox.md.bridge.config import ParameterizationConfig
from parmox.physics.force_fields.keyed import ProteinChargeTable

if TYPE_CHECKING:
  from collections.abc import Mapping, Sequence

  from parmox.core.topology import Residue
  from parmox.physics.force_fields.components import ChargeParams

logger = logging.getLogger(__name__)

# amino acid -> designator letter -> ascending digit suffixes
DigitMap = dict[str, dict[str, list[int]]]

# Sidechain heavy atom (type in residue) -> hydrogen designator letter
PARENT_DESIGNATORS: Final[dict[str, str]] = {
  "CB": "B",
  "CG": "G",
  "CG1": "G",
  "CG2": "G",
  "CD": "D",
  "CD1": "D",
  "CD2": "D",
  "CE": "E",
  "CE1": "E",
  "CE2": "E",
  "CE3": "E",
  "CZ": "Z",
  "CZ1": "Z",
  "CZ2": "Z",
  "CZ3": "Z",
  "CH2": "H",
  "CH3": "H",
  "OD1": "D",
  "OD2": "D",
  "OG": "G",
  "OG1": "G",
  "OG2": "G",
  "OE1": "E",
  "OE2": "E",
  "ND1": "D",
  "ND2": "D",
  "NH1": "H",
  "NH2": "H",
  "NE": "E",
  "NE1": "E",
  "NE2": "E",
  "SE": "E",
  "SG": "G",
}

MAX_DIGITS = 2


def _parse_hydrogen_label(name: str) -> tuple[str, int] | None:
  """Split "HB2" into ("B", 2); None for labels without a numbered suffix."""
  # No room for designator or digit - skip "H", "HA" etc.
  if len(name) < 3 or not name.startswith("H"):  # noqa: PLR2004
    return None
  designator, digits = name[1], name[2:]
  if not designator.isalpha():
    return None
  if not digits.isdigit() or len(digits) > MAX_DIGITS:
    return None
  return designator, int(digits)


def build_digit_map(table: Mapping[str, Sequence[ChargeParams]]) -> DigitMap:
  """Build the per amino acid map from designator letter to legal digits.

  Args:
      table: Reference type/charge entries per amino acid (e.g. amino19 internal).

  Returns:
      DigitMap with each digit list sorted ascending. Amino acids without any
      numbered hydrogen are absent.

  """
  result: DigitMap = {}
  for aa, entries in table.items():
    per_heavy: dict[str, set[int]] = defaultdict(set)
    for cp in entries:
      parsed = _parse_hydrogen_label(cp.type_in_res)
      if parsed is None:
        continue
      designator, digit = parsed
      per_heavy[designator].add(digit)

    if per_heavy:
      # ordinal 0 -> smallest digit
      result[aa] = {d: sorted(v) for d, v in sorted(per_heavy.items())}
  return result


def validate_hydrogen_label(
  label: str,
  amino_acid: str,
  table: Mapping[str, Sequence[ChargeParams]],
) -> bool:
  """Check that `label` is a type in residue of `amino_acid` in the reference table.

  Raises:
      HydrogenLabelError: If the amino acid has no reference entry.

  """
  entries = table.get(amino_acid)
  if entries is None:
    msg = f"No reference table entry for amino acid {amino_acid}"
    raise HydrogenLabelError(msg)
  return any(cp.type_in_res == label for cp in entries)


def resolve_hydrogen_type(
  ordinal: int,
  parent_type: str,
  amino_acid: str,
  table: Mapping[str, Sequence[ChargeParams]],
  digit_map: DigitMap,
) -> str:
  """Assign the type in residue of a sidechain hydrogen.

  Args:
      ordinal: 0-based position of this hydrogen among those on the same parent.
      parent_type: Type in residue of the parent heavy atom (e.g. "CB").
      amino_acid: Three-letter code of the residue.
      table: Reference type/charge entries per amino acid.
      digit_map: Output of `build_digit_map` over the same table.

  Returns:
      The hydrogen label, e.g. "HB2".

  Raises:
      InvalidHydrogenParentError: If the parent is not a sidechain heavy atom.
      HydrogenOrdinalError: If the residue allows fewer hydrogens on this parent.
      HydrogenLabelError: If the amino acid has no reference entry, or the
          composed label is not in the reference table.

  """
  designator = PARENT_DESIGNATORS.get(parent_type)
  if designator is None:
    msg = f"Invalid parent type in res on H assignment: {parent_type} ({amino_acid})"
    raise InvalidHydrogenParentError(msg)

  if amino_acid not in table:
    msg = f"No reference table entry for amino acid {amino_acid} (parent {parent_type})"
    raise HydrogenLabelError(msg)

  digits = digit_map.get(amino_acid, {}).get(designator, [])
  if not 0 <= ordinal < len(digits):
    msg = (
      f"H digit out of range on {amino_acid} {parent_type}: ordinal {ordinal} "
      f"not in {digits} for designator {designator}"
    )
    raise HydrogenOrdinalError(msg)

  label = f"H{designator}{digits[ordinal]}"
  if not validate_hydrogen_label(label, amino_acid, table):
    msg = f"Invalid H type: {label} on {amino_acid}. Parent: {parent_type}"
    raise HydrogenLabelError(msg)
  return label


def _backbone_hydrogen_label(
  ordinal: int,
  parent_type: str,
  amino_acid: str,
  end: ResidueEnd,
) -> str | None:
  """Labels for hydrogens on N and CA, which the digit map does not cover."""
  if parent_type == "N":
    if end is ResidueEnd.N_TERMINUS:
      return f"H{ordinal + 1}" if ordinal < 3 else None  # noqa: PLR2004
    return "H" if ordinal == 0 else None
  if parent_type == "CA":
    if amino_acid == "GLY":
      return ("HA2", "HA3")[ordinal] if ordinal < 2 else None  # noqa: PLR2004
    return "HA" if ordinal == 0 else None
  return None


def new_hydrogen(parent: Atom, posit: np.ndarray | None, next_serial: SerialCounter) -> Atom:
  """Create an unlabeled hydrogen belonging to the same residue as `parent`."""
  return Atom(
    serial_number=next_serial(),
    element="H",
    posit=None if posit is None else np.asarray(posit, dtype=np.float64),
    residue=parent.residue,
    hetero=parent.hetero,
  )


def _residue_key(
  res_type: str,
  table: Mapping[str, Sequence[ChargeParams]],
  config: ParameterizationConfig,
) -> str:
  """Table key for a residue; plain HIS maps to the configured variant."""
  if res_type in table:
    return res_type
  if res_type == "HIS" and config.histidine_variant in table:
    return config.histidine_variant
  return res_type


def _position_table(
  table: ProteinChargeTable | Mapping[str, Sequence[ChargeParams]],
  end: ResidueEnd,
) -> Mapping[str, Sequence[ChargeParams]]:
  if isinstance(table, ProteinChargeTable):
    return table.for_end(end)
  return table


def _existing_hydrogens(
  atoms: Sequence[Atom],
  parent_idx: int,
  adjacency: Sequence[Sequence[int]],
  new: set[int],
) -> int:
  return sum(
    1
    for n in adjacency[parent_idx]
    if n not in new and normalize_element(atoms[n].element) == "H"
  )


def label_new_hydrogens(
  atoms: Sequence[Atom],
  new_indices: Sequence[int],
  adjacency: Sequence[Sequence[int]],
  residues: Sequence[Residue],
  table: ProteinChargeTable | Mapping[str, Sequence[ChargeParams]],
  digit_map: DigitMap,
  config: ParameterizationConfig | None = None,
) -> None:
  """Assign `type_in_res` to newly created hydrogens, in place.

  Hydrogens are numbered per parent in index order, after any hydrogens the
  parent already carries. Only the atoms listed in `new_indices` are modified.

  Args:
      atoms: Full atom sequence, including the new hydrogens.
      new_indices: Indices of the hydrogens to label.
      adjacency: Neighbor lists over `atoms`.
      residues: Residues referenced by `Atom.residue`.
      table: Reference type/charge entries. A `ProteinChargeTable` selects the
          entries for each residue's chain position; a plain mapping is used
          for every position.
      digit_map: Output of `build_digit_map` over the internal entries.
      config: Histidine variant used when the table has no plain "HIS" entry.

  Raises:
      TopologyError: If a hydrogen is not bonded to exactly one atom, or lacks
          residue data.
      HydrogenNamingError: If a label cannot be resolved.

  """
  config = config or ParameterizationConfig()
  new = set(new_indices)
  counts: dict[int, int] = {}
  for h_idx in sorted(new):
    h = atoms[h_idx]
    if len(adjacency[h_idx]) != 1:
      msg = f"Hydrogen {h} must have exactly one bonded neighbor, has {len(adjacency[h_idx])}"
      raise TopologyError(msg)
    parent_idx = adjacency[h_idx][0]
    parent = atoms[parent_idx]
    if parent.type_in_res is None or h.residue is None:
      msg = f"Missing residue data when naming hydrogen {h} on {parent}"
      raise TopologyError(msg)

    residue = residues[h.residue]
    if residue.res_type is None:
      msg = f"Hydrogen {h} belongs to a non amino acid residue #{residue.serial_number}"
      raise TopologyError(msg)

    entries = _position_table(table, residue.end)
    aa = _residue_key(residue.res_type, entries, config)

    if parent_idx not in counts:
      counts[parent_idx] = _existing_hydrogens(atoms, parent_idx, adjacency, new)
    ordinal = counts[parent_idx]
    counts[parent_idx] += 1

    if parent.type_in_res in ("N", "CA"):
      label = _backbone_hydrogen_label(ordinal, parent.type_in_res, aa, residue.end)
      if label is None:
        msg = f"Too many hydrogens on backbone {parent.type_in_res} of {residue.res_type}"
        raise HydrogenOrdinalError(msg)
      if not validate_hydrogen_label(label, aa, entries):
        msg = f"Invalid H type: {label} on {aa}. Parent: {parent.type_in_res}"
        raise HydrogenLabelError(msg)
    else:
      label = resolve_hydrogen_type(ordinal, parent.type_in_res, aa, entries, digit_map)
    h.type_in_res = label

  logger.debug("Labeled %d new hydrogens", len(new))
