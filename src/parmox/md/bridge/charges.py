"""Assign force field types and partial charges to amino acid atoms."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parmox.chem.elements import normalize_element
from parmox.core.topology import ResidueEnd
from parmox.errors import MissingChargeError, TopologyError
from parmox.md.bridge.config import ParameterizationConfig

if TYPE_CHECKING:
  from collections.abc import Mapping, Sequence

  from parmox.core.topology import Atom, Residue
  from parmox.physics.force_fields.components import ChargeParams
  from parmox.physics.force_fields.keyed import ProteinChargeTable

logger = logging.getLogger(__name__)


def _residue_entries(
  res_type: str,
  charge_map: Mapping[str, Sequence[ChargeParams]],
  config: ParameterizationConfig,
) -> Sequence[ChargeParams]:
  entries = charge_map.get(res_type)
  if entries is not None:
    return entries
  # amino19.lib has no plain "HIS"; the chosen variant sets the protonation state.
  if res_type == "HIS" and config.histidine_variant is not None:
    entries = charge_map.get(config.histidine_variant)
    if entries is not None:
      return entries
  msg = f"Unable to find AA mapping for {res_type}"
  raise MissingChargeError(msg)


def populate_ff_and_q(
  atoms: Sequence[Atom],
  residues: Sequence[Residue],
  charge_table: ProteinChargeTable,
  config: ParameterizationConfig | None = None,
) -> None:
  """Set `force_field_type` and `partial_charge` on amino acid atoms, in place.

  Hetero atoms and atoms of non amino acid residues are skipped; ligands get
  their types and charges from their own source. A hydrogen whose type in
  residue has no entry takes the generic hydrogen type and the charge of the
  backbone "H" (or "HA") entry, with a warning.

  Args:
      atoms: Atoms to update.
      residues: Residues referenced by `Atom.residue`.
      charge_table: Types and charges per residue, per chain position.
      config: Histidine variant and generic hydrogen policy.

  Raises:
      TopologyError: If an atom lacks residue data, or an amino acid atom sits
          in a residue marked as hetero.
      MissingChargeError: If the residue or a heavy atom has no table entry.

  """
  config = config or ParameterizationConfig()

  for atom in atoms:
    if atom.hetero:
      continue

    if atom.residue is None:
      msg = f"MD failure: Missing residue when populating ff name and q: {atom}"
      raise TopologyError(msg)
    if atom.type_in_res is None:
      msg = f"MD failure: Missing type in residue for atom: {atom}"
      raise TopologyError(msg)

    residue = residues[atom.residue]
    if residue.res_type is None:
      # e.g. water
      continue
    if residue.end is ResidueEnd.HETERO:
      msg = f"Encountered hetero residue when assigning amino acid FF types: {atom}"
      raise TopologyError(msg)

    entries = _residue_entries(residue.res_type, charge_table.for_end(residue.end), config)

    match = next((cp for cp in entries if cp.type_in_res == atom.type_in_res), None)
    if match is not None:
      atom.force_field_type = match.ff_type
      atom.partial_charge = match.charge
      continue

    if normalize_element(atom.element) != "H":
      msg = (
        f"No FF type or charge for {atom.type_in_res} on {residue.res_type} "
        f"#{residue.serial_number}"
      )
      raise MissingChargeError(msg)

    generic = next(
      (cp for cp in entries if cp.type_in_res in config.generic_hydrogen_labels),
      None,
    )
    if generic is None:
      msg = (
        f"Failed to match H type {atom.type_in_res} on {residue.res_type} "
        f"#{residue.serial_number}, and no generic H entry is available"
      )
      raise MissingChargeError(msg)

    # Seen with mmCIF files that carry nonstandard hydrogen names.
    logger.warning(
      "Failed to match H type. #%s, %s, %s. Falling back to a generic H",
      residue.serial_number,
      atom.type_in_res,
      residue.res_type,
    )
    atom.force_field_type = config.generic_hydrogen_ff_type
    atom.partial_charge = generic.charge
