"""Build keyed force field stores from parsed records.

File parsing lives outside this package. Parsers for Amber `.dat` / `frcmod`
/ `.lib` files hand over plain dictionaries in the shape documented on each
function here, and these helpers turn them into the immutable stores used by
the parameter builder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from parmox.physics.force_fields.components import (
  AngleBendingParams,
  BondStretchingParams,
  ChargeParams,
  DihedralParams,
  MassParams,
  VdwParams,
)
from parmox.physics.force_fields.keyed import ForceFieldParamsKeyed, ProteinChargeTable

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


def _torsion_from_record(rec: Record) -> DihedralParams:
  classes = tuple(rec["classes"])
  if len(classes) != 4:  # noqa: PLR2004
    msg = f"Torsion record needs four classes, got {classes}"
    raise ValueError(msg)
  return DihedralParams(
    atom_types=classes,
    divider=int(rec.get("divider", 1)),
    barrier_height=float(rec["barrier_height"]),
    phase=float(rec.get("phase", 0.0)),
    periodicity=int(rec["periodicity"]),
    comment=rec.get("comment"),
  )


def keyed_params_from_records(data: Record) -> ForceFieldParamsKeyed:
  """Convert parsed force field records to a keyed store.

  Expected keys (all optional):
      masses: [{"atom_type", "mass"}]
      van_der_waals: [{"atom_type", "sigma", "eps"}]
      bonds: [{"class1", "class2", "k", "length"}]
      angles: [{"class1", "class2", "class3", "k", "angle"}]
      proper_torsions: [{"classes", "barrier_height", "periodicity", "phase", "divider"}]
      improper_torsions: same shape as proper_torsions, hub type third.

  A later record with the same key replaces an earlier one, matching how
  frcmod files amend a base parameter file.

  Args:
      data: Parsed records.

  Returns:
      ForceFieldParamsKeyed built from the records.

  """
  mass = {}
  for rec in data.get("masses", []):
    t = rec["atom_type"]
    mass[t] = MassParams(atom_type=t, mass=float(rec["mass"]), comment=rec.get("comment"))

  vdw = {}
  for rec in data.get("van_der_waals", []):
    t = rec["atom_type"]
    eps = rec["eps"] if "eps" in rec else rec["epsilon"]
    vdw[t] = VdwParams(atom_type=t, sigma=float(rec["sigma"]), eps=float(eps))

  bonds = {}
  for rec in data.get("bonds", []):
    key = (rec["class1"], rec["class2"])
    bonds[key] = BondStretchingParams(
      atom_types=key,
      k_b=float(rec["k"]),
      r_0=float(rec["length"]),
      comment=rec.get("comment"),
    )

  angles = {}
  for rec in data.get("angles", []):
    key = (rec["class1"], rec["class2"], rec["class3"])
    angles[key] = AngleBendingParams(
      atom_types=key,
      k=float(rec["k"]),
      theta_0=float(rec.get("angle", 0.0)),
      comment=rec.get("comment"),
    )

  propers = {}
  for rec in data.get("proper_torsions", []):
    params = _torsion_from_record(rec)
    propers[params.atom_types] = params

  impropers = {}
  for rec in data.get("improper_torsions", []):
    params = _torsion_from_record(rec)
    impropers[params.atom_types] = params

  logger.debug(
    "Keyed params: %d masses, %d vdw, %d bonds, %d angles, %d propers, %d impropers",
    len(mass),
    len(vdw),
    len(bonds),
    len(angles),
    len(propers),
    len(impropers),
  )

  return ForceFieldParamsKeyed(
    mass=mass,
    van_der_waals=vdw,
    bond=bonds,
    angle=angles,
    dihedral=propers,
    dihedral_improper=impropers,
  )


def _charges_from_records(
  residues: Mapping[str, Iterable[Record]],
) -> dict[str, list[ChargeParams]]:
  table = {}
  # Sort templates for deterministic order
  for res_name in sorted(residues):
    table[res_name] = [
      ChargeParams(
        type_in_res=atom["name"],
        ff_type=atom["type"],
        charge=float(atom.get("charge", 0.0)),
      )
      for atom in residues[res_name]
    ]
  return table


def charge_table_from_records(data: Record) -> ProteinChargeTable:
  """Convert parsed residue templates to a per amino acid charge table.

  Expected shape:
      {"internal": {"ALA": [{"name": "N", "type": "N", "charge": -0.4157}, ...]},
       "n_terminus": {...}, "c_terminus": {...}}

  Args:
      data: Parsed residue templates per chain position.

  Returns:
      ProteinChargeTable built from the records.

  """
  return ProteinChargeTable(
    internal=_charges_from_records(data.get("internal", {})),
    n_terminus=_charges_from_records(data.get("n_terminus", {})),
    c_terminus=_charges_from_records(data.get("c_terminus", {})),
  )
