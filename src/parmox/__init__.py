"""Parmox: force field parameter indexing for molecular dynamics in JAX.

Turns type-keyed force field tables (Amber parm19 / ff19SB, GAFF2, frcmod
overrides) into per-atom and per-term parameters for a concrete topology,
together with nonbonded exclusions and 1-4 scaling.
"""

from parmox.chem.hydrogens import build_digit_map, label_new_hydrogens, resolve_hydrogen_type
from parmox.core.topology import (
  Atom,
  Bond,
  Residue,
  ResidueEnd,
  SerialCounter,
  build_adjacency_list,
)
from parmox.errors import ParameterError, ParmoxError, TopologyError
from parmox.md.bridge import (
  ForceFieldParamsIndexed,
  ParameterizationConfig,
  ParameterizedSystem,
  build_exclusion_and_scaled_sets,
  build_indexed_parameters,
  parameterize_ligand,
  parameterize_system,
  populate_ff_and_q,
)
from parmox.physics.force_fields import (
  ForceFieldParamsKeyed,
  ProteinChargeTable,
  charge_table_from_records,
  keyed_params_from_records,
  merge_params,
)

__version__ = "0.1.0"

__all__ = [
  "Atom",
  "Bond",
  "ForceFieldParamsIndexed",
  "ForceFieldParamsKeyed",
  "ParameterError",
  "ParameterizationConfig",
  "ParameterizedSystem",
  "ParmoxError",
  "ProteinChargeTable",
  "Residue",
  "ResidueEnd",
  "SerialCounter",
  "TopologyError",
  "build_adjacency_list",
  "build_digit_map",
  "build_exclusion_and_scaled_sets",
  "build_indexed_parameters",
  "charge_table_from_records",
  "keyed_params_from_records",
  "label_new_hydrogens",
  "merge_params",
  "parameterize_ligand",
  "parameterize_system",
  "populate_ff_and_q",
  "resolve_hydrogen_type",
]
