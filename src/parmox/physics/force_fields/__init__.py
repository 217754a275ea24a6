"""Force field parameter storage and loading utilities."""

from .components import (
  AngleBendingParams,
  BondStretchingParams,
  ChargeParams,
  DihedralParams,
  MassParams,
  NonbondedGlobalParams,
  VdwParams,
)
from .keyed import ForceFieldParamsKeyed, ProteinChargeTable, merge_params
from .loader import charge_table_from_records, keyed_params_from_records

__all__ = [
  "AngleBendingParams",
  "BondStretchingParams",
  "ChargeParams",
  "DihedralParams",
  "ForceFieldParamsKeyed",
  "MassParams",
  "NonbondedGlobalParams",
  "ProteinChargeTable",
  "VdwParams",
  "charge_table_from_records",
  "keyed_params_from_records",
  "merge_params",
]
