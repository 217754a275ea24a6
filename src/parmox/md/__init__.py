"""MD integration module.

Resolves force field parameters onto a topology and lays them out as arrays
for a JAX dynamics engine.
"""

from parmox.md.bridge import (
  ForceFieldParamsIndexed,
  ParameterizationConfig,
  ParameterizedSystem,
  SystemParams,
  build_exclusion_and_scaled_sets,
  build_indexed_parameters,
  parameterize_ligand,
  parameterize_system,
)

__all__ = [
  "ForceFieldParamsIndexed",
  "ParameterizationConfig",
  "ParameterizedSystem",
  "SystemParams",
  "build_exclusion_and_scaled_sets",
  "build_indexed_parameters",
  "parameterize_ligand",
  "parameterize_system",
]
