"""Bridge from keyed force field tables to index-addressed system parameters."""

from parmox.md.bridge.charges import populate_ff_and_q
from parmox.md.bridge.config import ParameterizationConfig
from parmox.md.bridge.core import build_indexed_parameters
from parmox.md.bridge.exclusions import build_exclusion_and_scaled_sets, build_scale_matrices
from parmox.md.bridge.system import ParameterizedSystem, parameterize_ligand, parameterize_system
from parmox.md.bridge.types import Diagnostic, ForceFieldParamsIndexed, SystemParams

__all__ = [
  "Diagnostic",
  "ForceFieldParamsIndexed",
  "ParameterizationConfig",
  "ParameterizedSystem",
  "SystemParams",
  "build_exclusion_and_scaled_sets",
  "build_indexed_parameters",
  "build_scale_matrices",
  "parameterize_ligand",
  "parameterize_system",
  "populate_ff_and_q",
]
