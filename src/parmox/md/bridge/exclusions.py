"""Nonbonded exclusions (1-2, 1-3) and scaled pairs (1-4)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax.numpy as jnp

if TYPE_CHECKING:
  from parmox.md.bridge.types import ForceFieldParamsIndexed
  from parmox.physics.force_fields.components import NonbondedGlobalParams
  from parmox.types import PairSet, ScaleMatrix

logger = logging.getLogger(__name__)


def _pair(i: int, j: int) -> tuple[int, int]:
  """Store pairs in canonical (low, high) order."""
  return (i, j) if i < j else (j, i)


def build_exclusion_and_scaled_sets(
  indexed: ForceFieldParamsIndexed,
) -> tuple[PairSet, PairSet]:
  """Derive nonbonded exclusions and 1-4 scaled pairs from indexed bonded terms.

  Bonded pairs and the ends of every angle are excluded. The ends of every
  proper torsion are scaled; impropers do not count. A pair that is both
  (possible in rings) is scaled only.

  Args:
      indexed: Output of `build_indexed_parameters`.

  Returns:
      Tuple of (excluded pairs, scaled pairs), each a set of (low, high) tuples.

  """
  excluded: PairSet = set()
  scaled: PairSet = set()

  # 1-2
  for i, j in indexed.bond_stretching:
    excluded.add(_pair(i, j))

  # 1-3
  for i, _, k in indexed.angle:
    excluded.add(_pair(i, k))

  # 1-4
  for i, _, _, l_idx in indexed.dihedral:
    scaled.add(_pair(i, l_idx))

  excluded -= scaled

  logger.debug("%d excluded pairs, %d scaled pairs", len(excluded), len(scaled))
  return excluded, scaled


def build_scale_matrices(
  n_atoms: int,
  excluded: PairSet,
  scaled: PairSet,
  global_params: NonbondedGlobalParams,
) -> tuple[ScaleMatrix, ScaleMatrix]:
  """Dense pairwise scale factors for van der Waals and electrostatics.

  Self pairs and excluded pairs get 0.0, scaled pairs get the 1-4 factors,
  every other pair 1.0.

  Args:
      n_atoms: Number of atoms.
      excluded: Excluded pairs.
      scaled: 1-4 pairs.
      global_params: 1-4 scale factors.

  Returns:
      Tuple of (scale_matrix_vdw, scale_matrix_elec), each (n_atoms, n_atoms).

  """
  # Initialize with 1.0
  scale_matrix_vdw = jnp.ones((n_atoms, n_atoms), dtype=jnp.float32)
  scale_matrix_elec = jnp.ones((n_atoms, n_atoms), dtype=jnp.float32)

  # Mask self
  diag_indices = jnp.diag_indices(n_atoms)
  scale_matrix_vdw = scale_matrix_vdw.at[diag_indices].set(0.0)
  scale_matrix_elec = scale_matrix_elec.at[diag_indices].set(0.0)

  if excluded:
    e_idx = jnp.array(sorted(excluded), dtype=jnp.int32)
    scale_matrix_vdw = scale_matrix_vdw.at[e_idx[:, 0], e_idx[:, 1]].set(0.0)
    scale_matrix_vdw = scale_matrix_vdw.at[e_idx[:, 1], e_idx[:, 0]].set(0.0)
    scale_matrix_elec = scale_matrix_elec.at[e_idx[:, 0], e_idx[:, 1]].set(0.0)
    scale_matrix_elec = scale_matrix_elec.at[e_idx[:, 1], e_idx[:, 0]].set(0.0)

  if scaled:
    p14 = jnp.array(sorted(scaled), dtype=jnp.int32)
    scale_matrix_vdw = scale_matrix_vdw.at[p14[:, 0], p14[:, 1]].set(global_params.lj14scale)
    scale_matrix_vdw = scale_matrix_vdw.at[p14[:, 1], p14[:, 0]].set(global_params.lj14scale)
    scale_matrix_elec = scale_matrix_elec.at[p14[:, 0], p14[:, 1]].set(
      global_params.coulomb14scale,
    )
    scale_matrix_elec = scale_matrix_elec.at[p14[:, 1], p14[:, 0]].set(
      global_params.coulomb14scale,
    )

  return scale_matrix_vdw, scale_matrix_elec
