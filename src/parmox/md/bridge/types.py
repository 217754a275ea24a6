"""Per-term parameter containers for the indexed system and its array layout."""

from __future__ import annotations

from collections import Counter
from typing import TypedDict

import jax.numpy as jnp
from flax.struct import dataclass, field

from parmox.md.bridge.exclusions import build_scale_matrices
from parmox.physics.force_fields.components import (
  AngleBendingParams,
  BondStretchingParams,
  DihedralParams,
  MassParams,
  NonbondedGlobalParams,
  VdwParams,
)
from parmox.types import AngleKey, BondKey, PairSet, TorsionKey


class SystemParams(TypedDict):
  """Parameters for a JAX MD system."""

  charges: jnp.ndarray  # (N,)
  masses: jnp.ndarray  # (N,) Atomic masses (amu)
  sigmas: jnp.ndarray  # (N,)
  epsilons: jnp.ndarray  # (N,)
  bonds: jnp.ndarray  # (N_bonds, 2)
  bond_params: jnp.ndarray  # (N_bonds, 2) [length, k]
  angles: jnp.ndarray  # (N_angles, 3)
  angle_params: jnp.ndarray  # (N_angles, 2) [theta0, k]
  dihedrals: jnp.ndarray  # (N_dihedrals, 4)
  dihedral_params: jnp.ndarray  # (N_dihedrals, 3) [periodicity, phase, k]
  impropers: jnp.ndarray  # (N_impropers, 4)
  improper_params: jnp.ndarray  # (N_impropers, 3) [periodicity, phase, k]
  exclusion_mask: jnp.ndarray  # (N, N) boolean mask (True = interact, False = exclude)
  scale_matrix_vdw: jnp.ndarray  # (N, N) scaling factors for VDW
  scale_matrix_elec: jnp.ndarray  # (N, N) scaling factors for Electrostatics


@dataclass(frozen=True)
class Diagnostic:
  """A parameter that was filled in by a fallback rather than looked up."""

  category: str = field(pytree_node=False)  # "type", "mass", "vdw", "bond", "angle"
  message: str = field(pytree_node=False)
  atoms: tuple[int, ...] = field(pytree_node=False)


@dataclass(frozen=True)
class ForceFieldParamsIndexed:
  """Force field parameters addressed by atom index.

  Keys:
      mass, van_der_waals: atom index.
      bond_stretching: sorted index pair.
      angle: (end, center, end) with ends ascending.
      dihedral: (i, j, k, l) with j < k.
      improper: (satellite, satellite, hub, satellite).

  Torsion entries already have the divider folded into the barrier height.
  """

  n_atoms: int = field(pytree_node=False)
  mass: dict[int, MassParams] = field(default_factory=dict, pytree_node=False)
  van_der_waals: dict[int, VdwParams] = field(default_factory=dict, pytree_node=False)
  bond_stretching: dict[BondKey, BondStretchingParams] = field(
    default_factory=dict,
    pytree_node=False,
  )
  angle: dict[AngleKey, AngleBendingParams] = field(default_factory=dict, pytree_node=False)
  dihedral: dict[TorsionKey, DihedralParams] = field(default_factory=dict, pytree_node=False)
  improper: dict[TorsionKey, DihedralParams] = field(default_factory=dict, pytree_node=False)
  diagnostics: tuple[Diagnostic, ...] = field(default=(), pytree_node=False)

  def fallback_counts(self) -> dict[str, int]:
    """Count fallback events per category."""
    return dict(Counter(d.category for d in self.diagnostics))

  def to_system_params(
    self,
    excluded: PairSet,
    scaled: PairSet,
    charges: list[float] | None = None,
    global_params: NonbondedGlobalParams | None = None,
  ) -> SystemParams:
    """Convert to JAX arrays for a dynamics engine.

    Args:
        excluded: 1-2 and 1-3 pairs from `build_exclusion_and_scaled_sets`.
        scaled: 1-4 pairs from `build_exclusion_and_scaled_sets`.
        charges: Partial charges per atom; zeros if omitted.
        global_params: 1-4 scale factors.

    Returns:
        SystemParams dictionary.

    """
    n_atoms = self.n_atoms
    if charges is None:
      charges = [0.0] * n_atoms
    scale_matrix_vdw, scale_matrix_elec = build_scale_matrices(
      n_atoms,
      excluded,
      scaled,
      global_params or NonbondedGlobalParams(),
    )

    def torsion_arrays(
      table: dict[TorsionKey, DihedralParams],
    ) -> tuple[jnp.ndarray, jnp.ndarray]:
      if not table:
        return jnp.zeros((0, 4), dtype=jnp.int32), jnp.zeros((0, 3), dtype=jnp.float32)
      return (
        jnp.array(list(table), dtype=jnp.int32),
        jnp.array(
          [[d.periodicity, d.phase, d.barrier_height] for d in table.values()],
          dtype=jnp.float32,
        ),
      )

    dihedrals, dihedral_params = torsion_arrays(self.dihedral)
    impropers, improper_params = torsion_arrays(self.improper)

    return {
      "charges": jnp.array(charges, dtype=jnp.float32),
      "masses": jnp.array([self.mass[i].mass for i in range(n_atoms)], dtype=jnp.float32),
      "sigmas": jnp.array(
        [self.van_der_waals[i].sigma for i in range(n_atoms)],
        dtype=jnp.float32,
      ),
      "epsilons": jnp.array(
        [self.van_der_waals[i].eps for i in range(n_atoms)],
        dtype=jnp.float32,
      ),
      "bonds": (
        jnp.array(list(self.bond_stretching), dtype=jnp.int32)
        if self.bond_stretching
        else jnp.zeros((0, 2), dtype=jnp.int32)
      ),
      "bond_params": (
        jnp.array([[b.r_0, b.k_b] for b in self.bond_stretching.values()], dtype=jnp.float32)
        if self.bond_stretching
        else jnp.zeros((0, 2), dtype=jnp.float32)
      ),
      "angles": (
        jnp.array(list(self.angle), dtype=jnp.int32)
        if self.angle
        else jnp.zeros((0, 3), dtype=jnp.int32)
      ),
      "angle_params": (
        jnp.array([[a.theta_0, a.k] for a in self.angle.values()], dtype=jnp.float32)
        if self.angle
        else jnp.zeros((0, 2), dtype=jnp.float32)
      ),
      "dihedrals": dihedrals,
      "dihedral_params": dihedral_params,
      "impropers": impropers,
      "improper_params": improper_params,
      "exclusion_mask": scale_matrix_vdw > 0.0,
      "scale_matrix_vdw": scale_matrix_vdw,
      "scale_matrix_elec": scale_matrix_elec,
    }
