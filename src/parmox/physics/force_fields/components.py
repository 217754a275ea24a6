"""Modular components for Force Field parameters.

Each record carries the force field types it was keyed on so that an indexed
entry can always be traced back to its source line. Records synthesized by a
fallback carry empty type strings.
"""

from __future__ import annotations

from flax.struct import dataclass, field


@dataclass(frozen=True)
class MassParams:
  """Atomic mass for a force field type."""

  atom_type: str = field(pytree_node=False)
  mass: float  # amu
  comment: str | None = field(default=None, pytree_node=False)


@dataclass(frozen=True)
class VdwParams:
  """Lennard-Jones parameters for a force field type."""

  atom_type: str = field(pytree_node=False)
  sigma: float  # Angstroms
  eps: float  # kcal/mol


@dataclass(frozen=True)
class BondStretchingParams:
  """Harmonic bond parameters for a pair of force field types."""

  atom_types: tuple[str, str] = field(pytree_node=False)
  k_b: float  # kcal/mol/A^2
  r_0: float  # Angstroms
  comment: str | None = field(default=None, pytree_node=False)


@dataclass(frozen=True)
class AngleBendingParams:
  """Harmonic angle parameters; the center type is the middle entry."""

  atom_types: tuple[str, str, str] = field(pytree_node=False)
  k: float  # kcal/mol/rad^2
  theta_0: float  # radians
  comment: str | None = field(default=None, pytree_node=False)


@dataclass(frozen=True)
class DihedralParams:
  """Periodic torsion parameters (proper or improper).

  The energy is `barrier_height / divider * (1 + cos(periodicity * phi - phase))`.
  """

  atom_types: tuple[str, str, str, str] = field(pytree_node=False)
  divider: int = field(pytree_node=False)
  barrier_height: float  # kcal/mol
  phase: float  # radians
  periodicity: int = field(pytree_node=False)
  comment: str | None = field(default=None, pytree_node=False)

  def normalized(self) -> DihedralParams:
    """Fold the divider into the barrier height.

    Returns:
        Copy with `barrier_height / divider` and `divider == 1`.

    """
    if self.divider in (0, 1):
      return self.replace(divider=1)
    return self.replace(barrier_height=self.barrier_height / self.divider, divider=1)


@dataclass(frozen=True)
class ChargeParams:
  """One atom of an amino acid in the reference type/charge table."""

  type_in_res: str = field(pytree_node=False)
  ff_type: str = field(pytree_node=False)
  charge: float


@dataclass(frozen=True)
class NonbondedGlobalParams:
  """Global parameters for non-bonded interactions."""

  coulomb14scale: float = 0.833333
  lj14scale: float = 0.5
