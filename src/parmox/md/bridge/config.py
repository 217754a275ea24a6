"""Configuration for force field parameterization."""

from __future__ import annotations

from flax.struct import dataclass, field

# Nonstandard types whose van der Waals (and mass) entries may be missing,
# mapped to a type whose parameters are always present in ff19SB/parm19.
DEFAULT_TYPE_ALIASES: dict[str, str] = {
  "2C": "CT",
  "3C": "CT",
  "C8": "CT",
  "CO": "C",
  "OXT": "O2",
}


@dataclass(frozen=True)
class ParameterizationConfig:
  """Policy knobs for resolving parameters against a topology.

  Attributes:
      histidine_variant: Residue key used when the charge table has no plain
          "HIS" entry. The variant sets the protonation state, so the charge
          of the system depends on it. None turns the substitution off.
      type_aliases: Fallback type for a force field type with no direct entry.
      element_prefixes: Type prefixes that fall back to the generic element entry.
      default_bond_k: Force constant for bonds with no parameters (kcal/mol/A^2).
      default_bond_length: Equilibrium length used when coordinates are absent (A).
      default_angle_k: Force constant for angles with no parameters (kcal/mol/rad^2).
      default_angle_theta: Equilibrium angle for angles with no parameters (rad).
          HC-CT-HC from parm19.dat.
      generic_hydrogen_labels: Entries whose charge an unmatched hydrogen borrows.
      generic_hydrogen_ff_type: Force field type given to an unmatched hydrogen.

  """

  histidine_variant: str | None = field(default="HID", pytree_node=False)
  type_aliases: dict[str, str] = field(
    default_factory=lambda: dict(DEFAULT_TYPE_ALIASES),
    pytree_node=False,
  )
  element_prefixes: tuple[str, ...] = field(default=("C", "N", "O"), pytree_node=False)
  default_bond_k: float = field(default=300.0, pytree_node=False)
  default_bond_length: float = field(default=1.33, pytree_node=False)
  default_angle_k: float = field(default=35.0, pytree_node=False)
  default_angle_theta: float = field(default=1.91113, pytree_node=False)
  generic_hydrogen_labels: tuple[str, ...] = field(default=("H", "HA"), pytree_node=False)
  generic_hydrogen_ff_type: str = field(default="HB2", pytree_node=False)
