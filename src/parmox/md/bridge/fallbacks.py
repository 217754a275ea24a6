"""Ordered fallback strategies for missing force field parameters.

Each category (mass, van der Waals, bond, angle) has a tuple of strategies
tried in order; the first that returns a result wins. A strategy returns
`(params, note)`: `note` is None for a direct table hit and a description of
the substitution otherwise, which the builder records as a diagnostic.

Torsions have no strategies on purpose: a missing torsion is fatal.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

import numpy as np

from parmox.chem.elements import GENERIC_ELEMENT_TYPES, element_mass, normalize_element
from parmox.errors import MissingMassError, MissingTypeError, MissingVdwError
from parmox.physics.force_fields.components import (
  AngleBendingParams,
  BondStretchingParams,
  MassParams,
  VdwParams,
)

if TYPE_CHECKING:
  from parmox.core.topology import Atom
  from parmox.md.bridge.config import ParameterizationConfig
  from parmox.physics.force_fields.keyed import ForceFieldParamsKeyed

T = TypeVar("T")
Resolution = tuple[T, str | None]
AtomStrategy = Callable[
  [str, "Atom", "ForceFieldParamsKeyed", "ParameterizationConfig"],
  "Resolution | None",
]


def _first_success(
  strategies: Sequence[Callable[..., Resolution | None]],
  *args: object,
) -> Resolution | None:
  for strategy in strategies:
    result = strategy(*args)
    if result is not None:
      return result
  return None


def atom_lookup_type(atom: Atom) -> tuple[str, str | None]:
  """Force field type to use for mass and van der Waals lookup.

  Atoms without a force field type borrow their element symbol when it is one
  of the generic types C, N, O, H.

  Raises:
      MissingTypeError: If the atom has no type and another element.

  """
  if atom.force_field_type:
    return atom.force_field_type, None
  element = normalize_element(atom.element)
  if element in GENERIC_ELEMENT_TYPES:
    return element, f"Atom missing FF type: {atom}; falling back to generic {element}"
  msg = f"MD failure: Atom missing FF type: {atom}"
  raise MissingTypeError(msg)


def _prefix(ff_type: str, config: ParameterizationConfig) -> str | None:
  for prefix in config.element_prefixes:
    if ff_type.startswith(prefix):
      return prefix
  return None


# --- Mass ---


def _exact_mass(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[MassParams] | None:
  mass = params.mass.get(ff_type)
  return None if mass is None else (mass, None)


def _alias_mass(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[MassParams] | None:
  alias = config.type_aliases.get(ff_type)
  if alias is None or alias not in params.mass:
    return None
  return params.mass[alias], f"Using {alias} alias mass for {ff_type}"


def _prefix_mass(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[MassParams] | None:
  prefix = _prefix(ff_type, config)
  if prefix is None or prefix not in params.mass:
    return None
  return params.mass[prefix], f"Using {prefix} fallback mass for {ff_type}"


def _element_weight_mass(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[MassParams] | None:
  weight = element_mass(atom.element)
  if weight is None:
    return None
  return (
    MassParams(atom_type="", mass=weight),
    f"Missing mass params for {ff_type} on {atom}; using element default",
  )


MASS_STRATEGIES: tuple[AtomStrategy, ...] = (
  _exact_mass,
  _alias_mass,
  _prefix_mass,
  _element_weight_mass,
)


def resolve_mass(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[MassParams]:
  """Resolve the mass of an atom through `MASS_STRATEGIES`.

  Raises:
      MissingMassError: If every strategy fails.

  """
  result = _first_success(MASS_STRATEGIES, ff_type, atom, params, config)
  if result is None:
    msg = f"MD failure: Missing mass params for {ff_type} on {atom}"
    raise MissingMassError(msg)
  return result


# --- Van der Waals ---


def _exact_vdw(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[VdwParams] | None:
  vdw = params.van_der_waals.get(ff_type)
  return None if vdw is None else (vdw, None)


def _alias_vdw(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[VdwParams] | None:
  alias = config.type_aliases.get(ff_type)
  if alias is None or alias not in params.van_der_waals:
    return None
  return params.van_der_waals[alias], f"Using {alias} alias VdW for {ff_type} on {atom}"


def _prefix_vdw(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[VdwParams] | None:
  prefix = _prefix(ff_type, config)
  if prefix is None or prefix not in params.van_der_waals:
    return None
  return params.van_der_waals[prefix], f"Using {prefix} fallback VdW for {ff_type} on {atom}"


def _zero_vdw(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[VdwParams] | None:
  # Zero well depth: no interaction.
  return (
    VdwParams(atom_type="", sigma=0.0, eps=0.0),
    f"Missing VdW params for {ff_type} on {atom}; setting to 0",
  )


VDW_STRATEGIES: tuple[AtomStrategy, ...] = (
  _exact_vdw,
  _alias_vdw,
  _prefix_vdw,
  _zero_vdw,
)


def resolve_vdw(
  ff_type: str,
  atom: Atom,
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[VdwParams]:
  """Resolve the Lennard-Jones parameters of an atom through `VDW_STRATEGIES`.

  Raises:
      MissingVdwError: If every strategy fails (only with a custom strategy list).

  """
  result = _first_success(VDW_STRATEGIES, ff_type, atom, params, config)
  if result is None:
    msg = f"MD failure: Missing Van der Waals params for {ff_type} on {atom}"
    raise MissingVdwError(msg)
  return result


# --- Bonds ---


def _lookup_bond(
  types: tuple[str, str],
  atoms: tuple[Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[BondStretchingParams] | None:
  data = params.get_bond(types)
  return None if data is None else (data, None)


def _geometric_bond(
  types: tuple[str, str],
  atoms: tuple[Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[BondStretchingParams] | None:
  a0, a1 = atoms
  if a0.posit is not None and a1.posit is not None:
    # Zero strain at the starting geometry.
    r_0 = float(np.linalg.norm(np.asarray(a0.posit) - np.asarray(a1.posit)))
  else:
    r_0 = config.default_bond_length
  return (
    BondStretchingParams(atom_types=("", ""), k_b=config.default_bond_k, r_0=r_0),
    f"Missing bond parameters for {types[0]}-{types[1]} on {a0} - {a1}. Using a safe default.",
  )


BOND_STRATEGIES = (_lookup_bond, _geometric_bond)


def resolve_bond(
  types: tuple[str, str],
  atoms: tuple[Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[BondStretchingParams]:
  """Resolve bond parameters through `BOND_STRATEGIES`; never fails."""
  return _first_success(BOND_STRATEGIES, types, atoms, params, config)


# --- Angles ---


def _lookup_angle(
  types: tuple[str, str, str],
  atoms: tuple[Atom, Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[AngleBendingParams] | None:
  data = params.get_angle(types)
  return None if data is None else (data, None)


def _default_angle(
  types: tuple[str, str, str],
  atoms: tuple[Atom, Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[AngleBendingParams] | None:
  t0, ctr, t1 = types
  a0, a_ctr, a1 = atoms
  return (
    AngleBendingParams(
      atom_types=("", "", ""),
      k=config.default_angle_k,
      theta_0=config.default_angle_theta,
    ),
    f"Missing valence angle params {t0}-{ctr}-{t1} on {a0} - {a_ctr} - {a1}. "
    "Using a safe default.",
  )


ANGLE_STRATEGIES = (_lookup_angle, _default_angle)


def resolve_angle(
  types: tuple[str, str, str],
  atoms: tuple[Atom, Atom, Atom],
  params: ForceFieldParamsKeyed,
  config: ParameterizationConfig,
) -> Resolution[AngleBendingParams]:
  """Resolve angle parameters through `ANGLE_STRATEGIES`; never fails."""
  return _first_success(ANGLE_STRATEGIES, types, atoms, params, config)
