"""Exception hierarchy for parmox."""

from __future__ import annotations

# --- Base ---


class ParmoxError(Exception):
  """Base class for all parmox exceptions."""


class TopologyError(ParmoxError, ValueError):
  """Error raised when atoms, bonds or residues are inconsistent."""


# --- Parameterization ---


class ParameterError(ParmoxError):
  """Error raised when a force field parameter cannot be resolved."""


class MissingTypeError(ParameterError):
  """An atom has no force field type and no element fallback applies."""


class MissingMassError(ParameterError):
  """Every mass fallback tier failed for an atom."""


class MissingVdwError(ParameterError):
  """Every van der Waals fallback tier failed for an atom."""


class MissingTorsionError(ParameterError):
  """No proper or improper torsion parameters match a quadruple."""

  def __init__(self, message: str, *, improper: bool = False) -> None:
    super().__init__(message)
    self.improper = improper


class MissingChargeError(ParameterError):
  """No charge table entry matches an atom's type in residue."""


# --- Hydrogen nomenclature ---


class HydrogenNamingError(ParmoxError):
  """Error raised when a hydrogen cannot be given a canonical name."""


class InvalidHydrogenParentError(HydrogenNamingError):
  """The parent heavy atom is not a recognized sidechain position."""


class HydrogenOrdinalError(HydrogenNamingError):
  """More hydrogens were requested on a parent than the residue permits."""


class HydrogenLabelError(HydrogenNamingError):
  """A composed hydrogen label is absent from the reference table."""
