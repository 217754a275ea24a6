"""Periodic table data used for mass fallbacks."""

from __future__ import annotations

from typing import Final

# Standard atomic weights (amu)
ATOMIC_WEIGHTS: Final[dict[str, float]] = {
  "H": 1.008,
  "He": 4.0026,
  "Li": 6.94,
  "Be": 9.0122,
  "B": 10.81,
  "C": 12.011,
  "N": 14.007,
  "O": 15.999,
  "F": 18.998,
  "Ne": 20.180,
  "Na": 22.990,
  "Mg": 24.305,
  "Al": 26.982,
  "Si": 28.085,
  "P": 30.974,
  "S": 32.06,
  "Cl": 35.45,
  "Ar": 39.948,
  "K": 39.098,
  "Ca": 40.078,
  "Mn": 54.938,
  "Fe": 55.845,
  "Co": 58.933,
  "Ni": 58.693,
  "Cu": 63.546,
  "Zn": 65.38,
  "Se": 78.971,
  "Br": 79.904,
  "I": 126.904,
}

# Elements that may stand in for a missing force field type.
GENERIC_ELEMENT_TYPES: Final[tuple[str, ...]] = ("C", "N", "O", "H")


def normalize_element(element: str) -> str:
  """Return an element symbol in canonical capitalization (e.g. "CL" -> "Cl")."""
  element = element.strip()
  if not element:
    return element
  return element[0].upper() + element[1:].lower()


def element_mass(element: str) -> float | None:
  """Look up the standard atomic weight of an element.

  Args:
      element: Element symbol, any capitalization.

  Returns:
      Mass in amu, or None for an unknown element.

  """
  return ATOMIC_WEIGHTS.get(normalize_element(element))
