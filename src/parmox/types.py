"""Type definitions for parmox."""

from __future__ import annotations

import numpy as np
from jaxtyping import Array, Bool, Float, Int

ArrayLike = Array | np.ndarray

# Index keys
AtomIndex = int
BondKey = tuple[int, int]
AngleKey = tuple[int, int, int]
TorsionKey = tuple[int, int, int, int]
PairSet = set[tuple[int, int]]

# Force field type keys
BondTypeKey = tuple[str, str]
AngleTypeKey = tuple[str, str, str]
TorsionTypeKey = tuple[str, str, str, str]

# Structural Types
Coordinates = Float[ArrayLike, "num_atoms 3"]
AtomicCoordinate = Float[ArrayLike, "3"]
Elements = list[str]

# Physics Types
Charges = Float[ArrayLike, "num_atoms"]
Masses = Float[ArrayLike, "num_atoms"]
Sigmas = Float[ArrayLike, "num_atoms"]
Epsilons = Float[ArrayLike, "num_atoms"]

# Indexed topology arrays
BondIndices = Int[ArrayLike, "num_bonds 2"]
BondParams = Float[ArrayLike, "num_bonds 2"]
AngleIndices = Int[ArrayLike, "num_angles 3"]
AngleParams = Float[ArrayLike, "num_angles 2"]
TorsionIndices = Int[ArrayLike, "num_torsions 4"]
TorsionParams = Float[ArrayLike, "num_torsions 3"]
ExclusionMask = Bool[ArrayLike, "num_atoms num_atoms"]
ScaleMatrix = Float[ArrayLike, "num_atoms num_atoms"]
