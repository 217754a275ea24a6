"""End-to-end parameterization of peptides and ligands.

`parameterize_system` covers a protein chain read from a structure file:
hetero atoms are stripped, amino acid atoms get types and charges from the
residue templates, and the bonded terms are resolved. `parameterize_ligand`
covers a small molecule whose types and charges are already set, with an
optional molecule-specific parameter set merged over the generic one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flax.struct import dataclass, field

from parmox.core.topology import build_adjacency_list, select_atoms
from parmox.md.bridge.charges import populate_ff_and_q
from parmox.md.bridge.core import build_indexed_parameters
from parmox.md.bridge.exclusions import build_exclusion_and_scaled_sets
from parmox.physics.force_fields.keyed import merge_params

if TYPE_CHECKING:
  from collections.abc import Sequence

  from parmox.core.topology import Atom, Bond, Residue
  from parmox.md.bridge.config import ParameterizationConfig
  from parmox.md.bridge.types import ForceFieldParamsIndexed, SystemParams
  from parmox.physics.force_fields.components import NonbondedGlobalParams
  from parmox.physics.force_fields.keyed import ForceFieldParamsKeyed, ProteinChargeTable
  from parmox.types import PairSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterizedSystem:
  """Indexed parameters together with the atoms they index.

  Attributes:
      atoms: Atoms of the parameterized system, in index order.
      original_indices: Index of each atom in the input sequence.
      indexed: Per-index force field terms.
      excluded: 1-2 and 1-3 pairs.
      scaled: 1-4 pairs.

  """

  atoms: list[Atom] = field(pytree_node=False)
  original_indices: list[int] = field(pytree_node=False)
  indexed: ForceFieldParamsIndexed = field(pytree_node=False)
  excluded: PairSet = field(default_factory=set, pytree_node=False)
  scaled: PairSet = field(default_factory=set, pytree_node=False)

  @property
  def charges(self) -> list[float]:
    """Partial charges per atom; atoms without one count as neutral."""
    return [a.partial_charge if a.partial_charge is not None else 0.0 for a in self.atoms]

  def to_system_params(self, global_params: NonbondedGlobalParams | None = None) -> SystemParams:
    """Convert to the array layout used by the dynamics engine."""
    return self.indexed.to_system_params(
      self.excluded,
      self.scaled,
      charges=self.charges,
      global_params=global_params,
    )


def _finish(
  params: ForceFieldParamsKeyed,
  atoms: list[Atom],
  bonds: Sequence[Bond],
  original_indices: list[int],
  config: ParameterizationConfig | None,
) -> ParameterizedSystem:
  adjacency = build_adjacency_list(bonds, len(atoms))
  indexed = build_indexed_parameters(params, atoms, bonds, adjacency, config)
  excluded, scaled = build_exclusion_and_scaled_sets(indexed)

  logger.info(
    "Parameterized %d atoms: %d excluded pairs, %d scaled pairs, fallbacks %s",
    len(atoms),
    len(excluded),
    len(scaled),
    indexed.fallback_counts(),
  )

  return ParameterizedSystem(
    atoms=atoms,
    original_indices=original_indices,
    indexed=indexed,
    excluded=excluded,
    scaled=scaled,
  )


def parameterize_system(
  atoms: Sequence[Atom],
  bonds: Sequence[Bond],
  residues: Sequence[Residue],
  params: ForceFieldParamsKeyed,
  charge_table: ProteinChargeTable,
  config: ParameterizationConfig | None = None,
) -> ParameterizedSystem:
  """Parameterize the amino acid atoms of a structure.

  Types and charges are written onto `atoms` in place. Hetero atoms (water,
  ligands, ions) are left out of the result.

  Args:
      atoms: All atoms of the structure.
      bonds: Bonds over `atoms`.
      residues: Residues referenced by `Atom.residue`.
      params: Keyed force field parameters for proteins (e.g. parm19 + ff19SB).
      charge_table: Amino acid templates (e.g. amino19 / aminont12 / aminoct12).
      config: Fallback policy.

  Returns:
      ParameterizedSystem over the non hetero atoms.

  Raises:
      TopologyError: If a bond links a kept atom to a hetero atom, or residue
          data is missing.
      ParameterError: If a required parameter cannot be resolved.

  """
  populate_ff_and_q(atoms, residues, charge_table, config)
  selected, remapped, original_indices = select_atoms(atoms, bonds, lambda a: not a.hetero)
  return _finish(params, selected, remapped, original_indices, config)


def parameterize_ligand(
  atoms: Sequence[Atom],
  bonds: Sequence[Bond],
  generic: ForceFieldParamsKeyed,
  specific: ForceFieldParamsKeyed | None = None,
  config: ParameterizationConfig | None = None,
) -> ParameterizedSystem:
  """Parameterize a small molecule whose atoms already carry types and charges.

  Args:
      atoms: Atoms of the molecule.
      bonds: Bonds over `atoms`.
      generic: Element-wide parameters (e.g. gaff2).
      specific: Molecule-specific overrides (e.g. from an frcmod file).
      config: Fallback policy.

  Returns:
      ParameterizedSystem over all atoms.

  """
  params = merge_params(generic, specific)
  atoms = list(atoms)
  return _finish(params, atoms, bonds, list(range(len(atoms))), config)
