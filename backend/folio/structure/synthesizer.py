"""
Folio Structure Synthesizer
---------------------------
Free text in, structure record out.

  1. classify  (hosted model if configured, else / on failure the local table)
  2. place atoms for the chosen archetype
  3. infer bonds (lattice neighbours for crystals, distance thresholds otherwise)
  4. emit the PDB-style record

It has no knowledge of HTTP. A request that yields no atoms returns None.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from folio.formats.pdb import write_pdb
from folio.structure.bonds import infer_bonds, lattice_bonds
from folio.structure.classifier import classify_local
from folio.structure.coordinates import generate_atoms
from folio.structure.models import Archetype, MoleculeInfo, Structure
from folio.structure.templates import LATTICE_CONSTANTS, NEIGHBOUR_FACTORS

logger = logging.getLogger("folio.synth")

# Upper bound on requested atoms; bond inference is quadratic in this.
MAX_ATOM_COUNT = 500


class StructureTooLarge(ValueError):
    """The classified tally asks for more atoms than MAX_ATOM_COUNT."""

    def __init__(self, requested: int):
        super().__init__(
            f"Structure requests {requested} atoms, exceeding the {MAX_ATOM_COUNT}-atom cap"
        )
        self.requested = requested


class Classifier(Protocol):
    def classify(self, query: str) -> Optional[MoleculeInfo]: ...


@dataclass
class GeneratedStructure:
    """Result handed back to the API layer."""
    pdb: str
    atom_count: int
    structure: Structure
    info: MoleculeInfo

    @property
    def classified_by(self) -> str:
        return self.info.source


def classify(query: str, classifier: Optional[Classifier] = None) -> MoleculeInfo:
    """Hosted classifier first; the local table whenever it yields nothing."""
    info = classifier.classify(query) if classifier is not None else None
    if info is None:
        info = classify_local(query)
    return info


def requested_atoms(info: MoleculeInfo) -> int:
    """Atoms the classification asks for; a chain carbon carries two hydrogens."""
    if info.archetype is Archetype.CHAIN:
        return 3 * (info.length or 0)
    return sum(info.atoms.values())


def build_structure(info: MoleculeInfo, rng: np.random.Generator) -> Structure:
    requested = requested_atoms(info)
    if requested > MAX_ATOM_COUNT:
        raise StructureTooLarge(requested)
    atoms = generate_atoms(info, rng)
    if info.archetype is Archetype.METALLIC_CRYSTAL and info.metal is not None:
        lattice = info.metal.lattice
        bonds = lattice_bonds(atoms, LATTICE_CONSTANTS[lattice] * NEIGHBOUR_FACTORS[lattice])
    else:
        bonds = infer_bonds(atoms)
    return Structure(atoms=atoms, bonds=bonds, name=info.name)


def synthesize(query: str, classifier: Optional[Classifier] = None,
               rng: Optional[np.random.Generator] = None) -> Optional[GeneratedStructure]:
    """
    Generate a structure for a molecule name or formula.

    Returns None when the query is blank or no atoms could be placed;
    raises StructureTooLarge when the classification exceeds MAX_ATOM_COUNT.
    """
    query = (query or "").strip()
    if not query:
        return None
    rng = rng if rng is not None else np.random.default_rng()

    info = classify(query, classifier)
    structure = build_structure(info, rng)
    if not structure.atoms:
        logger.warning(f"No atoms generated for '{query}' ({info.archetype.value})")
        return None

    pdb = write_pdb(structure.atoms, structure.bonds, query)
    logger.info(
        f"Generated '{query}': {structure.atom_count} atoms, {len(structure.bonds)} bonds, "
        f"archetype={info.archetype.value}, classified_by={info.source}"
    )
    return GeneratedStructure(pdb=pdb, atom_count=structure.atom_count, structure=structure, info=info)
