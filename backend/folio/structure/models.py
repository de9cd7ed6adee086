import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass
class Atom:
    """A single synthesized or parsed atom. Position in Angstroms."""
    element: str
    pos: np.ndarray

    @classmethod
    def at(cls, element: str, x: float, y: float, z: float) -> "Atom":
        return cls(element=element, pos=np.array([x, y, z], dtype=float))

    @property
    def x(self) -> float:
        return float(self.pos[0])

    @property
    def y(self) -> float:
        return float(self.pos[1])

    @property
    def z(self) -> float:
        return float(self.pos[2])


@dataclass(frozen=True)
class Bond:
    """Directionless bond between two 0-based atom indices."""
    atom1: int
    atom2: int
    order: int = 1

    def pair(self) -> Tuple[int, int]:
        return (self.atom1, self.atom2)


class Archetype(str, Enum):
    METALLIC_CRYSTAL = "metallic_crystal"
    CAGE = "cage_structure"
    POLYCYCLIC = "polycyclic_structure"
    FORMULA = "formula_based"
    CHAIN = "carbon_chain"


class Lattice(str, Enum):
    FCC = "fcc_crystal"
    BCC = "bcc_crystal"
    HCP = "hcp_crystal"


@dataclass(frozen=True)
class MetalInfo:
    element: str
    lattice: Lattice
    description: str


@dataclass
class MoleculeInfo:
    """Classification of one generation request. Discarded after emission."""
    archetype: Archetype
    name: str
    atoms: Dict[str, int] = field(default_factory=dict)
    metal: Optional[MetalInfo] = None
    functional_groups: Tuple[str, ...] = ()
    length: Optional[int] = None
    special_features: Tuple[str, ...] = ()
    formula: Optional[str] = None
    description: Optional[str] = None
    source: str = "heuristic"

    def count(self, element: str) -> int:
        return int(self.atoms.get(element, 0) or 0)


@dataclass
class Structure:
    """Atoms plus inferred or declared bonds."""
    atoms: List[Atom]
    bonds: List[Bond]
    name: str = "Unknown"

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    def elements(self) -> List[str]:
        return [a.element for a in self.atoms]
