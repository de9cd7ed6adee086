"""
Folio Structure Templates
-------------------------
Static lookup tables for the heuristic synthesizer:

  - metallic elements and their lattice types
  - named organic / pharmacological / cage patterns
  - unit-cell and cage coordinate templates (unscaled)
  - covalent bond lengths used when placing heteroatoms

Nothing here is computed per request.
"""
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from folio.structure.models import Archetype, Lattice, MetalInfo


_FCC = "Face-centered cubic crystal"
_BCC = "Body-centered cubic crystal"
_HCP = "Hexagonal close-packed crystal"

METALLIC_ELEMENTS: Mapping[str, MetalInfo] = MappingProxyType({
    "silver":    MetalInfo("Ag", Lattice.FCC, _FCC),
    "gold":      MetalInfo("Au", Lattice.FCC, _FCC),
    "copper":    MetalInfo("Cu", Lattice.FCC, _FCC),
    "iron":      MetalInfo("Fe", Lattice.BCC, _BCC),
    "aluminum":  MetalInfo("Al", Lattice.FCC, _FCC),
    "aluminium": MetalInfo("Al", Lattice.FCC, _FCC),
    "platinum":  MetalInfo("Pt", Lattice.FCC, _FCC),
    "palladium": MetalInfo("Pd", Lattice.FCC, _FCC),
    "titanium":  MetalInfo("Ti", Lattice.HCP, _HCP),
    "zinc":      MetalInfo("Zn", Lattice.HCP, _HCP),
    "nickel":    MetalInfo("Ni", Lattice.FCC, _FCC),
})


@dataclass(frozen=True)
class NamedPattern:
    archetype: Archetype
    functional_groups: Tuple[str, ...] = ()
    length: Optional[int] = None
    atoms: Optional[Tuple[Tuple[str, int], ...]] = None
    special_features: Tuple[str, ...] = ()
    canonical_name: Optional[str] = None


_CAGE = ("cage_structure",)

NAMED_PATTERNS: Mapping[str, NamedPattern] = MappingProxyType({
    # Hydrocarbons
    "alkane":  NamedPattern(Archetype.CHAIN),
    "alkene":  NamedPattern(Archetype.CHAIN),
    "isobutane":     NamedPattern(Archetype.CHAIN, ("methyl",), length=3),
    "methylpropane": NamedPattern(Archetype.CHAIN, ("methyl",), length=3),
    "benzene": NamedPattern(Archetype.FORMULA, atoms=(("C", 6), ("H", 6))),
    "toluene": NamedPattern(Archetype.FORMULA, atoms=(("C", 7), ("H", 8))),
    # Alcohols
    "alcohol":  NamedPattern(Archetype.CHAIN, ("hydroxyl",)),
    "ethanol":  NamedPattern(Archetype.CHAIN, ("hydroxyl",), length=2),
    "methanol": NamedPattern(Archetype.CHAIN, ("hydroxyl",), length=1),
    # Acids
    "acid":   NamedPattern(Archetype.CHAIN, ("carboxyl",)),
    "acetic": NamedPattern(Archetype.CHAIN, ("carboxyl",), length=2),
    # Amino compounds
    "amine": NamedPattern(Archetype.CHAIN, ("amino",)),
    "amino": NamedPattern(Archetype.CHAIN, ("amino",)),
    # Common pharmaceuticals (approximate compositions)
    "caffeine":   NamedPattern(Archetype.FORMULA, atoms=(("C", 8), ("H", 10), ("N", 4), ("O", 2))),
    "aspirin":    NamedPattern(Archetype.FORMULA, atoms=(("C", 9), ("H", 8), ("O", 4))),
    "dopamine":   NamedPattern(Archetype.FORMULA, atoms=(("C", 8), ("H", 11), ("N", 1), ("O", 2))),
    "penicillin": NamedPattern(Archetype.FORMULA, ("amino", "carboxyl"),
                               atoms=(("C", 16), ("H", 18), ("N", 2), ("O", 4), ("S", 1))),
    "insulin":    NamedPattern(Archetype.CHAIN, ("amino", "carboxyl"), length=6),
    "morphine":   NamedPattern(Archetype.POLYCYCLIC, ("hydroxyl", "amino"),
                               atoms=(("C", 17), ("H", 19), ("N", 1), ("O", 3))),
    "cholesterol": NamedPattern(Archetype.POLYCYCLIC, ("hydroxyl",),
                                atoms=(("C", 27), ("H", 46), ("O", 1))),
    # Cage structures
    "paddlane":      NamedPattern(Archetype.CAGE, atoms=(("C", 16), ("H", 24)),
                                  special_features=_CAGE, canonical_name="paddlane"),
    "adamantane":    NamedPattern(Archetype.CAGE, atoms=(("C", 10), ("H", 16)),
                                  special_features=_CAGE, canonical_name="adamantane"),
    "cubane":        NamedPattern(Archetype.CAGE, atoms=(("C", 8), ("H", 8)),
                                  special_features=_CAGE, canonical_name="cubane"),
    "dodecahedrane": NamedPattern(Archetype.CAGE, atoms=(("C", 20), ("H", 20)),
                                  special_features=_CAGE, canonical_name="dodecahedrane"),
})

# Longest first, so "methanol" is not captured by "ethanol".
PATTERN_ORDER: Tuple[str, ...] = tuple(sorted(NAMED_PATTERNS, key=len, reverse=True))


# Unit-cell templates in lattice-constant units.
FCC_SITES: Tuple[Tuple[float, float, float], ...] = (
    # corners
    (0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1),
    (1, 1, 0), (1, 0, 1), (0, 1, 1), (1, 1, 1),
    # face centres
    (0.5, 0.5, 0), (0.5, 0, 0.5), (0, 0.5, 0.5),
    (0.5, 0.5, 1), (0.5, 1, 0.5), (1, 0.5, 0.5),
)

BCC_SITES: Tuple[Tuple[float, float, float], ...] = (
    (0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1),
    (1, 1, 0), (1, 0, 1), (0, 1, 1), (1, 1, 1),
    (0.5, 0.5, 0.5),
)

HCP_C_OVER_A = 1.633
_R3 = math.sqrt(3)

# x, y in units of a; z in units of c.
HCP_SITES: Tuple[Tuple[float, float, float], ...] = (
    # basal hexagon
    (0, 0, 0), (1, 0, 0), (0.5, _R3 / 2, 0),
    (-0.5, _R3 / 2, 0), (-1, 0, 0), (-0.5, -_R3 / 2, 0),
    (0.5, -_R3 / 2, 0),
    # second layer
    (0.5, _R3 / 6, 0.5), (-0.5, _R3 / 6, 0.5), (0, -_R3 / 3, 0.5),
)

LATTICE_CONSTANTS: Mapping[Lattice, float] = MappingProxyType({
    Lattice.FCC: 4.0,
    Lattice.BCC: 4.0,
    Lattice.HCP: 3.0,
})

# Nearest-neighbour distance as a multiple of the lattice constant.
NEIGHBOUR_FACTORS: Mapping[Lattice, float] = MappingProxyType({
    Lattice.FCC: 1 / math.sqrt(2),
    Lattice.BCC: _R3 / 2,
    Lattice.HCP: 1.0,
})

ADAMANTANE_SITES: Tuple[Tuple[float, float, float], ...] = (
    (0, 0, 0), (1.5, 1.5, 0), (1.5, -1.5, 0), (-1.5, 1.5, 0),
    (0, 0, 2.45), (1.5, 1.5, 2.45), (1.5, -1.5, 2.45), (-1.5, 1.5, 2.45),
    (0, 1.5, 1.225), (-1.5, 0, 1.225),
)

SMALL_CARBON_FRAMES: Mapping[int, Tuple[Tuple[float, float, float], ...]] = MappingProxyType({
    1: ((0, 0, 0),),
    2: ((-0.77, 0, 0), (0.77, 0, 0)),
    3: tuple(
        (1.2 * math.cos(2 * math.pi * i / 3), 1.2 * math.sin(2 * math.pi * i / 3), 0)
        for i in range(3)
    ),
    4: ((0, 0, 0), (1.633, 0, -1.155), (-0.816, 1.414, -1.155), (-0.816, -1.414, -1.155)),
})

CARBON_BOND_LENGTHS: Mapping[str, float] = MappingProxyType({
    "O": 1.43, "N": 1.47, "S": 1.82, "P": 1.85,
    "F": 1.35, "Cl": 1.78, "Br": 1.94, "I": 2.14,
})
DEFAULT_BOND_LENGTH = 1.4
TETRAHEDRAL_ANGLE = math.radians(109.5)

HETEROATOM_ORDER: Tuple[str, ...] = ("O", "N", "S", "P", "F", "Cl", "Br", "I")
