"""
Folio Bond Inference

Distance-threshold bonding between atom pairs. All pairs are tested
at once on an n x n distance matrix; callers bound n (MAX_ATOM_COUNT).
No valence or bond-order logic: an atom may take any number of bonds.
"""
import numpy as np
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Sequence

from folio.structure.models import Atom, Bond

# Upper distance bound (Angstroms) per unordered element pair.
BOND_THRESHOLDS: Mapping[FrozenSet[str], float] = MappingProxyType({
    frozenset({"C"}): 2.0,
    frozenset({"C", "O"}): 1.8,
    frozenset({"C", "H"}): 1.5,
    frozenset({"O", "H"}): 1.2,
    frozenset({"C", "N"}): 1.8,
    frozenset({"N", "H"}): 1.2,
    frozenset({"C", "S"}): 2.1,
    frozenset({"C", "P"}): 2.1,
})

# Used when a parsed record carries no CONECT lines.
GENERIC_MAX_BOND = 1.9


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two 3D points."""
    return float(np.linalg.norm(a - b))


def bond_threshold(element_a: str, element_b: str):
    """Threshold for the pair, or None if the pair never bonds."""
    return BOND_THRESHOLDS.get(frozenset({element_a, element_b}))


def _pair_distances(atoms: Sequence[Atom]) -> np.ndarray:
    """Full n x n distance matrix."""
    if not atoms:
        return np.zeros((0, 0))
    pos = np.array([atom.pos for atom in atoms], dtype=float)
    return np.linalg.norm(pos[:, None, :] - pos[None, :, :], axis=-1)


def _upper_pairs(mask: np.ndarray) -> List[Bond]:
    rows, cols = np.nonzero(np.triu(mask, k=1))
    return [Bond(int(i), int(j)) for i, j in zip(rows, cols)]


def infer_bonds(atoms: Sequence[Atom]) -> List[Bond]:
    """Bond every pair closer than its element-pair threshold."""
    elements = np.array([atom.element for atom in atoms])
    limits = np.zeros((len(atoms), len(atoms)))
    present = sorted(set(elements.tolist()))
    for a in present:
        for b in present:
            limit = bond_threshold(a, b)
            if limit is not None:
                limits[np.ix_(elements == a, elements == b)] = limit
    return _upper_pairs(_pair_distances(atoms) < limits)


def infer_generic_bonds(atoms: Sequence[Atom], max_length: float = GENERIC_MAX_BOND) -> List[Bond]:
    """Element-blind bonding: any pair closer than `max_length`."""
    return _upper_pairs(_pair_distances(atoms) < max_length)


def lattice_bonds(atoms: Sequence[Atom], neighbour_distance: float,
                  tolerance: float = 0.1) -> List[Bond]:
    """Connect lattice sites sitting at the nearest-neighbour distance."""
    return _upper_pairs(np.abs(_pair_distances(atoms) - neighbour_distance) < tolerance)
