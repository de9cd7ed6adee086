"""
Folio Coordinate Synthesis

Turns a MoleculeInfo into a list of atoms with 3D positions, one
builder per archetype. Geometry is deterministic apart from bounded
jitter on side chains and bridges, drawn from the caller's numpy
Generator. No valence or charge checks: output is for display.

Hydrogen visibility caps:
  formula-based  H <= 3 x heavy atoms
  polycyclic     H <= 2 x atoms placed before hydrogens
  cage           floor(H / carbons) per carbon, H total
"""
import logging
import math
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from folio.structure.models import Archetype, Atom, Lattice, MoleculeInfo
from folio.structure.templates import (
    ADAMANTANE_SITES, BCC_SITES, CARBON_BOND_LENGTHS, DEFAULT_BOND_LENGTH,
    FCC_SITES, HCP_C_OVER_A, HCP_SITES, HETEROATOM_ORDER, LATTICE_CONSTANTS,
    SMALL_CARBON_FRAMES, TETRAHEDRAL_ANGLE,
)

logger = logging.getLogger("folio.synth")

FALLBACK_CHAIN_LENGTH = 4
CAGE_MIN_CARBONS = 8


def _jitter(rng: np.random.Generator, span: float) -> float:
    """Uniform offset in [-span/2, span/2)."""
    return float(rng.uniform(-span / 2, span / 2))


def heteroatom_sequence(counts: Dict[str, int]) -> List[str]:
    """Every non-C, non-H atom in the tally, known heteroatoms first."""
    ordered = [e for e in HETEROATOM_ORDER if counts.get(e)]
    ordered += sorted(e for e in counts if e not in ("C", "H") and e not in HETEROATOM_ORDER)
    seq = []
    for element in ordered:
        seq.extend([element] * int(counts.get(element) or 0))
    return seq


# ── Metallic crystals ──────────────────────────────────────────────────────

def crystal_atoms(info: MoleculeInfo, rng: Optional[np.random.Generator] = None) -> List[Atom]:
    element = info.metal.element
    lattice = info.metal.lattice
    a = LATTICE_CONSTANTS[lattice]

    if lattice is Lattice.HCP:
        c = a * HCP_C_OVER_A
        return [Atom.at(element, x * a, y * a, z * c) for x, y, z in HCP_SITES]

    sites = FCC_SITES if lattice is Lattice.FCC else BCC_SITES
    return [Atom.at(element, x * a, y * a, z * a) for x, y, z in sites]


# ── Cage compounds ─────────────────────────────────────────────────────────

def _is_paddlane_like(info: MoleculeInfo) -> bool:
    return "cage_structure" in info.special_features or "paddlan" in info.name.lower()


def cage_atoms(info: MoleculeInfo, rng: np.random.Generator) -> List[Atom]:
    n_c = info.count("C")
    n_h = info.count("H")

    if n_c < CAGE_MIN_CARBONS:
        logger.info(f"Cage '{info.name}' has {n_c} carbons; using formula-based layout")
        return formula_atoms(info, rng)

    if _is_paddlane_like(info):
        # Two parallel 4-rings, the top one rotated 45 degrees, joined by bridges.
        sites = []
        for i in range(4):
            angle = i / 4 * 2 * math.pi
            sites.append((2.0 * math.cos(angle), 2.0 * math.sin(angle), 0.0))
        for i in range(4):
            angle = i / 4 * 2 * math.pi + math.pi / 4
            sites.append((2.0 * math.cos(angle), 2.0 * math.sin(angle), 3.0))
        for i in range(n_c - 8):
            p1 = sites[i % 4]
            p2 = sites[(i + 1) % 4 + 4]
            sites.append((
                (p1[0] + p2[0]) / 2 + _jitter(rng, 0.5),
                (p1[1] + p2[1]) / 2 + _jitter(rng, 0.5),
                (p1[2] + p2[2]) / 2,
            ))
    else:
        sites = list(ADAMANTANE_SITES)

    atoms = [Atom.at("C", x, y, z) for x, y, z in sites[:n_c]]
    carbons = list(atoms)

    per_carbon = n_h // len(carbons)
    placed = 0
    for carbon in carbons:
        for j in range(per_carbon):
            if placed >= n_h:
                break
            angle = j / per_carbon * 2 * math.pi
            atoms.append(Atom.at(
                "H",
                carbon.x + 1.1 * math.cos(angle),
                carbon.y + 1.1 * math.sin(angle),
                carbon.z + 1.1 * 0.5,
            ))
            placed += 1
    return atoms


# ── Polycyclic ring systems ────────────────────────────────────────────────

def polycyclic_atoms(info: MoleculeInfo, rng: np.random.Generator) -> List[Atom]:
    n_c = info.count("C")
    n_h = info.count("H")

    atoms: List[Atom] = []
    rings = min(4, n_c // 5)
    for ring in range(rings):
        ring_size = 6 if ring == 0 else 5
        for i in range(ring_size):
            if len(atoms) >= n_c:
                break
            angle = i / ring_size * 2 * math.pi
            atoms.append(Atom.at(
                "C",
                ring * 2.5 + 1.4 * math.cos(angle),
                (ring % 2) * 1.5 + 1.4 * math.sin(angle),
                (ring // 2) * 1.0,
            ))

    # Remaining carbons hang off random ring atoms.
    while len(atoms) < n_c:
        base = atoms[int(rng.integers(len(atoms)))].pos if atoms else np.zeros(3)
        atoms.append(Atom.at(
            "C",
            base[0] + _jitter(rng, 2.0),
            base[1] + _jitter(rng, 2.0),
            base[2] + _jitter(rng, 1.0),
        ))

    carbons = list(atoms)
    for k, element in enumerate(heteroatom_sequence(info.atoms)):
        if carbons:
            anchor = carbons[k % len(carbons)].pos
            phi = k * math.pi / 3
            atoms.append(Atom.at(
                element,
                anchor[0] + 1.2 * math.cos(phi),
                anchor[1] + 1.2 * math.sin(phi) + _jitter(rng, 0.2),
                anchor[2],
            ))
        else:
            angle = k * math.pi / 3
            atoms.append(Atom.at(element, 2.0 * math.cos(angle), 2.0 * math.sin(angle), 0.0))

    heavy = list(atoms)
    visible = min(n_h, len(heavy) * 2)
    for i in range(visible):
        anchor = heavy[i % len(heavy)].pos
        atoms.append(Atom.at(
            "H",
            anchor[0] + math.cos(i),
            anchor[1] + math.sin(i),
            anchor[2] + 0.5,
        ))
    return atoms


# ── Formula-based molecules ────────────────────────────────────────────────

def _carbon_backbone(n_c: int, rng: np.random.Generator) -> List[Atom]:
    if n_c <= 0:
        return []

    if n_c in SMALL_CARBON_FRAMES:
        return [Atom.at("C", x, y, z) for x, y, z in SMALL_CARBON_FRAMES[n_c]]

    carbons: List[Atom] = []
    if n_c <= 8:
        # Main chain with a branch off an inner carbon.
        branch_from = n_c // 4
        for i in range(n_c):
            if i < n_c / 2:
                carbons.append(Atom.at("C", i * 1.5, 0.0, 0.0))
            else:
                base = carbons[branch_from]
                carbons.append(Atom.at(
                    "C",
                    base.x,
                    base.y + (i - n_c / 2 + 1) * 1.4,
                    (i % 2) * 0.8,
                ))
        return carbons

    for ring in range(n_c // 6):
        for i in range(6):
            angle = i / 6 * 2 * math.pi
            carbons.append(Atom.at(
                "C",
                ring * 3.0 + 1.4 * math.cos(angle),
                1.4 * math.sin(angle),
                ring * 0.5,
            ))
    while len(carbons) < n_c:
        base = carbons[int(rng.integers(len(carbons)))]
        carbons.append(Atom.at(
            "C",
            base.x + _jitter(rng, 2.0),
            base.y + _jitter(rng, 2.0),
            base.z + _jitter(rng, 2.0),
        ))
    return carbons


def formula_atoms(info: MoleculeInfo, rng: np.random.Generator) -> List[Atom]:
    carbons = _carbon_backbone(info.count("C"), rng)
    atoms = list(carbons)

    hetero = heteroatom_sequence(info.atoms)
    for i, element in enumerate(hetero):
        phi = i / len(hetero) * 2 * math.pi
        if carbons:
            carbon = carbons[i % len(carbons)]
            length = CARBON_BOND_LENGTHS.get(element, DEFAULT_BOND_LENGTH)
            atoms.append(Atom.at(
                element,
                carbon.x + length * math.sin(TETRAHEDRAL_ANGLE) * math.cos(phi),
                carbon.y + length * math.sin(TETRAHEDRAL_ANGLE) * math.sin(phi),
                carbon.z + length * math.cos(TETRAHEDRAL_ANGLE),
            ))
        else:
            atoms.append(Atom.at(element, 2.0 * math.cos(phi), 2.0 * math.sin(phi), 0.0))

    heavy = list(atoms)
    n_h = min(info.count("H"), len(heavy) * 3)
    for i in range(n_h):
        anchor = heavy[i % len(heavy)]
        angle = i / n_h * 2 * math.pi + float(rng.uniform(0, 0.5))
        atoms.append(Atom.at(
            "H",
            anchor.x + math.cos(angle),
            anchor.y + math.sin(angle),
            anchor.z + _jitter(rng, 0.5),
        ))
    return atoms


# ── Default chain ──────────────────────────────────────────────────────────

def chain_atoms(info: MoleculeInfo, rng: Optional[np.random.Generator] = None) -> List[Atom]:
    length = info.length or FALLBACK_CHAIN_LENGTH
    atoms = [Atom.at("C", i * 1.5, 0.0, 0.0) for i in range(length)]
    first, last = atoms[0], atoms[-1]
    groups = info.functional_groups

    if "methyl" in groups and length >= 2:
        middle = atoms[length // 2]
        atoms.append(Atom.at("C", middle.x, -1.5, 0.0))

    if "carboxyl" in groups:
        atoms.append(Atom.at("O", last.x, 1.25, 0.0))
        atoms.append(Atom.at("O", last.x + 1.2, -0.6, 0.0))
        atoms.append(Atom.at("H", last.x + 2.0, -0.6, 0.0))
    elif "hydroxyl" in groups:
        atoms.append(Atom.at("O", last.x, 1.2, 0.0))
        atoms.append(Atom.at("H", last.x, 2.0, 0.0))

    if "amino" in groups:
        atoms.append(Atom.at("N", first.x - 1.4, 0.0, 0.0))
        atoms.append(Atom.at("H", first.x - 1.9, 0.8, 0.0))
        atoms.append(Atom.at("H", first.x - 1.9, -0.8, 0.0))

    for carbon in [a for a in atoms if a.element == "C"]:
        atoms.append(Atom.at("H", carbon.x + 0.8, carbon.y + 0.8, 0.5))
        atoms.append(Atom.at("H", carbon.x - 0.8, carbon.y + 0.8, 0.5))
    return atoms


_BUILDERS: Dict[Archetype, Callable[[MoleculeInfo, np.random.Generator], List[Atom]]] = {
    Archetype.METALLIC_CRYSTAL: crystal_atoms,
    Archetype.CAGE: cage_atoms,
    Archetype.POLYCYCLIC: polycyclic_atoms,
    Archetype.FORMULA: formula_atoms,
    Archetype.CHAIN: chain_atoms,
}


def generate_atoms(info: MoleculeInfo, rng: np.random.Generator) -> List[Atom]:
    """Dispatch to the builder for the classified archetype."""
    if info.archetype is Archetype.METALLIC_CRYSTAL and info.metal is None:
        return []
    return _BUILDERS[info.archetype](info, rng)


def element_counts(atoms: Sequence[Atom]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for atom in atoms:
        counts[atom.element] = counts.get(atom.element, 0) + 1
    return counts
