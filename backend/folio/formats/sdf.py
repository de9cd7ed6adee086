"""
MDL molfile (V2000) reader for PubChem SDF downloads.

Only the first record's counts, atom and bond blocks are read;
properties and data items are ignored.
"""
import logging
from typing import List, Optional

import numpy as np

from folio.formats.pdb import RecordFormatError
from folio.structure.models import Atom, Bond, Structure

logger = logging.getLogger("folio.formats")

FLAT_Z_EPSILON = 0.001
FLAT_Z_SPAN = 0.3


def _int_field(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _read_counts(line: str):
    atoms = _int_field(line[0:3])
    bonds = _int_field(line[3:6])
    if atoms is None or bonds is None:
        parts = line.split()
        if len(parts) < 2:
            return None, None
        atoms, bonds = _int_field(parts[0]), _int_field(parts[1])
    return atoms, bonds


def parse_sdf(text: str, name: str = "Unknown", flat: bool = False,
              rng: Optional[np.random.Generator] = None) -> Structure:
    """
    Parse atoms and bonds from an SDF record.

    With `flat=True` (a 2D depiction) atoms lying in the z=0 plane get a
    small random z offset so the viewer has some depth to rotate.
    """
    lines = text.splitlines()
    if len(lines) < 4:
        raise RecordFormatError("SDF record is shorter than its header block")

    atom_count, bond_count = _read_counts(lines[3])
    if not atom_count:
        raise RecordFormatError(f"Could not read SDF counts line: {lines[3]!r}")

    if flat and rng is None:
        rng = np.random.default_rng()

    atoms: List[Atom] = []
    for line in lines[4:4 + atom_count]:
        if len(line) < 31:
            continue
        try:
            x = float(line[0:10])
            y = float(line[10:20])
            z = float(line[20:30])
        except ValueError:
            continue
        element = line[31:34].strip()
        if not element:
            continue
        if flat and abs(z) < FLAT_Z_EPSILON:
            z = float(rng.uniform(-FLAT_Z_SPAN / 2, FLAT_Z_SPAN / 2))
        atoms.append(Atom.at(element, x, y, z))

    if not atoms:
        raise RecordFormatError("No valid atoms in SDF record")

    bonds: List[Bond] = []
    start = 4 + atom_count
    for line in lines[start:start + (bond_count or 0)]:
        if len(line) < 6:
            continue
        a1 = _int_field(line[0:3])
        a2 = _int_field(line[3:6])
        if a1 is None or a2 is None:
            continue
        a1, a2 = a1 - 1, a2 - 1
        if 0 <= a1 < len(atoms) and 0 <= a2 < len(atoms):
            order = _int_field(line[6:9]) or 1
            bonds.append(Bond(a1, a2, order))

    logger.info(f"Parsed {len(atoms)} atoms and {len(bonds)} bonds from SDF for {name}")
    return Structure(atoms=atoms, bonds=bonds, name=name)
