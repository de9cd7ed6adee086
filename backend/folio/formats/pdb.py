"""
Folio Structure Records (PDB-style)

Writes and reads the fixed-width text records served to the viewer:

    HEADER / TITLE / AUTHOR   display name and provenance
    ATOM                      one line per atom, coordinates in cols 31-54,
                              element symbol in cols 77-78
    CONECT                    one line per bond, 1-based serials
    END

Single residue ("MOL", chain A). No checksum or versioning.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from folio.structure.bonds import infer_generic_bonds
from folio.structure.models import Atom, Bond

logger = logging.getLogger("folio.formats")

RESIDUE_NAME = "MOL"
CHAIN_ID = "A"
_HEADER_WIDTH = 40
_CONECT_FIELDS = ((6, 11), (11, 16), (16, 21), (21, 26), (26, 31))


class RecordFormatError(ValueError):
    """Raised when a structure record cannot be read."""


@dataclass
class ParsedRecord:
    name: str
    atoms: List[Atom]
    bonds: List[Bond]
    declared_bonds: bool


def _atom_name(element: str) -> str:
    # One-letter elements start in column 14, two-letter ones in column 13.
    if len(element) == 1:
        return f" {element:<3}"
    return f"{element.upper():<4}"


def _normalize_element(symbol: str) -> str:
    symbol = symbol.strip()
    if not symbol:
        return ""
    return symbol[0].upper() + symbol[1:].lower()


def format_atom_line(serial: int, atom: Atom) -> str:
    return (
        f"ATOM  {serial:>5} {_atom_name(atom.element)} {RESIDUE_NAME:>3} {CHAIN_ID}{1:>4}    "
        f"{atom.x:8.3f}{atom.y:8.3f}{atom.z:8.3f}{1.0:6.2f}{0.0:6.2f}          "
        f"{atom.element.upper():>2}"
    )


def format_conect_line(bond: Bond) -> str:
    return f"CONECT{bond.atom1 + 1:>5}{bond.atom2 + 1:>5}"


def write_pdb(atoms: Sequence[Atom], bonds: Iterable[Bond], name: str,
              title: str = "AI GENERATED", author: str = "Generated by AI") -> str:
    """Serialize atoms and bonds into a structure record."""
    display = name.strip().upper()
    lines = [
        f"HEADER    {display[:_HEADER_WIDTH]}",
        f"TITLE     {display[:_HEADER_WIDTH]} {title}".rstrip(),
        f"AUTHOR    {author}",
    ]
    for i, atom in enumerate(atoms):
        lines.append(format_atom_line(i + 1, atom))
    for bond in bonds:
        if not (0 <= bond.atom1 < len(atoms) and 0 <= bond.atom2 < len(atoms)):
            raise RecordFormatError(f"Bond {bond.pair()} references a missing atom")
        lines.append(format_conect_line(bond))
    lines.append("END")
    return "\n".join(lines) + "\n"


def _parse_serial(field: str) -> Optional[int]:
    field = field.strip()
    if not field:
        return None
    try:
        value = int(field)
    except ValueError:
        return None
    return value if value > 0 else None


def parse_pdb(text: str) -> ParsedRecord:
    """
    Read a structure record using strict column offsets.
    ATOM and HETATM lines become atoms; CONECT lines become bonds.
    A record without CONECT lines gets element-blind proximity bonds.
    """
    name = ""
    atoms: List[Atom] = []
    serial_to_index = {}
    conect_lines = []

    for line in text.splitlines():
        if line.startswith("HEADER") and not name:
            name = line[10:].strip()
        elif line.startswith(("ATOM  ", "HETATM")):
            try:
                x = float(line[30:38])
                y = float(line[38:46])
                z = float(line[46:54])
            except (ValueError, IndexError):
                logger.debug(f"Skipping malformed atom line: {line!r}")
                continue
            element = _normalize_element(line[76:78]) if len(line) > 76 else ""
            if not element:
                element = _normalize_element(line[12:16].strip()[:1])
            serial = _parse_serial(line[6:11])
            if serial is not None:
                serial_to_index[serial] = len(atoms)
            atoms.append(Atom(element=element, pos=np.array([x, y, z], dtype=float)))
        elif line.startswith("CONECT"):
            conect_lines.append(line)

    if not atoms:
        raise RecordFormatError("Record contains no ATOM or HETATM lines")

    bonds: List[Bond] = []
    for line in conect_lines:
        serials = [_parse_serial(line[a:b]) for a, b in _CONECT_FIELDS]
        origin = serials[0]
        if origin not in serial_to_index:
            continue
        for partner in serials[1:]:
            if partner in serial_to_index:
                bonds.append(Bond(serial_to_index[origin], serial_to_index[partner]))

    declared = bool(bonds)
    if not declared:
        bonds = infer_generic_bonds(atoms)

    return ParsedRecord(name=name, atoms=atoms, bonds=bonds, declared_bonds=declared)
