"""
Heuristic molecule classification.

Maps free text to a MoleculeInfo by, in order:
  1. metallic element names (substring)
  2. named organic / drug / cage patterns (substring, longest first)
  3. a chemical formula
  4. a default three-carbon chain
"""
import logging
import re
from collections import Counter
from typing import Dict, Optional

from folio.structure.models import Archetype, MoleculeInfo
from folio.structure.templates import METALLIC_ELEMENTS, NAMED_PATTERNS, PATTERN_ORDER

logger = logging.getLogger("folio.synth")

DEFAULT_CHAIN_LENGTH = 3

_HILL_TOKEN = re.compile(r"([A-Z][a-z]?)(\d*)")
_HILL_FORMULA = re.compile(r"^(?:[A-Z][a-z]?\d*)+$")
_CHON_FORMULA = re.compile(r"^C(\d*)H(\d*)(?:O(\d*))?(?:N(\d*))?$", re.IGNORECASE)

# Element symbols the tokenizer accepts; anything else means "not a formula".
_KNOWN_ELEMENTS = frozenset({
    "H", "B", "C", "N", "O", "F", "Na", "Mg", "Al", "Si", "P", "S", "Cl",
    "K", "Ca", "Fe", "Cu", "Zn", "Br", "I", "Li", "Se",
})


def parse_formula(text: str) -> Optional[Dict[str, int]]:
    """
    Element tally for a formula string, or None if `text` is not one.

    Strict symbols first ("C8H10N4O2", "C16H18N2O4S"); then a
    case-insensitive C/H/O/N form ("c2h6o"). A symbol without a count
    stands for one atom. Formulas without carbon are rejected.
    """
    clean = text.strip().replace(" ", "")
    if not clean:
        return None

    if _HILL_FORMULA.match(clean):
        tally: Counter = Counter()
        valid = True
        for symbol, count in _HILL_TOKEN.findall(clean):
            if symbol not in _KNOWN_ELEMENTS:
                valid = False
                break
            tally[symbol] += int(count) if count else 1
        if valid and tally.get("C"):
            return dict(tally)

    match = _CHON_FORMULA.match(clean)
    if match:
        # "" means the symbol is present without a count; None means absent.
        c, h, o, n = (1 if g == "" else int(g) if g else 0 for g in match.groups())
        return {"C": c, "H": h, "O": o, "N": n}
    return None


def classify_local(text: str) -> MoleculeInfo:
    """Heuristic table lookup. Always returns a classification."""
    name = text.strip()
    lowered = name.lower()

    for metal, info in METALLIC_ELEMENTS.items():
        if metal in lowered:
            return MoleculeInfo(
                archetype=Archetype.METALLIC_CRYSTAL,
                name=name,
                metal=info,
                description=info.description,
            )

    for pattern in PATTERN_ORDER:
        if pattern in lowered:
            spec = NAMED_PATTERNS[pattern]
            return MoleculeInfo(
                archetype=spec.archetype,
                name=spec.canonical_name or name,
                atoms=dict(spec.atoms or ()),
                functional_groups=spec.functional_groups,
                length=spec.length,
                special_features=spec.special_features,
            )

    tally = parse_formula(name)
    if tally:
        return MoleculeInfo(
            archetype=Archetype.FORMULA,
            name=name,
            atoms=tally,
            formula=name,
        )

    logger.info(f"No pattern for '{name}', defaulting to a {DEFAULT_CHAIN_LENGTH}-carbon chain")
    return MoleculeInfo(archetype=Archetype.CHAIN, name=name, length=DEFAULT_CHAIN_LENGTH)
