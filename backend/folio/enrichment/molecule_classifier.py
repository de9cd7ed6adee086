"""
Hosted-model molecule classification.

Asks the model for a JSON description of the input (formula, element
tally, structure type) and converts it to a MoleculeInfo. Any failure,
network or parsing, yields None so the caller can use the local table.
"""
import json
import logging
import re
from typing import Optional

from folio import config
from folio.enrichment.gemini import GeminiClient, get_gemini_client
from folio.structure.classifier import parse_formula
from folio.structure.models import Archetype, MoleculeInfo
from folio.structure.templates import METALLIC_ELEMENTS

logger = logging.getLogger("folio.gemini")

CLASSIFIER_PROMPT = """You are a chemistry expert. For any molecule, drug, or compound, provide the chemical formula and structural info. Return ONLY a JSON object with this exact format:
{
  "formula": "C8H10N4O2",
  "atoms": {"C": 8, "H": 10, "N": 4, "O": 2},
  "name": "caffeine",
  "type": "organic_compound|inorganic_salt|metallic_element|ion_compound",
  "structure_type": "linear|branched|cyclic|cage|aromatic|polycyclic",
  "special_features": ["benzene_rings", "cage_structure", "bridged_rings", "fused_rings"],
  "description": "brief description"
}

Special structure types:
- cage: for paddlanes, adamantane, cubane, dodecahedrane
- polycyclic: for steroids, complex ring systems
- bridged_rings: for bicyclic and tricyclic compounds

If it's a metallic element, use type "metallic_element".
If unknown/fictional, create a reasonable organic structure."""

GENERATION_CONFIG = {
    "max_output_tokens": 300,
    "temperature": 0.2,
    "response_mime_type": "application/json",
}

_FENCE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


class ClassificationError(ValueError):
    """The model's reply could not be turned into a classification."""


def _clean_atoms(raw) -> dict:
    if not isinstance(raw, dict):
        return {}
    atoms = {}
    for element, count in raw.items():
        try:
            n = int(count)
        except (TypeError, ValueError):
            continue
        if isinstance(element, str) and element and n > 0:
            atoms[element.strip()] = n
    return atoms


def _metal_for(payload: dict, fallback_name: str):
    """Look up a lattice template by name or element symbol."""
    candidates = [str(payload.get("name") or ""), fallback_name, str(payload.get("formula") or "")]
    for text in candidates:
        lowered = text.strip().lower()
        if not lowered:
            continue
        for metal, info in METALLIC_ELEMENTS.items():
            if metal in lowered or info.element.lower() == lowered:
                return info
    return None


def interpret_reply(text: str, query: str) -> MoleculeInfo:
    """Convert the model's JSON reply into a MoleculeInfo."""
    if not text:
        raise ClassificationError("Empty reply")
    try:
        payload = json.loads(_FENCE.sub("", text))
    except json.JSONDecodeError as e:
        raise ClassificationError(f"Invalid JSON from model: {e}") from e
    if not isinstance(payload, dict):
        raise ClassificationError("Model reply is not a JSON object")

    name = str(payload.get("name") or query).strip() or query
    features = tuple(str(f) for f in payload.get("special_features") or () if f)
    description = payload.get("description")
    formula = payload.get("formula")

    if payload.get("type") == "metallic_element":
        metal = _metal_for(payload, query)
        if metal is not None:
            return MoleculeInfo(
                archetype=Archetype.METALLIC_CRYSTAL, name=name, metal=metal,
                description=description or metal.description, formula=formula, source="ai",
            )

    atoms = _clean_atoms(payload.get("atoms"))
    if not atoms and isinstance(formula, str):
        atoms = parse_formula(formula) or {}
    if not atoms:
        raise ClassificationError("Model reply carries no element tally")

    structure_type = payload.get("structure_type")
    if structure_type == "cage":
        archetype = Archetype.CAGE
    elif structure_type == "polycyclic":
        archetype = Archetype.POLYCYCLIC
    else:
        archetype = Archetype.FORMULA

    return MoleculeInfo(
        archetype=archetype,
        name=name,
        atoms=atoms,
        special_features=features,
        formula=formula if isinstance(formula, str) else None,
        description=description,
        source="ai",
    )


class MoleculeClassifier:
    def __init__(self, client: Optional[GeminiClient] = None, model_name: Optional[str] = None):
        self.client = client or get_gemini_client()
        self.model_name = model_name or config.classifier_model()

    @property
    def available(self) -> bool:
        return self.client.available

    def classify(self, query: str) -> Optional[MoleculeInfo]:
        """Model-backed classification, or None on any failure."""
        if not self.available:
            return None
        try:
            res = self.client.generate(
                self.model_name,
                f'What is the chemical formula and composition for: "{query}"?',
                system_instruction=CLASSIFIER_PROMPT,
                generation_config=GENERATION_CONFIG,
            )
            info = interpret_reply(res.text, query)
        except Exception as e:
            logger.warning(f"✘ {self.model_name} classification failed for '{query}': {e}")
            return None
        logger.info(f"✔ {self.model_name} classified '{query}' as {info.archetype.value}")
        return info


_classifier = None


def get_classifier() -> MoleculeClassifier:
    global _classifier
    if _classifier is None:
        _classifier = MoleculeClassifier()
    return _classifier
