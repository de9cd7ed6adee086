"""
Structure synthesis: archetype geometry, element tallies, and bond sanity.
"""
import numpy as np
import pytest

from folio.enrichment.molecule_classifier import MoleculeClassifier
from folio.structure.bonds import distance
from folio.structure.coordinates import element_counts, generate_atoms
from folio.structure.models import Archetype, MoleculeInfo
from folio.structure.synthesizer import (
    MAX_ATOM_COUNT, StructureTooLarge, build_structure, classify, requested_atoms, synthesize,
)


def _bond_elements(result):
    atoms = result.structure.atoms
    return [frozenset({atoms[b.atom1].element, atoms[b.atom2].element}) for b in result.structure.bonds]


class StaticClassifier:
    def __init__(self, info):
        self.info = info
        self.queries = []

    def classify(self, query):
        self.queries.append(query)
        return self.info


class TestFormulaBranch:
    def test_ethanol_formula_scenario(self, rng):
        result = synthesize("C2H6O", rng=rng)
        counts = element_counts(result.structure.atoms)

        assert result.info.archetype is Archetype.FORMULA
        assert counts["C"] == 2
        assert counts["O"] == 1
        assert counts["H"] <= 3 * 3
        pairs = _bond_elements(result)
        assert frozenset({"C"}) in pairs
        assert frozenset({"C", "O"}) in pairs

    @pytest.mark.parametrize("formula,c,h,o,n", [
        ("CH4", 1, 4, 0, 0),
        ("C3H8", 3, 8, 0, 0),
        ("C4H10O", 4, 10, 1, 0),
        ("C6H12O6", 6, 12, 6, 0),
        ("C7H8", 7, 8, 0, 0),
        ("C8H10N4O2", 8, 10, 2, 4),
        ("C12H22O11", 12, 22, 11, 0),
        ("C20H25N3O", 20, 25, 1, 3),
        ("C2H2", 2, 2, 0, 0),
    ])
    def test_requested_counts(self, rng, formula, c, h, o, n):
        atoms = synthesize(formula, rng=rng).structure.atoms
        counts = element_counts(atoms)
        heavy = c + o + n

        assert counts.get("C", 0) == c
        assert counts.get("O", 0) == o
        assert counts.get("N", 0) == n
        assert counts.get("H", 0) == min(h, heavy * 3)

    def test_hydrogen_cap(self, rng):
        info = MoleculeInfo(archetype=Archetype.FORMULA, name="CH40", atoms={"C": 1, "H": 40})
        counts = element_counts(generate_atoms(info, rng))
        assert counts["H"] == 3

    def test_heteroatom_at_bond_length(self, rng):
        info = MoleculeInfo(archetype=Archetype.FORMULA, name="x", atoms={"C": 1, "S": 1})
        atoms = generate_atoms(info, rng)
        assert abs(distance(atoms[0].pos, atoms[1].pos) - 1.82) < 1e-6

    def test_no_carbon_heteroatoms_on_circle(self, rng):
        info = MoleculeInfo(archetype=Archetype.FORMULA, name="x", atoms={"O": 2, "H": 2})
        atoms = generate_atoms(info, rng)
        assert [a.element for a in atoms].count("O") == 2
        for atom in atoms[:2]:
            assert abs(np.linalg.norm(atom.pos) - 2.0) < 1e-6


class TestCrystals:
    @pytest.mark.parametrize("name,element,count", [
        ("gold", "Au", 14),
        ("copper wire", "Cu", 14),
        ("iron", "Fe", 9),
        ("titanium", "Ti", 10),
    ])
    def test_lattice_atom_counts(self, rng, name, element, count):
        result = synthesize(name, rng=rng)
        assert result.info.archetype is Archetype.METALLIC_CRYSTAL
        assert result.atom_count == count
        assert set(result.structure.elements()) == {element}

    def test_gold_fcc_neighbours(self, rng):
        result = synthesize("gold", rng=rng)
        atoms = result.structure.atoms
        assert result.structure.bonds
        for bond in result.structure.bonds:
            d = distance(atoms[bond.atom1].pos, atoms[bond.atom2].pos)
            assert abs(d - 4.0 / np.sqrt(2)) < 0.1

    def test_bcc_body_centre_bonds_to_every_corner(self, rng):
        result = synthesize("iron", rng=rng)
        centre = result.atom_count - 1
        partners = {b.atom1 for b in result.structure.bonds if b.atom2 == centre}
        assert partners == set(range(8))


class TestCagesAndRings:
    def test_cubane(self, rng):
        counts = element_counts(synthesize("cubane", rng=rng).structure.atoms)
        assert counts == {"C": 8, "H": 8}

    def test_dodecahedrane_bridges(self, rng):
        counts = element_counts(synthesize("dodecahedrane", rng=rng).structure.atoms)
        assert counts == {"C": 20, "H": 20}

    def test_adamantane_template_without_cage_feature(self, rng):
        info = MoleculeInfo(archetype=Archetype.CAGE, name="tricyclodecane", atoms={"C": 10, "H": 16})
        counts = element_counts(generate_atoms(info, rng))
        assert counts == {"C": 10, "H": 10}

    def test_small_cage_uses_formula_layout(self, rng):
        info = MoleculeInfo(archetype=Archetype.CAGE, name="prismane", atoms={"C": 6, "H": 6})
        counts = element_counts(generate_atoms(info, rng))
        assert counts == {"C": 6, "H": 6}

    def test_polycyclic_counts(self, rng):
        counts = element_counts(synthesize("morphine", rng=rng).structure.atoms)
        assert counts["C"] == 17
        assert counts["N"] == 1
        assert counts["O"] == 3
        assert counts["H"] == 19

    def test_polycyclic_without_rings(self, rng):
        info = MoleculeInfo(archetype=Archetype.POLYCYCLIC, name="x", atoms={"C": 3, "H": 2})
        counts = element_counts(generate_atoms(info, rng))
        assert counts == {"C": 3, "H": 2}


class TestChains:
    def test_default_chain(self, rng):
        counts = element_counts(synthesize("unobtainium", rng=rng).structure.atoms)
        assert counts == {"C": 3, "H": 6}

    def test_ethanol_chain_has_hydroxyl(self, rng):
        result = synthesize("ethanol", rng=rng)
        counts = element_counts(result.structure.atoms)
        assert counts == {"C": 2, "O": 1, "H": 5}
        assert frozenset({"O", "H"}) in _bond_elements(result)

    def test_amine_chain(self, rng):
        counts = element_counts(synthesize("amine", rng=rng).structure.atoms)
        assert counts["N"] == 1

    def test_acetic_acid_has_two_carbons(self, rng):
        counts = element_counts(synthesize("acetic acid", rng=rng).structure.atoms)
        assert counts == {"C": 2, "O": 2, "H": 5}

    def test_isobutane_methyl_branch(self, rng):
        result = synthesize("isobutane", rng=rng)
        atoms = result.structure.atoms
        assert element_counts(atoms) == {"C": 4, "H": 8}
        branch = 3
        assert atoms[branch].y == -1.5
        assert (1, branch) in {b.pair() for b in result.structure.bonds}


class TestAtomCap:
    def test_oversized_formula_rejected(self, rng):
        with pytest.raises(StructureTooLarge) as exc:
            synthesize("C1500H4", rng=rng)
        assert exc.value.requested == 1504

    def test_cap_checked_before_placement(self, rng, monkeypatch):
        def _fail(*args, **kwargs):
            raise AssertionError("atoms placed for an oversized request")
        monkeypatch.setattr("folio.structure.synthesizer.generate_atoms", _fail)
        with pytest.raises(StructureTooLarge):
            synthesize("C150000", rng=rng)

    def test_formula_at_cap_accepted(self, rng):
        info = MoleculeInfo(archetype=Archetype.FORMULA, name="big",
                            atoms={"C": 120, "H": MAX_ATOM_COUNT - 120})
        assert requested_atoms(info) == MAX_ATOM_COUNT
        assert len(build_structure(info, rng).atoms) > 120


class TestInvariants:
    @pytest.mark.parametrize("query", [
        "gold", "iron", "titanium", "cubane", "paddlane", "morphine", "cholesterol",
        "caffeine", "C2H6O", "C30H50O", "acetic acid", "methylamine", "anything else",
    ])
    def test_bond_indices_in_range(self, rng, query):
        result = synthesize(query, rng=rng)
        n = result.atom_count
        for bond in result.structure.bonds:
            assert 0 <= bond.atom1 < n
            assert 0 <= bond.atom2 < n
            assert bond.atom1 != bond.atom2

    def test_blank_query_yields_nothing(self, rng):
        assert synthesize("", rng=rng) is None
        assert synthesize("   ", rng=rng) is None

    def test_same_seed_same_record(self):
        a = synthesize("C20H25N3O", rng=np.random.default_rng(7))
        b = synthesize("C20H25N3O", rng=np.random.default_rng(7))
        assert a.pdb == b.pdb

    def test_empty_tally_yields_none(self, rng):
        empty = MoleculeInfo(archetype=Archetype.FORMULA, name="void", source="ai")
        assert synthesize("void", classifier=StaticClassifier(empty), rng=rng) is None


class TestClassificationChain:
    def test_ai_classification_used(self, rng):
        info = MoleculeInfo(archetype=Archetype.FORMULA, name="caffeine",
                            atoms={"C": 8, "H": 10, "N": 4, "O": 2}, source="ai")
        classifier = StaticClassifier(info)
        result = synthesize("caffeine", classifier=classifier, rng=rng)
        assert classifier.queries == ["caffeine"]
        assert result.classified_by == "ai"

    def test_falls_back_when_classifier_yields_nothing(self):
        info = classify("gold", StaticClassifier(None))
        assert info.archetype is Archetype.METALLIC_CRYSTAL
        assert info.source == "heuristic"

    def test_falls_back_when_model_errors(self, rng, fake_gemini):
        client = fake_gemini(error=ConnectionError("network unreachable"))
        classifier = MoleculeClassifier(client=client, model_name="models/test")
        result = synthesize("C2H6O", classifier=classifier, rng=rng)
        assert len(client.calls) == 1
        assert result.classified_by == "heuristic"
        assert result.info.archetype is Archetype.FORMULA

    def test_build_structure_without_metal_info(self, rng):
        info = MoleculeInfo(archetype=Archetype.METALLIC_CRYSTAL, name="mystery metal")
        assert build_structure(info, rng).atoms == []
