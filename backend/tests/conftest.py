"""
Test fixtures for the Folio molecule and chat backend.
Provides a seeded generator, an atom factory, and stand-ins for the
hosted model so no test touches the network.
"""
import pytest
import numpy as np
import sys
import os
from types import SimpleNamespace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from folio.structure.models import Atom


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def atom_factory():
    """Factory to create Atom objects at specified positions."""
    def _make(element, pos):
        return Atom(element=element, pos=np.array(pos, dtype=float))
    return _make


@pytest.fixture
def ethanol_atoms(atom_factory):
    """C-C-O skeleton with one hydrogen on each heavy atom."""
    make = atom_factory
    return [
        make("C", [0.0, 0.0, 0.0]),
        make("C", [1.54, 0.0, 0.0]),
        make("O", [2.0, 1.36, 0.0]),
        make("H", [-0.5, -0.9, 0.0]),
        make("H", [1.9, -0.95, 0.3]),
        make("H", [2.9, 1.5, 0.0]),
    ]


class FakeGeminiClient:
    """Records calls and returns a canned reply, or raises `error`."""

    def __init__(self, text=None, error=None, available=True, usage=None):
        self.text = text
        self.error = error
        self._available = available
        self.usage = usage
        self.calls = []

    @property
    def available(self):
        return self._available

    def generate(self, model_name, contents, system_instruction=None, generation_config=None):
        self.calls.append({
            "model": model_name,
            "contents": contents,
            "system_instruction": system_instruction,
            "generation_config": generation_config,
        })
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text, usage_metadata=self.usage)


@pytest.fixture
def fake_gemini():
    return FakeGeminiClient
