import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import numpy as np
import requests

from folio import config
from folio.formats.pdb import write_pdb
from folio.formats.sdf import parse_sdf

logger = logging.getLogger("folio.discovery")


class CompoundNotFound(LookupError):
    """PubChem has no compound, or no structure, for the query."""


@dataclass
class CompoundStructure:
    pdb: str
    cid: int
    name: str
    structure_type: str
    atom_count: int


class PubChemResolver:
    """Name -> CID -> 3D SDF (2D fallback) -> structure record."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session=None):
        self.base_url = base_url or config.pubchem_base_url()
        self.timeout = config.http_timeout() if timeout is None else timeout
        self.http = session or requests

    def lookup_cid(self, name: str) -> int:
        url = f"{self.base_url}/compound/name/{quote(name, safe='')}/cids/JSON"
        logger.info(f"PubChem CID search: {url}")
        res = self.http.get(url, timeout=self.timeout)
        if res.status_code != 200:
            raise CompoundNotFound(f"Molecule not found: {name}")
        cids = (res.json().get("IdentifierList") or {}).get("CID") or []
        if not cids:
            raise CompoundNotFound(f"Molecule not found: {name}")
        return int(cids[0])

    def fetch_sdf(self, cid: int):
        """Return (sdf_text, "3D"|"2D")."""
        url_3d = f"{self.base_url}/compound/cid/{cid}/SDF?record_type=3d"
        res = self.http.get(url_3d, timeout=self.timeout)
        if res.status_code == 200:
            return res.text, "3D"

        logger.info(f"3D structure not available for CID {cid}, trying 2D...")
        res = self.http.get(f"{self.base_url}/compound/cid/{cid}/SDF", timeout=self.timeout)
        if res.status_code == 200:
            return res.text, "2D"
        raise CompoundNotFound(f"No molecular structure available for CID {cid}")

    def resolve(self, name: str, rng: Optional[np.random.Generator] = None) -> CompoundStructure:
        name = name.strip()
        cid = self.lookup_cid(name)
        sdf_text, structure_type = self.fetch_sdf(cid)
        structure = parse_sdf(sdf_text, name=name, flat=structure_type == "2D", rng=rng)
        pdb = write_pdb(
            structure.atoms, structure.bonds, name,
            title=f"FROM PUBCHEM {structure_type}", author="Generated from PubChem",
        )
        logger.info(f"✅ PubChem: {name} (CID {cid}): {structure.atom_count} atoms, {structure_type}")
        return CompoundStructure(
            pdb=pdb, cid=cid, name=name,
            structure_type=structure_type, atom_count=structure.atom_count,
        )


_resolver = None


def get_resolver() -> PubChemResolver:
    global _resolver
    if _resolver is None:
        _resolver = PubChemResolver()
    return _resolver
