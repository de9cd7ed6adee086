"""
Folio API v1 Schemas
--------------------
Pydantic v2 models for the request bodies and responses of the
molecule and chat endpoints. Field aliases keep the camelCase keys
the viewer already consumes.
"""
from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class GenerateMoleculeRequest(BaseModel):
    name: Optional[str] = None
    formula: Optional[str] = None

    def query(self) -> str:
        """Name wins over formula; blank strings count as missing."""
        for value in (self.name, self.formula):
            if value and value.strip():
                return value.strip()
        return ""


class GeneratedMoleculeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdb: str
    name: str
    structure_type: str = Field("AI Generated", alias="structureType")
    atom_count: int = Field(..., ge=1, alias="atomCount")
    archetype: str
    classified_by: Literal["ai", "heuristic"] = Field(..., alias="classifiedBy")


class CompoundResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdb: str
    cid: int
    name: str
    structure_type: Literal["3D", "2D"] = Field(..., alias="structureType")
    atom_count: int = Field(..., ge=1, alias="atomCount")


class ChatMessage(BaseModel):
    sender: str
    text: str = ""


class ChatRequest(BaseModel):
    message: Optional[str] = None
    conversation: list[ChatMessage] = Field(default_factory=list)


class ChatUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    message: str
    usage: Optional[ChatUsage] = None


class HealthResponse(BaseModel):
    status: str
    version: str
