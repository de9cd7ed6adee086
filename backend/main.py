import sys, logging, asyncio
from pathlib import Path
from functools import partial
from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

sys.path.insert(0, str(Path(__file__).resolve().parent))

from folio import config
from folio.chat.assistant import ChatError, ChatTurn, PortfolioAssistant, get_assistant
from folio.discovery.pubchem import CompoundNotFound, PubChemResolver, get_resolver
from folio.enrichment.molecule_classifier import MoleculeClassifier, get_classifier
from folio.formats.pdb import RecordFormatError
from folio.schemas.api_v1 import (
    ChatRequest, ChatResponse, CompoundResponse, GenerateMoleculeRequest,
    GeneratedMoleculeResponse, HealthResponse,
)
from folio.structure.synthesizer import StructureTooLarge, synthesize

logging.basicConfig(level=config.log_level())
logger = logging.getLogger("folio.api")

app = FastAPI(title=config.SERVICE_METADATA["name"], version=config.SERVICE_METADATA["version"])
app.add_middleware(CORSMiddleware, allow_origins=config.cors_origins(), allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def _run_blocking(fn, *args, **kwargs):
    return await asyncio.get_running_loop().run_in_executor(None, partial(fn, *args, **kwargs))


@app.get("/health", response_model=HealthResponse)
def health(): return {"status": "operational", "version": config.SERVICE_METADATA["version"]}


@app.post("/api/generate-molecule", response_model=GeneratedMoleculeResponse)
async def generate_molecule(body: GenerateMoleculeRequest, classifier: MoleculeClassifier = Depends(get_classifier)):
    query = body.query()
    if not query:
        raise HTTPException(status_code=400, detail="Molecule name or formula is required")

    try:
        result = await _run_blocking(synthesize, query, classifier)
    except StructureTooLarge as e:
        logger.warning(f"Rejected '{query}': {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except RecordFormatError as e:
        logger.error(f"Structure emission failed for '{query}': {e}")
        raise HTTPException(status_code=500, detail="Failed to generate molecular structure")

    if result is None:
        raise HTTPException(status_code=404, detail="Could not generate molecular structure")

    return GeneratedMoleculeResponse(
        pdb=result.pdb,
        name=query,
        structure_type="AI Generated",
        atom_count=result.atom_count,
        archetype=result.info.archetype.value,
        classified_by=result.classified_by,
    )


@app.get("/api/molecule", response_model=CompoundResponse)
async def lookup_molecule(name: str = Query(None), resolver: PubChemResolver = Depends(get_resolver)):
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Molecule name is required")

    try:
        compound = await _run_blocking(resolver.resolve, name)
    except CompoundNotFound as e:
        logger.info(str(e))
        raise HTTPException(status_code=404, detail=str(e))
    except RecordFormatError as e:
        logger.error(f"SDF conversion failed for '{name}': {e}")
        raise HTTPException(status_code=500, detail="Failed to convert structure")

    return CompoundResponse(
        pdb=compound.pdb,
        cid=compound.cid,
        name=compound.name,
        structure_type=compound.structure_type,
        atom_count=compound.atom_count,
    )


@app.post("/api/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, assistant: PortfolioAssistant = Depends(get_assistant)):
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    turns = [ChatTurn(sender=m.sender, text=m.text) for m in body.conversation]
    try:
        reply = await _run_blocking(assistant.reply, body.message, turns)
    except ChatError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return ChatResponse(message=reply.message, usage=reply.usage or None)
