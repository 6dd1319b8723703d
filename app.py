"""
NoteCoach FastAPI Application

A REST API server for the NoteCoach writing coach.
Provides endpoints for notes, submissions, the chat transcript, links and search.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from notecoach.config import Config
from notecoach.core.block_store import BlockStore
from notecoach.core.factory import EmbedderFactory, LLMFactory
from notecoach.models.chat import ChatMessage
from notecoach.models.note import Note
from notecoach.models.relationships import Link
from notecoach.services.coach_session import CoachSession
from notecoach.utils.exceptions import NotFoundError, ProviderError, ValidationError
from notecoach.utils.logger import get_logger, setup_logging

# Global coach instance
coach: CoachSession | None = None
logger = get_logger(__name__)


# Pydantic models for API
class CreateNoteRequest(BaseModel):
    """Request model for creating a note."""

    title: str = Field(default="New Note", description="Note title")


class SubmitRequest(BaseModel):
    """Request model for submitting text to the coach."""

    content: str = Field(..., description="Submitted text")
    block_id: str | None = Field(default=None, description="Existing user block holding the text")
    note_id: str | None = Field(default=None, description="Target note for a new block")


class SubmitResponse(BaseModel):
    """Response model for a completed coaching cycle."""

    note_id: str
    block_id: str
    ai_block_id: str
    reply: str
    links_created: int
    embedded: bool
    used_fallback: bool


class SearchHit(BaseModel):
    """Note search result."""

    note_id: str
    title: str
    similarity: float


class StartResponse(BaseModel):
    """Opening question response."""

    question: str
    note_id: str | None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    coach_initialized: bool
    notes: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global coach

    # Load configuration from environment or use defaults
    config = Config.from_env()

    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting NoteCoach server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Embedder={config.embedder.provider}/{config.embedder.model}"
    )

    logger.info("Creating completion provider")
    llm = LLMFactory.create(config.llm)

    logger.info("Creating embedder")
    embedder = EmbedderFactory.create(config.embedder)

    try:
        dimension = await EmbedderFactory.get_dimension(embedder, config.embedder)
        logger.info(f"Embedding dimension: {dimension}")
    except ProviderError as e:
        logger.warning(f"Embedder not reachable at startup: {e}")

    coach = CoachSession(store=BlockStore(), embedder=embedder, llm=llm, config=config.coach)
    logger.info("NoteCoach session initialized")

    yield

    # Cleanup
    logger.info("Shutting down NoteCoach server")
    coach.close()
    await llm.close()
    await embedder.close()
    coach = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="NoteCoach API",
    description="Note-taking with an embedded writing coach",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_coach() -> CoachSession:
    if not coach:
        raise HTTPException(status_code=503, detail="Coach not initialized")
    return coach


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if coach else "initializing",
        coach_initialized=coach is not None,
        notes=len(coach.store.notes) if coach else 0,
    )


# Note endpoints
@app.post("/notes", response_model=Note)
async def create_note(request: CreateNoteRequest):
    """Create an empty note and make it current."""
    session = _require_coach()
    return session.store.create_note(title=request.title)


@app.get("/notes", response_model=list[Note])
async def list_notes():
    """List all notes in creation order."""
    session = _require_coach()
    return session.store.notes


@app.post("/submit", response_model=SubmitResponse)
async def submit(request: SubmitRequest):
    """
    Submit text to the coach.

    Runs one full cycle: the text is embedded, linked to similar blocks,
    combined with similar and recent context, and answered with a coach
    question that is inserted after the submitted block.
    """
    session = _require_coach()

    try:
        result = await session.submit(
            request.content, block_id=request.block_id, note_id=request.note_id
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e

    if result is None:
        raise HTTPException(status_code=503, detail="Coach session closed")

    return SubmitResponse(
        note_id=result.note_id,
        block_id=result.block_id,
        ai_block_id=result.ai_block.id,
        reply=result.ai_block.content,
        links_created=len(result.links),
        embedded=result.embedded,
        used_fallback=result.used_fallback,
    )


@app.get("/chat", response_model=list[ChatMessage])
async def get_chat():
    """Chat transcript in order."""
    session = _require_coach()
    return session.store.chat


@app.get("/links", response_model=list[Link])
async def get_links():
    """Links whose endpoints both still exist."""
    session = _require_coach()
    return session.store.resolved_links()


@app.get("/search", response_model=list[SearchHit])
async def search_notes(
    q: str = Query(..., description="Search query"),
    limit: int | None = Query(default=None, ge=1, le=100),
):
    """Rank notes by their best block similarity to the query."""
    session = _require_coach()
    results = await session.search(q, limit=limit)
    return [
        SearchHit(note_id=r.note.id, title=r.note.title, similarity=r.similarity) for r in results
    ]


@app.post("/start", response_model=StartResponse)
async def start():
    """Ask the opening question and prepare the current note."""
    session = _require_coach()
    question = await session.start()
    note = session.store.current_note
    return StartResponse(question=question, note_id=note.id if note else None)
