"""FastAPI main application."""

from typing import List

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.board_generator import BoardConfig, generate_board
from ..logging_config import configure_logging

# Configure logging
configure_logging(settings.effective_log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Click Board API",
    description="Deterministic boards for click-the-numbers puzzles",
    version=__version__,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class BoardRequest(BaseModel):
    """Request to generate a board."""

    seed: str = Field("", description="Seed string; empty picks a time-based seed")
    piece_count: int = Field(settings.default_piece_count, ge=1,
                             le=settings.max_piece_count, description="Number of pieces")
    relax_iters: int = Field(settings.default_relax_iters, ge=0, le=10,
                             description="Lloyd relaxation iterations")
    board_size: float = Field(settings.default_board_size, gt=0, le=100000,
                              description="Board side length")


class CellModel(BaseModel):
    polygon: List[List[float]]
    centroid: List[float]
    label: int
    region: str


class RegionModel(BaseModel):
    name: str
    polygon: List[List[float]]
    area: float
    quota: int


class MotifModel(BaseModel):
    kind: str
    region: str
    point_count: int
    center: List[float]
    radius: float


class BoardResponse(BaseModel):
    """A generated board."""

    seed: str
    piece_count: int
    board_size: float
    relax_iters: int
    regions: List[RegionModel]
    motifs: List[MotifModel]
    cells: List[CellModel]


class BoardOptions(BaseModel):
    piece_counts: List[int]
    default_piece_count: int
    default_relax_iters: int
    default_board_size: float
    max_piece_count: int


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Click Board API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/boards/options", response_model=BoardOptions)
async def board_options():
    """Piece counts offered to players and generation defaults."""
    return BoardOptions(
        piece_counts=settings.piece_count_options,
        default_piece_count=settings.default_piece_count,
        default_relax_iters=settings.default_relax_iters,
        default_board_size=settings.default_board_size,
        max_piece_count=settings.max_piece_count,
    )


@app.post("/boards/generate", response_model=BoardResponse)
def generate(request: BoardRequest):
    """
    Generate a board.

    The response carries the effective seed, so a board requested without
    a seed can be shared and regenerated.
    """
    logger.info("Board requested", request=request.model_dump())

    config = BoardConfig(
        seed_str=request.seed,
        piece_count=request.piece_count,
        relax_iters=request.relax_iters,
        board_size=request.board_size,
    )
    try:
        board = generate_board(config)
    except ValueError as e:
        logger.error("Board generation rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return board.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
