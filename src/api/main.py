from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import newspaper
from src.logging import get_logger

logger = get_logger("API")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle management

    The syllabus must load at startup; a bad syllabus path stops the process
    instead of failing every request.
    """
    logger.info("Application startup")

    from src.services.warmup import warmup_all

    await warmup_all(skip_llm_call=False, llm_timeout=30.0)

    yield
    logger.info("Application shutdown")


app = FastAPI(
    title="NewsPrep API",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific frontend origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(newspaper.router, prefix="/api/v1/newspaper", tags=["newspaper"])


@app.get("/")
async def root():
    return {"message": "Welcome to NewsPrep API"}


if __name__ == "__main__":
    import os

    import uvicorn

    project_root = Path(__file__).parent.parent.parent

    reload_excludes = [
        str(d)
        for d in [project_root / ".venv", project_root / "data", project_root / ".git"]
        if d.exists()
    ]

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("NEWSPREP_PORT", "8001")),
        reload=True,
        reload_excludes=reload_excludes,
    )
