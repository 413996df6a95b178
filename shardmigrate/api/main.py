"""FastAPI application entry point."""

from fastapi import FastAPI

from .. import __version__
from .routes import migrations, transformers

app = FastAPI(
    title="Shard Migration API",
    description="API for starting, inspecting and cancelling shard migrations",
    version=__version__,
)

# Include routers
app.include_router(migrations.router, prefix="/api/migrations", tags=["migrations"])
app.include_router(transformers.router, prefix="/api/transformers", tags=["transformers"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
