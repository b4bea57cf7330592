from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import balances, health
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Multi-Chain Token Indexer",
    description="Token balances for Ethereum, Tron and Solana wallets",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # the browser front end connects wallets client-side
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(balances.router, tags=["Balances"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Multi-Chain Token Indexer",
        "version": __version__,
        "chains": ["ethereum", "tron", "solana"],
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "token_indexer.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
