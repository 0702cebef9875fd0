"""
markovbox HTTP service
Train chains, sample them and download artifacts over HTTP
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from markovbox.config import settings
from markovbox.utils.logger import setup_logger

# Setup logging
logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for service initialization"""
    logger.info(f"[BOOT] Starting {settings.SERVICE_NAME} {settings.SERVICE_VERSION}...")
    logger.info(f"[BOOT] Default level {settings.DEFAULT_LEVEL}, cache size {settings.MAX_CACHED_MODELS}")
    try:
        yield
    finally:
        logger.info("[SHUTDOWN] Clearing model cache...")
        markov_router.MODEL_CACHE.clear()
        logger.info("[SHUTDOWN] markovbox stopped")


# Create FastAPI app
app = FastAPI(
    title="markovbox",
    description="Portable Markov-chain-in-a-box generator",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": {
                "code": "MARKOVBOX_ERROR",
                "message": "Internal server error occurred",
                "details": {"type": type(exc).__name__},
            },
        },
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"ok": False, "error": {"code": "BAD_REQUEST", "message": str(exc)}},
    )


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "ok": True,
        "data": {
            "status": "healthy",
            "models": len(markov_router.MODEL_CACHE),
        },
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "markov": "/markov/*",
        },
    }


from markovbox.api.routers import markov_router

app.include_router(markov_router.router, tags=["Markov"])


def main():
    import uvicorn

    uvicorn.run(
        "markovbox.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
