from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import explain
from app.config import config
from app.lib.logger import configure_logger, setup_uvicorn_logging
from app.middleware.logging import LoggingMiddleware

# Configure module logger
logger = configure_logger(__name__)

# Define app
app = FastAPI(
    title="Stacks Transaction Explainer",
    description="Plain-English explanations of Stacks blockchain transactions",
    version="0.1.0",
)

# Add logging middleware first
app.add_middleware(LoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and query parameters in the error envelope."""
    errors = exc.errors()
    message = errors[0].get("msg") if errors else None
    return explain.error_response("Invalid request", "validate", 400, message)


# Simple health check endpoint
@app.get("/")
async def health_check():
    """Simple health check endpoint."""
    return {"status": "healthy"}


# Load API routes
app.include_router(explain.router)


@app.on_event("startup")
async def startup_event():
    """Run web server startup tasks."""
    # Configure structured logging after uvicorn is fully initialized
    setup_uvicorn_logging()

    logger.info(
        "Starting transaction explainer",
        extra={
            "default_network": config.explain.default_network,
            "decoder_enabled": bool(config.decoder.api_url),
        },
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Run web server shutdown tasks."""
    logger.info("Transaction explainer shutdown complete")
