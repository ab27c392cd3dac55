from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import setup_logging, validate_settings
from .server.solidserver_client import init_server, close_server
from .api.routes import router

# Setup logging
logger = setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        # Validate connection settings before anything else
        logger.info("Validating SOLIDserver settings...")
        validate_settings()
        logger.info("SOLIDserver settings validation passed")

        server = init_server()
        logger.info(f"SOLIDserver session initialized. Host: {server.host}, version: {server.version}")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    yield

    # Shutdown
    close_server()

# FastAPI app - used by uvicorn server
app = FastAPI(title="SOLIDserver IPAM API", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api")
