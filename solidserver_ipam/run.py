import uvicorn

from solidserver_ipam.config.settings import setup_logging, SERVER_HOST, SERVER_PORT

# Setup logging
logger = setup_logging()
logger.info("Starting SOLIDserver IPAM server...")

# Start the server
uvicorn.run(
    "solidserver_ipam.app:app",
    host=SERVER_HOST,
    port=SERVER_PORT,
    log_level="info"
)
