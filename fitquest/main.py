"""Main entry point for the FitQuest gamification API"""
import logging
import uvicorn

from fitquest.config import validate_config, LOG_LEVEL, API_HOST, API_PORT
from fitquest.api.server import create_api_application


def _log_level(name: str) -> int:
    """Logging level for a LOG_LEVEL name; INFO if unknown (validate_config reports it)"""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=_log_level(LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point"""
    logger.info("Validating configuration...")
    validate_config()

    app = create_api_application()
    logger.info(f"Serving on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
