# start_server.py
# Run the finance tracker API with uvicorn

import logging

import uvicorn

from finance_tracker.config import HOST, PORT, LOG_LEVEL, VERSION

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    logger.info(f"Starting Finance Tracker {VERSION} on http://{HOST}:{PORT}")
    logger.info(f"API docs: http://{HOST}:{PORT}/docs")

    uvicorn.run(
        "finance_tracker.main:app",
        host=HOST,
        port=PORT,
        reload=False,
        log_level=LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
