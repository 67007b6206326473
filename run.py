import uvicorn

from labsyncpro.config import settings
from labsyncpro.logging_config import configure_logging

if __name__ == "__main__":
    configure_logging()
    uvicorn.run("labsyncpro.main:app", host="127.0.0.1", port=8000, log_level=settings.LOG_LEVEL.lower())
