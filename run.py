"""Serve the studio API with uvicorn."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("STUDIO_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=os.getenv("STUDIO_API_HOST", "127.0.0.1"),
        port=int(os.getenv("STUDIO_API_PORT", 8000)),
        reload=os.getenv("STUDIO_RELOAD", "").lower() in ("1", "true", "yes"),
    )
