"""
Development server: python backend/server.py
"""
import uvicorn

from brainsort.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "brainsort.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
