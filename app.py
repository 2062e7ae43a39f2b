"""Recipe Vision web service.

Single entry point for the HTTP API:
- POST /api/ingredients: photo -> candidate ingredients
- POST /api/recipe: photo + confirmed ingredients -> formatted recipe
- GET /health

Run with: python app.py
"""

import uvicorn

from recipe_vision.api.app import app
from recipe_vision.utils.config import config
from recipe_vision.utils.logger import logger


if __name__ == "__main__":
    logger.info(f"Starting Recipe Vision on port {config.PORT}")
    logger.info(f"Models: ingredients={config.IMAGE_DETECTION_MODEL}, recipe={config.GEMINI_MODEL}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
