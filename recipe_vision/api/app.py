"""FastAPI application for Recipe Vision."""

from fastapi import FastAPI

from recipe_vision.api import routes
from recipe_vision.utils.logger import logger

app = FastAPI(
    title="Recipe Vision",
    version="0.1.0",
    description="Upload a photo of a dish, confirm its ingredients, and get a recipe.",
)

app.include_router(routes.router)

logger.info("Recipe Vision API configured")


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
