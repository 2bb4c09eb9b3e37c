# src/shinglesim/api/main.py
from fastapi import FastAPI

from shinglesim import __version__
from shinglesim.api.similarity_api import router as similarity_router
from shinglesim.logging_config import setup_logging

setup_logging()

app = FastAPI(title="shinglesim - document similarity", version=__version__)

# Include similarity routes
app.include_router(similarity_router)


@app.get("/")
def read_root():
    return {"message": "shinglesim is running!"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
