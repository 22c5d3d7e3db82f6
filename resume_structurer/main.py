import logging
import os

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from resume_structurer.api.routes.parse import router as parse_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Resume Structurer",
    description="Turns resume files and text into a structured, evidence-grounded resume record with a confidence report",
    version="0.2.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(parse_router)


@app.get("/", tags=["health"])
def root():
    return {"service": "resume-structurer", "status": "running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Resume Structurer API",
        version="0.2.0",
        description="Resume structuring API: heuristic extraction, optional AI pass, evidence filtering",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
