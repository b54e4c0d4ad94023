"""
Agent Copilot - FastAPI Application.

Main entry point for the backend API server.
Routes chat queries to topic-specialised agents, generates
sample datasets for charts, and stores saved widgets.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from copilot.config import settings
from copilot.database import init_db
from copilot.routes import chat, history, widgets

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Agent Copilot API",
    description=(
        "Chat with General, Clinical and Food Security agents, "
        "visualise generated datasets, and save them as widgets."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware for frontend development server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routes
app.include_router(chat.router)
app.include_router(widgets.router)
app.include_router(history.router)


@app.on_event("startup")
def on_startup():
    """Initialize the database on application startup."""
    init_db()


@app.get("/api/health", tags=["health"])
def health_check():
    """Health check endpoint to verify the API is running."""
    return {"status": "ok"}
