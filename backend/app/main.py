"""
TextureGen Backend - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import textures
from app.config import get_settings

app = FastAPI(
    title="TextureGen",
    description="AI-powered seamless PBR texture generator",
    version="0.1.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(textures.router, prefix="/api/textures", tags=["textures"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "name": "TextureGen", "version": "0.1.0"}
