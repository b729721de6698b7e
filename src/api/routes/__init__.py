from fastapi import FastAPI

from . import admin, auth, complaints, health


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(complaints.router)
    app.include_router(admin.router)
