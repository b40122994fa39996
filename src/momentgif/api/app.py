"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from momentgif.api.middleware import momentgif_error_handler
from momentgif.api.routes import captures, convert, download, persist, status
from momentgif.models.errors import MomentGifError


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="MomentGif",
        description="Convert Live Photos into looping GIFs",
        version="0.1.0",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(MomentGifError, momentgif_error_handler)

    # Routes
    app.include_router(captures.router)
    app.include_router(convert.router)
    app.include_router(status.router)
    app.include_router(download.router)
    app.include_router(persist.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": "0.1.0"}

    return app


app = create_app()
