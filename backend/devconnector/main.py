import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .api import auth as auth_api
from .api import posts as posts_api
from .api import profile as profile_api
from .api import users as users_api
from .database import init_db
from .utils.error_handlers import register_exception_handlers

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_default_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]


def create_app() -> FastAPI:
    app = FastAPI(title="DevConnector API")

    app.include_router(users_api.router)
    app.include_router(auth_api.router)
    app.include_router(profile_api.router)
    app.include_router(posts_api.router)

    register_exception_handlers(app)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "Backend running",
            "service": "DevConnector API"
        }

    _extra_origins = [
        origin.strip()
        for origin in os.getenv("FRONTEND_ORIGINS", "").split(",")
        if origin.strip()
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *_extra_origins],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    logger.info("Database ready; serving on port %s", config.PORT)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.devconnector.main:app", host="0.0.0.0", port=config.PORT)
