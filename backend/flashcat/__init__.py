from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from flashcat.config import settings
from flashcat.db import init_all_databases


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    settings.media_dir.mkdir(parents=True, exist_ok=True)
    yield


def create_app() -> FastAPI:
    application = FastAPI(
        title="Flashcat Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from flashcat.routers import cards, challenges, conversation, health, progress, study, tts

    application.include_router(health.router)
    application.include_router(cards.router, prefix="/cards", tags=["cards"])
    application.include_router(study.router, prefix="/study", tags=["study"])
    application.include_router(
        progress.router, prefix="/progress", tags=["progress"]
    )
    application.include_router(
        challenges.router, prefix="/challenges", tags=["challenges"]
    )
    application.include_router(
        conversation.router, prefix="/conversation", tags=["conversation"]
    )
    application.include_router(tts.router, prefix="/tts", tags=["tts"])

    # The directory is created in lifespan, after the app is built
    application.mount(
        "/media",
        StaticFiles(directory=settings.media_dir, check_dir=False),
        name="media",
    )

    return application


app = create_app()
