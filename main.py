"""
Chef Roulette API entry point
"""
import multiprocessing
import uvicorn
from app.core.app import create_app
from app.core.config import get_settings

settings = get_settings()
app = create_app()


def run() -> None:
    if settings.DEBUG:
        # Development: single worker with hot reload
        uvicorn.run(
            "main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=True,
            log_level=settings.LOG_LEVEL.lower()
        )
        return

    # Production: capture requests hold a worker for up to the webhook timeout,
    # so scale workers with CPU cores unless configured
    workers = settings.UVICORN_WORKERS or (multiprocessing.cpu_count() * 2) + 1
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=workers,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
