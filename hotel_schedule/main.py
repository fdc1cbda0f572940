import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hotel_schedule.api.schedule import router as schedule_router
from hotel_schedule.core.config import settings
from hotel_schedule.wiring.dependencies import shutdown


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "hotel_id", "status", "direction", "day", "url", "error", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await shutdown()


app = FastAPI(title="Hotel Booking Schedule", version="1.0.0", lifespan=lifespan)

app.include_router(schedule_router, tags=["schedule"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
