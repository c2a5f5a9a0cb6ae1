import logging

from fastapi import FastAPI
from schedulehub.api.routes import schedules, shifts
from schedulehub.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="ScheduleHub API", version="0.1.0", debug=settings.DEBUG)

app.include_router(schedules.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
