import logging

from fastapi import Depends, FastAPI

from stress_app.config import settings
from stress_app.routers import scenarios, stress
from stress_app.security import require_api_key

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=f"{settings.app_name} API", version="0.1.0")

app.include_router(
    scenarios.router,
    prefix="/scenarios",
    tags=["scenarios"],
    dependencies=[Depends(require_api_key)],
)
app.include_router(
    stress.router,
    prefix="/stress",
    tags=["stress"],
    dependencies=[Depends(require_api_key)],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
