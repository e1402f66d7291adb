import logging

from fastapi import FastAPI
from pydantic import BaseModel

from edutube.api.study_tools import router as study_tools_router
from edutube.api.videos import router as videos_router
from edutube.core.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="EduTube Study API", version="0.1.0")
app.include_router(videos_router)
app.include_router(study_tools_router)


class HealthResponse(BaseModel):
    ok: bool
    service: str
    version: str


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, service="api", version=app.version)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("edutube.main:app", host="0.0.0.0", port=8000, reload=settings.env == "local")
