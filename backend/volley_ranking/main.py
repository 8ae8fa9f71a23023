from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .core.errors import ConfigurationError, RemoteUnavailable
from .routers import config, events, rankings

app = FastAPI(
    title="Volley Performance Ranking",
    version="0.1.0",
)

app.include_router(rankings.router)
app.include_router(events.router)
app.include_router(config.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


@app.exception_handler(RemoteUnavailable)
async def remote_unavailable_handler(request: Request, exc: RemoteUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Remote store unavailable."},
    )


@app.get("/health", tags=["health"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
