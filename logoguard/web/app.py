import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from logoguard import __version__
from logoguard.web.routers import inspection

logger = logging.getLogger("web")

app = FastAPI(title="LogoGuard Inspection API", version=__version__)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled server error")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(inspection.router)
