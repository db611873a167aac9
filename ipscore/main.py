"""
IP Score FastAPI Application.

IP reputation scoring API:
  POST /analyze       → gather IP, threat, fingerprint and network signals, score them
  POST /score         → score signals the caller already gathered
  GET  /audit/recent  → recent analysis audit records
  GET  /health        → {"status": "ok"}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ipscore.api.routes.analyze import router as analyze_router
from ipscore.api.routes.audit import router as audit_router
from ipscore.api.routes.health import router as health_router
from ipscore.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("ipscore")

app = FastAPI(
    title="IP Score",
    description="IP reputation scoring from threat, proxy and geographic signals",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze_router)
app.include_router(audit_router)
app.include_router(health_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "body": body.decode("utf-8")[:100]},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors with non-serialisable context values stringified."""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
