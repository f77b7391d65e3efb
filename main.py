from fastapi import FastAPI, Request

import logging
import time

from db import Base, LOG_LEVEL, SEED_PACKAGES, SessionLocal, engine
from routers import ALL_ROUTERS

import orm  # noqa: F401  registers tables on Base.metadata
import billing

# -----------------------
# Logging
# -----------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title="AssetVerse API")

Base.metadata.create_all(bind=engine)

if SEED_PACKAGES:
    with SessionLocal() as _db:
        billing.seed_packages(_db)

for r in ALL_ROUTERS:
    app.include_router(r)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    elapsed_ms = int((time.time() - start) * 1000)
    logger.info(
        "method=%s path=%s status=%s elapsed_ms=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response

@app.get("/")
def root():
    return {"message": "AssetVerse API running", "docs": "/docs"}
