import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopledger.api.routes.billing import router as billing_router
from shopledger.api.routes.expenses import router as expenses_router
from shopledger.api.routes.profit_ledger import router as profit_ledger_router
from shopledger.api.routes.reports import router as reports_router
from shopledger.api.routes.session import router as session_router
from shopledger.api.routes.stock import router as stock_router
from shopledger.core.config import settings
from shopledger.core.logging import configure_logging
from shopledger.db.database import engine

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(
        "Starting %s (session auth %s, ledger sync %s)",
        settings.app_name,
        "on" if settings.session_auth_enabled else "off",
        "on" if settings.ledger_sync_enabled else "off",
    )
    try:
        yield
    finally:
        engine.dispose()

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(stock_router)
app.include_router(billing_router)
app.include_router(expenses_router)
app.include_router(profit_ledger_router)
app.include_router(reports_router)
app.include_router(session_router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
