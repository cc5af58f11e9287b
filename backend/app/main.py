import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.v1.router import api_router
from backend.app.config import get_settings
from backend.app.database import create_tables
from backend.app.exceptions import BudgetError

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    logger.info("Starting up application...")
    yield
    logger.info("Shutting down application...")

app = FastAPI(lifespan=lifespan)

@app.exception_handler(BudgetError)
async def budget_error_handler(request: Request, exc: BudgetError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

# Include all API routes
app.include_router(api_router, prefix="/api/v1")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend.app.main:app", host="0.0.0.0", port=8000, reload=True)
