import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.routing import Mount

from feeledger import fee_check
from feeledger.config import settings
from feeledger.database import init_db
from feeledger.errors import ValidationError, DuplicateFeeError, PersistenceError, NotAuthenticatedError

# --- IMPORT ROUTERS (APIs) ---
from feeledger.routers import auth, students, fees, dashboard

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- CREATE DATABASE TABLES ---
init_db()

app = FastAPI(title=settings.APP_NAME)

# ==========================================
# CORS MIDDLEWARE (admin frontends)
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==========================================
# ERROR HANDLERS
# ==========================================
@app.exception_handler(DuplicateFeeError)
async def duplicate_fee_handler(request: Request, exc: DuplicateFeeError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    # Cause is already logged where it happened
    return JSONResponse(status_code=500, content={"detail": PersistenceError.default_message})


# --- REGISTER ROUTERS ---
app.include_router(auth.router)
app.include_router(students.router)
app.include_router(fees.router)
app.include_router(dashboard.router)


@app.get("/health")
def health():
    return {"status": "ok"}


# Admin API + public fee check function
application = Starlette(routes=[
    Mount("/functions/v1", app=fee_check.app),
    Mount("/", app=app),
])


def run():
    uvicorn.run("feeledger.main:application", host="0.0.0.0", port=8000)
