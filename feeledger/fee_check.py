"""
Public fee check function (no login).

Guardians post their mobile number and get back every matching student with
the fee history. Deployed as its own app under /functions/v1 so that it can
answer any origin and run on the service-role database session.
"""
import logging

from fastapi import FastAPI, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from feeledger.database import get_service_db
from feeledger.errors import ValidationError, PersistenceError
from feeledger.services.lookup import lookup_students

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

app = FastAPI(title="Fee Check", docs_url=None, redoc_url=None, openapi_url=None)


def _reply(payload, status_code=200):
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


@app.options("/check-fee-status")
def check_fee_status_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/check-fee-status")
async def check_fee_status(request: Request, db: Session = Depends(get_service_db)):
    try:
        body = await request.json()
        mobile = body.get("mobile") if isinstance(body, dict) else None
        students = lookup_students(db, mobile)
    except ValidationError:
        logger.info("Invalid mobile number provided")
        return _reply({"error": "Invalid mobile number", "students": []}, status_code=400)
    except PersistenceError:
        return _reply({"error": "Failed to fetch data", "students": []}, status_code=500)
    except Exception:
        logger.exception("Unexpected fee check error")
        return _reply({"error": "Internal server error", "students": []}, status_code=500)

    return _reply({"students": students})
