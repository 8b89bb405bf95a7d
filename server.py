"""REST API for transactions and the income/expense summary, served with FastAPI."""

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config import LOG_FORMAT, LOG_LEVEL, PORT
from database import engine, get_db, init_db
from schemas import DeleteResult, ErrorResponse, Summary, TransactionIn, TransactionOut
from transactions import (
    InvalidTransactionError,
    StoreError,
    TransactionNotFoundError,
    create_transaction,
    delete_transaction,
    get_summary,
    list_transactions,
    update_transaction,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield
    engine.dispose()
    logger.info("Closed database connections")


app = FastAPI(title="Home Finance API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# ----------------------------------------------------------------------------
# Error mapping
# ----------------------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        problems.append(f"{field}: {err.get('msg')}")
    return _error(status.HTTP_400_BAD_REQUEST, "Missing or invalid fields: " + "; ".join(problems))


@app.exception_handler(InvalidTransactionError)
async def invalid_transaction_handler(request: Request, exc: InvalidTransactionError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(TransactionNotFoundError)
async def not_found_handler(request: Request, exc: TransactionNotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


# ----------------------------------------------------------------------------
# Transactions
# ----------------------------------------------------------------------------
@app.get("/api/transactions", response_model=List[TransactionOut], responses=ERROR_RESPONSES)
def read_transactions(db: Session = Depends(get_db)):
    return list_transactions(db)


@app.post(
    "/api/transactions",
    response_model=TransactionOut,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def add_transaction(payload: TransactionIn, db: Session = Depends(get_db)):
    return create_transaction(
        db,
        description=payload.description,
        amount=payload.amount,
        txn_type=payload.type,
        category=payload.category,
        date=payload.date,
    )


@app.put(
    "/api/transactions/{txn_id}",
    response_model=TransactionOut,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
def edit_transaction(txn_id: int, payload: TransactionIn, db: Session = Depends(get_db)):
    logger.debug("PUT /api/transactions/%s %s", txn_id, payload)
    return update_transaction(
        db,
        txn_id,
        description=payload.description,
        amount=payload.amount,
        txn_type=payload.type,
        category=payload.category,
        date=payload.date,
    )


@app.delete("/api/transactions/{txn_id}", response_model=DeleteResult, responses=ERROR_RESPONSES)
def remove_transaction(txn_id: int, db: Session = Depends(get_db)):
    return DeleteResult(deleted=delete_transaction(db, txn_id))


# ----------------------------------------------------------------------------
# Summary
# ----------------------------------------------------------------------------
@app.get("/api/summary", response_model=Summary, responses=ERROR_RESPONSES)
def read_summary(db: Session = Depends(get_db)):
    return get_summary(db)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    uvicorn.run("server:app", host="0.0.0.0", port=PORT)
