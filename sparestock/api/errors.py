"""
Render ledger errors as {"detail": ..., "code": ...} responses
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sparestock.core.exceptions import SpareStockError


async def spare_stock_error_handler(request: Request, exc: SpareStockError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def install_error_handlers(app: FastAPI):
    app.add_exception_handler(SpareStockError, spare_stock_error_handler)
