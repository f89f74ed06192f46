"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

from sparestock.api.stock_in import router as stock_in_router
from sparestock.api.stock_out import router as stock_out_router
from sparestock.api.approval import router as approval_router
from sparestock.api.opname import router as opname_router
from sparestock.api.master import router as master_router
from sparestock.api.ledger import router as ledger_router

api_router = APIRouter()

# Include sub-routers
api_router.include_router(stock_in_router)
api_router.include_router(stock_out_router)
api_router.include_router(approval_router)
api_router.include_router(opname_router)
api_router.include_router(master_router)
api_router.include_router(ledger_router)


# ===================== HEALTH & STATUS =====================

@api_router.get("/status", tags=["API"])
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}
