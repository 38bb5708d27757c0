from fastapi import APIRouter
from prism.api.endpoints import (
    alerts,
    assistant,
    audit_logs,
    bank_transactions,
    catalog,
    clean_room,
    insurance_claims,
    subsidy_usage,
)

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(clean_room.router)
api_router.include_router(audit_logs.router)
api_router.include_router(bank_transactions.router)
api_router.include_router(insurance_claims.router)
api_router.include_router(subsidy_usage.router)
api_router.include_router(alerts.router)
api_router.include_router(catalog.router)
api_router.include_router(assistant.router)
