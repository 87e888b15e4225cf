import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import estate_engine, Base
from shared.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware

from .models.owners import owners, shops
from .models.leasing_tenants import tenants, leases, rent_adjustments
from .models.financials import rent_invoices, payments, ledger_transfers, expenses, bank_deposits
from .models.common import deletion_logs

from .router.owners import owners_router, shops_router, common_share_router
from .router.leasing_tenants import leases_router, tenants_router
from .router.financials import payments_router, expenses_router, bank_deposits_router
from .router.common import admin_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Estate Billing Service API")

# Create all tables
Base.metadata.create_all(bind=estate_engine)

origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(JsonResponseMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(owners_router.router)
app.include_router(shops_router.router)
app.include_router(common_share_router.router)
app.include_router(tenants_router.router)
app.include_router(leases_router.router)
app.include_router(payments_router.router)
app.include_router(expenses_router.router)
app.include_router(bank_deposits_router.router)
app.include_router(admin_router.router)


@app.get("/")
def root():
    return {"message": "Estate Billing Service running"}
