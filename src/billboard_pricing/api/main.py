from datetime import date
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from billboard_pricing import __version__
from billboard_pricing.config.settings import get_settings
from billboard_pricing.engine import (
    BillboardAsset,
    CustomerInfo,
    CustomerType,
    PricingMode,
    get_package,
)
from billboard_pricing.logging_config import configure_logging
from billboard_pricing.services.pricing_service import PricingService
from billboard_pricing.api.state import get_service

configure_logging(get_settings().log_level)

app = FastAPI(
    title="Billboard Pricing API",
    description="Price resolution and quote generation for billboard rentals",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class BillboardIn(BaseModel):
    id: str
    name: str
    size: str
    municipality: str
    level: str
    status: str = ""
    location: str = ""
    image_url: Optional[str] = None

    def to_asset(self) -> BillboardAsset:
        return BillboardAsset(**self.model_dump())


class CalcRequest(BaseModel):
    billboards: List[BillboardIn]
    customer_type: CustomerType = CustomerType.STANDARD
    mode: PricingMode = PricingMode.PACKAGE
    start_date: date
    end_date: Optional[date] = None
    package: Optional[str] = None
    include_installation: bool = False


class QuoteRequest(CalcRequest):
    name: str
    email: str
    phone: str
    company: Optional[str] = None


class ImportRequest(BaseModel):
    csv: str


def _calculation_args(req: CalcRequest) -> dict:
    return {
        "billboards": [b.to_asset() for b in req.billboards],
        "mode": req.mode,
        "start_date": req.start_date,
        "end_date": req.end_date,
        "package": get_package(req.package) if req.package else None,
        "include_installation": req.include_installation,
    }


@app.get("/")
async def root():
    return {"status": "online", "message": "Billboard Pricing API Active"}


@app.get("/packages")
async def list_packages(service: PricingService = Depends(get_service)):
    return [
        {"key": p.key.value, "label": p.label, "duration": p.duration}
        for p in service.package_options()
    ]


@app.get("/pricing")
async def list_pricing(service: PricingService = Depends(get_service)) -> List[Dict]:
    return [row.to_dict() for row in service.price_table()]


@app.get("/pricing/export", response_class=PlainTextResponse)
async def export_pricing(service: PricingService = Depends(get_service)):
    return service.export_csv()


@app.post("/pricing/import")
async def import_pricing(req: ImportRequest, service: PricingService = Depends(get_service)):
    result = service.import_csv(req.csv)
    return {
        "success": result.success,
        "imported": result.imported,
        "errors": result.errors,
        "rejected": [
            {"line": r.line_number, "reason": r.reason, "raw": r.raw}
            for r in result.rejected
        ],
    }


@app.post("/pricing/refresh")
async def refresh_pricing(service: PricingService = Depends(get_service)):
    rows = service.refresh()
    return {"rows": len(rows)}


@app.post("/calculate")
async def calculate(req: CalcRequest, service: PricingService = Depends(get_service)):
    try:
        args = _calculation_args(req)
        calculations = service.calculate(customer_type=req.customer_type, **args)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    stats = service.campaign_stats(calculations)
    subtotal = sum(c.subtotal for c in calculations)
    total_installation = sum(c.installation_price for c in calculations)
    return {
        "calculations": [c.to_dict() for c in calculations],
        "summary": {
            "subtotal": subtotal,
            "totalInstallation": total_installation,
            "grandTotal": subtotal + total_installation,
        },
        "stats": {
            "totalBillboards": stats.total_billboards,
            "totalDays": stats.total_days,
            "averageDailyPrice": stats.average_daily_price,
            "bySize": stats.by_size,
            "byMunicipality": stats.by_municipality,
            "byLevel": stats.by_level,
        },
    }


@app.post("/quotes")
async def create_quote(req: QuoteRequest, service: PricingService = Depends(get_service)):
    customer = CustomerInfo(
        name=req.name,
        email=req.email,
        phone=req.phone,
        company=req.company,
        customer_type=req.customer_type,
    )
    try:
        quote = service.generate_quote(customer, **_calculation_args(req))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return quote.to_dict()


@app.get("/system/status")
async def get_status(service: PricingService = Depends(get_service)):
    settings = get_settings()
    table = service.price_table()
    return {
        "engine_active": True,
        "price_rows": len(table),
        "duplicate_rows": len(table.duplicates),
        "cache_ttl_seconds": service.cache.ttl_seconds,
        "store_path": str(settings.price_store_path),
    }
