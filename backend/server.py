"""THI CEO Overview - Metrics API Server"""
from fastapi import FastAPI, APIRouter, Depends, Query
from dotenv import load_dotenv
from starlette.middleware.cors import CORSMiddleware
import os
import logging
from pathlib import Path
from typing import Literal
from datetime import datetime, timezone

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

from crm_adapters import QuerySource, create_source  # noqa: E402
from ceo_metrics import compute_metrics, export_metrics  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="THI CEO Overview - Metrics API")
api_router = APIRouter(prefix="/api")

DateFilter = Literal["today", "week", "month"]


def get_query_source() -> QuerySource:
    """Zoho COQL source built from ZOHO_* env vars; not ready when no token is set."""
    return create_source("zoho")


# ============ CEO Metrics ============

@api_router.get("/ceo/metrics")
async def get_ceo_metrics(
    filter: DateFilter = Query("month"),
    source: QuerySource = Depends(get_query_source),
):
    if not source.is_ready:
        logger.warning("Zoho source not configured - returning empty snapshot")
    snapshot = await compute_metrics(source, filter)
    return snapshot.model_dump()


@api_router.get("/ceo/metrics/export")
async def export_ceo_metrics(
    filter: DateFilter = Query("month"),
    source: QuerySource = Depends(get_query_source),
):
    snapshot = await compute_metrics(source, filter)
    return export_metrics(snapshot)


# ============ Health Check ============

@api_router.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# Include router and add middleware
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)
