# specflow/api/catalog.py
"""
Approval catalog routes (public).
"""
from typing import Optional

from fastapi import APIRouter, Query

from specflow.api.errors import ok
from specflow.approvals.catalog import get_catalog
from specflow.core.exceptions import RequestValidationFailed


router = APIRouter(prefix="/api/catalog", tags=["Catalog"])


@router.get("/stacks")
async def list_stack_patterns():
    return ok({"patterns": [p.model_dump() for p in get_catalog().patterns]})


@router.get("/dependencies")
async def list_dependency_presets(platform: Optional[str] = Query(None)):
    catalog = get_catalog()
    if platform and platform not in catalog.presets:
        raise RequestValidationFailed(f"Unknown platform: {platform}", {"platform": platform})
    presets = catalog.presets_for(platform)
    return ok({"presets": {name: [p.model_dump() for p in items] for name, items in presets.items()}})
