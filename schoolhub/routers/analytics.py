"""Dashboard and analytics routes"""
from typing import Optional

from fastapi import APIRouter, Query

from ..contract.routes import api
from ..services.aggregation import AggregationReporter
from ..services.trends import student_trends

router = APIRouter(tags=["Analytics"])

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.dashboard.analytics.path, response_model=api.dashboard.analytics.response_model)
async def dashboard_analytics():
    """Headline counts plus the per-district rollup"""
    return await AggregationReporter(store).dashboard()


@router.get(api.analytics.schools.path, response_model=api.analytics.schools.response_model)
async def schools_analytics(district: Optional[str] = Query(None)):
    return await AggregationReporter(store).schools_summary(district)


@router.get(api.analytics.teacher_shortages.path,
            response_model=api.analytics.teacher_shortages.response_model)
async def teacher_shortages(district: Optional[str] = Query(None)):
    return await AggregationReporter(store).teacher_shortages(district)


@router.get(api.analytics.districts.path, response_model=api.analytics.districts.response_model)
async def district_summary():
    return await AggregationReporter(store).district_summary()


@router.get(api.analytics.student_trends.path, response_model=api.analytics.student_trends.response_model)
async def trends(district: Optional[str] = Query(None)):
    return await student_trends(store, district)
