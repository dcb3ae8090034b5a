"""Scholarship rule and eligibility routes"""
from typing import Optional

from fastapi import APIRouter, Query

from ..contract.routes import api
from ..models.scholarship import EvaluateRequest, ScholarshipRuleUpdate
from ..services.eligibility import ScholarshipEvaluator
from ..services.rules import RuleStore

router = APIRouter(tags=["Scholarship"])

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


@router.get(api.scholarship.rules.get.path, response_model=api.scholarship.rules.get.response_model)
async def get_rules():
    return await RuleStore(store).get_rule()


@router.put(api.scholarship.rules.update.path, response_model=api.scholarship.rules.update.response_model)
async def update_rules(patch: ScholarshipRuleUpdate):
    """Merge only the provided thresholds into the rule"""
    return await RuleStore(store).update_rule(patch)


@router.post(api.scholarship.evaluate.path, response_model=api.scholarship.evaluate.response_model)
async def evaluate(request: EvaluateRequest):
    """Evaluate one student; unknown students get an ineligible result, not a 404"""
    decision = await ScholarshipEvaluator(store).evaluate(request.student_id)
    return decision.as_response()


@router.get(api.scholarship.recommendations.path,
            response_model=api.scholarship.recommendations.response_model)
async def recommendations(district: Optional[str] = Query(None)):
    return await ScholarshipEvaluator(store).recommend(district)
