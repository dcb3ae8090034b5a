"""Scholarship rule store: one lazily created rule document."""
import logging
from datetime import datetime, timezone

from ..models.scholarship import (
    DEFAULT_MIN_ATTENDANCE,
    DEFAULT_MIN_MARKS,
    ScholarshipRule,
    ScholarshipRuleUpdate,
)

logger = logging.getLogger(__name__)

RULES_COLLECTION = "scholarship_rules"
RULE_ID = 1


def default_rule_document() -> dict:
    return {
        "id": RULE_ID,
        "min_marks": DEFAULT_MIN_MARKS,
        "min_attendance": DEFAULT_MIN_ATTENDANCE,
        "district_overrides": [],
        "updated_at": datetime.now(timezone.utc),
    }


class RuleStore:
    """Reads and merges the process-wide scholarship thresholds.

    Concurrent updates are last-write-wins: the merge is a plain
    read-modify-write without compare-and-swap.
    """

    def __init__(self, store):
        self.store = store

    async def get_rule(self) -> ScholarshipRule:
        doc = await self.store.get(RULES_COLLECTION, RULE_ID)
        if doc is None:
            # upsert so concurrent first reads leave a single rule document
            default = default_rule_document()
            if await self.store.insert_if_absent(RULES_COLLECTION, RULE_ID, default):
                logger.info("Created default scholarship rule (marks>=%s, attendance>=%s)",
                            default["min_marks"], default["min_attendance"])
            doc = await self.store.get(RULES_COLLECTION, RULE_ID)
        return ScholarshipRule(**doc)

    async def update_rule(self, patch: ScholarshipRuleUpdate) -> ScholarshipRule:
        current = await self.get_rule()
        changes = patch.model_dump(exclude_none=True)
        merged = current.model_copy(update={
            **{k: v for k, v in changes.items() if k != "district_overrides"},
            "updated_at": datetime.now(timezone.utc),
        })
        if patch.district_overrides is not None:
            merged.district_overrides = list(patch.district_overrides)

        doc = merged.model_dump()
        doc.pop("id")
        await self.store.update(RULES_COLLECTION, RULE_ID, doc)
        logger.info("Scholarship rule updated: %s", sorted(changes))
        return merged
