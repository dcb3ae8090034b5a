from typing import Any, Dict, Iterable, List, Optional


def _ids(values: Optional[Iterable[Any]]) -> Optional[List[int]]:
    if values is None:
        return None
    return [int(v) for v in values]


def build_scope_match(
    district: Optional[str] = None,
    school_id: Optional[int] = None,
    school_ids: Optional[Iterable[int]] = None,
    student_id: Optional[int] = None,
    student_ids: Optional[Iterable[int]] = None,
) -> Dict[str, Any]:
    """
    Build a Mongo match dict for the drilldown scope:
    District -> School -> Student.

    Note: Collections are expected to store these fields as:
    - district (schools)
    - school_id (students, teachers, complaints)
    - student_id (attendance, blockchain_results)

    An explicit empty id list matches nothing.
    """
    conditions: List[Dict[str, Any]] = []

    if district:
        conditions.append({"district": district})

    if school_id is not None:
        conditions.append({"school_id": int(school_id)})
    school_vals = _ids(school_ids)
    if school_vals is not None:
        conditions.append({"school_id": {"$in": school_vals}})

    if student_id is not None:
        conditions.append({"student_id": int(student_id)})
    student_vals = _ids(student_ids)
    if student_vals is not None:
        conditions.append({"student_id": {"$in": student_vals}})

    if not conditions:
        return {}
    if len(conditions) == 1:
        return conditions[0]
    return {"$and": conditions}


def prepend_match(pipeline: list, match: Dict[str, Any]) -> list:
    """Prepend a $match stage when match is non-empty."""
    if not match:
        return pipeline
    return [{"$match": match}, *pipeline]
