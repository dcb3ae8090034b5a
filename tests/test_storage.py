"""Motor-backed document store"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument

from schoolhub.storage import MAX_DOCUMENTS, DocumentStore


@pytest.fixture
def collection():
    col = MagicMock()
    col.find_one = AsyncMock(return_value=None)
    col.insert_one = AsyncMock()
    col.find_one_and_update = AsyncMock()
    col.delete_one = AsyncMock()
    col.count_documents = AsyncMock(return_value=0)
    return col


@pytest.fixture
def document_store(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return DocumentStore(database)


def cursor_returning(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


async def test_insert_assigns_next_id(document_store, collection):
    collection.find_one.return_value = {"id": 4}

    record = await document_store.insert("schools", {"name": "A"})

    assert record == {"id": 5, "name": "A"}
    collection.find_one.assert_awaited_once_with({}, {"_id": 0, "id": 1}, sort=[("id", -1)])
    inserted = collection.insert_one.await_args.args[0]
    assert inserted == {"id": 5, "name": "A"}
    assert inserted is not record


async def test_insert_into_empty_collection_starts_at_one(document_store, collection):
    record = await document_store.insert("schools", {"name": "A"})
    assert record["id"] == 1


async def test_get_hides_mongo_id(document_store, collection):
    await document_store.get("schools", 3)
    collection.find_one.assert_awaited_once_with({"id": 3}, {"_id": 0})


async def test_find_with_projection_and_sort(document_store, collection):
    cursor = cursor_returning([{"id": 1}])
    collection.find.return_value = cursor

    docs = await document_store.find("schools", {"district": "Central"}, fields=["id"])

    assert docs == [{"id": 1}]
    collection.find.assert_called_once_with({"district": "Central"}, {"_id": 0, "id": 1})
    cursor.sort.assert_called_once_with([("id", 1)])
    cursor.to_list.assert_awaited_once_with(length=MAX_DOCUMENTS)


async def test_find_without_sort(document_store, collection):
    cursor = cursor_returning([])
    collection.find.return_value = cursor

    await document_store.find("attendance", sort=None)

    collection.find.assert_called_once_with({}, {"_id": 0})
    cursor.sort.assert_not_called()


async def test_update_returns_document_after_change(document_store, collection):
    collection.find_one_and_update.return_value = {"id": 2, "status": "resolved"}

    updated = await document_store.update("complaints", 2, {"status": "resolved"})

    assert updated == {"id": 2, "status": "resolved"}
    collection.find_one_and_update.assert_awaited_once_with(
        {"id": 2}, {"$set": {"status": "resolved"}},
        projection={"_id": 0}, return_document=ReturnDocument.AFTER,
    )


async def test_empty_update_reads_current_document(document_store, collection):
    collection.find_one.return_value = {"id": 2}

    assert await document_store.update("teachers", 2, {}) == {"id": 2}
    collection.find_one_and_update.assert_not_awaited()


async def test_delete_reports_whether_a_document_went(document_store, collection):
    collection.delete_one.return_value = MagicMock(deleted_count=1)
    assert await document_store.delete("schools", 1) is True

    collection.delete_one.return_value = MagicMock(deleted_count=0)
    assert await document_store.delete("schools", 1) is False


async def test_group_count(document_store, collection):
    collection.aggregate.return_value = cursor_returning([{"_id": 1, "count": 2}, {"_id": None, "count": 1}])

    counts = await document_store.group_count("complaints", "school_id", {"status": "pending"})

    assert counts == {1: 2, None: 1}
    pipeline = collection.aggregate.call_args.args[0]
    assert pipeline[0] == {"$match": {"status": "pending"}}
    assert pipeline[1] == {"$group": {"_id": "$school_id", "count": {"$sum": 1}}}


async def test_group_count_without_filter_has_no_match_stage(document_store, collection):
    collection.aggregate.return_value = cursor_returning([])

    await document_store.group_count("complaints", "school_id")

    pipeline = collection.aggregate.call_args.args[0]
    assert [list(stage) for stage in pipeline] == [["$group"]]


async def test_insert_if_absent_upserts_with_set_on_insert(document_store, collection):
    collection.update_one = AsyncMock(return_value=MagicMock(upserted_id="abc"))

    created = await document_store.insert_if_absent("scholarship_rules", 1, {"id": 1, "min_marks": 85})

    assert created is True
    collection.update_one.assert_awaited_once_with(
        {"id": 1}, {"$setOnInsert": {"min_marks": 85}}, upsert=True)


async def test_insert_if_absent_leaves_existing_document(document_store, collection):
    collection.update_one = AsyncMock(return_value=MagicMock(upserted_id=None))

    assert await document_store.insert_if_absent("scholarship_rules", 1, {"min_marks": 85}) is False
