from sideloader.assembler import assemble, unique


def test_unique_keeps_first_occurrence():
    assert unique([3, 1, 3, 2, 1]) == [3, 1, 2]
    assert unique([]) == []


def test_unique_handles_unhashable_values():
    assert unique([{"a": 1}, {"a": 1}, {"b": 2}]) == [{"a": 1}, {"b": 2}]


def test_assemble_groups_by_output_key(engine, store):
    engine.ingest([{"type": "Person", "id": 1, "name": "Ada"}, {"type": "Book", "id": 2}])

    document = assemble(store)

    assert set(document) == {"people", "books"}
    assert document["people"] == [{"id": 1, "type": "Person", "name": "Ada"}]


def test_assemble_dedups_without_touching_store(engine, store):
    payload = {"type": "Author", "id": 2, "books": [{"id": 1}, {"id": 3}, {"id": 1}]}
    engine.ingest(payload)
    engine.ingest(payload)

    document = assemble(store)

    assert document["authors"][0]["books"] == [1, 3]
    assert store.get("Author", 2)["books"] == [1, 3, 1, 1, 3, 1]


def test_assemble_preserves_store_order(engine, store):
    engine.ingest([{"type": "Book", "id": i} for i in (5, 2, 9)])

    assert [r["id"] for r in assemble(store)["books"]] == [5, 2, 9]
