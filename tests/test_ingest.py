"""Tests for merging nested records into the normalized store."""

from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from sideloader.errors import InvalidInput, MissingIdentity, SchemaMismatch
from sideloader.ingest import MergeEngine


def test_new_record_is_seeded_from_schema(engine, store):
    engine.ingest({"type": "Book", "id": 1, "title": "Dune", "authorId": 2, "extra": "x"})

    assert store.get("Book", 1) == {
        "id": 1,
        "type": "Book",
        "title": "Dune",
        "pages": None,
        "authorId": 2,
    }


def test_has_many_arrays_start_empty(engine, store):
    engine.ingest({"type": "Post", "id": 1, "title": "Hello"})

    post = store.get("Post", 1)
    assert post["tags"] == []
    assert post["comments"] == []


def test_nested_has_many_records_are_ingested(engine, store):
    engine.ingest(
        {
            "type": "Author",
            "id": 2,
            "name": "Frank",
            "books": [{"id": 1, "title": "Dune"}, {"type": "Book", "id": 3}],
        }
    )

    assert store.get("Author", 2)["books"] == [1, 3]
    assert store.get("Book", 1)["title"] == "Dune"
    assert store.get("Book", 3)["type"] == "Book"


def test_nested_belongs_to_sets_foreign_key(engine, store):
    engine.ingest({"type": "Book", "id": 1, "author": {"id": 2, "name": "Frank"}})

    assert store.get("Book", 1)["authorId"] == 2
    assert store.get("Author", 2)["name"] == "Frank"


def test_bare_belongs_to_id_does_not_create_stub(engine, store):
    engine.ingest({"type": "Book", "id": 1, "author": "9"})

    assert store.get("Book", 1)["authorId"] == 9
    assert not store.has("Author", 9)


def test_bare_has_many_ids_create_stubs(engine, store):
    engine.ingest({"type": "Post", "id": 1, "tags": [5, "6"]})

    assert store.get("Post", 1)["tags"] == [5, 6]
    assert store.get("Tag", 5) == {"id": 5, "type": "Tag", "label": None, "posts": []}
    assert store.has("Tag", 6)


def test_last_write_wins_for_scalars(engine, store):
    engine.ingest({"type": "Book", "id": 1, "title": "Draft", "pages": 100})
    engine.ingest({"type": "Book", "id": "1", "title": "Final"})

    book = store.get("Book", 1)
    assert book["title"] == "Final"
    assert book["pages"] == 100
    assert len(store) == 1


def test_scalars_are_coerced(engine, store):
    engine.ingest({"type": "Author", "id": 1, "born": "1920-10-08T00:00:00Z"})
    engine.ingest({"type": "Book", "id": 1, "pages": "412"})

    assert store.get("Author", 1)["born"] == "1920-10-08T00:00:00+00:00"
    assert store.get("Book", 1)["pages"] == 412


def test_coercion_can_be_disabled(store, registry):
    engine = MergeEngine(store, registry, coerce_ids=False, coerce_scalars=False)
    engine.ingest({"type": "Book", "id": "1", "pages": "412"})

    assert store.get("Book", "1")["pages"] == "412"
    assert not store.has("Book", 1)


def test_repeated_ingest_duplicates_until_assembly(engine, store):
    payload = {"type": "Author", "id": 2, "books": [{"id": 1}]}
    engine.ingest(payload)
    engine.ingest(payload)

    assert store.get("Author", 2)["books"] == [1, 1]


def test_cycles_through_shared_identity_terminate(engine, store):
    author = SimpleNamespace(type="Author", id=2, name="Frank", books=[])
    book = SimpleNamespace(type="Book", id=1, title="Dune", author=author)
    author.books.append(book)

    assert engine.ingest(author) == [2]
    assert store.get("Author", 2)["books"] == [1]
    assert store.get("Book", 1)["authorId"] == 2


def test_repeated_identity_in_one_batch_is_fully_expanded(engine, store):
    engine.ingest(
        [
            {"type": "Author", "id": 2, "books": [{"id": 1, "title": "Dune"}]},
            {"type": "Author", "id": 2, "books": [{"id": 3, "title": "Messiah"}]},
        ]
    )

    assert store.get("Author", 2)["books"] == [1, 3]
    assert store.get("Book", 3)["title"] == "Messiah"


def test_foreign_keys_are_last_write_wins_within_a_batch(engine, store):
    engine.ingest(
        [
            {"type": "Book", "id": 1, "authorId": 2},
            {"type": "Book", "id": 1, "authorId": 3},
        ]
    )

    assert store.get("Book", 1)["authorId"] == 3


def test_pydantic_models_are_accepted(engine, store):
    class BookModel(BaseModel):
        type: str = "Book"
        id: int
        title: str

    engine.ingest([BookModel(id=1, title="Dune"), BookModel(id=2, title="Emma")])

    assert store.get("Book", 2)["title"] == "Emma"


def test_class_name_used_as_type_tag(engine, store):
    class Tag:
        def __init__(self, id, label):
            self.id = id
            self.label = label

    engine.ingest(Tag(4, "python"))

    assert store.get("Tag", 4)["label"] == "python"


def test_none_is_invalid_input(engine, store):
    with pytest.raises(InvalidInput):
        engine.ingest(None)
    assert len(store) == 0


def test_scalar_input_is_invalid(engine):
    with pytest.raises(InvalidInput):
        engine.ingest(42)


def test_missing_id_fails_before_mutation(engine, store):
    with pytest.raises(MissingIdentity):
        engine.ingest([{"type": "Book", "id": 1}, {"type": "Book", "title": "no id"}])
    assert len(store) == 0


def test_missing_type_raises(engine):
    with pytest.raises(MissingIdentity):
        engine.ingest({"id": 1})


def test_unknown_type_raises(engine):
    with pytest.raises(SchemaMismatch):
        engine.ingest({"type": "Ghost", "id": 1})


def test_nested_type_must_match_association(engine):
    with pytest.raises(SchemaMismatch):
        engine.ingest({"type": "Author", "id": 1, "books": [{"type": "Tag", "id": 1}]})


def test_has_many_value_must_be_a_list(engine):
    with pytest.raises(SchemaMismatch):
        engine.ingest({"type": "Post", "id": 1, "tags": 5})
