import json

import pytest

from sideloader.__main__ import main, read_records


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SIDELOADER_SCHEMA", raising=False)


def test_read_records_shapes(tmp_path):
    single = tmp_path / "single.json"
    single.write_text(json.dumps({"type": "Book", "id": 1}), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"records": [{"type": "Book", "id": 2}]}), encoding="utf-8")

    assert read_records(single) == [{"type": "Book", "id": 1}]
    assert read_records(wrapped) == [{"type": "Book", "id": 2}]


def test_cli_writes_document(tmp_path, schema_path):
    books = tmp_path / "books.json"
    books.write_text(json.dumps([{"type": "Book", "id": 1, "authorId": 2}]), encoding="utf-8")
    authors = tmp_path / "authors.json"
    authors.write_text(json.dumps({"type": "Author", "id": 2}), encoding="utf-8")
    output = tmp_path / "out" / "document.json"

    main([str(books), str(authors), "--schema", str(schema_path), "--output", str(output)])

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["authors"][0]["books"] == [1]
    assert document["books"][0]["authorId"] == 2


def test_cli_schema_from_environment(tmp_path, schema_path, monkeypatch, capsys):
    monkeypatch.setenv("SIDELOADER_SCHEMA", str(schema_path))
    posts = tmp_path / "posts.json"
    posts.write_text(json.dumps({"type": "Post", "id": 1, "tags": [5]}), encoding="utf-8")

    main([str(posts), "--indent", "0"])

    document = json.loads(capsys.readouterr().out)
    assert document["tags"][0]["posts"] == [1]


def test_cli_requires_schema(tmp_path, capsys):
    records = tmp_path / "records.json"
    records.write_text("[]", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(records)])
    assert excinfo.value.code == 1
    assert "Configuration error" in capsys.readouterr().err


def test_cli_reports_input_errors(tmp_path, schema_path):
    records = tmp_path / "records.json"
    records.write_text(json.dumps([{"type": "Book"}]), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(records), "--schema", str(schema_path)])
    assert excinfo.value.code == 2
