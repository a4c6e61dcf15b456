from pathlib import Path

from sideloader.config import Settings


def test_defaults(monkeypatch):
    for name in (
        "SIDELOADER_SCHEMA",
        "SIDELOADER_COERCE_IDS",
        "SIDELOADER_COERCE_SCALARS",
        "SIDELOADER_INDENT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.schema_path is None
    assert settings.coerce_ids is True
    assert settings.coerce_scalars is True
    assert settings.json_indent == 2
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SIDELOADER_SCHEMA", "schema.yaml")
    monkeypatch.setenv("SIDELOADER_COERCE_IDS", "off")
    monkeypatch.setenv("SIDELOADER_INDENT", "nope")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.schema_path == Path("schema.yaml")
    assert settings.coerce_ids is False
    assert settings.json_indent == 2
    assert settings.log_level == "DEBUG"
