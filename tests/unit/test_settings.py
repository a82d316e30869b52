import json

import pydantic
import pytest

from biorecords.core.constants import CsvSchema, DecodePolicy
from biorecords.core.settings import Settings, get_settings, load_settings


@pytest.fixture
def settings_path(tmp_path):
    path = tmp_path / "settings.json"
    values = {"policy": "lenient", "fasta_width": 80, "request_timeout": 5}
    path.write_text(json.dumps(values))
    return path


def test_default_settings(monkeypatch):
    monkeypatch.delenv("BIORECORDS_SETTINGS", raising=False)
    settings = get_settings()
    assert settings == Settings()
    assert settings.policy is DecodePolicy.STRICT
    assert settings.fasta_width == 60
    assert settings.text_width == 75
    assert settings.csv_chunksize == 1
    assert settings.csv_schema is CsvSchema.V2


def test_load_settings(settings_path):
    settings = load_settings(settings_path)
    assert settings.policy is DecodePolicy.LENIENT
    assert settings.fasta_width == 80
    assert settings.request_timeout == 5.0
    assert settings.text_width == 75


def test_get_settings_from_environment(monkeypatch, settings_path):
    monkeypatch.setenv("BIORECORDS_SETTINGS", str(settings_path))
    assert get_settings().policy is DecodePolicy.LENIENT
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "values",
    [{"policy": "permissive"}, {"fasta_width": 0}, {"compression_tolerance": -1.0}, {"csv_schema": "v3"}],
)
def test_invalid_settings(tmp_path, values):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(values))
    with pytest.raises(pydantic.ValidationError):
        load_settings(path)


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(pydantic.ValidationError):
        settings.fasta_width = 10
