import logging

import pytest

from text2quiz.config import IngestPipelineConfig, ServiceConfig


def test_defaults() -> None:
    config = IngestPipelineConfig()

    assert config.scan_min_chars == 50
    assert config.min_usable_chars == 10
    assert config.render_scale == 2.0
    assert config.max_chunk_chars == 2000
    assert config.ocr_language == "spa"


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TEXT2QUIZ_SCAN_MIN_CHARS", "80")
    monkeypatch.setenv("TEXT2QUIZ_RENDER_SCALE", "3")
    monkeypatch.setenv("TEXT2QUIZ_OCR_LANG", "spa+eng")
    monkeypatch.setenv("TEXT2QUIZ_MAX_OCR_WORKERS", "4")
    monkeypatch.setenv("TEXT2QUIZ_TESSDATA_DIR", " /usr/share/tessdata ")
    monkeypatch.setenv("TEXT2QUIZ_GENERATION_MAX_CHARS", "8000")

    config = IngestPipelineConfig.from_env()
    service = ServiceConfig.from_env()

    assert config.scan_min_chars == 80
    assert config.render_scale == 3.0
    assert config.ocr_language == "spa+eng"
    assert config.max_ocr_workers == 4
    assert config.tessdata_dir == "/usr/share/tessdata"
    assert service.generation_max_chars == 8000


def test_invalid_env_values_fall_back(monkeypatch, caplog) -> None:
    monkeypatch.setenv("TEXT2QUIZ_MAX_CHUNK_CHARS", "lots")
    monkeypatch.setenv("TEXT2QUIZ_RENDER_SCALE", "big")

    with caplog.at_level(logging.WARNING, logger="text2quiz.config"):
        config = IngestPipelineConfig.from_env()

    assert config.max_chunk_chars == 2000
    assert config.render_scale == 2.0
    assert "TEXT2QUIZ_MAX_CHUNK_CHARS" in caplog.text


@pytest.mark.parametrize(
    "overrides",
    [{"max_ocr_workers": 0}, {"render_scale": 0}, {"max_chunk_chars": 0}, {"scan_min_chars": -1}],
)
def test_invalid_values_are_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        IngestPipelineConfig(**overrides)


@pytest.mark.parametrize(
    ("name", "value", "field", "default"),
    [
        ("TEXT2QUIZ_MAX_OCR_WORKERS", "0", "max_ocr_workers", 2),
        ("TEXT2QUIZ_MAX_CHUNK_CHARS", "-10", "max_chunk_chars", 2000),
        ("TEXT2QUIZ_SCAN_MIN_CHARS", "-1", "scan_min_chars", 50),
        ("TEXT2QUIZ_RENDER_SCALE", "0", "render_scale", 2.0),
        ("TEXT2QUIZ_RENDER_SCALE", "nan", "render_scale", 2.0),
    ],
)
def test_out_of_range_env_values_fall_back(monkeypatch, caplog, name, value, field, default) -> None:
    monkeypatch.setenv(name, value)

    with caplog.at_level(logging.WARNING, logger="text2quiz.config"):
        config = IngestPipelineConfig.from_env()

    assert getattr(config, field) == default
    assert name in caplog.text


def test_service_config_rejects_non_positive_budget(monkeypatch) -> None:
    monkeypatch.setenv("TEXT2QUIZ_GENERATION_MAX_CHARS", "0")

    assert ServiceConfig.from_env().generation_max_chars == 6000
