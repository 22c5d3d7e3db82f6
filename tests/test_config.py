"""Parser configuration loading and AI settings from the environment."""

import json

import pytest
from pydantic import ValidationError
from resume_structurer.core.config import (
    FALLBACK_SECTION_ALIASES,
    AISettings,
    ParserConfig,
    SectionKind,
    SectionSpec,
    load_parser_config,
    resolve_section_aliases,
)


def test_empty_alias_table_falls_back_to_builtin_headings():
    assert resolve_section_aliases(ParserConfig(sections={})) == FALLBACK_SECTION_ALIASES


def test_aliases_are_lowercased_and_collapsed():
    config = ParserConfig(sections={SectionKind.SKILLS: SectionSpec(aliases=["  Tech   STACK "])})
    aliases = resolve_section_aliases(config)
    assert aliases[SectionKind.SKILLS] == ("tech stack",)
    assert aliases[SectionKind.EDUCATION] == FALLBACK_SECTION_ALIASES[SectionKind.EDUCATION]


def test_default_weights_cover_every_section():
    config = ParserConfig()
    assert set(config.sections) == set(SectionKind)
    assert sum(spec.weight for spec in config.sections.values()) == 100


def test_threshold_out_of_range():
    with pytest.raises(ValidationError):
        ParserConfig(summary_similarity_threshold=5)


def test_load_parser_config_from_file(tmp_path):
    path = tmp_path / "parser.json"
    path.write_text(json.dumps({"summary_similarity_threshold": 0.8, "skill_keywords": ["rust"]}), encoding="utf-8")

    config = load_parser_config(str(path))
    assert config.summary_similarity_threshold == 0.8
    assert config.skill_keywords == ["rust"]
    assert config.job_title_keywords == ParserConfig().job_title_keywords


def test_load_parser_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "parser.json"
    path.write_text(json.dumps({"skill_max_length": 40}), encoding="utf-8")
    monkeypatch.setenv("RESUME_PARSER_CONFIG", str(path))
    assert load_parser_config().skill_max_length == 40


def test_load_parser_config_defaults(monkeypatch):
    monkeypatch.delenv("RESUME_PARSER_CONFIG", raising=False)
    assert load_parser_config() == ParserConfig()


def test_invalid_config_file_rejected(tmp_path):
    path = tmp_path / "parser.json"
    path.write_text(json.dumps({"summary_similarity_threshold": 5}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_parser_config(str(path))


def test_ai_settings_from_env(monkeypatch):
    monkeypatch.setenv("AI_API_KEY", "secret")
    monkeypatch.setenv("AI_MODEL", "gemini-test")
    monkeypatch.setenv("AI_TIMEOUT", "5")
    monkeypatch.setenv("AI_PARSING_ENABLED", "true")

    settings = AISettings.from_env()
    assert settings.api_key == "secret"
    assert settings.model == "gemini-test"
    assert settings.timeout == 5.0
    assert settings.is_configured


def test_ai_disabled_by_env(monkeypatch):
    monkeypatch.setenv("AI_API_KEY", "secret")
    monkeypatch.setenv("AI_PARSING_ENABLED", "no")
    assert not AISettings.from_env().is_configured
