import pytest
import yaml

from aigccheck.config import (
    Config,
    OutputConfig,
    RuleConfig,
    default_config,
    default_thresholds,
    load_config,
    merge_with_defaults,
    save_config,
)
from aigccheck.models import RuleType, Severity


@pytest.fixture(autouse=True)
def _no_api_key_env(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


def test_load_config_non_existent_file(tmp_path):
    cfg = load_config(tmp_path / "non" / "existent" / "config.yaml")
    assert cfg.output.default_format == "text"
    assert cfg.output.language == "zh"


def test_load_config_valid_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
output:
  default_format: "json"
  language: "en"
  verbose: true
  color_enabled: false
""",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.output.default_format == "json"
    assert cfg.output.language == "en"
    assert cfg.output.verbose is True
    assert cfg.output.color_enabled is False


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text("invalid: yaml: content:", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_load_config_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_load_config_wrong_field_type(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("output:\n  verbose: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_save_config_round_trip(tmp_path):
    path = tmp_path / "save_test.yaml"
    cfg = Config(output=OutputConfig(default_format="json", language="en", verbose=True))
    save_config(cfg, path)
    assert path.exists()
    loaded = load_config(path)
    assert loaded.output.default_format == "json"
    assert loaded.output.language == "en"
    assert loaded.output.verbose is True


def test_save_default_config_round_trip(tmp_path):
    path = tmp_path / "defaults.yaml"
    save_config(default_config(), path)
    assert load_config(path) == default_config()


def test_get_rule_config_defaults():
    cfg = default_config()
    for rule_type in (
        RuleType.HIGH_FREQ_WORDS,
        RuleType.SENTENCE_STARTERS,
        RuleType.CITATION_ANOMALY,
        RuleType.KNOWLEDGE_CUTOFF,
    ):
        assert cfg.get_rule_config(rule_type).enabled is True


def test_get_rule_config_values():
    cfg = default_config()
    rule = cfg.get_rule_config(RuleType.CITATION_ANOMALY)
    assert rule.threshold == 1
    assert rule.severity == Severity.CRITICAL
    assert cfg.get_rule_config("sentence_starters").threshold == 5


def test_get_rule_config_not_exists():
    cfg = Config(rules={})
    rule = cfg.get_rule_config(RuleType.HIGH_FREQ_WORDS)
    assert rule.enabled is True
    assert rule.threshold == 1
    assert rule.severity == Severity.MEDIUM


def test_is_rule_enabled():
    cfg = Config(
        rules={
            RuleType.HIGH_FREQ_WORDS.value: RuleConfig(enabled=True),
            RuleType.SENTENCE_STARTERS.value: RuleConfig(enabled=False),
        }
    )
    assert cfg.is_rule_enabled(RuleType.HIGH_FREQ_WORDS) is True
    assert cfg.is_rule_enabled(RuleType.SENTENCE_STARTERS) is False


def test_merge_with_defaults():
    cfg = Config(rules=None, output=OutputConfig(default_format="", language=""))
    merge_with_defaults(cfg)
    assert cfg.rules is not None and len(cfg.rules) == 10
    assert cfg.output.default_format == "text"
    assert cfg.output.language == "zh"


def test_merge_keeps_existing_rules():
    cfg = Config(rules={RuleType.EMOJI.value: RuleConfig(enabled=False, threshold=9)})
    merge_with_defaults(cfg)
    assert cfg.rules[RuleType.EMOJI.value].threshold == 9
    assert cfg.rules[RuleType.EMOJI.value].enabled is False
    assert cfg.rules[RuleType.MARKDOWN.value].threshold == 3


def test_merge_applies_env_api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "placeholder")
    cfg = Config()
    merge_with_defaults(cfg)
    assert cfg.gemini.api_key == "placeholder"


def test_default_config_all_rules_present():
    cfg = default_config()
    assert set(cfg.rules) == {rule_type.value for rule_type in RuleType}


def test_load_partial_rules_filled_from_defaults(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "rules:\n  high_frequency_words:\n    enabled: false\n    threshold: 7\n    severity: low\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    rule = cfg.get_rule_config(RuleType.HIGH_FREQ_WORDS)
    assert rule.enabled is False
    assert rule.threshold == 7
    assert rule.severity == Severity.LOW
    assert cfg.get_rule_config(RuleType.PERFECTIONISM).threshold == 5


def test_load_gemini_durations(tmp_path):
    path = tmp_path / "gemini.yaml"
    path.write_text(
        "gemini:\n  enabled: true\n  timeout: 45s\n  retry:\n    initial_backoff: 1m30s\n"
        "    max_backoff: 500ms\n  cache:\n    ttl: 2h\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.gemini.enabled is True
    assert cfg.gemini.timeout == 45.0
    assert cfg.gemini.retry.initial_backoff == 90.0
    assert cfg.gemini.retry.max_backoff == pytest.approx(0.5)
    assert cfg.gemini.cache.ttl == 7200.0


def test_load_invalid_duration(tmp_path):
    path = tmp_path / "gemini.yaml"
    path.write_text("gemini:\n  timeout: soon\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_default_thresholds_values():
    thresholds = default_thresholds()
    assert thresholds.high_frequency_words.threshold == 3
    assert "crucial" in thresholds.high_frequency_words.keywords
    assert thresholds.em_dash_density == 5.0
    assert thresholds.citation_anomaly.utm_patterns == [
        "utm_source=chatgpt.com",
        "utm_source=openai",
    ]
    assert thresholds.perfectionism.threshold == 5


def test_to_dict_uses_plain_values():
    data = default_config().to_dict()
    assert data["rules"]["citation_anomaly"]["severity"] == "critical"
    assert data["output"]["color_enabled"] is True
    assert data["thresholds"]["emoji_anomaly"]["threshold"] == 5