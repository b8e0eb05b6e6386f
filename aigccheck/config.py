"""Application configuration: rule thresholds, scoring, output and layer settings."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from aigccheck.gemini_config import GeminiConfig
from aigccheck.models import DimensionWeights, RuleType, Severity
from aigccheck.multimodal import MultimodalConfig


@dataclass
class HighFreqWordsThresholds:
    keywords: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class SentenceStartersThresholds:
    patterns: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class FalseRangeThresholds:
    patterns: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class CitationAnomalyThresholds:
    utm_patterns: list[str] = field(default_factory=list)
    ghost_markers: list[str] = field(default_factory=list)
    placeholder_dates: list[str] = field(default_factory=list)


@dataclass
class MarkdownThresholds:
    patterns: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class EmojiThresholds:
    threshold: int = 0


@dataclass
class KnowledgeCutoffThresholds:
    phrases: list[str] = field(default_factory=list)


@dataclass
class CollaborativeThresholds:
    phrases: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class PerfectionismThresholds:
    first_person_pronouns: list[str] = field(default_factory=list)
    emotional_words: list[str] = field(default_factory=list)
    uncertainty_markers: list[str] = field(default_factory=list)
    threshold: int = 0


@dataclass
class Thresholds:
    """Per-signal detection thresholds; em_dash_density is dashes per thousand characters."""

    high_frequency_words: HighFreqWordsThresholds = field(default_factory=HighFreqWordsThresholds)
    sentence_starters: SentenceStartersThresholds = field(default_factory=SentenceStartersThresholds)
    false_range: FalseRangeThresholds = field(default_factory=FalseRangeThresholds)
    citation_anomaly: CitationAnomalyThresholds = field(default_factory=CitationAnomalyThresholds)
    em_dash_density: float = 0.0
    markdown_residue: MarkdownThresholds = field(default_factory=MarkdownThresholds)
    emoji_anomaly: EmojiThresholds = field(default_factory=EmojiThresholds)
    knowledge_cutoff: KnowledgeCutoffThresholds = field(default_factory=KnowledgeCutoffThresholds)
    collaborative_tone: CollaborativeThresholds = field(default_factory=CollaborativeThresholds)
    perfectionism: PerfectionismThresholds = field(default_factory=PerfectionismThresholds)


@dataclass
class ScoringConfig:
    weights: DimensionWeights = field(default_factory=DimensionWeights)


@dataclass
class OutputConfig:
    default_format: str = ""
    language: str = ""
    verbose: bool = False
    color_enabled: bool = False


@dataclass
class RuleConfig:
    enabled: bool = False
    threshold: int = 0
    severity: Severity | str = ""
    options: dict[str, Any] = field(default_factory=dict)


def _rule_key(rule_type: RuleType | str) -> str:
    return getattr(rule_type, "value", rule_type)


@dataclass
class Config:
    """Complete application configuration."""

    thresholds: Thresholds = field(default_factory=Thresholds)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    rules: dict[str, RuleConfig] = field(default_factory=dict)
    multimodal: MultimodalConfig = field(default_factory=MultimodalConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)

    def get_rule_config(self, rule_type: RuleType | str) -> RuleConfig:
        """Settings for a rule; an enabled medium rule with threshold 1 if unset."""
        rule = self.rules.get(_rule_key(rule_type))
        if rule is not None:
            return rule
        return RuleConfig(enabled=True, threshold=1, severity=Severity.MEDIUM)

    def is_rule_enabled(self, rule_type: RuleType | str) -> bool:
        return self.get_rule_config(rule_type).enabled

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping with the YAML key names; durations are in seconds."""
        return _to_plain(self)


def _phrase(*words: str) -> str:
    return " ".join(words)


def default_thresholds() -> Thresholds:
    """A fresh copy of the default thresholds."""
    return Thresholds(
        high_frequency_words=HighFreqWordsThresholds(
            keywords=[
                "crucial", "pivotal", "vital", "groundbreaking",
                "revolutionary", "profound", "significant",
                "关键", "至关重要", "革命性", "突破性",
            ],
            threshold=3,
        ),
        sentence_starters=SentenceStartersThresholds(
            patterns=["Additionally", "Furthermore", "Moreover", "此外", "另外", "而且"],
            threshold=5,
        ),
        false_range=FalseRangeThresholds(patterns=["from .+ to .+", "从.+到.+"], threshold=2),
        citation_anomaly=CitationAnomalyThresholds(
            utm_patterns=["utm_source=chatgpt.com", "utm_source=openai"],
            ghost_markers=["contentReference[oaicite:", "[oai_citation:", "turn0search"],
            placeholder_dates=["2025-XX-XX", "YYYY-MM-DD", "20XX"],
        ),
        em_dash_density=5.0,
        markdown_residue=MarkdownThresholds(
            patterns=["##", "**", "[.+]\\(.+\\)", "```"], threshold=3
        ),
        emoji_anomaly=EmojiThresholds(threshold=5),
        knowledge_cutoff=KnowledgeCutoffThresholds(
            phrases=[
                "As of my last knowledge update",
                "As of my training data",
                "截至我的知识更新",
                "根据我的训练数据",
            ]
        ),
        collaborative_tone=CollaborativeThresholds(
            phrases=[
                _phrase("I", "hope", "this", "helps"),
                _phrase("Let", "me", "know", "if"),
                _phrase("Feel", "free", "to"),
                "希望这能帮到你", "如果需要", "随时告诉我",
            ],
            threshold=3,
        ),
        perfectionism=PerfectionismThresholds(
            first_person_pronouns=["I", "me", "my", "mine", "我", "我的"],
            emotional_words=["feel", "think", "believe", "hope", "感觉", "认为", "相信", "希望"],
            uncertainty_markers=["might", "maybe", "perhaps", "possibly", "可能", "也许", "或许"],
            threshold=5,
        ),
    )


_DEFAULT_RULES = (
    (RuleType.HIGH_FREQ_WORDS, 3, Severity.HIGH),
    (RuleType.SENTENCE_STARTERS, 5, Severity.HIGH),
    (RuleType.FALSE_RANGE, 2, Severity.MEDIUM),
    (RuleType.CITATION_ANOMALY, 1, Severity.CRITICAL),
    (RuleType.EM_DASH, 5, Severity.MEDIUM),
    (RuleType.MARKDOWN, 3, Severity.HIGH),
    (RuleType.EMOJI, 5, Severity.MEDIUM),
    (RuleType.KNOWLEDGE_CUTOFF, 1, Severity.CRITICAL),
    (RuleType.COLLABORATIVE, 3, Severity.HIGH),
    (RuleType.PERFECTIONISM, 5, Severity.HIGH),
)


def _default_rules() -> dict[str, RuleConfig]:
    return {
        rule_type.value: RuleConfig(enabled=True, threshold=threshold, severity=severity)
        for rule_type, threshold, severity in _DEFAULT_RULES
    }


def default_config() -> Config:
    """A fresh copy of the default configuration."""
    return Config(
        thresholds=default_thresholds(),
        scoring=ScoringConfig(weights=DimensionWeights()),
        output=OutputConfig(
            default_format="text", language="zh", verbose=False, color_enabled=True
        ),
        rules=_default_rules(),
        multimodal=MultimodalConfig(),
        gemini=GeminiConfig(),
    )


def load_config(path: str | os.PathLike[str]) -> Config:
    """Load a YAML config file; a missing file yields the default configuration.

    Raises OSError when the file cannot be read, yaml.YAMLError on malformed
    YAML and ValueError when the document does not fit the configuration.
    """
    path = Path(path)
    if not path.exists():
        return default_config()
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    config = _build(Config(), {} if data is None else data, "config")
    merge_with_defaults(config)
    return config


def save_config(config: Config, path: str | os.PathLike[str]) -> None:
    """Write the configuration to a YAML file."""
    text = yaml.safe_dump(config.to_dict(), allow_unicode=True, sort_keys=False)
    Path(path).write_text(text, encoding="utf-8")


def merge_with_defaults(config: Config) -> None:
    """Fill in missing rules and output settings; apply GEMINI_API_KEY."""
    if config.rules is None:
        config.rules = {}
    for key, rule in _default_rules().items():
        config.rules.setdefault(key, rule)
    defaults = default_config().output
    if not config.output.default_format:
        config.output.default_format = defaults.default_format
    if not config.output.language:
        config.output.language = defaults.language
    api_key = os.environ.get("GEMINI_API_KEY", "")
    if api_key:
        config.gemini.api_key = api_key


_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9, "us": 1e-6, "µs": 1e-6, "μs": 1e-6,
    "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0,
}

# Fields whose value cannot be inferred from a default instance.
_ENUM_FIELDS: dict[tuple[type, str], type[Enum]] = {(RuleConfig, "severity"): Severity}
_MAPPING_VALUES: dict[tuple[type, str], type] = {(Config, "rules"): RuleConfig}


def _parse_duration(text: str) -> float:
    s = text.strip()
    sign = 1.0
    if s and s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    if s == "0":
        return 0.0
    if not s:
        raise ValueError(f"invalid duration {text!r}")
    total = 0.0
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        if m is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(m[1]) * _DURATION_UNITS[m[2]]
        pos = m.end()
    return sign * total


def _build(template: Any, data: Any, where: str) -> Any:
    """Overlay a mapping onto a default dataclass instance, converting each value."""
    if not isinstance(data, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(data).__name__}")
    cls = type(template)
    changes = {}
    for f in fields(template):
        if not f.init:
            continue
        value = data.get(f.name)
        if value is None:
            continue
        path = f"{where}.{f.name}"
        key = (cls, f.name)
        if key in _ENUM_FIELDS:
            changes[f.name] = _enum_or_str(_ENUM_FIELDS[key], value, path)
        elif key in _MAPPING_VALUES:
            if not isinstance(value, dict):
                raise ValueError(f"{path}: expected a mapping")
            item_cls = _MAPPING_VALUES[key]
            changes[f.name] = {
                str(k): _build(item_cls(), v, f"{path}.{k}") for k, v in value.items()
            }
        else:
            changes[f.name] = _convert(getattr(template, f.name), value, path)
    return replace(template, **changes)


def _enum_or_str(enum_cls: type[Enum], value: Any, where: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return _convert("", value, where)


def _convert(current: Any, value: Any, where: str) -> Any:
    if isinstance(current, Enum):
        try:
            return type(current)(value)
        except ValueError as exc:
            raise ValueError(f"{where}: {exc}") from exc
    if is_dataclass(current) and not isinstance(current, type):
        return _build(current, value, where)
    if isinstance(current, bool):
        if not isinstance(value, bool):
            raise ValueError(f"{where}: expected a boolean")
        return value
    if isinstance(current, int):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where}: expected an integer")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{where}: expected an integer")
        return int(value)
    if isinstance(current, float):
        if isinstance(value, str):
            return _parse_duration(value)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where}: expected a number")
        return float(value)
    if isinstance(current, str):
        if isinstance(value, (list, dict)):
            raise ValueError(f"{where}: expected a string")
        return str(value)
    if isinstance(current, list):
        if not isinstance(value, list):
            raise ValueError(f"{where}: expected a list")
        item = current[0] if current else ""
        return [_convert(item, v, f"{where}[{i}]") for i, v in enumerate(value)]
    if isinstance(current, dict):
        if not isinstance(value, dict):
            raise ValueError(f"{where}: expected a mapping")
        return {str(k): v for k, v in value.items()}
    return value


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value