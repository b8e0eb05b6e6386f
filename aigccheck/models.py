"""Core data model: rule results, scores, suggestions and detection results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


class RuleType(str, Enum):
    """Identifier of a detection rule (one per signal)."""

    HIGH_FREQ_WORDS = "high_frequency_words"
    SENTENCE_STARTERS = "sentence_starters"
    FALSE_RANGE = "false_range"
    CITATION_ANOMALY = "citation_anomaly"
    EM_DASH = "em_dash_density"
    MARKDOWN = "markdown_residue"
    EMOJI = "emoji_anomaly"
    KNOWLEDGE_CUTOFF = "knowledge_cutoff"
    COLLABORATIVE = "collaborative_tone"
    PERFECTIONISM = "perfectionism"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class RiskLevel(str, Enum):
    VERY_HIGH = "very_high"  # 0-40
    HIGH = "high"  # 41-60
    MEDIUM = "medium"  # 61-75
    LOW = "low"  # 76-100

    def description(self) -> str:
        """Human-readable description of the risk level."""
        return _RISK_DESCRIPTIONS.get(self, "未知风险")


_RISK_DESCRIPTIONS = {
    RiskLevel.VERY_HIGH: "极高风险 - 极可能为AI生成内容",
    RiskLevel.HIGH: "高风险 - 很可能为AI生成内容",
    RiskLevel.MEDIUM: "中等风险 - 可能包含AI生成内容",
    RiskLevel.LOW: "低风险 - 可能为人类编写",
}


class SuggestionCategory(str, Enum):
    VOCABULARY = "vocabulary"
    SENTENCE = "sentence"
    TONE = "tone"
    STRUCTURE = "structure"
    AUTHENTICITY = "authenticity"
    FORMATTING = "formatting"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class Position:
    """Location of a match: line and column start at 1, offset at 0."""

    line: int = 0
    column: int = 0
    offset: int = 0
    length: int = 0


@dataclass
class Match:
    text: str = ""
    position: Position = field(default_factory=Position)
    context: str = ""
    reason: str = ""


@dataclass
class RuleResult:
    rule_type: RuleType | str = ""
    rule_name: str = ""
    description: str = ""
    detected: bool = False
    score: float = 0.0
    severity: Severity | str = ""
    matches: list[Match] = field(default_factory=list)
    count: int = 0
    threshold: int = 0
    message: str = ""


class Rule(ABC):
    """A detection rule applied to a piece of text."""

    @property
    @abstractmethod
    def rule_type(self) -> RuleType:
        """The type identifying this rule."""

    @property
    def name(self) -> str:
        return get_rule_type_name(self.rule_type)

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def check(self, text: str) -> RuleResult:
        """Run the rule against ``text``."""


@dataclass
class DetectionOptions:
    enabled_rules: list[str] = field(default_factory=list)
    language: str = ""
    output_format: str = ""


@dataclass
class DetectionRequest:
    text: str = ""
    options: DetectionOptions = field(default_factory=DetectionOptions)
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class DimensionScore:
    score: float = 0.0
    max_score: float = 0.0
    percentage: float = 0.0
    level: str = ""
    description: str = ""
    issues: list[str] = field(default_factory=list)


@dataclass
class DimensionScores:
    vocabulary_diversity: DimensionScore = field(default_factory=DimensionScore)
    sentence_complexity: DimensionScore = field(default_factory=DimensionScore)
    personalization: DimensionScore = field(default_factory=DimensionScore)
    logical_coherence: DimensionScore = field(default_factory=DimensionScore)
    emotional_authenticity: DimensionScore = field(default_factory=DimensionScore)


@dataclass
class DimensionWeights:
    vocabulary_diversity: float = 20.0
    sentence_complexity: float = 15.0
    personalization: float = 25.0
    logical_coherence: float = 20.0
    emotional_authenticity: float = 20.0


@dataclass
class Score:
    total: float = 0.0
    dimensions: DimensionScores = field(default_factory=DimensionScores)
    breakdown: dict[str, float] = field(default_factory=dict)


@dataclass
class Example:
    before: str
    after: str
    reason: str = ""


@dataclass
class Suggestion:
    category: SuggestionCategory | str = ""
    priority: Priority | str = ""
    title: str = ""
    description: str = ""
    examples: list[Example] = field(default_factory=list)
    related_rule: RuleType | str = ""

    def add_example(self, before: str, after: str, reason: str) -> None:
        """Append a before/after example."""
        self.examples.append(Example(before, after, reason))


@dataclass
class DetectionResult:
    request_id: str = ""
    text: str = ""
    score: Score = field(default_factory=Score)
    rule_results: list[RuleResult] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.VERY_HIGH
    process_time: timedelta = timedelta(0)
    detected_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dictionary; process_time is in nanoseconds."""
        return _to_json_value(self)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_json_value(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, timedelta):
        return (value.days * 86_400 + value.seconds) * 1_000_000_000 + value.microseconds * 1_000
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def get_risk_level(score: float) -> RiskLevel:
    """Map a 0-100 score to a risk level."""
    if score <= 40:
        return RiskLevel.VERY_HIGH
    if score <= 60:
        return RiskLevel.HIGH
    if score <= 75:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


_RULE_TYPE_NAMES = {
    RuleType.HIGH_FREQ_WORDS: "高频词汇检测",
    RuleType.SENTENCE_STARTERS: "句式开头检测",
    RuleType.FALSE_RANGE: "虚假范围表达",
    RuleType.CITATION_ANOMALY: "引用异常检测",
    RuleType.EM_DASH: "破折号密度",
    RuleType.MARKDOWN: "Markdown残留",
    RuleType.EMOJI: "表情符号异常",
    RuleType.KNOWLEDGE_CUTOFF: "知识截止日期",
    RuleType.COLLABORATIVE: "协作式语气",
    RuleType.PERFECTIONISM: "完美主义陷阱",
}


def _lookup(table: dict, enum_cls: type[Enum], key: Any) -> str:
    try:
        member = enum_cls(key)
    except ValueError:
        return str(key)
    return table.get(member, member.value)


def get_rule_type_name(rule_type: RuleType | str) -> str:
    """Display name of a rule type; unknown types are returned unchanged."""
    return _lookup(_RULE_TYPE_NAMES, RuleType, rule_type)


def get_all_rule_types() -> list[RuleType]:
    """All rule types in signal order."""
    return list(RuleType)


def get_level(percentage: float) -> str:
    """Grade label for a percentage."""
    if percentage >= 90:
        return "优秀"
    if percentage >= 75:
        return "良好"
    if percentage >= 60:
        return "一般"
    return "较差"


def calculate_percentage(score: float, max_score: float) -> float:
    """Score as a percentage of max_score; 0 when max_score is 0."""
    if max_score == 0:
        return 0.0
    return score / max_score * 100


def new_dimension_score(
    score: float, max_score: float, issues: list[str] | None, description: str
) -> DimensionScore:
    """Build a dimension score with percentage and level filled in."""
    percentage = calculate_percentage(score, max_score)
    return DimensionScore(
        score=score,
        max_score=max_score,
        percentage=percentage,
        level=get_level(percentage),
        description=description,
        issues=list(issues) if issues else [],
    )


def new_suggestion(
    category: SuggestionCategory | str,
    priority: Priority | str,
    title: str,
    description: str,
    related_rule: RuleType | str,
) -> Suggestion:
    """Build a suggestion with no examples."""
    return Suggestion(
        category=category,
        priority=priority,
        title=title,
        description=description,
        examples=[],
        related_rule=related_rule,
    )


_CATEGORY_NAMES = {
    SuggestionCategory.VOCABULARY: "词汇改进",
    SuggestionCategory.SENTENCE: "句式改进",
    SuggestionCategory.TONE: "语气调整",
    SuggestionCategory.STRUCTURE: "结构优化",
    SuggestionCategory.AUTHENTICITY: "真实性提升",
    SuggestionCategory.FORMATTING: "格式清理",
}

_PRIORITY_NAMES = {
    Priority.HIGH: "高",
    Priority.MEDIUM: "中",
    Priority.LOW: "低",
}


def get_category_name(category: SuggestionCategory | str) -> str:
    """Display name of a suggestion category; unknown values pass through."""
    return _lookup(_CATEGORY_NAMES, SuggestionCategory, category)


def get_priority_name(priority: Priority | str) -> str:
    """Display name of a priority; unknown values pass through."""
    return _lookup(_PRIORITY_NAMES, Priority, priority)