"""Layered (rule / statistics / semantic) detection settings and score fusion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class LayerWeights:
    """Relative weight of each detection layer."""

    rule_layer: float = 0.4
    statistics_layer: float = 0.3
    semantic_layer: float = 0.3

    @property
    def total(self) -> float:
        return self.rule_layer + self.statistics_layer + self.semantic_layer


TWO_LAYER_WEIGHTS = LayerWeights(rule_layer=0.55, statistics_layer=0.45, semantic_layer=0.0)
RULE_ONLY_WEIGHTS = LayerWeights(rule_layer=1.0, statistics_layer=0.0, semantic_layer=0.0)


class DetectionMode(str, Enum):
    RULE_ONLY = "rule_only"
    RULE_STATISTICS = "rule_statistics"
    MULTIMODAL = "multimodal"


@dataclass
class RuleLayerDetails:
    detected_rules_count: int = 0
    total_rules_count: int = 0
    red_flag_count: int = 0
    main_issues: list[str] = field(default_factory=list)


@dataclass
class StatisticsLayerDetails:
    type_token_ratio: float = 0.0
    vocabulary_richness: float = 0.0
    sentence_length_variance: float = 0.0
    sentence_complexity: float = 0.0
    perplexity_score: float = 0.0
    ai_probability: float = 0.0
    details: list[str] = field(default_factory=list)


@dataclass
class SemanticLayerDetails:
    coherence_score: float = 0.0
    personalization_score: float = 0.0
    ai_pattern_score: float = 0.0
    detected_features: list[str] = field(default_factory=list)
    explanation: str = ""
    from_cache: bool = False


@dataclass
class ConfidenceThresholds:
    """High: accept directly; medium: verify with statistics; low: needs LLM analysis."""

    high: float = 0.85
    medium: float = 0.60
    low: float = 0.40


@dataclass
class MultimodalConfig:
    enabled: bool = False
    enable_statistics: bool = True
    enable_semantic: bool = False
    weights: LayerWeights = field(default_factory=LayerWeights)
    confidence_thresholds: ConfidenceThresholds = field(default_factory=ConfidenceThresholds)
    tiered_trigger: bool = True

    def detection_mode(self) -> DetectionMode:
        """Detection mode implied by the enabled layers."""
        if not self.enabled:
            return DetectionMode.RULE_ONLY
        if self.enable_semantic:
            return DetectionMode.MULTIMODAL
        if self.enable_statistics:
            return DetectionMode.RULE_STATISTICS
        return DetectionMode.RULE_ONLY

    def effective_weights(self) -> LayerWeights:
        """Layer weights that apply to the current detection mode."""
        mode = self.detection_mode()
        if mode is DetectionMode.MULTIMODAL:
            return self.weights
        if mode is DetectionMode.RULE_STATISTICS:
            return LayerWeights(
                TWO_LAYER_WEIGHTS.rule_layer,
                TWO_LAYER_WEIGHTS.statistics_layer,
                TWO_LAYER_WEIGHTS.semantic_layer,
            )
        return LayerWeights(
            RULE_ONLY_WEIGHTS.rule_layer,
            RULE_ONLY_WEIGHTS.statistics_layer,
            RULE_ONLY_WEIGHTS.semantic_layer,
        )


@dataclass
class MultimodalResult:
    rule_layer_score: float = 0.0
    statistics_layer_score: float = 0.0
    semantic_layer_score: float = 0.0
    final_score: float = 0.0
    confidence: float = 0.0
    layer_weights: LayerWeights = field(default_factory=LayerWeights)
    detection_mode: DetectionMode = DetectionMode.RULE_ONLY
    rule_layer_details: RuleLayerDetails | None = None
    statistics_layer_details: StatisticsLayerDetails | None = None
    semantic_layer_details: SemanticLayerDetails | None = None
    fusion_explanation: str = ""


def needs_statistics_analysis(rule_confidence: float, thresholds: ConfidenceThresholds) -> bool:
    """Statistics are needed unless the rule layer is highly confident."""
    return rule_confidence < thresholds.high


def needs_semantic_analysis(
    rule_confidence: float, stats_confidence: float, thresholds: ConfidenceThresholds
) -> bool:
    """Semantic analysis is needed when the mean confidence is below medium."""
    return (rule_confidence + stats_confidence) / 2 < thresholds.medium


def _weighted(a: float, b: float, c: float, weights: LayerWeights) -> float:
    return (
        a * weights.rule_layer + b * weights.statistics_layer + c * weights.semantic_layer
    ) / weights.total


def fuse_scores(
    rule_score: float, stats_score: float, semantic_score: float, weights: LayerWeights
) -> float:
    """Weighted mean of the layer scores, clamped to 0-100."""
    if weights.total == 0:
        return rule_score
    fused = _weighted(rule_score, stats_score, semantic_score, weights)
    return min(max(fused, 0.0), 100.0)


def calculate_fusion_confidence(
    rule_conf: float, stats_conf: float, semantic_conf: float, weights: LayerWeights
) -> float:
    """Weighted mean of the layer confidences, clamped to 0-1."""
    if weights.total == 0:
        return rule_conf
    fused = _weighted(rule_conf, stats_conf, semantic_conf, weights)
    return min(max(fused, 0.0), 1.0)