"""Report generators that render detection results as text or JSON."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum
from typing import Any

from aigccheck.models import DetectionResult, get_category_name

_RULE = "─" * 60 + "\n"

_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_PURPLE = "\033[35m"
_RESET = "\033[0m"

_RISK_COLORS = {"low": _GREEN, "medium": _YELLOW, "high": _RED, "very_high": _PURPLE}
_RISK_ICONS = {"low": "✓", "medium": "⚠", "high": "⚠⚠", "very_high": "⚠⚠⚠"}
_SEVERITY_ICONS = {"critical": "🔴", "high": "🟠", "medium": "🟡", "low": "🟢"}
_PRIORITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🟢"}

_MAX_SHOWN_MATCHES = 3


def _value(item: Any) -> str:
    """Plain string value of an enum member or string."""
    if isinstance(item, Enum):
        return str(item.value)
    return str(item)


def _fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = str(rest).zfill(len(str(unit)) - 1).rstrip("0")
    return f"{whole}.{digits}"


def _format_duration(duration: timedelta) -> str:
    """Render a duration the compact way, e.g. 100ms, 1.5s, 2m3s."""
    ns = (duration.days * 86_400 + duration.seconds) * 1_000_000_000 + duration.microseconds * 1_000
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    seconds = _fraction(rest, 1_000_000_000) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def _bar(fraction: float, length: int) -> str:
    filled = min(max(int(fraction * length), 0), length)
    return "█" * filled + "░" * (length - filled)


class Reporter(ABC):
    """Turns a detection result into a report string."""

    format: str = ""

    @abstractmethod
    def generate(self, result: DetectionResult) -> str:
        """Render the report for ``result``."""


class JSONReporter(Reporter):
    """Renders a detection result as JSON."""

    format = "json"

    def __init__(self, pretty: bool = True) -> None:
        self.pretty = pretty

    def generate(self, result: DetectionResult) -> str:
        data = result.to_dict()
        if self.pretty:
            return json.dumps(data, ensure_ascii=False, indent=2)
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class TextReporter(Reporter):
    """Renders a human-readable report, optionally with ANSI colours."""

    format = "text"

    def __init__(self, color_enabled: bool = True) -> None:
        self.color_enabled = color_enabled

    def generate(self, result: DetectionResult) -> str:
        parts = [
            "╔═══════════════════════════════════════════════════════════════╗\n",
            "║           AIGC-Check 检测报告                                  ║\n",
            "╚═══════════════════════════════════════════════════════════════╝\n\n",
            self._overall_score(result),
            self._risk_level(result),
            self._dimension_scores(result),
            self._detected_issues(result),
            self._suggestions(result),
            f"\n处理时间: {_format_duration(result.process_time)}\n",
            f"检测时间: {result.detected_at.strftime('%Y-%m-%d %H:%M:%S')}\n",
        ]
        return "".join(parts)

    def _overall_score(self, result: DetectionResult) -> str:
        total = result.score.total
        if self.color_enabled:
            line = f"{self.score_color(total)}{total:.1f} / 100{self.color_reset()}\n"
        else:
            line = f"{total:.1f} / 100\n"
        return "【总体评分】\n" + _RULE + line + self.score_bar(total) + "\n\n"

    def _risk_level(self, result: DetectionResult) -> str:
        level = result.risk_level
        icon = self.risk_icon(level)
        description = level.description() if hasattr(level, "description") else "未知风险"
        if self.color_enabled:
            line = f"{self.risk_color(level)}{icon} {description}{self.color_reset()}\n\n"
        else:
            line = f"{icon} {description}\n\n"
        return "【风险等级】\n" + _RULE + line

    def _dimension_scores(self, result: DetectionResult) -> str:
        dims = result.score.dimensions
        named = (
            ("词汇多样性", dims.vocabulary_diversity),
            ("句式复杂度", dims.sentence_complexity),
            ("个人化表达", dims.personalization),
            ("逻辑连贯性", dims.logical_coherence),
            ("情感真实度", dims.emotional_authenticity),
        )
        lines = ["【维度评分】\n", _RULE]
        for name, dim in named:
            pct = dim.percentage
            lines.append(
                f"{name:<12} {dim.score:.1f}/{dim.max_score:.0f} ({pct:.0f}%) "
                f"[{dim.level}] {self.percentage_bar(pct)}\n"
            )
            lines.extend(f"  ⚠ {issue}\n" for issue in dim.issues)
            lines.append("\n")
        return "".join(lines)

    def _detected_issues(self, result: DetectionResult) -> str:
        detected = [r for r in result.rule_results if r.detected]
        lines = ["【检测到的问题】\n", _RULE]
        if not detected:
            lines.append("✓ 未检测到明显的AI生成特征\n\n")
            return "".join(lines)

        lines.append(f"检测到 {len(detected)} 个问题：\n\n")
        for rule in detected:
            lines.append(
                f"{self.severity_icon(rule.severity)} [{_value(rule.severity)}] {rule.rule_name}\n"
            )
            lines.append(f"   评分: {rule.score:.1f}/100\n")
            lines.append(f"   消息: {rule.message}\n")
            lines.append(f"   匹配数: {rule.count} (阈值: {rule.threshold})\n")
            if rule.matches:
                lines.append("   示例:\n")
                shown = rule.matches[:_MAX_SHOWN_MATCHES]
                lines.extend(f"     - 行{m.position.line}: {m.text}\n" for m in shown)
                remaining = len(rule.matches) - len(shown)
                if remaining > 0:
                    lines.append(f"     ... 还有 {remaining} 个匹配项\n")
            lines.append("\n")
        return "".join(lines)

    def _suggestions(self, result: DetectionResult) -> str:
        if not result.suggestions:
            return ""
        lines = ["【改进建议】\n", _RULE]
        for number, suggestion in enumerate(result.suggestions, start=1):
            lines.append(
                f"{number}. {self.priority_icon(suggestion.priority)} "
                f"[{get_category_name(suggestion.category)}] {suggestion.title}\n"
            )
            lines.append(f"   {suggestion.description}\n")
            if suggestion.examples:
                lines.append("   示例:\n")
                for example in suggestion.examples:
                    lines.append(f"     修改前: {example.before}\n")
                    lines.append(f"     修改后: {example.after}\n")
                    if example.reason:
                        lines.append(f"     原因: {example.reason}\n")
            lines.append("\n")
        return "".join(lines)

    def score_bar(self, score: float) -> str:
        """Fifty-cell bar in brackets showing a 0-100 score."""
        return f"[{_bar(score / 100.0, 50)}]"

    def percentage_bar(self, percentage: float) -> str:
        """Twenty-cell bar showing a percentage."""
        return _bar(percentage / 100.0, 20)

    def score_color(self, score: float) -> str:
        if not self.color_enabled:
            return ""
        if score >= 76:
            return _GREEN
        if score >= 61:
            return _YELLOW
        if score >= 41:
            return _RED
        return _PURPLE

    def risk_color(self, level: Any) -> str:
        if not self.color_enabled:
            return ""
        return _RISK_COLORS.get(_value(level), "")

    def color_reset(self) -> str:
        return _RESET if self.color_enabled else ""

    def risk_icon(self, level: Any) -> str:
        return _RISK_ICONS.get(_value(level), "?")

    def severity_icon(self, severity: Any) -> str:
        return _SEVERITY_ICONS.get(_value(severity), "⚪")

    def priority_icon(self, priority: Any) -> str:
        return _PRIORITY_ICONS.get(_value(priority), "⚪")