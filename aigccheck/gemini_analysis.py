"""Semantic analysis and rewrite suggestions backed by the Gemini client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from aigccheck.gemini_client import GeminiClient
from aigccheck.gemini_config import InvalidResponseError

_PARSE_FAILED = "无法解析API响应"


def _strip_fences(response: str) -> str:
    response = response.strip()
    if not response.startswith("```"):
        return response
    collected: list[str] = []
    inside = False
    for line in response.split("\n"):
        if line.startswith("```"):
            if inside:
                break
            inside = True
            continue
        if inside:
            collected.append(line)
    return "\n".join(collected)


def _extract(response: str, opener: str, closer: str) -> Any:
    start = response.find(opener)
    end = response.rfind(closer)
    if start >= 0 and end > start:
        response = response[start : end + 1]
    try:
        return json.loads(response)
    except json.JSONDecodeError as exc:
        raise InvalidResponseError(f"gemini: invalid response format: {exc}") from exc


def parse_json_response(response: str) -> Any:
    """Decode the JSON object in a model reply, tolerating code fences and chatter."""
    return _extract(_strip_fences(response), "{", "}")


def parse_json_array_response(response: str) -> Any:
    """Decode the JSON array in a model reply, tolerating code fences and chatter."""
    return _extract(_strip_fences(response), "[", "]")


def _mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidResponseError("gemini: expected a JSON object")
    return data


def _float(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(f"gemini: field {key!r} is not a number")
    return float(value)


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(f"gemini: field {key!r} is not a number")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidResponseError(f"gemini: field {key!r} is not an integer")
    return int(value)


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidResponseError(f"gemini: field {key!r} is not a string")
    return value


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidResponseError(f"gemini: field {key!r} is not a list")
    return value


def _strings(data: dict[str, Any], key: str) -> list[str]:
    items = _list(data, key)
    if not all(isinstance(item, str) for item in items):
        raise InvalidResponseError(f"gemini: field {key!r} must hold strings")
    return list(items)


@dataclass
class DetectedFeature:
    name: str = ""
    description: str = ""
    severity: str = ""  # low, medium, high
    score: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> DetectedFeature:
        data = _mapping(data)
        return cls(
            _str(data, "name"), _str(data, "description"), _str(data, "severity"), _float(data, "score")
        )


@dataclass
class AnalysisResult:
    ai_probability: float = 0.0  # 0-100
    confidence: float = 0.0  # 0-1
    features: list[DetectedFeature] = field(default_factory=list)
    explanation: str = ""
    suggestions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> AnalysisResult:
        data = _mapping(data)
        return cls(
            ai_probability=_float(data, "ai_probability"),
            confidence=_float(data, "confidence"),
            features=[DetectedFeature.from_dict(f) for f in _list(data, "features")],
            explanation=_str(data, "explanation"),
            suggestions=_strings(data, "suggestions"),
        )


@dataclass
class CoherenceIssue:
    type: str = ""
    description: str = ""
    location: str = ""
    suggestion: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CoherenceIssue:
        data = _mapping(data)
        return cls(
            _str(data, "type"), _str(data, "description"), _str(data, "location"), _str(data, "suggestion")
        )


@dataclass
class CoherenceResult:
    score: float = 0.0  # 0-100
    issues: list[CoherenceIssue] = field(default_factory=list)
    assessment: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CoherenceResult:
        data = _mapping(data)
        return cls(
            score=_float(data, "score"),
            issues=[CoherenceIssue.from_dict(i) for i in _list(data, "issues")],
            assessment=_str(data, "assessment"),
        )


@dataclass
class StyleResult:
    personalization_score: float = 0.0  # 0-100
    style_features: list[str] = field(default_factory=list)
    missing_features: list[str] = field(default_factory=list)
    assessment: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> StyleResult:
        data = _mapping(data)
        return cls(
            personalization_score=_float(data, "personalization_score"),
            style_features=_strings(data, "style_features"),
            missing_features=_strings(data, "missing_features"),
            assessment=_str(data, "assessment"),
        )


_ANALYZE_PROMPT = """你是一个AI内容检测专家。请分析以下文本是否可能是AI生成的。

文本内容：
\"\"\"
{text}
\"\"\"

请以JSON格式返回分析结果，包含以下字段：
{{
  "ai_probability": <0-100的数字，表示AI生成的可能性>,
  "confidence": <0-1的数字，表示你对判断的置信度>,
  "features": [
    {{
      "name": "<特征名称>",
      "description": "<特征描述>",
      "severity": "<low/medium/high>",
      "score": <0-100>
    }}
  ],
  "explanation": "<详细解释为什么做出这个判断>",
  "suggestions": ["<改进建议1>", "<改进建议2>"]
}}

请只返回JSON，不要有其他内容。"""

_COHERENCE_PROMPT = """你是一个文本分析专家。请分析以下文本的逻辑连贯性，特别关注：
1. 是否存在不自然的范围表达（如"从X到Y"但X和Y没有逻辑关联）
2. 是否存在论点之间的逻辑跳跃
3. 前后文是否一致
4. 是否存在AI生成常见的逻辑问题

文本内容：
\"\"\"
{text}
\"\"\"

请以JSON格式返回分析结果：
{{
  "score": <0-100的连贯性评分，越高越好>,
  "issues": [
    {{
      "type": "<问题类型>",
      "description": "<问题描述>",
      "location": "<问题所在位置>",
      "suggestion": "<改进建议>"
    }}
  ],
  "assessment": "<整体评价>"
}}

请只返回JSON，不要有其他内容。"""

_STYLE_PROMPT = """你是一个写作风格分析专家。请分析以下文本的个人化程度和写作风格特征。

人类写作通常具有以下特征：
- 使用第一人称表达观点
- 包含情感词汇和主观判断
- 使用不确定性表达（如"我认为"、"可能"）
- 具有个人经历的引用
- 口语化表达和语气词

AI生成的文本通常：
- 过于客观和正式
- 缺乏个人色彩
- 结构过于整齐
- 使用模板化的过渡词

文本内容：
\"\"\"
{text}
\"\"\"

请以JSON格式返回分析结果：
{{
  "personalization_score": <0-100，个人化程度，越高越像人类写作>,
  "style_features": ["<检测到的风格特征1>", "<风格特征2>"],
  "missing_features": ["<缺失的人类写作特征1>", "<缺失特征2>"],
  "assessment": "<整体评价>"
}}

请只返回JSON，不要有其他内容。"""


class SemanticAnalyzer:
    """Asks the model to judge AI likelihood, coherence and personal style."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    def analyze_text(self, text: str) -> AnalysisResult:
        """Estimate how likely ``text`` is AI-generated; client errors propagate."""
        response = self.client.generate_content(_ANALYZE_PROMPT.format(text=text))
        try:
            return AnalysisResult.from_dict(parse_json_response(response))
        except InvalidResponseError:
            return AnalysisResult(ai_probability=50, confidence=0.3, explanation=_PARSE_FAILED)

    def analyze_logical_coherence(self, text: str) -> CoherenceResult:
        """Rate the logical coherence of ``text``."""
        response = self.client.generate_content(_COHERENCE_PROMPT.format(text=text))
        try:
            return CoherenceResult.from_dict(parse_json_response(response))
        except InvalidResponseError:
            return CoherenceResult(score=70, assessment=_PARSE_FAILED)

    def analyze_personal_style(self, text: str) -> StyleResult:
        """Rate how personal the writing style of ``text`` is."""
        response = self.client.generate_content(_STYLE_PROMPT.format(text=text))
        try:
            return StyleResult.from_dict(parse_json_response(response))
        except InvalidResponseError:
            return StyleResult(personalization_score=50, assessment=_PARSE_FAILED)


@dataclass
class GeminiSuggestion:
    type: str = ""
    priority: int = 0  # 1 (highest) to 5
    title: str = ""
    description: str = ""
    original_text: str = ""
    suggested_text: str = ""
    reason: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> GeminiSuggestion:
        data = _mapping(data)
        return cls(
            type=_str(data, "type"),
            priority=_int(data, "priority"),
            title=_str(data, "title"),
            description=_str(data, "description"),
            original_text=_str(data, "original_text"),
            suggested_text=_str(data, "suggested_text"),
            reason=_str(data, "reason"),
        )


@dataclass
class Change:
    original: str = ""
    modified: str = ""
    reason: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Change:
        data = _mapping(data)
        return cls(_str(data, "original"), _str(data, "modified"), _str(data, "reason"))


@dataclass
class RewriteResult:
    rewritten_text: str = ""
    changes: list[Change] = field(default_factory=list)
    explanation: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> RewriteResult:
        data = _mapping(data)
        return cls(
            rewritten_text=_str(data, "rewritten_text"),
            changes=[Change.from_dict(c) for c in _list(data, "changes")],
            explanation=_str(data, "explanation"),
        )


_SUGGEST_PROMPT = """你是一个写作顾问。根据以下检测到的问题，为文本提供具体的改进建议。

原文：
\"\"\"
{text}
\"\"\"

检测到的问题：
- {issues}

请提供3-5条具体的改进建议，每条建议包括：
1. 问题所在的具体文本片段
2. 建议的修改方式
3. 修改后的示例
4. 为什么这样修改可以让文本更自然

请以JSON数组格式返回：
[
  {{
    "type": "<问题类型>",
    "priority": <1-5>,
    "title": "<建议标题>",
    "description": "<详细描述>",
    "original_text": "<原文片段>",
    "suggested_text": "<修改后的文本>",
    "reason": "<改进理由>"
  }}
]

请只返回JSON数组，不要有其他内容。"""

_REWRITE_PROMPT = """你是一个文本改写专家。请根据以下要求改写文本：

要求：{instructions}

原文：
\"\"\"
{text}
\"\"\"

改写原则：
1. 保持原意不变
2. 添加适当的个人化表达
3. 使用更自然的词汇和句式
4. 避免过于完美的结构
5. 适当加入口语化表达

请以JSON格式返回：
{{
  "rewritten_text": "<改写后的完整文本>",
  "changes": [
    {{
      "original": "<原文片段>",
      "modified": "<修改后>",
      "reason": "<修改理由>"
    }}
  ],
  "explanation": "<整体改写说明>"
}}

请只返回JSON，不要有其他内容。"""

_ALTERNATIVE_PROMPT = """请为以下短语/句子提供3-5个更自然、更人性化的替代表达。

短语："{phrase}"
上下文：{context}

要求：
1. 保持原意
2. 避免AI常用的表达方式
3. 使用更口语化或个性化的表达

请直接返回替代表达，每行一个，不要编号或其他格式。"""

_DEFAULT_INSTRUCTIONS = "降低AI生成痕迹，使文本更加自然和人性化"


class Suggester:
    """Produces improvement suggestions and rewrites through the model."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    def generate_suggestions(self, text: str, issues: list[str]) -> list[GeminiSuggestion]:
        """Suggestions addressing ``issues``; falls back to generic ones on a bad reply."""
        if not issues:
            return []
        prompt = _SUGGEST_PROMPT.format(text=text, issues="\n- ".join(issues))
        response = self.client.generate_content(prompt)
        try:
            parsed = parse_json_array_response(response)
            if not isinstance(parsed, list):
                raise InvalidResponseError("gemini: expected a JSON array")
            return [GeminiSuggestion.from_dict(item) for item in parsed]
        except InvalidResponseError:
            return self.default_suggestions(issues)

    def rewrite_text(self, text: str, instructions: str = "") -> RewriteResult:
        """Rewrite ``text`` to reduce AI traces; the original is kept on a bad reply."""
        prompt = _REWRITE_PROMPT.format(
            instructions=instructions or _DEFAULT_INSTRUCTIONS, text=text
        )
        response = self.client.generate_content(prompt)
        try:
            return RewriteResult.from_dict(parse_json_response(response))
        except InvalidResponseError:
            return RewriteResult(rewritten_text=text, explanation="无法解析API响应，返回原文")

    def provide_alternative(self, phrase: str, context: str) -> list[str]:
        """Alternative wordings for ``phrase``, one per line of the reply."""
        response = self.client.generate_content(
            _ALTERNATIVE_PROMPT.format(phrase=phrase, context=context)
        )
        alternatives = []
        for line in response.strip().split("\n"):
            cleaned = line.strip().lstrip("0123456789.-) ")
            if cleaned:
                alternatives.append(cleaned)
        return alternatives

    def default_suggestions(self, issues: list[str]) -> list[GeminiSuggestion]:
        """Generic suggestions for at most the first five issues."""
        return [
            GeminiSuggestion(
                type="general",
                priority=index + 1,
                title="改进建议",
                description=issue,
                reason="基于检测到的问题提供的通用建议",
            )
            for index, issue in enumerate(issues[:5])
        ]