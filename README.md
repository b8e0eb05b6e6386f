# aigccheck

`aigccheck` is a toolkit for judging whether a piece of text was written by
a person or generated by a machine. It provides the data model for rule
results, scores and suggestions, a configurable rule engine, the logic that
fuses rule, statistical and semantic scores, a client for semantic analysis
through the Gemini API, text and JSON report renderers, and a small SQLite
store for detection history.

Scores run from 0 to 100; a higher score means the text reads more like
human writing.

## Scores and risk levels

| Score    | Risk level  | Meaning                                  |
|----------|-------------|------------------------------------------|
| 0 – 40   | `very_high` | almost certainly AI-generated            |
| 41 – 60  | `high`      | very likely AI-generated                 |
| 61 – 75  | `medium`    | may contain AI-generated passages        |
| 76 – 100 | `low`       | probably written by a person             |

```python
from aigccheck.models import get_risk_level

level = get_risk_level(82.0)
print(level.value)          # "low"
print(level.description())  # 低风险 - 可能为人类编写
```

`aigccheck.models` also holds the ten rule types (`RuleType`), severities,
suggestion categories and priorities, with helpers such as
`get_rule_type_name`, `get_category_name`, `get_level` and
`new_dimension_score`.

## Configuration

`default_config()` returns the default settings: thresholds and keyword
lists for the ten signals, an enabled entry with threshold and severity for
every rule, the five score-dimension weights, output settings and the
layer and Gemini settings. A YAML file only needs the keys you want to
change; missing rules and output settings are filled in from the defaults.

```yaml
output:
  default_format: json
  language: en
  verbose: true
  color_enabled: false

rules:
  emoji_anomaly:
    enabled: false
```

```python
from aigccheck.config import default_config, load_config, save_config
from aigccheck.models import RuleType

config = load_config("configs/aigc-check.yaml")   # defaults if the file is absent
print(config.is_rule_enabled(RuleType.EMOJI))

save_config(default_config(), "my-config.yaml")
```

Durations in the `gemini` section may be written as numbers of seconds or
as strings such as `30s` or `1h`. When a file is loaded, the
`GEMINI_API_KEY` environment variable, if set, overrides its API key.

## Running rules

A rule is any subclass of `aigccheck.models.Rule` that provides a
`rule_type` and a `check(text)` method returning a `RuleResult`. The rule
engine holds one rule per type and runs those the configuration enables.

```python
from aigccheck.config import default_config
from aigccheck.models import Rule, RuleResult, RuleType
from aigccheck.rule_engine import RuleEngine


class CutoffPhraseRule(Rule):
    rule_type = RuleType.KNOWLEDGE_CUTOFF

    def check(self, text: str) -> RuleResult:
        found = "As of my last knowledge update" in text
        return RuleResult(rule_type=self.rule_type, detected=found,
                          score=0.0 if found else 100.0, count=int(found))


engine = RuleEngine(default_config())
engine.register_rule(CutoffPhraseRule())

results = engine.check("As of my last knowledge update, this is crucial.")
print(engine.count_enabled_rules(), results[0].detected)
```

## Combining layers

`aigccheck.multimodal` holds the fusion logic. With statistics enabled the
rule and statistics layers are weighted 0.55 / 0.45; with the semantic layer
as well, the configured weights apply (0.4 / 0.3 / 0.3 by default).

```python
from aigccheck.multimodal import MultimodalConfig, fuse_scores

mm = MultimodalConfig(enabled=True)
weights = mm.effective_weights()
print(mm.detection_mode().value)              # "rule_statistics"
print(fuse_scores(70.0, 50.0, 0.0, weights))
```

`needs_statistics_analysis` and `needs_semantic_analysis` decide from
confidence thresholds whether a further layer is worth running, and
`calculate_fusion_confidence` combines the layer confidences.

## Semantic analysis with Gemini

```python
from aigccheck.gemini_config import default_gemini_config
from aigccheck.gemini_client import GeminiClient
from aigccheck.gemini_analysis import SemanticAnalyzer, Suggester

cfg = default_gemini_config()
cfg.enabled = True
cfg.api_key = "placeholder"

client = GeminiClient(cfg)
analysis = SemanticAnalyzer(client).analyze_text("Some text to inspect.")
print(analysis.ai_probability, analysis.explanation)

tips = Suggester(client).generate_suggestions(
    "Some text to inspect.", ["检测到高频AI词汇"]
)
```

Requests are retried with exponential backoff and answers are cached in
memory (one hour, up to 1000 entries, by default). A client that is
disabled or has no API key raises `NotEnabledError` instead of sending
anything; an enabled configuration without a key raises
`MissingAPIKeyError` when the client is created. Replies that cannot be
parsed fall back to neutral default results.

## Reports

```python
from aigccheck.models import DetectionResult, Score, get_risk_level
from aigccheck.reporter import JSONReporter, TextReporter

result = DetectionResult(text="Some text", score=Score(total=72.5),
                         risk_level=get_risk_level(72.5))

print(TextReporter(color_enabled=True).generate(result))
print(JSONReporter(pretty=True).generate(result))
```

The text report shows the overall score with a bar, the risk level, the five
dimension scores, every detected issue with up to three example matches, the
improvement suggestions, and the processing and detection times.

## History

```python
from aigccheck.repository import DetectionRepository, migrate, open_database

connection = open_database("sqlite", "data/aigc-check.db")
migrate(connection)

repo = DetectionRepository(connection)
records, total = repo.list(1, 20, "created_at", "desc")
```

Only SQLite is supported. Records can be sorted by `created_at`, `score` or
`risk_level`. Looking up or deleting a record that does not exist raises
`RecordNotFoundError`.

## What the package does not do

- It ships no concrete detection rules; the rule engine runs the rules you
  register.
- It has no statistical text analyzer and no end-to-end pipeline that runs
  rules, scoring and layers and assembles a `DetectionResult`; it provides
  the pieces such a pipeline is built from.
- It has no command-line tool and no HTTP API server.