"""Built-in accessibility rules and YAML rule packs."""

from __future__ import annotations

from pathlib import Path

import yaml

from a11y_audit.models.rules import LineRule, RuleSet, RuleSeverity
from a11y_audit.utils.errors import ConfigurationError

# Matching is line-local and substring based: a tag split
# across lines, or trigger text inside a string literal, is mis-reported.
BUILTIN_RULES = [
    LineRule(
        id="input-missing-label",
        name="Input missing label",
        issue="Input element missing label or aria-label",
        suggestion="Add aria-label attribute or wrap in a label element",
        condition="'<input' in line and 'aria-label' not in line and 'id=' not in line",
        severity=RuleSeverity.ERROR,
        category="forms",
        rationale="Screen readers announce form controls by their accessible name",
        wcag="1.3.1, 4.1.2",
    ),
    LineRule(
        id="button-missing-name",
        name="Button missing accessible name",
        issue="Button missing accessible name",
        suggestion="Add aria-label or ensure button has descriptive text content",
        condition="'<button' in line and 'aria-label' not in line and 'aria-describedby' not in line",
        severity=RuleSeverity.WARNING,
        category="controls",
        rationale="Buttons without a name are announced only as 'button'",
        wcag="4.1.2",
    ),
    LineRule(
        id="img-missing-alt",
        name="Image missing alt text",
        issue="Image missing alt attribute",
        suggestion="Add alt attribute with descriptive text",
        condition="'<img' in line and 'alt=' not in line",
        severity=RuleSeverity.ERROR,
        category="images",
        rationale="Non-text content needs a text alternative",
        wcag="1.1.1",
    ),
    LineRule(
        id="click-without-keyboard",
        name="Click handler without keyboard support",
        issue="Click handler without keyboard support",
        suggestion="Add onKeyDown handler for keyboard accessibility",
        condition="'onClick' in line and 'onKeyDown' not in line and 'onKeyPress' not in line",
        severity=RuleSeverity.WARNING,
        category="keyboard",
        rationale="Functionality must be operable from a keyboard",
        wcag="2.1.1",
    ),
    LineRule(
        id="negative-tabindex",
        name="Element removed from tab order",
        issue="Element removed from tab order",
        suggestion="Ensure keyboard users can access this element or provide alternative navigation",
        condition="'tabIndex=\"-1\"' in line",
        severity=RuleSeverity.INFO,
        category="keyboard",
        rationale="Elements with a negative tabIndex cannot be reached with Tab",
        wcag="2.4.3",
    ),
]

BUILTIN_RULESET = RuleSet(
    name="builtin",
    version="1.0.0",
    description="Built-in line rules for React/JSX component sources",
    rules=BUILTIN_RULES,
)


def load_rules(path: Path | str) -> RuleSet:
    """Load a rule pack from a YAML file.

    Args:
        path: Path to the rule pack

    Returns:
        RuleSet loaded from file

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read rule pack {path}: {e}", config_key="rules_file")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in rule pack {path}: {e}", config_key="rules_file")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Rule pack {path} must be a mapping", config_key="rules_file")

    try:
        return RuleSet.model_validate(
            {
                "name": data.get("name", path.stem),
                "version": data.get("version", "1.0.0"),
                "description": data.get("description", ""),
                "rules": data.get("rules", []),
            }
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid rule in {path}: {e}", config_key="rules_file")


def save_rules(ruleset: RuleSet, path: Path | str) -> None:
    """Save a rule pack to a YAML file.

    Args:
        ruleset: The rules to save
        path: Path to save to
    """
    data = ruleset.model_dump(mode="json", exclude_none=True)
    Path(path).write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))


def build_ruleset(include_builtin: bool = True, rules_file: Path | str | None = None) -> RuleSet:
    """Combine the built-in rules with an optional rule pack.

    Args:
        include_builtin: Whether to include built-in rules
        rules_file: Optional YAML rule pack

    Returns:
        The effective rule set, built-in rules first

    Raises:
        ConfigurationError: If a rule id appears twice
    """
    rules: list[LineRule] = list(BUILTIN_RULES) if include_builtin else []
    name = "builtin" if include_builtin else "custom"
    description = BUILTIN_RULESET.description

    if rules_file is not None:
        custom = load_rules(rules_file)
        rules.extend(custom.rules)
        name = f"{name}+{custom.name}" if include_builtin else custom.name
        description = custom.description or description

    ids = [r.id for r in rules]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate rule ids: {', '.join(duplicates)}", config_key="rules_file")

    return RuleSet(name=name, description=description, rules=rules)
