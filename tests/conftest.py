"""Shared test fixtures for a11y-audit tests."""

from pathlib import Path
from typing import Callable

import pytest

from a11y_audit.core.engine import RuleEngine
from a11y_audit.utils.config import set_config

FORM_COMPONENT = """import React from "react";

export function Form() {
  return (
    <form>
      <input type="text">
      <input id="email" type="email">
      <img src="logo.png">
      <img src="hero.png" alt="Hero">
    </form>
  );
}
"""

BUTTON_COMPONENT = """export const Button = ({ fn }) => (
  <button onClick={fn}>Click</button>
);
"""

CLEAN_COMPONENT = """export const Title = () => <h1>Hello</h1>;
"""


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep tests from seeing each other's (or the user's) config."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing ``{relative_path: content}`` under a fresh workspace."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "workspace"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def sample_workspace(make_tree) -> Path:
    """A small React project with components and pages."""
    return make_tree(
        {
            "components/Form.tsx": FORM_COMPONENT,
            "components/ui/Button.jsx": BUTTON_COMPONENT,
            "components/README.md": "# not a component",
            "pages/index.tsx": CLEAN_COMPONENT,
            "src/components/Title.js": CLEAN_COMPONENT,
            "lib/ignored.ts": BUTTON_COMPONENT,
        }
    )


@pytest.fixture
def engine() -> RuleEngine:
    """A deterministic engine with only the built-in rules."""
    with RuleEngine() as eng:
        yield eng


@pytest.fixture
def sample_rules_file(tmp_path: Path) -> Path:
    """A YAML rule pack with one custom rule."""
    content = """
name: team-rules
version: "2.0.0"
description: Team specific checks

rules:
  - id: anchor-missing-href
    name: Anchor without href
    issue: Anchor element without href
    suggestion: Use a button for actions or add an href
    condition: "'<a ' in line and 'href=' not in line"
    severity: warning
    category: links
    wcag: "2.1.1"
"""
    path = tmp_path / "team-rules.yaml"
    path.write_text(content)
    return path
