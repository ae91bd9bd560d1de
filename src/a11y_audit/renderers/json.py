"""JSON renderer for a11y-audit output."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from a11y_audit.models.audit import AuditRun
from a11y_audit.renderers.base import BaseRenderer, OutputFormat, RenderContext


class JSONRenderer(BaseRenderer):
    """Renderer for JSON output.

    An AuditRun renders as the bare list of per-file results, matching
    the ``results`` array of the audit endpoint. Findings omit ``rule``
    when it is unset.

    Example:
        renderer = JSONRenderer()
        print(renderer.render(run, RenderContext(format=OutputFormat.JSON)))
    """

    @property
    def format(self) -> OutputFormat:
        return OutputFormat.JSON

    def render(self, data: Any, context: RenderContext) -> str:
        if isinstance(data, AuditRun):
            payload: Any = [r.model_dump(mode="json", exclude_none=True) for r in data.results]
        elif isinstance(data, BaseModel):
            payload = data.model_dump(mode="json", exclude_none=True)
        else:
            payload = data

        return json.dumps(
            payload,
            indent=context.indent if context.indent else None,
            default=str,
            ensure_ascii=False,
        )
