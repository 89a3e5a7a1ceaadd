"""Whole-document verbs: clear and export."""

from __future__ import annotations

from memo_engine.editor.context import EditorContext, EditResult, edited
from memo_engine.runtime import telemetry


def clear_document(context: EditorContext, match=None) -> EditResult:
    del match
    context.buffer.set_text("", label="clear")
    return edited("clear")


def export_document(context: EditorContext, match=None) -> EditResult:
    del match
    exporter = context.exporter
    if exporter is None:
        telemetry.record_event(
            "export.skipped", level="warning", data={"reason": "no exporter"}
        )
        return EditResult(handled=True, status="export_unavailable")

    filename = context.config.export_filename
    target = exporter.export(context.buffer.text, filename)
    context.bus.emit("document.exported", target)
    if target is None:
        return EditResult(handled=True, status="export_failed", message=filename)
    return EditResult(handled=True, status="exported", message=str(target))


__all__ = ["clear_document", "export_document"]
