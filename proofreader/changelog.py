from __future__ import annotations
from typing import Dict, Any, List

def write_txt(path: str, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_txt(payload))

def render_txt(payload: Dict[str, Any]) -> str:
    """Human review sheet for a proofread result payload."""
    lines: List[str] = []
    lines.append(f"Proofread Review: {payload.get('file')}")
    lines.append("")
    lines.append(f"- Output: {payload.get('correctedFile')}")
    lines.append(f"- Engine: {payload.get('engine')} (level {payload.get('level')})")
    chunks = payload.get("chunks", {}) or {}
    if chunks.get("failed"):
        lines.append(f"- Chunks failed: {chunks['failed']}/{chunks.get('total')}")
    lines.append("")

    auto = payload.get("autoApplied", {}) or {}
    changes = auto.get("changes", []) or []
    lines.append(f"Auto-applied corrections ({auto.get('count', 0)})")
    for c in changes[:100]:
        lines.append(f"- L{c['line']} [{c['type']}] \"{c['from']}\" -> \"{c['to']}\"")
    if len(changes) > 100:
        lines.append(f"... plus {len(changes)-100} more.")
    lines.append("")

    suggestions = payload.get("suggestions", []) or []
    lines.append(f"Suggestions for review ({len(suggestions)})")
    for s in suggestions:
        line = f"- {s['id']} L{s['line']} [{s['type']}] {s['text']}"
        if s.get("suggested"):
            line += f" -> \"{s['suggested']}\""
        lines.append(line)
    if suggestions:
        lines.append("")
        lines.append("Accept with: apply-suggestions <file> <ids...> | all")
    return "\n".join(lines) + "\n"
