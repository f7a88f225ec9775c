"""
Rendering of enumeration results as text or JSON.
"""
import json
from typing import List

from k8sexec.exit_codes import describe
from k8sexec.models import EnumerationStatus

FORMATS = ("text", "json")


def quote_args(args: List[str]) -> str:
    """Render an argument vector as ["a" "b"]."""
    return "[" + " ".join(json.dumps(arg, ensure_ascii=False) for arg in args) + "]"


def render_json(result: EnumerationStatus) -> str:
    return result.model_dump_json(by_alias=True, indent=4)


def render_text(result: EnumerationStatus) -> str:
    lines = [
        f"STDIN COMMAND: {result.stdin_summary}",
        f"COMMAND: {quote_args(result.args)}",
        "",
        f"Namespace: {result.namespace}",
    ]
    for status in result.statuses:
        lines.append(f"CONTAINER: {status.pod}/{status.container}")
        lines.append(f"Returned exit code: {status.exit_code} [{describe(status.exit_code)}]")
        if status.error.strip("\n"):
            lines.append(f"Returned error: {status.error}")
        # stdout normally ends with a newline, which puts the stderr header on its own line
        lines.append(f"Standard output:\n{status.stdout}Standard error:\n{status.stderr}")
    return "\n".join(lines) + "\n"


def render(result: EnumerationStatus, output_format: str = "text") -> str:
    """
    Serialize a run's results.

    Args:
        result: Aggregated run results
        output_format: "text" or "json"

    Returns:
        Rendered output, newline terminated
    """
    if output_format == "json":
        return render_json(result) + "\n"
    if output_format == "text":
        return render_text(result)
    raise ValueError(f"Unknown output format: {output_format}")
