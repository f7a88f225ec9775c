"""
Result models for command enumeration runs.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

STDIN_SUMMARY_LIMIT = 40


def summarize_stdin(text: str) -> str:
    """Shorten piped input for display."""
    if len(text) > STDIN_SUMMARY_LIMIT:
        return f"{text[:STDIN_SUMMARY_LIMIT]}... too long"
    return text


class ExecutionStatus(BaseModel):
    """Outcome of one command execution in one container."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pod: str = Field(..., alias="Pod")
    container: str = Field(..., alias="Container")
    exit_code: int = Field(..., alias="RetCode")
    error_lines: List[str] = Field(default_factory=lambda: [""], alias="Error")
    stdout_lines: List[str] = Field(default_factory=lambda: [""], alias="Stdout")
    stderr_lines: List[str] = Field(default_factory=lambda: [""], alias="Stderr")

    @classmethod
    def build(cls, pod: str, container: str, exit_code: int,
              error: str = "", stdout: str = "", stderr: str = "") -> "ExecutionStatus":
        # "".split("\n") == [""]; renderers rely on that
        return cls(
            pod=pod,
            container=container,
            exit_code=exit_code,
            error_lines=error.split("\n"),
            stdout_lines=stdout.split("\n"),
            stderr_lines=stderr.split("\n"),
        )

    @property
    def error(self) -> str:
        return "\n".join(self.error_lines)

    @property
    def stdout(self) -> str:
        return "\n".join(self.stdout_lines)

    @property
    def stderr(self) -> str:
        return "\n".join(self.stderr_lines)


class EnumerationStatus(BaseModel):
    """Aggregated results of one run."""
    model_config = ConfigDict(populate_by_name=True)

    stdin_summary: str = Field(default="", alias="Stdin")
    args: List[str] = Field(default_factory=list, alias="Args")
    namespace: str = Field(..., alias="Namespace")
    statuses: List[ExecutionStatus] = Field(default_factory=list, alias="Statuses")

    @classmethod
    def create(cls, stdin_text: str, args: List[str], namespace: str) -> "EnumerationStatus":
        return cls(stdin_summary=summarize_stdin(stdin_text), args=list(args), namespace=namespace)
