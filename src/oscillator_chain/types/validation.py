"""Validation report types."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CheckResult(BaseModel):
    """Result of a single validation check."""

    name: str
    passed: bool
    value: float = 0.0
    threshold: float = 0.0
    message: str = ""


class ValidationReport(BaseModel):
    """Aggregated outcome of a set of checks on one simulation run."""

    checks: list[CheckResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failures(self) -> list[str]:
        return [c.name for c in self.checks if not c.passed]
