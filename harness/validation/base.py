"""Base classes and types for validation framework."""
from dataclasses import dataclass
from enum import Enum


class Status(str, Enum):
  """Outcome of a single check."""

  PASS = 'PASS'
  FAIL = 'FAIL'
  WARN = 'WARN'
  SKIP = 'SKIP'


@dataclass(frozen=True)
class CheckResult:
  """Result of a single validation check."""

  status: Status
  name: str
  detail: str = ''

  def __str__(self) -> str:
    suffix = f' - {self.detail}' if self.detail else ''
    return f'{self.status.value:<4} | {self.name}{suffix}'


def pass_result(name: str, detail: str = '') -> CheckResult:
  """Create a passing CheckResult."""
  return CheckResult(Status.PASS, name, detail)


def fail_result(name: str, detail: str = '') -> CheckResult:
  """Create a failing CheckResult."""
  return CheckResult(Status.FAIL, name, detail)


def warn_result(name: str, detail: str = '') -> CheckResult:
  """Create an advisory CheckResult."""
  return CheckResult(Status.WARN, name, detail)


def skip_result(name: str, detail: str = '') -> CheckResult:
  """Create a skipped CheckResult."""
  return CheckResult(Status.SKIP, name, detail)
