"""
Check reporter with summary and readiness tiers.

A Reporter is created per validator run. Checks are recorded in call
order and summarized on demand:
- passed/failed/warned/skipped counts (order independent)
- pass rate over non-skipped checks
- wall-clock time since the reporter was created

Usage:
  reporter = Reporter('WORKFLOW VALIDATOR')
  reporter.pass_('Node Count', '42 nodes found')
  reporter.warn('Orphan Node: Debug', 'not connected to pipeline')
  summary = reporter.print_report()
"""
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
import logging
import time

from harness.validation.base import CheckResult
from harness.validation.base import fail_result
from harness.validation.base import pass_result
from harness.validation.base import skip_result
from harness.validation.base import Status
from harness.validation.base import warn_result

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Status.PASS: logging.INFO,
    Status.SKIP: logging.INFO,
    Status.WARN: logging.WARNING,
    Status.FAIL: logging.ERROR,
}


class ReadinessTier(str, Enum):
  """Human-readable classification of a pass rate."""

  PRODUCTION_READY = 'PRODUCTION READY'
  TEST_PASS = 'TEST ENVIRONMENT PASS - not production ready'
  DEVELOPMENT_ONLY = 'DEVELOPMENT ONLY - significant issues'
  CRITICAL = 'CRITICAL - below minimum threshold'

  @classmethod
  def classify(cls, pass_rate: float) -> 'ReadinessTier':
    """Map a pass rate (0-100) to its tier."""
    if pass_rate >= 95:
      return cls.PRODUCTION_READY
    if pass_rate >= 80:
      return cls.TEST_PASS
    if pass_rate >= 50:
      return cls.DEVELOPMENT_ONLY
    return cls.CRITICAL


def compute_pass_rate(passed: int, total: int, skipped: int) -> float:
  """
  Percentage of non-skipped checks that passed.

  Returns 0.0 when every check was skipped or nothing was recorded.
  """
  active = total - skipped
  if active <= 0:
    return 0.0
  return 100.0 * passed / active


@dataclass(frozen=True)
class SuiteSummary:
  """
  Summary of one validator run.

  Attributes:
    suite: Suite name (e.g., 'PROTOCOL VALIDATOR')
    total: Number of recorded checks
    passed: PASS count
    failed: FAIL count
    warned: WARN count
    skipped: SKIP count
    pass_rate: passed / (total - skipped) * 100, 0.0 if no active checks
    elapsed_sec: Seconds between reporter creation and summary
    results: Recorded checks in call order
  """
  suite: str
  total: int
  passed: int
  failed: int
  warned: int
  skipped: int
  pass_rate: float
  elapsed_sec: float = 0.0
  results: tuple[CheckResult, ...] = field(default=(), repr=False)

  @property
  def active(self) -> int:
    """Number of non-skipped checks."""
    return self.total - self.skipped

  @property
  def tier(self) -> ReadinessTier:
    return ReadinessTier.classify(self.pass_rate)

  @classmethod
  def from_results(cls,
                   suite: str,
                   results: tuple[CheckResult, ...],
                   elapsed_sec: float = 0.0) -> 'SuiteSummary':
    """Build a summary from an ordered sequence of results."""
    counts = {status: 0 for status in Status}
    for r in results:
      counts[r.status] += 1
    total = len(results)
    return cls(
        suite=suite,
        total=total,
        passed=counts[Status.PASS],
        failed=counts[Status.FAIL],
        warned=counts[Status.WARN],
        skipped=counts[Status.SKIP],
        pass_rate=compute_pass_rate(counts[Status.PASS], total,
                                    counts[Status.SKIP]),
        elapsed_sec=elapsed_sec,
        results=results,
    )

  @classmethod
  def crashed(cls, suite: str, error: BaseException) -> 'SuiteSummary':
    """Synthetic single-FAIL summary for a validator that raised."""
    result = CheckResult(Status.FAIL, f'{suite} crashed',
                         f'{type(error).__name__}: {error}')
    return cls.from_results(suite, (result,))


class Reporter:
  """Accumulate check outcomes for a single validator run."""

  def __init__(self, suite_name: str):
    self.suite_name = suite_name
    self.results: list[CheckResult] = []
    self._started = time.monotonic()

  def record(self, status: Status, name: str, detail: str = '') -> None:
    """Append one check result."""
    self.results.append(CheckResult(status, name, detail))

  def add(self, result: CheckResult) -> None:
    self.results.append(result)

  def pass_(self, name: str, detail: str = '') -> None:
    self.add(pass_result(name, detail))

  def fail(self, name: str, detail: str = '') -> None:
    self.add(fail_result(name, detail))

  def warn(self, name: str, detail: str = '') -> None:
    self.add(warn_result(name, detail))

  def skip(self, name: str, detail: str = '') -> None:
    self.add(skip_result(name, detail))

  def summarize(self) -> SuiteSummary:
    """Compute the summary from the results recorded so far."""
    elapsed = time.monotonic() - self._started
    return SuiteSummary.from_results(self.suite_name, tuple(self.results),
                                     elapsed_sec=elapsed)

  def print_report(self) -> SuiteSummary:
    """
    Print every result plus counts, pass rate and tier to stdout.

    Returns:
      The summary that was printed
    """
    s = self.summarize()

    print()
    print('=' * 60)
    print(f'  {s.suite}')
    print('=' * 60)
    for r in s.results:
      print(f'  {r}')
    print('-' * 60)
    print(f'  PASS: {s.passed}  FAIL: {s.failed}  WARN: {s.warned}  '
          f'SKIP: {s.skipped}  TOTAL: {s.total}')
    print(f'  Pass Rate: {s.pass_rate:.1f}%  |  Time: {s.elapsed_sec:.1f}s')
    print(f'  {s.tier.value}')
    print('=' * 60)
    return s

  def log_summary(self) -> None:
    """Log validation summary using logger."""
    s = self.summarize()
    logger.info('%s: %d/%d checks passed (%.1f%%)', s.suite, s.passed,
                s.active, s.pass_rate)
    for r in s.results:
      logger.log(_LOG_LEVELS[r.status], '%s %s: %s', r.status.value, r.name,
                 r.detail)
    if s.failed > 0:
      logger.error('%d checks FAILED', s.failed)

  def finish(self, report: bool = True) -> SuiteSummary:
    """Print the report when requested, otherwise log it; return the summary."""
    if report:
      return self.print_report()
    self.log_summary()
    return self.summarize()
