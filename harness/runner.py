'''
Full suite runner.

Runs the selected validators sequentially and produces an aggregate
report. A validator that raises is replaced by a single-FAIL summary so
the aggregate always completes.

Usage:
  python -m harness.runner              # all suites
  python -m harness.runner --workflow   # HUNTER workflow only (alias --hunter)
  python -m harness.runner --protocol   # protocols only
  python -m harness.runner --repo       # repository health only
  python -m harness.runner --code       # H30-H35 code only

Exit status is 1 when any check failed, 0 otherwise.
'''

import argparse
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import sys
import time
from typing import Callable, Iterable, Optional, Sequence

import pandas as pd

from harness.config.settings import HarnessSettings
from harness.sources.github import DocumentStore
from harness.sources.github import GitHubStore
from harness.validation.reporter import compute_pass_rate
from harness.validation.reporter import ReadinessTier
from harness.validation.reporter import SuiteSummary
from harness.validators import code_nodes
from harness.validators import protocol
from harness.validators import repo
from harness.validators import validate_code
from harness.validators import validate_protocols
from harness.validators import validate_repos
from harness.validators import validate_workflow
from harness.validators import workflow

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ['total', 'passed', 'failed', 'warned', 'skipped']


@dataclass(frozen=True)
class SuiteSpec:
  '''A selectable validator; title is the suite name its report uses.'''
  key: str
  title: str
  run: Callable[[DocumentStore], SuiteSummary]


SUITES: tuple[SuiteSpec, ...] = (
    SuiteSpec('repo', repo.SUITE_NAME, validate_repos),
    SuiteSpec('protocol', protocol.SUITE_NAME, validate_protocols),
    SuiteSpec('workflow', workflow.SUITE_NAME, validate_workflow),
    SuiteSpec('code', code_nodes.SUITE_NAME, validate_code),
)


def select_suites(flags: Iterable[str],
                  suites: Sequence[SuiteSpec] = SUITES) -> list[SuiteSpec]:
  '''Suites named by flags, in run order; no flags selects all.'''
  wanted = set(flags)
  if not wanted:
    return list(suites)
  unknown = wanted - {s.key for s in suites}
  if unknown:
    raise ValueError(f'Unknown suites: {sorted(unknown)}')
  return [s for s in suites if s.key in wanted]


def summaries_frame(suites: Sequence[SuiteSummary]) -> pd.DataFrame:
  '''One row per suite with counts and pass rate.'''
  rows = [{
      'suite': s.suite,
      'total': s.total,
      'passed': s.passed,
      'failed': s.failed,
      'warned': s.warned,
      'skipped': s.skipped,
      'pass_rate': round(s.pass_rate, 1),
  } for s in suites]
  return pd.DataFrame(rows, columns=['suite'] + COUNT_COLUMNS + ['pass_rate'])


@dataclass(frozen=True)
class AggregateSummary:
  '''
  Totals across every executed suite.

  Attributes:
    suites: Per-suite summaries in run order
    total/passed/failed/warned/skipped: Summed counts
    pass_rate: Overall rate over non-skipped checks
    elapsed_sec: Wall-clock time of the whole run
  '''
  suites: tuple[SuiteSummary, ...]
  total: int
  passed: int
  failed: int
  warned: int
  skipped: int
  pass_rate: float
  elapsed_sec: float = 0.0

  @property
  def tier(self) -> ReadinessTier:
    return ReadinessTier.classify(self.pass_rate)

  @property
  def exit_code(self) -> int:
    return 1 if self.failed > 0 else 0

  def to_frame(self) -> pd.DataFrame:
    return summaries_frame(self.suites)

  @classmethod
  def from_suites(cls,
                  suites: Sequence[SuiteSummary],
                  elapsed_sec: float = 0.0) -> 'AggregateSummary':
    frame = summaries_frame(suites)
    totals = {col: int(frame[col].sum()) for col in COUNT_COLUMNS}
    return cls(
        suites=tuple(suites),
        pass_rate=compute_pass_rate(totals['passed'], totals['total'],
                                    totals['skipped']),
        elapsed_sec=elapsed_sec,
        **totals,
    )


def run_suites(store: DocumentStore,
               selected: Sequence[SuiteSpec],
               *,
               report: bool = True) -> AggregateSummary:
  '''
  Execute suites one at a time and aggregate their summaries.

  Args:
    store: Document store shared by every validator
    selected: Suites to run, in order
    report: Print the aggregate report to stdout

  Returns:
    AggregateSummary for programmatic chaining
  '''
  start = time.monotonic()
  summaries: list[SuiteSummary] = []

  for spec in selected:
    logger.info('Running %s...', spec.title)
    try:
      summaries.append(spec.run(store))
    except Exception as e:  # pylint: disable=broad-except
      logger.error('%s crashed: %s', spec.title, e, exc_info=True)
      summaries.append(SuiteSummary.crashed(spec.title, e))

  aggregate = AggregateSummary.from_suites(summaries,
                                           elapsed_sec=time.monotonic() -
                                           start)
  if report:
    print_aggregate(aggregate)
  return aggregate


def print_aggregate(aggregate: AggregateSummary) -> None:
  '''Print per-suite rows, totals and the readiness tier.'''
  bar = '#' * 60
  print()
  print(bar)
  print('  AGGREGATE RESULTS')
  print(bar)
  frame = aggregate.to_frame()
  if not frame.empty:
    print(frame.to_string(index=False))
  print('-' * 60)
  print(f'  TOTAL: {aggregate.passed} pass | {aggregate.failed} fail | '
        f'{aggregate.warned} warn | {aggregate.total} tests')
  print(f'  OVERALL PASS RATE: {aggregate.pass_rate:.1f}%')
  print(f'  ELAPSED: {aggregate.elapsed_sec:.1f}s')
  print()
  print(f'  {aggregate.tier.value}')
  print(bar)


def build_argparser() -> argparse.ArgumentParser:
  p = argparse.ArgumentParser(
      description='Run configuration harness validators')
  p.add_argument('--repo',
                 action='store_true',
                 help='repository health validator')
  p.add_argument('--protocol',
                 action='store_true',
                 help='protocol document validator')
  p.add_argument('--workflow',
                 '--hunter',
                 dest='workflow',
                 action='store_true',
                 help='HUNTER workflow validator')
  p.add_argument('--code',
                 action='store_true',
                 help='H30-H35 code-node validator')
  p.add_argument('--owner', help='GitHub owner (default: $HARNESS_OWNER)')
  p.add_argument('--timeout',
                 type=float,
                 help='HTTP timeout in seconds for every request')
  p.add_argument('-v',
                 '--verbose',
                 action='store_true',
                 help='debug logging')
  return p


def main(argv: Optional[Sequence[str]] = None,
         store: Optional[DocumentStore] = None) -> int:
  '''Parse arguments, run the selected suites, return the exit status.'''
  args = build_argparser().parse_args(argv)

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  if store is None:
    settings = HarnessSettings.from_env().with_overrides(
        owner=args.owner, timeout_sec=args.timeout)
    if not settings.token:
      logger.warning('GITHUB_TOKEN not set; using anonymous API access')
    store = GitHubStore(settings)

  flags = [s.key for s in SUITES if getattr(args, s.key)]
  selected = select_suites(flags, SUITES)

  print()
  print('A2E TEST HARNESS v2.0 - FULL SUITE')
  print(f'   {datetime.now(timezone.utc).isoformat()}')

  return run_suites(store, selected).exit_code


def cli() -> None:
  '''Console entry point; any uncaught error exits with status 1.'''
  try:
    code = main()
  except Exception as e:  # pylint: disable=broad-except
    logger.critical('Suite runner crashed: %s', e, exc_info=True)
    code = 1
  sys.exit(code)


if __name__ == '__main__':
  cli()
