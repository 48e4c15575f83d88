import pytest

from harness import runner
from harness.runner import AggregateSummary
from harness.runner import run_suites
from harness.runner import select_suites
from harness.runner import SuiteSpec
from harness.validation.base import CheckResult
from harness.validation.base import Status
from harness.validation.reporter import ReadinessTier
from harness.validation.reporter import SuiteSummary


def _summary(suite, passed=0, failed=0, warned=0, skipped=0):
  results = ([CheckResult(Status.PASS, f'p{i}') for i in range(passed)] +
             [CheckResult(Status.FAIL, f'f{i}') for i in range(failed)] +
             [CheckResult(Status.WARN, f'w{i}') for i in range(warned)] +
             [CheckResult(Status.SKIP, f's{i}') for i in range(skipped)])
  return SuiteSummary.from_results(suite, tuple(results))


def _explode(store):
  raise RuntimeError('boom')


class TestSelectSuites:

  def test_no_flags_selects_all_in_order(self):
    keys = [s.key for s in select_suites([])]

    assert keys == ['repo', 'protocol', 'workflow', 'code']

  def test_keeps_run_order(self):
    keys = [s.key for s in select_suites(['code', 'repo'])]

    assert keys == ['repo', 'code']

  def test_unknown_flag(self):
    with pytest.raises(ValueError):
      select_suites(['bogus'])


class TestAggregateSummary:

  def test_sums_counts(self):
    aggregate = AggregateSummary.from_suites([
        _summary('A', passed=8, failed=1, warned=1),
        _summary('B', passed=9, skipped=2),
    ])

    assert (aggregate.total, aggregate.passed, aggregate.failed,
            aggregate.warned, aggregate.skipped) == (21, 17, 1, 1, 2)
    assert aggregate.pass_rate == pytest.approx(100.0 * 17 / 19)
    assert aggregate.tier is ReadinessTier.TEST_PASS
    assert aggregate.exit_code == 1

  def test_warnings_do_not_fail(self):
    aggregate = AggregateSummary.from_suites(
        [_summary('A', passed=19, warned=1)])

    assert aggregate.exit_code == 0
    assert aggregate.tier is ReadinessTier.PRODUCTION_READY

  def test_empty(self):
    aggregate = AggregateSummary.from_suites([])

    assert aggregate.total == 0
    assert aggregate.pass_rate == 0.0
    assert aggregate.tier is ReadinessTier.CRITICAL
    assert aggregate.exit_code == 0

  def test_frame_rows(self):
    aggregate = AggregateSummary.from_suites(
        [_summary('A', passed=2, failed=1),
         _summary('B', passed=1)])

    frame = aggregate.to_frame()

    assert list(frame['suite']) == ['A', 'B']
    assert list(frame['pass_rate']) == [66.7, 100.0]


class TestRunSuites:

  def test_crash_is_replaced(self, store):
    selected = [
        SuiteSpec('a', 'ALPHA', lambda s: _summary('ALPHA', passed=3)),
        SuiteSpec('b', 'BETA', _explode),
        SuiteSpec('c', 'GAMMA', lambda s: _summary('GAMMA', passed=1)),
    ]

    aggregate = run_suites(store, selected, report=False)

    assert [s.suite for s in aggregate.suites] == ['ALPHA', 'BETA', 'GAMMA']
    crashed = aggregate.suites[1]
    assert (crashed.total, crashed.failed, crashed.pass_rate) == (1, 1, 0.0)
    assert crashed.results[0].detail == 'RuntimeError: boom'
    assert aggregate.total == 5
    assert aggregate.exit_code == 1

  def test_crashed_suite_keeps_report_name(self, store):
    workflow_spec = select_suites(['workflow'])[0]
    healthy = run_suites(store, [workflow_spec], report=False).suites[0]
    crashing = SuiteSpec('workflow', workflow_spec.title, _explode)

    crashed = run_suites(store, [crashing], report=False).suites[0]

    assert crashed.suite == healthy.suite == 'HUNTER WORKFLOW VALIDATOR'

  def test_titles_match_validator_names(self):
    assert [s.title for s in runner.SUITES] == [
        'REPOSITORY HEALTH VALIDATOR', 'PROTOCOL VALIDATOR',
        'HUNTER WORKFLOW VALIDATOR', 'H30-H35 CODE VALIDATOR'
    ]

  def test_prints_report(self, store, capsys):
    selected = [SuiteSpec('a', 'ALPHA', lambda s: _summary('ALPHA', 1))]

    run_suites(store, selected)

    out = capsys.readouterr().out
    assert 'AGGREGATE RESULTS' in out
    assert 'OVERALL PASS RATE: 100.0%' in out
    assert 'PRODUCTION READY' in out


class TestMain:

  def test_failures_exit_one(self, store):
    assert runner.main(['--code'], store=store) == 1
    assert {c[0] for c in store.calls} == {'document'}

  def test_hunter_alias(self, store):
    runner.main(['--hunter'], store=store)

    assert store.calls[0][1] == 'AIORA'

  def test_clean_run_exits_zero(self, store, monkeypatch):
    clean = (SuiteSpec('repo', 'REPO', lambda s: _summary('REPO', 4)),)
    monkeypatch.setattr(runner, 'SUITES', clean)

    assert runner.main(['--repo'], store=store) == 0

  def test_cli_exits_one_on_crash(self, monkeypatch):

    def crash():
      raise RuntimeError('unexpected')

    monkeypatch.setattr(runner, 'main', crash)

    with pytest.raises(SystemExit) as exc:
      runner.cli()

    assert exc.value.code == 1
