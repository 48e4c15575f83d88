"""
Repository health validator.

Checks every registered repository for existence, freshness, content and
(when required directories are declared) file tree structure. Repositories
missing from the registry are reported as warnings.
"""
from datetime import datetime, timezone
import logging
from typing import Mapping, Optional

from harness.config import repos as cfg
from harness.config.repos import RepoExpectation
from harness.errors import FetchError
from harness.sources.github import DocumentStore
from harness.sources.github import RepoEntity
from harness.validation.reporter import Reporter
from harness.validation.reporter import SuiteSummary

logger = logging.getLogger(__name__)

SUITE_NAME = 'REPOSITORY HEALTH VALIDATOR'


def days_since(updated_at: datetime, now: datetime) -> int:
  """Whole days elapsed, rounded down."""
  return int((now - updated_at).total_seconds() // 86400)


def check_tree(reporter: Reporter, store: DocumentStore, name: str,
               expected: RepoExpectation) -> None:
  """File count and required directories for one repository."""
  try:
    tree = store.fetch_tree(name)
  except FetchError as e:
    reporter.warn(f'Tree: {name}', f'Could not fetch tree: {e}')
    return

  top_dirs = {t.path.split('/')[0] for t in tree if t.is_tree}
  blob_count = sum(1 for t in tree if t.is_blob)

  if blob_count >= expected.min_files:
    reporter.pass_(f'File Count: {name}',
                   f'{blob_count} files (min: {expected.min_files})')
  else:
    reporter.fail(f'File Count: {name}',
                  f'{blob_count} files - expected {expected.min_files}+')

  for req_dir in expected.required_dirs:
    present = (req_dir in top_dirs or
               any(t.path.startswith(req_dir + '/') for t in tree))
    if present:
      reporter.pass_(f'Dir: {name}/{req_dir}')
    else:
      reporter.fail(f'Dir: {name}/{req_dir}', 'Required directory missing')


def check_repo(reporter: Reporter, store: DocumentStore, name: str,
               expected: RepoExpectation, repo: Optional[RepoEntity],
               now: datetime, stale_days: int) -> None:
  """Apply the registry checks to one expected repository."""
  if repo is None:
    if expected.critical:
      reporter.fail(f'Repo Exists: {name}', 'CRITICAL repo not found')
    else:
      reporter.warn(f'Repo Exists: {name}', 'Not found')
    return

  reporter.pass_(f'Repo Exists: {name}', f'{repo.visibility} | {repo.size}KB')

  age = days_since(repo.updated_at, now)
  if age <= stale_days:
    reporter.pass_(f'Fresh: {name}', f'Updated {age} days ago')
  elif expected.critical:
    reporter.fail(f'Stale: {name}',
                  f'CRITICAL repo not updated in {age} days')
  else:
    reporter.warn(f'Stale: {name}', f'Not updated in {age} days')

  if repo.size == 0 and expected.min_files > 0:
    reporter.fail(f'Empty: {name}',
                  f'Size=0KB but expected {expected.min_files}+ files')
    return

  if expected.required_dirs:
    check_tree(reporter, store, name, expected)


def validate_repos(store: DocumentStore,
                   *,
                   registry: Optional[Mapping[str, RepoExpectation]] = None,
                   now: Optional[datetime] = None,
                   stale_days: int = cfg.STALE_THRESHOLD_DAYS,
                   report: bool = True) -> SuiteSummary:
  """
  Validate repository health against the registry.

  Args:
    store: Document store to read from
    registry: Expected repositories (default: EXPECTED_REPOS)
    now: Reference time for staleness (default: current UTC time)
    stale_days: Days without update before a repository is stale
    report: Print the report to stdout

  Returns:
    SuiteSummary (partial when the listing cannot be fetched)
  """
  reporter = Reporter(SUITE_NAME)
  expected_repos = cfg.EXPECTED_REPOS if registry is None else registry
  now = now or datetime.now(timezone.utc)

  try:
    repos = store.list_entities()
  except FetchError as e:
    logger.warning('Repository listing unavailable: %s', e)
    reporter.fail('GitHub API Access', str(e))
    return reporter.finish(report)

  reporter.pass_('GitHub API Access', f'{len(repos)} repos found')

  if len(repos) >= cfg.MIN_REPO_COUNT:
    reporter.pass_('Repo Count',
                   f'{len(repos)} repos (expected {cfg.MIN_REPO_COUNT}+)')
  else:
    reporter.warn('Repo Count', f'{len(repos)} repos - expected at least '
                  f'{cfg.MIN_REPO_COUNT}')

  by_name = {r.name: r for r in repos}
  for name, expected in expected_repos.items():
    check_repo(reporter, store, name, expected, by_name.get(name), now,
               stale_days)

  for repo in repos:
    if repo.name not in expected_repos:
      reporter.warn(f'Unknown Repo: {repo.name}',
                    f'{repo.visibility} | {repo.size}KB - not in expected list')

  return reporter.finish(report)
