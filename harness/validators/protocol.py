"""
Protocol validator.

Validates the protocol repository for structural completeness, version
hygiene and required document sections.

Checks:
1) Repository tree is accessible
2) Required production and agent files exist
3) Each COLLECTIVE agent directory holds a single version (WARN otherwise)
4) Document rules: required sections and markers per protocol document
5) Production versions are not duplicated in ARCHIVE (WARN)
"""
import logging
from typing import Sequence

from harness.config import protocols as cfg
from harness.config.protocols import DocumentRule
from harness.config.protocols import MarkerRule
from harness.errors import FetchError
from harness.sources.github import DocumentStore
from harness.validation import checks
from harness.validation.reporter import Reporter
from harness.validation.reporter import SuiteSummary

logger = logging.getLogger(__name__)

SUITE_NAME = 'PROTOCOL VALIDATOR'


def _basename(path: str) -> str:
  return path.rsplit('/', 1)[-1]


def _agent_of(path: str) -> str:
  """Agent directory, or the file name for files directly under COLLECTIVE."""
  return path.split('/')[1]


def _check_required_files(reporter: Reporter, file_paths: set[str],
                          required: Sequence[str], kind: str) -> None:
  for path in required:
    name = f'{kind} File: {_basename(path)}'
    if path in file_paths:
      reporter.pass_(name)
    else:
      reporter.fail(name, f'NOT FOUND: {path}')


def _check_versions(reporter: Reporter, file_paths: Sequence[str]) -> None:
  """Old agent instruction versions belong in ARCHIVE, not COLLECTIVE."""
  collective = [
      p for p in file_paths
      if p.startswith(cfg.COLLECTIVE_PREFIX) and p.endswith('.md')
  ]
  for agent, entries in checks.group_versions(collective, _agent_of).items():
    versions = checks.distinct_versions(entries)
    listing = ', '.join(f'v{v}' for v in versions)
    if len(versions) > 1:
      reporter.warn(f'Multiple Versions: {agent}',
                    f'{listing} - older should be archived')
    else:
      reporter.pass_(f'Version Clean: {agent}', f'{listing} only')


def check_marker(reporter: Reporter, text: str, rule: MarkerRule) -> None:
  ok = not checks.missing_markers(text, rule.all_of)
  if rule.any_of:
    ok = ok and any(m in text for m in rule.any_of)
  if ok:
    reporter.pass_(rule.name, rule.found_detail)
  else:
    reporter.record(rule.missing_status, rule.name, rule.missing_detail)


def check_document(reporter: Reporter, rule: DocumentRule, text: str) -> None:
  """Apply one DocumentRule to fetched text."""
  for section in rule.sections:
    name = rule.check_format.format(label=rule.label, item=section)
    if checks.contains_marker(text, section, rule.case_sensitive):
      reporter.pass_(name)
    else:
      reporter.record(rule.missing_status, name, rule.missing_detail)
  for marker in rule.markers:
    check_marker(reporter, text, marker)


def run_document_rules(reporter: Reporter, store: DocumentStore,
                       collection: str,
                       rules: Sequence[DocumentRule]) -> None:
  """
  Fetch and check each document.

  A document that cannot be loaded records one FAIL and skips only its
  own checks.
  """
  for rule in rules:
    try:
      text = store.fetch_document(collection, rule.path)
    except FetchError as e:
      logger.warning('%s unavailable: %s', rule.path, e)
      reporter.fail(f'{rule.label} Load', str(e))
      continue
    reporter.pass_(f'{rule.label} Load', f'{len(text)} characters')
    check_document(reporter, rule, text)


def _check_archive(reporter: Reporter, file_paths: Sequence[str]) -> None:
  archive = [p for p in file_paths if p.startswith(cfg.ARCHIVE_PREFIX)]
  for path in cfg.REQUIRED_PRODUCTION_FILES:
    version = checks.extract_version(path)
    if version is None:
      continue
    stem = _basename(path).replace(f'_v{version}', '')
    if any(version in a and stem in a for a in archive):
      reporter.warn('Archive Conflict',
                    f'{_basename(path)} also in ARCHIVE - verify correct '
                    'version is in production')


def validate_protocols(store: DocumentStore,
                       *,
                       report: bool = True) -> SuiteSummary:
  """
  Validate the protocol repository.

  Returns:
    SuiteSummary (partial when the repository tree cannot be fetched)
  """
  reporter = Reporter(SUITE_NAME)

  try:
    tree = store.fetch_tree(cfg.PROTOCOL_REPO)
  except FetchError as e:
    logger.warning('Protocol tree unavailable: %s', e)
    reporter.fail('Repository Access', str(e))
    return reporter.finish(report)

  reporter.pass_('Repository Access',
                 f'{len(tree)} files in {cfg.PROTOCOL_REPO}')
  file_paths = [t.path for t in tree if t.is_blob]
  path_set = set(file_paths)

  _check_required_files(reporter, path_set, cfg.REQUIRED_PRODUCTION_FILES,
                        'Production')
  _check_required_files(reporter, path_set, cfg.REQUIRED_AGENT_FILES, 'Agent')
  _check_versions(reporter, file_paths)
  run_document_rules(reporter, store, cfg.PROTOCOL_REPO, cfg.DOCUMENT_RULES)
  _check_archive(reporter, file_paths)

  return reporter.finish(report)
