"""
Code-node validator.

Validates the JavaScript sources of the HUNTER influence-chain Code nodes:
syntax, module and source references, n8n idioms, error handling, output
fields and hardcoded credentials.
"""
import logging
from typing import Optional

import esprima
from esprima.error_handler import Error as EsprimaError

from harness.config import code_nodes as cfg
from harness.config.code_nodes import CodeFile
from harness.errors import FetchError
from harness.sources.github import DocumentStore
from harness.validation import checks
from harness.validation.reporter import Reporter
from harness.validation.reporter import SuiteSummary

logger = logging.getLogger(__name__)

SUITE_NAME = 'H30-H35 CODE VALIDATOR'


def syntax_error(code: str) -> Optional[str]:
  """
  Parse code the way n8n runs it.

  Code nodes execute inside an async function, so a bare `return` is valid.

  Returns:
    Parser message, or None when the code parses
  """
  wrapped = f'(async function() {{\n{code}\n}})()'
  try:
    esprima.parseScript(wrapped)
  except EsprimaError as e:
    return str(e)
  return None


def check_code(reporter: Reporter, code_file: CodeFile, code: str) -> None:
  """Run the checklist against one source file."""
  module = code_file.module

  error = syntax_error(code)
  if error is not None:
    reporter.fail(f'Syntax: {module}', f'Parse error: {error}')
    return
  reporter.pass_(f'Syntax: {module}',
                 'JavaScript parses without error (n8n function context)')

  if module in code or module.lower() in code:
    reporter.pass_(f'Module ID: {module}', 'References own module identifier')
  else:
    reporter.warn(f'Module ID: {module}',
                  'Does not reference own module ID in code')

  if checks.contains_marker(code, code_file.source, case_sensitive=False):
    reporter.pass_(f'Source Ref: {module}', f'References {code_file.source}')
  else:
    reporter.warn(f'Source Ref: {module}',
                  f'Does not reference {code_file.source} - may use '
                  'different naming')

  found = [p for p in cfg.N8N_PATTERNS if p in code]
  if len(found) >= cfg.MIN_N8N_PATTERNS:
    reporter.pass_(f'n8n Compat: {module}', f'Uses: {", ".join(found)}')
  else:
    reporter.warn(f'n8n Compat: {module}',
                  f'Only found: {", ".join(found)} - may not work as n8n '
                  'Code node')

  if 'try' in code and 'catch' in code:
    reporter.pass_(f'Error Handling: {module}', 'Has try/catch')
  else:
    reporter.fail(f'Error Handling: {module}',
                  'No try/catch - will crash on bad input')

  if code_file.normalizer:
    for field in cfg.EXPECTED_NORMALIZE_FIELDS:
      if field in code:
        reporter.pass_(f'Output Field: {module}.{field}')
      else:
        reporter.warn(f'Output Field: {module}.{field}',
                      'Expected field not found in code')

  if checks.scan_secrets(code) is not None:
    reporter.fail(f'Security: {module}', 'HARDCODED API KEY DETECTED')
  else:
    reporter.pass_(f'Security: {module}', 'No hardcoded API keys')


def validate_code(store: DocumentStore,
                  *,
                  files: tuple[CodeFile, ...] = cfg.HUNTER_CODE_FILES,
                  report: bool = True) -> SuiteSummary:
  """
  Validate every registered Code-node source.

  A file that cannot be loaded records one FAIL; the other files are still
  checked.
  """
  reporter = Reporter(SUITE_NAME)

  for code_file in files:
    try:
      code = store.fetch_document(cfg.CODE_REPO, code_file.path)
    except FetchError as e:
      logger.warning('%s unavailable: %s', code_file.path, e)
      reporter.fail(f'Load: {code_file.module}', str(e))
      continue
    reporter.pass_(f'Load: {code_file.module}',
                   f'{len(code)} chars from {code_file.filename}')
    check_code(reporter, code_file, code)

  return reporter.finish(report)
