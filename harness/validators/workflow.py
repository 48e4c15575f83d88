"""
HUNTER workflow validator.

Validates the n8n workflow JSON for structural integrity, zombie
prevention, connection completeness and configuration correctness.

Checks (FAIL when violated):
1) Workflow loads and parses
2) Required pipeline nodes exist
3) Agent nodes do not set alwaysOutputData or continueErrorOutput
4) Node names are unique
5) Credential references carry an id
6) No unresolved expressions in parameters
7) At least one trigger node

Warnings:
1) Agent nodes missing (may be named differently)
2) Orphan nodes (never a connection destination)
"""
import json
import logging
from typing import Any, Optional, Sequence

from harness.config import workflow as cfg
from harness.errors import HarnessError
from harness.sources.github import DocumentStore
from harness.validation import checks
from harness.validation.reporter import Reporter
from harness.validation.reporter import SuiteSummary

logger = logging.getLogger(__name__)

SUITE_NAME = 'HUNTER WORKFLOW VALIDATOR'

Node = dict[str, Any]


def _is_agent(node: Node) -> bool:
  name = checks.node_name(node).upper()
  return any(agent in name for agent in cfg.AGENT_NODES)


def _check_required_nodes(reporter: Reporter, nodes: Sequence[Node]) -> None:
  for required in cfg.REQUIRED_NODES:
    found = checks.find_node(nodes, required)
    if found is not None:
      reporter.pass_(f'Required Node: {required}',
                     f'Found as "{checks.node_name(found)}"')
    else:
      reporter.fail(f'Required Node: {required}', 'NOT FOUND in workflow')


def _check_agent_nodes(reporter: Reporter, nodes: Sequence[Node]) -> None:
  for agent in cfg.AGENT_NODES:
    matches = [n for n in nodes if agent in checks.node_name(n).upper()]
    if matches:
      reporter.pass_(f'Agent Node: {agent}', f'{len(matches)} node(s) found')
    else:
      reporter.warn(f'Agent Node: {agent}',
                    'Not found - may be named differently')


def _check_zombies(reporter: Reporter, nodes: Sequence[Node]) -> None:
  """Agent nodes must let failures stop the workflow."""
  zombie_count = 0
  for node in nodes:
    if not _is_agent(node):
      continue
    name = checks.node_name(node)
    params = node.get('parameters')
    options = params.get('options') if isinstance(params, dict) else None
    if not isinstance(options, dict):
      options = {}

    if options.get('alwaysOutputData') is True:
      reporter.fail(f'Zombie Check: {name}',
                    'alwaysOutputData=TRUE - will produce garbage on failure')
      zombie_count += 1
    else:
      reporter.pass_(f'Zombie Check: {name}',
                     'alwaysOutputData not set or false')

    on_error = node.get('onError') or cfg.DEFAULT_ERROR_MODE
    if on_error == cfg.ZOMBIE_ERROR_MODE:
      reporter.fail(f'Error Handling: {name}',
                    f'{on_error} - errors will cascade silently')
      zombie_count += 1
    else:
      reporter.pass_(f'Error Handling: {name}', f'onError={on_error}')

  if zombie_count == 0:
    reporter.pass_('Zombie Prevention Summary',
                   'No zombie-producing configurations found')
  else:
    reporter.fail('Zombie Prevention Summary',
                  f'{zombie_count} zombie risk(s) found')


def _check_orphans(reporter: Reporter, nodes: Sequence[Node],
                   connections: dict[str, Any]) -> None:
  orphans = checks.find_orphans(nodes, connections,
                                cfg.DECORATIVE_NAME_MARKERS)
  if not orphans:
    reporter.pass_('Orphan Node Check', 'All nodes are connected')
    return
  for orphan in orphans:
    reporter.warn(f'Orphan Node: {checks.node_name(orphan)}',
                  f'Type: {orphan.get("type")} - not connected to pipeline')


def _check_duplicates(reporter: Reporter, nodes: Sequence[Node]) -> None:
  dupes = checks.duplicate_names(nodes)
  if not dupes:
    reporter.pass_('Duplicate Name Check', 'All node names unique')
    return
  for name, count in dupes.items():
    reporter.fail(f'Duplicate Name: {name}',
                  f'Appears {count} times - will cause routing errors')


def _check_credentials(reporter: Reporter, nodes: Sequence[Node]) -> None:
  issues = 0
  for node in nodes:
    creds = node.get('credentials') or {}
    if not isinstance(creds, dict):
      reporter.fail(f'Credential: {checks.node_name(node)}',
                    f'credentials is {type(creds).__name__}, expected object')
      issues += 1
      continue
    for cred_type, cred in creds.items():
      if not isinstance(cred, dict) or not cred.get('id'):
        reporter.fail(f'Credential: {checks.node_name(node)}',
                      f'{cred_type} has no credential ID')
        issues += 1
  if issues == 0:
    reporter.pass_('Credential References',
                   'All credential references have IDs')


def _check_expressions(reporter: Reporter, nodes: Sequence[Node]) -> None:
  issues = 0
  for node in nodes:
    params = json.dumps(node.get('parameters') or {})
    if all(m in params for m in cfg.UNRESOLVED_EXPRESSION_MARKERS):
      reporter.fail(f'Expression: {checks.node_name(node)}',
                    'Contains unresolved telegram expression')
      issues += 1
  if issues == 0:
    reporter.pass_('Expression Syntax', 'No obvious unresolved expressions found')


def _check_triggers(reporter: Reporter, nodes: Sequence[Node]) -> None:
  triggers = [n for n in nodes if checks.is_entry_point(n)]
  if triggers:
    names = ', '.join(checks.node_name(n) for n in triggers)
    reporter.pass_('Trigger Nodes', f'{len(triggers)} trigger(s): {names}')
  else:
    reporter.fail('Trigger Nodes', 'No trigger node found - workflow cannot start')


def check_workflow(reporter: Reporter, workflow: dict[str, Any]) -> None:
  """Run the workflow checklist against a parsed workflow document."""
  raw_nodes = workflow.get('nodes')
  if not isinstance(raw_nodes, list):
    raw_nodes = []
  nodes = [n for n in raw_nodes if isinstance(n, dict)]
  connections = workflow.get('connections')
  if not isinstance(connections, dict):
    connections = {}

  reporter.pass_('Node Count', f'{len(nodes)} nodes found')
  _check_required_nodes(reporter, nodes)
  _check_agent_nodes(reporter, nodes)
  _check_zombies(reporter, nodes)
  _check_orphans(reporter, nodes, connections)
  _check_duplicates(reporter, nodes)
  _check_credentials(reporter, nodes)
  _check_expressions(reporter, nodes)
  _check_triggers(reporter, nodes)


def validate_workflow(store: DocumentStore,
                      workflow_path: Optional[str] = None,
                      *,
                      report: bool = True) -> SuiteSummary:
  """
  Validate the HUNTER workflow.

  Args:
    store: Document store to read from
    workflow_path: Path inside the workflow repository (default from config)
    report: Print the report to stdout

  Returns:
    SuiteSummary (partial when the workflow cannot be loaded)
  """
  reporter = Reporter(SUITE_NAME)
  path = workflow_path or cfg.WORKFLOW_PATH

  try:
    raw = store.fetch_document(cfg.WORKFLOW_REPO, path)
    workflow = checks.parse_json(raw, path)
    reporter.pass_('Workflow JSON Parse', 'Loaded successfully')
  except HarnessError as e:
    logger.warning('Workflow %s unavailable: %s', path, e)
    reporter.fail('Workflow JSON Parse', str(e))
  else:
    check_workflow(reporter, workflow)

  return reporter.finish(report)
