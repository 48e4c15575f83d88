import base64
from unittest import mock

import pytest
import requests

from harness.config import protocols as cfg
from harness.config.protocols import DocumentRule
from harness.config.protocols import MarkerRule
from harness.config.settings import HarnessSettings
from harness.sources.github import GitHubStore
from harness.validation.base import Status
from harness.validation.reporter import Reporter
from harness.validators.protocol import check_document
from harness.validators.protocol import run_document_rules
from harness.validators.protocol import validate_protocols

METATRON = """
# METATRON v10.5 PRIME DIRECTIVE
Principal Authority, the 100% Rule and the Fidelity Lock.
Every GATE, HUNTER, IRONCLAD, PHOENIX and SENTINEL stage needs a
counter-thesis.
"""

MICHA = """
IDENTITY / GATE 0.75 / CORE FUNCTIONS
Intelligent Router, Grand Synthesizer, CIO Operations
GATE ENFORCEMENT, ROUTING TABLE, TRIGGER COMMANDS, PHOENIX PROTOCOL
Aligned with METATRON v10.5. Locks include SECTOR SCAN and WIDE NET.
"""

PHOENIX = 'Session Open -> work -> Session Close with carry-forward notes.'

IRONCLAD = 'Risk 1.5% per trade, 20% sector cap, 35% drawdown STOP; PHOENIX.'


def _tree_paths():
  return (list(cfg.REQUIRED_PRODUCTION_FILES) +
          list(cfg.REQUIRED_AGENT_FILES) +
          ['PHOENIX/PHOENIX_PROTOCOL_v10.2.md', 'README.md'])


@pytest.fixture
def healthy_store(store):
  store.set_tree(cfg.PROTOCOL_REPO, _tree_paths())
  docs = dict(zip([r.path for r in cfg.DOCUMENT_RULES],
                  [METATRON, MICHA, PHOENIX, IRONCLAD]))
  for path, text in docs.items():
    store.add_document(cfg.PROTOCOL_REPO, path, text)
  return store


def _named(summary, prefix):
  return [r for r in summary.results if r.name.startswith(prefix)]


class TestValidateProtocols:

  def test_healthy_repository(self, healthy_store):
    summary = validate_protocols(healthy_store, report=False)

    problems = [r for r in summary.results if r.status is not Status.PASS]
    assert problems == []
    assert len(_named(summary, 'Version Clean')) == 7
    assert summary.pass_rate == 100.0

  def test_tree_unavailable_short_circuits(self, store):
    summary = validate_protocols(store, report=False)

    assert summary.total == 1
    assert summary.results[0].name == 'Repository Access'
    assert summary.results[0].status is Status.FAIL
    assert store.calls == [('tree', cfg.PROTOCOL_REPO)]

  def test_missing_required_files(self, healthy_store):
    paths = [p for p in _tree_paths() if 'FIDELITY_LOCK' not in p and
             'SERAPH' not in p]
    healthy_store.set_tree(cfg.PROTOCOL_REPO, paths)

    summary = validate_protocols(healthy_store, report=False)

    failed = [r.name for r in summary.results if r.status is Status.FAIL]
    assert failed == [
        'Production File: FIDELITY_LOCK_v10.5.md',
        'Agent File: SERAPH_INSTRUCTIONS_v10.3.md',
    ]

  def test_multiple_versions_warn(self, healthy_store):
    paths = _tree_paths() + ['COLLECTIVE/URIEL/URIEL_INSTRUCTIONS_v10.2.md']
    healthy_store.set_tree(cfg.PROTOCOL_REPO, paths)

    summary = validate_protocols(healthy_store, report=False)

    warned = [r for r in summary.results if r.status is Status.WARN]
    assert [r.name for r in warned] == ['Multiple Versions: URIEL']
    assert warned[0].detail.startswith('v10.3, v10.2')

  def test_top_level_collective_files_grouped_by_name(self, healthy_store):
    paths = _tree_paths() + ['COLLECTIVE/ROSTER_v2.1.md', 'COLLECTIVE/NOTES.md']
    healthy_store.set_tree(cfg.PROTOCOL_REPO, paths)

    summary = validate_protocols(healthy_store, report=False)

    roster = _named(summary, 'Version Clean: ROSTER_v2.1.md')
    assert len(roster) == 1
    assert roster[0].detail == 'v2.1 only'
    assert len(_named(summary, 'Version Clean')) == 8

  def test_document_load_failure_is_isolated(self, healthy_store):
    del healthy_store.documents[(cfg.PROTOCOL_REPO, cfg.DOCUMENT_RULES[0].path)]

    summary = validate_protocols(healthy_store, report=False)

    failed = [r.name for r in summary.results if r.status is Status.FAIL]
    assert failed == ['METATRON Load']
    assert not _named(summary, 'METATRON Section')
    assert len(_named(summary, 'MICHA Section')) == 10

  def test_metatron_sections_ignore_case(self, healthy_store):
    summary = validate_protocols(healthy_store, report=False)

    counter = _named(summary, 'METATRON Section: Counter-Thesis')
    assert counter[0].status is Status.PASS

  def test_micha_missing_reference_warns(self, healthy_store):
    text = MICHA.replace('METATRON v10.5', 'METATRON latest')
    healthy_store.add_document(cfg.PROTOCOL_REPO, cfg.DOCUMENT_RULES[1].path,
                               text)

    summary = validate_protocols(healthy_store, report=False)

    ref = _named(summary, 'MICHA->METATRON Reference')[0]
    assert ref.status is Status.WARN

  def test_ironclad_missing_parameter_warns(self, healthy_store):
    healthy_store.add_document(cfg.PROTOCOL_REPO, cfg.DOCUMENT_RULES[3].path,
                               'Risk 1.5% per trade; PHOENIX')

    summary = validate_protocols(healthy_store, report=False)

    assert summary.failed == 0
    warned = [r.name for r in summary.results if r.status is Status.WARN]
    assert warned == ['IRONCLAD: 20%', 'IRONCLAD: 35%', 'IRONCLAD: STOP']

  def test_archive_conflict(self, healthy_store):
    paths = _tree_paths() + ['ARCHIVE/v10.5/BUILD_SEQUENCE.md']
    healthy_store.set_tree(cfg.PROTOCOL_REPO, paths)

    summary = validate_protocols(healthy_store, report=False)

    conflicts = _named(summary, 'Archive Conflict')
    assert len(conflicts) == 1
    assert conflicts[0].status is Status.WARN
    assert 'BUILD_SEQUENCE_v10.5.md' in conflicts[0].detail


class TestDocumentRules:

  def test_check_document_formats_and_severity(self):
    rule = DocumentRule(
        label='DOC',
        path='doc.md',
        sections=('Alpha', 'Beta'),
        case_sensitive=True,
        missing_status=Status.WARN,
        check_format='{label}: {item}',
        markers=(MarkerRule('DOC Pair', all_of=('x', 'y')),),
    )
    reporter = Reporter('T')

    check_document(reporter, rule, 'Alpha beta x')

    assert [(r.status, r.name) for r in reporter.results] == [
        (Status.PASS, 'DOC: Alpha'),
        (Status.WARN, 'DOC: Beta'),
        (Status.FAIL, 'DOC Pair'),
    ]

  def test_any_of_marker(self):
    rule = DocumentRule(
        label='DOC',
        path='doc.md',
        sections=(),
        markers=(MarkerRule('Ref', any_of=('v1', 'v2'),
                            missing_status=Status.WARN),),
    )
    reporter = Reporter('T')

    check_document(reporter, rule, 'see v2')
    check_document(reporter, rule, 'see v3')

    assert [r.status for r in reporter.results] == [Status.PASS, Status.WARN]

  def test_run_document_rules_continues_after_failure(self, store):
    rules = (
        DocumentRule(label='ONE', path='one.md', sections=('a',)),
        DocumentRule(label='TWO', path='two.md', sections=('b',)),
    )
    store.add_document('repo', 'two.md', 'b')
    reporter = Reporter('T')

    run_document_rules(reporter, store, 'repo', rules)

    assert [(r.status, r.name) for r in reporter.results] == [
        (Status.FAIL, 'ONE Load'),
        (Status.PASS, 'TWO Load'),
        (Status.PASS, 'TWO Section: b'),
    ]


class TestGitHubBackedDocuments:

  def _session(self, documents, bad_path):
    """Session answering tree, contents and raw requests from a dict."""
    settings = HarnessSettings(owner='octo')
    contents = f'/repos/octo/{cfg.PROTOCOL_REPO}/contents/'

    def get(url, **kwargs):
      resp = mock.Mock()
      resp.status_code = 200
      if '/git/trees/' in url:
        resp.json.return_value = {
            'tree': [{'path': p, 'type': 'blob'} for p in _tree_paths()]
        }
      elif contents in url:
        path = url.split(contents, 1)[1]
        raw = (b'# doc \xff\xfe' if path == bad_path else
               documents[path].encode())
        resp.json.return_value = {'content': base64.b64encode(raw).decode()}
      else:
        resp.status_code = 404
        resp.text = '404: Not Found'
      return resp

    session = mock.Mock(spec=requests.Session)
    session.get.side_effect = get
    return GitHubStore(settings, session=session)

  def test_undecodable_document_fails_only_its_load(self):
    docs = dict(zip([r.path for r in cfg.DOCUMENT_RULES],
                    [METATRON, MICHA, PHOENIX, IRONCLAD]))
    store = self._session(docs, cfg.DOCUMENT_RULES[0].path)

    summary = validate_protocols(store, report=False)

    failed = [r.name for r in summary.results if r.status is Status.FAIL]
    assert failed == ['METATRON Load']
    assert not _named(summary, 'METATRON Section')
    assert len(_named(summary, 'MICHA Section')) == 10
    assert _named(summary, 'IRONCLAD Load')[0].status is Status.PASS
