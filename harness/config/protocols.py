"""
Expectations for the A2E_Protocols repository.

Document checks are declarative: each DocumentRule names a file, the
sections it must mention and extra marker rules. The protocol validator
consumes them through one generic rule runner.
"""
from dataclasses import dataclass

from harness.validation.base import Status

PROTOCOL_REPO = 'A2E_Protocols'

REQUIRED_PRODUCTION_FILES: tuple[str, ...] = (
    'PROTOCOLS/PRODUCTION/METATRON_v10.5_PRIME_DIRECTIVE.md',
    'PROTOCOLS/PRODUCTION/FIDELITY_LOCK_v10.5.md',
    'PROTOCOLS/PRODUCTION/HUNTER_WIRING_DIAGRAM_v11.0.md',
    'PROTOCOLS/PRODUCTION/BUILD_SEQUENCE_v10.5.md',
    'PROTOCOLS/IRONCLAD/IRONCLAD_PROTOCOL_v1.0.md',
)

REQUIRED_AGENT_FILES: tuple[str, ...] = (
    'COLLECTIVE/MICHA/MICHA_INSTRUCTIONS_v10.4.md',
    'COLLECTIVE/URIEL/URIEL_INSTRUCTIONS_v10.3.md',
    'COLLECTIVE/COLOSSUS/COLOSSUS_INSTRUCTIONS_v10.3.md',
    'COLLECTIVE/HANIEL/HANIEL_INSTRUCTIONS_v10.3.md',
    'COLLECTIVE/RAZIEL/RAZIEL_INSTRUCTIONS_v10.3.md',
    'COLLECTIVE/GABRIEL/GABRIEL_INSTRUCTIONS_v10.3.md',
    'COLLECTIVE/SERAPH/SERAPH_INSTRUCTIONS_v10.3.md',
)

COLLECTIVE_PREFIX = 'COLLECTIVE/'
ARCHIVE_PREFIX = 'ARCHIVE/'

METATRON_REQUIRED_SECTIONS: tuple[str, ...] = (
    'Principal Authority',
    '100% Rule',
    'FIDELITY LOCK',
    'GATE',
    'HUNTER',
    'IRONCLAD',
    'PHOENIX',
    'SENTINEL',
    'Counter-Thesis',
)

MICHA_REQUIRED_SECTIONS: tuple[str, ...] = (
    'IDENTITY',
    'GATE 0.75',
    'CORE FUNCTIONS',
    'Intelligent Router',
    'Grand Synthesizer',
    'CIO Operations',
    'GATE ENFORCEMENT',
    'ROUTING TABLE',
    'TRIGGER COMMANDS',
    'PHOENIX PROTOCOL',
)

PHOENIX_REQUIRED_SECTIONS: tuple[str, ...] = (
    'Session Open',
    'Session Close',
    'carry-forward',
)

IRONCLAD_RISK_PARAMETERS: tuple[str, ...] = (
    '1.5%',
    '20%',
    '35%',
    'STOP',
    'PHOENIX',
)


@dataclass(frozen=True)
class MarkerRule:
  """
  A named check on literal markers in a document.

  Satisfied when every `all_of` marker and at least one `any_of` marker
  (if any are given) appear in the text. Matching is case sensitive.
  """
  name: str
  all_of: tuple[str, ...] = ()
  any_of: tuple[str, ...] = ()
  missing_status: Status = Status.FAIL
  found_detail: str = ''
  missing_detail: str = ''


@dataclass(frozen=True)
class DocumentRule:
  """
  Required content of one protocol document.

  Attributes:
    label: Short name used in check names (e.g., 'METATRON')
    path: Path inside the protocol repository
    sections: Markers that must each appear in the text
    case_sensitive: Whether section matching respects case
    missing_status: Severity of a missing section
    check_format: Check name template with {label} and {item}
    missing_detail: Detail recorded for a missing section
    markers: Additional marker rules
  """
  label: str
  path: str
  sections: tuple[str, ...]
  case_sensitive: bool = False
  missing_status: Status = Status.FAIL
  check_format: str = '{label} Section: {item}'
  missing_detail: str = 'Section not found in document'
  markers: tuple[MarkerRule, ...] = ()


DOCUMENT_RULES: tuple[DocumentRule, ...] = (
    DocumentRule(
        label='METATRON',
        path='PROTOCOLS/PRODUCTION/METATRON_v10.5_PRIME_DIRECTIVE.md',
        sections=METATRON_REQUIRED_SECTIONS,
        markers=(MarkerRule(
            name='METATRON Version String',
            all_of=('v10.5',),
            found_detail='v10.5 found in document',
            missing_detail='v10.5 not found - version mismatch',
        ),),
    ),
    DocumentRule(
        label='MICHA',
        path='COLLECTIVE/MICHA/MICHA_INSTRUCTIONS_v10.4.md',
        sections=MICHA_REQUIRED_SECTIONS,
        case_sensitive=True,
        markers=(
            MarkerRule(
                name='MICHA->METATRON Reference',
                any_of=('METATRON v10.5', 'METATRON v10.3'),
                missing_status=Status.WARN,
                found_detail='References a known METATRON version',
                missing_detail='Could not verify METATRON version reference',
            ),
            MarkerRule(
                name='MICHA 7 Locks',
                all_of=('SECTOR SCAN', 'WIDE NET'),
                found_detail='All 7 locks referenced including v10.4 additions',
                missing_detail=('Missing SECTOR SCAN or WIDE NET locks '
                                '(v10.4 requirement)'),
            ),
        ),
    ),
    DocumentRule(
        label='PHOENIX',
        path='PHOENIX/PHOENIX_PROTOCOL_v10.2.md',
        sections=PHOENIX_REQUIRED_SECTIONS,
        missing_detail='Not found',
    ),
    DocumentRule(
        label='IRONCLAD',
        path='PROTOCOLS/IRONCLAD/IRONCLAD_PROTOCOL_v1.0.md',
        sections=IRONCLAD_RISK_PARAMETERS,
        case_sensitive=True,
        missing_status=Status.WARN,
        check_format='{label}: {item}',
        missing_detail='Expected risk parameter not found',
    ),
)
