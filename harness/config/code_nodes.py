"""Registry of n8n Code-node sources in the protocol repository."""
from dataclasses import dataclass


@dataclass(frozen=True)
class CodeFile:
  """
  One JavaScript Code-node source.

  Attributes:
    path: Path inside the protocol repository
    module: Module identifier the code should reference (e.g., 'H30')
    source: Upstream data source the code should mention
    normalizer: Whether the module must emit the standard output fields
  """
  path: str
  module: str
  source: str
  normalizer: bool = True

  @property
  def filename(self) -> str:
    return self.path.rsplit('/', 1)[-1]


CODE_REPO = 'A2E_Protocols'

HUNTER_CODE_FILES: tuple[CodeFile, ...] = (
    CodeFile('N8N/HUNTER_CODE/H30_NORMALIZE_FINNHUB.js', 'H30', 'Finnhub'),
    CodeFile('N8N/HUNTER_CODE/H31_NORMALIZE_CONGRESS.js', 'H31',
             'Congress.gov'),
    CodeFile('N8N/HUNTER_CODE/H32_NORMALIZE_SENATE_LDA.js', 'H32',
             'Senate LDA'),
    CodeFile('N8N/HUNTER_CODE/H33_NORMALIZE_USASPENDING.js', 'H33',
             'USASpending'),
    CodeFile('N8N/HUNTER_CODE/H34_NORMALIZE_FEC.js', 'H34', 'FEC'),
    CodeFile('N8N/HUNTER_CODE/H35_CORRELATOR.js',
             'H35',
             'Correlator',
             normalizer=False),
    CodeFile('N8N/HUNTER_CODE/HUNTER_CONSOLIDATION_NODE.js',
             'CONSOLIDATION',
             'Consolidation',
             normalizer=False),
)

EXPECTED_NORMALIZE_FIELDS: tuple[str, ...] = (
    'module_id',
    'source',
    'timestamp',
    'data',
)

# n8n Code nodes read input through these idioms
N8N_PATTERNS: tuple[str, ...] = ('$input', 'items', '$json', 'return')
MIN_N8N_PATTERNS = 2
