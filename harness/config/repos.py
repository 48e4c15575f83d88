"""
Registry of expected repositories.

Each entry declares the minimum file count, whether the repository is
critical (failures instead of warnings) and the top-level directories that
must exist. Directory and file-count checks only run for entries that
declare required directories.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RepoExpectation:
  min_files: int
  critical: bool = False
  required_dirs: tuple[str, ...] = ()


EXPECTED_REPOS: dict[str, RepoExpectation] = {
    'A2E_Protocols':
        RepoExpectation(50, True, ('COLLECTIVE', 'PROTOCOLS', 'PHOENIX')),
    'AIORA':
        RepoExpectation(15, True, ('n8n_workflows', 'docs')),
    'Ashes2Echoes':
        RepoExpectation(1),
    'A2E_EmailArchive':
        RepoExpectation(1),
    'A2E_Website':
        RepoExpectation(10, False, ('app', 'components')),
    'A2E_Apparel':
        RepoExpectation(1),
    'A2E_Infrastructure':
        RepoExpectation(3),
    'test-harness':
        RepoExpectation(5, True, ('src',)),
    'github-mcp-server':
        RepoExpectation(3),
    'AllChats':
        RepoExpectation(0),
    'forge-landing':
        RepoExpectation(1),
    'etrade-oauth-debug':
        RepoExpectation(1),
    'n8n-docs':
        RepoExpectation(1),
}

MIN_REPO_COUNT = 13
STALE_THRESHOLD_DAYS = 30
