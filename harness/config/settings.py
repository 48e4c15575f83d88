"""
Runtime settings for the harness.

Settings come from the environment (GITHUB_TOKEN, HARNESS_OWNER) and can be
overridden from the command line.
"""
from dataclasses import dataclass
from dataclasses import replace
import os
from typing import Mapping, Optional

DEFAULT_OWNER = 'Barefootservants2'
DEFAULT_TIMEOUT_SEC = 30


@dataclass(frozen=True)
class HarnessSettings:
  """
  Connection settings for the GitHub document store.

  Attributes:
    owner: GitHub user owning every validated repository
    token: Personal access token ('' for anonymous access)
    api_base: REST API root
    raw_base: Raw content root used as the fallback endpoint
    branch: Branch read for trees and raw documents
    timeout_sec: Timeout applied to every HTTP request
    user_agent: User-Agent header sent to the API
  """
  owner: str = DEFAULT_OWNER
  token: str = ''
  api_base: str = 'https://api.github.com'
  raw_base: str = 'https://raw.githubusercontent.com'
  branch: str = 'main'
  timeout_sec: float = DEFAULT_TIMEOUT_SEC
  user_agent: str = 'A2E-TestHarness/2.0'

  @classmethod
  def from_env(cls,
               environ: Optional[Mapping[str, str]] = None
              ) -> 'HarnessSettings':
    """Build settings from environment variables."""
    env = os.environ if environ is None else environ
    return cls(
        owner=env.get('HARNESS_OWNER', DEFAULT_OWNER),
        token=env.get('GITHUB_TOKEN', ''),
    )

  def with_overrides(self,
                     *,
                     owner: Optional[str] = None,
                     timeout_sec: Optional[float] = None
                    ) -> 'HarnessSettings':
    """Return a copy with CLI overrides applied (None keeps the value)."""
    changes = {}
    if owner:
      changes['owner'] = owner
    if timeout_sec is not None:
      changes['timeout_sec'] = timeout_sec
    return replace(self, **changes)
