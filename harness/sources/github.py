'''
GitHub document store.

Validators read everything through the DocumentStore protocol:
- fetch_document(collection, path): file text
- fetch_tree(collection): recursive file tree of the configured branch
- list_entities(): repositories owned by the authenticated user

GitHubStore implements it with requests. Documents are read from the
contents API (base64 payload) and fall back once to the raw endpoint,
which also serves files too large for the API to inline.
'''

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from harness.config.settings import HarnessSettings
from harness.errors import FetchError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeEntry:
  path: str
  type: str  # 'tree' or 'blob'

  @property
  def is_blob(self) -> bool:
    return self.type == 'blob'

  @property
  def is_tree(self) -> bool:
    return self.type == 'tree'


@dataclass(frozen=True)
class RepoEntity:
  '''
  Repository listing entry.

  Attributes:
    name: Repository name
    private: Visibility flag
    size: Size in KB as reported by GitHub
    updated_at: Last update time (UTC)
  '''
  name: str
  private: bool
  size: int
  updated_at: datetime

  @property
  def visibility(self) -> str:
    return 'PRIVATE' if self.private else 'PUBLIC'

  @classmethod
  def from_api(cls, raw: Dict[str, Any]) -> 'RepoEntity':
    return cls(
        name=str(raw['name']),
        private=bool(raw.get('private', False)),
        size=int(raw.get('size') or 0),
        updated_at=parse_timestamp(str(raw['updated_at'])),
    )


def parse_timestamp(ts: str) -> datetime:
  '''Parse an ISO 8601 timestamp; Z suffix and naive values are UTC.'''
  if ts.endswith('Z'):
    ts = ts[:-1] + '+00:00'
  dt = datetime.fromisoformat(ts)
  if dt.tzinfo is None:
    dt = dt.replace(tzinfo=timezone.utc)
  return dt.astimezone(timezone.utc)


class DocumentStore(Protocol):
  '''Read-only access to a set of source-controlled collections.'''

  def fetch_document(self, collection: str, path: str) -> str:
    ...

  def fetch_tree(self, collection: str) -> List[TreeEntry]:
    ...

  def list_entities(self) -> List[RepoEntity]:
    ...


class GitHubStore:
  '''DocumentStore backed by the GitHub REST API.'''

  def __init__(self,
               settings: HarnessSettings,
               session: Optional[requests.Session] = None) -> None:
    self.settings = settings
    self._session = session or requests.Session()

  def _headers(self, *, api: bool = True) -> Dict[str, str]:
    headers = {'User-Agent': self.settings.user_agent}
    if self.settings.token:
      headers['Authorization'] = f'token {self.settings.token}'
    if api:
      headers['Accept'] = 'application/vnd.github+json'
    return headers

  def _get(self, url: str, *, api: bool = True) -> requests.Response:
    logger.debug('GET %s', url)
    try:
      return self._session.get(url,
                               headers=self._headers(api=api),
                               timeout=self.settings.timeout_sec)
    except requests.RequestException as e:
      raise FetchError(f'Request failed: {url} - {e}') from e

  def _get_json(self, path: str) -> Any:
    url = f'{self.settings.api_base}{path}'
    resp = self._get(url)
    if resp.status_code == 404:
      raise NotFoundError(f'GitHub API: {path} not found')
    if resp.status_code >= 400:
      raise FetchError(
          f'GitHub API failed: {path} - HTTP {resp.status_code}: '
          f'{resp.text[:200]}')
    try:
      return resp.json()
    except ValueError as e:
      raise FetchError(f'GitHub API returned non-JSON for {path}') from e

  def _fetch_contents(self, collection: str, path: str) -> str:
    data = self._get_json(
        f'/repos/{self.settings.owner}/{collection}/contents/{path}')
    if not isinstance(data, dict) or not data.get('content'):
      raise FetchError(f'Unexpected response for {collection}/{path}')
    # binascii.Error and UnicodeDecodeError are both ValueErrors
    try:
      return base64.b64decode(data['content']).decode('utf-8')
    except ValueError as e:
      raise FetchError(
          f'Undecodable content for {collection}/{path}: {e}') from e

  def _fetch_raw(self, collection: str, path: str) -> str:
    url = (f'{self.settings.raw_base}/{self.settings.owner}/{collection}/'
           f'{self.settings.branch}/{path}')
    resp = self._get(url, api=False)
    if resp.status_code == 404:
      raise NotFoundError(f'File not found: {collection}/{path}')
    if resp.status_code >= 400:
      raise FetchError(
          f'Raw fetch failed: {collection}/{path} - HTTP {resp.status_code}')
    return resp.text

  def fetch_document(self, collection: str, path: str) -> str:
    '''
    Fetch a document as text.

    Raises:
      NotFoundError: If neither endpoint has the file
      FetchError: On transport errors, timeouts or unexpected responses
    '''
    try:
      return self._fetch_contents(collection, path)
    except FetchError as e:
      logger.warning('Contents API failed for %s/%s (%s); trying raw endpoint',
                     collection, path, e)
    return self._fetch_raw(collection, path)

  def fetch_tree(self, collection: str) -> List[TreeEntry]:
    data = self._get_json(f'/repos/{self.settings.owner}/{collection}/git/'
                          f'trees/{self.settings.branch}?recursive=1')
    return [
        TreeEntry(path=str(t['path']), type=str(t['type']))
        for t in data.get('tree', [])
    ]

  def list_entities(self) -> List[RepoEntity]:
    data = self._get_json('/user/repos?per_page=100&affiliation=owner')
    if not isinstance(data, list):
      raise FetchError(f'Unexpected repository listing: {str(data)[:200]}')
    return [RepoEntity.from_api(r) for r in data]
