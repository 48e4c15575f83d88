from datetime import datetime, timedelta, timezone

import pytest

from harness.errors import FetchError
from harness.errors import NotFoundError
from harness.sources.github import RepoEntity
from harness.sources.github import TreeEntry

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


class InMemoryStore:
  """DocumentStore over dictionaries; unknown keys raise NotFoundError."""

  def __init__(self):
    self.documents: dict[tuple[str, str], str] = {}
    self.trees: dict[str, list[TreeEntry]] = {}
    self.entities: list[RepoEntity] | None = []
    self.calls: list[tuple[str, ...]] = []

  def add_document(self, collection: str, path: str, text: str) -> None:
    self.documents[(collection, path)] = text

  def set_tree(self, collection: str, blobs: list[str],
               dirs: list[str] | None = None) -> None:
    """Tree from blob paths; parent directories are derived when not given."""
    if dirs is None:
      dirs = sorted({
          '/'.join(p.split('/')[:i])
          for p in blobs
          for i in range(1, p.count('/') + 1)
      })
    self.trees[collection] = ([TreeEntry(d, 'tree') for d in dirs] +
                              [TreeEntry(p, 'blob') for p in blobs])

  def fetch_document(self, collection: str, path: str) -> str:
    self.calls.append(('document', collection, path))
    try:
      return self.documents[(collection, path)]
    except KeyError:
      raise NotFoundError(f'File not found: {collection}/{path}') from None

  def fetch_tree(self, collection: str) -> list[TreeEntry]:
    self.calls.append(('tree', collection))
    if collection not in self.trees:
      raise FetchError(f'GitHub API failed: tree {collection}')
    return list(self.trees[collection])

  def list_entities(self) -> list[RepoEntity]:
    self.calls.append(('entities',))
    if self.entities is None:
      raise FetchError('GitHub API failed: /user/repos')
    return list(self.entities)


def _make_repo(name: str,
               size: int = 100,
               days_old: int = 1,
               private: bool = True) -> RepoEntity:
  updated = NOW - timedelta(days=days_old)
  return RepoEntity(name=name, private=private, size=size, updated_at=updated)


@pytest.fixture
def store() -> InMemoryStore:
  """Empty in-memory document store."""
  return InMemoryStore()


@pytest.fixture
def now() -> datetime:
  """Fixed reference time for staleness checks."""
  return NOW


@pytest.fixture
def make_repo():
  """Factory for RepoEntity updated `days_old` days before NOW."""
  return _make_repo
