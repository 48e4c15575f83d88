"""
Generic document checks shared by validators.

These helpers are pure predicates over fetched content: marker presence,
duplicate names, workflow connectivity, secret patterns and version
strings. They return plain values; validators decide the severity.
"""
from collections import Counter
import json
import re
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from harness.errors import ParseError

Node = Mapping[str, Any]

VERSION_PATTERN = re.compile(r'v(\d+\.\d+)')

SECRET_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r'sk-[a-zA-Z0-9]{20,}'),
    re.compile(r'ghp_[a-zA-Z0-9]{20,}'),
    re.compile(r'pplx-[a-zA-Z0-9]{20,}'),
    re.compile(r'api[_-]?key\s*[:=]\s*[\'"][a-zA-Z0-9]{20,}[\'"]',
               re.IGNORECASE),
)

ENTRY_POINT_MARKER = 'trigger'


def parse_json(raw: str, what: str) -> dict[str, Any]:
  """
  Parse a JSON object document.

  Raises:
    ParseError: If raw is not JSON or its top level is not an object
  """
  try:
    data = json.loads(raw)
  except json.JSONDecodeError as e:
    raise ParseError(f'{what} is not valid JSON: {e}') from e
  if not isinstance(data, dict):
    raise ParseError(
        f'{what} top level is {type(data).__name__}, expected object')
  return data


def contains_marker(text: str, marker: str, case_sensitive: bool = True) -> bool:
  """Substring check, optionally ignoring case."""
  if case_sensitive:
    return marker in text
  return marker.lower() in text.lower()


def missing_markers(text: str,
                    markers: Iterable[str],
                    case_sensitive: bool = True) -> list[str]:
  return [m for m in markers if not contains_marker(text, m, case_sensitive)]


def node_name(node: Node) -> str:
  return str(node.get('name') or '')


def find_node(nodes: Sequence[Node], required: str) -> Optional[Node]:
  """First node whose name equals or contains `required`."""
  for node in nodes:
    name = node_name(node)
    if name == required or required in name:
      return node
  return None


def duplicate_names(items: Iterable[Mapping[str, Any]],
                    key: str = 'name') -> dict[str, int]:
  """
  Group items by exact name and return names seen more than once.

  Returns:
    {name: occurrence_count}, one entry per distinct duplicated name
  """
  counts = Counter(str(item.get(key) or '') for item in items)
  return {name: count for name, count in counts.items() if count > 1}


def connected_destinations(connections: Mapping[str, Any]) -> set[str]:
  """
  Names referenced as a destination anywhere in a connection map.

  The map is shaped source -> output port -> [[{'node': name}, ...], ...].
  Malformed groups are ignored.
  """
  destinations: set[str] = set()
  for outputs in connections.values():
    if not isinstance(outputs, Mapping):
      continue
    for groups in outputs.values():
      if not isinstance(groups, list):
        continue
      for group in groups:
        if not isinstance(group, list):
          continue
        for conn in group:
          if isinstance(conn, Mapping) and conn.get('node'):
            destinations.add(str(conn['node']))
  return destinations


def is_entry_point(node: Node) -> bool:
  """Trigger nodes start a workflow, by type tag or name."""
  node_type = str(node.get('type') or '').lower()
  return (ENTRY_POINT_MARKER in node_type or
          ENTRY_POINT_MARKER in node_name(node).lower())


def find_orphans(nodes: Sequence[Node],
                 connections: Mapping[str, Any],
                 excluded_name_markers: Iterable[str] = ('sticky',)
                ) -> list[Node]:
  """
  Nodes that no connection leads to.

  A node is an orphan when it is never a destination, is not an entry
  point, and its name does not contain an excluded (decorative) marker.
  """
  destinations = connected_destinations(connections)
  excluded = [m.lower() for m in excluded_name_markers]
  orphans = []
  for node in nodes:
    name = node_name(node)
    if name in destinations or is_entry_point(node):
      continue
    if any(m in name.lower() for m in excluded):
      continue
    orphans.append(node)
  return orphans


def scan_secrets(
    text: str,
    patterns: Sequence[re.Pattern[str]] = SECRET_PATTERNS
) -> Optional[re.Pattern[str]]:
  """Return the first pattern that matches text, or None."""
  for pattern in patterns:
    if pattern.search(text):
      return pattern
  return None


def extract_version(path: str) -> Optional[str]:
  """First `v<major>.<minor>` in path, without the leading 'v'."""
  match = VERSION_PATTERN.search(path)
  return match.group(1) if match else None


def group_versions(paths: Iterable[str],
                   group_of: Callable[[str], str]
                  ) -> dict[str, list[tuple[str, str]]]:
  """
  Group versioned paths.

  Paths without a version string are dropped.

  Returns:
    {group: [(path, version), ...]} in input order
  """
  groups: dict[str, list[tuple[str, str]]] = {}
  for path in paths:
    version = extract_version(path)
    if version is None:
      continue
    groups.setdefault(group_of(path), []).append((path, version))
  return groups


def distinct_versions(entries: Sequence[tuple[str, str]]) -> list[str]:
  """Distinct versions in first-seen order."""
  return list(dict.fromkeys(version for _, version in entries))
