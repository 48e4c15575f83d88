"""Exception types raised by document stores and parsers."""


class HarnessError(Exception):
  """Base class for harness errors."""


class FetchError(HarnessError):
  """Document, tree or listing could not be retrieved."""


class NotFoundError(FetchError):
  """Requested document does not exist in the collection."""


class ParseError(HarnessError):
  """Fetched content is not valid structured data."""
