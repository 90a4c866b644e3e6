"""Output formatters for generated seed records."""

from relseed.formatters.base import RecordFormatter
from relseed.formatters.csharp import CSharpSeedFormatter
from relseed.formatters.records import JsonRecordFormatter, to_plain_value

__all__ = ["CSharpSeedFormatter", "JsonRecordFormatter", "RecordFormatter", "to_plain_value"]
