# Makes the folder importable as a package.
# Exports the resolver and its data types for convenience.

from .resolver import SourceResolver, TRUSTED_DOMAINS
from .types import SourceRef, SearchHit

__all__ = ["SourceResolver", "TRUSTED_DOMAINS", "SourceRef", "SearchHit"]
