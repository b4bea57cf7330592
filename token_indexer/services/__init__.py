"""Service layer helpers"""

from .address import classify, looks_like_address
from .fallback import AttemptOutcome, AttemptRecord, FallbackOutcome, FallbackSequencer

__all__ = [
    "classify",
    "looks_like_address",
    "AttemptOutcome",
    "AttemptRecord",
    "FallbackOutcome",
    "FallbackSequencer",
]
