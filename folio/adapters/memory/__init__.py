"""
In-process backend used by demo mode and tests.
"""

from folio.adapters.memory.auth import InMemoryAuthBackend
from folio.adapters.memory.backend import InMemoryBackend
from folio.adapters.memory.seed import seed_demo

__all__ = ["InMemoryBackend", "InMemoryAuthBackend", "seed_demo"]
