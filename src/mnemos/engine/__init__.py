"""Mnemos engine layer.

Provides the MemoryEngine orchestrating extraction, contradiction
detection and the dual vector/graph write.

Example:
    ```python
    from mnemos.engine import MemoryEngine

    async with MemoryEngine.create() as engine:
        result = await engine.remember("Alice leads the payments team")
        records = await engine.query_knowledge("payments")
    ```
"""

from .base import MemoryEngine
from .classification import classify_episode_type
from .models import ContradictionSummary, KnowledgeRecord, MemoryOperation, WriteResult
from .query import to_knowledge_record
from .remember import build_episode

__all__ = [
    "ContradictionSummary",
    "KnowledgeRecord",
    "MemoryEngine",
    "MemoryOperation",
    "WriteResult",
    "build_episode",
    "classify_episode_type",
    "to_knowledge_record",
]
