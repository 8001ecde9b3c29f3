"""
Data models for blob tier migration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from ..utils.execution_timer import format_elapsed


class AccessTier(str, Enum):
    """Access tiers a block blob can be moved between."""
    HOT = "Hot"
    COOL = "Cool"
    COLD = "Cold"
    ARCHIVE = "Archive"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "AccessTier"]) -> "AccessTier":
        """Case-insensitive lookup. Raises ValueError for unknown names."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for tier in cls:
            if tier.value.lower() == text.lower():
                return tier
        raise ValueError(f"Unknown access tier: {value!r}. Valid tiers: {[t.value for t in cls]}")

    @staticmethod
    def sdk_name(value) -> Optional[str]:
        """Tier name as the service reported it, kept for display."""
        if value is None:
            return None
        return str(getattr(value, "value", value))

    @classmethod
    def from_sdk(cls, value) -> Optional["AccessTier"]:
        """Map a tier reported by the service to an AccessTier, None when absent or unknown."""
        name = cls.sdk_name(value)
        if name is None:
            return None
        try:
            return cls.parse(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class BlobRecord:
    """Read-only snapshot of a blob as returned by enumeration."""
    name: str
    url: str
    tier: Optional[AccessTier] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    raw_tier: Optional[str] = None


@dataclass
class BatchResult:
    """Outcome of a single batch tier request."""
    batch_number: int
    blob_names: List[str]
    failures: Dict[str, int] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.blob_names)


@dataclass
class MigrationResult:
    """Counters and outcome of a migration run."""
    source_tier: AccessTier
    target_tier: AccessTier
    total_processed: int = 0
    batch_count: int = 0
    batches: List[BatchResult] = field(default_factory=list)
    elapsed: float = 0.0
    dry_run: bool = False
    error: Optional[Exception] = None

    @property
    def failed(self) -> Dict[str, int]:
        failures: Dict[str, int] = {}
        for batch in self.batches:
            failures.update(batch.failures)
        return failures

    @property
    def succeeded(self) -> int:
        return self.total_processed - len(self.failed)

    @property
    def elapsed_text(self) -> str:
        return format_elapsed(self.elapsed)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed
