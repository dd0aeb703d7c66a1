"""
Relay – Findings store
In-memory, bounded, time-expiring collection of pet findings.

Scanners submit findings keyed by (job_id, place_id); notifiers read the live set.
Expired and over-capacity records are dropped lazily at the start of every read,
never on the submit path and never by a background timer.

IMPORTANT: volatile. Everything is lost when the process restarts.
"""

import logging
import threading
import time
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from backend.relay.config import FINDING_EXPIRY_MS, MAX_FINDINGS
from backend.relay.validation import Rate, validate_submission

logger = logging.getLogger(__name__)

TOP_PETS_LIMIT = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Finding:
    job_id: str
    place_id: str
    pets: List[str]
    rates: Dict[str, Rate]
    timestamp: int  # epoch ms

    @property
    def key(self) -> Tuple[str, str]:
        return (self.job_id, self.place_id)

    def copy(self) -> "Finding":
        return replace(self, pets=list(self.pets), rates=dict(self.rates))


@dataclass
class SubmitResult:
    accepted: bool
    count: int
    updated: bool = False


@dataclass
class FindingList:
    findings: List[Finding]
    count: int
    timestamp: int


@dataclass
class FindingStats:
    total_findings: int
    unique_pets: int
    top_pets: List[Tuple[str, int]] = field(default_factory=list)
    oldest_finding: Optional[int] = None
    newest_finding: Optional[int] = None


def _describe(finding: Finding) -> str:
    return f"{', '.join(finding.pets)} in server {finding.job_id[:8]}..."


class FindingStore:
    """
    Shared findings collection. One instance per process.

    Every public method takes the store lock, so the synchronous FastAPI
    endpoints can call it from the worker thread pool.
    """

    def __init__(
        self,
        max_findings: int = MAX_FINDINGS,
        expiry_ms: int = FINDING_EXPIRY_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if max_findings <= 0:
            raise ValueError("max_findings must be positive")
        if expiry_ms <= 0:
            raise ValueError("expiry_ms must be positive")
        self.max_findings = max_findings
        self.expiry_ms = expiry_ms
        self._clock = clock or _now_ms
        self._findings: List[Finding] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._findings)

    def submit(self, job_id: Any, place_id: Any, pets: Any, rates: Any = None) -> SubmitResult:
        """
        Insert or replace the finding for (job_id, place_id).

        No compaction here: an O(n) key scan plus an O(1) mutation.
        Returns the raw collection size after the mutation.

        Raises:
            ValidationError: before any mutation if the submission is invalid.
        """
        submission = validate_submission(job_id, place_id, pets, rates)

        with self._lock:
            finding = Finding(
                job_id=submission.job_id,
                place_id=submission.place_id,
                pets=submission.pets,
                rates=submission.rates,
                timestamp=self._clock(),
            )
            index = next(
                (i for i, f in enumerate(self._findings) if f.key == finding.key),
                None,
            )
            if index is not None:
                self._findings[index] = finding
            else:
                self._findings.append(finding)
            count = len(self._findings)

        if index is not None:
            logger.info("Updated finding: %s", _describe(finding))
        else:
            logger.info("New finding: %s", _describe(finding))
            if finding.rates:
                logger.info("   Rates: %s", finding.rates)

        return SubmitResult(accepted=True, count=count, updated=index is not None)

    def list(self) -> FindingList:
        """Compact, then return live findings, most recent first."""
        with self._lock:
            now = self._compact()
            findings = [f.copy() for f in self._findings]

        # sorted() is stable, ties keep insertion order
        findings = sorted(findings, key=lambda f: f.timestamp, reverse=True)
        return FindingList(findings=findings, count=len(findings), timestamp=now)

    def stats(self) -> FindingStats:
        """Compact, then aggregate pet occurrences and the timestamp range."""
        with self._lock:
            self._compact()
            findings = list(self._findings)

        # Counter keeps first-encountered order for equal counts
        frequency: Counter = Counter()
        for finding in findings:
            frequency.update(finding.pets)

        timestamps = [f.timestamp for f in findings]
        return FindingStats(
            total_findings=len(findings),
            unique_pets=len(frequency),
            top_pets=frequency.most_common(TOP_PETS_LIMIT),
            oldest_finding=min(timestamps) if timestamps else None,
            newest_finding=max(timestamps) if timestamps else None,
        )

    def clear(self) -> int:
        """Drop every finding. Returns how many were removed."""
        with self._lock:
            count = len(self._findings)
            self._findings = []
        logger.info("Cleared %d findings", count)
        return count

    def _compact(self) -> int:
        """
        Remove expired findings, then the oldest ones beyond max_findings.
        Caller must hold the lock. Returns the "now" used for expiry.
        """
        now = self._clock()
        live = [f for f in self._findings if now - f.timestamp < self.expiry_ms]
        expired = len(self._findings) - len(live)

        overflow = len(live) - self.max_findings
        if overflow > 0:
            # lowest timestamp goes first; earlier insertion first among equals
            by_age = sorted(range(len(live)), key=lambda i: (live[i].timestamp, i))
            dropped = set(by_age[:overflow])
            live = [f for i, f in enumerate(live) if i not in dropped]

        if expired or overflow > 0:
            logger.debug(
                "Compacted findings: %d expired, %d over capacity, %d kept",
                expired,
                max(overflow, 0),
                len(live),
            )
        self._findings = live
        return now
