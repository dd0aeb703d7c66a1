"""
Relay API request/response schemas. Pydantic only in api layer.
Field names follow the JSON wire format (camelCase).
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict

from backend.relay.finding_store import Finding, FindingStats


class SubmitRequest(BaseModel):
    # Loosely typed on purpose: the relay validator owns the 400 messages.
    model_config = ConfigDict(extra="ignore")

    jobId: Any = None
    placeId: Any = None
    pets: Any = None
    rates: Any = None


class FindingSchema(BaseModel):
    jobId: str
    placeId: str
    pets: list[str]
    rates: dict[str, Any]
    timestamp: int

    @classmethod
    def from_finding(cls, finding: Finding) -> "FindingSchema":
        return cls(
            jobId=finding.job_id,
            placeId=finding.place_id,
            pets=finding.pets,
            rates=finding.rates,
            timestamp=finding.timestamp,
        )


class TopPetSchema(BaseModel):
    pet: str
    count: int


class StatsSchema(BaseModel):
    totalFindings: int
    uniquePets: int
    topPets: list[TopPetSchema]
    oldestFinding: str | None = None
    newestFinding: str | None = None

    @classmethod
    def from_stats(cls, stats: FindingStats) -> "StatsSchema":
        return cls(
            totalFindings=stats.total_findings,
            uniquePets=stats.unique_pets,
            topPets=[TopPetSchema(pet=pet, count=count) for pet, count in stats.top_pets],
            oldestFinding=format_timestamp(stats.oldest_finding),
            newestFinding=format_timestamp(stats.newest_finding),
        )


class SubmitResponse(BaseModel):
    success: bool = True
    message: str
    findingCount: int


class PetsResponse(BaseModel):
    success: bool = True
    pets: list[FindingSchema]
    count: int
    timestamp: int


class StatsResponse(BaseModel):
    success: bool = True
    stats: StatsSchema


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


def format_timestamp(timestamp_ms: int | None) -> str | None:
    """Epoch milliseconds -> ISO-8601 UTC string, e.g. 2024-05-01T12:00:00.123Z"""
    if timestamp_ms is None:
        return None
    moment = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc)
    moment += timedelta(milliseconds=timestamp_ms % 1000)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
