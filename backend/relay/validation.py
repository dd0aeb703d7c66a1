"""
Relay – Submission validation
Checks a scanner submission before it reaches the findings store.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

# rate values are strings ("2/s") or plain numbers
Rate = Union[str, int, float]


class ValidationError(ValueError):
    """The caller sent a malformed or incomplete submission."""


@dataclass(frozen=True)
class Submission:
    job_id: str
    place_id: str
    pets: List[str]
    rates: Dict[str, Rate] = field(default_factory=dict)


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_rate(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def validate_submission(
    job_id: Any,
    place_id: Any,
    pets: Any,
    rates: Any = None,
) -> Submission:
    """
    Validate raw submission fields and return a Submission.

    Rules:
        - job_id and place_id must be non-empty strings
        - pets must be a non-empty list (or tuple) of strings
        - rates is optional; None becomes {}, anything else must be a mapping
          of pet name -> string or number

    Raises:
        ValidationError: on the first rule that fails. Nothing is mutated.
    """
    if not _is_present(job_id) or not _is_present(place_id):
        raise ValidationError("Missing required fields: jobId and placeId are required")

    if not isinstance(pets, (list, tuple)) or len(pets) == 0:
        raise ValidationError("pets must be a non-empty array")
    if not all(isinstance(pet, str) for pet in pets):
        raise ValidationError("pets must be a non-empty array")

    if rates is None:
        rates = {}
    elif not isinstance(rates, Mapping):
        raise ValidationError("rates must be an object")
    if not all(_is_rate(value) for value in rates.values()):
        raise ValidationError("rates must be an object")

    return Submission(
        job_id=job_id,
        place_id=place_id,
        pets=list(pets),
        rates=dict(rates),
    )
