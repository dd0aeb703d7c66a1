import pytest

from backend.relay.validation import Submission, ValidationError, validate_submission


def test_valid_submission():
    submission = validate_submission("J1", "P1", ("Cat", "Dog"), {"Cat": 5})

    assert submission == Submission("J1", "P1", ["Cat", "Dog"], {"Cat": 5})


def test_rates_none_becomes_empty():
    assert validate_submission("J1", "P1", ["Cat"], None).rates == {}


@pytest.mark.parametrize("job_id, place_id", [("", "P1"), ("J1", ""), (None, "P1"), ("J1", 42)])
def test_missing_ids(job_id, place_id):
    with pytest.raises(ValidationError, match="jobId and placeId are required"):
        validate_submission(job_id, place_id, ["Cat"])


@pytest.mark.parametrize("pets", [None, [], "Cat", {"Cat": 1}, ["Cat", 3]])
def test_bad_pets(pets):
    with pytest.raises(ValidationError, match="pets must be a non-empty array"):
        validate_submission("J1", "P1", pets)


def test_rates_must_be_mapping():
    with pytest.raises(ValidationError, match="rates must be an object"):
        validate_submission("J1", "P1", ["Cat"], ["Cat", 5])


def test_validation_error_is_value_error():
    assert issubclass(ValidationError, ValueError)


@pytest.mark.parametrize("value", [None, {"x": 1}, [1, 2], True])
def test_rate_values_must_be_string_or_number(value):
    with pytest.raises(ValidationError, match="rates must be an object"):
        validate_submission("J1", "P1", ["Cat"], {"Cat": value})


def test_rate_values_accept_strings_and_numbers():
    rates = {"Cat": 5, "Dog": 1.5, "Fox": "2/s"}

    assert validate_submission("J1", "P1", ["Cat"], rates).rates == rates
