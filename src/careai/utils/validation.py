from careai.exceptions import InvalidInputError


def require_text(value: str | None, field_name: str) -> str:
    """Return 'value' unchanged, or raise 'InvalidInputError' when it is missing or blank."""
    if value is None or not value.strip():
        raise InvalidInputError(f"{field_name} is required")
    return value
