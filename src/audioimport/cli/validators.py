from audioimport.dispatch import MAX_QUALITY, MIN_QUALITY


def validate_quality(type_: object, quality: int | None) -> None:
    if quality is None:
        return

    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValueError(f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}")


def validate_positive_integer(type_: object, value: int) -> None:
    """Validate that value is greater than zero."""
    if value <= 0:
        raise ValueError("Value must be a positive integer")
