class InvalidInputError(ValueError):
    """Raised when a lift value cannot be scored or parsed.

    Absence of data is never an error; this is only for structurally
    invalid input such as a non-positive weight or an unknown exercise key.
    """
