class InvalidInputError(ValueError):
    """
    Raised before any computation starts when the parameter set cannot
    produce a meaningful analysis.

    `field` is the dotted path of the offending input, e.g.
    "financing.amortization_years".
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
