"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidScoreError(DomainException):
    """Score is not an integer within [0, 100]"""

    pass


class PricingTierNotFoundError(DomainException):
    """No tier of the pricing table covers the requested score"""

    pass


class InvalidAmountError(DomainException):
    """Monetary input is negative, non-positive where required, or a zero divisor"""

    pass


class InvalidScheduleError(DomainException):
    """Installment schedule terms cannot produce a valid schedule"""

    pass
