# marketplace/errors.py
"""Errors raised by the ledger, reporting and query layers.

Every error carries the HTTP status it maps to and a stable ``code`` string,
so routers never translate them by hand; the handlers registered in
``marketplace.main`` render ``{"detail": ..., "code": ...}``.

    MarketplaceError
    +-- Unauthenticated      401
    +-- NotFound             404
    +-- Forbidden            403
    +-- BusinessRuleError    406
    |   +-- InsufficientFunds
    |   +-- LimitExceeded
    +-- Conflict             409
    |   +-- AlreadyPaid
    +-- StoreFailure         500
"""
from decimal import Decimal


class MarketplaceError(Exception):
    status_code = 500
    code = "marketplace_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(MarketplaceError):
    status_code = 401
    code = "unauthenticated"


class NotFound(MarketplaceError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class Forbidden(MarketplaceError):
    status_code = 403
    code = "forbidden"


class BusinessRuleError(MarketplaceError):
    """Client-correctable rejection; never a server fault."""

    status_code = 406
    code = "business_rule"


class InsufficientFunds(BusinessRuleError):
    code = "insufficient_funds"

    def __init__(self, profile_id: int, balance: Decimal, required: Decimal):
        super().__init__(
            f"Profile {profile_id} balance {balance} is lower than job price {required}"
        )
        self.profile_id = profile_id
        self.balance = balance
        self.required = required


class LimitExceeded(BusinessRuleError):
    code = "limit_exceeded"

    def __init__(self, profile_id: int, amount: Decimal, limit: Decimal):
        super().__init__(
            f"Deposit of {amount} exceeds the limit of {limit} "
            f"(125% of unpaid jobs) for profile {profile_id}"
        )
        self.profile_id = profile_id
        self.amount = amount
        self.limit = limit


class Conflict(MarketplaceError):
    status_code = 409
    code = "conflict"


class AlreadyPaid(Conflict):
    code = "already_paid"

    def __init__(self, job_id: int):
        super().__init__(f"Job {job_id} is already paid")
        self.job_id = job_id


class StoreFailure(MarketplaceError):
    """Transaction or commit failure. The message shown to callers is generic."""

    status_code = 500
    code = "store_failure"

    def __init__(self, operation: str):
        super().__init__(f"{operation} failed, nothing was changed")
        self.operation = operation
