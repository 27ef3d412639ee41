"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
COMPANY_NOT_FOUND = "COMPANY_NOT_FOUND"
NO_MATCHING_RULE = "NO_MATCHING_RULE"
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_AMOUNT = "INVALID_AMOUNT"
INVALID_METHOD = "INVALID_METHOD"
CONFLICT = "CONFLICT"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
AMOUNT_EXCEEDS_DEBT = "AMOUNT_EXCEEDS_DEBT"
POLICY_FULLY_PAID = "POLICY_FULLY_PAID"
ALREADY_CANCELLED = "ALREADY_CANCELLED"
INVALID_TRANSITION = "INVALID_TRANSITION"
TYPE_NOT_OFFERED = "TYPE_NOT_OFFERED"
PRICING_TYPE_NOT_OFFERED = "PRICING_TYPE_NOT_OFFERED"
PRICING_TYPE_NOT_APPLICABLE = "PRICING_TYPE_NOT_APPLICABLE"
SERVICE_INACTIVE = "SERVICE_INACTIVE"
CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
INTEGRITY_ERROR = "INTEGRITY_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    code = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    code = NOT_FOUND


class CompanyNotFoundError(NotFoundError):
    """Raised when the referenced insurance company does not exist."""

    code = COMPANY_NOT_FOUND


class NoMatchingRuleError(NotFoundError):
    """Raised when no pricing matrix row matches the quote parameters."""

    code = NO_MATCHING_RULE


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. invalid dates, missing required fields)."""

    code = VALIDATION_ERROR


class InvalidAmountError(DomainValidationError):
    code = INVALID_AMOUNT


class InvalidPaymentMethodError(DomainValidationError):
    code = INVALID_METHOD


class ConflictError(DomainError):
    """Raised when a request is well-formed but violates a business rule given the current state."""

    code = CONFLICT


class DuplicateResourceError(ConflictError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    code = DUPLICATE_RESOURCE


class AmountExceedsDebtError(ConflictError):
    """Raised when a payment would push the paid amount above the insurance amount."""

    code = AMOUNT_EXCEEDS_DEBT


class PolicyFullyPaidError(AmountExceedsDebtError):
    """Raised when a payment is attempted against a policy with no remaining debt."""

    code = POLICY_FULLY_PAID


class AlreadyCancelledError(ConflictError):
    code = ALREADY_CANCELLED


class InvalidTransitionError(ConflictError):
    """Raised when a status change is not allowed from the current status."""

    code = INVALID_TRANSITION


class TypeNotOfferedError(ConflictError):
    code = TYPE_NOT_OFFERED


class PricingTypeNotOfferedError(ConflictError):
    code = PRICING_TYPE_NOT_OFFERED


class PricingTypeNotApplicableError(ConflictError):
    """Raised when a price is requested for a pricing type that has no rules to evaluate."""

    code = PRICING_TYPE_NOT_APPLICABLE


class ServiceInactiveError(ConflictError):
    code = SERVICE_INACTIVE


class ConcurrentModificationError(ConflictError):
    """Raised when a customer aggregate kept changing underneath us and retries ran out."""

    code = CONCURRENT_MODIFICATION


class LedgerIntegrityError(DomainError):
    """Raised when a mutation would leave paid/remaining amounts inconsistent with the payments."""

    code = INTEGRITY_ERROR
