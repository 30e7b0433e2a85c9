"""
exceptions.py — Typed errors for coop-price-agreement.

Every failure the client can hit maps to one of these so callers never need
to inspect raw HTTP responses or wallet rejections. A missing resource is
not in here: a 404 on the agreement read means "no agreement yet" and is
returned as None.
"""


class PriceAgreementError(Exception):
    """Base exception for all price agreement client errors."""


class WalletUnavailable(PriceAgreementError):
    """No wallet capability is present. The user must install or enable one."""


class WalletRejected(PriceAgreementError):
    """The wallet refused the request: user cancelled, or signing/submission failed."""


class ValidationFailed(PriceAgreementError):
    """A local precondition was violated. Nothing was sent to the ledger."""


class InvalidAmount(ValidationFailed):
    """A price or quantity string could not be parsed."""


class NotConnected(ValidationFailed):
    """A state-changing operation was attempted before a wallet was connected."""


class AgreementNotFound(ValidationFailed):
    """No agreement snapshot is loaded for the requested farmer address."""


class AgreementAlreadyFulfilled(ValidationFailed):
    """The loaded agreement is already fulfilled; paying again is refused locally."""


class OperationInProgress(PriceAgreementError):
    """Another state-changing operation is still in flight."""


class LedgerReadError(PriceAgreementError):
    """Reading the agreement resource failed for a reason other than 404."""
