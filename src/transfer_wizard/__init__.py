from .clients.transfers_client import TransfersClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    PermissionError,
    ServerError,
    SubmissionTimeoutError,
    TransportError,
)
from .http_client import HttpClient, TraceContext
from .idempotency import IdempotencyKeys, SubmissionKeys, new_idempotency_keys
from .models import (
    Location,
    Product,
    SelectionEntry,
    TransferItem,
    TransferRequest,
    TransferResult,
    TransferStatus,
)
from .selection import SelectionSet, filter_products
from .session import ApiSession
from .stock_constraint import clamp_quantity, max_quantity
from .submission import TransferSubmissionClient
from .transfer_builder import TransferRequestBuilder
from .transfer_state import (
    ReviewSummary,
    TransferWorkflow,
    WizardActionAvailability,
    WizardScreen,
    wizard_action_availability,
)
from .transfer_validation import (
    ClientValidationError,
    ValidationIssue,
    validate_destination,
    validate_transfer_request,
)
from .ui_errors import UserFacingError, submission_error_message, to_user_facing_error

# Local refusals (bad destination, empty transfer) surface as ValidationError.
ValidationError = ClientValidationError

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthError",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "HttpClient",
    "IdempotencyKeys",
    "InsufficientStockError",
    "Location",
    "NotFoundError",
    "PermissionError",
    "Product",
    "ReviewSummary",
    "SelectionEntry",
    "SelectionSet",
    "ServerError",
    "SubmissionKeys",
    "SubmissionTimeoutError",
    "TraceContext",
    "TransferItem",
    "TransferRequest",
    "TransferRequestBuilder",
    "TransferResult",
    "TransferStatus",
    "TransferSubmissionClient",
    "TransferWorkflow",
    "TransfersClient",
    "TransportError",
    "UserFacingError",
    "ValidationError",
    "ValidationIssue",
    "WizardActionAvailability",
    "WizardScreen",
    "clamp_quantity",
    "filter_products",
    "load_config",
    "max_quantity",
    "new_idempotency_keys",
    "submission_error_message",
    "to_user_facing_error",
    "validate_destination",
    "validate_transfer_request",
    "wizard_action_availability",
]
