from .auth_store import AuthStore
from .config import SHIFTS, ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    ConflictError,
    EntityInUseError,
    ForbiddenError,
    NotFoundError,
    SessionNotOpenError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .models import MeResponse, SessionData
from .models_admin import (
    CONCEPT_TYPE_LABELS,
    AdminUser,
    Concept,
    ConceptWrite,
    PasswordReset,
    Role,
    RoleWrite,
    UserCreate,
    UserUpdate,
)
from .models_arco import ArcoBalance, ArcoRef, ArcoStatusResponse, OpenArcoResponse
from .models_movements import (
    MovementBatchRequest,
    MovementListResponse,
    MovementType,
    PendingMovement,
    PersistedMovement,
)
from .models_reports import ReportFilter, ReportRow
from .session import ApiSession
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error
from .validation import (
    ClientValidationError,
    ValidationIssue,
    ValidationResult,
    parse_amount,
    parse_positive_int,
    require_valid,
    validate_new_password,
    validate_pending_movement,
)

__all__ = [
    "AdminUser",
    "ApiError",
    "ApiSession",
    "ArcoBalance",
    "ArcoRef",
    "ArcoStatusResponse",
    "AuthStore",
    "CONCEPT_TYPE_LABELS",
    "ClientConfig",
    "ClientValidationError",
    "Concept",
    "ConceptWrite",
    "ConfigError",
    "ConflictError",
    "EntityInUseError",
    "ForbiddenError",
    "HttpClient",
    "MeResponse",
    "MovementBatchRequest",
    "MovementListResponse",
    "MovementType",
    "NotFoundError",
    "OpenArcoResponse",
    "PasswordReset",
    "PendingMovement",
    "PersistedMovement",
    "ReportFilter",
    "ReportRow",
    "Role",
    "RoleWrite",
    "SHIFTS",
    "SessionData",
    "SessionNotOpenError",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserCreate",
    "UserFacingError",
    "UserUpdate",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "load_config",
    "parse_amount",
    "parse_positive_int",
    "require_valid",
    "to_user_facing_error",
    "validate_new_password",
    "validate_pending_movement",
]
