from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .config import SHIFTS
from .models_movements import MAX_AMOUNT, MovementType, PendingMovement

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]
    movement: PendingMovement | None = None


@dataclass
class ClientValidationError(ValueError):
    issues: list[ValidationIssue] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.issues:
            return "Validation failed"
        return "; ".join(f"{issue.field}: {issue.reason}" for issue in self.issues)


def parse_amount(value: Any) -> Decimal | None:
    """Decimal from form input, or None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_positive_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _require_choice(value: Any, choices: tuple[str, ...], field_name: str, issues: list[ValidationIssue]) -> None:
    text = value.value if isinstance(value, MovementType) else (str(value).strip() if value is not None else "")
    if not text:
        issues.append(ValidationIssue(field=field_name, reason="is required"))
    elif text not in choices:
        issues.append(ValidationIssue(field=field_name, reason=f"must be one of {', '.join(choices)}"))


def validate_pending_movement(payload: Mapping[str, Any]) -> ValidationResult:
    issues: list[ValidationIssue] = []
    amount = parse_amount(payload.get("amount"))
    if amount is None:
        issues.append(ValidationIssue(field="amount", reason="must be a number"))
    elif amount <= 0:
        issues.append(ValidationIssue(field="amount", reason="must be greater than 0"))
    elif amount > MAX_AMOUNT:
        issues.append(ValidationIssue(field="amount", reason=f"must not exceed {MAX_AMOUNT}"))
    _require_choice(payload.get("movement_type"), tuple(item.value for item in MovementType), "movement_type", issues)
    _require_choice(payload.get("shift"), SHIFTS, "shift", issues)
    concept_id = parse_positive_int(payload.get("concept_id"))
    if concept_id is None:
        issues.append(ValidationIssue(field="concept_id", reason="must be a positive integer"))
    created_by = parse_positive_int(payload.get("created_by"))
    if created_by is None:
        issues.append(ValidationIssue(field="created_by", reason="must be a positive integer"))
    if issues:
        return ValidationResult(ok=False, issues=issues)

    data = {
        **payload,
        "amount": amount,
        "concept_id": concept_id,
        "created_by": created_by,
        "details": str(payload.get("details") or "").strip(),
    }
    try:
        movement = PendingMovement.model_validate(data)
    except PydanticValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ("movement",)))
            issues.append(ValidationIssue(field=location, reason=error.get("msg", "is invalid")))
        return ValidationResult(ok=False, issues=issues)
    return ValidationResult(ok=True, issues=[], movement=movement)


def validate_new_password(password: str | None) -> ValidationResult:
    issues: list[ValidationIssue] = []
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        issues.append(
            ValidationIssue(
                field="new_password",
                reason=f"must be at least {MIN_PASSWORD_LENGTH} characters",
            )
        )
    return ValidationResult(ok=not issues, issues=issues)


def require_valid(result: ValidationResult) -> None:
    if not result.ok:
        raise ClientValidationError(issues=list(result.issues))
