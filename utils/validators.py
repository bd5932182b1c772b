"""
Input validators run before any store interaction.

Each ``validate_*`` function takes the raw (already JSON-decoded) payload
and returns a ``ValidationResult`` holding either the typed value or the
list of problems found.  ``unwrap()`` turns a failed result into a
``BadParamsError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

from auth.password import MAX_PASSWORD_BYTES
from core.errors import BadParamsError

T = TypeVar("T")


@dataclass
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> T:
        if self.errors:
            raise BadParamsError("; ".join(self.errors))
        return self.value


@dataclass(frozen=True)
class SignUpCredentials:
    email: str
    password: str


@dataclass(frozen=True)
class CharacterSeed:
    name: str
    character_class: str
    coins: int = 0
    sprite: Optional[str] = None
    owned_items: List[Any] = field(default_factory=list)

    def fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "character_class": self.character_class,
            "coins": self.coins,
            "sprite": self.sprite,
            "owned_items": list(self.owned_items),
        }


@dataclass(frozen=True)
class TodoSeed:
    tasks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class PasswordChange:
    old: str
    new: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _password_errors(password: Any, label: str = "password") -> List[str]:
    if not isinstance(password, str) or not password:
        return [f"{label} is required"]
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        return [f"{label} must be at most {MAX_PASSWORD_BYTES} bytes"]
    return []


def _non_empty_str(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key)
    return isinstance(value, str) and bool(value.strip())


def _as_mapping(raw: Any) -> Optional[Mapping[str, Any]]:
    if raw is None:
        return {}
    return raw if isinstance(raw, Mapping) else None


# ── account payloads ─────────────────────────────────────────────────────


def validate_sign_up_credentials(raw: Any) -> ValidationResult[SignUpCredentials]:
    if not isinstance(raw, Mapping) or not raw:
        return ValidationResult(errors=["credentials are required"])

    errors: List[str] = []
    if not _non_empty_str(raw, "email"):
        errors.append("email is required")
    password = raw.get("password")
    errors.extend(_password_errors(password))
    if password != raw.get("password_confirmation"):
        errors.append("password and password_confirmation do not match")
    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        value=SignUpCredentials(email=normalize_email(raw["email"]), password=password),
    )


def validate_character_seed(raw: Any) -> ValidationResult[CharacterSeed]:
    seed = _as_mapping(raw)
    if seed is None:
        return ValidationResult(errors=["character must be an object"])

    errors: List[str] = []
    if not _non_empty_str(seed, "name"):
        errors.append("character name is required")
    if not _non_empty_str(seed, "class"):
        errors.append("character class is required")
    errors.extend(_character_field_errors(seed))
    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        value=CharacterSeed(
            name=seed["name"].strip(),
            character_class=seed["class"].strip(),
            coins=seed.get("coins", 0) or 0,
            sprite=seed.get("sprite"),
            owned_items=list(seed.get("owned_items") or []),
        ),
    )


def validate_character_update(raw: Any) -> ValidationResult[Dict[str, Any]]:
    """Partial update of a character: only the fields present are changed."""
    patch = _as_mapping(raw)
    if patch is None:
        return ValidationResult(errors=["character must be an object"])

    allowed = {"name", "sprite", "coins", "owned_items"}
    errors = [f"{key} cannot be changed" for key in patch if key not in allowed]
    if "name" in patch and not _non_empty_str(patch, "name"):
        errors.append("character name cannot be empty")
    # sprite is the only nullable column
    errors.extend(
        f"{key} cannot be null"
        for key in ("coins", "owned_items")
        if key in patch and patch[key] is None
    )
    errors.extend(_character_field_errors(patch))
    if errors:
        return ValidationResult(errors=errors)

    changes = dict(patch)
    if "name" in changes:
        changes["name"] = changes["name"].strip()
    return ValidationResult(value=changes)


def _character_field_errors(raw: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []
    coins = raw.get("coins")
    if coins is not None and (
        isinstance(coins, bool) or not isinstance(coins, int) or coins < 0
    ):
        errors.append("coins must be a non-negative integer")
    sprite = raw.get("sprite")
    if sprite is not None and not isinstance(sprite, str):
        errors.append("sprite must be a string")
    owned = raw.get("owned_items")
    if owned is not None and not isinstance(owned, list):
        errors.append("owned_items must be a list")
    return errors


def validate_todo_seed(raw: Any) -> ValidationResult[TodoSeed]:
    seed = _as_mapping(raw)
    if seed is None:
        return ValidationResult(errors=["todo must be an object"])

    tasks = seed.get("tasks") or []
    if not isinstance(tasks, list):
        return ValidationResult(errors=["todo tasks must be a list"])

    errors: List[str] = []
    normalized: List[Dict[str, Any]] = []
    for index, task in enumerate(tasks):
        if isinstance(task, str):
            task = {"description": task}
        if not isinstance(task, Mapping) or not _non_empty_str(task, "description"):
            errors.append(f"task {index} needs a description")
            continue
        normalized.append(
            {"description": task["description"].strip(), "done": bool(task.get("done", False))}
        )
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=TodoSeed(tasks=normalized))


def validate_password_change(raw: Any) -> ValidationResult[PasswordChange]:
    if not isinstance(raw, Mapping):
        return ValidationResult(errors=["passwords are required"])

    old = raw.get("old")
    errors = _password_errors(raw.get("new"), label="new password")
    if not isinstance(old, str):
        errors.append("old password is required")
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=PasswordChange(old=old, new=raw["new"]))
