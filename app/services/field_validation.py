"""Field-level validation for the application form.

Rules live in a ``RuleTable`` keyed by field type, by ``(type, name)`` and by
type-when-required. Callers that need extra checks build their own table and
register on it; the defaults are never mutated.
A rule receives the trimmed, non-empty value and returns an error message or
``None``.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from app.services.application_form import ApplicationForm, FieldSnapshot

FieldRule = Callable[[str], str | None]

MIN_AGE = 18
MAX_AGE = 65
AGE_FIELD = "idade"

MSG_REQUIRED = "Este campo é obrigatório."
MSG_EMAIL = "Por favor, insira um email válido."
MSG_PHONE = "Por favor, insira um número de telefone válido."
MSG_AGE_INVALID = "Por favor, insira uma idade válida."
MSG_AGE_MIN = f"A idade mínima é {MIN_AGE} anos."
MSG_AGE_MAX = f"A idade máxima é {MAX_AGE} anos."
MSG_NAME_SHORT = "O nome deve ter pelo menos 2 caracteres."
MSG_DETAIL_SHORT = "Por favor, forneça uma descrição mais detalhada (mínimo 10 caracteres)."

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[+]?[\d\s\-\(\)]{9,}$")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str = ""


VALID = ValidationResult(valid=True)


def parse_age(raw: str | None) -> int | None:
    """Read the leading integer of ``raw`` (``"30 anos"`` -> 30); ``None`` when there is none."""
    match = _LEADING_INT_RE.match(str(raw or "").strip())
    if match is None:
        return None
    return int(match.group(0))


def _email_rule(value: str) -> str | None:
    return None if EMAIL_RE.match(value) else MSG_EMAIL


def _phone_rule(value: str) -> str | None:
    return None if PHONE_RE.match(value) else MSG_PHONE


def _age_rule(value: str) -> str | None:
    age = parse_age(value)
    if age is None:
        return MSG_AGE_INVALID
    if age < MIN_AGE:
        return MSG_AGE_MIN
    if age > MAX_AGE:
        return MSG_AGE_MAX
    return None


def _name_rule(value: str) -> str | None:
    return None if len(value) >= 2 else MSG_NAME_SHORT


def _detail_rule(value: str) -> str | None:
    return None if len(value) >= 10 else MSG_DETAIL_SHORT


DEFAULT_TYPE_RULES: dict[str, FieldRule] = {
    "email": _email_rule,
    "tel": _phone_rule,
}

DEFAULT_NAMED_RULES: dict[tuple[str, str], FieldRule] = {
    ("number", AGE_FIELD): _age_rule,
    ("text", "nome"): _name_rule,
}

DEFAULT_REQUIRED_TYPE_RULES: dict[str, FieldRule] = {
    "textarea": _detail_rule,
}


@dataclass
class RuleTable:
    """Rules keyed by ``(type, name)``, by type, and by type when required.

    Each instance owns its dicts; registering on one table never leaks into
    another or into the defaults.
    """

    named: dict[tuple[str, str], FieldRule] = field(default_factory=lambda: dict(DEFAULT_NAMED_RULES))
    by_type: dict[str, FieldRule] = field(default_factory=lambda: dict(DEFAULT_TYPE_RULES))
    when_required: dict[str, FieldRule] = field(default_factory=lambda: dict(DEFAULT_REQUIRED_TYPE_RULES))

    def register(
        self,
        rule: FieldRule,
        *,
        field_type: str,
        name: str | None = None,
        only_when_required: bool = False,
    ) -> None:
        if name is not None:
            self.named[(field_type, name)] = rule
        elif only_when_required:
            self.when_required[field_type] = rule
        else:
            self.by_type[field_type] = rule

    def rules_for(self, snapshot: FieldSnapshot) -> list[FieldRule]:
        rules: list[FieldRule] = []
        named = self.named.get((snapshot.type, snapshot.name))
        if named is not None:
            rules.append(named)
        by_type = self.by_type.get(snapshot.type)
        if by_type is not None:
            rules.append(by_type)
        if snapshot.required:
            when_required = self.when_required.get(snapshot.type)
            if when_required is not None:
                rules.append(when_required)
        return rules


def validate_field(snapshot: FieldSnapshot, rules: RuleTable | None = None) -> ValidationResult:
    value = str(snapshot.value or "").strip()
    if not value:
        if snapshot.required:
            return ValidationResult(valid=False, message=MSG_REQUIRED)
        return VALID
    table = rules if rules is not None else RuleTable()
    for rule in table.rules_for(snapshot):
        message = rule(value)
        if message:
            return ValidationResult(valid=False, message=message)
    return VALID


def validate_all(snapshots: Iterable[FieldSnapshot], rules: RuleTable | None = None) -> dict[str, ValidationResult]:
    table = rules if rules is not None else RuleTable()
    return {snapshot.name: validate_field(snapshot, table) for snapshot in snapshots}


def validate_form(form: ApplicationForm, rules: RuleTable | None = None) -> bool:
    """Validate every field, attach inline errors to ``form`` and return the overall verdict.

    All fields are checked so every error is shown at once.
    """
    form.errors.clear()
    results = validate_all(form.snapshots(), rules)
    for name, result in results.items():
        if not result.valid:
            form.errors[name] = result.message
    return all(result.valid for result in results.values())
