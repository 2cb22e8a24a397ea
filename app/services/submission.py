from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import httpx

from app.core.config import settings
from app.services.application_form import FORM_ANCHOR, ApplicationForm
from app.services.clock import Clock
from app.services.draft_store import FormAutoSave
from app.services.field_validation import AGE_FIELD, MAX_AGE, MIN_AGE, RuleTable, parse_age, validate_form
from app.services.notifications import SEVERITY_ERROR, SEVERITY_SUCCESS, NotificationPresenter
from app.services.photo_upload import clear_photo
from app.services.retrying_http import fetch_with_retry

_LOG = logging.getLogger("app.submission")

MSG_SUCCESS = "✨ Candidatura enviada com sucesso! Entraremos em contacto em breve."
MSG_UNDER_AGE = f"Deve ter pelo menos {MIN_AGE} anos para se candidatar."
MSG_OVER_AGE = f"A idade máxima para candidatura é {MAX_AGE} anos."
MSG_SEND_ERROR_PREFIX = "❌ Erro ao enviar: "
MSG_CONNECTION_ERROR_PREFIX = "❌ Erro de conexão: "
MSG_UNKNOWN_ERROR = "Erro desconhecido"

OUTCOME_ABORTED = "aborted"
OUTCOME_IGNORED = "ignored"
OUTCOME_SUCCEEDED = "succeeded"
OUTCOME_FAILED = "failed"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[SubmissionState, set[SubmissionState]] = {
    SubmissionState.IDLE: {SubmissionState.VALIDATING},
    SubmissionState.VALIDATING: {SubmissionState.IDLE, SubmissionState.SUBMITTING},
    SubmissionState.SUBMITTING: {SubmissionState.SUCCEEDED, SubmissionState.FAILED},
    SubmissionState.SUCCEEDED: {SubmissionState.IDLE},
    SubmissionState.FAILED: {SubmissionState.IDLE},
}


class InvalidTransitionError(RuntimeError):
    pass


@dataclass
class SubmissionOutcome:
    status: str
    status_code: int | None = None
    message: str = ""


def submission_timestamp(now: datetime | None = None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_detail_from_response(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return MSG_UNKNOWN_ERROR
    if not isinstance(payload, dict):
        return MSG_UNKNOWN_ERROR
    return str(payload.get("detalhe") or payload.get("error") or MSG_UNKNOWN_ERROR)


class SubmissionController:
    """Drives one application form from submit event back to idle.

    Idle -> Validating -> Submitting -> Succeeded | Failed -> Idle. The submit
    control stays disabled while a submission is in flight, and a second submit
    arriving meanwhile is ignored. Every exit path, an unexpected exception
    included, ends back in Idle with the control re-enabled.
    """

    def __init__(
        self,
        form: ApplicationForm,
        *,
        http_client: httpx.AsyncClient,
        notifier: NotificationPresenter,
        autosave: FormAutoSave,
        clock: Clock,
        api_url: str | None = None,
        max_attempts: int | None = None,
        base_delay_ms: int | None = None,
        rules: RuleTable | None = None,
    ):
        self.form = form
        self.http_client = http_client
        self.notifier = notifier
        self.autosave = autosave
        self.clock = clock
        self.api_url = api_url or settings.SUBMISSION_API_URL
        self.max_attempts = settings.SUBMIT_MAX_ATTEMPTS if max_attempts is None else int(max_attempts)
        self.base_delay_ms = settings.SUBMIT_BACKOFF_BASE_MS if base_delay_ms is None else int(base_delay_ms)
        self.state = SubmissionState.IDLE
        self.history: list[SubmissionState] = [SubmissionState.IDLE]
        self.rules = rules

    def _transition(self, target: SubmissionState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"{self.state.value} -> {target.value}")
        _LOG.debug("submission state %s -> %s", self.state.value, target.value)
        self.state = target
        self.history.append(target)

    def _age_gate(self) -> bool:
        if AGE_FIELD not in self.form.fields:
            return True
        age = parse_age(self.form.value(AGE_FIELD))
        if age is None:
            return True
        if age < MIN_AGE:
            self.notifier.notify(MSG_UNDER_AGE, SEVERITY_ERROR)
            return False
        if age > MAX_AGE:
            self.notifier.notify(MSG_OVER_AGE, SEVERITY_ERROR)
            return False
        return True

    def _on_success(self) -> None:
        self.notifier.notify(MSG_SUCCESS, SEVERITY_SUCCESS)
        names = self.form.field_names()
        self.form.reset()
        clear_photo(self.form)
        self.autosave.clear_all(names)
        self.form.scroll_target = FORM_ANCHOR

    def _return_to_idle(self) -> None:
        # Submitting only leaves through Succeeded or Failed.
        if self.state is SubmissionState.SUBMITTING:
            self._transition(SubmissionState.FAILED)
        if self.state is not SubmissionState.IDLE:
            self._transition(SubmissionState.IDLE)

    def _fail(self, message: str, status_code: int | None = None) -> SubmissionOutcome:
        if self.state is SubmissionState.SUBMITTING:
            self._transition(SubmissionState.FAILED)
        self.notifier.notify(message, SEVERITY_ERROR)
        return SubmissionOutcome(status=OUTCOME_FAILED, status_code=status_code, message=message)

    async def submit(self) -> SubmissionOutcome:
        if self.state is not SubmissionState.IDLE or self.form.submit_control.disabled:
            _LOG.info("submit ignored: submission already in flight")
            return SubmissionOutcome(status=OUTCOME_IGNORED)

        control = self.form.submit_control
        status_code: int | None = None
        self._transition(SubmissionState.VALIDATING)
        try:
            if not self._age_gate() or not validate_form(self.form, self.rules):
                return SubmissionOutcome(status=OUTCOME_ABORTED)

            self._transition(SubmissionState.SUBMITTING)
            control.start_loading()
            data = self.form.multipart_data()
            data["timestamp"] = submission_timestamp()
            files = self.form.multipart_files()
            response = await fetch_with_retry(
                self.http_client,
                self.api_url,
                clock=self.clock,
                method="POST",
                max_attempts=self.max_attempts,
                base_delay_ms=self.base_delay_ms,
                data=data,
                files=files or None,
            )
            status_code = response.status_code
            if not response.is_success:
                _LOG.warning("submission rejected status=%s", status_code)
                return self._fail(MSG_SEND_ERROR_PREFIX + error_detail_from_response(response), status_code)

            self._transition(SubmissionState.SUCCEEDED)
            self._on_success()
            return SubmissionOutcome(status=OUTCOME_SUCCEEDED, status_code=status_code, message=MSG_SUCCESS)
        except httpx.TransportError as exc:
            return self._fail(MSG_CONNECTION_ERROR_PREFIX + str(exc))
        except Exception as exc:
            _LOG.exception("submission failed state=%s", self.state.value)
            return self._fail(MSG_CONNECTION_ERROR_PREFIX + (str(exc) or exc.__class__.__name__), status_code)
        finally:
            control.restore()
            self._return_to_idle()
