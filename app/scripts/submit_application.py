from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
from pathlib import Path

import httpx

from app.core.config import settings
from app.services.application_form import ApplicationForm, PhotoUpload, build_application_form
from app.services.clock import Clock, SystemClock
from app.services.draft_store import FormAutoSave, build_draft_store
from app.services.notifications import NotificationPresenter
from app.services.photo_upload import select_photo
from app.services.submission import OUTCOME_SUCCEEDED, SubmissionController, SubmissionOutcome


def _parse_field_pairs(pairs: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw in pairs:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"--field expects name=value, got: {raw}")
        values[name.strip()] = value
    return values


def _load_photo(path: str) -> PhotoUpload:
    file_path = Path(path)
    content_type, _ = mimetypes.guess_type(file_path.name)
    return PhotoUpload(
        filename=file_path.name,
        content_type=content_type or "application/octet-stream",
        content=file_path.read_bytes(),
    )


def fill_form(
    form: ApplicationForm,
    autosave: FormAutoSave,
    notifier: NotificationPresenter,
    *,
    values: dict[str, str],
    checked: list[str],
    photo: PhotoUpload | None,
) -> None:
    autosave.restore(form)
    for name, value in values.items():
        item = form.get_field(name)
        form.set_value(name, value)
        autosave.save(name, value, item.type)
    for name in checked:
        form.set_checked(name, True)
    if photo is not None:
        select_photo(form, notifier, photo)
    autosave.flush()


async def submit_once(
    form: ApplicationForm,
    *,
    autosave: FormAutoSave,
    notifier: NotificationPresenter,
    clock: Clock,
    api_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SubmissionOutcome:
    async with httpx.AsyncClient(timeout=settings.SUBMIT_TIMEOUT_SECONDS, transport=transport) as client:
        controller = SubmissionController(
            form,
            http_client=client,
            notifier=notifier,
            autosave=autosave,
            clock=clock,
            api_url=api_url,
        )
        return await controller.submit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Submit one job application to the remote API.")
    parser.add_argument("--field", action="append", default=[], metavar="NAME=VALUE", help="form value, repeatable")
    parser.add_argument("--check-box", action="append", default=[], metavar="NAME", help="checkbox to tick, repeatable")
    parser.add_argument("--photo", default=None, metavar="PATH", help="photo file to attach")
    parser.add_argument("--api-url", default=settings.SUBMISSION_API_URL)
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    clock = SystemClock()
    form = build_application_form()
    notifier = NotificationPresenter(clock)
    autosave = FormAutoSave(build_draft_store(), clock=clock)
    try:
        values = _parse_field_pairs(args.field)
        photo = _load_photo(args.photo) if args.photo else None
        fill_form(form, autosave, notifier, values=values, checked=args.check_box, photo=photo)
    except (KeyError, ValueError, OSError) as exc:
        print(f"invalid input: {exc}")
        return 2

    outcome = asyncio.run(
        submit_once(form, autosave=autosave, notifier=notifier, clock=clock, api_url=args.api_url, transport=transport)
    )
    latest = notifier.latest()
    if latest is not None:
        print(latest.message)
    for name, message in form.errors.items():
        print(f"{name}: {message}")
    return 0 if outcome.status == OUTCOME_SUCCEEDED else 1


if __name__ == "__main__":
    raise SystemExit(main())
