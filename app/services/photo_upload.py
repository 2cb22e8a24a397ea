from __future__ import annotations

from collections.abc import Sequence

from app.core.config import settings
from app.services.application_form import PHOTO_FIELD, ApplicationForm, PhotoUpload
from app.services.notifications import SEVERITY_ERROR, NotificationPresenter

MSG_NOT_IMAGE = "Por favor, selecione apenas arquivos de imagem."


def _too_large_message() -> str:
    return f"O arquivo deve ter no máximo {settings.MAX_PHOTO_MB}MB."


def clear_photo(form: ApplicationForm) -> None:
    form.photo = None
    form.photo_placeholder_visible = True
    if PHOTO_FIELD in form.fields:
        form.set_value(PHOTO_FIELD, "")


def select_photo(form: ApplicationForm, notifier: NotificationPresenter, upload: PhotoUpload | None) -> bool:
    if upload is None:
        clear_photo(form)
        return False
    if not str(upload.content_type or "").lower().startswith("image/"):
        notifier.notify(MSG_NOT_IMAGE, SEVERITY_ERROR)
        clear_photo(form)
        return False
    if upload.size_bytes > settings.max_photo_bytes:
        notifier.notify(_too_large_message(), SEVERITY_ERROR)
        clear_photo(form)
        return False

    form.photo = upload
    form.photo_placeholder_visible = False
    if PHOTO_FIELD in form.fields:
        form.set_value(PHOTO_FIELD, upload.filename)
    return True


def drop_files(form: ApplicationForm, notifier: NotificationPresenter, uploads: Sequence[PhotoUpload]) -> bool:
    """Drag-and-drop entry: the first dropped file goes through the regular selection."""
    if not uploads:
        return False
    return select_photo(form, notifier, uploads[0])
