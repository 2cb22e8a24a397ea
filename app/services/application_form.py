from __future__ import annotations

from dataclasses import dataclass, field

FILE_TYPE = "file"
CHECKBOX_TYPE = "checkbox"
CHECKED_VALUE = "on"

PHOTO_FIELD = "foto"
FORM_ANCHOR = "application"
SUBMIT_LABEL = "Enviar Candidatura"
LOADING_LABEL = "Enviando..."


@dataclass(frozen=True)
class FieldSnapshot:
    name: str
    type: str
    value: str
    required: bool = False


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass
class FormField:
    name: str
    type: str
    required: bool = False
    default: str = ""
    value: str | None = None

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self.default

    @property
    def draftable(self) -> bool:
        return self.type not in {FILE_TYPE, CHECKBOX_TYPE}

    def snapshot(self) -> FieldSnapshot:
        return FieldSnapshot(name=self.name, type=self.type, value=str(self.value or ""), required=self.required)


@dataclass
class SubmitControl:
    label: str = SUBMIT_LABEL
    disabled: bool = False
    loading: bool = False
    _idle_label: str | None = field(default=None, repr=False)

    def start_loading(self) -> None:
        if not self.loading:
            self._idle_label = self.label
        self.label = LOADING_LABEL
        self.loading = True
        self.disabled = True

    def restore(self) -> None:
        if self._idle_label is not None:
            self.label = self._idle_label
            self._idle_label = None
        self.loading = False
        self.disabled = False


@dataclass
class ApplicationForm:
    """Everything the submission pipeline reads or mutates for one form instance."""

    fields: dict[str, FormField]
    errors: dict[str, str] = field(default_factory=dict)
    photo: PhotoUpload | None = None
    photo_placeholder_visible: bool = True
    submit_control: SubmitControl = field(default_factory=SubmitControl)
    scroll_target: str | None = None

    def get_field(self, name: str) -> FormField:
        try:
            return self.fields[name]
        except KeyError as exc:
            raise KeyError(f"unknown form field: {name}") from exc

    def field_names(self) -> list[str]:
        return list(self.fields.keys())

    def value(self, name: str) -> str:
        return str(self.get_field(name).value or "")

    def set_value(self, name: str, value: str) -> None:
        # Any input clears the inline error until the next validation.
        self.get_field(name).value = str(value)
        self.errors.pop(name, None)

    def set_checked(self, name: str, checked: bool) -> None:
        self.set_value(name, CHECKED_VALUE if checked else "")

    def snapshots(self) -> list[FieldSnapshot]:
        return [item.snapshot() for item in self.fields.values()]

    def reset(self) -> None:
        for item in self.fields.values():
            item.value = item.default
        self.errors.clear()
        self.photo = None
        self.photo_placeholder_visible = True

    def multipart_data(self) -> dict[str, str]:
        data: dict[str, str] = {}
        for item in self.fields.values():
            if item.type == FILE_TYPE:
                continue
            value = str(item.value or "")
            if item.type == CHECKBOX_TYPE and value != CHECKED_VALUE:
                continue
            data[item.name] = value
        return data

    def multipart_files(self) -> dict[str, tuple[str, bytes, str]]:
        photo_field = next((item for item in self.fields.values() if item.type == FILE_TYPE), None)
        if photo_field is None or self.photo is None:
            return {}
        return {photo_field.name: (self.photo.filename, self.photo.content, self.photo.content_type)}


def build_application_form() -> ApplicationForm:
    fields = [
        FormField("nome", "text", required=True),
        FormField("email", "email", required=True),
        FormField("telefone", "tel", required=True),
        FormField("idade", "number", required=True),
        FormField("cidade", "text"),
        FormField("disponibilidade", "select"),
        FormField("experiencia", "textarea", required=True),
        FormField(PHOTO_FIELD, FILE_TYPE, required=True),
        FormField("termos", CHECKBOX_TYPE, required=True),
    ]
    return ApplicationForm(fields={item.name: item for item in fields})
