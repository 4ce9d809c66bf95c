"""
Form builder: in-memory editing of an ordered field list.

The builder is the single writer of its working Form Definition. Every
mutation keeps field ids unique and the list order equal to the display
order. Persisting and previewing are delegated to callables supplied by
the caller, so the builder has no I/O of its own.
"""
import copy
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from jobforms.schemas.form import (
    FIELD_TYPE_LABELS,
    OPTION_FIELD_TYPES,
    BaseField,
    FieldType,
    FormDefinition,
    parse_field,
)

logger = logging.getLogger(__name__)

SaveHandler = Callable[[FormDefinition], Awaitable[Any]]
PreviewHandler = Callable[[FormDefinition], Awaitable[Any]]

DEFAULT_FORM_TITLE = "Job Application Form"
DEFAULT_FORM_DESCRIPTION = "Please fill out this form to apply for the position."


def default_fields() -> list[BaseField]:
    """Starter fields for a job application form, all required."""
    return [
        parse_field({
            "id": "full_name",
            "type": "text",
            "label": "Full Name",
            "placeholder": "Enter your full name",
            "required": True,
            "validation": {"minLength": 2},
        }),
        parse_field({
            "id": "email",
            "type": "email",
            "label": "Email Address",
            "placeholder": "Enter your email",
            "required": True,
            "validation": {"pattern": "email"},
        }),
        parse_field({
            "id": "phone",
            "type": "phone",
            "label": "Phone Number",
            "placeholder": "Enter your phone number",
            "required": True,
            "validation": {"pattern": "phone"},
        }),
        parse_field({
            "id": "resume",
            "type": "file",
            "label": "Resume/CV",
            "required": True,
            "validation": {"fileTypes": [".pdf", ".doc", ".docx"]},
        }),
    ]


def move_item(items: list, from_index: int, to_index: int) -> list:
    """
    Return a new list with the item at `from_index` moved to `to_index`.

    Remove-then-insert: entries between the two positions shift by one.
    The input list is not modified.
    """
    result = list(items)
    if not (0 <= from_index < len(result)) or not (0 <= to_index < len(result)):
        return result
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


class FormBuilder:
    """
    Editing orchestrator for one Form Definition.

    Tracks at most one selected field (the one open in the field editor).
    """

    def __init__(
        self,
        on_save: Optional[SaveHandler] = None,
        on_preview: Optional[PreviewHandler] = None,
        initial_form: Optional[FormDefinition] = None,
        job_id: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.on_save = on_save
        self.on_preview = on_preview
        self.job_id = job_id
        self._clock = clock
        self._issued_ids: set[str] = set()

        if initial_form is not None:
            self.fields: list[BaseField] = [f.model_copy(deep=True) for f in initial_form.fields]
            self.title = initial_form.title or ""
            self.description = initial_form.description or ""
            if self.job_id is None:
                self.job_id = initial_form.job_id
        else:
            self.fields = default_fields()
            self.title = DEFAULT_FORM_TITLE
            self.description = DEFAULT_FORM_DESCRIPTION

        self._issued_ids.update(f.id for f in self.fields)
        self.selected_field: Optional[BaseField] = None
        self.show_field_editor = False

    # ------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------

    @property
    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    def index_of(self, field_id: str) -> int:
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        return -1

    def get_field(self, field_id: str) -> Optional[BaseField]:
        index = self.index_of(field_id)
        return self.fields[index] if index != -1 else None

    def _new_id(self) -> str:
        """`field_<ms>`, bumped until it has never been issued by this builder."""
        stamp = int(self._clock() * 1000)
        candidate = f"field_{stamp}"
        while candidate in self._issued_ids:
            stamp += 1
            candidate = f"field_{stamp}"
        self._issued_ids.add(candidate)
        return candidate

    # ------------------------------------------------------------
    # Field operations
    # ------------------------------------------------------------

    def add_field(self, field_type: FieldType | str) -> BaseField:
        """Append a new field of `field_type`, select it and open the editor."""
        field_type = FieldType(field_type)
        data: dict[str, Any] = {
            "id": self._new_id(),
            "type": field_type.value,
            "label": FIELD_TYPE_LABELS[field_type],
            "required": False,
            "validation": {},
        }
        if field_type != FieldType.FILE:
            data["placeholder"] = ""
        if field_type in OPTION_FIELD_TYPES:
            data["options"] = ["Option 1"]

        field = parse_field(data)
        self.fields.append(field)
        self.selected_field = field
        self.show_field_editor = True
        logger.debug(f"Added {field_type.value} field {field.id}")
        return field

    def duplicate_field(self, field: BaseField) -> BaseField:
        """Deep copy `field` under a new id, appended at the end of the list."""
        clone = field.model_copy(
            deep=True,
            update={"id": self._new_id(), "label": f"{field.label} (Copy)"}
        )
        self.fields.append(clone)
        return clone

    def update_field(self, field_id: str, **changes: Any) -> Optional[BaseField]:
        """
        Merge `changes` into the field with `field_id`.

        Unknown ids are ignored. A `type` change re-validates the field as
        the new variant; switching to an option type with no options seeds
        "Option 1".
        """
        index = self.index_of(field_id)
        if index == -1:
            logger.debug(f"update_field: no field {field_id}")
            return None

        changes.pop("id", None)
        current = self.fields[index]
        if "type" in changes and FieldType(changes["type"]) != current.field_type:
            data = {**current.model_dump(), **changes}
            data["type"] = FieldType(changes["type"]).value
            if FieldType(data["type"]) in OPTION_FIELD_TYPES and not data.get("options"):
                data["options"] = ["Option 1"]
            updated = parse_field(data)
        else:
            changes.pop("type", None)
            updated = parse_field({**current.model_dump(), **changes})

        self.fields[index] = updated
        if self.selected_field is not None and self.selected_field.id == field_id:
            self.selected_field = updated
        return updated

    def delete_field(self, field_id: str) -> bool:
        """Remove the field; closes the editor if it was the selected one."""
        index = self.index_of(field_id)
        if index == -1:
            return False
        del self.fields[index]
        if self.selected_field is not None and self.selected_field.id == field_id:
            self.selected_field = None
            self.show_field_editor = False
        return True

    def move_field(self, field_id: str, direction: str) -> bool:
        """
        Swap the field with its neighbour (`up` or `down`).

        No-op at either boundary or for an unknown id.
        """
        if direction not in ("up", "down"):
            raise ValueError(f"Invalid direction: {direction!r} (expected 'up' or 'down')")

        current_index = self.index_of(field_id)
        if current_index == -1:
            logger.debug(f"move_field: no field {field_id}")
            return False

        new_index = current_index - 1 if direction == "up" else current_index + 1
        if new_index < 0 or new_index >= len(self.fields):
            logger.debug(f"move_field: {field_id} already at boundary")
            return False

        self.fields[current_index], self.fields[new_index] = (
            self.fields[new_index],
            self.fields[current_index],
        )
        return True

    def reorder(self, dragged_id: str, target_id: str) -> bool:
        """Drag-and-drop: move `dragged_id` to the position held by `target_id`."""
        if dragged_id == target_id:
            return False
        old_index = self.index_of(dragged_id)
        new_index = self.index_of(target_id)
        if old_index == -1 or new_index == -1:
            return False

        self.fields = move_item(self.fields, old_index, new_index)
        logger.debug(f"Moved field {dragged_id} from {old_index} to {new_index}")
        return True

    def add_option(self, field_id: str, option: str) -> bool:
        field = self.get_field(field_id)
        if field is None or not field.has_options:
            return False
        self.update_field(field_id, options=[*field.options, option])
        return True

    def remove_option(self, field_id: str, index: int) -> bool:
        """Remove an option by index; removing the last one leaves an empty list."""
        field = self.get_field(field_id)
        if field is None or not field.has_options:
            return False
        if not (0 <= index < len(field.options)):
            return False
        options = [opt for i, opt in enumerate(field.options) if i != index]
        self.update_field(field_id, options=options)
        return True

    # ------------------------------------------------------------
    # Selection & metadata
    # ------------------------------------------------------------

    def select_field(self, field_id: str) -> Optional[BaseField]:
        field = self.get_field(field_id)
        if field is not None:
            self.selected_field = field
            self.show_field_editor = True
        return field

    def close_editor(self) -> None:
        self.selected_field = None
        self.show_field_editor = False

    def set_title(self, title: str) -> None:
        self.title = title

    def set_description(self, description: str) -> None:
        self.description = description

    # ------------------------------------------------------------
    # Hand-off
    # ------------------------------------------------------------

    def snapshot(self) -> FormDefinition:
        """Detached copy of the current (possibly unsaved) definition."""
        return FormDefinition(
            title=self.title,
            description=self.description,
            fields=copy.deepcopy(self.fields),
            job_id=self.job_id,
        )

    async def save(self) -> Any:
        """Hand the snapshot to `on_save`. Failures are logged and re-raised."""
        if self.on_save is None:
            raise RuntimeError("FormBuilder has no save handler")
        definition = self.snapshot()
        try:
            result = await self.on_save(definition)
        except Exception as e:
            logger.error(f"Error saving form for job {self.job_id}: {str(e)}", exc_info=True)
            raise
        logger.info(f"Saved form '{definition.title}' ({len(definition.fields)} fields) for job {self.job_id}")
        return result

    async def preview(self) -> Any:
        if self.on_preview is None:
            raise RuntimeError("FormBuilder has no preview handler")
        return await self.on_preview(self.snapshot())
