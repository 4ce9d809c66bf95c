"""
Form schema Pydantic models.

A field is a tagged variant keyed on `type`: each variant declares only the
attributes that apply to it (no `options` on text inputs, no `placeholder`
on file uploads), so a dumped field never carries keys it cannot use.
"""
import enum
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class FieldType(str, enum.Enum):
    """Closed set of input controls a form field can render as."""
    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"


OPTION_FIELD_TYPES = {FieldType.SELECT, FieldType.CHECKBOX, FieldType.RADIO}

FIELD_TYPE_LABELS: dict[FieldType, str] = {
    FieldType.TEXT: "Text Input",
    FieldType.EMAIL: "Email Input",
    FieldType.PHONE: "Phone Number",
    FieldType.DATE: "Date Picker",
    FieldType.TEXTAREA: "Text Area",
    FieldType.SELECT: "Dropdown",
    FieldType.CHECKBOX: "Checkbox",
    FieldType.RADIO: "Radio Button",
    FieldType.FILE: "File Upload",
}


class BaseField(BaseModel):
    """Attributes every field variant shares."""
    model_config = ConfigDict(extra="ignore")

    id: str
    label: str = ""
    required: bool = False
    # Advisory constraints for the runtime renderer: minLength, maxLength, pattern, fileTypes
    validation: dict[str, Any] = Field(default_factory=dict)

    @property
    def field_type(self) -> FieldType:
        return FieldType(self.type)

    @property
    def has_options(self) -> bool:
        return self.field_type in OPTION_FIELD_TYPES


class InputField(BaseField):
    placeholder: Optional[str] = ""


class ChoiceField(InputField):
    options: list[str] = Field(default_factory=list)


class TextField(InputField):
    type: Literal["text"] = "text"


class EmailField(InputField):
    type: Literal["email"] = "email"


class PhoneField(InputField):
    type: Literal["phone"] = "phone"


class DateField(InputField):
    type: Literal["date"] = "date"


class TextareaField(InputField):
    type: Literal["textarea"] = "textarea"


class SelectField(ChoiceField):
    type: Literal["select"] = "select"


class CheckboxField(ChoiceField):
    type: Literal["checkbox"] = "checkbox"


class RadioField(ChoiceField):
    type: Literal["radio"] = "radio"


class FileField(BaseField):
    type: Literal["file"] = "file"


FieldSchema = Annotated[
    Union[
        TextField,
        EmailField,
        PhoneField,
        DateField,
        TextareaField,
        SelectField,
        CheckboxField,
        RadioField,
        FileField,
    ],
    Field(discriminator="type"),
]

field_adapter: TypeAdapter = TypeAdapter(FieldSchema)
fields_adapter: TypeAdapter = TypeAdapter(list[FieldSchema])


def parse_field(data: dict[str, Any]) -> BaseField:
    """Validate a raw dict into the variant matching its `type`."""
    return field_adapter.validate_python(data)


def dump_fields(fields: list[BaseField]) -> list[dict[str, Any]]:
    """Serialize fields in order, the shape stored in `application_forms.fields`."""
    return [field.model_dump(mode="json") for field in fields]


class FormDefinitionError(ValueError):
    """Raised when a field list breaks a Form Definition invariant"""
    pass


def ensure_unique_ids(fields: list[BaseField]) -> list[BaseField]:
    seen: set[str] = set()
    for field in fields:
        if field.id in seen:
            raise FormDefinitionError(f"Duplicate field id: {field.id}")
        seen.add(field.id)
    return fields


class FormDefinition(BaseModel):
    """Ordered collection of fields screening applicants for one job."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: Optional[str] = ""
    fields: list[FieldSchema] = Field(default_factory=list)
    job_id: Optional[int] = Field(default=None, alias="jobId")

    @field_validator("fields")
    @classmethod
    def check_unique_ids(cls, fields):
        return ensure_unique_ids(fields)

    def to_payload(self) -> dict[str, Any]:
        """Wire body for the forms persistence API."""
        return {
            "title": self.title,
            "description": self.description,
            "fields": dump_fields(self.fields),
            "jobId": self.job_id,
        }


# ============================================================
# REQUEST/RESPONSE SCHEMAS
# ============================================================

class FormSaveRequest(BaseModel):
    """
    Body of POST/PUT /application-forms.

    title/fields are optional here so the endpoint can answer 400 with a
    readable message instead of a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[list[FieldSchema]] = None
    job_id: Optional[int] = Field(default=None, alias="jobId")

    @field_validator("fields")
    @classmethod
    def check_unique_ids(cls, fields):
        if fields is None:
            return fields
        return ensure_unique_ids(fields)


class FormResponse(BaseModel):
    """Persisted form as returned to clients (camelCase on the wire)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    id: int
    title: str
    description: Optional[str] = None
    fields: list[dict[str, Any]]
    job_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class FormSummary(BaseModel):
    """List entry for an employer's forms (no field payload)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    id: int
    title: str
    description: Optional[str] = None
    job_id: int
    is_active: bool
    created_at: datetime


class FormEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    form: Optional[FormResponse] = None


class FormListEnvelope(BaseModel):
    success: bool = True
    forms: list[FormSummary] = Field(default_factory=list)
