"""
core/schemas.py — Core/general Pydantic schemas and shared field types.
"""

import re
from typing import Annotated, Any, Union

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def check_hex_color(value: str) -> str:
    value = value.strip()
    if not HEX_COLOR.match(value):
        raise ValueError("must be a hex color like #RRGGBB or #RGB")
    return value


HexColor = Annotated[str, AfterValidator(check_hex_color)]


def blank_to_none(data: Any) -> Any:
    """Treat empty / whitespace-only strings in an input mapping as absent values."""
    if isinstance(data, dict):
        return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}
    return data


class CamelModel(BaseModel):
    """API models speak camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class HealthCheck(BaseModel):
    status: str = "ok"
    version: str
    database: str


class ImportOutcomeResponse(BaseModel):
    created: int
    duplicates: int
    errors: int


class CsvImportRequest(CamelModel):
    csv_data: str


class JsonImportRequest(CamelModel):
    # Either a JSON document in a string (what the UI uploads) or an inline array
    json_data: Union[str, list]

