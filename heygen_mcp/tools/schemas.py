"""
Input models for each tool.

Arguments from the client are validated against these before any executor
runs. Numbers are strict: booleans and numeric strings are rejected, ints
stay ints and floats stay floats.
"""

from typing import Annotated, Literal, Union

from pydantic import AllowInfNan, BaseModel, Strict, StrictInt, StrictStr

FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
Number = Union[StrictInt, FiniteFloat]


class AddInput(BaseModel):
    a: Number
    b: Number


class CalculateInput(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide"]
    a: Number
    b: Number


class CreateHeygenVideoInput(BaseModel):
    avatar_id: StrictStr
    voice_id: StrictStr
    input_text: StrictStr
    # e.g. "#008000"; not format-checked
    background: StrictStr | None = None


# Maps the model names used in tools.yml to the model classes
INPUT_MODELS: dict[str, type[BaseModel]] = {
    "AddInput": AddInput,
    "CalculateInput": CalculateInput,
    "CreateHeygenVideoInput": CreateHeygenVideoInput,
}
