"""Helpers shared by update schemas."""
from typing import Iterable
from pydantic import BaseModel


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """
    Fail validation when a required column is sent as null.

    Update schemas make every field optional so it can be omitted; omitting
    a field leaves it unchanged, but null cannot be stored for these.
    """
    nulled = sorted(
        name for name in fields
        if name in model.model_fields_set and getattr(model, name) is None
    )
    if nulled:
        raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
