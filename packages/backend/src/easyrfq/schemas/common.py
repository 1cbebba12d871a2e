"""Shared Pydantic base models.

Learn: The JSON API speaks camelCase (customerName, companyId) while
Python and the database speak snake_case. CamelModel generates the
camelCase aliases; populate_by_name lets clients send either form, and
FastAPI serializes responses by alias.

Update schemas forbid unknown keys. Their dumped keys become column
names in the UPDATE statement, so only declared fields may get through.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UpdateModel(CamelModel):
    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Only the fields the client sent, keyed by their camelCase names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CountResponse(BaseModel):
    count: int


class DeletedResponse(BaseModel):
    deleted: str
