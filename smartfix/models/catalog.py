from typing import List, Optional, Union
from pydantic import BaseModel, field_validator

from smartfix.core.errors import Recovered


class Service(BaseModel):
    id: str
    name: str
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Union[int, str]) -> str:
        return str(value)


class CatalogResult(BaseModel):
    services: List[Service]
    recovered: Optional[Recovered] = None

    @property
    def is_fallback(self) -> bool:
        return self.recovered is not None
