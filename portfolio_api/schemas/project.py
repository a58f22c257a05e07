from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional


class ProjectBase(BaseModel):
    category: str
    title: str = Field(min_length=3)
    description: str
    imageUrl: str
    tags: List[str] = []
    order: float = 0

    class Config:
        extra = "ignore"


class ProjectCreate(ProjectBase):
    status: str = "published"


class ProjectUpdate(BaseModel):
    category: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    tags: Optional[List[str]] = None
    order: Optional[float] = None
    status: Optional[str] = None

    @field_validator('tags')
    @classmethod
    def clean_tag_list(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None:
            return [tag.strip() for tag in v if tag.strip()]
        return v

    class Config:
        extra = "ignore"

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)

