# models/project.py
"""Portfolio project record as stored in DynamoDB."""

from dataclasses import dataclass, asdict, field
from decimal import Decimal
from typing import Any, Dict, List


def to_dynamo(value: Any) -> Any:
    """Convert floats (recursively) to Decimal; boto3 refuses Python floats."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


@dataclass
class Project:
    """A portfolio entry shown on the public site, ordered by ``order``."""

    id: str
    category: str
    title: str
    description: str
    imageUrl: str
    createdAt: int
    updatedAt: int
    tags: List[str] = field(default_factory=list)
    status: str = "published"  # draft, published, archived
    order: float = 0

    def to_item(self) -> Dict[str, Any]:
        return to_dynamo(asdict(self))
