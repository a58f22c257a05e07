# services/projects.py
"""Project reads for the public site and admin writes."""

import logging
import uuid
from numbers import Number
from typing import Any, Callable, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key
from pydantic import ValidationError as SchemaError

from ..aws import query_all, scan_all
from ..exceptions import ProjectNotFound, ProjectValidationError
from ..models import Project, to_dynamo
from ..rate_limit import now_ms
from ..schemas import project as schemas
from ..validation import validate_project

logger = logging.getLogger(__name__)


def _order_key(project: Dict[str, Any]):
    order = project.get("order")
    if isinstance(order, Number) and not isinstance(order, bool):
        return (False, order)
    return (True, 0)


def sort_by_order(projects: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Ascending by ``order``; stable. Items whose order is missing or not a number go last."""
    return sorted(projects, key=_order_key)


def _schema_messages(exc: SchemaError) -> List[str]:
    return [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]


class ProjectService:
    def __init__(
        self,
        table,
        category_index: str = "CategoryIndex",
        trusted_image_prefix: str = "https://res.cloudinary.com/",
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.table = table
        self.category_index = category_index
        self.trusted_image_prefix = trusted_image_prefix
        self.clock = clock
        self.id_factory = id_factory

    def list_projects(self, status: str, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """Projects with ``status``, optionally limited to one category, in display order.

        Both values must already be sanitized.
        """
        if category:
            logger.info(f"Fetching projects for category: {category}")
            items = query_all(
                self.table,
                IndexName=self.category_index,
                KeyConditionExpression=Key("category").eq(category),
                FilterExpression=Attr("status").eq(status),
            )
        else:
            logger.info(f"Fetching all projects with status: {status}")
            items = scan_all(self.table, FilterExpression=Attr("status").eq(status))

        projects = sort_by_order(items)
        logger.info(f"Found {len(projects)} projects")
        return projects

    def get_project(self, project_id: str) -> Dict[str, Any]:
        item = self.table.get_item(Key={"id": project_id}).get("Item")
        if not item:
            raise ProjectNotFound("Project not found")
        return item

    def _build(self, data: Dict[str, Any]) -> Project:
        errors = validate_project(data, self.trusted_image_prefix)
        if errors:
            raise ProjectValidationError(errors)

        try:
            payload = schemas.ProjectCreate.model_validate(data)
        except SchemaError as exc:
            raise ProjectValidationError(_schema_messages(exc))
        timestamp = self.clock()
        return Project(
            id=self.id_factory(),
            category=payload.category,
            title=payload.title,
            description=payload.description,
            imageUrl=payload.imageUrl,
            tags=payload.tags,
            status=payload.status,
            order=payload.order,
            createdAt=timestamp,
            updatedAt=timestamp,
        )

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and store a new project, returning the stored item."""
        item = self._build(data).to_item()
        self.table.put_item(Item=item)
        logger.info(f"Created project {item['id']}: {item['title']}")
        return item

    def create_projects(self, batch: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Store many projects at once; nothing is written unless all are valid."""
        errors = []
        projects = []
        for index, data in enumerate(batch):
            try:
                projects.append(self._build(data))
            except ProjectValidationError as exc:
                errors.append({"index": index, "errors": exc.errors})
        if errors:
            raise ProjectValidationError(errors)

        items = [project.to_item() for project in projects]
        with self.table.batch_writer() as writer:
            for item in items:
                writer.put_item(Item=item)
        logger.info(f"Batch created {len(items)} projects")
        return items

    def update_project(self, project_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update after checking the merged project is still valid."""
        errors = validate_project(data, self.trusted_image_prefix, partial=True)
        if errors:
            raise ProjectValidationError(errors)
        try:
            changes = schemas.ProjectUpdate.model_validate(data).changes()
        except SchemaError as exc:
            raise ProjectValidationError(_schema_messages(exc))

        existing = self.get_project(project_id)
        if not changes:
            return existing

        merged = {**existing, **changes}
        errors = validate_project(merged, self.trusted_image_prefix)
        if errors:
            raise ProjectValidationError(errors)

        changes["updatedAt"] = self.clock()
        names = {f"#{field}": field for field in changes}
        values = {f":{field}": to_dynamo(value) for field, value in changes.items()}
        response = self.table.update_item(
            Key={"id": project_id},
            UpdateExpression="SET " + ", ".join(f"#{field} = :{field}" for field in changes),
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues="ALL_NEW",
        )
        logger.info(f"Updated project {project_id}: {sorted(changes)}")
        return response.get("Attributes", {**merged, **changes})

    def delete_project(self, project_id: str) -> None:
        response = self.table.delete_item(Key={"id": project_id}, ReturnValues="ALL_OLD")
        if not response.get("Attributes"):
            raise ProjectNotFound("Project not found")
        logger.info(f"Deleted project {project_id}")
