# aws.py
"""boto3 client and table factories.

Clients are created lazily and cached for the life of the Lambda container,
so warm invocations reuse their connections.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List

import boto3

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def dynamodb_resource(region: str):
    logger.info(f"Creating DynamoDB resource in {region}")
    return boto3.resource("dynamodb", region_name=region)


@lru_cache(maxsize=None)
def s3_client(region: str):
    logger.info(f"Creating S3 client in {region}")
    return boto3.client("s3", region_name=region)


@lru_cache(maxsize=None)
def ses_client(region: str):
    logger.info(f"Creating SES client in {region}")
    return boto3.client("ses", region_name=region)


def dynamodb_table(table_name: str, region: str, setting: str, error=ConfigurationError):
    """Return the Table resource for ``table_name``, raising ``error`` for an unset name."""
    if not table_name:
        raise error(f"{setting} is not configured")
    return dynamodb_resource(region).Table(table_name)


def scan_all(table, **kwargs) -> List[Dict[str, Any]]:
    """Scan a table to the end, following LastEvaluatedKey."""
    items: List[Dict[str, Any]] = []
    while True:
        response = table.scan(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


def query_all(table, **kwargs) -> List[Dict[str, Any]]:
    """Same as scan_all, for Query."""
    items: List[Dict[str, Any]] = []
    while True:
        response = table.query(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key
