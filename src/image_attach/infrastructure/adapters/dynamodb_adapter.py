"""Thin adapter over the boto3 DynamoDB Table holding host records."""

import os
from typing import Any, Protocol, cast

import boto3

from image_attach.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_RECORD_TABLE_NAME,
)

Item = dict[str, Any]


class DynamoDBTable(Protocol):
    """The boto3 Table methods the adapter calls."""

    def put_item(self, **kwargs: Any) -> Item: ...
    def get_item(self, **kwargs: Any) -> Item: ...
    def update_item(self, **kwargs: Any) -> Item: ...
    def delete_item(self, **kwargs: Any) -> Item: ...


class DynamoDBAdapterProtocol(Protocol):
    """Adapter surface the record repository depends on."""

    def put_item(self, *, item: Item, condition_expression: str | None = None) -> Item: ...

    def get_item(self, *, key: Item) -> Item: ...

    def update_item(
        self,
        *,
        key: Item,
        update_expression: str,
        expression_values: Item | None = None,
        expression_names: dict[str, str] | None = None,
        condition_expression: str | None = None,
        return_values: str = "NONE",
    ) -> Item: ...

    def delete_item(self, *, key: Item) -> Item: ...


def _request(**params: Any) -> Item:
    """Drop unset optional parameters; boto3 rejects explicit None values."""
    return {name: value for name, value in params.items() if value}


class DynamoDBAdapter:
    """Mechanical DynamoDB calls for the record table.

    botocore ClientErrors propagate unchanged; DynamoDBRecords translates
    them into domain errors.
    """

    def __init__(self) -> None:
        table_name = os.getenv(ENV_IMAGE_RECORD_TABLE_NAME)
        if not table_name:
            raise RuntimeError(
                f"{ENV_IMAGE_RECORD_TABLE_NAME} environment variable is not set"
            )

        resource = boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )
        self.table = cast(DynamoDBTable, resource.Table(table_name))

    def put_item(self, *, item: Item, condition_expression: str | None = None) -> Item:
        return self.table.put_item(
            **_request(Item=item, ConditionExpression=condition_expression)
        )

    def get_item(self, *, key: Item) -> Item:
        return self.table.get_item(Key=key)

    def update_item(
        self,
        *,
        key: Item,
        update_expression: str,
        expression_values: Item | None = None,
        expression_names: dict[str, str] | None = None,
        condition_expression: str | None = None,
        return_values: str = "NONE",
    ) -> Item:
        return self.table.update_item(
            **_request(
                Key=key,
                UpdateExpression=update_expression,
                ExpressionAttributeValues=expression_values,
                ExpressionAttributeNames=expression_names,
                ConditionExpression=condition_expression,
                ReturnValues=return_values,
            )
        )

    def delete_item(self, *, key: Item) -> Item:
        return self.table.delete_item(Key=key)
