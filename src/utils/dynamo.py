"""
DynamoDB utility functions for data access.
"""
import os
from typing import Dict, Iterable, List, Optional, Any
import boto3
from boto3.dynamodb.conditions import Key

# Singleton instance
_dynamo_instance = None

def get_dynamo() -> 'DynamoDBClient':
    """
    Get or create singleton DynamoDB client instance.

    This is the only way services should access DynamoDB. It ensures
    consistent table access across the codebase and proper error handling
    for missing configuration.

    Example:
        dynamo = get_dynamo()
        item = dynamo.get_item({"PK": "USER#123", "SK": "STATISTICS"})

    Returns:
        DynamoDBClient: Singleton instance of DynamoDB client

    Raises:
        EnvironmentError: If TRACKER_TABLE_NAME environment variable is not set
    """
    global _dynamo_instance
    if _dynamo_instance is None:
        try:
            table_name = os.environ['TRACKER_TABLE_NAME']
        except KeyError:
            raise EnvironmentError(
                "TRACKER_TABLE_NAME environment variable not set. "
                "This variable must be set to the DynamoDB table name."
            )
        _dynamo_instance = DynamoDBClient(table_name)
    return _dynamo_instance

class DynamoDBClient:
    """Client for interacting with the tracker table."""

    def __init__(self, table_name: str):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Put a single item into the table, replacing any item with the same key.

        Args:
            item: Dictionary containing item attributes

        Returns:
            Response from DynamoDB
        """
        return self.table.put_item(Item=item)

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        Get a single item from the table.

        Args:
            key: Dictionary containing partition key and sort key

        Returns:
            Item if found, None otherwise
        """
        response = self.table.get_item(Key=key)
        return response.get('Item')

    def query_items(
        self,
        partition_key: str,
        partition_value: str,
        sort_key_condition: Optional[Any] = None
    ) -> List[Dict[str, Any]]:
        """
        Query all items for a partition key, following pagination.

        Args:
            partition_key: Name of partition key
            partition_value: Value of partition key
            sort_key_condition: Optional sort key condition

        Returns:
            List of matching items in sort key order
        """
        key_condition = Key(partition_key).eq(partition_value)
        if sort_key_condition is not None:
            key_condition = key_condition & sort_key_condition

        kwargs = {"KeyConditionExpression": key_condition}
        items = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def delete_item(self, key: Dict[str, str]) -> Dict[str, Any]:
        """
        Delete an item from the table.

        Args:
            key: Dictionary containing partition key and sort key

        Returns:
            Response from DynamoDB
        """
        return self.table.delete_item(Key=key)

    def replace_items(
        self,
        delete_keys: Iterable[Dict[str, str]],
        new_items: Iterable[Dict[str, Any]]
    ) -> None:
        """
        Delete a set of items and write a new set in one batch.

        Args:
            delete_keys: Keys of items to delete
            new_items: Items to put after the deletes
        """
        # Requests for the same key collapse to the last one, so a rewritten
        # item is not deleted by its own delete request
        with self.table.batch_writer(overwrite_by_pkeys=['PK', 'SK']) as batch:
            for key in delete_keys:
                batch.delete_item(Key=key)
            for item in new_items:
                batch.put_item(Item=item)

def create_pk(user_id: str) -> str:
    """Create partition key from user ID."""
    return f"USER#{user_id}"

def create_cycle_sk(date_str: str) -> str:
    """Create sort key for cycle observations."""
    return f"CYCLE#{date_str}"

def create_mood_sk(date_str: str) -> str:
    """Create sort key for mood observations."""
    return f"MOOD#{date_str}"

def create_symptom_sk(date_str: str, symptom_type: str) -> str:
    """
    Create sort key for symptom observations.

    Several symptoms can be logged on the same date, so the symptom type is
    part of the key.

    Args:
        date_str: ISO format date string
        symptom_type: Symptom label

    Returns:
        Sort key in format "SYMPTOM#{date_str}#{symptom_type}"
    """
    return f"SYMPTOM#{date_str}#{symptom_type}"

STATISTICS_SK = "STATISTICS"
