"""
Ledger persistence.

The import service writes through the LedgerRepository interface, so statement
parsing and its tests never depend on process-wide state. The in-memory store
backs local runs and tests; the DynamoDB store is used when LEDGER_TABLE is set.
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from models.statement import LedgerEntry

logger = logging.getLogger(__name__)


class LedgerRepository(ABC):
    """Storage for ledger entries produced by statement imports."""

    @abstractmethod
    def add_entries(self, entries: List[LedgerEntry]) -> int:
        """
        Persist entries.

        Returns:
            Number of entries written
        """
        pass

    @abstractmethod
    def list_entries(self, user_id: str) -> List[LedgerEntry]:
        pass


class InMemoryLedgerRepository(LedgerRepository):
    """Process-local ledger store, scoped to one repository instance."""

    def __init__(self):
        self._entries: Dict[str, List[LedgerEntry]] = {}

    def add_entries(self, entries: List[LedgerEntry]) -> int:
        for entry in entries:
            self._entries.setdefault(entry.user_id, []).append(entry)
        return len(entries)

    def list_entries(self, user_id: str) -> List[LedgerEntry]:
        return list(self._entries.get(user_id, []))

    def count(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


class DynamoDBLedgerRepository(LedgerRepository):
    """Ledger store backed by a DynamoDB table keyed on userId/entryId."""

    def __init__(self, table_name: Optional[str] = None, table: Optional[Any] = None):
        if table is not None:
            self._table = table
            return
        name = table_name or os.environ.get('LEDGER_TABLE')
        if not name:
            raise ValueError("LEDGER_TABLE is not configured")
        self._table = boto3.resource('dynamodb').Table(name)

    def add_entries(self, entries: List[LedgerEntry]) -> int:
        try:
            with self._table.batch_writer() as batch:
                for entry in entries:
                    batch.put_item(Item=entry.to_dynamodb_item())
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.error(f"DynamoDB error writing {len(entries)} ledger entries: {error_code}")
            raise
        logger.info(f"Wrote {len(entries)} ledger entries")
        return len(entries)

    def list_entries(self, user_id: str) -> List[LedgerEntry]:
        query_params: Dict[str, Any] = {'KeyConditionExpression': Key('userId').eq(user_id)}
        entries: List[LedgerEntry] = []
        while True:
            response = self._table.query(**query_params)
            entries.extend(LedgerEntry.from_dynamodb_item(item) for item in response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                break
            query_params['ExclusiveStartKey'] = response['LastEvaluatedKey']
        return entries


def default_repository() -> LedgerRepository:
    """DynamoDB when LEDGER_TABLE is configured, otherwise an in-memory store."""
    if os.environ.get('LEDGER_TABLE'):
        return DynamoDBLedgerRepository()
    logger.info("LEDGER_TABLE not set, using in-memory ledger repository")
    return InMemoryLedgerRepository()
