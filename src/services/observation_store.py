"""
Storage service for tracking observations and derived cycle statistics.

All observations for a user live in one DynamoDB partition keyed by
``USER#<user_id>``; the sort key prefix identifies the kind of record.

Typical usage:
    store = ObservationStore()
    history = store.load_all_cycle_observations(user_id)
    store.upsert_statistics(user_id, derive_statistics(history))
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from src.models.observation import CycleObservation, MoodObservation, SymptomObservation
from src.models.statistics import CycleStatistics
from src.services.exceptions import StorageError
from src.services.utils import ModelT, parse_observations, validate_window, window_bounds
from src.utils.dynamo import (
    STATISTICS_SK,
    create_cycle_sk,
    create_mood_sk,
    create_pk,
    create_symptom_sk,
    get_dynamo,
)
from src.utils.logging import logger

WindowedObservations = Tuple[List[CycleObservation], List[MoodObservation], List[SymptomObservation]]

STORAGE_ERRORS = (ClientError, BotoCoreError)


class ObservationStore:
    """Service for reading and writing a user's tracking data."""

    def __init__(self, dynamo=None):
        """
        Initialize observation store.

        Args:
            dynamo: Optional DynamoDB client, defaults to the shared client
        """
        self.dynamo = dynamo or get_dynamo()

    def _query_prefix(
        self,
        user_id: str,
        prefix: str,
        model: Type[ModelT],
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[ModelT]:
        """Load and parse every item whose sort key starts with a prefix."""
        if start is not None and end is not None:
            # The trailing "~" sorts after "#" so symptom keys on the end date are included
            condition = Key("SK").between(f"{prefix}{start.isoformat()}", f"{prefix}{end.isoformat()}~")
        else:
            condition = Key("SK").begins_with(prefix)

        try:
            items = self.dynamo.query_items(
                partition_key="PK",
                partition_value=create_pk(user_id),
                sort_key_condition=condition
            )
        except STORAGE_ERRORS as e:
            logger.error("Error loading observations", extra={
                "user_id": user_id,
                "prefix": prefix,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StorageError(f"Failed to load observations: {str(e)}") from e

        parsed = parse_observations(items, model)
        if parsed.skipped:
            logger.warning("Skipped malformed observations", extra={
                "user_id": user_id,
                "prefix": prefix,
                "skipped": parsed.skipped,
                "loaded": len(parsed.observations)
            })
        return parsed.observations

    def _write(self, action: str, user_id: str, operation, *args: Any) -> Any:
        """Run a DynamoDB write, translating client errors to StorageError."""
        try:
            return operation(*args)
        except STORAGE_ERRORS as e:
            logger.error(f"Error during {action}", extra={
                "user_id": user_id,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StorageError(f"Failed to {action}: {str(e)}") from e

    def load_all_cycle_observations(self, user_id: str) -> List[CycleObservation]:
        """
        Load a user's full cycle history.

        Args:
            user_id: User identifier

        Returns:
            Cycle observations in ascending date order

        Raises:
            StorageError: If the table cannot be read
        """
        return self._query_prefix(user_id, "CYCLE#", CycleObservation)

    def load_windowed_observations(
        self,
        user_id: str,
        window_days: int,
        today: Optional[date] = None
    ) -> WindowedObservations:
        """
        Load all observations within a trailing reporting window.

        Args:
            user_id: User identifier
            window_days: One of the supported reporting windows
            today: Last day of the window, defaults to current date

        Returns:
            Tuple of (cycle, mood, symptom) observations

        Raises:
            InvalidWindowError: If the window size is not supported
            StorageError: If the table cannot be read
        """
        validate_window(window_days)
        start, end = window_bounds(window_days, today)

        cycle = self._query_prefix(user_id, "CYCLE#", CycleObservation, start, end)
        mood = self._query_prefix(user_id, "MOOD#", MoodObservation, start, end)
        symptoms = self._query_prefix(user_id, "SYMPTOM#", SymptomObservation, start, end)

        logger.info("Loaded windowed observations", extra={
            "user_id": user_id,
            "window_days": window_days,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "cycle_count": len(cycle),
            "mood_count": len(mood),
            "symptom_count": len(symptoms)
        })
        return cycle, mood, symptoms

    def load_statistics(self, user_id: str) -> Optional[CycleStatistics]:
        """
        Load the persisted statistics for a user.

        Returns:
            CycleStatistics if they have been computed, None otherwise

        Raises:
            StorageError: If the table cannot be read
        """
        try:
            item = self.dynamo.get_item({"PK": create_pk(user_id), "SK": STATISTICS_SK})
        except STORAGE_ERRORS as e:
            logger.error("Error loading statistics", extra={
                "user_id": user_id,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise StorageError(f"Failed to load statistics: {str(e)}") from e

        if not item:
            return None
        return CycleStatistics.model_validate(item)

    def upsert_statistics(self, user_id: str, stats: CycleStatistics) -> None:
        """
        Replace the persisted statistics for a user.

        The whole row is written with one put, so readers never see a
        partially updated record.

        Raises:
            StorageError: If the write fails
        """
        item = {
            "PK": create_pk(user_id),
            "SK": STATISTICS_SK,
            "user_id": user_id,
            **stats.model_dump(mode="json"),
            "updated_at": datetime.now().isoformat()
        }
        self._write("store statistics", user_id, self.dynamo.put_item, item)
        logger.info("Stored cycle statistics", extra={"user_id": user_id, **stats.model_dump(mode="json")})

    def save_cycle_observation(self, user_id: str, observation: CycleObservation) -> None:
        """Insert or replace the cycle observation for its date."""
        date_str = observation.date.isoformat()
        self._write("store cycle observation", user_id, self.dynamo.put_item, {
            "PK": create_pk(user_id),
            "SK": create_cycle_sk(date_str),
            "user_id": user_id,
            **_item_attributes(observation)
        })

    def save_mood_observation(self, user_id: str, observation: MoodObservation) -> None:
        """Insert or replace the mood observation for its date."""
        date_str = observation.date.isoformat()
        self._write("store mood observation", user_id, self.dynamo.put_item, {
            "PK": create_pk(user_id),
            "SK": create_mood_sk(date_str),
            "user_id": user_id,
            **_item_attributes(observation)
        })

    def replace_symptom_observations(
        self,
        user_id: str,
        day: date,
        symptoms: Iterable[SymptomObservation]
    ) -> None:
        """
        Replace every symptom logged on a date with a new set.

        Args:
            user_id: User identifier
            day: Date whose symptoms are replaced
            symptoms: New symptom observations, all dated ``day``
        """
        date_str = day.isoformat()
        symptoms = list(symptoms)
        if any(s.date != day for s in symptoms):
            raise ValueError(f"All symptoms must be dated {date_str}")

        existing = self._query_prefix(user_id, "SYMPTOM#", SymptomObservation, day, day)
        delete_keys = [
            {"PK": create_pk(user_id), "SK": create_symptom_sk(date_str, s.symptom_type)}
            for s in existing
        ]
        new_items = [
            {
                "PK": create_pk(user_id),
                "SK": create_symptom_sk(date_str, s.symptom_type),
                "user_id": user_id,
                **_item_attributes(s)
            }
            for s in symptoms
        ]
        self._write("store symptom observations", user_id, self.dynamo.replace_items, delete_keys, new_items)

    def delete_cycle_observation(self, user_id: str, day: date) -> None:
        """Delete the cycle observation for a date, if any."""
        self._write("delete cycle observation", user_id, self.dynamo.delete_item, {
            "PK": create_pk(user_id),
            "SK": create_cycle_sk(day.isoformat())
        })


def _item_attributes(observation) -> Dict[str, Any]:
    """Serialize an observation for DynamoDB, dropping empty attributes."""
    return {k: v for k, v in observation.model_dump(mode="json").items() if v is not None}
