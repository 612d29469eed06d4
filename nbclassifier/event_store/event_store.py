"""Parquet-based event store implementation.

Persists entity events per app and replays them into per-entity
property maps.

Supports:
- `$set` events (merge properties into the entity)
- `$unset` events (remove the named properties)
- `$delete` events (drop the entity)
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
import shutil
from typing import Any, Iterable

import polars as pl
from loguru import logger

from nbclassifier.domain.entities import Event, PropertyMap


SET_EVENT = "$set"
UNSET_EVENT = "$unset"
DELETE_EVENT = "$delete"

EVENTS_SCHEMA = {
    "event": pl.Utf8,
    "entity_type": pl.Utf8,
    "entity_id": pl.Utf8,
    "properties": pl.Utf8,
    "event_time": pl.Datetime("us"),
    "seq": pl.Int64,
}


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


@dataclass
class ParquetEventStore:
    """Event store using parquet files for persistence.

    Organizes events in a directory structure:
        storage_path/
            app_name/
                events.parquet
    """

    storage_path: Path

    def __post_init__(self) -> None:
        self.storage_path = Path(self.storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def _events_path(self, app_name: str) -> Path:
        return self.storage_path / app_name / "events.parquet"

    def _load_frame(self, app_name: str) -> pl.DataFrame:
        path = self._events_path(app_name)
        if not path.exists():
            return pl.DataFrame(schema=EVENTS_SCHEMA)
        return pl.read_parquet(path)

    def insert(self, app_name: str, events: Iterable[Event]) -> int:
        """Append events to an app's event log.

        Args:
            app_name: App the events belong to
            events: Events to append

        Returns:
            Number of events written
        """
        existing = self._load_frame(app_name)
        next_seq = int(existing["seq"].max()) + 1 if len(existing) else 0

        rows: dict[str, list[Any]] = {name: [] for name in EVENTS_SCHEMA}
        for offset, event in enumerate(events):
            rows["event"].append(event.event)
            rows["entity_type"].append(event.entity_type)
            rows["entity_id"].append(event.entity_id)
            rows["properties"].append(json.dumps(event.properties))
            rows["event_time"].append(_naive_utc(event.event_time))
            rows["seq"].append(next_seq + offset)

        n_new = len(rows["seq"])
        if n_new == 0:
            return 0

        new_frame = pl.DataFrame(rows, schema=EVENTS_SCHEMA)
        combined = pl.concat([existing, new_frame]) if len(existing) else new_frame

        path = self._events_path(app_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        combined.write_parquet(path)

        logger.debug("Inserted {} events into app '{}'", n_new, app_name)
        return n_new

    def find(self, app_name: str, entity_type: str | None = None) -> list[Event]:
        """Return stored events ordered by event time, then insertion order."""
        frame = self._load_frame(app_name)
        if entity_type is not None:
            frame = frame.filter(pl.col("entity_type") == entity_type)
        frame = frame.sort(["event_time", "seq"])

        return [
            Event(
                event=row["event"],
                entity_type=row["entity_type"],
                entity_id=row["entity_id"],
                properties=json.loads(row["properties"]),
                event_time=row["event_time"],
            )
            for row in frame.iter_rows(named=True)
        ]

    def aggregate_properties(
        self,
        app_name: str,
        entity_type: str,
        required: list[str] | None = None,
    ) -> dict[str, PropertyMap]:
        """Aggregate the current properties of every entity of a type.

        Args:
            app_name: App to read from
            entity_type: Entity type to aggregate
            required: Only keep entities carrying all of these properties

        Returns:
            Mapping of entity id to PropertyMap, in order of first appearance
        """
        fields: dict[str, dict[str, Any]] = {}
        first_seen: dict[str, datetime] = {}
        last_seen: dict[str, datetime] = {}

        for event in self.find(app_name, entity_type):
            entity_id = event.entity_id
            if event.event == SET_EVENT:
                fields.setdefault(entity_id, {}).update(event.properties)
                first_seen.setdefault(entity_id, event.event_time)
                last_seen[entity_id] = event.event_time
            elif event.event == UNSET_EVENT:
                if entity_id in fields:
                    for key in event.properties:
                        fields[entity_id].pop(key, None)
                    last_seen[entity_id] = event.event_time
            elif event.event == DELETE_EVENT:
                fields.pop(entity_id, None)
                first_seen.pop(entity_id, None)
                last_seen.pop(entity_id, None)

        required = required or []
        return {
            entity_id: PropertyMap(props, first_seen[entity_id], last_seen[entity_id])
            for entity_id, props in fields.items()
            if all(key in props for key in required)
        }

    def list_apps(self) -> list[str]:
        """List all apps with stored events."""
        return sorted(
            d.name for d in self.storage_path.iterdir()
            if d.is_dir() and (d / "events.parquet").exists()
        )

    def delete_app(self, app_name: str) -> bool:
        """Delete an app's events.

        Returns:
            True if deleted, False if not found
        """
        app_dir = self.storage_path / app_name
        if not app_dir.exists():
            return False

        shutil.rmtree(app_dir)
        return True


def parse_data_line(line: str, line_number: int) -> tuple[float, list[float]]:
    """Parse one `label,f0 f1 f2` line of the sample data file."""
    try:
        label_part, features_part = line.split(",", 1)
        label = float(label_part)
        features = [float(v) for v in features_part.split()]
    except ValueError as e:
        raise ValueError(f"Malformed line {line_number}: {line!r} ({e})") from e

    if len(features) != 3:
        raise ValueError(
            f"Malformed line {line_number}: expected 3 attributes, got {len(features)}"
        )
    return label, features


def import_events(
    store: ParquetEventStore,
    app_name: str,
    path: Path | str,
    entity_type: str = "user",
) -> int:
    """Import the sample data file into the event store.

    Each non-blank line becomes one `$set` event carrying `plan`
    and `attr0`..`attr2`.

    Returns:
        Number of events imported
    """
    path = Path(path)
    events = []
    with open(path, "r") as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            label, features = parse_data_line(line, line_number)
            properties: dict[str, Any] = {"plan": label}
            properties.update({f"attr{i}": value for i, value in enumerate(features)})
            events.append(
                Event(
                    event=SET_EVENT,
                    entity_type=entity_type,
                    entity_id=f"u{len(events)}",
                    properties=properties,
                )
            )

    count = store.insert(app_name, events)
    logger.info("Imported {} events from {} into app '{}'", count, path, app_name)
    return count
