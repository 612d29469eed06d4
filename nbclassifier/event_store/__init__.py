from .event_store import ParquetEventStore, import_events, parse_data_line

__all__ = ["ParquetEventStore", "import_events", "parse_data_line"]
