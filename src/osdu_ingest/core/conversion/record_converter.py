"""
Row to StorageRecord conversion.
"""

from typing import Any, Callable, Iterable

from osdu_ingest.core.conversion.normalize import normalize_scalar, normalize_struct
from osdu_ingest.core.errors import ConversionError
from osdu_ingest.core.models import StorageAcl, StorageLegal, StorageRecord
from osdu_ingest.core.schema import FieldPositions
from osdu_ingest.observability import metrics


def _get(container: Any, index: int, path: str) -> Any:
    try:
        return container[index]
    except (IndexError, KeyError, TypeError) as e:
        raise ConversionError(path, "row does not match the writer schema") from e


def _get_struct(row: Any, index: int, path: str) -> Any:
    value = _get(row, index, path)
    if value is None:
        raise ConversionError(path, "struct is null")
    return value


def _strings(value: Any, path: str, collect: Callable[[Iterable[str]], Any]) -> Any:
    """Convert every element of an array to a plain string."""
    if value is None:
        raise ConversionError(path, "array is null")
    if not isinstance(value, (list, tuple)):
        raise ConversionError(path, f"expected array, got {type(value).__name__}")

    elements = []
    for i, element in enumerate(value):
        if element is None:
            raise ConversionError(f"{path}[{i}]", "null element")
        elements.append(str(normalize_scalar(element, f"{path}[{i}]")))
    return collect(elements)


def failure_label(field_path: str) -> str:
    """
    Metric label for a failed field path.

    Keeps at most the first two segments (e.g. "acl.owners", "data.attributes")
    so array indexes and map keys taken from row values never become labels.
    """
    return ".".join(field_path.split("[")[0].split(".")[:2])


class RecordConverter:
    """
    Converts rows into StorageRecords using pre-resolved field positions.

    The converter holds no mutable state; the same instance may convert
    any number of rows, and the rows themselves are never modified.
    """

    def __init__(self, positions: FieldPositions):
        """
        Initialize record converter.

        Args:
            positions: Field positions resolved from the row schema
        """
        self.positions = positions

    def convert(self, row: Any) -> StorageRecord:
        """
        Convert one row into a StorageRecord.

        Args:
            row: Spark Row (or tuple) matching the writer schema

        Returns:
            StorageRecord with normalized payload

        Raises:
            ConversionError: If the row does not match the expected field types
        """
        try:
            record = self._convert(row)
        except ConversionError as e:
            metrics.conversion_failures_total.labels(field_path=failure_label(e.field_path)).inc()
            raise

        metrics.records_converted_total.inc()
        return record

    def _convert(self, row: Any) -> StorageRecord:
        p = self.positions

        record_id = None
        if p.id is not None:
            raw_id = _get(row, p.id, "id")
            if raw_id is not None:
                if not isinstance(raw_id, str):
                    raise ConversionError("id", f"expected string, got {type(raw_id).__name__}")
                record_id = str(raw_id)

        kind = _get(row, p.kind, "kind")
        if not isinstance(kind, str) or not kind:
            raise ConversionError("kind", f"expected non-empty string, got {kind!r}")

        acl = _get_struct(row, p.acl, "acl")
        storage_acl = StorageAcl(
            owners=_strings(_get(acl, p.acl_owners, "acl.owners"), "acl.owners", list),
            viewers=_strings(_get(acl, p.acl_viewers, "acl.viewers"), "acl.viewers", list),
        )

        legal = _get_struct(row, p.legal, "legal")
        storage_legal = StorageLegal(
            legaltags=_strings(
                _get(legal, p.legal_tags, "legal.legaltags"),
                "legal.legaltags",
                set
            ),
            otherRelevantDataCountries=_strings(
                _get(legal, p.legal_other_countries, "legal.otherRelevantDataCountries"),
                "legal.otherRelevantDataCountries",
                set
            ),
        )

        data_struct = _get_struct(row, p.data, "data")
        data = normalize_struct(data_struct, p.data_schema, "data")

        return StorageRecord(
            id=record_id,
            kind=str(kind),
            acl=storage_acl,
            legal=storage_legal,
            data=data,
        )
