"""Import service — parse an OTA export and merge it into the guest tab.

Writes are not transactional: rows updated or appended before a remote
failure stay committed. Re-running the same import is safe because
already-applied rows come back as ``unchanged``.
"""

import logging
from dataclasses import dataclass, field

from riadops.config import Settings
from riadops.importing.detector import Channel, detect_source
from riadops.importing.errors import EmptyFileError, UnknownSourceError
from riadops.importing.mapping import get_mapper
from riadops.importing.parser import parse_upload
from riadops.importing.reconciler import ReconcileCounts, ReconcilePolicy, reconcile
from riadops.models.guest import utc_now_iso
from riadops.sheets.table import GuestTable

logger = logging.getLogger(__name__)

ECHOED_HEADERS_ON_ERROR = 10
ECHOED_HEADERS_ON_SUCCESS = 15


@dataclass
class ImportSummary:
    source: Channel
    counts: ReconcileCounts
    total_processed: int
    detected_headers: list[str] = field(default_factory=list)


def policy_from_settings(settings: Settings) -> ReconcilePolicy:
    return ReconcilePolicy(
        duplicate_resolution=settings.import_duplicate_resolution,
        drop_unknown_cancellations=settings.import_drop_unknown_cancellations,
    )


async def import_export(
    table: GuestTable,
    filename: str,
    content: bytes,
    policy: ReconcilePolicy,
    now: str | None = None,
) -> ImportSummary:
    """Run parse -> detect -> map -> reconcile -> write for one upload.

    Raises:
        ImportFileError: for unsupported, empty or unrecognised files.
        googleapiclient.errors.HttpError: when a spreadsheet call fails.
    """
    now = now or utc_now_iso()
    parsed = parse_upload(filename, content)
    if not parsed.rows:
        raise EmptyFileError("No data found in file")

    source = detect_source(parsed.headers)
    if source == Channel.UNKNOWN:
        raise UnknownSourceError(
            "Could not detect source. Expected Booking.com or Airbnb export.",
            detected_headers=parsed.headers[:ECHOED_HEADERS_ON_ERROR],
        )

    logger.info("Importing %d %s rows from %s", len(parsed.rows), source.value, filename)

    await table.ensure()
    existing = await table.load()

    mapper = get_mapper(source, table.headers)
    incoming = []
    mapping_errors = []
    for row in parsed.rows:
        try:
            incoming.append(mapper.map_row(row, now))
        except (TypeError, ValueError) as exc:
            mapping_errors.append(f"Error processing row: {exc}")

    result = reconcile(existing, incoming, policy, now)
    result.counts.errors[:0] = mapping_errors

    for row_index, record in result.to_update:
        await table.update(row_index, record)
    if result.to_append:
        await table.append(result.to_append)

    counts = result.counts
    logger.info(
        "Import finished: added=%d updated=%d unchanged=%d cancelled=%d errors=%d",
        counts.added,
        counts.updated,
        counts.unchanged,
        counts.cancelled,
        len(counts.errors),
    )
    return ImportSummary(
        source=source,
        counts=counts,
        total_processed=len(parsed.rows),
        detected_headers=parsed.headers[:ECHOED_HEADERS_ON_SUCCESS],
    )
