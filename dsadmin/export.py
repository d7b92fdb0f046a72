"""
Export every entity of one kind to a JSON or CSV file.

Entities are pulled page by page with an offset cursor and handed to a
stream writer straight away, so only one page is held in memory. The file
is written under a temporary name and moved into place once the writer has
finished, which keeps aborted runs from leaving truncated exports behind.
"""

import datetime
import logging
import os
import tempfile
from collections import namedtuple
from pathlib import Path

from google.api_core.exceptions import GoogleAPIError

from dsadmin import config
from dsadmin.errors import ExportFetchError
from dsadmin.writers import new_export_writer

logger = logging.getLogger(__name__)

ExportResult = namedtuple('ExportResult', ['path', 'written', 'skipped'])


def format_timestamp(now):
    """
    Second resolution timestamp safe for file names, e.g.
    2024-05-01T13-45-10Z or 2024-05-01T15-45-10+02-00.
    """
    stamp = now.strftime('%Y-%m-%dT%H-%M-%S')
    offset = now.utcoffset()
    if offset is None or offset == datetime.timedelta(0):
        return stamp + 'Z'
    minutes = int(offset.total_seconds()) // 60
    sign = '+' if minutes >= 0 else '-'
    hours, minutes = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}-{minutes:02d}"


def current_umask():
    """
    Return the process umask without changing it.
    """
    mask = os.umask(0)
    os.umask(mask)
    return mask


def export_file_name(kind, fmt, now):
    return f"export_{kind}_{format_timestamp(now)}.{fmt}"


def export_kind(source, kind, namespace=None, export_dir=None, fmt='json',
                page_size=None, now=None):
    """
    Stream all entities of `kind` in `namespace` into a new export file.

    Returns an ExportResult with the final path and the number of written
    and skipped entities. Fetch errors abort the export with
    ExportFetchError, stream errors with ExportWriteError; in both cases no
    file is left at the final path.
    """
    export_dir = Path(export_dir or config.EXPORT_DIR)
    page_size = page_size or config.PAGE_SIZE
    now = now or datetime.datetime.now().astimezone()

    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / export_file_name(kind, fmt, now)

    fd, tmp_name = tempfile.mkstemp(prefix='.export_', suffix='.tmp', dir=export_dir)
    try:
        with open(fd, 'w', encoding='utf-8', newline='') as f:
            writer = new_export_writer(fmt, f)
            written, skipped = _export_pages(source, writer, kind, namespace, page_size)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o666 & ~current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise

    return ExportResult(path, written, skipped)


def _export_pages(source, writer, kind, namespace, page_size):
    written = 0
    skipped = 0
    offset = 0

    writer.start()
    while True:
        try:
            page = source.fetch_page(kind, namespace, offset, page_size)
        except GoogleAPIError as e:
            raise ExportFetchError(kind, offset, e) from e

        if not page:
            break

        for entity in page:
            if writer.write_record(entity):
                written += 1
            else:
                skipped += 1

        offset += len(page)
        logger.info("Exporting %s - %d", kind, offset)
    writer.end()

    return written, skipped
