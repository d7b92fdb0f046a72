"""
Streaming writers for kind exports.

Every writer follows the same contract: start() once, write_record() per
entity, end() once. Output goes straight to the stream so memory use does
not grow with the number of exported entities.

A record that cannot be encoded is logged and skipped. A failing write on
the stream raises ExportWriteError, since the output framing is broken from
that point on.
"""

import csv
import json
import logging

from dsadmin.errors import (
    ExportWriteError,
    RecordSerializationError,
    SchemaDriftError,
    UnsupportedFormatError,
)
from dsadmin.flatten import field_paths, flatten, json_default, render_scalar
from dsadmin.normalize import normalize_entity

logger = logging.getLogger(__name__)


class ExportWriter:
    def __init__(self, stream):
        self.stream = stream
        self.encoding = getattr(stream, 'encoding', None) or 'utf-8'

    def start(self):
        pass

    def write_record(self, entity):
        """
        Write one entity. Returns False when the entity was skipped.
        """
        raise NotImplementedError

    def end(self):
        pass

    def _check_encoding(self, text):
        # Raises UnicodeEncodeError (a ValueError) before anything reaches the stream
        text.encode(self.encoding)

    def _write(self, text):
        try:
            self.stream.write(text)
        except OSError as e:
            raise ExportWriteError(f"Unable to write entry: {e}") from e

    def _skip(self, entity, error):
        key = getattr(entity, 'key', None)
        logger.error("Unable to marshal entry %s: %s", key.flat_path if key else '<no key>', error)
        return False


class JsonExportWriter(ExportWriter):
    """
    Writes one JSON array, one compact object per line.
    """

    def __init__(self, stream):
        super().__init__(stream)
        self.first = True

    def start(self):
        self._write('[')

    def write_record(self, entity):
        try:
            text = json.dumps(
                normalize_entity(entity),
                separators=(',', ':'),
                ensure_ascii=False,
                allow_nan=False,
                default=json_default,
            )
            self._check_encoding(text)
        except (TypeError, ValueError) as e:
            return self._skip(entity, e)

        if not self.first:
            self._write(',\n')
        self._write(text)
        self.first = False
        return True

    def end(self):
        self._write(']')


class CsvExportWriter(ExportWriter):
    """
    Writes a header row from the first record, then one row per record.

    The column set is frozen by the first record. Later records are aligned
    to it by path; missing columns stay empty and unknown columns make the
    record fail with SchemaDriftError.
    """

    def __init__(self, stream):
        super().__init__(stream)
        self.csvw = csv.writer(stream)
        self.header = None
        self._columns = set()

    def write_record(self, entity):
        try:
            fields = flatten(normalize_entity(entity))
            if not fields:
                raise RecordSerializationError("Record has no exportable columns")
            paths = field_paths(fields)
            if len(set(paths)) != len(paths):
                duplicates = sorted({p for p in paths if paths.count(p) > 1})
                raise RecordSerializationError(
                    "Record has conflicting column paths: " + ", ".join(duplicates)
                )
            header = self.header
            if header is None:
                header = paths
                for column in header:
                    self._check_encoding(column)
            else:
                unknown = [path for path in paths if path not in self._columns]
                if unknown:
                    raise SchemaDriftError(unknown)
            values = dict(fields)
            row = [render_scalar(values.get(column)) for column in header]
            for cell in row:
                self._check_encoding(cell)
        except (RecordSerializationError, TypeError, ValueError) as e:
            return self._skip(entity, e)

        if self.header is None:
            self._writerow(header)
            self.header = header
            self._columns = set(header)
        self._writerow(row)
        return True

    def end(self):
        try:
            self.stream.flush()
        except OSError as e:
            raise ExportWriteError(f"Unable to flush export: {e}") from e

    def _writerow(self, row):
        try:
            self.csvw.writerow(row)
        except OSError as e:
            raise ExportWriteError(f"Unable to write entry: {e}") from e


FORMATS = {
    'json': JsonExportWriter,
    'csv': CsvExportWriter,
}


def new_export_writer(fmt, stream):
    try:
        writer_class = FORMATS[fmt]
    except KeyError:
        raise UnsupportedFormatError(fmt) from None
    return writer_class(stream)
