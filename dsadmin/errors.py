class DatastoreAdminError(Exception):
    """Base class for every error raised by dsadmin."""


class UnsupportedFormatError(DatastoreAdminError):
    def __init__(self, fmt):
        super().__init__(f"Unsupported format: {fmt}")
        self.format = fmt


class ExportFetchError(DatastoreAdminError):
    """
    A page query failed mid-export. The export is aborted.
    """
    def __init__(self, kind, offset, cause):
        super().__init__(f"Unable to fetch '{kind}' at offset {offset}: {cause}")
        self.kind = kind
        self.offset = offset


class ExportWriteError(DatastoreAdminError):
    """
    Writing to the output stream failed. The export is aborted because the
    file framing can no longer be trusted.
    """


class RecordSerializationError(DatastoreAdminError):
    """
    A single record could not be encoded. Writers log and skip it.
    """


class SchemaDriftError(RecordSerializationError):
    def __init__(self, columns):
        super().__init__(
            "Record has columns missing from the CSV header: " + ", ".join(columns)
        )
        self.columns = columns


class DeleteError(DatastoreAdminError):
    pass
