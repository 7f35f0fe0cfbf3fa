"""Exceptions raised by the pipeline.

Only unrecoverable conditions live here. Bad timestamps become missing values,
rejected rows are counted in the filter stats, and unknown rider types are
passed through and counted, so none of those raise.
"""


class PipelineError(Exception):
    """Base class for pipeline failures."""


class SourceFileError(PipelineError, OSError):
    """Input file is missing, has an unsupported format or cannot be read."""


class SchemaError(PipelineError, ValueError):
    """Table matches neither trip schema or lacks a required column."""


class TypeMismatchError(SchemaError):
    """Trip identifier types still differ between sources before concatenation."""
