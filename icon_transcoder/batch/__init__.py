"""Directory conversion of scene documents."""

from icon_transcoder.batch.converter import BatchConverter, BatchReport

__all__ = ["BatchConverter", "BatchReport"]
