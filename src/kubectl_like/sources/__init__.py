from .base import LogRequest, SourceRef, open_chunked, source_tag

__all__ = ['LogRequest', 'SourceRef', 'open_chunked', 'source_tag']
