"""
Torrent metainfo inspection built on the bdecode package.
"""
from .metainfo import MetainfoError, TorrentMeta
from .source import SourceError, load_source

__all__ = ['TorrentMeta', 'MetainfoError', 'SourceError', 'load_source']
