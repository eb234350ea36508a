from .config import BatchingConfig
from .models import AnalysisBundle, FileGroup, ImportClosure, SourceFile
from .sources import BufferTextProvider, DiskTextProvider, TextProvider
from .file_scanner import FileScanner
from .import_parser import ImportParser, ImportResolver
from .dependency_graph import DependencyGraph
from .partitioner import partition
from .import_closure import collect_import_closure

__all__ = [
    "AnalysisBundle",
    "BatchingConfig",
    "BufferTextProvider",
    "DependencyGraph",
    "DiskTextProvider",
    "FileGroup",
    "FileScanner",
    "ImportClosure",
    "ImportParser",
    "ImportResolver",
    "SourceFile",
    "TextProvider",
    "collect_import_closure",
    "partition",
]
