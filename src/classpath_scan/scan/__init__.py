"""Directory and archive traversal with batched delivery."""

from .archive import (
    ArchiveHandle,
    ArchiveMember,
    ArchiveReader,
    ZipArchiveHandle,
    ZipArchiveReader,
    walk_archive,
)
from .directory import DEFAULT_HIDDEN_PREFIX, walk_directory
from .dispatch import (
    DEFAULT_BATCH_SIZE,
    ArchiveResourceOpener,
    BatchDispatcher,
    FileResourceOpener,
    ResourceOpener,
)
from .models import DEFAULT_TEST_CLASSPATH_SUFFIXES, ClasspathRoot, ScanEntry

__all__ = [
    "ArchiveHandle",
    "ArchiveMember",
    "ArchiveReader",
    "ArchiveResourceOpener",
    "BatchDispatcher",
    "ClasspathRoot",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_HIDDEN_PREFIX",
    "DEFAULT_TEST_CLASSPATH_SUFFIXES",
    "FileResourceOpener",
    "ResourceOpener",
    "ScanEntry",
    "ZipArchiveHandle",
    "ZipArchiveReader",
    "walk_archive",
    "walk_directory",
]
