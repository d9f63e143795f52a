"""Filesystem helpers: atomic writes, YAML loading, file discovery.

Provides:
    - Atomic writes: tmp file → fsync → rename (no half-written sources)
    - YAML load, transparently gunzipping ``*.gz`` documents
    - Suffix-based file discovery for batch conversion

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from icon_transcoder.utils import fs
    doc = fs.load_yaml("icons/close.scene.yaml.gz")
    fs.atomic_write_text("out/Close.java", source)
"""

import gzip
import os
from pathlib import Path
from typing import Any, Iterable, List, Union

import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If writing or renaming fails.  The tmp file is removed.

    Notes
    -----
    Readers (IDEs, build tools watching the output directory) never see a
    partially written source file.  The tmp file lives in the target
    directory so the rename stays on one filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_name(path.name + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Overwrites existing file on POSIX
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8"
) -> None:
    """Write text to file atomically.

    Convenience wrapper around :func:`atomic_write_bytes`.
    """
    atomic_write_bytes(path, text.encode(encoding))


def is_gzip(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() == ".gz"


def load_yaml(path: Union[str, Path]) -> Any:
    """Load a YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path.  A ``.gz`` suffix is decompressed first.

    Returns
    -------
    Any
        Parsed YAML content (``None`` for an empty document)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        if is_gzip(path):
            with gzip.open(path, 'rt', encoding='utf-8') as f:
                return yaml.safe_load(f)
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def find_files(root: Union[str, Path], suffixes: Iterable[str]) -> List[Path]:
    """List regular files directly under *root* whose name ends with a suffix.

    Parameters
    ----------
    root : Union[str, Path]
        Directory to scan (not recursive)
    suffixes : Iterable[str]
        Case-insensitive name endings, e.g. ``".scene.yaml.gz"``

    Returns
    -------
    List[Path]
        Matches sorted by name, for a stable conversion order

    Raises
    ------
    NotADirectoryError
        If *root* is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    endings = tuple(s.lower() for s in suffixes)
    return sorted(
        p for p in root.iterdir()
        if p.is_file() and p.name.lower().endswith(endings)
    )


def strip_suffixes(path: Union[str, Path], suffixes: Iterable[str]) -> str:
    """File name of *path* without the longest matching suffix."""
    name = Path(path).name
    for suffix in sorted(suffixes, key=len, reverse=True):
        if name.lower().endswith(suffix.lower()):
            return name[: len(name) - len(suffix)]
    return name
