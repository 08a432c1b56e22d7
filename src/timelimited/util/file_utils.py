"""File utility functions for reading and writing annotated source files."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def read_file_content(file_path: Union[str, Path], encoding: str = 'utf-8') -> str:
    """
    Read file content without translating line endings.

    Args:
        file_path: Path to the file to read
        encoding: Text encoding of the file

    Returns:
        str: File content

    Raises:
        FileNotFoundError: If the file does not exist
        IOError: If file cannot be read or decoded
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File {file_path} does not exist")

    try:
        with open(file_path, 'r', encoding=encoding, newline='') as f:
            return f.read()
    except (IOError, UnicodeDecodeError) as e:
        raise IOError(f"Error reading {file_path}: {e}") from e


def save_to_disk(file_path: Union[str, Path], content: str, encoding: str = 'utf-8') -> None:
    """Save content to disk without translating line endings.

    Args:
        file_path: Path where to save the file
        content: Content to write to the file
        encoding: Text encoding to write with

    Raises:
        IOError: If the file cannot be written
    """
    try:
        with open(file_path, 'w', encoding=encoding, newline='') as f:
            f.write(content)
        logger.debug(f"Wrote to disk: {file_path}")
    except IOError as e:
        raise IOError(f"Error writing {file_path}: {e}") from e
