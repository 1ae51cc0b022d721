"""
Pytest configuration and shared fixtures for repodata-retention tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

REPOMD_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<repomd xmlns="http://linux.duke.edu/metadata/repo" xmlns:rpm="http://linux.duke.edu/metadata/rpm">
  <revision>1700000000</revision>
{records}
</repomd>
"""


@pytest.fixture
def make_file():
    """Fixture creating a file with an optional modification time."""

    def _make_file(directory: Path, name: str, mtime: float = None, content: str = "") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content or name)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make_file


@pytest.fixture
def write_repomd():
    """Fixture writing a repomd.xml from (type, href, base) tuples."""

    def _write_repomd(directory: Path, records: list, filename: str = "repomd.xml") -> Path:
        lines = []
        for data_type, href, base in records:
            location = "<location"
            if href is not None:
                location += f' href="{href}"'
            if base is not None:
                location += f' xml:base="{base}"'
            location += "/>"
            lines.append(f'  <data type="{data_type}">\n    {location}\n  </data>')
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(REPOMD_TEMPLATE.format(records="\n".join(lines)))
        return path

    return _write_repomd
