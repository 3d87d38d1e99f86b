# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""
This module tests the parser of the mirrors of Maven settings files.
"""

import os
from pathlib import Path

import pytest

from reposcope.errors import ParseError
from reposcope.parsers.settingsparser import read_mirrors
from reposcope.provenance.repository import RepositoryIdentity, RepositoryKind

RESOURCES_DIR = Path(__file__).parent.joinpath("resources")


def _read(file_name: str) -> str:
    with open(os.path.join(RESOURCES_DIR, file_name), encoding="utf8") as file:
        return file.read()


def test_read_mirrors() -> None:
    """Test reading the mirrors of a settings file."""
    mirrors = read_mirrors(_read("settings.xml"), "settings.xml")

    assert [mirror.identity for mirror in mirrors] == [
        RepositoryIdentity("corp-mirror", "https://mirror.corp/maven"),
        RepositoryIdentity("blocked", "http://0.0.0.0/"),
    ]
    assert all(mirror.kind == RepositoryKind.MIRROR for mirror in mirrors)
    assert mirrors[0].name == "Corporate mirror"
    assert mirrors[0].mirror_of == "central,!corp-snapshots"
    assert mirrors[1].mirror_of == "external:http:*"


def test_read_no_mirrors() -> None:
    """Test reading a settings file without mirrors."""
    assert not read_mirrors(_read("no_mirrors.xml"), "no_mirrors.xml")


def test_read_invalid_settings() -> None:
    """Test reading a settings file that is not valid XML."""
    with pytest.raises(ParseError):
        read_mirrors(_read("invalid.xml"), "invalid.xml")


def test_read_mirrors_latin1_bytes() -> None:
    """Test reading a settings file encoded in ISO-8859-1."""
    content = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        "<settings><mirrors><mirror><id>corp</id><name>Miroir société</name>"
        "<url>https://mirror.corp/maven</url><mirrorOf>*</mirrorOf></mirror></mirrors></settings>"
    ).encode("iso-8859-1")

    mirrors = read_mirrors(content, "settings.xml")

    assert [mirror.id for mirror in mirrors] == ["corp"]
    assert mirrors[0].name == "Miroir société"
