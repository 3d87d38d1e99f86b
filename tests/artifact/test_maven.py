# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for types and utilities for Maven artifacts."""

import pytest
from packageurl import PackageURL

from reposcope.artifact.maven import MavenCoordinate, construct_maven_repository_path, construct_pom_path
from reposcope.errors import MalformedCoordinateError


def test_coordinate_from_string() -> None:
    """Test parsing a ``groupId:artifactId:version`` coordinate."""
    coordinate = MavenCoordinate.from_string(" org.apache.maven:maven-core:3.9.6 ")
    assert coordinate == MavenCoordinate("org.apache.maven", "maven-core", "3.9.6")
    assert str(coordinate) == "org.apache.maven:maven-core:3.9.6"


@pytest.mark.parametrize(
    "coordinate",
    [
        pytest.param("org.apache.maven:maven-core", id="missing version"),
        pytest.param("org.apache.maven:maven-core:", id="empty version"),
        pytest.param(":maven-core:3.9.6", id="empty group id"),
        pytest.param("org.apache.maven:maven-core:jar:3.9.6", id="too many parts"),
        pytest.param("", id="empty string"),
    ],
)
def test_malformed_coordinate(coordinate: str) -> None:
    """Test that a coordinate without exactly three non-empty parts is malformed."""
    with pytest.raises(MalformedCoordinateError) as exc_info:
        MavenCoordinate.from_string(coordinate)
    assert exc_info.value.coordinate == coordinate
    assert coordinate in str(exc_info.value)


def test_coordinate_from_purl() -> None:
    """Test creating a coordinate from a Maven PURL."""
    purl = PackageURL.from_string("pkg:maven/com.fasterxml.jackson.core/jackson-annotations@2.9.9?type=pom")
    coordinate = MavenCoordinate.from_purl(purl)
    assert coordinate == MavenCoordinate("com.fasterxml.jackson.core", "jackson-annotations", "2.9.9")


@pytest.mark.parametrize(
    "purl_string",
    [
        pytest.param("pkg:maven/com.fasterxml.jackson.core/jackson-annotations", id="no version"),
        pytest.param("pkg:maven/jackson-annotations@2.9.9", id="no namespace"),
        pytest.param("pkg:pypi/django@1.11.1", id="not maven"),
    ],
)
def test_malformed_purl(purl_string: str) -> None:
    """Test that PURLs that do not identify a Maven artifact version are malformed."""
    with pytest.raises(MalformedCoordinateError):
        MavenCoordinate.from_purl(PackageURL.from_string(purl_string))


@pytest.mark.parametrize(
    ("args", "expected_path"),
    [
        pytest.param(
            {
                "group_id": "io.micronaut",
            },
            "io/micronaut",
            id="Only group_id",
        ),
        pytest.param(
            {
                "group_id": "com.fasterxml.jackson.core",
                "artifact_id": "jackson-annotations",
                "version": "2.9.9",
            },
            "com/fasterxml/jackson/core/jackson-annotations/2.9.9",
            id="group_id and artifact_id and version",
        ),
        pytest.param(
            {
                "group_id": "com.fasterxml.jackson.core",
                "artifact_id": "jackson-annotations",
                "version": "2.9.9",
                "asset_name": "jackson-annotations-2.9.9.jar",
            },
            "com/fasterxml/jackson/core/jackson-annotations/2.9.9/jackson-annotations-2.9.9.jar",
            id="group_id and artifact_id and version and asset_name",
        ),
    ],
)
def test_construct_maven_repository_path(
    args: dict,
    expected_path: str,
) -> None:
    """Test the ``construct_maven_repository_path`` method."""
    assert construct_maven_repository_path(**args) == expected_path


def test_construct_pom_path() -> None:
    """Test the path of a POM in a Maven repository."""
    coordinate = MavenCoordinate("org.apache.maven", "maven-parent", "40")
    assert construct_pom_path(coordinate) == "org/apache/maven/maven-parent/40/maven-parent-40.pom"
