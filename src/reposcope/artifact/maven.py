# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module declares types and utilities for Maven artifacts."""
from dataclasses import dataclass

from packageurl import PackageURL

from reposcope.errors import MalformedCoordinateError


@dataclass(frozen=True)
class MavenCoordinate:
    """The ``groupId:artifactId:version`` coordinate of a Maven artifact."""

    #: The group id.
    group_id: str

    #: The artifact id.
    artifact_id: str

    #: The version.
    version: str

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @classmethod
    def from_string(cls, coordinate: str) -> "MavenCoordinate":
        """Parse a coordinate in the ``groupId:artifactId:version`` format.

        Parameters
        ----------
        coordinate : str
            The coordinate string.

        Returns
        -------
        MavenCoordinate
            The parsed coordinate.

        Raises
        ------
        MalformedCoordinateError
            If the string does not contain exactly three non-empty parts.

        Examples
        --------
        >>> MavenCoordinate.from_string("org.apache.maven:maven-core:3.9.6")
        MavenCoordinate(group_id='org.apache.maven', artifact_id='maven-core', version='3.9.6')
        """
        parts = [part.strip() for part in coordinate.split(":")]
        if len(parts) != 3:
            raise MalformedCoordinateError(coordinate, "expected the format 'groupId:artifactId:version'")
        if not all(parts):
            raise MalformedCoordinateError(coordinate, "the group id, artifact id and version must not be empty")
        return cls(*parts)

    @classmethod
    def from_purl(cls, purl: PackageURL) -> "MavenCoordinate":
        """Create a coordinate from a Maven PackageURL.

        Parameters
        ----------
        purl : PackageURL
            The PackageURL of a Maven artifact, e.g., ``pkg:maven/org.example/foo@1.0``.

        Returns
        -------
        MavenCoordinate
            The coordinate.

        Raises
        ------
        MalformedCoordinateError
            If the PackageURL is not a Maven PURL or misses the namespace or the version.
        """
        if purl.type != "maven":
            raise MalformedCoordinateError(str(purl), "only PURLs of type maven are supported")
        if not purl.namespace or not purl.version:
            raise MalformedCoordinateError(str(purl), "the PURL must have a namespace and a version")
        return cls(purl.namespace, purl.name, purl.version)


def construct_maven_repository_path(
    group_id: str,
    artifact_id: str | None = None,
    version: str | None = None,
    asset_name: str | None = None,
) -> str:
    """Construct a path to a folder or file on the registry, assuming Maven repository layout.

    For more details regarding Maven repository layout, see the following:
    - https://maven.apache.org/repository/layout.html
    - https://maven.apache.org/guides/mini/guide-naming-conventions.html

    Parameters
    ----------
    group_id : str
        The group id of a Maven package.
    artifact_id : str
        The artifact id of a Maven package.
    version : str
        The version of a Maven package.
    asset_name : str
        The asset name.

    Returns
    -------
    str
        The path to a folder or file on the registry.
    """
    path = group_id.replace(".", "/")
    if artifact_id:
        path = "/".join([path, artifact_id])
    if version:
        path = "/".join([path, version])
    if asset_name:
        path = "/".join([path, asset_name])
    return path


def construct_pom_path(coordinate: MavenCoordinate) -> str:
    """Return the path of the POM of a coordinate relative to the root of a Maven repository.

    >>> construct_pom_path(MavenCoordinate("org.example", "foo", "1.0"))
    'org/example/foo/1.0/foo-1.0.pom'
    """
    return construct_maven_repository_path(
        coordinate.group_id,
        coordinate.artifact_id,
        coordinate.version,
        f"{coordinate.artifact_id}-{coordinate.version}.pom",
    )
