# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the parser for POM files."""
import logging
import re
from xml.etree.ElementTree import Element  # nosec B405

import defusedxml.ElementTree
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from reposcope.artifact.maven import MavenCoordinate
from reposcope.errors import MalformedCoordinateError, ParseError
from reposcope.provenance.repository import RepositoryDeclaration, RepositoryKind
from reposcope.sources.base import Descriptor

logger: logging.Logger = logging.getLogger(__name__)

#: The relative path Maven uses to look for the parent POM when ``<relativePath>`` is not set.
DEFAULT_PARENT_RELATIVE_PATH = "../pom.xml"

PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)}")


def parse_pom_string(pom_string: str | bytes) -> Element | None:
    """
    Parse the passed POM string using defusedxml.

    Parameters
    ----------
    pom_string : str | bytes
        The contents of a POM file. Pass the raw bytes of a file so that the encoding is taken from its
        XML declaration.

    Returns
    -------
    Element | None
        The parsed element representing the POM's XML hierarchy.
    """
    try:
        # Stored here first to help with type checking.
        pom: Element = fromstring(pom_string)
        return pom
    except (DefusedXmlException, defusedxml.ElementTree.ParseError, ValueError, LookupError) as error:
        # ValueError and LookupError are raised for unsupported or unknown encodings.
        logger.debug("Failed to parse XML: %s", error)
        return None


def find_element(parent: Element | None, target: str) -> Element | None:
    """Return the first child of ``parent`` with the tag ``target``, ignoring XML namespaces."""
    if parent is None:
        return None

    for child in parent:
        # Handle raw tags, and tags accompanied by Maven metadata enclosed in curly braces. E.g. '{metadata}tag'
        if _local_name(child.tag) == target:
            return child
    return None


def find_elements(parent: Element | None, target: str) -> list[Element]:
    """Return all the children of ``parent`` with the tag ``target``, ignoring XML namespaces."""
    if parent is None:
        return []
    return [child for child in parent if _local_name(child.tag) == target]


def find_text(parent: Element | None, path: str) -> str | None:
    """Return the stripped text of the element at the ``.`` separated ``path`` below ``parent``.

    Returns None if the element does not exist or has no text.
    """
    element = parent
    for tag in path.split("."):
        element = find_element(element, tag)
        if element is None:
            return None
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def resolve_properties(pom: Element, value: str) -> str:
    """Resolve the Maven properties found in ``value``.

    Only the properties defined within the same POM are considered: ``${project.x}`` where x can be a child tag
    at any depth, and ``${x}`` where x is found at ``project.properties.x``. The ``project.groupId`` and
    ``project.version`` properties fall back to the values of the parent. Properties that cannot be resolved
    are kept verbatim. In the case of chained properties, only the top most property is evaluated.

    Parameters
    ----------
    pom : Element
        The parsed POM.
    value : str
        The value containing the properties.

    Returns
    -------
    str
        The value with the resolved properties.

    Examples
    --------
    Given a POM declaring ``<properties><repo.host>repo.corp</repo.host></properties>``

    >>> resolve_properties(pom, "https://${repo.host}/maven")
    'https://repo.corp/maven'
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        if name.startswith("project."):
            path = name[len("project.") :]
            resolved = find_text(pom, path)
            if resolved is None and path in {"groupId", "version"}:
                resolved = find_text(pom, f"parent.{path}")
        else:
            # Tags under properties are often "." separated and cannot be nested.
            prop = find_element(find_element(pom, "properties"), name)
            resolved = prop.text.strip() if prop is not None and prop.text and prop.text.strip() else None
        if resolved is None:
            logger.debug("Unable to resolve the property %s.", match.group(0))
            return match.group(0)
        return resolved

    return PROPERTY_PATTERN.sub(_replace, value)


def find_parent(pom: Element) -> tuple[MavenCoordinate | None, str | None]:
    """Extract the parent coordinate and its relative path from the passed POM.

    Parameters
    ----------
    pom : Element
        The parsed POM.

    Returns
    -------
    tuple[MavenCoordinate | None, str | None]
        The parent coordinate, or None if there is no parent, and the relative path of the parent POM,
        or None if the lookup of the parent on disk is disabled by an empty ``<relativePath/>``.

    Raises
    ------
    MalformedCoordinateError
        If the parent misses its group id, artifact id or version.
    """
    element = find_element(pom, "parent")
    if element is None:
        return None, None

    group = find_text(element, "groupId") or ""
    artifact = find_text(element, "artifactId") or ""
    version = find_text(element, "version") or ""
    if not (group and artifact and version):
        raise MalformedCoordinateError(
            f"{group}:{artifact}:{version}", "the parent must declare its groupId, artifactId and version"
        )

    relative_path: str | None = DEFAULT_PARENT_RELATIVE_PATH
    relative_element = find_element(element, "relativePath")
    if relative_element is not None:
        relative_path = (relative_element.text or "").strip() or None

    return MavenCoordinate(group, artifact, version), relative_path


def find_coordinate(pom: Element) -> MavenCoordinate:
    """Return the coordinate of the project described by the POM.

    The group id and the version are inherited from the parent when they are not declared.

    Raises
    ------
    MalformedCoordinateError
        If the coordinate is incomplete.
    """
    artifact = find_text(pom, "artifactId") or ""
    group = find_text(pom, "groupId") or find_text(pom, "parent.groupId") or ""
    version = find_text(pom, "version") or find_text(pom, "parent.version") or ""
    version = resolve_properties(pom, version)
    if not (group and artifact and version):
        raise MalformedCoordinateError(
            f"{group}:{artifact}:{version}", "the POM must declare or inherit its groupId, artifactId and version"
        )
    return MavenCoordinate(group, artifact, version)


def find_repositories(pom: Element, kind: RepositoryKind) -> list[RepositoryDeclaration]:
    """Return the repositories or the plugin repositories declared at the top level of the POM.

    Parameters
    ----------
    pom : Element
        The parsed POM.
    kind : RepositoryKind
        ``RepositoryKind.REGULAR`` for ``<repositories>`` or ``RepositoryKind.PLUGIN`` for ``<pluginRepositories>``.

    Returns
    -------
    list[RepositoryDeclaration]
        The declarations in the order they appear in the POM.
    """
    if kind == RepositoryKind.PLUGIN:
        section, entry_tag = "pluginRepositories", "pluginRepository"
    else:
        section, entry_tag = "repositories", "repository"

    declarations = []
    for entry in find_elements(find_element(pom, section), entry_tag):
        repo_id = find_text(entry, "id")
        url = find_text(entry, "url")
        if not repo_id or not url:
            logger.debug("Skipping a %s without id or url.", entry_tag)
            continue
        declarations.append(
            RepositoryDeclaration.create(
                resolve_properties(pom, repo_id),
                resolve_properties(pom, url),
                name=find_text(entry, "name"),
                layout=find_text(entry, "layout"),
                releases_enabled=_to_bool(find_text(entry, "releases.enabled")),
                snapshots_enabled=_to_bool(find_text(entry, "snapshots.enabled")),
                release_update_policy=find_text(entry, "releases.updatePolicy"),
                snapshot_update_policy=find_text(entry, "snapshots.updatePolicy"),
                kind=kind,
            )
        )
    return declarations


def read_descriptor(pom_string: str | bytes, location: str) -> Descriptor:
    """Parse a POM into a descriptor.

    Parameters
    ----------
    pom_string : str | bytes
        The content of the POM.
    location : str
        The location of the POM, i.e., the absolute path of the file or the URL it was downloaded from.

    Returns
    -------
    Descriptor
        The descriptor.

    Raises
    ------
    ParseError
        If the POM is not valid XML.
    MalformedCoordinateError
        If the coordinate of the project or of its parent is incomplete.
    """
    pom = parse_pom_string(pom_string)
    if pom is None:
        raise ParseError(f"The POM at {location} is not a valid XML document.")
    if _local_name(pom.tag) != "project":
        raise ParseError(f"The document at {location} is not a POM.")

    parent, relative_path = find_parent(pom)
    return Descriptor(
        coordinate=find_coordinate(pom),
        location=location,
        repositories=tuple(find_repositories(pom, RepositoryKind.REGULAR)),
        plugin_repositories=tuple(find_repositories(pom, RepositoryKind.PLUGIN)),
        parent=parent,
        parent_relative_path=relative_path,
    )


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _to_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.lower() == "true"
