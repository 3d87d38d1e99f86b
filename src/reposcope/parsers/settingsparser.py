# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the parser for the mirrors of Maven settings files."""
import logging

from reposcope.errors import ParseError
from reposcope.parsers.pomparser import find_element, find_elements, find_text, parse_pom_string
from reposcope.provenance.repository import RepositoryDeclaration, RepositoryKind

logger: logging.Logger = logging.getLogger(__name__)


def read_mirrors(settings_string: str | bytes, location: str) -> list[RepositoryDeclaration]:
    """Return the mirrors defined in a Maven settings file.

    Parameters
    ----------
    settings_string : str | bytes
        The content of the ``settings.xml`` file.
    location : str
        The path of the file, used in error messages.

    Returns
    -------
    list[RepositoryDeclaration]
        The mirror declarations in the order they are defined.

    Raises
    ------
    ParseError
        If the settings file is not valid XML.
    """
    settings = parse_pom_string(settings_string)
    if settings is None:
        raise ParseError(f"The Maven settings file at {location} is not a valid XML document.")

    mirrors = []
    for mirror in find_elements(find_element(settings, "mirrors"), "mirror"):
        mirror_id = find_text(mirror, "id")
        url = find_text(mirror, "url")
        if not mirror_id or not url:
            logger.debug("Skipping a mirror without id or url in %s.", location)
            continue
        mirrors.append(
            RepositoryDeclaration.create(
                mirror_id,
                url,
                name=find_text(mirror, "name"),
                layout=find_text(mirror, "layout"),
                kind=RepositoryKind.MIRROR,
                mirror_of=find_text(mirror, "mirrorOf"),
            )
        )
    return mirrors
