# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the mirror source reading the user and global Maven settings files."""

import logging
import os

from reposcope.config.defaults import defaults
from reposcope.errors import ConfigurationError, ParseError
from reposcope.parsers.settingsparser import read_mirrors
from reposcope.provenance.repository import RepositoryDeclaration
from reposcope.sources.base import MirrorSource

logger: logging.Logger = logging.getLogger(__name__)


def get_default_settings_paths() -> list[str]:
    """Return the user and the global Maven settings files, in this order.

    The ``[maven] settings_user`` and ``[maven] settings_global`` options override the locations Maven uses,
    which are ``~/.m2/settings.xml`` and ``$MAVEN_HOME/conf/settings.xml``.
    """
    user_settings = defaults.get("maven", "settings_user", fallback="") or os.path.join(
        os.path.expanduser("~"), ".m2", "settings.xml"
    )
    paths = [user_settings]

    global_settings = defaults.get("maven", "settings_global", fallback="")
    if not global_settings:
        maven_home = os.environ.get("MAVEN_HOME") or os.environ.get("M2_HOME")
        if maven_home:
            global_settings = os.path.join(maven_home, "conf", "settings.xml")
    if global_settings:
        paths.append(global_settings)
    return paths


class SettingsMirrorSource(MirrorSource):
    """Read the mirrors defined in Maven settings files."""

    def __init__(self, settings_paths: list[str] | None = None) -> None:
        """Initialize the source.

        Parameters
        ----------
        settings_paths : list[str] | None
            The settings files, user settings first. Defaults to ``get_default_settings_paths()``.
        """
        self.settings_paths = settings_paths if settings_paths is not None else get_default_settings_paths()

    def list(self) -> list[RepositoryDeclaration]:
        """Return the mirrors of every existing settings file.

        Raises
        ------
        ConfigurationError
            If a settings file cannot be read or parsed.
        """
        mirrors: list[RepositoryDeclaration] = []
        for path in self.settings_paths:
            if not os.path.isfile(path):
                logger.debug("The Maven settings file %s does not exist. Ignore ...", path)
                continue
            try:
                with open(path, "rb") as file:
                    mirrors.extend(read_mirrors(file.read(), path))
            except (OSError, ParseError) as error:
                raise ConfigurationError(f"Unable to read the Maven settings file {path}: {error}") from error
            logger.debug("Read the mirrors of %s.", path)
        return mirrors
