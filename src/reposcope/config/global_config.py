# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the GlobalConfig class to be used globally."""
import logging
import os
from dataclasses import dataclass, field

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class GlobalConfig:
    """Class for keeping track of global configurations."""

    #: The path to the output files.
    output_path: str = ""

    #: The path to the local Maven repository. This attribute is None if there is no available local repository.
    local_maven_repo: str | None = None

    #: The Maven settings files from which mirrors are read, user settings first.
    settings_paths: list[str] = field(default_factory=list)

    def load(self, output_path: str) -> None:
        """Initiate the GlobalConfig object.

        Parameters
        ----------
        output_path : str
            Output path.
        """
        self.output_path = output_path

    def load_local_maven_repo(self, local_maven_repo: str) -> None:
        """Set the local Maven repository if the directory exists.

        Parameters
        ----------
        local_maven_repo : str
            The path to the local Maven repository.
        """
        if os.path.isdir(local_maven_repo):
            logger.debug("Using the local Maven repository at %s", local_maven_repo)
            self.local_maven_repo = os.path.abspath(local_maven_repo)
        else:
            logger.debug("The local Maven repository at %s does not exist. Ignore ...", local_maven_repo)
            self.local_maven_repo = None


global_config = GlobalConfig()
"""The object that can be imported and used globally."""
