# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains reporter classes for writing the provenance report to the output directory."""

import abc
import json
import logging
import os

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    TemplateRuntimeError,
    TemplateSyntaxError,
    select_autoescape,
)

from reposcope.provenance.report import ProvenanceReport

logger: logging.Logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


class FileReporter(abc.ABC):
    """The reporter that writes a report to a file of the output directory."""

    #: The name of the generated file.
    file_name: str = ""

    def __init__(self, mode: str = "w", encoding: str = "utf-8"):
        """Initialize instance.

        Parameters
        ----------
        mode : str, optional
            The mode to open the target files, by default "w".
        encoding : str, optional
            The encoding used to handle disk files, by default "utf-8".
        """
        self.mode = mode
        self.encoding = encoding

    def write_file(self, file_path: str, data: str) -> bool:
        """Write the data into a file.

        Returns
        -------
        bool
            True if succeeded else False.
        """
        try:
            with open(file_path, mode=self.mode, encoding=self.encoding) as file:
                logger.info("Writing to file %s", file_path)
                file.write(data)
                return True
        except OSError as error:
            logger.error("Cannot write to %s. Error: %s", file_path, error)
            return False

    @abc.abstractmethod
    def generate(self, target_dir: str, report: ProvenanceReport) -> str | None:
        """Generate the report file.

        Parameters
        ----------
        target_dir : str
            The directory to store the output file.
        report : ProvenanceReport
            The report to be written.

        Returns
        -------
        str | None
            The path of the generated file, or None if it could not be generated.
        """


class JSONReporter(FileReporter):
    """This class writes the report to ``repositories.json``."""

    file_name = "repositories.json"

    def __init__(self, mode: str = "w", encoding: str = "utf-8", indent: int = 4):
        super().__init__(mode, encoding)
        self.indent = indent

    def generate(self, target_dir: str, report: ProvenanceReport) -> str | None:
        file_path = os.path.join(target_dir, self.file_name)
        try:
            data = json.dumps(report.get_dict(), indent=self.indent)
        except TypeError as error:
            logger.critical("Cannot serialize output report to JSON: %s", error)
            return None
        return file_path if self.write_file(file_path, data) else None


class HTMLReporter(FileReporter):
    """This class renders the report to ``repositories.html`` with a Jinja2 template."""

    file_name = "repositories.html"

    def __init__(
        self,
        mode: str = "w",
        encoding: str = "utf-8",
        env: Environment | None = None,
        target_template: str = "reposcope.html",
    ) -> None:
        """Initialize instance.

        Parameters
        ----------
        mode: str, optional
            The file operation mode.
        encoding: str, optional
            The encoding.
        env : Environment | None
            The pre-initiated ``jinja2.Environment`` instance. If this is not provided, an environment loading
            the packaged templates is initialized.
        target_template : str
            The target template. It will be looked up from the jinja2.Environment instance.
        """
        super().__init__(mode, encoding)
        self.env = env or Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(enabled_extensions=["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self.template = None
        try:
            self.template = self.env.get_template(target_template)
        except TemplateNotFound:
            logger.error("Cannot find the template %s to load.", target_template)

    def generate(self, target_dir: str, report: ProvenanceReport) -> str | None:
        """Render the report.

        No file is generated if the template could not be loaded.
        """
        if not self.template:
            return None

        file_path = os.path.join(target_dir, self.file_name)
        try:
            html = self.template.render(report.get_dict())
        except TemplateSyntaxError as error:
            location = f"line {error.lineno}"
            name = error.filename or error.name
            if name:
                location = f'File "{name}", {location}'
            logger.error("jinja2.TemplateSyntaxError: \n\t%s\n\t%s", error.message, location)
            return None
        except TemplateRuntimeError as error:
            logger.error("jinja2.TemplateRunTimeError: %s", error)
            return None
        return file_path if self.write_file(file_path, html) else None
