# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module prints the provenance report to the console with rich formatting."""

from rich.console import Console, Group, RenderableType
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from reposcope.provenance.report import ProvenanceReport


class TableBuilder:
    """Builder to provide common table-building utilities for the console."""

    @staticmethod
    def _make_table(content: dict, columns: list[str]) -> Table:
        table = Table(show_header=False, box=None)
        for col in columns:
            table.add_column(col, justify="left")
        for field, value in content.items():
            table.add_row(field, value)
        return table

    @staticmethod
    def _make_repositories_table(report: ProvenanceReport) -> Table:
        table = Table(expand=True)
        table.add_column("Id", justify="left", style="bold")
        table.add_column("URL", justify="left")
        table.add_column("Declared in", justify="left")
        for entry in report.entries:
            if entry.matched:
                locations = escape("\n".join(sorted(entry.locations)))
            else:
                locations = "[italic dim]not declared[/]"
            table.add_row(escape(entry.repository.id), escape(entry.repository.url), locations)
        return table

    @staticmethod
    def _make_declared_table(report: ProvenanceReport) -> Table:
        unused = {entry.identity for entry in report.unused_declarations()}
        table = Table(expand=True)
        table.add_column("Id", justify="left", style="bold")
        table.add_column("URL", justify="left")
        table.add_column("Kind", justify="left")
        table.add_column("Used", justify="left")
        table.add_column("Declared in", justify="left")
        for entry in report.declared:
            table.add_row(
                escape(entry.identity.id),
                escape(entry.identity.url),
                entry.declaration.kind.value,
                "[yellow]no[/]" if entry.identity in unused else "[green]yes[/]",
                escape("\n".join(sorted(entry.locations))),
            )
        return table


class ReportConsole(TableBuilder):
    """Render the results of an analysis on the console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.reports: dict[str, str] = {}

    def update_report_table(self, report_type: str, report_path: str | None) -> None:
        """Record the path of a generated report file, or that it has not been generated."""
        self.reports[report_type] = report_path or "[red]Not Generated[/]"

    def make_layout(self, report: ProvenanceReport) -> Group:
        """Create the layout of the report.

        Returns
        -------
        Group
            A rich Group with the description, the repositories used by the build and, when present,
            the declared repositories.
        """
        description = {
            "Project:": escape(report.project),
            "Artifacts:": str(report.artifact_count),
            "Repositories:": str(len(report)),
        }
        layout: list[RenderableType] = [
            Rule(" DESCRIPTION", align="left"),
            "",
            self._make_table(description, ["Details", "Value"]),
            "",
            Rule(" REPOSITORIES", align="left"),
            "",
        ]
        if report.entries:
            layout.append(self._make_repositories_table(report))
        else:
            layout.append("[white not italic]None[/]")

        if report.declared:
            layout = layout + ["", Rule(" DECLARED REPOSITORIES", align="left"), "", self._make_declared_table(report)]

        if self.reports:
            layout = layout + ["", self._make_table(self.reports, ["Report", "Path"])]
        return Group(*layout)

    def print_report(self, report: ProvenanceReport) -> None:
        """Print the report."""
        self.console.print(self.make_layout(report))
