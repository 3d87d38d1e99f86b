# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run reposcope."""

import argparse
import logging
import os
import sys
from importlib import metadata as importlib_metadata

from jinja2 import Environment, FileSystemLoader, select_autoescape
from packageurl import PackageURL

import reposcope
from reposcope.artifact.maven import MavenCoordinate
from reposcope.config.defaults import create_defaults, defaults, load_defaults
from reposcope.config.global_config import global_config
from reposcope.console import ReportConsole
from reposcope.errors import (
    AnalysisCancelledError,
    ConfigurationError,
    CyclicAncestryError,
    DescriptorResolutionError,
    GraphResolutionError,
    MalformedCoordinateError,
)
from reposcope.output_reporter.reporter import FileReporter, HTMLReporter, JSONReporter
from reposcope.provenance.aggregator import build_report
from reposcope.provenance.cancellation import Cancellation
from reposcope.sources.base import DependencyGraphSource, Descriptor
from reposcope.sources.maven_descriptor_source import MavenDescriptorSource
from reposcope.sources.maven_graph import MavenGraphSource
from reposcope.sources.resolution_file import ResolutionFileGraphSource
from reposcope.sources.settings_mirror_source import SettingsMirrorSource, get_default_settings_paths

logger: logging.Logger = logging.getLogger(__name__)


def analyze_repositories(analyze_args: argparse.Namespace) -> int:
    """Report the repositories used by the build of the target project and where they are declared.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    if analyze_args.package_url and not analyze_args.resolution_file:
        logger.error("Analyzing a PURL requires a resolution file. Please provide '--resolution-file'.")
        return os.EX_USAGE

    if analyze_args.resolution_file and not os.path.isfile(analyze_args.resolution_file):
        logger.critical('The resolution file "%s" does not exist.', analyze_args.resolution_file)
        return os.EX_OSFILE

    # Set local maven repo path.
    if analyze_args.local_maven_repo is not None:
        if not os.path.isdir(analyze_args.local_maven_repo):
            logger.error("The user provided local Maven repo at %s is not valid.", analyze_args.local_maven_repo)
            return os.EX_USAGE
        global_config.load_local_maven_repo(analyze_args.local_maven_repo)

    global_config.settings_paths = analyze_args.settings or get_default_settings_paths()

    include_parents = defaults.getboolean("analysis", "include_parents", fallback=True)
    if analyze_args.no_parents:
        include_parents = False

    max_workers = analyze_args.workers or defaults.getint("analysis", "max_workers", fallback=1)
    if max_workers < 1:
        logger.error("The number of workers must be at least 1.")
        return os.EX_USAGE

    timeout = analyze_args.timeout
    if timeout is None:
        timeout = defaults.getfloat("analysis", "timeout", fallback=0)
    if timeout < 0:
        logger.error("The timeout must not be negative.")
        return os.EX_USAGE

    show_declared = analyze_args.show_declared or defaults.getboolean("analysis", "show_declared", fallback=False)

    # Initiate reporters.
    reporters: list[FileReporter] = [JSONReporter()]
    if analyze_args.template_path:
        custom_jinja_env = Environment(
            loader=FileSystemLoader(os.path.dirname(os.path.abspath(analyze_args.template_path))),
            autoescape=select_autoescape(enabled_extensions=["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        html_reporter = HTMLReporter(
            env=custom_jinja_env, target_template=os.path.basename(analyze_args.template_path)
        )
        if not html_reporter.template:
            logger.error("Exiting because the custom template cannot be found.")
            return os.EX_NOINPUT
        reporters.append(html_reporter)
    else:
        reporters.append(HTMLReporter())

    cancellation = Cancellation(timeout or None)
    descriptor_source = MavenDescriptorSource(
        local_repository=global_config.local_maven_repo, cancellation=cancellation
    )
    try:
        descriptor_source.load_defaults()
        project = _load_project(analyze_args, descriptor_source)

        graph_source: DependencyGraphSource
        if analyze_args.resolution_file:
            graph_source = ResolutionFileGraphSource(analyze_args.resolution_file)
        else:
            graph_source = MavenGraphSource(include_parents=include_parents)

        report = build_report(
            project,
            graph_source,
            descriptor_source,
            SettingsMirrorSource(global_config.settings_paths),
            include_parents=include_parents,
            max_workers=max_workers,
            cancellation=cancellation,
            show_declared=show_declared,
        )
    except (MalformedCoordinateError, CyclicAncestryError) as error:
        logger.error(error)
        return os.EX_DATAERR
    except (DescriptorResolutionError, GraphResolutionError) as error:
        logger.error(error)
        return os.EX_UNAVAILABLE
    except AnalysisCancelledError as error:
        logger.error(error)
        return os.EX_TEMPFAIL
    except ConfigurationError as error:
        logger.error(error)
        return os.EX_USAGE
    except KeyboardInterrupt:
        logger.error("The analysis was interrupted.")
        return os.EX_TEMPFAIL

    report_console = ReportConsole()
    for reporter in reporters:
        report_path = reporter.generate(global_config.output_path, report)
        report_console.update_report_table(reporter.file_name, report_path)
    report_console.print_report(report)

    unmatched = [entry for entry in report.entries if not entry.matched]
    logger.info(
        "%d of %d repositories used by the build are declared in the analyzed POMs or settings.",
        len(report) - len(unmatched),
        len(report),
    )
    return os.EX_OK


def _load_project(analyze_args: argparse.Namespace, descriptor_source: MavenDescriptorSource) -> Descriptor:
    """Return the descriptor of the analysis target, from the POM on disk or from the Maven repositories."""
    if analyze_args.file:
        return descriptor_source.load(analyze_args.file)

    try:
        purl = PackageURL.from_string(analyze_args.package_url)
    except ValueError as error:
        raise MalformedCoordinateError(analyze_args.package_url, str(error)) from error
    return descriptor_source.resolve(MavenCoordinate.from_purl(purl))


def perform_action(action_args: argparse.Namespace) -> None:
    """Perform the indicated action of reposcope."""
    match action_args.action:
        case "dump-defaults":
            # Create the defaults.ini file in the output dir and exit.
            if not create_defaults(action_args.output_dir, os.getcwd()):
                sys.exit(os.EX_CANTCREAT)
            sys.exit(os.EX_OK)

        case "analyze":
            sys.exit(analyze_repositories(action_args))

        case _:
            logger.error("reposcope does not support command option %s.", action_args.action)
            sys.exit(os.EX_USAGE)


def main(argv: list[str] | None = None) -> None:
    """Execute reposcope as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
        Hence, we set ``argv = None`` by default.
    """
    main_parser = argparse.ArgumentParser(prog="reposcope")

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
        help="Show reposcope's version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run reposcope with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "-o",
        "--output-dir",
        default=os.path.join(os.getcwd(), "output"),
        help="The output destination path for reposcope",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    # Add sub parsers for each action.
    sub_parser = main_parser.add_subparsers(dest="action", help="Run reposcope <action> --help for help")

    # Report the repositories used by the build of a Maven project.
    analyze_parser = sub_parser.add_parser(name="analyze")
    target_group = analyze_parser.add_mutually_exclusive_group(required=True)

    target_group.add_argument(
        "-f",
        "--file",
        type=str,
        help="The path to the POM of the project, or to the directory containing it.",
    )

    target_group.add_argument(
        "-purl",
        "--package-url",
        type=str,
        help="The PURL of a published Maven artifact to analyze, e.g., pkg:maven/org.example/foo@1.0.",
    )

    analyze_parser.add_argument(
        "--resolution-file",
        required=False,
        type=str,
        help=(
            "The path to a JSON file listing the resolved artifacts and the repositories used by the build. "
            + "If not set, Maven is run on the project to compute them."
        ),
    )

    analyze_parser.add_argument(
        "--no-parents",
        required=False,
        action="store_true",
        help="Do not follow the parent POMs of the dependencies. The parents of the project are always followed.",
    )

    analyze_parser.add_argument(
        "--workers",
        required=False,
        type=int,
        help="The number of dependencies analyzed concurrently. (Default: [analysis] max_workers)",
    )

    analyze_parser.add_argument(
        "--timeout",
        required=False,
        type=float,
        help="The timeout of the analysis in seconds. 0 disables the timeout. (Default: [analysis] timeout)",
    )

    analyze_parser.add_argument(
        "--show-declared",
        required=False,
        action="store_true",
        help="Also list every declared repository, including the ones not used by the build.",
    )

    analyze_parser.add_argument(
        "--local-maven-repo",
        required=False,
        help=(
            "The path to the local Maven repository. "
            + "If this option is not used, reposcope will use the default location at $HOME/.m2/repository"
        ),
    )

    analyze_parser.add_argument(
        "--settings",
        required=False,
        nargs="+",
        help=(
            "The Maven settings files to read the mirrors from, user settings first. "
            + "(Default: $HOME/.m2/settings.xml and $MAVEN_HOME/conf/settings.xml)"
        ),
    )

    analyze_parser.add_argument(
        "-g",
        "--template-path",
        required=False,
        type=str,
        default="",
        help=("The path to the Jinja2 html template (please make sure to use .html or .j2 extensions)."),
    )

    # Dump the default values.
    sub_parser.add_parser(name="dump-defaults", description="Dumps the defaults.ini file to the output directory.")

    args = main_parser.parse_args(argv)

    if not args.action:
        main_parser.print_help()
        sys.exit(os.EX_USAGE)

    if args.verbose:
        log_level = logging.DEBUG
        log_format = "%(asctime)s [%(name)s:%(funcName)s:%(lineno)d] [%(levelname)s] %(message)s"
    else:
        log_level = logging.INFO
        log_format = "%(asctime)s [%(levelname)s] %(message)s"

    # Set global logging config. We need the stream handler for the initial
    # output directory checking log messages.
    st_handler = logging.StreamHandler(sys.stdout)
    logging.basicConfig(format=log_format, handlers=[st_handler], force=True, level=log_level)

    # Set the output directory.
    if not args.output_dir:
        logger.error("The output path cannot be empty. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isfile(args.output_dir):
        logger.error("The output directory already exists. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isdir(args.output_dir):
        logger.info("Setting the output directory to %s", os.path.relpath(args.output_dir, os.getcwd()))
    else:
        logger.info("No directory at %s. Creating one ...", os.path.relpath(args.output_dir, os.getcwd()))
        os.makedirs(args.output_dir)

    # Add file handler to the root logger. Remove stream handler from the
    # root logger to prevent dependencies printing logs to stdout.
    debug_log_path = os.path.join(args.output_dir, "debug.log")
    log_file_handler = logging.FileHandler(debug_log_path, "w")
    log_file_handler.setFormatter(logging.Formatter(log_format))
    logging.getLogger().removeHandler(st_handler)
    logging.getLogger().addHandler(log_file_handler)

    # Add StreamHandler to the reposcope logger only.
    rs_logger = logging.getLogger("reposcope")
    rs_logger.addHandler(st_handler)

    logger.info("The logs will be stored in debug.log")

    global_config.load(output_path=args.output_dir)

    # Load the default values from defaults.ini files.
    if not load_defaults(args.defaults_path):
        logger.error("Exiting because the defaults configuration could not be loaded.")
        sys.exit(os.EX_NOINPUT)

    perform_action(args)


def _get_version() -> str:
    try:
        return importlib_metadata.version("reposcope")
    except importlib_metadata.PackageNotFoundError:
        return reposcope.__version__


if __name__ == "__main__":
    main()
