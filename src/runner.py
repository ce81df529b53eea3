"""Run one unused-code analysis over a Flutter project"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from manifest.config import load_config
from manifest.pubspec import (
    candidate_assets,
    candidate_dependencies,
    load_pubspec,
    source_inventory,
    translation_keys,
)
from reachability.localisation import LocalisationKeyParser
from reachability.walker import AnalysisContext, ReachabilityWalker
from report.unused_report import ReportBuilder, UnusedReport

UTC = timezone.utc

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOptions:
    assets: bool = False
    deps: bool = False
    labels: bool = False
    locator: bool = False
    entry: Optional[str] = None
    config_file: Optional[str] = None

    def categories(self) -> List[str]:
        """Report categories switched on by these options"""
        enabled = [
            ('unreferenced_assets', self.assets),
            ('unused_dependencies', self.deps),
            ('unreferenced_labels', self.labels),
            ('unused_registrations', self.locator),
        ]
        return [name for name, on in enabled if on] + ['unreferenced_files']


def run_analysis(project_root, options: AnalysisOptions) -> UnusedReport:
    """Analyse a project and report what its entry file never reaches

    Args:
        project_root: Directory containing pubspec.yaml
        options: Categories to check and entry/config overrides

    Returns:
        The unused items of every category

    Raises:
        AnalysisError: configuration, manifest or source files could not be
            loaded; no partial report is produced
    """
    start_time = datetime.now(UTC)
    root = Path(project_root)

    config = load_config(root, options.config_file)
    pubspec = load_pubspec(root)
    entry = options.entry or config.entry

    context = AnalysisContext()
    if options.assets:
        context.assets = candidate_assets(root, pubspec, config.asset_ignore)
    if options.deps:
        context.dependencies = candidate_dependencies(pubspec, config.dep_ignore)

    localisation = None
    if options.labels:
        class_name = config.class_name or pubspec.flutter_intl.class_name
        arb_dir = config.arb_dir or pubspec.flutter_intl.arb_dir
        localisation = LocalisationKeyParser(class_name)
        context.localisation_keys = translation_keys(root, arb_dir)

    walker = ReachabilityWalker(root, pubspec.name, localisation=localisation,
                                check_locator=options.locator)
    walker.walk(entry, context)

    report = ReportBuilder().build(source_inventory(root), context)

    summary = {
        'duration_seconds': (datetime.now(UTC) - start_time).total_seconds(),
        'reached_files': len(context.visited_files),
        **{name: count for name, count in report.counts().items() if name in options.categories()},
    }
    logger.info(f"Analysis completed: {json.dumps(summary)}")
    return report
