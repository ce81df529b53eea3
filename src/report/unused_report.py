"""Build, print and export the unused-code report"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

import click
from tabulate import tabulate

from reachability.errors import AnalysisError
from reachability.walker import AnalysisContext

logger = logging.getLogger(__name__)


@dataclass
class UnusedReport:
    unreferenced_files: List[str] = field(default_factory=list)
    unreferenced_assets: List[str] = field(default_factory=list)
    unused_dependencies: List[str] = field(default_factory=list)
    unreferenced_labels: List[str] = field(default_factory=list)
    unused_registrations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return asdict(self)

    def counts(self) -> Dict[str, int]:
        return {category: len(items) for category, items in self.to_dict().items()}

    def has_unused(self) -> bool:
        return any(self.counts().values())


class ReportBuilder:
    """Turns the final state of a walk into the lists of unused items"""

    def build(self, inventory: Iterable[str], context: AnalysisContext) -> UnusedReport:
        """Diff the project inventory against what the walk reached

        Args:
            inventory: Every Dart source file of the project
            context: Candidate sets after the walk

        Returns:
            Sorted unused items per category
        """
        return UnusedReport(
            unreferenced_files=sorted(set(inventory) - context.visited_files),
            unreferenced_assets=sorted(asset.path for asset in context.assets),
            unused_dependencies=sorted(context.dependencies),
            unreferenced_labels=sorted(context.localisation_keys),
            unused_registrations=context.unused_registrations(),
        )


SECTIONS = [
    ('unreferenced_assets', 'Unreferenced Assets', 'Asset'),
    ('unused_dependencies', 'Unused Dependencies', 'Dependency'),
    ('unreferenced_labels', 'Unreferenced Labels', 'Label'),
    ('unused_registrations', 'Unused Registrations', 'Registered Type'),
    ('unreferenced_files', 'Unreferenced Files', 'File'),
]


def format_report(report: UnusedReport, categories: Iterable[str]) -> str:
    """Render one numbered grid table per enabled category"""
    enabled = set(categories)
    blocks = []
    for category, title, column in SECTIONS:
        if category not in enabled:
            continue
        items = getattr(report, category)
        blocks.append(f"\n{title} ({len(items)}):")
        if items:
            rows = [[index, item] for index, item in enumerate(items, start=1)]
            blocks.append(tabulate(rows, headers=['#', column], tablefmt='grid'))
        else:
            blocks.append("  none found")
    return "\n".join(blocks)


def print_report(report: UnusedReport, categories: Iterable[str]):
    click.echo("\n🔍 Dart Unused Report")
    click.echo("=" * 50)
    enabled = list(categories)
    click.echo(format_report(report, enabled))

    total = sum(count for name, count in report.counts().items() if name in enabled)
    click.echo(f"\nTotal unused items: {total}")


def export_to_json(report: UnusedReport, filename: str) -> int:
    """Write the report as JSON

    Returns:
        Number of unused items written
    """
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2)
    total = sum(report.counts().values())
    logger.info(f"Exported {total} unused items to {filename}")
    return total


def remove_files(project_root, files: List[str]) -> int:
    """Delete unreferenced source files

    Raises:
        AnalysisError: a file could not be deleted
    """
    root = Path(project_root)
    for path in files:
        try:
            (root / path).unlink()
        except OSError as e:
            logger.error(f"Failed to remove {path}: {e}")
            raise AnalysisError(f"Failed to remove {path}: {e}") from e
        logger.info(f"Removed {path}")
    return len(files)
