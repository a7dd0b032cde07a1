"""Core sync engine for executing sync operations."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..config import config
from ..exceptions import DotSyncError
from ..models import Entry, EntryCollection
from ..output import OutputFormatter
from .comparator import EntryComparator, SyncDecision
from .copier import TreeCopier
from .hasher import hash_path
from .modes import SyncMode
from .report import EntryOutcome, OutcomeStatus, SyncReport

logger = logging.getLogger(__name__)


class SyncEngine:
    """Core sync engine that orchestrates entry synchronization."""

    def __init__(
        self,
        output: Optional[OutputFormatter] = None,
        copier: Optional[TreeCopier] = None,
    ):
        """Initialize sync engine.

        Args:
            output: Output formatter for displaying progress/status
            copier: Tree copier used to materialize copies
        """
        self.output = output or OutputFormatter(quiet=True)
        self.copier = copier or TreeCopier()

    def push(self, collection: EntryCollection, **kwargs) -> SyncReport:
        """Copy changed entries from the repository to the local system."""
        return self.run(collection, SyncMode.PUSH, **kwargs)

    def pull(self, collection: EntryCollection, **kwargs) -> SyncReport:
        """Copy changed entries from the local system into the repository."""
        return self.run(collection, SyncMode.PULL, **kwargs)

    def force_push(self, collection: EntryCollection, **kwargs) -> SyncReport:
        """Copy every entry from the repository to the local system."""
        return self.run(collection, SyncMode.FORCE_PUSH, **kwargs)

    def force_pull(self, collection: EntryCollection, **kwargs) -> SyncReport:
        """Copy every entry from the local system into the repository."""
        return self.run(collection, SyncMode.FORCE_PULL, **kwargs)

    def run(
        self,
        collection: EntryCollection,
        mode: SyncMode,
        dry_run: bool = False,
        max_workers: Optional[int] = None,
        names: Optional[list[str]] = None,
    ) -> SyncReport:
        """Sync every entry of a collection.

        Args:
            collection: Entries to sync
            mode: Direction and whether to compare hashes
            dry_run: If True, only decide what would be copied
            max_workers: Number of parallel workers (default: CPU count)
            names: Restrict the pass to these entry names

        Returns:
            SyncReport with outcomes sorted by name and the updated collection

        Raises:
            RepositoryRootError: If the repository root is missing

        Examples:
            >>> engine = SyncEngine()
            >>> report = engine.push(collection)
            >>> print(f"Synced {report.synced} entries")
        """
        collection.validate_root()

        entries = list(collection.entries)
        if names is not None:
            wanted = set(names)
            entries = [entry for entry in entries if entry.name in wanted]

        if not self.output.quiet:
            self.output.info(f"Syncing {len(entries)} config(s): {mode.label}")
            self.output.info(f"Repository: {collection.root}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        workers = config.get_max_workers(max_workers)
        outcomes = self._process_entries(collection, entries, mode, dry_run, workers)
        outcomes.sort(key=lambda outcome: outcome.name)

        updated = collection if dry_run else collection.merge(o.entry for o in outcomes)
        report = SyncReport(
            mode=mode,
            outcomes=outcomes,
            collection=updated,
            dry_run=dry_run,
        )

        if not self.output.quiet:
            self._display_summary(report)

        return report

    def _process_entries(
        self,
        collection: EntryCollection,
        entries: list[Entry],
        mode: SyncMode,
        dry_run: bool,
        max_workers: int,
    ) -> list[EntryOutcome]:
        """Process entries in parallel using ThreadPoolExecutor.

        Each worker only reads and returns its own entry; results are
        collected here after the workers finish.
        """
        if not entries:
            return []

        logger.debug(f"Processing {len(entries)} entries with {max_workers} workers")
        comparator = EntryComparator(mode)
        outcomes: list[EntryOutcome] = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Syncing configs...", total=len(entries))

            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(
                        self._process_entry, collection, entry, comparator, dry_run
                    ): entry
                    for entry in entries
                }

                for future in as_completed(futures):
                    outcome = future.result()
                    outcomes.append(outcome)
                    self._display_outcome(outcome)
                    progress.update(task, advance=1)

        return outcomes

    def _process_entry(
        self,
        collection: EntryCollection,
        entry: Entry,
        comparator: EntryComparator,
        dry_run: bool,
    ) -> EntryOutcome:
        """Decide and execute the sync of a single entry.

        Errors are captured in the outcome so that sibling entries keep
        going.
        """
        start = time.time()
        try:
            collection.validate_source(entry)
            decision = comparator.decide(entry)
            if not decision.needs_copy:
                return EntryOutcome(
                    name=entry.name,
                    status=OutcomeStatus.SKIPPED,
                    reason=decision.reason,
                    entry=replace(entry, kind=decision.kind),
                )

            if dry_run:
                return EntryOutcome(
                    name=entry.name,
                    status=OutcomeStatus.PLANNED,
                    reason=f"Would copy {decision.source} -> {decision.target}",
                    entry=entry,
                )

            return self._execute_decision(decision)

        except (DotSyncError, OSError) as e:
            logger.debug(f"{entry.name} failed: {e}")
            return EntryOutcome(
                name=entry.name,
                status=OutcomeStatus.ERROR,
                reason=str(e),
                entry=entry,
                error=e,
            )
        finally:
            logger.debug(f"Processed {entry.name} in {time.time() - start:.2f}s")

    def _execute_decision(self, decision: SyncDecision) -> EntryOutcome:
        """Copy an entry and record the hash of the written side."""
        entry = decision.entry
        logger.debug(f"Copying {entry.name}: {decision.source} -> {decision.target}")

        files_copied = self.copier.copy(decision.source, decision.target)
        new_hash = hash_path(decision.target, decision.kind)

        return EntryOutcome(
            name=entry.name,
            status=OutcomeStatus.SYNCED,
            reason=decision.reason,
            entry=replace(entry, content_hash=new_hash, kind=decision.kind),
            files_copied=files_copied,
        )

    def _display_outcome(self, outcome: EntryOutcome) -> None:
        """Display the result of a single entry."""
        if self.output.json_output:
            # Errors are part of the JSON report
            return
        if outcome.status == OutcomeStatus.ERROR:
            self.output.error(f"{outcome.name}: {outcome.reason}")
        elif outcome.status in (OutcomeStatus.SYNCED, OutcomeStatus.PLANNED):
            self.output.info(f"  ↻ {outcome.name}: {outcome.reason}")
        else:
            self.output.info(f"  = {outcome.name}: {outcome.reason}")

    def _display_summary(self, report: SyncReport) -> None:
        """Display sync summary.

        Args:
            report: Report of the finished pass
        """
        self.output.print("")
        if report.dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        if report.synced > 0:
            self.output.info(f"  Synced: {report.synced}")
        if report.planned > 0:
            self.output.info(f"  To sync: {report.planned}")
        if report.skipped > 0:
            self.output.info(f"  Skipped: {report.skipped}")
        if report.errors > 0:
            self.output.warning(f"  Errors: {report.errors}")
        if report.synced == 0 and report.planned == 0 and report.errors == 0:
            self.output.info("No changes needed - everything is in sync!")
