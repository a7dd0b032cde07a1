"""CLI interface for pydotsync."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .config import config
from .exceptions import DotSyncError
from .models import EntryCollection
from .output import OutputFormatter
from .store import (
    EntryStore,
    add_entry,
    clear_metadata,
    find_broken,
    fix,
    remove_entry,
)
from .sync import SyncEngine, SyncMode, TreeCopier
from .utils import contract_home, short_hash

logger = logging.getLogger(__name__)


def _load_collection(
    ctx: Any, check_root: bool = True
) -> tuple[EntryStore, EntryCollection]:
    """Load the entry file or exit with an error.

    Args:
        ctx: Click context
        check_root: Require the repository root to exist

    Returns:
        Store and loaded collection
    """
    out: OutputFormatter = ctx.obj["out"]
    store = EntryStore(ctx.obj["config_path"])
    try:
        collection = store.load(check_root=check_root)
    except DotSyncError as e:
        out.error(e.message)
        if not store.exists():
            out.info("Run 'pydotsync new' to print a template config file")
        ctx.exit(1)
    return store, collection


def _save_collection(ctx: Any, store: EntryStore, collection: EntryCollection) -> None:
    """Save the entry file or exit with an error."""
    out: OutputFormatter = ctx.obj["out"]
    try:
        store.save(collection)
    except DotSyncError as e:
        out.error(e.message)
        ctx.exit(1)


def sync_options(func: Callable) -> Callable:
    """Options shared by the push/pull commands."""
    func = click.option(
        "--workers",
        "-j",
        type=int,
        default=None,
        help="Number of parallel workers (default: number of CPUs)",
    )(func)
    func = click.option(
        "--dry-run", is_flag=True, help="Show what would be copied without copying"
    )(func)
    return func


def _run_sync(
    ctx: Any,
    mode: SyncMode,
    dry_run: bool,
    workers: Optional[int],
) -> None:
    """Run a sync pass, persist the refreshed hashes and report the result."""
    out: OutputFormatter = ctx.obj["out"]

    if workers is not None and workers < 1:
        out.error("Number of workers must be at least 1")
        ctx.exit(1)

    store, collection = _load_collection(ctx)

    engine_out = OutputFormatter(
        json_output=out.json_output, quiet=out.quiet or out.json_output
    )
    engine = SyncEngine(engine_out)

    try:
        report = engine.run(collection, mode, dry_run=dry_run, max_workers=workers)
    except DotSyncError as e:
        out.error(e.message)
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    if not dry_run and report.collection is not None:
        _save_collection(ctx, store, report.collection)

    if out.json_output:
        out.output_json(report.to_dict())

    if report.has_errors:
        if not out.json_output:
            out.warning(f"{report.errors} config(s) failed, see errors above")
        ctx.exit(1)


@click.group()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path of the config file (default: ~/.config/pydotsync/config.json)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pydotsync")
@click.pass_context
def main(
    ctx: Any,
    config_path: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """PyDotSync - Sync your dotfiles between a repository and your home."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["config_path"] = config.get_config_path(config_path)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pydotsync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@sync_options
@click.pass_context
def push(ctx: Any, dry_run: bool, workers: Optional[int]) -> None:
    """Copy changed configs from the repository to your system."""
    _run_sync(ctx, SyncMode.PUSH, dry_run, workers)


@main.command()
@sync_options
@click.pass_context
def pull(ctx: Any, dry_run: bool, workers: Optional[int]) -> None:
    """Copy changed configs from your system into the repository."""
    _run_sync(ctx, SyncMode.PULL, dry_run, workers)


@main.command("force-push")
@sync_options
@click.pass_context
def force_push(ctx: Any, dry_run: bool, workers: Optional[int]) -> None:
    """Copy every config from the repository to your system."""
    _run_sync(ctx, SyncMode.FORCE_PUSH, dry_run, workers)


@main.command("force-pull")
@sync_options
@click.pass_context
def force_pull(ctx: Any, dry_run: bool, workers: Optional[int]) -> None:
    """Copy every config from your system into the repository."""
    _run_sync(ctx, SyncMode.FORCE_PULL, dry_run, workers)


@main.command()
@click.argument("name")
@click.argument("path")
@click.pass_context
def add(ctx: Any, name: str, path: str) -> None:
    """Track a new config and pull it into the repository.

    NAME: Name of the config, also its folder/file name in the repository

    PATH: Location of the config on your system

    Examples:
        pydotsync add nvim ~/.config/nvim
        pydotsync add zshrc ~/.zshrc
    """
    out: OutputFormatter = ctx.obj["out"]
    store, collection = _load_collection(ctx)

    if not path.startswith("~"):
        path = contract_home(Path(path).absolute())

    try:
        collection = add_entry(collection, name, path)
        engine = SyncEngine(OutputFormatter(quiet=True))
        report = engine.run(collection, SyncMode.PULL, names=[name])
    except DotSyncError as e:
        out.error(e.message)
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    outcome = report.get(name)
    if outcome is not None and outcome.error is not None:
        out.error(f"Failed to sync {name}: {outcome.reason}")
        ctx.exit(1)

    if report.collection is not None:
        _save_collection(ctx, store, report.collection)

    if out.json_output:
        out.output_json(report.to_dict())
    else:
        out.success(f"Successfully added {name!r} to the config file")


@main.command()
@click.argument("name")
@click.pass_context
def remove(ctx: Any, name: str) -> None:
    """Stop tracking a config. Files on disk are left alone."""
    out: OutputFormatter = ctx.obj["out"]
    store, collection = _load_collection(ctx, check_root=False)

    try:
        collection = remove_entry(collection, name)
    except DotSyncError as e:
        out.error(e.message)
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    _save_collection(ctx, store, collection)
    out.success(f"Removed {name!r} from the config file")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clean(ctx: Any, yes: bool) -> None:
    """Delete the repository copy of every tracked config."""
    out: OutputFormatter = ctx.obj["out"]
    _, collection = _load_collection(ctx)

    if not yes and not click.confirm(
        f"Delete {len(collection)} config(s) inside {collection.root}?",
        default=False,
    ):
        out.warning("Clean cancelled.")
        ctx.exit(1)

    copier = TreeCopier()
    removed = 0
    failed = 0
    for entry in collection:
        try:
            collection.validate_source(entry)
            if copier.remove(entry.source):
                removed += 1
        except DotSyncError as e:
            out.error(e.message)
            failed += 1

    if out.json_output:
        out.output_json({"removed": removed, "failed": failed})
    else:
        out.success(f"Cleaned {removed} config(s) inside {collection.root}")

    if failed:
        ctx.exit(1)


@main.command("clear-metadata")
@click.pass_context
def clear_metadata_command(ctx: Any) -> None:
    """Forget stored hashes and kinds so the next sync copies everything."""
    out: OutputFormatter = ctx.obj["out"]
    store, collection = _load_collection(ctx, check_root=False)
    _save_collection(ctx, store, clear_metadata(collection))
    out.success("Successfully cleared the metadata from the config file")


@main.command()
@click.pass_context
def check(ctx: Any) -> None:
    """List configs whose paths or kind no longer match the disk."""
    out: OutputFormatter = ctx.obj["out"]
    _, collection = _load_collection(ctx, check_root=False)
    broken = find_broken(collection)

    if out.json_output:
        out.output_json(
            [{"name": item.entry.name, "reason": item.reason} for item in broken]
        )
    elif not broken:
        out.success("All configs resolve")
    else:
        for item in broken:
            out.warning(f"{item.entry.name}: {item.reason}")

    if broken:
        ctx.exit(1)


@main.command("fix")
@click.pass_context
def fix_command(ctx: Any) -> None:
    """Repair configs whose recorded paths no longer resolve."""
    out: OutputFormatter = ctx.obj["out"]
    store, collection = _load_collection(ctx, check_root=False)

    broken = find_broken(collection)
    if not broken:
        out.success("Nothing to fix")
        return

    fixed = fix(collection)
    _save_collection(ctx, store, fixed)

    still_broken = {item.entry.name for item in find_broken(fixed)}
    for item in broken:
        name = item.entry.name
        if name in still_broken:
            out.warning(f"{name}: could not be repaired ({item.reason})")
        else:
            out.info(f"{name}: repaired")
    out.success("Successfully fixed up the config file")


@main.command()
@click.pass_context
def show(ctx: Any) -> None:
    """Print the tracked configs."""
    out: OutputFormatter = ctx.obj["out"]
    _, collection = _load_collection(ctx, check_root=False)

    if out.json_output:
        out.output_json(collection.to_dict())
        return

    out.info(f"Repository: {collection.dotconfigs_path}")
    rows = [
        {
            "name": entry.name,
            "path": entry.dest_path,
            "kind": entry.kind.value if entry.kind else "-",
            "hash": short_hash(entry.content_hash),
        }
        for entry in collection
    ]
    out.output_table(
        rows,
        ["name", "path", "kind", "hash"],
        {"name": "Name", "path": "Path", "kind": "Kind", "hash": "Hash"},
    )


@main.command()
@click.pass_context
def new(ctx: Any) -> None:
    """Print a template config file."""
    out: OutputFormatter = ctx.obj["out"]
    out.output_json(EntryStore.template())


if __name__ == "__main__":
    main()
