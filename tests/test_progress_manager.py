import asyncio
import io

from rich.console import Console

from uuid2asset.cli.progress_manager import ProgressManager
from uuid2asset.core.bundle_processor import BundleProcessor
from uuid2asset.models.stats import RetrievalStats


def make_stats(processed, total, succeeded=0):
    stats = RetrievalStats(total=total)
    for i in range(processed):
        stats.record(i < succeeded)
    return stats


def make_console():
    return Console(file=io.StringIO(), width=200)


def test_plain_lines_show_count_and_percentage():
    console = make_console()
    manager = ProgressManager(console, show_bar=False)

    manager.start_pass("game / import", 3)
    manager.update(make_stats(2, 3, succeeded=1))
    manager.update(make_stats(3, 3, succeeded=1))
    manager.finish_pass()

    output = console.file.getvalue()
    assert "> Starting game / import: 3 items..." in output
    assert "> Progress: 2/3 (67%) - 1 found" in output
    assert "> Progress: 3/3 (100%) - 1 found" in output


def test_bar_tracks_completed_items():
    manager = ProgressManager(make_console(), show_bar=True)

    manager.start_pass("game / native", 10)
    manager.update(make_stats(4, 10, succeeded=3))

    (task,) = manager.progress.tasks
    assert task.completed == 4
    assert task.total == 10
    assert task.fields["found"] == 3

    manager.finish_pass()
    assert task.stop_time is not None


def test_new_pass_gets_its_own_bar():
    manager = ProgressManager(make_console(), show_bar=True)

    manager.start_pass("game / import", 2)
    manager.update(make_stats(2, 2))
    manager.start_pass("game / native", 5)

    first, second = manager.progress.tasks
    assert first.completed == 2
    assert first.stop_time is not None
    assert second.total == 5
    assert second.completed == 0


def test_defaults_to_plain_output_off_a_terminal():
    assert ProgressManager(make_console()).show_bar is False


def test_bundle_run_reports_through_progress_manager(
    fake_downloader, make_config, single_file_manifest
):
    console = make_console()
    config = make_config(extensions=[".a", ".b", ".c"], progress_interval=2)

    async def run():
        async with ProgressManager(console, show_bar=False) as manager:
            processor = BundleProcessor(config, fake_downloader(), manager)
            await processor.collect(single_file_manifest)

    asyncio.run(run())

    output = console.file.getvalue()
    assert "> Progress: 2/3 (67%)" in output
    assert "> Progress: 3/3 (100%)" in output
