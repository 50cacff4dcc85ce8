import inspect
import logging

from uuid2asset.core.task_generator import generate_tasks, iter_tasks
from uuid2asset.models.config import DEFAULT_FILE_EXTENSIONS
from uuid2asset.models.manifest import Manifest
from uuid2asset.models.task import BaseType

SERVER = "https://cdn.example.com/game/v1"
DECODED_A = "AA000000-0000-0000-0000-000000000000"


def make_manifest(**overrides) -> Manifest:
    data = {
        "name": "resources",
        "importBase": "import",
        "nativeBase": "native",
        "uuids": ["A" * 22, "fcmR3XADNLgJ1ByKhqcC5Z"],
        "versions": {
            "import": [0, "deadbeef", 1, "12345"],
            "native": ["0e95a9f8d", "6c3b5"],
        },
    }
    data.update(overrides)
    return Manifest.model_validate(data)


def test_task_count_is_pairs_times_extensions():
    manifest = make_manifest()
    tasks = generate_tasks(manifest, SERVER, BaseType.IMPORT, DEFAULT_FILE_EXTENSIONS)
    assert len(tasks) == 2 * len(DEFAULT_FILE_EXTENSIONS)


def test_numeric_entry_is_decoded():
    manifest = make_manifest()
    tasks = generate_tasks(manifest, SERVER, BaseType.IMPORT, [".bin"])

    assert tasks[0].url == (
        f"{SERVER}/assets/resources/import/AA/{DECODED_A}.deadbeef.bin"
    )
    assert tasks[0].destination_path == f"resources/import/AA/{DECODED_A}.deadbeef.bin"
    assert tasks[0].base_type is BaseType.IMPORT
    assert tasks[1].destination_path == (
        "resources/import/fc/fc991dd7-0033-4b80-9d41-c8a86a702e59.12345.bin"
    )


def test_string_entry_is_used_verbatim():
    manifest = make_manifest()
    tasks = generate_tasks(manifest, SERVER, BaseType.NATIVE, [".png", ".jpg"])

    assert [t.destination_path for t in tasks] == [
        "resources/native/0e/0e95a9f8d.6c3b5.png",
        "resources/native/0e/0e95a9f8d.6c3b5.jpg",
    ]
    assert all(t.base_type is BaseType.NATIVE for t in tasks)


def test_extensions_vary_fastest():
    manifest = make_manifest()
    tasks = generate_tasks(manifest, SERVER, BaseType.IMPORT, [".a", ".b"])
    suffixes = [t.url.rsplit(".", 2)[-2:] for t in tasks]
    assert suffixes == [
        ["deadbeef", "a"],
        ["deadbeef", "b"],
        ["12345", "a"],
        ["12345", "b"],
    ]


def test_trailing_slash_on_server_url_is_ignored():
    manifest = make_manifest()
    with_slash = generate_tasks(manifest, SERVER + "/", BaseType.NATIVE, [".bin"])
    without = generate_tasks(manifest, SERVER, BaseType.NATIVE, [".bin"])
    assert with_slash == without
    assert "//assets" not in with_slash[0].url


def test_missing_base_path_yields_nothing(caplog):
    manifest = make_manifest(nativeBase=None)
    with caplog.at_level(logging.INFO):
        assert generate_tasks(manifest, SERVER, BaseType.NATIVE, [".bin"]) == []
    assert "native base not found" in caplog.text


def test_missing_or_empty_versions_yield_nothing():
    manifest = make_manifest(versions={"import": []})
    assert generate_tasks(manifest, SERVER, BaseType.IMPORT, [".bin"]) == []
    assert generate_tasks(manifest, SERVER, BaseType.NATIVE, [".bin"]) == []


def test_odd_length_versions_skip_the_base(caplog):
    manifest = make_manifest(versions={"import": [0, "deadbeef", 1]})
    with caplog.at_level(logging.WARNING):
        assert generate_tasks(manifest, SERVER, BaseType.IMPORT, [".bin"]) == []
    assert "odd length" in caplog.text


def test_bad_entries_are_skipped_individually(caplog):
    manifest = make_manifest(
        uuids=["A" * 22, "AA!" + "A" * 19],
        versions={"import": [0, "h0", 7, "h1", 1, "h2", "", "h3"]},
    )
    with caplog.at_level(logging.WARNING):
        tasks = generate_tasks(manifest, SERVER, BaseType.IMPORT, [".bin"])

    assert [t.destination_path for t in tasks] == [
        f"resources/import/AA/{DECODED_A}.h0.bin"
    ]
    assert "index outside" in caplog.text


def test_entry_with_sentinel_in_closing_position_is_fetched():
    manifest = make_manifest(uuids=["AAA=" + "A" * 18], versions={"import": [0, "h0"]})

    tasks = generate_tasks(manifest, SERVER, BaseType.IMPORT, [".bin"])

    assert [t.url for t in tasks] == [
        f"{SERVER}/assets/resources/import/AA/AA040000-0000-0000-0000-000000000000.h0.bin"
    ]


def test_iter_tasks_is_lazy():
    manifest = make_manifest()
    stream = iter_tasks(manifest, SERVER, BaseType.IMPORT, DEFAULT_FILE_EXTENSIONS)
    assert inspect.isgenerator(stream)
    first = next(stream)
    assert first.url.endswith(".deadbeef.json")
