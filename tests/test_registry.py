"""
Tests for the Project Registry Builder — operations, services, tie-breaks
and best-effort failure handling.
"""

from apiguard.core.operations import normalize_path
from apiguard.core.registry import build_registry, list_files


def test_registry_collects_operations(project):
    registry = build_registry(project["api"], project["services"])
    assert set(registry.known_operations) == {
        "GET-courses-get",
        "GET-users-get",
        "POST-users-post",
    }
    assert registry.known_operations["GET-courses-get"] == normalize_path(
        project["api"] / "courses" / "route.ts"
    )


def test_registry_collects_services(project):
    registry = build_registry(project["api"], project["services"])
    assert registry.known_services["user"] == ["getUsers", "getUserById"]
    assert registry.known_services["course"] == ["getCourses"]
    assert registry.known_services["helpers"] == ["slugify"]
    assert registry.has_service("user")
    assert registry.service_count == 3


def test_registry_last_write_wins(project):
    registry = build_registry(project["api"], project["services"])
    # users/[id]/route.ts sorts before users/route.ts, so the latter owns the key
    assert registry.known_operations["GET-users-get"] == normalize_path(
        project["api"] / "users" / "route.ts"
    )


def test_registry_first_wins_policy(project):
    registry = build_registry(project["api"], project["services"], tie_break="first")
    assert registry.known_operations["GET-users-get"] == normalize_path(
        project["api"] / "users" / "[id]" / "route.ts"
    )


def test_registry_missing_directories_yield_empty_maps(tmp_path):
    registry = build_registry(tmp_path / "nope", tmp_path / "also-nope")
    assert registry.known_operations == {}
    assert registry.known_services == {}
    assert registry.operation_count == 0


def test_registry_skips_unreadable_files(project):
    broken = project["api"] / "broken" / "route.ts"
    broken.parent.mkdir()
    broken.write_bytes(b"\xff\xfe export async function GET() {}")

    registry = build_registry(project["api"], project["services"])
    assert "GET-broken-get" not in registry.known_operations
    assert registry.operation_count == 3


def test_list_files_is_sorted_and_filtered(project):
    (project["api"] / "README.md").write_text("docs")
    files = list_files(project["api"], "**/*.ts")
    posix = [f.as_posix() for f in files]
    assert posix == sorted(posix)
    assert all(p.endswith(".ts") for p in posix)
    assert len(files) == 3


def test_registry_for_checkout_under_api_directory(tmp_path, write_file, route_factory):
    root = tmp_path / "api"
    endpoints = root / "src" / "app" / "api"
    write_file(endpoints / "courses" / "route.ts", route_factory("GET"))
    write_file(endpoints / "users" / "route.ts", route_factory("GET"))

    registry = build_registry(endpoints, root / "src" / "lib" / "services")

    assert set(registry.known_operations) == {"GET-courses-get", "GET-users-get"}
