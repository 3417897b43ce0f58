import pytest

from mavengrab.modules.grape import create_grape_engine
from mavengrab.modules.grape.exceptions import (
    ArtifactNotFoundError,
    DependencyResolutionFailedError,
    VersionResolutionError,
)
from mavengrab.modules.grape.progress import NoOpProgressReporter

from conftest import CENTRAL, MIRROR, build_settings, dep, pom


def _engine(tmp_path, server, **overrides):
    settings = build_settings(tmp_path, **overrides)
    return create_grape_engine(settings, client=server.client(), reporter=NoOpProgressReporter())


def _modules(engine):
    return [url.rsplit("/", 1)[-1] for url in engine.classpath.urls]


def _managed(engine):
    return [(m.coordinate.group, m.coordinate.module, m.version) for m in engine.managed]


def test_resolves_transitive_closure_and_records_managed(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0", [dep("com.example", "helper", "2.0")])
    server.add_artifact("com.example", "helper", "2.0")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0", "transitive": True})

    assert _modules(engine) == ["lib-1.0.jar", "helper-2.0.jar"]
    assert _managed(engine) == [("com.example", "lib", "1.0"), ("com.example", "helper", "2.0")]
    jar = tmp_path / "m2" / "com" / "example" / "lib" / "1.0" / "lib-1.0.jar"
    assert jar.read_bytes() == b"com.example:lib:1.0"


def test_non_transitive_resolves_only_named_artifact(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0", [dep("com.example", "helper", "2.0")])
    server.add_artifact("com.example", "helper", "2.0")
    engine = _engine(tmp_path, server)

    engine.grab(
        {"excludes": [{"group": "org.other", "module": "thing"}]},
        {"group": "com.example", "module": "lib", "version": "1.0", "transitive": False},
    )

    assert _modules(engine) == ["lib-1.0.jar"]
    assert not any(url.endswith(".pom") for url in server.requests)


def test_exclusions_prune_the_walk(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0", [dep("com.example", "helper", "2.0")])
    server.add_artifact("com.example", "helper", "2.0", [dep("com.example", "deep", "1.0")])
    server.add_artifact("com.example", "deep", "1.0")
    engine = _engine(tmp_path, server)

    engine.grab(
        {"excludes": [{"group": "com.example", "module": "deep"}]},
        {"group": "com.example", "module": "lib", "version": "1.0"},
    )

    assert _modules(engine) == ["lib-1.0.jar", "helper-2.0.jar"]


def test_pom_exclusions_and_nearest_wins(tmp_path, server):
    server.add_artifact(
        "com.example",
        "lib",
        "1.0",
        [
            dep("com.example", "a", "1.0"),
            dep("com.example", "b", "1.0", exclusions=[("com.example", "c")]),
        ],
    )
    server.add_artifact("com.example", "a", "1.0")
    server.add_artifact("com.example", "a", "2.0")
    server.add_artifact("com.example", "b", "1.0", [dep("com.example", "a", "2.0"), dep("com.example", "c", "1.0")])
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert _modules(engine) == ["lib-1.0.jar", "a-1.0.jar", "b-1.0.jar"]


def test_scopes_and_optional_dependencies(tmp_path, server):
    server.add_artifact(
        "com.example",
        "lib",
        "1.0",
        [
            dep("junit", "junit", "4.13", scope="test"),
            dep("javax.servlet", "servlet-api", "2.5", scope="provided"),
            dep("com.example", "opt", "1.0", optional=True),
            dep("com.example", "driver", "1.0", scope="runtime"),
        ],
    )
    server.add_artifact("com.example", "driver", "1.0")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert _modules(engine) == ["lib-1.0.jar"]
    assert server.downloads() == [f"{CENTRAL}/com/example/lib/1.0/lib-1.0.jar"]


def test_widened_scope_reaches_queued_dependencies(tmp_path, server):
    server.add_artifact(
        "com.example",
        "a",
        "1",
        [dep("com.example", "b", "1", scope="runtime"), dep("com.example", "c", "1")],
    )
    server.add_artifact("com.example", "b", "1", [dep("com.example", "d", "1")])
    server.add_artifact("com.example", "c", "1", [dep("com.example", "b", "1")])
    server.add_artifact("com.example", "d", "1")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "a", "version": "1"})

    assert _modules(engine) == ["a-1.jar", "b-1.jar", "c-1.jar", "d-1.jar"]


def test_dependency_types_map_to_file_extensions(tmp_path, server):
    server.add_artifact(
        "com.example",
        "lib",
        "1.0",
        [
            dep("com.example", "osgi", "2.0", type="bundle"),
            dep("com.example", "util", "1.0", type="test-jar"),
        ],
    )
    server.add_artifact("com.example", "osgi", "2.0")
    server.add_artifact("com.example", "util", "1.0")
    server.put(CENTRAL, "com/example/util/1.0/util-1.0-tests.jar", b"com.example:util:1.0:tests")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert _modules(engine) == ["lib-1.0.jar", "osgi-2.0.jar", "util-1.0-tests.jar"]
    assert not any(url.endswith(".bundle") or url.endswith(".test-jar") for url in server.requests)


def test_parent_pom_supplies_managed_versions(tmp_path, server):
    server.add_pom_only(
        "com.example",
        "parent",
        "3",
        pom(
            "com.example",
            "parent",
            "3",
            properties={"helper.version": "2.0"},
            managed=[dep("com.example", "helper", "${helper.version}")],
            packaging="pom",
        ),
    )
    server.add_artifact(
        "com.example",
        "lib",
        "1.0",
        [dep("com.example", "helper")],
        parent=("com.example", "parent", "3"),
    )
    server.add_artifact("com.example", "helper", "2.0")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert _modules(engine) == ["lib-1.0.jar", "helper-2.0.jar"]


def test_dynamic_version_uses_metadata(tmp_path, server):
    server.add_metadata("com.example", "lib", ["1.0", "1.1", "1.2-SNAPSHOT"])
    server.add_artifact("com.example", "lib", "1.1")
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "latest.release"})

    assert _modules(engine) == ["lib-1.1.jar"]
    assert _managed(engine) == [("com.example", "lib", "1.1")]


def test_unsatisfiable_range_fails(tmp_path, server):
    server.add_metadata("com.example", "lib", ["1.0"])
    engine = _engine(tmp_path, server)

    with pytest.raises(DependencyResolutionFailedError) as excinfo:
        engine.grab({"group": "com.example", "module": "lib", "version": "[2.0,)"})
    assert isinstance(excinfo.value.cause, VersionResolutionError)


def test_previous_resolution_pins_later_versions(tmp_path, server):
    server.add_metadata("com.example", "lib", ["1.0", "1.1"])
    server.add_artifact("com.example", "lib", "1.0")
    server.add_artifact("com.example", "lib", "1.1")
    server.add_artifact("com.example", "helper", "2.0")
    server.add_artifact("com.example", "helper", "2.5")
    server.add_artifact("com.example", "app", "1.0", [dep("com.example", "helper", "2.5")])
    engine = _engine(tmp_path, server)

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})
    engine.grab({"group": "com.example", "module": "helper", "version": "2.0"})
    engine.grab({"group": "com.example", "module": "lib", "version": "*"})
    engine.grab({"group": "com.example", "module": "app", "version": "1.0"})

    assert "lib-1.1.jar" not in _modules(engine)
    assert "helper-2.5.jar" not in _modules(engine)
    assert _modules(engine) == ["lib-1.0.jar", "helper-2.0.jar", "app-1.0.jar"]


def test_failed_resolution_keeps_managed_set(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0")
    server.add_artifact("com.example", "broken", "1.0", [dep("com.example", "missing", "9.9")])
    engine = _engine(tmp_path, server)
    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})
    before = _managed(engine)

    with pytest.raises(DependencyResolutionFailedError) as excinfo:
        engine.grab({"group": "com.example", "module": "broken", "version": "1.0"})

    assert isinstance(excinfo.value.cause, ArtifactNotFoundError)
    assert _managed(engine) == before
    assert _modules(engine) == ["lib-1.0.jar"]


def test_repositories_are_searched_in_priority_order(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0", repo_url=MIRROR)
    engine = _engine(tmp_path, server)
    engine.add_resolver({"name": "mirror", "root": MIRROR})

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert server.requests[0].startswith(MIRROR)
    assert not any(url.startswith(CENTRAL) for url in server.requests)


def test_falls_back_when_repository_errors(tmp_path, server):
    server.fail(CENTRAL)
    server.add_artifact("com.example", "lib", "1.0", repo_url=MIRROR)
    engine = _engine(tmp_path, server, grape_repositories=[f"central={CENTRAL}", f"mirror={MIRROR}"])

    engine.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert _modules(engine) == ["lib-1.0.jar"]


def test_local_repository_is_reused(tmp_path, server):
    server.add_artifact("com.example", "lib", "1.0")
    _engine(tmp_path, server).grab({"group": "com.example", "module": "lib", "version": "1.0"})
    server.requests.clear()

    second = _engine(tmp_path, server)
    second.grab({"group": "com.example", "module": "lib", "version": "1.0"})

    assert server.requests == []
    assert _modules(second) == ["lib-1.0.jar"]
