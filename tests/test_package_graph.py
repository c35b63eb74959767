"""Tests for building and traversing the package graph."""

from __future__ import annotations

import pytest

from conftest import make_package
from pkggraph.errors import DuplicateNameError, PackageGraphError, PackageNotFoundError
from pkggraph.graph import PackageGraph, build, collect_names, dependencies_of, dependents_of


def _sample_graph() -> PackageGraph:
    return PackageGraph.from_packages(
        [
            make_package(
                "a",
                dependencies={"b": "*", "lodash": "^4"},
                dev={"c": "*", "jest": "^29"},
                optional={"d": "*"},
            ),
            make_package("b", dependencies={"d": "*"}),
            make_package("c", optional={"b": "*"}),
            make_package("d"),
        ]
    )


def test_from_packages_populates_local_views() -> None:
    graph = _sample_graph()
    a = graph["a"]

    assert set(a.local_dependencies) == {"b"}
    assert set(a.local_dev_dependencies) == {"c"}
    assert set(a.local_optional_dependencies) == {"d"}
    assert set(a.published_local_dependencies) == {"b", "d"}
    assert set(a.all_local_dependencies) == {"b", "c", "d"}


def test_neighbors_reference_nodes_of_the_same_graph() -> None:
    graph = _sample_graph()

    for node in graph.values():
        for view in (
            node.all_local_dependencies,
            node.published_local_dependencies,
            node.local_dependencies,
            node.local_dev_dependencies,
            node.local_optional_dependencies,
        ):
            for name, dep in view.items():
                assert graph[name] is dep


def test_view_unions_hold_for_every_node() -> None:
    graph = _sample_graph()

    for node in graph.values():
        assert set(node.all_local_dependencies) == (
            set(node.local_dependencies)
            | set(node.local_dev_dependencies)
            | set(node.local_optional_dependencies)
        )
        assert set(node.published_local_dependencies) == (
            set(node.local_dependencies) | set(node.local_optional_dependencies)
        )


def test_external_dependencies_are_dropped() -> None:
    graph = _sample_graph()

    assert "lodash" not in graph["a"].all_local_dependencies
    assert "jest" not in graph["a"].all_local_dependencies
    assert "lodash" not in graph


def test_dev_only_dependency_is_not_published() -> None:
    graph = PackageGraph.from_packages(
        [make_package("app", dev={"tools": "*"}), make_package("tools")]
    )

    assert graph["app"].published_local_dependencies == {}
    assert graph["app"].all_local_dependencies == {"tools": graph["tools"]}


def test_duplicate_name_raises_with_both_directories() -> None:
    with pytest.raises(DuplicateNameError) as excinfo:
        build([make_package("a", dir="packages/one"), make_package("a", dir="packages/two")])

    error = excinfo.value
    assert error.name == "a"
    assert error.dir == "packages/two"
    assert error.existing_dir == "packages/one"
    assert "packages/one" in str(error) and "packages/two" in str(error)
    assert isinstance(error, PackageGraphError)


def test_node_metadata_properties() -> None:
    graph = build(
        [
            make_package(
                "cli",
                version="0.3.1",
                private=True,
                bundled=True,
                scripts={"build": "tsc"},
                backstage={"role": "cli"},
            ),
            make_package("plain"),
        ]
    )

    cli = graph["cli"]
    assert cli.role == "cli"
    assert cli.bundled is True
    assert cli.private is True
    assert cli.version == "0.3.1"
    assert cli.scripts == {"build": "tsc"}

    plain = graph["plain"]
    assert plain.role is None
    assert plain.bundled is False
    assert plain.scripts == {}


def test_build_accepts_a_generator() -> None:
    descriptors = (make_package(name, dependencies={"x": "*"}) for name in ("x", "y"))
    graph = build(descriptors)

    assert set(graph) == {"x", "y"}
    assert set(graph["y"].local_dependencies) == {"x"}


def test_cyclic_graph_repr_does_not_recurse() -> None:
    graph = build([make_package("a", dependencies={"b": "*"}), make_package("b", dependencies={"a": "*"})])

    assert "name='a'" in repr(graph["a"])


def test_collect_package_names_follows_dependencies() -> None:
    graph = _sample_graph()

    assert graph.collect_package_names(["a"], dependencies_of()) == {"a", "b", "c", "d"}
    assert graph.collect_package_names(["a"], dependencies_of("published")) == {"a", "b", "d"}
    assert graph.collect_package_names(["c"], dependencies_of("dependencies")) == {"c"}


def test_collect_package_names_follows_dependents() -> None:
    graph = _sample_graph()

    assert graph.collect_package_names(["d"], dependents_of(graph)) == {"a", "b", "c", "d"}
    assert graph.collect_package_names(["c"], dependents_of(graph)) == {"a", "c"}
    assert graph.collect_package_names(["c"], dependents_of(graph, "published")) == {"c"}


def test_collect_package_names_terminates_on_cycles() -> None:
    graph = build(
        [
            make_package("a", dependencies={"b": "*"}),
            make_package("b", dependencies={"c": "*"}),
            make_package("c", dependencies={"a": "*"}),
        ]
    )
    calls = []

    def expand(node):
        calls.append(node.name)
        return node.all_local_dependencies.keys()

    result = graph.collect_package_names(["a", "a", "b"], expand)

    assert result == {"a", "b", "c"}
    assert sorted(calls) == ["a", "b", "c"]


def test_collect_package_names_is_repeatable() -> None:
    graph = _sample_graph()
    expand = dependencies_of()

    assert collect_names(graph, ["b", "c"], expand) == collect_names(graph, ["b", "c"], expand)


def test_collect_package_names_allows_no_expansion() -> None:
    graph = _sample_graph()

    assert graph.collect_package_names(["a", "d"], lambda node: None) == {"a", "d"}
    assert graph.collect_package_names([], dependencies_of()) == set()


def test_collect_package_names_unknown_start_name() -> None:
    graph = _sample_graph()

    with pytest.raises(PackageNotFoundError) as excinfo:
        graph.collect_package_names(["missing"], dependencies_of())

    assert excinfo.value.name == "missing"
    assert str(excinfo.value) == "Package 'missing' not found"


def test_collect_package_names_unknown_expanded_name() -> None:
    graph = _sample_graph()

    with pytest.raises(PackageNotFoundError) as excinfo:
        graph.collect_package_names(["a"], lambda node: ["ghost"] if node.name == "a" else None)

    assert excinfo.value.name == "ghost"


def test_unknown_dependency_view() -> None:
    with pytest.raises(ValueError, match="Unknown dependency view"):
        dependencies_of("peer")
