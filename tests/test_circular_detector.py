#!/usr/bin/env python3
"""
Tests for Circular Dependency Detection
=======================================

Tests CircularDetector including:
- Simple, two-file and overlapping cycles
- Canonical rotation and deterministic ordering
- Break point suggestions
- Deep import chains
- ASCII visualization
"""

from archgraph.metrics.circular_detector import CircularDetector, canonical_rotation, strongly_connected_components


class TestCycleDetection:
    """Tests for finding cycles."""

    def test_acyclic_graph(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["c.js"], "c.js": []})

        report = CircularDetector().detect(graph)

        assert not report.has_cycles
        assert report.cycle_count == 0
        assert report.suggestions == []
        assert report.total_nodes == 3
        assert report.total_edges == 2

    def test_three_file_cycle(self, make_graph, abs_path):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["c.js"], "c.js": ["a.js"], "d.js": ["a.js"]})

        report = CircularDetector().detect(graph)

        assert report.cycle_count == 1
        cycle = report.cycles[0]
        assert cycle.path == (abs_path("a.js"), abs_path("b.js"), abs_path("c.js"))
        assert cycle.path_names == ("a.js", "b.js", "c.js")
        assert cycle.chain() == "a.js -> b.js -> c.js -> a.js"
        assert report.nodes_in_cycles == 3

    def test_two_file_cycle(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js"]})

        report = CircularDetector().detect(graph)

        assert [c.path_names for c in report.cycles] == [("a.js", "b.js")]

    def test_cycle_found_from_any_start(self, make_graph):
        """The reported rotation does not depend on where the search entered."""
        graph = make_graph({"z.js": ["m.js"], "m.js": ["x.js"], "x.js": ["m.js"]})

        report = CircularDetector().detect(graph)

        assert [c.path_names for c in report.cycles] == [("m.js", "x.js")]

    def test_overlapping_cycles_report_one_representative(self, make_graph):
        """Cycles sharing files collapse to the smallest one."""
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js", "c.js"], "c.js": ["a.js"]})

        report = CircularDetector().detect(graph)

        assert [c.path_names for c in report.cycles] == [("a.js", "b.js")]
        assert report.nodes_in_cycles == 2

    def test_dense_mesh_reports_one_cycle_per_component(self, make_graph):
        """Fully connected groups yield one cycle each, not every elementary cycle."""
        adjacency = {}
        for group in ("svc-a", "svc-b"):
            names = [f"{group}/{i}.js" for i in range(1, 4)]
            for name in names:
                adjacency[name] = [other for other in names if other != name]
        adjacency["svc-a/1.js"].append("svc-b/1.js")
        graph = make_graph(adjacency)

        report = CircularDetector().detect(graph)

        assert [c.path_names for c in report.cycles] == [
            ("svc-a/1.js", "svc-a/2.js"),
            ("svc-b/1.js", "svc-b/2.js"),
        ]
        assert [s.cycle_index for s in report.suggestions] == [0, 1]

    def test_independent_cycles_are_sorted(self, make_graph):
        graph = make_graph({"d.js": ["c.js"], "c.js": ["d.js"], "b.js": ["a.js"], "a.js": ["b.js"]})

        report = CircularDetector().detect(graph)

        assert [c.path_names for c in report.cycles] == [("a.js", "b.js"), ("c.js", "d.js")]

    def test_every_cycle_has_at_least_two_files(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js"], "c.js": ["d.js"], "d.js": ["e.js"], "e.js": ["c.js"]})

        report = CircularDetector().detect(graph)

        assert all(cycle.length >= 2 for cycle in report.cycles)
        for cycle in report.cycles:
            for source, target in cycle.edges():
                assert target in graph.imports_of(source)

    def test_detection_is_idempotent(self, make_graph):
        graph = make_graph({"a.js": ["b.js", "c.js"], "b.js": ["c.js"], "c.js": ["a.js"]})
        detector = CircularDetector()

        first = detector.detect(graph).to_dict()
        second = detector.detect(graph).to_dict()

        assert first == second

    def test_deep_chain_does_not_recurse(self, make_graph):
        """Long chains are handled without hitting the recursion limit."""
        names = [f"n{i:05d}.js" for i in range(3000)]
        adjacency = {name: [names[i + 1]] for i, name in enumerate(names[:-1])}
        adjacency[names[-1]] = [names[0]]
        graph = make_graph(adjacency)

        cycles = CircularDetector().get_cycles(graph)

        assert len(cycles) == 1
        assert len(cycles[0]) == 3000

    def test_has_cycles(self, make_graph):
        detector = CircularDetector()

        assert detector.has_cycles(make_graph({"a.js": ["b.js"], "b.js": ["a.js"]}))
        assert not detector.has_cycles(make_graph({"a.js": ["b.js"], "b.js": []}))

    def test_canonical_rotation(self):
        assert canonical_rotation(["c", "a", "b"]) == ("a", "b", "c")
        assert canonical_rotation(["b", "c", "a"]) == ("a", "b", "c")

    def test_strongly_connected_components(self, make_graph, abs_path):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js", "c.js"], "c.js": ["d.js"], "d.js": ["c.js"], "e.js": []})

        component = strongly_connected_components(graph)

        assert component[abs_path("a.js")] == component[abs_path("b.js")]
        assert component[abs_path("c.js")] == component[abs_path("d.js")]
        assert component[abs_path("a.js")] != component[abs_path("c.js")]
        assert len(set(component.values())) == 3


class TestBreakSuggestions:
    """Tests for cycle break point suggestions."""

    def test_one_suggestion_per_cycle(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js"], "c.js": ["d.js"], "d.js": ["c.js"]})

        report = CircularDetector().detect(graph)

        assert [s.cycle_index for s in report.suggestions] == [0, 1]

    def test_breaks_at_file_with_fewest_outside_dependents(self, make_graph, abs_path):
        # a.js is imported by d.js and e.js from outside the cycle, b.js by nobody
        graph = make_graph({
            "a.js": ["b.js"],
            "b.js": ["c.js"],
            "c.js": ["a.js"],
            "d.js": ["a.js", "c.js"],
            "e.js": ["a.js"],
        })

        suggestion = CircularDetector().detect(graph).suggestions[0]

        assert suggestion.break_at == abs_path("b.js")
        assert suggestion.remove_from_name == "b.js"
        assert suggestion.remove_to_name == "c.js"
        assert suggestion.external_dependents == 0
        assert suggestion.reason == "b.js has fewest dependents (0), making it safer to refactor"

    def test_suggested_edge_belongs_to_cycle(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["c.js"], "c.js": ["a.js"], "x.js": ["b.js", "c.js"]})

        report = CircularDetector().detect(graph)
        suggestion = report.suggestions[0]

        assert (suggestion.remove_from, suggestion.remove_to) in report.cycles[0].edges()
        assert suggestion.remove_to in graph.imports_of(suggestion.remove_from)

    def test_to_dict(self, make_graph):
        graph = make_graph({"a.js": ["b.js"], "b.js": ["a.js"]})

        data = CircularDetector().detect(graph).to_dict()

        assert data["has_cycles"] is True
        assert data["cycle_count"] == 1
        assert data["cycles"][0]["length"] == 2
        assert data["suggestions"][0]["remove_import"]["from_name"] == "a.js"
        assert data["stats"] == {"total_nodes": 2, "total_edges": 2, "nodes_in_cycles": 2}


class TestVisualize:
    """Tests for the ASCII rendering."""

    def test_no_cycles(self, make_graph):
        detector = CircularDetector()
        report = detector.detect(make_graph({"a.js": []}))

        assert detector.visualize(report) == "No circular dependencies detected."

    def test_renders_every_cycle(self, make_graph):
        detector = CircularDetector()
        report = detector.detect(make_graph({"a.js": ["b.js"], "b.js": ["a.js"]}))

        text = detector.visualize(report)

        assert "CIRCULAR DEPENDENCIES DETECTED" in text
        assert "Cycle 1:" in text
        assert "a.js -> b.js -> a.js" in text
        assert "^-- (back to a.js)" in text
