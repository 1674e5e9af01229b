# test_graph.py
import copy
import io
import math
import os
import sys
import unittest
import warnings

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from densegraph.core.graph import Graph
from densegraph.errors import (
    DomainViolation,
    DuplicateVertex,
    EdgeAlreadyExists,
    EdgeNotFound,
    IndexOutOfRange,
    UnknownVertex,
)


class TestVertices(unittest.TestCase):
    def setUp(self):
        self.g = Graph(directed=True)

    def test_add_vertex_appends_index(self):
        self.assertEqual(self.g.add_vertex("A"), 0)
        self.assertEqual(self.g.add_vertex("B", 2.0), 1)
        self.assertEqual(self.g.order, 2)
        self.assertEqual(self.g.matrix.shape, (2, 2))
        self.assertEqual(self.g.vertex_index("B"), 1)
        self.assertEqual(self.g.get_vertex(0), "A")
        self.assertEqual(self.g.get_vertex_value("A"), 0.0)
        self.assertEqual(self.g.get_vertex_value("B"), 2.0)

    def test_new_vertex_cells_hold_no_edge_value(self):
        g = Graph(directed=True, no_edge_value=-1.0)
        g.add_vertex("A")
        g.add_vertex("B")
        self.assertEqual(g.matrix.to_numpy().tolist(), [[-1.0, -1.0], [-1.0, -1.0]])

    def test_duplicate_vertex(self):
        self.g.add_vertex("A", 1.0)
        with self.assertRaises(DuplicateVertex):
            self.g.add_vertex("A", 5.0)
        self.assertEqual(self.g.order, 1)
        self.assertEqual(self.g.get_vertex_value("A"), 1.0)

    def test_vertex_name_must_be_str(self):
        with self.assertRaises(TypeError):
            self.g.add_vertex(3)
        self.assertEqual(self.g.order, 0)

    def test_vertex_value_roundtrip(self):
        self.g.add_vertex("A")
        self.g.set_vertex_value("A", 7.5)
        self.assertEqual(self.g.get_vertex_value("A"), 7.5)
        with self.assertRaises(UnknownVertex):
            self.g.set_vertex_value("Z", 1.0)
        with self.assertRaises(UnknownVertex):
            self.g.get_vertex_value("Z")
        with self.assertRaises(TypeError):
            self.g.set_vertex_value("A", "8")
        self.assertEqual(self.g.get_vertex_value("A"), 7.5)

    def test_unknown_vertex_is_key_error(self):
        with self.assertRaises(KeyError):
            self.g.remove_vertex("nope")
        with self.assertRaises(DomainViolation):
            self.g.get_neighbors("nope")

    def test_remove_vertex_compacts_indices(self):
        for name, value in [("A", 1.0), ("B", 2.0), ("C", 3.0), ("D", 4.0)]:
            self.g.add_vertex(name, value)
        self.g.add_edge("A", "D", 9.0)
        self.g.add_edge("C", "B", 8.0)
        self.g.remove_vertex("B")
        self.assertNotIn("B", self.g)
        self.assertEqual(self.g.order, 3)
        self.assertEqual(self.g.vertices(), ["A", "C", "D"])
        self.assertEqual([self.g.vertex_index(n) for n in ["A", "C", "D"]], [0, 1, 2])
        self.assertEqual(self.g.get_vertex_value("D"), 4.0)
        self.assertEqual(self.g.matrix.shape, (3, 3))
        # edges touching B are gone, the others follow their vertices
        self.assertEqual(self.g.get_edge_weight("A", "D"), 9.0)
        self.assertEqual(self.g.get_neighbors("C"), [])
        self.assertTrue(self.g.idx.is_contiguous())

    def test_remove_last_vertex_leaves_empty_graph(self):
        self.g.add_vertex("A")
        self.g.remove_vertex("A")
        self.assertEqual(self.g.order, 0)
        self.assertEqual(self.g.matrix.shape, (0, 0))
        self.assertEqual(self.g.add_vertex("A"), 0)

    def test_get_vertex_out_of_range(self):
        self.g.add_vertex("A")
        with self.assertRaises(IndexOutOfRange):
            self.g.get_vertex(1)


class TestDirectedEdges(unittest.TestCase):
    def setUp(self):
        self.g = Graph(directed=True)
        self.g.add_vertex("A")
        self.g.add_vertex("B")

    def test_scenario_directed(self):
        self.g.add_edge("A", "B", 2.5)
        self.assertEqual(self.g.get_edge_weight("A", "B"), 2.5)
        with self.assertRaises(EdgeNotFound):
            self.g.get_edge_weight("B", "A")
        self.assertEqual(self.g.get_neighbors("A"), ["B"])
        self.assertEqual(self.g.get_neighbors("B"), [])
        self.assertEqual(self.g.in_neighbors("B"), ["A"])

    def test_default_weight_is_one(self):
        self.g.add_edge("A", "B")
        self.assertEqual(self.g.get_edge_weight("A", "B"), 1.0)

    def test_add_twice_fails(self):
        self.g.add_edge("A", "B", 3.0)
        with self.assertRaises(EdgeAlreadyExists):
            self.g.add_edge("A", "B", 4.0)
        self.assertEqual(self.g.get_edge_weight("A", "B"), 3.0)

    def test_remove_twice_fails(self):
        self.g.add_edge("A", "B")
        self.g.remove_edge("A", "B")
        with self.assertRaises(EdgeNotFound):
            self.g.remove_edge("A", "B")
        self.assertFalse(self.g.has_edge("A", "B"))

    def test_unknown_endpoint(self):
        for op in (
            lambda: self.g.add_edge("A", "Z"),
            lambda: self.g.add_edge("Z", "A"),
            lambda: self.g.remove_edge("A", "Z"),
            lambda: self.g.get_edge_weight("Z", "B"),
            lambda: self.g.set_edge_weight("A", "Z", 1.0),
        ):
            with self.assertRaises(UnknownVertex):
                op()
        self.assertEqual(self.g.number_of_edges(), 0)

    def test_non_numeric_weight_rejected(self):
        with self.assertRaises(TypeError):
            self.g.add_edge("A", "B", "heavy")
        self.assertFalse(self.g.has_edge("A", "B"))

    def test_neighbors_in_index_order(self):
        self.g.add_vertex("C")
        self.g.add_vertex("D")
        self.g.add_edge("B", "D")
        self.g.add_edge("B", "A")
        self.g.add_edge("B", "B")
        self.assertEqual(self.g.get_neighbors("B"), ["A", "B", "D"])
        self.assertEqual(self.g.degree("B"), 3)

    def test_set_edge_weight_creates_and_erases(self):
        # no prior edge needed
        self.g.set_edge_weight("A", "B", 6.0)
        self.assertEqual(self.g.get_edge_weight("A", "B"), 6.0)
        self.g.set_edge_weight("A", "B", 7.0)
        self.assertEqual(self.g.get_edge_weight("A", "B"), 7.0)
        # writing the sentinel erases the edge
        self.g.set_edge_weight("A", "B", self.g.no_edge_value)
        with self.assertRaises(EdgeNotFound):
            self.g.get_edge_weight("A", "B")

    def test_edge_with_sentinel_weight_is_invisible(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self.g.add_edge("A", "B", 0.0)
        self.assertTrue(any(issubclass(w.category, UserWarning) for w in caught))
        self.assertFalse(self.g.has_edge("A", "B"))
        self.assertEqual(self.g.get_neighbors("A"), [])


class TestUndirectedEdges(unittest.TestCase):
    def setUp(self):
        self.g = Graph(directed=False)
        for v in ("A", "B", "C"):
            self.g.add_vertex(v)

    def test_mirrored_weights(self):
        self.g.add_edge("A", "C", 1.0)
        self.assertEqual(self.g.get_edge_weight("A", "C"), 1.0)
        self.assertEqual(self.g.get_edge_weight("C", "A"), 1.0)
        self.g.set_edge_weight("C", "A", 3.0)
        self.assertEqual(self.g.get_edge_weight("A", "C"), 3.0)
        self.g.remove_edge("A", "C")
        with self.assertRaises(EdgeNotFound):
            self.g.get_edge_weight("A", "C")
        with self.assertRaises(EdgeNotFound):
            self.g.get_edge_weight("C", "A")

    def test_reverse_add_fails_after_forward_add(self):
        self.g.add_edge("A", "B", 2.0)
        with self.assertRaises(EdgeAlreadyExists):
            self.g.add_edge("B", "A", 5.0)

    def test_existence_check_reads_forward_cell_only(self):
        # make the two cells disagree by writing through the matrix directly
        self.g.matrix.set(self.g.vertex_index("B"), self.g.vertex_index("A"), 9.0)
        # forward cell A -> B is empty, so the add goes through and overwrites the mirror
        self.g.add_edge("A", "B", 2.0)
        self.assertEqual(self.g.get_edge_weight("B", "A"), 2.0)

    def test_scenario_remove_middle_vertex(self):
        self.g.add_edge("A", "C", 1)
        self.g.remove_vertex("B")
        self.assertEqual(self.g.order, 2)
        self.assertEqual(self.g.get_edge_weight("A", "C"), 1.0)
        self.assertEqual(self.g.get_edge_weight("C", "A"), 1.0)
        self.assertEqual(self.g.get_neighbors("A"), ["C"])

    def test_edges_reported_once(self):
        self.g.add_edge("C", "A", 4.0)
        self.g.add_edge("B", "B", 1.0)
        self.assertEqual(self.g.edges(), [("A", "C", 4.0), ("B", "B", 1.0)])
        self.assertEqual(self.g.number_of_edges(), 2)

    def test_symmetry_holds_after_mixed_operations(self):
        self.g.add_edge("A", "B", 1.0)
        self.g.add_edge("B", "C", 2.0)
        self.g.set_edge_weight("C", "A", 3.0)
        self.g.remove_edge("B", "A")
        names = self.g.vertices()
        for s in names:
            for t in names:
                self.assertEqual(self.g.has_edge(s, t), self.g.has_edge(t, s))
                if self.g.has_edge(s, t):
                    self.assertEqual(self.g.get_edge_weight(s, t), self.g.get_edge_weight(t, s))


class TestNaNSentinel(unittest.TestCase):
    def test_nan_means_no_edge(self):
        g = Graph(directed=True, no_edge_value=float("nan"))
        g.add_vertex("A")
        g.add_vertex("B")
        self.assertTrue(math.isnan(g.no_edge_value))
        self.assertEqual(g.get_neighbors("A"), [])
        g.add_edge("A", "B", 0.0)
        self.assertEqual(g.get_edge_weight("A", "B"), 0.0)
        self.assertEqual(g.get_neighbors("A"), ["B"])
        g.remove_edge("A", "B")
        self.assertFalse(g.has_edge("A", "B"))


class TestMisc(unittest.TestCase):
    def test_copy_is_independent(self):
        g = Graph(directed=True)
        g.add_vertex("A")
        g.add_vertex("B")
        g.add_edge("A", "B", 2.0)
        h = g.copy()
        # a plain copy starts with a clean history
        self.assertEqual(h.history(), [])
        h.remove_vertex("A")
        self.assertEqual(g.order, 2)
        self.assertEqual(g.get_edge_weight("A", "B"), 2.0)
        self.assertEqual(h.vertices(), ["B"])
        self.assertEqual([e["op"] for e in h.history()], ["remove_vertex"])
        self.assertEqual(
            [e["op"] for e in g.history()], ["add_vertex", "add_vertex", "add_edge"]
        )

    def test_deepcopy_rebinds_history_hooks(self):
        g = Graph(directed=True)
        g.add_vertex("A")
        h = copy.deepcopy(g)
        h.add_vertex("B")
        self.assertEqual(g.vertices(), ["A"])
        self.assertEqual(h.vertices(), ["A", "B"])
        self.assertEqual([e["op"] for e in g.history()], ["add_vertex"])
        self.assertEqual([e["op"] for e in h.history()], ["add_vertex", "add_vertex"])

    def test_shallow_copy_is_independent(self):
        g = Graph(directed=False)
        g.add_vertex("A")
        g.add_vertex("B")
        h = copy.copy(g)
        h.add_edge("A", "B", 1.5)
        self.assertFalse(g.has_edge("A", "B"))
        self.assertEqual(h.get_edge_weight("B", "A"), 1.5)
        self.assertEqual(len(g.history()), 2)
        self.assertEqual(h.history()[-1]["op"], "add_edge")

    def test_print_adjacency(self):
        g = Graph(directed=True)
        g.add_vertex("A")
        g.add_vertex("B")
        g.add_edge("A", "B", 2.5)
        buf = io.StringIO()
        g.print(file=buf)
        self.assertEqual(buf.getvalue(), "\tA\tB\nA\t0\t2.5\nB\t0\t0\n")

    def test_capacity_presizes_buffer(self):
        g = Graph(directed=True, capacity=50)
        self.assertEqual(g.matrix.capacity, (50, 50))
        self.assertEqual(g.order, 0)

    def test_dunder_helpers(self):
        g = Graph(directed=False)
        g.add_vertex("x")
        self.assertEqual(len(g), 1)
        self.assertIn("x", g)
        self.assertEqual(list(g), ["x"])
        self.assertIn("undirected", repr(g))


if __name__ == "__main__":
    unittest.main()
