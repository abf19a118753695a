import unittest

from plan_fixtures import (
    demising_square_plan,
    exterior_square_plan,
    make_space,
    mixed_plan,
    square_loop,
)

from roomoffset.core.errors import NoBoundaryError
from roomoffset.core.model import ORIGIN, Plan, Point, Segment, Wall
from roomoffset.engine.api import (
    classify_and_offset_boundary,
    run_batch,
    run_for_spaces,
    separation_lines,
)
from roomoffset.engine.classifier import WallRole


def _with_space(plan, space):
    spaces = dict(plan.spaces)
    spaces[space.id] = space
    return Plan(spaces=spaces, walls=plan.walls)


class SingleSpaceTests(unittest.TestCase):
    def test_exterior_square_grows_by_wall_thickness(self):
        result = classify_and_offset_boundary(exterior_square_plan(), "101")

        self.assertTrue(all(c.role == WallRole.EXTERIOR for c in result.classifications))
        expected = [(-0.5, -0.5), (10.5, -0.5), (10.5, 10.5), (-0.5, 10.5)]
        for vertex, (x, y) in zip(result.polygon.vertices, expected):
            self.assertAlmostEqual(vertex.x, x, places=9)
            self.assertAlmostEqual(vertex.y, y, places=9)

        self.assertAlmostEqual(result.report.original_area, 100.0, places=9)
        self.assertAlmostEqual(result.report.effective_area, 121.0, places=9)
        self.assertAlmostEqual(result.report.delta, 21.0, places=9)
        self.assertTrue(result.is_simple)

    def test_demising_square_keeps_corners(self):
        result = classify_and_offset_boundary(demising_square_plan(), "101")

        self.assertTrue(all(c.role == WallRole.DEMISING for c in result.classifications))
        corners = [(0, 0), (10, 0), (10, 10), (0, 10)]
        for vertex, (x, y) in zip(result.polygon.vertices, corners):
            self.assertAlmostEqual(vertex.x, x, places=9)
            self.assertAlmostEqual(vertex.y, y, places=9)
        self.assertAlmostEqual(result.report.delta, 0.0, places=9)

    def test_collinear_segments_use_upstream_end_point(self):
        plan = exterior_square_plan()
        loop = (
            Segment(Point(0, 0), Point(5, 0), "w_s", 0),
            Segment(Point(5, 0), Point(10, 0), "w_s", 1),
            Segment(Point(10, 0), Point(10, 10), "w_e", 2),
            Segment(Point(10, 10), Point(0, 10), "w_n", 3),
            Segment(Point(0, 10), Point(0, 0), "w_w", 4),
        )
        plan = _with_space(plan, make_space("101", "OFFICE 101", [loop]))

        result = classify_and_offset_boundary(plan, "101")

        self.assertEqual(len(result.polygon), 5)
        self.assertEqual(result.polygon.vertices[1], result.offset_lines[0].end)
        self.assertEqual(result.polygon.vertices[1], Point(5.0, -0.5, 0.0))
        self.assertAlmostEqual(result.report.effective_area, 121.0, places=9)

    def test_zero_offset_keeps_area(self):
        walls = {"w": Wall("w", "Generic", "interior", 0.5)}
        outline = [Point(0, 0), Point(8, 0), Point(8, 3), Point(3, 3), Point(3, 7), Point(0, 7)]
        loop = tuple(
            Segment(outline[i], outline[(i + 1) % len(outline)], "w", i)
            for i in range(len(outline))
        )
        plan = Plan(
            spaces={"1": make_space("1", "OFFICE 1", [loop], location=Point(1, 1))},
            walls=walls,
        )

        result = classify_and_offset_boundary(plan, "1")

        self.assertTrue(all(c.magnitude == 0.0 for c in result.classifications))
        self.assertAlmostEqual(result.report.original_area, 36.0, places=9)
        self.assertAlmostEqual(result.report.effective_area, result.report.original_area, delta=1e-9)

    def test_degenerate_segment_keeps_vertex_count(self):
        plan = exterior_square_plan()
        loop = list(plan.spaces["101"].loops[0])
        loop.insert(1, Segment(Point(10, 0), Point(10, 0), "w_s", 1))
        loop = tuple(Segment(s.start, s.end, s.element_id, i) for i, s in enumerate(loop))
        plan = _with_space(plan, make_space("101", "OFFICE 101", [loop]))

        result = classify_and_offset_boundary(plan, "101")

        self.assertEqual(len(result.polygon), 5)
        self.assertTrue(result.offset_lines[1].degenerate)
        for vertex in result.polygon.vertices[1:3]:
            self.assertAlmostEqual(vertex.x, 10.5, places=9)
            self.assertAlmostEqual(vertex.y, -0.5, places=9)
        self.assertAlmostEqual(result.report.effective_area, 121.0, places=9)

    def test_missing_boundary(self):
        plan = _with_space(exterior_square_plan(), make_space("9", "OFFICE 9", []))
        with self.assertRaises(NoBoundaryError):
            classify_and_offset_boundary(plan, "9")

    def test_unknown_space(self):
        with self.assertRaises(KeyError):
            classify_and_offset_boundary(exterior_square_plan(), "nope")

    def test_points_held_at_level_elevation(self):
        walls = exterior_square_plan().walls
        space = make_space(
            "101",
            "OFFICE 101",
            [square_loop(0, 0, 10, ["w_s", "w_e", "w_n", "w_w"], elevation=12.0)],
            elevation=12.0,
        )
        result = classify_and_offset_boundary(Plan({"101": space}, walls), "101")
        self.assertTrue(all(v.z == 12.0 for v in result.polygon.vertices))


class InteriorReferencePointTests(unittest.TestCase):
    def test_explicit_location_first(self):
        plan = _with_space(
            exterior_square_plan(),
            make_space("2", "X", [square_loop(0, 0, 10, [None] * 4)], location=Point(1, 2), elevation=3.0),
        )
        self.assertEqual(plan.center_of("2"), Point(1, 2, 3.0))

    def test_bounding_box_midpoint(self):
        self.assertEqual(exterior_square_plan().center_of("101"), Point(5.0, 5.0, 0.0))

    def test_origin_fallback(self):
        plan = _with_space(exterior_square_plan(), make_space("9", "EMPTY", []))
        self.assertEqual(plan.center_of("9"), ORIGIN)
        self.assertEqual(plan.center_of("missing"), ORIGIN)


class BatchTests(unittest.TestCase):
    def setUp(self):
        plan = mixed_plan()
        self.plan = _with_space(plan, make_space("999", "OFFICE 999", []))

    def test_default_filter_selects_offices(self):
        result = run_batch(self.plan)
        self.assertEqual([r.space.id for r in result.successes], ["101", "102"])
        self.assertEqual([f.space.id for f in result.failures], ["999"])
        self.assertEqual(result.failures[0].kind, "NoBoundaryError")
        self.assertEqual(result.total, 3)

    def test_failure_does_not_abort_siblings(self):
        result = run_batch(self.plan, "OFFICE")
        self.assertEqual(len(result.successes), 2)
        self.assertIn("999", result.failures[0].error)

    def test_callable_filter(self):
        result = run_batch(self.plan, lambda space: space.name == "CORRIDOR")
        self.assertEqual([r.space.id for r in result.successes], ["201"])

    def test_parallel_matches_sequential(self):
        sequential = run_batch(self.plan)
        parallel = run_batch(self.plan, max_workers=4)
        self.assertEqual(
            [r.report for r in sequential.successes],
            [r.report for r in parallel.successes],
        )
        self.assertEqual(
            [r.space.id for r in sequential.failures],
            [r.space.id for r in parallel.failures],
        )

    def test_mixed_room_report(self):
        result = run_batch(self.plan)
        office = result.successes[0]
        # south moves out 0.75, north moves out 0.5, east/west stay
        self.assertAlmostEqual(office.report.effective_area, 10 * 11.25, places=9)

    def test_run_for_spaces_with_plan_as_collaborators(self):
        spaces = [self.plan.spaces["101"].descriptor, self.plan.spaces["999"].descriptor]
        result = run_for_spaces(spaces, self.plan)
        self.assertEqual(len(result.successes), 1)
        self.assertEqual(len(result.failures), 1)


class SeparationLineTests(unittest.TestCase):
    def test_hallway_wall_moves_toward_room(self):
        lines = separation_lines(mixed_plan(), "101")
        self.assertEqual(len(lines), 1)
        line = lines[0]
        self.assertEqual(line.element_id, "w_n")
        self.assertEqual(line.role, WallRole.HALLWAY)
        self.assertAlmostEqual(line.start.y, 9.5)
        self.assertAlmostEqual(line.end.y, 9.5)
        self.assertAlmostEqual(line.length, 10.0)

    def test_include_demising(self):
        lines = separation_lines(mixed_plan(), "101", hallway_offset=0.25, include_demising=True)
        self.assertEqual([line.element_id for line in lines], ["w_e", "w_n"])
        self.assertAlmostEqual(lines[0].start.x, 9.75)

    def test_exterior_typed_wall_next_to_corridor(self):
        plan = mixed_plan()
        walls = dict(plan.walls)
        walls["w_n"] = Wall("w_n", "Exterior - 8in", None, 0.5)
        plan = Plan(spaces=plan.spaces, walls=walls)

        lines = separation_lines(plan, "101")

        self.assertEqual([line.element_id for line in lines], ["w_n"])
        self.assertEqual(lines[0].role, WallRole.HALLWAY)
        self.assertAlmostEqual(lines[0].start.y, 9.5)

    def test_no_boundary(self):
        plan = _with_space(mixed_plan(), make_space("9", "OFFICE 9", []))
        with self.assertRaises(NoBoundaryError):
            separation_lines(plan, "9")


if __name__ == "__main__":
    unittest.main()
