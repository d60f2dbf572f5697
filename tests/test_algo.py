import unittest
import random
import sys
import os
from collections import deque
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.grid import Grid, CellState
from maze_stepper.core.events import Carved, Backtracked, Finished, MoveKind
from maze_stepper.core.errors import (
    InconsistentPathError, InvalidCellError, InvalidDimensionsError, RootOutOfBoundsError
)
from maze_stepper.algo.dfs import StepEngine, Phase, random_root

def run_and_collect(engine):
    results = list(engine.run())
    carved = [r for r in results if isinstance(r, Carved)]
    backtracked = [r for r in results if isinstance(r, Backtracked)]
    return results, carved, backtracked

def tree_path(edges, start, end):
    """BFS over an undirected edge set; returns the cell path start -> end."""
    adj = {}
    for a, b in edges:
        adj.setdefault(a, []).append(b)
        adj.setdefault(b, []).append(a)
    parent = {start: None}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        for nxt in adj.get(cur, []):
            if nxt not in parent:
                parent[nxt] = cur
                queue.append(nxt)
    path = []
    cur = end
    while cur is not None:
        path.append(cur)
        cur = parent[cur]
    return path[::-1]

class TestConstruction(unittest.TestCase):
    def test_root_is_visited_and_pushed(self):
        engine = StepEngine(4, 3, 2, 1, seed=1)
        self.assertEqual(engine.current, (2, 1))
        self.assertIs(engine.classify(2, 1), CellState.VISITED)
        self.assertEqual(engine.path(), [(2, 1)])
        self.assertIs(engine.phase, Phase.RUNNING)
        self.assertEqual(engine.grid.visited_count(), 1)

    def test_invalid_dimensions(self):
        with self.assertRaises(InvalidDimensionsError):
            StepEngine(0, 5, 0, 0)
        with self.assertRaises(InvalidDimensionsError):
            StepEngine(5, -2, 0, 0)

    def test_root_out_of_bounds(self):
        for x, y in [(5, 0), (0, 3), (-1, 0), (0, -1)]:
            with self.assertRaises(RootOutOfBoundsError):
                StepEngine(5, 3, x, y)

    def test_random_root(self):
        rng = random.Random(3)
        for _ in range(50):
            x, y = random_root(4, 7, rng)
            self.assertTrue(0 <= x < 4 and 0 <= y < 7)

class TestScenarios(unittest.TestCase):
    def test_three_by_one(self):
        engine = StepEngine(3, 1, 0, 0)
        self.assertEqual(engine.step(), Carved((0, 0), (1, 0)))
        self.assertEqual(engine.step(), Carved((1, 0), (2, 0)))
        self.assertEqual(engine.stack_size, 3)
        self.assertEqual(engine.step(), Backtracked((2, 0), (1, 0)))
        self.assertEqual(engine.step(), Backtracked((1, 0), (0, 0)))
        self.assertEqual(engine.stack_size, 1)
        self.assertEqual(engine.step(), Finished())
        self.assertTrue(engine.is_finished)
        self.assertEqual(engine.stack_size, 0)

    def test_single_cell(self):
        engine = StepEngine(1, 1, 0, 0)
        self.assertIsInstance(engine.step(), Finished)
        self.assertIs(engine.phase, Phase.DONE)
        self.assertEqual(engine.stack_size, 0)

    def test_move_kinds(self):
        engine = StepEngine(2, 1, 0, 0)
        carve = engine.step()
        back = engine.step()
        self.assertIs(carve.kind, MoveKind.CARVE)
        self.assertIs(back.kind, MoveKind.BACKTRACK)
        self.assertEqual(back.from_cell, (1, 0))
        self.assertEqual(back.to_cell, (0, 0))

class TestProperties(unittest.TestCase):
    SIZES = [(1, 1), (1, 6), (6, 1), (2, 2), (7, 5), (12, 9)]

    def test_spanning_tree(self):
        for w, h in self.SIZES:
            for seed in (0, 1, 42):
                engine = StepEngine(w, h, w // 2, h // 2, seed=seed)
                _, carved, _ = run_and_collect(engine)

                edges = {frozenset((m.from_cell, m.to_cell)) for m in carved}
                self.assertEqual(len(carved), w * h - 1)
                self.assertEqual(len(edges), w * h - 1, "An edge was carved twice")

                # Union-find: W*H-1 edges and no cycle means a spanning tree
                parent = list(range(w * h))
                def find(i):
                    while parent[i] != i:
                        parent[i] = parent[parent[i]]
                        i = parent[i]
                    return i
                for m in carved:
                    a = find(engine.grid.get_index(*m.from_cell))
                    b = find(engine.grid.get_index(*m.to_cell))
                    self.assertNotEqual(a, b, f"Cycle in {w}x{h} maze (seed {seed})")
                    parent[a] = b

                self.assertEqual(engine.grid.visited_count(), w * h)

    def test_walls_match_carved_edges(self):
        engine = StepEngine(8, 6, 0, 0, seed=7)
        _, carved, _ = run_and_collect(engine)
        for m in carved:
            d = engine.grid.direction_between(*m.from_cell, *m.to_cell)
            self.assertFalse(engine.grid.has_wall(*m.from_cell, d))
            self.assertFalse(engine.grid.has_wall(*m.to_cell, Grid.OPPOSITE[d]))

        open_walls = 0
        for y in range(6):
            for x in range(8):
                for d in (Grid.EAST, Grid.SOUTH):
                    if not engine.grid.has_wall(x, y, d):
                        open_walls += 1
        self.assertEqual(open_walls, 8 * 6 - 1)

    def test_adjacency(self):
        engine = StepEngine(9, 7, 4, 3, seed=5)
        for result in engine.run():
            if isinstance(result, Finished):
                continue
            (x1, y1), (x2, y2) = result.from_cell, result.to_cell
            self.assertEqual(abs(x1 - x2) + abs(y1 - y2), 1)

    def test_backtracks_follow_carved_edges(self):
        engine = StepEngine(10, 10, 3, 8, seed=11)
        _, carved, backtracked = run_and_collect(engine)
        edges = {frozenset((m.from_cell, m.to_cell)) for m in carved}
        for m in backtracked:
            self.assertIn(frozenset((m.from_cell, m.to_cell)), edges)
        # Every carve is undone by exactly one retreat
        self.assertEqual(len(backtracked), len(carved))

    def test_step_count(self):
        for w, h in self.SIZES:
            engine = StepEngine(w, h, 0, 0, seed=9)
            self.assertEqual(engine.run_all(), 2 * (w * h - 1) + 1)
            self.assertEqual(engine.carve_count, w * h - 1)
            self.assertEqual(engine.backtrack_count, w * h - 1)

    def test_stack_matches_tree_path(self):
        engine = StepEngine(6, 5, 2, 2, seed=21)
        edges = []
        while True:
            result = engine.step()
            if isinstance(result, Finished):
                break
            if isinstance(result, Carved):
                edges.append((result.from_cell, result.to_cell))

            self.assertEqual(engine.path()[-1], engine.current)
            self.assertEqual(engine.path(), tree_path(edges, engine.root, engine.current))

    def test_idempotent_completion(self):
        engine = StepEngine(5, 4, 1, 1, seed=3)
        engine.run_all()
        snapshot = engine.grid.cells.tobytes()
        steps = engine.step_count

        for _ in range(10):
            self.assertEqual(engine.step(), Finished())

        self.assertEqual(engine.grid.cells.tobytes(), snapshot)
        self.assertEqual(engine.stack_size, 0)
        self.assertEqual(engine.step_count, steps)

    def test_determinism(self):
        a = list(StepEngine(10, 10, 0, 0, seed=12345).run())
        b = list(StepEngine(10, 10, 0, 0, seed=12345).run())
        self.assertEqual(a, b)

    def test_caller_supplied_rng(self):
        a = list(StepEngine(8, 8, 1, 1, rng=random.Random(99)).run())
        b = list(StepEngine(8, 8, 1, 1, rng=random.Random(99)).run())
        self.assertEqual(a, b)

    def test_independent_instances(self):
        first = StepEngine(4, 4, 0, 0, seed=1)
        second = StepEngine(4, 4, 0, 0, seed=1)
        first.run_all()
        self.assertEqual(second.grid.visited_count(), 1)
        self.assertEqual(second.stack_size, 1)

class TestCorruptedHarness(unittest.TestCase):
    def test_double_visit_raises(self):
        engine = StepEngine(2, 1, 0, 0)
        engine.step()  # carve into (1,0)

        # Lie about every neighbor so the engine tries to carve into a visited (or void) cell
        with mock.patch.object(Grid, 'classify', return_value=CellState.UNVISITED):
            with self.assertRaises(InvalidCellError):
                engine.step()

    def test_corrupted_stack_raises(self):
        engine = StepEngine(3, 1, 0, 0)
        engine.step()
        engine.step()

        # Replace the middle of the path with a cell that isn't adjacent to the top
        engine.stack.pop()
        engine.stack.pop()
        engine.stack.push(0)
        engine.stack.push(2)

        with self.assertRaises(InconsistentPathError):
            engine.step()

if __name__ == '__main__':
    unittest.main()
