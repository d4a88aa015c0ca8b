import unittest

import numpy as np

from leaf_lsystem.errors import InvalidInputError, StackOverflowError
from leaf_lsystem.turtle import Turtle, TurtleStack, TurtleState


class TestTurtleState(unittest.TestCase):

    def setUp(self):
        self.turtle = Turtle.create(voxel_size=1.0, step_distance=1.0, angle=90.0)

    def assertForward(self, expected):
        np.testing.assert_allclose(self.turtle.state.forward, expected, atol=1e-9)

    def test_initial_frame(self):
        state = self.turtle.state
        np.testing.assert_allclose(state.point, [0, 0, 0])
        np.testing.assert_allclose(state.bl, [-0.5, 0.5, -0.5])
        np.testing.assert_allclose(state.tl, [-0.5, 0.5, 0.5])
        np.testing.assert_allclose(state.br, [0.5, 0.5, -0.5])
        self.assertForward([0, 1, 0])

    def test_move(self):
        self.turtle.move()
        np.testing.assert_allclose(self.turtle.point, [0, 1, 0])
        np.testing.assert_allclose(self.turtle.state.bl, [-0.5, 1.5, -0.5])

    def test_step_distance(self):
        turtle = Turtle.create(voxel_size=1.0, step_distance=2.5)
        turtle.move()
        np.testing.assert_allclose(turtle.point, [0, 2.5, 0])

    def test_rejects_non_positive_sizes(self):
        for kwargs in [dict(voxel_size=0), dict(voxel_size=-1.0), dict(step_distance=0)]:
            with self.subTest(**kwargs):
                with self.assertRaises(InvalidInputError):
                    Turtle.create(**kwargs)

    def test_turns(self):
        self.turtle.turn_left()
        self.assertForward([-1, 0, 0])
        self.turtle.turn_right()
        self.turtle.turn_right()
        self.assertForward([1, 0, 0])

    def test_pitch(self):
        self.turtle.pitch_up()
        self.assertForward([0, 0, 1])
        self.turtle.pitch_down()
        self.turtle.pitch_down()
        self.assertForward([0, 0, -1])

    def test_full_turn_returns_to_start(self):
        start = self.turtle.save()
        for _ in range(4):
            self.turtle.turn_left()
        for name in ("point", "bl", "tl", "br"):
            np.testing.assert_allclose(getattr(self.turtle.state, name), getattr(start, name), atol=1e-9)

    def test_rotation_keeps_frame_rigid(self):
        self.turtle.turn_left()
        self.turtle.pitch_up()
        self.turtle.move()
        state = self.turtle.state
        self.assertAlmostEqual(np.linalg.norm(state.tl - state.bl), 1.0)
        self.assertAlmostEqual(np.linalg.norm(state.br - state.bl), 1.0)
        self.assertAlmostEqual(np.dot(state.tl - state.bl, state.br - state.bl), 0.0)

    def test_snapshots_are_values(self):
        saved = self.turtle.save()
        self.turtle.move()
        np.testing.assert_allclose(saved.point, [0, 0, 0])
        with self.assertRaises(ValueError):
            saved.point[0] = 5.0

    def test_restore(self):
        saved = self.turtle.save()
        self.turtle.move()
        self.turtle.turn_left()
        self.turtle.restore(saved)
        np.testing.assert_allclose(self.turtle.point, [0, 0, 0])
        self.assertForward([0, 1, 0])

    def test_curve_ends(self):
        state = TurtleState.initial(voxel_size=2.0, step_distance=2.0).moved()
        start, end = state.curve_ends()
        np.testing.assert_allclose(start, [0, 0, 0])
        np.testing.assert_allclose(end, [0, 2, 0])


class TestTurtleStack(unittest.TestCase):

    def test_capacity(self):
        stack = TurtleStack(capacity=3)
        state = TurtleState.initial()
        for _ in range(3):
            stack.push(state)
        self.assertEqual(len(stack), 3)
        with self.assertRaises(StackOverflowError):
            stack.push(state)
        self.assertEqual(len(stack), 3)

    def test_pop_empty(self):
        self.assertIsNone(TurtleStack().pop())

    def test_lifo(self):
        stack = TurtleStack()
        first = TurtleState.initial()
        second = first.moved()
        stack.push(first)
        stack.push(second)
        self.assertIs(stack.pop(), second)
        self.assertIs(stack.pop(), first)

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            TurtleStack(capacity=0)


if __name__ == "__main__":
    unittest.main()
