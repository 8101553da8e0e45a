import unittest

from bftape import ExecutionState, InspectorSession
from bftape.errors import MaxSizeExceeded, RunFailed, StepLimitExceeded
from bftape.inspector import _format_code_window, _to_input_bytes, format_state


class InspectorSessionTests(unittest.TestCase):
    def test_basic_stepping(self) -> None:
        session = InspectorSession("+++.", input_template=[], tape_window=2, max_steps=100)
        initial = session.current_state()
        self.assertIsNone(initial.instruction)
        states = session.step_forward(2)
        self.assertEqual(len(states), 2)
        self.assertEqual(states[-1].step, 2)
        self.assertFalse(session.is_finished())

    def test_step_sequence_reports_instructions(self) -> None:
        session = InspectorSession("+++.", input_template=[])
        states = session.step_forward(10)
        instructions = [state.instruction for state in states[:-1]]
        self.assertEqual(instructions, ["+", "+", "+", "."])
        self.assertIsNone(states[-1].instruction)
        self.assertEqual(states[-1].output, "\x03")
        self.assertEqual(states[-1].pc, 4)
        self.assertTrue(session.is_finished())

    def test_loop_markers_are_reported(self) -> None:
        session = InspectorSession("+[-]", input_template=[])
        states = session.step_forward(10)
        self.assertEqual([state.instruction for state in states], ["+", "[", "-", "]", None])
        self.assertEqual(states[-1].step, 4)
        self.assertEqual(states[-1].tape, [0])

    def test_comments_are_not_part_of_program_text(self) -> None:
        session = InspectorSession("add one: + then print .", input_template=[])
        self.assertEqual(session.program_text, "+.")
        self.assertEqual(session.current_state().code_length, 2)

    def test_breakpoint(self) -> None:
        session = InspectorSession("+++.", input_template=[], tape_window=2, max_steps=100)
        session.add_breakpoint(2)
        session.run_until_break()
        self.assertEqual(session.hit_breakpoint, 2)
        self.assertEqual(session.current_state().pc, 2)

    def test_restart(self) -> None:
        session = InspectorSession("+.", input_template=[], tape_window=2, max_steps=100)
        session.step_forward(3)
        self.assertTrue(session.is_finished())
        session.restart()
        self.assertFalse(session.is_finished())
        self.assertEqual(session.current_state().step, 0)
        self.assertEqual(len(session.history), 1)

    def test_input_template_feeds_program(self) -> None:
        session = InspectorSession(",.,.", input_template=_to_input_bytes("A"))
        session.run_until_break()
        self.assertEqual(session.current_state().output, "A\x00")


class InspectorSessionAdvancedTests(unittest.TestCase):
    def test_step_forward_zero_count_keeps_state(self) -> None:
        session = InspectorSession("++", input_template=[], history_limit=5)
        initial_state = session.current_state()
        states = session.step_forward(0)
        self.assertEqual(states, [])
        self.assertIs(session.current_state(), initial_state)
        self.assertFalse(session.is_finished())
        self.assertIsNone(session.hit_breakpoint)

    def test_run_until_break_limit(self) -> None:
        session = InspectorSession("+++++.", input_template=[], max_steps=100)
        session.add_breakpoint(5)
        states = session.run_until_break(limit=2)
        self.assertEqual(len(states), 2)
        self.assertIsNone(session.hit_breakpoint)
        self.assertEqual(session.current_state(), states[-1])
        self.assertFalse(session.is_finished())

    def test_step_limit(self) -> None:
        session = InspectorSession("+[]", input_template=[], max_steps=2)
        with self.assertRaises(StepLimitExceeded):
            session.run_until_break()
        self.assertTrue(session.is_finished())

    def test_step_limit_allows_termination_at_budget(self) -> None:
        session = InspectorSession("++", input_template=[], max_steps=2)
        session.run_until_break()
        self.assertTrue(session.is_finished())
        self.assertEqual(session.current_state().step, 2)

    def test_run_failure_marks_session_finished(self) -> None:
        session = InspectorSession("+-[", input_template=[])
        session.step_forward(1)
        with self.assertRaises(RunFailed):
            session.step_forward(5)
        self.assertTrue(session.is_finished())
        self.assertIsNotNone(session.error)
        self.assertEqual(session.step_forward(1), [])

    def test_tape_limit_failure(self) -> None:
        session = InspectorSession("<<", input_template=[], max_size=2)
        with self.assertRaises(RunFailed) as ctx:
            session.run_until_break()
        self.assertIsInstance(ctx.exception.error, MaxSizeExceeded)
        self.assertEqual(session.current_state().pointer, -1)

    def test_run_quantum_records_only_final_state(self) -> None:
        session = InspectorSession("+++++.", input_template=[], max_steps=100)
        session.add_breakpoint(1)
        state = session.run_quantum(3)
        self.assertEqual(state.step, 3)
        self.assertEqual(len(session.history), 2)
        self.assertIsNone(session.hit_breakpoint)
        self.assertFalse(session.is_finished())
        session.run_quantum(10)
        self.assertTrue(session.is_finished())
        self.assertEqual(session.current_state().step, 6)

    def test_run_quantum_respects_step_limit(self) -> None:
        session = InspectorSession("+[]", input_template=[], max_steps=5)
        state = session.run_quantum(10)
        self.assertEqual(state.step, 5)
        with self.assertRaises(StepLimitExceeded):
            session.run_quantum(1)

    def test_history_limit_discards_old_entries(self) -> None:
        session = InspectorSession("+++++.", input_template=[], history_limit=3, max_steps=100)
        session.step_forward(5)
        self.assertEqual(len(session.history), 3)
        self.assertGreater(session.history[0].step, 0)
        self.assertEqual(session.history[-1], session.current_state())

    def test_breakpoint_management_helpers(self) -> None:
        session = InspectorSession("+++.", input_template=[])
        session.add_breakpoint(3)
        session.add_breakpoint(1)
        self.assertEqual(session.list_breakpoints(), [1, 3])
        self.assertTrue(session.remove_breakpoint(1))
        self.assertFalse(session.remove_breakpoint(99))
        session.clear_breakpoints()
        self.assertEqual(session.list_breakpoints(), [])


class InspectorUtilityTests(unittest.TestCase):
    def test_to_input_bytes(self) -> None:
        self.assertEqual(_to_input_bytes("Az0"), [65, 122, 48])

    def test_format_code_window_marks_end(self) -> None:
        self.assertEqual(_format_code_window("+", 5), "+[END]")

    def test_format_state_renders_core_sections(self) -> None:
        state = ExecutionState(
            step=3,
            pc=1,
            instruction="+",
            pointer=-1,
            tape_start=-2,
            tape=[1, 2, 3],
            output="A",
            code_length=3,
        )
        rendered = format_state(state, "++.")
        self.assertIn("step=3 pc=1/3 instruction='+' pointer=-1", rendered)
        self.assertIn("output='A'", rendered)
        self.assertIn("[-1:002]", rendered)
        self.assertIn("code=+[+].", rendered)


if __name__ == "__main__":
    unittest.main()
