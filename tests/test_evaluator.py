from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for evaluator tests")
class EvaluatorTests(unittest.TestCase):
    def test_basic_arithmetic(self) -> None:
        from bloodbath import Integer, evaluate

        self.assertEqual(evaluate("+ 1 2"), Integer(3))
        self.assertEqual(evaluate("+ 1 + 1 1"), Integer(3))
        self.assertEqual(evaluate("+ + 1 1 1"), Integer(3))
        self.assertEqual(evaluate("* - 10 4 / 9 3"), Integer(18))

    def test_mixed_numeric_results(self) -> None:
        from bloodbath import Float, evaluate

        self.assertEqual(evaluate("/ 7 2"), Float(3.5))
        self.assertEqual(evaluate("+ 1 0.5"), Float(1.5))

    def test_literals_and_empty_line(self) -> None:
        from bloodbath import NOOP, Integer, evaluate

        self.assertEqual(evaluate("noop"), NOOP)
        self.assertEqual(evaluate("identity 1"), Integer(1))
        self.assertEqual(evaluate(""), NOOP)
        self.assertEqual(evaluate("   "), NOOP)

    def test_last_top_level_expression_wins(self) -> None:
        from bloodbath import Integer, evaluate

        self.assertEqual(evaluate("1 2 3"), Integer(3))
        self.assertEqual(evaluate("+ 1 2 + 10 20"), Integer(30))

    def test_session_variables_persist(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        self.assertEqual(session("set a 10"), Integer(10))
        self.assertEqual(session("set b 20"), Integer(20))
        self.assertEqual(session("set c + a b"), Integer(30))
        self.assertEqual(session("+ a a"), Integer(20))
        self.assertEqual(session.evaluate("c"), Integer(30))

    def test_verbs_are_ordinary_variables(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        self.assertEqual(session("set c 30"), Integer(30))
        self.assertEqual(session("set + c"), Integer(30))
        self.assertEqual(session("+"), Integer(30))
        self.assertEqual(session("+ 1 2"), Integer(2))

    def test_rebinding_changes_arity_on_later_lines(self) -> None:
        from bloodbath import Function, Integer, Session

        session = Session()
        session.env.set("neg", Function(1, lambda args: Integer(-args[0].value), name="neg"))
        session("set + identity neg")
        self.assertEqual(session("+ 5"), Integer(-5))
        self.assertEqual(session("+ 5 7"), Integer(7))

    def test_rebinding_changes_arity_later_on_the_same_line(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        self.assertEqual(session("set + 4 + 1 2"), Integer(2))

    def test_rebinding_to_another_binary_verb(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        session("set + identity -")
        self.assertEqual(session("+ 10 3"), Integer(7))

    def test_identity_returns_function_without_invoking(self) -> None:
        from bloodbath import Function, Session
        from bloodbath.builtins import ADD

        session = Session()
        value = session("identity +")
        self.assertIsInstance(value, Function)
        self.assertIs(value, ADD)
        self.assertIs(session("set plus identity +"), ADD)
        self.assertIs(session("identity plus"), ADD)

    def test_function_bound_under_new_name_is_applied(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        session("set plus identity +")
        self.assertEqual(session("plus 2 3"), Integer(5))

    def test_auto_vivification(self) -> None:
        from bloodbath import NOOP, Session

        session = Session()
        self.assertNotIn("ghost", session.env)
        self.assertEqual(session("ghost"), NOOP)
        self.assertIn("ghost", session.env)
        self.assertEqual(session("ghost"), NOOP)
        self.assertEqual(session("identity phantom"), NOOP)

    def test_noop_propagates_through_arithmetic(self) -> None:
        from bloodbath import NOOP, evaluate

        self.assertEqual(evaluate("+ noop 1"), NOOP)
        self.assertEqual(evaluate("* 2 undefined"), NOOP)
        self.assertEqual(evaluate("+ identity + 1"), NOOP)
        self.assertEqual(evaluate("/ 1 0"), NOOP)

    def test_if_truthiness(self) -> None:
        from bloodbath import NOOP, Integer, evaluate

        self.assertEqual(evaluate("if 0 then 1 else 2"), Integer(1))
        self.assertEqual(evaluate("if 0.0 then 1 else 2"), Integer(1))
        self.assertEqual(evaluate("if noop then 1 else 2"), Integer(2))
        self.assertEqual(evaluate("if noop then 42"), NOOP)
        self.assertEqual(evaluate("if identity + then 1 else 2"), Integer(1))
        self.assertEqual(evaluate("if + noop 1 then 1 else 2"), Integer(2))

    def test_if_evaluates_only_the_chosen_branch(self) -> None:
        from bloodbath import NOOP, Integer, Session

        session = Session()
        session("if 1 then set a 1 else set b 2")
        self.assertEqual(session("a"), Integer(1))
        self.assertEqual(session("b"), NOOP)

    def test_compound_sequencing(self) -> None:
        from bloodbath import NOOP, Integer, evaluate

        self.assertEqual(evaluate("{1 2 3}"), Integer(3))
        self.assertEqual(evaluate("{}"), NOOP)
        self.assertEqual(evaluate("{ set x 4 + x x }"), Integer(8))
        self.assertEqual(evaluate("+ {1 2} {3 4}"), Integer(6))

    def test_compound_parses_before_inner_set_runs(self) -> None:
        from bloodbath import Integer, Session

        # The whole compound is one top-level expression, so `+` inside it
        # still has arity 2 even though `set` rebinds it first.
        session = Session()
        self.assertEqual(session("{ set + 7 + 1 2 }"), Integer(3))
        self.assertEqual(session("+"), Integer(7))

    def test_variable_reads_happen_at_evaluation_time(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        self.assertEqual(session("{ set v 1 set w v set v 2 + v w }"), Integer(3))

    def test_lex_errors_are_wrapped(self) -> None:
        from bloodbath import ExpectedDigit, ReadingFailed, evaluate

        with self.assertRaises(ReadingFailed) as ctx:
            evaluate("+ 1 2x")
        self.assertIsInstance(ctx.exception.error, ExpectedDigit)
        self.assertIs(ctx.exception.__cause__, ctx.exception.error)

    def test_lex_error_prevents_any_evaluation(self) -> None:
        from bloodbath import ReadingFailed, Session

        session = Session()
        with self.assertRaises(ReadingFailed):
            session("set a 1 ;")
        self.assertNotIn("a", session.env)

    def test_parse_error_keeps_earlier_side_effects(self) -> None:
        from bloodbath import ExpectedExpression, Integer, Session

        session = Session()
        with self.assertRaises(ExpectedExpression):
            session("set a 1 + a")
        self.assertEqual(session("a"), Integer(1))

    def test_deep_nesting_is_reported_not_fatal(self) -> None:
        from bloodbath import Integer, NestingTooDeep, ParseError, Session

        session = Session()
        session("set kept 5")
        for line in ["{" * 2000 + "}" * 2000, "{" * 2000, "+ " * 2000 + "1 " * 2001]:
            with self.subTest(line=line[:12]):
                with self.assertRaises(NestingTooDeep) as ctx:
                    session(line)
                self.assertIsInstance(ctx.exception, ParseError)
                self.assertIsInstance(ctx.exception.__cause__, RecursionError)
                self.assertEqual(str(ctx.exception), "Expression is nested too deeply")
        self.assertEqual(session("+ kept 1"), Integer(6))

    def test_errors_leave_session_usable(self) -> None:
        from bloodbath import Integer, Session, UnexpectedBrace, UnterminatedCompoundExpression

        session = Session()
        with self.assertRaises(UnterminatedCompoundExpression):
            session("{ 1")
        with self.assertRaises(UnexpectedBrace):
            session("}")
        self.assertEqual(session("+ 2 2"), Integer(4))

    def test_reset_restores_builtins(self) -> None:
        from bloodbath import Integer, Session

        session = Session()
        session("set + 1")
        session.reset()
        self.assertEqual(session("+ 1 1"), Integer(2))

    def test_independent_evaluations_do_not_share_state(self) -> None:
        from bloodbath import NOOP, evaluate

        evaluate("set shared 1")
        self.assertEqual(evaluate("shared"), NOOP)

    def test_explicit_environment_persists(self) -> None:
        from bloodbath import Integer, default_environment, evaluate

        env = default_environment()
        evaluate("set z 5", env)
        self.assertEqual(evaluate("* z z", env), Integer(25))


if __name__ == "__main__":
    unittest.main()
