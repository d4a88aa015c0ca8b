import unittest

from leaf_lsystem.errors import RuleSyntaxError
from leaf_lsystem.rules import (
    ContextRule,
    InertRule,
    RuleKind,
    SimpleRule,
    StochasticRule,
    compile_rules,
    parse_rule,
)


class TestParseRule(unittest.TestCase):

    def test_simple_rule(self):
        rule = parse_rule("a=ab")
        self.assertIsInstance(rule, SimpleRule)
        self.assertEqual(rule.kind, RuleKind.SIMPLE)
        self.assertEqual(rule.focus, "a")
        self.assertEqual(rule.replacement, "ab")

    def test_empty_replacement_is_a_deletion(self):
        rule = parse_rule("a=")
        self.assertEqual(rule.replacement, "")

    def test_context_both_sides(self):
        rule = parse_rule("a<b>c=d")
        self.assertIsInstance(rule, ContextRule)
        self.assertEqual((rule.before, rule.focus, rule.after), ("a", "b", "c"))
        self.assertEqual(rule.replacement, "d")

    def test_context_left_only(self):
        rule = parse_rule("xy<b=c")
        self.assertEqual((rule.before, rule.focus, rule.after), ("xy", "b", None))

    def test_context_right_only_focus_is_first_symbol(self):
        rule = parse_rule("b>cc=d")
        self.assertEqual((rule.before, rule.focus, rule.after), (None, "b", "cc"))

    def test_context_with_empty_sides(self):
        rule = parse_rule("<b>c=d")
        self.assertEqual((rule.before, rule.focus, rule.after), ("", "b", "c"))
        rule = parse_rule("a<b>=d")
        self.assertEqual((rule.before, rule.focus, rule.after), ("a", "b", ""))

    def test_stochastic_one_outcome(self):
        rule = parse_rule("a(.5)=b")
        self.assertIsInstance(rule, StochasticRule)
        self.assertAlmostEqual(rule.probability, 0.5)
        self.assertEqual((rule.outcome_a, rule.outcome_b), ("b", ""))

    def test_stochastic_two_outcomes(self):
        rule = parse_rule("a(0.25)=b=c")
        self.assertAlmostEqual(rule.probability, 0.25)
        self.assertEqual((rule.outcome_a, rule.outcome_b), ("b", "c"))

    def test_stochastic_empty_parentheses(self):
        self.assertEqual(parse_rule("a()=b").probability, 0.0)

    def test_inert_rule(self):
        rule = parse_rule("ab=c")
        self.assertIsInstance(rule, InertRule)
        self.assertEqual(rule.kind, RuleKind.INERT)

    def test_extra_outcomes_ignored(self):
        rule = parse_rule("a=b=c=d")
        self.assertEqual(rule.replacement, "b")

    def test_malformed(self):
        for text in ["a", "=b", "a(x)=b", "a(2)=b", "a<bc>d=e", "a>b<c=d", "ab(.5)=c", "a<=b"]:
            with self.subTest(text=text):
                with self.assertRaises(RuleSyntaxError):
                    parse_rule(text)


class TestCompileRules(unittest.TestCase):

    def test_skips_none_and_malformed(self):
        with self.assertLogs("leaf_lsystem.rules", level="WARNING"):
            rule_set = compile_rules(["a=b", None, "oops", "b=c"])
        self.assertEqual([r.text for r in rule_set], ["a=b", "b=c"])
        self.assertEqual(len(rule_set.skipped), 1)
        self.assertEqual(rule_set.skipped[0].text, "oops")

    def test_keeps_declaration_order_and_duplicates(self):
        rule_set = compile_rules(["a=x", "a=y", "b<a=z"])
        self.assertEqual(len(rule_set), 3)
        self.assertEqual(rule_set[0].replacement, "x")
        self.assertEqual(rule_set[2].kind, RuleKind.CONTEXT)

    def test_empty_rule_list_warns(self):
        with self.assertLogs("leaf_lsystem.rules", level="WARNING") as logs:
            rule_set = compile_rules([])
        self.assertEqual(len(rule_set), 0)
        self.assertIn("No rules added", logs.output[0])


if __name__ == "__main__":
    unittest.main()
