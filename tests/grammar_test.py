import unittest
from kuroda import Grammar, GrammarError, Rule, rule_from_symbols


class RuleTestCase(unittest.TestCase):
    def test_from_symbols(self):
        self.assertEqual(rule_from_symbols(["A", "a"]), Rule(["A"], ["a"]))
        self.assertEqual(rule_from_symbols(["A", "B", "C"]), Rule(["A"], ["B", "C"]))
        self.assertEqual(rule_from_symbols(["A", "B", "C", "D"]), Rule(["A", "B"], ["C", "D"]))

    def test_from_symbols_bad_length(self):
        for symbols in [[], ["A"], ["A", "B", "C", "D", "E"]]:
            with self.assertRaises(GrammarError):
                rule_from_symbols(symbols)

    def test_shapes(self):
        self.assertTrue(Rule(["A"], ["B"]).is_unary)
        self.assertTrue(Rule(["A"], ["B", "C"]).is_collapsing)
        self.assertTrue(Rule(["A", "B"], ["C", "D"]).is_contextual)
        self.assertFalse(Rule(["A"], ["B", "C"]).is_contextual)

    def test_reductions(self):
        # Every occurrence, in order
        rule = Rule(["A"], ["B", "C"])
        self.assertEqual(list(rule.reductions(["B", "C", "B", "C"])), [
            ("A", "B", "C"),
            ("B", "C", "A"),
        ])
        rule = Rule(["A", "B"], ["C", "D"])
        self.assertEqual(list(rule.reductions(["X", "C", "D"])), [("X", "A", "B")])
        rule = Rule(["A"], ["B"])
        self.assertEqual(list(rule.reductions(["B", "X", "B"])), [("A", "X", "B"), ("B", "X", "A")])
        self.assertEqual(list(rule.reductions(["X"])), [])

    def test_applications(self):
        rule = Rule(["A"], ["B", "C"])
        self.assertEqual(list(rule.applications(["A", "A"])), [("B", "C", "A"), ("A", "B", "C")])
        rule = Rule(["A", "B"], ["C", "D"])
        self.assertEqual(list(rule.applications(["A", "B", "B"])), [("C", "D", "B")])

    def test_str(self):
        self.assertEqual(str(Rule(["A", "B"], ["C", "D"])), "A B --> C D")
        self.assertEqual(str(Rule(["A"], ["a"])), "A --> a")


class GrammarTestCase(unittest.TestCase):
    def setUp(self):
        self.g = Grammar(
            ["A", "A'", "B", "B'", "C"],
            ["a", "b", "c"],
            [
                ["S", "A'"],
                ["A'", "A", "B'"],
                ["A", "a"],
                ["B'", "B", "C"],
                ["B", "b"],
                ["C", "c"],
                ["C", "b"],
            ])

    def test_lookups(self):
        g = self.g
        self.assertTrue(g.is_variable("A'"))
        self.assertTrue(g.is_variable("S"))
        self.assertFalse(g.is_variable("a"))
        self.assertTrue(g.is_terminal("a"))
        self.assertFalse(g.is_terminal("A"))
        self.assertFalse(g.is_terminal("d"))

    def test_origins(self):
        self.assertEqual(self.g.origins, {
            "a": ["A"],
            "b": ["B", "C"],
            "c": ["C"],
        })

    def test_terminal_rules_excluded(self):
        self.assertEqual(self.g.rules, [
            Rule(["S"], ["A'"]),
            Rule(["A'"], ["A", "B'"]),
            Rule(["B'"], ["B", "C"]),
        ])
        self.assertEqual(len(self.g.all_rules), 7)

    def test_start_rules(self):
        g = Grammar(["A", "B"], ["a"], [
            ["S", "A", "B"],
            ["S", "A", "S"],
            ["A", "B", "S", "A"],
            ["S", "B"],
            ["A", "a"],
        ])
        self.assertEqual(g.start_rules, [Rule(["S"], ["A", "B"]), Rule(["S"], ["B"])])
        # Start rules are still used by the search
        self.assertIn(Rule(["S"], ["A", "S"]), g.rules)
        self.assertIn(Rule(["S"], ["A", "B"]), g.rules)

    def test_custom_start(self):
        g = Grammar(["A"], ["a"], [["TOP", "A"], ["A", "a"]], start="TOP")
        self.assertEqual(g.start_rules, [Rule(["TOP"], ["A"])])

    def test_empty_origins(self):
        g = Grammar(["A"], ["a", "b"], [["S", "A"], ["A", "a"]])
        self.assertEqual(g.origins["b"], [])

    def test_duplicate_rules(self):
        g = Grammar(["A"], ["a"], [["S", "A"], ["S", "A"], ["A", "a"], ["A", "a"]])
        self.assertEqual(g.origins["a"], ["A", "A"])
        self.assertEqual(len(g.start_rules), 2)


class GrammarValidationTestCase(unittest.TestCase):
    def invalid(self, variables, terminals, rules):
        with self.assertRaises(GrammarError) as cm:
            Grammar(variables, terminals, rules)
        return cm.exception

    def test_overlap(self):
        e = self.invalid(["A", "a"], ["a"], [])
        self.assertIsNone(e.rule)

    def test_start_is_terminal(self):
        self.invalid(["A"], ["S"], [])

    def test_binary_to_unary(self):
        e = self.invalid(["A", "B", "C"], [], [Rule(["A", "B"], ["C"])])
        self.assertEqual(e.rule, Rule(["A", "B"], ["C"]))

    def test_side_too_long(self):
        self.invalid(["A", "B", "C"], [], [Rule(["A"], ["B", "C", "A"])])
        self.invalid(["A", "B", "C"], [], [Rule([], ["B"])])

    def test_terminal_in_binary_rule(self):
        self.invalid(["A", "B"], ["a"], [["A", "a", "B"]])
        self.invalid(["A", "B"], ["a"], [["A", "B", "a", "B"]])

    def test_terminal_on_left(self):
        self.invalid(["A"], ["a"], [["a", "A"]])

    def test_undeclared_symbol(self):
        e = self.invalid(["A"], ["a"], [["S", "X"]])
        self.assertIn("'X'", e.message)

    def test_empty_symbol(self):
        self.invalid(["A"], ["a"], [Rule(["A"], [""])])


if __name__ == '__main__':
    unittest.main()
