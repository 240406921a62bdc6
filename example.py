# A small tour of the API. The grammar files used here live in grammars/

from kuroda import Grammar, Rule, parse
from kuroda.grammar_file import load

grammar = Grammar(
    ["A", "A'", "B", "B'", "C"],
    ["a", "b", "c"],
    [
        Rule(["S"], ["A'"]),
        Rule(["A'"], ["A", "B'"]),
        Rule(["A"], ["a"]),
        Rule(["B'"], ["B", "C"]),
        Rule(["B"], ["b"]),
        Rule(["C"], ["c"]),
    ])

result = parse(grammar, "a b c".split())
print(result)

###

# Symbols not produced by any rule can never be derived
print(parse(grammar, "a b d".split()))

###

# Rules can also be given as flat lists of 2, 3 or 4 symbols
grammar = Grammar(["X", "Y"], ["x", "y"], [
    ["S", "X", "Y"],
    ["X", "Y", "Y", "X"],
    ["X", "x"],
    ["Y", "y"],
])
print(parse(grammar, "y x".split()))

###

grammar = load("grammars/anbncn.csg")
for text in ["a b c", "a a b b c c", "a a b c c", "a b c a b c"]:
    result = parse(grammar, text.split())
    print(text, "->", "derived" if result else "not derived")
    if result:
        assert result.derivation.verify()
