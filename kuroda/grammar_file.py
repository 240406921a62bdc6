# Reading and writing grammars in a simple line oriented text format:
#
#   # comment
#   V = A A' B B' C
#   T = a b c
#   R
#   S --> A'
#   A' --> A B'
#   A B --> C D
#   A --> a
#
# Rule lines are "left --> right", each side one or two symbols. Without an
# arrow a line of 2, 3 or 4 symbols is read as A B, A B C or A B C D.

import logging

from . import START, Grammar, GrammarError, Rule, rule_from_symbols

logger = logging.getLogger(__name__)

ARROWS = ("-->", "->")
RULE_HEADERS = ("R", "RULES")


class GrammarFileError(GrammarError):
    """Indicates a line of a grammar file that could not be understood"""
    def __init__(self, message, line_number, line):
        super(GrammarFileError, self).__init__("Line {0}: {1}".format(line_number, message))
        #: 1-based number of the offending line
        self.line_number = line_number
        #: The offending line itself
        self.line = line


def _declaration(line):
    # Splits "V = A B", "V: A B" or "V A B" into ("V", ["A", "B"])
    key = line[0].upper()
    rest = line[1:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:]
    return key, rest.split()


def _rule(line):
    # With an arrow the sides are explicit, without one the symbol count decides
    symbols = line.split()
    arrows = [i for i, symbol in enumerate(symbols) if symbol in ARROWS]
    if not arrows:
        return rule_from_symbols(symbols)
    if len(arrows) > 1:
        raise GrammarError("A rule must have a single arrow: {0}".format(line))
    return Rule(symbols[:arrows[0]], symbols[arrows[0] + 1:])


def loads(text, *, start=START):
    """Reads a `Grammar` from a string"""
    variables = []
    terminals = []
    rules = []
    # (line_number, line) of each rule, for error reporting
    rule_lines = []
    at_rules = False
    for line_number, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if at_rules:
            try:
                rules.append(_rule(line))
            except GrammarError as e:
                raise GrammarFileError(e.message, line_number, raw_line) from e
            rule_lines.append((line_number, raw_line))
            continue
        if line.rstrip(":=").strip().upper() in RULE_HEADERS:
            at_rules = True
            continue
        key, symbols = _declaration(line)
        if key == "V" and (len(line) == 1 or not line[1].isalnum()):
            variables.extend(symbols)
        elif key == "T" and (len(line) == 1 or not line[1].isalnum()):
            terminals.extend(symbols)
        else:
            raise GrammarFileError("Expected a V, T or R line, got {0!r}".format(line), line_number, raw_line)

    logger.debug("read %d variables, %d terminals, %d rules", len(variables), len(terminals), len(rules))
    try:
        return Grammar(variables, terminals, rules, start=start)
    except GrammarError as e:
        for rule, (line_number, raw_line) in zip(rules, rule_lines):
            if rule is e.rule:
                raise GrammarFileError(e.message, line_number, raw_line) from e
        raise


def load(path, *, start=START):
    """Reads a `Grammar` from the file at `path`"""
    with open(path, encoding="utf-8") as f:
        return loads(f.read(), start=start)


def dumps(grammar):
    """Renders `grammar` in the format read by `loads`"""
    lines = [
        "V = " + " ".join(grammar.variables),
        "T = " + " ".join(grammar.terminals),
        "R",
    ]
    lines.extend(str(rule) for rule in grammar.all_rules)
    return "\n".join(lines) + "\n"


__all__ = [
    "GrammarFileError",
    "loads",
    "load",
    "dumps",
]
