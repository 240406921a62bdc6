import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

#: The default start symbol. Grammar authors should not use it for anything else.
START = "S"


class GrammarError(Exception):
    """Indicates a grammar that is not in Kuroda Normal Form, or is otherwise inconsistent"""
    def __init__(self, message, rule=None):
        super(GrammarError, self).__init__(message)
        #: A text description of the error
        self.message = message
        #: The offending `Rule`, or ``None`` if the problem is not specific to one rule
        self.rule = rule


class Rule:
    """A single production of a grammar in Kuroda Normal Form.

    Each side is a tuple of one or two symbols. Exactly one of the following shapes holds::

        A   -> B C
        A B -> C D
        A   -> B
        A   -> a
    """
    def __init__(self, left, right):
        #: Tuple of the symbols being rewritten
        self.left = tuple(left)
        #: Tuple of the symbols they are rewritten to
        self.right = tuple(right)

    @property
    def is_unary(self):
        return len(self.left) == 1 and len(self.right) == 1

    @property
    def is_collapsing(self):
        """True for A -> B C, i.e. reversing this rule shrinks the form"""
        return len(self.left) == 1 and len(self.right) == 2

    @property
    def is_contextual(self):
        """True for A B -> C D, the length preserving shape"""
        return len(self.left) == 2

    def reductions(self, form):
        """Yields every form obtained by replacing one occurrence of the right side with the left side,
        in order of ascending position."""
        form = tuple(form)
        width = len(self.right)
        for i in range(len(form) - width + 1):
            if form[i:i + width] == self.right:
                yield form[:i] + self.left + form[i + width:]

    def applications(self, form):
        """Yields every form obtained by applying this rule forward at one position."""
        form = tuple(form)
        width = len(self.left)
        for i in range(len(form) - width + 1):
            if form[i:i + width] == self.left:
                yield form[:i] + self.right + form[i + width:]

    def to_tuple(self):
        return self.left, self.right

    def __hash__(self):
        return hash(self.to_tuple())

    def __eq__(self, other):
        return isinstance(other, Rule) and self.to_tuple() == other.to_tuple()

    def __repr__(self):
        return "Rule({0!r}, {1!r})".format(self.left, self.right)

    def __str__(self):
        return "{0} --> {1}".format(" ".join(self.left), " ".join(self.right))


def rule_from_symbols(symbols):
    """Builds a `Rule` from a flat list of 2, 3 or 4 symbols.

    2 symbols are ``A -> B``, 3 are ``A -> B C`` and 4 are ``A B -> C D``."""
    symbols = list(symbols)
    if len(symbols) in (2, 3):
        return Rule(symbols[:1], symbols[1:])
    if len(symbols) == 4:
        return Rule(symbols[:2], symbols[2:])
    raise GrammarError("A rule must have 2, 3 or 4 symbols, got {0}: {1}".format(
        len(symbols), " ".join(map(str, symbols))))


DerivationStep = namedtuple("DerivationStep", [
    "rule",
    "form",
])
DerivationStep.__doc__ = """A single forward application of a rule.

.. py:attribute:: rule

    The `Rule` applied.

.. py:attribute:: form

    The sentential form (a tuple of symbols) that results from applying `rule`.
"""


def _format_step(step):
    return "{0} to create: {1}".format(step.rule, " ".join(step.form))


class Grammar:
    """A context sensitive grammar in Kuroda Normal Form.

    Rules that rewrite a variable to a terminal are only kept in the terminal-origin index,
    every other rule is used by the reverse search."""
    def __init__(self, variables, terminals, rules, *, start=START):
        #: The start symbol
        self.start = start

        logger.debug("storing variables")
        #: List of variables, in declaration order
        self.variables = list(variables)
        self._variable_set = set(self.variables)

        logger.debug("storing terminals")
        #: List of terminals, in declaration order
        self.terminals = list(terminals)
        self._terminal_set = set(self.terminals)

        overlap = self._variable_set & self._terminal_set
        if overlap:
            raise GrammarError("Symbols declared both as variable and terminal: {0}".format(
                ", ".join(sorted(overlap))))
        if start in self._terminal_set:
            raise GrammarError("The start symbol {0!r} cannot be a terminal".format(start))

        logger.debug("storing rules")
        #: Every rule, in the order given
        self.all_rules = [rule if isinstance(rule, Rule) else rule_from_symbols(rule) for rule in rules]
        for rule in self.all_rules:
            self._validate(rule)

        #: Map from each terminal to the list of variables that rewrite directly to it
        self.origins = {}
        for terminal in self.terminals:
            self.origins[terminal] = [rule.left[0] for rule in self.all_rules
                                      if rule.right == (terminal,)]

        #: The rules used by the search, i.e. everything except terminal producing rules
        self.rules = [rule for rule in self.all_rules if not self.is_terminal_rule(rule)]
        #: The subset of `rules` usable as the base case of the search
        self.start_rules = [rule for rule in self.rules
                            if rule.left == (start,) and start not in rule.right]

        logger.debug("stored %d variables, %d terminals, %d rules (%d start rules)",
                     len(self.variables), len(self.terminals), len(self.rules), len(self.start_rules))

    def is_variable(self, symbol):
        return symbol in self._variable_set or symbol == self.start

    def is_terminal(self, symbol):
        return symbol in self._terminal_set

    def is_terminal_rule(self, rule):
        """Returns true if `rule` has the shape A -> a"""
        return rule.is_unary and self.is_terminal(rule.right[0])

    def _validate(self, rule):
        if not 1 <= len(rule.left) <= 2 or not 1 <= len(rule.right) <= 2:
            raise GrammarError("Each side of a rule must have one or two symbols: {0}".format(rule), rule)
        for symbol in rule.left + rule.right:
            if not isinstance(symbol, str) or not symbol:
                raise GrammarError("Invalid symbol {0!r} in rule {1}".format(symbol, rule), rule)
        if len(rule.right) == 1 and len(rule.left) != 1:
            raise GrammarError("A rule with a single symbol on the right must have a single "
                               "symbol on the left: {0}".format(rule), rule)
        if self.is_terminal_rule(rule):
            symbols = rule.left
        else:
            symbols = rule.left + rule.right
        for symbol in symbols:
            if self.is_terminal(symbol):
                raise GrammarError("Terminal {0!r} may only appear alone on the right side of a "
                                   "rule: {1}".format(symbol, rule), rule)
            if not self.is_variable(symbol):
                raise GrammarError("Undeclared symbol {0!r} in rule {1}".format(symbol, rule), rule)

    def candidates(self, word):
        """Returns a `CandidateEnumerator` over every nonterminal form `word` could originate from.
        Raises ``KeyError`` if some symbol of `word` has no origins."""
        return CandidateEnumerator(self, word)

    def _match_start(self, form):
        # Returns the base of a trace if form is directly derivable from the start symbol
        if form == (self.start,):
            return []
        if 1 <= len(form) <= 2:
            for rule in self.start_rules:
                if rule.right == form:
                    return [DerivationStep(rule, form)]
        return None

    def _reductions(self, form):
        for rule in self.rules:
            for reduced in rule.reductions(form):
                yield rule, reduced

    def search(self, form, memo=None):
        """Searches backwards from `form` to the start symbol.

        Returns the list of `DerivationStep` leading from the start symbol to `form`, earliest
        first, or ``None`` if there is no derivation. Forms in `memo` are never visited, and every
        form visited is added to it."""
        form = tuple(form)
        if memo is None:
            memo = {form}
        if not form:
            return None
        trace = self._match_start(form)
        if trace is not None:
            return trace

        # This is a stackless depth first search. Each frame holds a form, the rule that
        # rewrites it forward into the parent frame's form, and the iterator of
        # remaining reductions still to be tried.
        stack = [_SearchFrame(form, None, self._reductions(form))]
        while stack:
            frame = stack[-1]
            for rule, reduced in frame.reductions:
                if reduced in memo:
                    continue
                memo.add(reduced)
                trace = self._match_start(reduced)
                stack.append(_SearchFrame(reduced, rule, None if trace is not None else self._reductions(reduced)))
                if trace is not None:
                    for child, parent in zip(reversed(stack[1:]), reversed(stack[:-1])):
                        trace.append(DerivationStep(child.applied, parent.form))
                    return trace
                break
            else:
                stack.pop()
        return None


_SearchFrame = namedtuple("_SearchFrame", ["form", "applied", "reductions"])


# Choices are tuples with one digit per position of a word, each digit indexing into the
# origin list of the terminal at that position. They are treated as a mixed radix
# counter with the first position least significant.

def instantiate(origins, choice, word):
    """Returns the nonterminal form obtained by replacing each terminal of `word` with the origin
    indicated by `choice`. Raises ``KeyError`` if a symbol of `word` has no origins."""
    result = []
    for digit, symbol in zip(choice, word):
        candidates = origins.get(symbol)
        if not candidates:
            raise KeyError(symbol)
        result.append(candidates[digit])
    return tuple(result)


def advance(choice, digit_counts):
    """Returns the choice following `choice`, or ``None`` once every position has rolled over"""
    choice = list(choice)
    for i, count in enumerate(digit_counts):
        if choice[i] < count - 1:
            choice[i] += 1
            return tuple(choice)
        choice[i] = 0
    return None


def recover_previous_choice(choice, digit_counts):
    """Returns the choice immediately preceding `choice`.
    Raises ``ValueError`` for the all zero choice, which has no predecessor."""
    if not any(choice):
        raise ValueError("The first choice has no predecessor")
    choice = list(choice)
    for i, count in enumerate(digit_counts):
        if choice[i] > 0:
            choice[i] -= 1
            break
        choice[i] = count - 1
    return tuple(choice)


class CandidateEnumerator:
    """Iterates over every nonterminal form a word of terminals could originate from, each exactly
    once and always in the same order.

    This works like a cursor: once a candidate is produced, `counter` has already moved on to the
    next choice (or ``None`` when exhausted). `last_choice` recovers the choice that produced the
    most recent candidate."""
    def __init__(self, grammar, word):
        self.word = tuple(word)
        self.origins = grammar.origins
        for symbol in self.word:
            if not self.origins.get(symbol):
                raise KeyError(symbol)
        #: Number of origins for each position of the word
        self.digit_counts = tuple(len(self.origins[symbol]) for symbol in self.word)
        #: The next choice to instantiate, or ``None`` when every choice has been produced
        self.counter = tuple(0 for _ in self.word)
        #: Number of candidates produced so far
        self.produced = 0

    def __len__(self):
        total = 1
        for count in self.digit_counts:
            total *= count
        return total

    def __iter__(self):
        return self

    def __next__(self):
        if self.counter is None:
            raise StopIteration
        candidate = instantiate(self.origins, self.counter, self.word)
        self.counter = advance(self.counter, self.digit_counts)
        self.produced += 1
        return candidate

    @property
    def last_choice(self):
        """The choice that produced the most recently returned candidate"""
        if self.produced == 0:
            raise ValueError("No candidate has been produced yet")
        if self.counter is None:
            # The last candidate was the final combination, every digit at its maximum
            return tuple(count - 1 for count in self.digit_counts)
        return recover_previous_choice(self.counter, self.digit_counts)


class Derivation:
    """A successful derivation of a word: the forward steps from the start symbol,
    and the variable each terminal was substituted from."""
    def __init__(self, grammar, word, steps, choice):
        self.grammar = grammar
        #: The derived word, as a tuple of terminals
        self.word = tuple(word)
        #: List of `DerivationStep`, first applied first
        self.steps = list(steps)
        #: The choice of origin for each position of the word
        self.choice = tuple(choice)
        #: List of (variable, terminal) pairs, one per position of the word
        self.substitution = [(grammar.origins[terminal][digit], terminal)
                             for digit, terminal in zip(self.choice, self.word)]

    def forms(self):
        """Returns the list of sentential forms, from the start symbol to the nonterminal form"""
        return [(self.grammar.start,)] + [step.form for step in self.steps]

    def verify(self):
        """Replays the derivation forward from the start symbol. Returns true if every step is a valid
        application of its rule and the substitution turns the final form into the word."""
        form = (self.grammar.start,)
        for step in self.steps:
            if step.form not in set(step.rule.applications(form)):
                return False
            form = step.form
        if len(form) != len(self.substitution):
            return False
        for symbol, (variable, terminal) in zip(form, self.substitution):
            if symbol != variable or variable not in self.grammar.origins.get(terminal, ()):
                return False
        return tuple(terminal for _, terminal in self.substitution) == self.word

    def __repr__(self):
        return "Derivation({0!r}, {1} steps)".format(self.word, len(self.steps))

    def __str__(self):
        lines = ["Word derived successfully!"]
        lines.extend(map(_format_step, self.steps))
        lines.append("Replace terminals:")
        lines.extend("{0} --> {1}".format(variable, terminal) for variable, terminal in self.substitution)
        return "\n".join(lines)


class ParseResult:
    """The outcome of `parse`. Truthy if the word was derived."""
    def __init__(self, word, derivation=None, reason=None, index=None, encountered=None, tried=0):
        self.word = tuple(word)
        #: The `Derivation` found, or ``None``
        self.derivation = derivation
        #: A text description of why there is no derivation
        self.reason = reason
        #: Index of the first symbol of the word without an origin, if any
        self.index = index
        #: That symbol
        self.encountered = encountered
        #: Number of candidate forms searched
        self.tried = tried

    @property
    def success(self):
        return self.derivation is not None

    def __bool__(self):
        return self.success

    def __repr__(self):
        if self.success:
            return "ParseResult({0!r}, derived)".format(self.word)
        return "ParseResult({0!r}, {1!r})".format(self.word, self.reason)

    def __str__(self):
        if self.success:
            return str(self.derivation)
        return "No derivation possible."


def parse(grammar, tokens):
    """Decides whether the sequence of terminals ``tokens`` is generated by ``grammar``.

    Each candidate nonterminal form is searched in turn, sharing one memo of visited forms,
    until a derivation is found or every candidate has been tried. Returns a `ParseResult`."""
    word = tuple(tokens)

    for index, symbol in enumerate(word):
        if not grammar.origins.get(symbol):
            if grammar.is_terminal(symbol):
                reason = "No variable produces terminal {0!r}".format(symbol)
            else:
                reason = "Unexpected {0!r}, not a terminal".format(symbol)
            logger.info("no derivation of %r: %s", word, reason)
            return ParseResult(word, reason=reason, index=index, encountered=symbol)

    candidates = grammar.candidates(word)
    # Fresh for every call, and shared by every candidate
    memo = set()
    for candidate in candidates:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("trying candidate %s (%d of %d), memo holds %d forms",
                         " ".join(candidate), candidates.produced, len(candidates), len(memo))
        memo.add(candidate)
        trace = grammar.search(candidate, memo)
        if trace is not None:
            derivation = Derivation(grammar, word, trace, candidates.last_choice)
            logger.info("derived %r after %d candidates", word, candidates.produced)
            return ParseResult(word, derivation, tried=candidates.produced)

    logger.info("no derivation of %r, %d candidates exhausted", word, candidates.produced)
    return ParseResult(word, reason="Search space exhausted", tried=candidates.produced)


__all__ = [
    "START",
    "GrammarError",
    "Rule",
    "rule_from_symbols",
    "DerivationStep",
    "Grammar",
    "instantiate",
    "advance",
    "recover_previous_choice",
    "CandidateEnumerator",
    "Derivation",
    "ParseResult",
    "parse",
]
