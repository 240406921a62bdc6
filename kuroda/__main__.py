import argparse
import cmd
import logging
import sys

from . import GrammarError, parse
from .grammar_file import load

logger = logging.getLogger(__name__)

HELP = """Please enter a command to use this CSG parser:
 *  create <grammar file>
 *  parse <word>
(recall that words consist of space separated symbols)
 *  printVariables
 *  printTerminals
 *  printTermToVars
 *  printRules
 *  exit | quit | q"""


class Shell(cmd.Cmd):
    """Interactive shell for loading grammars and testing words against them"""
    prompt = "> "

    def __init__(self, grammar=None, **kwargs):
        cmd.Cmd.__init__(self, **kwargs)
        self.grammar = grammar

    def _print(self, *lines):
        for line in lines:
            print(line, file=self.stdout)

    def _listing(self, title, lines):
        self._print(title + ":", "--------", *lines)
        self._print("--------")

    def _needs_grammar(self):
        if self.grammar is None:
            self._print("Grammar undefined.")
            return False
        return True

    def emptyline(self):
        pass

    def default(self, line):
        self._print("Input not recognized. See help for valid commands")

    def do_help(self, arg):
        self._print(HELP)

    def do_create(self, arg):
        path = arg.strip()
        if not path:
            self._print("Usage: create <grammar file>")
            return
        self._print("Creating parser...")
        try:
            self.grammar = load(path)
        except (OSError, GrammarError) as e:
            logger.debug("failed to load %s", path, exc_info=True)
            self._print("Could not load grammar: {0}".format(e))
            return
        self._print("done!")

    def do_parse(self, arg):
        if self._needs_grammar():
            self._print(str(parse(self.grammar, arg.split())))

    def do_printVariables(self, arg):
        if self._needs_grammar():
            self._listing("Variables", self.grammar.variables)

    def do_printTerminals(self, arg):
        if self._needs_grammar():
            self._listing("Terminals", self.grammar.terminals)

    def do_printTermToVars(self, arg):
        if self._needs_grammar():
            self._listing("Terminal to Vars", ["{0}: {1}".format(terminal, " ".join(variables))
                                               for terminal, variables in self.grammar.origins.items()])

    def do_printRules(self, arg):
        if self._needs_grammar():
            self._listing("Rules", map(str, self.grammar.rules))

    def do_exit(self, arg):
        return True

    do_quit = do_exit
    do_q = do_exit

    def do_EOF(self, arg):
        self._print("")
        return True


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="kuroda",
        description="Decide membership of words in a context sensitive grammar in Kuroda Normal Form.")
    parser.add_argument("grammar", nargs="?", help="grammar file to load")
    parser.add_argument("-w", "--word", help="space separated terminals to parse, then exit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more, repeat for debug output")
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.word is not None and args.grammar is None:
        parser.error("--word requires a grammar file")

    grammar = None
    if args.grammar is not None:
        try:
            grammar = load(args.grammar)
        except (OSError, GrammarError) as e:
            print("Could not load grammar: {0}".format(e), file=sys.stderr)
            return 2

    if args.word is not None:
        result = parse(grammar, args.word.split())
        print(result)
        return 0 if result else 1

    Shell(grammar).cmdloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
