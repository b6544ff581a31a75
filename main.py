from rich.pretty import pprint

from sextant import *

__prog__ = "sextant-demo"

config = {"verbose": False, "output": None, "files": []}

verbose = Opt(Binding(config, "verbose"))["-v"]["--verbose"].help("say more")
output = Opt(Binding(config, "output"), "path")["-o"]["--output"].help("where to write")
files = Arg(Binding(config, "files"), "file").required()


@opt("-h", "--help")
def on_help(flag):
    for parser in (verbose, output, files):
        for entry in parser.get_help_text():
            pprint(entry)
    return Outcome.SHORT_CIRCUIT_ALL


def main(arguments):
    parsers = (on_help, verbose, output, files)
    matches = dict.fromkeys(parsers, 0)
    cursor = tokenize(arguments)
    while cursor:
        for parser in parsers:
            if parser.get_cardinality().is_exhausted(matches[parser]):
                continue
            result = parser.parse(cursor)
            if not result:
                exit_with(result.fault)
            if result.outcome is Outcome.SHORT_CIRCUIT_ALL:
                return
            if result.outcome is Outcome.MATCHED:
                matches[parser] += 1
                cursor = result.cursor
                break
        else:
            exit_with(ParserRuntimeError("unexpected token %r" % cursor.current().text))
    for parser in parsers:
        checked = parser.get_cardinality().check(matches[parser], parser.get_usage_text())
        if not checked:
            exit_with(checked.fault)
    pprint(config)


if __name__ == '__main__':
    main(__import__("sys").argv[1:])
