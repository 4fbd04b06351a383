import dataclasses
import sys

from rich.console import Console

from argopt import *

__prog__ = "greet"


@dataclasses.dataclass
class Greeter:
    names: list[str] = option(
        delimiter=",",
        required=True,
        metavar="name1,name2,name3,...",
        descr='The names of the people to greet delimited by ","; this option is required',
        default_factory=list,
    )
    repeat: int = option(descr="Specifies how many times to repeat, default is 1", metavar="times", default=1)
    disable_exclamation: bool = complex_flag(
        "non_exclamated_names",
        aliases=("disable", "d"),
        descr=(
            "Use this option to disable appending an exclamation point for certain names. "
            "If no names are specified, the exclamation is disabled for ALL names."
        ),
        metavar="name1,name2,name3...",
    )
    non_exclamated_names: list[str] = excluded(delimiter=",", default_factory=list)
    greeting: str | None = values(descr="The greeting to display for each name", metavar="greeting")
    show_usage: bool = flag(name="help", aliases=("?", "h", "usage"), descr="Show %s usage details" % __prog__)


def main(argv=None):
    console = Console()
    result = parse(Greeter, sys.argv[1:] if argv is None else argv)
    if not result.valid:
        report(result.errors)
        return 2

    greeter = result.contract
    if greeter.show_usage or not greeter.greeting or not greeter.names:
        print_usage(Greeter, console=console)
        return 0 if greeter.show_usage else 1

    for name in greeter.names:
        plain = name in greeter.non_exclamated_names or (
            greeter.disable_exclamation and not greeter.non_exclamated_names
        )
        for _ in range(greeter.repeat):
            console.print("%s, %s%s" % (greeter.greeting, name, "" if plain else "!"), markup=False, highlight=False)
    return 0


if __name__ == '__main__':
    sys.exit(main())
