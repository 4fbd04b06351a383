"""
Usage formatter tests.

Scope
- wrap(): word boundaries, hard breaks, edge widths.
- get_description(): byte-exact reference output, section presence, alias rows,
  Windows rendering, default executable, determinism.
- print_usage(): rich console output.

Conventions
- Test method names follow CamelCase per project convention.
"""
import dataclasses
import enum
import io
import sys
import typing
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argopt import (
    OptionStyle,
    complex_flag,
    excluded,
    flag,
    get_description,
    option,
    print_usage,
    values,
    wrap,
)

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipisicing elit, sed do eiusmod tempor incididunt ut labore "
    "et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris nisi ut "
    "aliquip ex ea commodo consequat. Duis aute irure dolor in reprehenderit in voluptate velit esse cillum "
    "dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt in culpa qui "
    "officia deserunt mollit anim id est laborum."
)


class MyEnum(enum.Enum):
    Foo = 1
    Bar = 2


@dataclasses.dataclass
class OptionContract:
    Lulz: str = option(descr="Set for ultimate lulz!", metavar="teh_lulz")
    CaseTest: str = option(case_sensitive=True, descr="Tests for case sensitivity", metavar="foo", required=True)
    NamedTest: str = option(name="lollersk8", descr="", required=True)
    AliasTest: str = option(aliases=("alias", "a"), descr=LOREM, metavar="string")
    FlagTest: bool = flag(descr=(
        "This is a long description and I hope it goes really well and it's going pretty good but not as "
        "good as I was hoping I hope it finishes soon because I can't think of anything else to write oh god "
        "what's happening?!"
    ))
    EnumTest: MyEnum = MyEnum.Foo
    BoolTest: bool = option(descr="Tests boolean crap", metavar="true|false", default=False)
    IntTest: int = 0
    DoubleTest: float = 0.0
    ComplexFlagTest: bool = complex_flag("ComplexAuxiliary")
    ComplexAuxiliary: str = excluded()
    ArrayTest: list[str] = option(delimiter=",")
    IntArrayTest: list[int] = option(delimiter="|")
    EnumArrayTest: list[MyEnum] = option(delimiter=",")
    NotAnOption: str = excluded()
    Value: typing.Optional[str] = values(
        descr="This is the value that you should be passing on the command line. It is different from an option.",
        metavar="files",
    )


EXPECTED = "\n".join([
    "",
    "USAGE",
    "awesome.exe --CaseTest=foo --lollersk8 [--AliasTest=string]",
    "[--ArrayTest] [--BoolTest=true|false] [--ComplexFlagTest] [--DoubleTest]",
    "[--EnumArrayTest] [--EnumTest] [--FlagTest] [--IntArrayTest] [--IntTest]",
    "[--Lulz=teh_lulz] files",
    "",
    "ARGUMENTS",
    "files                  This is the value that you should be passing on",
    "                       the command line. It is different from an option.",
    "",
    "OPTIONS",
    "--AliasTest=string     Lorem ipsum dolor sit amet, consectetur",
    " -a                    adipisicing elit, sed do eiusmod tempor",
    " -alias                incididunt ut labore et dolore magna aliqua. Ut",
    "                       enim ad minim veniam, quis nostrud exercitation",
    "                       ullamco laboris nisi ut aliquip ex ea commodo",
    "                       consequat. Duis aute irure dolor in reprehenderit",
    "                       in voluptate velit esse cillum dolore eu fugiat",
    "                       nulla pariatur. Excepteur sint occaecat cupidatat",
    "                       non proident, sunt in culpa qui officia deserunt",
    "                       mollit anim id est laborum.",
    "--ArrayTest            ",
    "--BoolTest=true|false  Tests boolean crap",
    "--CaseTest=foo         Tests for case sensitivity",
    "--ComplexFlagTest[+|-] ",
    "--DoubleTest           ",
    "--EnumArrayTest        ",
    "--EnumTest             ",
    "--FlagTest             This is a long description and I hope it goes",
    "                       really well and it's going pretty good but not as",
    "                       good as I was hoping I hope it finishes soon",
    "                       because I can't think of anything else to write",
    "                       oh god what's happening?!",
    "--IntArrayTest         ",
    "--IntTest              ",
    "--lollersk8            ",
    "--Lulz=teh_lulz        Set for ultimate lulz!",
    "",
])


class TestWrap(TestCase):

    def testShortText(self):
        self.assertEqual(wrap("short", 10), ["short"])

    def testExactWidth(self):
        self.assertEqual(wrap("abcde", 5), ["abcde"])

    def testBreaksAtTheLastSpace(self):
        self.assertEqual(wrap("aaa bbb ccc", 7), ["aaa bbb", "ccc"])
        self.assertEqual(wrap("aaa bbb ccc", 8), ["aaa bbb", "ccc"])
        self.assertEqual(wrap("aaa bbb ccc", 6), ["aaa", "bbb", "ccc"])

    def testNeverSplitsAWordWhenASpaceFits(self):
        for line in wrap(LOREM, 30):
            with self.subTest(line=line):
                self.assertLessEqual(len(line), 30)
                self.assertFalse(line.startswith(" "))
        self.assertEqual(" ".join(wrap(LOREM, 30)), LOREM)

    def testRunsOfSpacesAreDropped(self):
        self.assertEqual(wrap("aaa  bbb", 3), ["aaa", "bbb"])
        self.assertEqual(wrap("aaa  bbb", 4), ["aaa", "bbb"])
        self.assertEqual(wrap("Hello world.  This is", 12), ["Hello world.", "This is"])

    def testHardBreak(self):
        self.assertEqual(wrap("abcdefghij", 4), ["abcd", "efgh", "ij"])
        self.assertEqual(wrap("ab abcdefgh", 4), ["ab", "abcd", "efgh"])

    def testWidthOne(self):
        self.assertEqual(wrap("ab c", 1), ["a", "b", "c"])

    def testEmptyText(self):
        self.assertEqual(wrap("", 10), [""])

    def testInvalidWidth(self):
        with self.assertRaises(ValueError):
            wrap("text", 0)


class TestDescription(TestCase):

    def testReferenceOutput(self):
        self.assertEqual(get_description(OptionContract, "awesome.exe", 72), EXPECTED)

    def testInstanceGivesTheSameOutput(self):
        self.assertEqual(get_description(OptionContract(), "awesome.exe", 72), EXPECTED)

    def testDeterminism(self):
        self.assertEqual(
            get_description(OptionContract, "awesome.exe", 50),
            get_description(OptionContract, "awesome.exe", 50),
        )

    def testLinesRespectTheWidth(self):
        for line in get_description(OptionContract, "awesome.exe", 60).splitlines():
            with self.subTest(line=line):
                self.assertLessEqual(len(line.rstrip()), 60)

    def testAliasesOutliveTheDescription(self):
        @dataclasses.dataclass
        class Contract:
            help: bool = flag(descr="Show usage", aliases=("?", "h", "usage"))

        self.assertEqual(get_description(Contract, "app", 80), "\n".join([
            "",
            "USAGE",
            "app [--help]",
            "",
            "OPTIONS",
            "--help  Show usage",
            " -?     ",
            " -h     ",
            " -usage ",
            "",
        ]))

    def testCollectorOnly(self):
        @dataclasses.dataclass
        class Contract:
            files: list[str] = values(default_factory=list)

        self.assertEqual(get_description(Contract, "app"), "\nUSAGE\napp files\n\nARGUMENTS\nfiles \n")

    def testEmptyContract(self):
        @dataclasses.dataclass
        class Contract:
            pass

        self.assertEqual(get_description(Contract, "app"), "\nUSAGE\napp\n")

    def testWindowsStyle(self):
        @dataclasses.dataclass
        class Contract:
            output: str = option(aliases="o", metavar="path", required=True)
            warn: bool = complex_flag("codes", descr="Warnings as errors")
            codes: list[int] = excluded(delimiter=",")

        self.assertEqual(get_description(Contract, "tool.exe", 80, OptionStyle.WINDOWS), "\n".join([
            "",
            "USAGE",
            "tool.exe /output:path [/warn]",
            "",
            "OPTIONS",
            "/output:path ",
            " /o          ",
            "/warn[+|-]   Warnings as errors",
            "",
        ]))

    def testDefaultExecutableFromMain(self):
        @dataclasses.dataclass
        class Contract:
            pass

        with mock.patch.object(sys.modules["__main__"], "__prog__", "greet", create=True):
            self.assertEqual(get_description(Contract), "\nUSAGE\ngreet\n")

    def testDefaultExecutableFromArgv(self):
        @dataclasses.dataclass
        class Contract:
            pass

        with mock.patch.object(sys, "argv", ["/usr/local/bin/greet"]), \
                mock.patch.object(sys.modules["__main__"], "__prog__", None, create=True):
            self.assertEqual(get_description(Contract), "\nUSAGE\ngreet\n")

    def testInvalidArguments(self):
        with self.assertRaises(ValueError):
            get_description(OptionContract, "app", 0)
        with self.assertRaises(TypeError):
            get_description(OptionContract, "app", 80, "unix")


class TestPrintUsage(TestCase):

    def testPrintsThroughRich(self):
        console = Console(file=io.StringIO(), width=72, color_system=None, force_terminal=False)
        print_usage(OptionContract, "awesome.exe", console=console)
        self.assertEqual(console.file.getvalue(), EXPECTED)

    def testMarkupIsNotInterpreted(self):
        @dataclasses.dataclass
        class Contract:
            tag: str = option(descr="[bold]literal[/bold]")

        console = Console(file=io.StringIO(), width=80, color_system=None, force_terminal=False)
        print_usage(Contract, "app", console=console)
        self.assertIn("[bold]literal[/bold]", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
