"""
End-to-end tests for the greeter demo (main.py).

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

import main


class GreeterTest(TestCase):

    def run_main(self, *argv):
        stdout = Console(file=io.StringIO(), width=100, color_system=None, force_terminal=False)
        stderr = Console(file=io.StringIO(), width=100, color_system=None, force_terminal=False)
        with mock.patch.object(main, "Console", return_value=stdout), \
                mock.patch("argopt.faults.Console", return_value=stderr):
            code = main.main(list(argv))
        self.errors = stderr.file.getvalue()
        return code, stdout.file.getvalue()

    def testGreets(self):
        code, output = self.run_main("--names=Alice,Bob", "Hello")
        self.assertEqual(code, 0)
        self.assertEqual(output, "Hello, Alice!\nHello, Bob!\n")

    def testRepeat(self):
        code, output = self.run_main("--names", "Alice", "--repeat", "2", "Hi")
        self.assertEqual(output, "Hi, Alice!\nHi, Alice!\n")

    def testDisableForAllNames(self):
        code, output = self.run_main("--names=Alice,Bob", "-d", "Hello")
        self.assertEqual(output, "Hello, Alice\nHello, Bob\n")

    def testDisableForSomeNames(self):
        code, output = self.run_main("--names=Alice,Bob", "--disable+=Bob", "Hello")
        self.assertEqual(output, "Hello, Alice!\nHello, Bob\n")

    def testUsage(self):
        code, output = self.run_main("-?")
        self.assertEqual(code, 0)
        self.assertIn("USAGE", output)
        self.assertIn("--names=name1,name2,name3,...", output)

    def testMissingGreetingShowsUsage(self):
        code, output = self.run_main("--names=Alice")
        self.assertEqual(code, 1)
        self.assertIn("OPTIONS", output)

    def testInvalidInput(self):
        code, output = self.run_main("--names=Alice", "--repeat=twice", "Hello")
        self.assertEqual(code, 2)
        self.assertEqual(output, "")
        self.assertIn("1 parsing error", self.errors)
        self.assertIn("--repeat=twice", self.errors)


if __name__ == "__main__":
    unittest.main()
