"""Scriptable stand-in for an interactive CLI tool.

Usage: fake_tool.py <scenario> [args...]
"""

import subprocess
import sys
import time


def say(text: str, newline: bool = True) -> None:
    sys.stdout.write(text + ("\n" if newline else ""))
    sys.stdout.flush()


def ask_menu(cue: bool) -> int:
    say("Scanning project files")
    say("Where do you want to save files?")
    for number, option in enumerate(("foo", "bar", "baz"), start=1):
        say(f"{number}. {option}")
    if cue:
        say("Enter your choice [1/3]: ", newline=False)
    answer = sys.stdin.buffer.readline()
    if not answer:
        say("No input received")
        return 3
    say(f"You chose: {answer!r}")
    return 0


def fail(count: int, status: int) -> int:
    for index in range(1, count + 1):
        say(f"line {index}")
    return status


def main() -> int:
    scenario = sys.argv[1]
    if scenario == "menu":
        return ask_menu(cue=True)
    if scenario == "menu-silent":
        return ask_menu(cue=False)
    if scenario == "fail":
        return fail(int(sys.argv[2]), int(sys.argv[3]))
    if scenario == "partial":
        say("first line")
        say("no newline at end", newline=False)
        return 0
    if scenario == "env":
        import os

        say(f"cwd={os.getcwd()}")
        say(f"key={os.environ.get('CTO_TEST_VALUE', '')}")
        return 0
    if scenario == "orphan":
        # Background child inherits stdout and outlives the tool.
        subprocess.Popen([sys.executable, "-c", "import time; time.sleep(12)"])
        say("Continue?")
        say("1. yes")
        say("2. no")
        sys.stdin.buffer.readline()
        return 1
    if scenario == "hang":
        say("Continue?")
        say("1. yes")
        say("2. no")
        sys.stdin.buffer.read()
        # Ignore EOF and keep running until terminated.
        time.sleep(30)
        return 0
    say(f"unknown scenario {scenario}")
    return 64


if __name__ == "__main__":
    sys.exit(main())
