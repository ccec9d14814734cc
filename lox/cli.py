import argparse
import os
import sys

from .config import EXIT_NO_INPUT, EXIT_RUNTIME_ERROR, EXIT_STATIC_ERROR
from .diagnostics import RunContext
from .interpreter import Interpreter
from .parser.ast_printer import AstPrinter
from .pipeline import InterpreterPipeline
from .utils import TerminalColors

# This provides a single source of truth for stage names and their order.
STAGE_MAP = {
    "1": ("tokens", "Token Stream"),
    "2": ("ast", "Abstract Syntax Tree"),
    "3": ("resolution", "Scope Distance Table"),
}


def report_diagnostics(context: RunContext):
    for diagnostic in context.diagnostics:
        print(f"{TerminalColors.RED}{diagnostic}{TerminalColors.RESET}", file=sys.stderr)


def run_file(path: str, stop_after_stage=None, print_ast: bool = False) -> int:
    """Runs a whole script. Returns the process exit code."""
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()

    dump_stages = [stop_after_stage] if stop_after_stage else []
    pipeline = InterpreterPipeline(source, file_path=path, dump_stages=dump_stages, stop_after_stage=stop_after_stage)
    context = pipeline.run()

    if print_ast:
        print(AstPrinter().print_program(pipeline.statements))

    report_diagnostics(context)
    if context.had_error:
        return EXIT_STATIC_ERROR
    if context.had_runtime_error:
        return EXIT_RUNTIME_ERROR
    return 0


def run_prompt(print_ast: bool = False) -> int:
    """
    Reads and runs one line at a time. Definitions persist across lines;
    an error on one line is reported and the prompt continues.
    """
    context = RunContext()
    interpreter = Interpreter(context)

    while True:
        try:
            line = input("> ")
        except EOFError:
            print()
            return 0

        pipeline = InterpreterPipeline(line, interpreter=interpreter, context=context)
        pipeline.run()
        if print_ast:
            print(AstPrinter().print_program(pipeline.statements))
        report_diagnostics(context)
        context.reset()


def main(argv=None):
    # Dynamically generate help text for the --compile argument
    stage_help_text = "Stop after a specific stage and save its artifact as JSON. "
    for key, (name, desc) in STAGE_MAP.items():
        stage_help_text += f"'{key}' for {desc}. "
    stage_help_text += "Omitting this flag runs the script."

    parser = argparse.ArgumentParser(prog="lox", description="Run a Lox script, or start an interactive prompt.")
    parser.add_argument(
        "script",
        nargs="?",
        default=None,
        help="The path to the .lox script. Omit to start the interactive prompt.",
    )
    parser.add_argument("-c", "--compile", type=str, choices=STAGE_MAP.keys(), help=stage_help_text)
    parser.add_argument("--print-ast", action="store_true", help="Print the parsed statements in parenthesized form.")

    args = parser.parse_args(argv)

    if args.compile and not args.script:
        parser.error("--compile requires a script path.")

    stop_after_stage = STAGE_MAP[args.compile][0] if args.compile else None

    try:
        if args.script:
            exit_code = run_file(os.path.abspath(args.script), stop_after_stage, args.print_ast)
            if stop_after_stage and exit_code == 0:
                stage_desc = STAGE_MAP[args.compile][1]
                print(f"\n{TerminalColors.GREEN}--- Stage '{args.compile} ({stage_desc})' completed ---{TerminalColors.RESET}")
        else:
            exit_code = run_prompt(args.print_ast)
    except FileNotFoundError:
        print(f"{TerminalColors.RED}ERROR: Script file '{args.script}' not found.{TerminalColors.RESET}", file=sys.stderr)
        exit_code = EXIT_NO_INPUT
    except UnicodeDecodeError:
        print(f"{TerminalColors.RED}ERROR: Script file '{args.script}' is not valid UTF-8.{TerminalColors.RESET}", file=sys.stderr)
        exit_code = EXIT_STATIC_ERROR
    except OSError as e:
        print(f"{TerminalColors.RED}ERROR: Could not read script file '{args.script}': {e.strerror}{TerminalColors.RESET}", file=sys.stderr)
        exit_code = EXIT_NO_INPUT
    except KeyboardInterrupt:
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
