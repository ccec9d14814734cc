import json
import os
from typing import Any, Dict, List, Optional, TextIO

from .config import PIPELINE_STAGES
from .diagnostics import RunContext
from .interpreter import Interpreter
from .parser.core.parser import parse
from .scanner.scanner import scan
from .semantic_analyser.core.resolver import describe_resolution, resolve
from .utils import ArtifactEncoder


class InterpreterPipeline:
    """
    Orchestrates one run from source text to execution.
    This class manages the flow of data between the stages and applies the
    error policy: any scan or parse error stops the run before resolution,
    any resolution error stops it before execution.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str] = None,
        dump_stages: List[str] = [],
        stop_after_stage: Optional[str] = None,
        interpreter: Optional[Interpreter] = None,
        context: Optional[RunContext] = None,
        output: Optional[TextIO] = None,
    ):
        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.dump_stages = dump_stages
        self.stop_after_stage = stop_after_stage
        self.context = context if context is not None else RunContext()
        self.interpreter = interpreter if interpreter is not None else Interpreter(self.context, output)
        # The interpreter reports runtime errors to the context of the current run.
        self.interpreter.context = self.context
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []

    def run(self) -> RunContext:
        """
        Executes the pipeline stage by stage.
        The product of each stage is passed as input to the next.
        """
        # --- Stage 1: Scanning ---
        tokens = self._run_stage("tokens", scan, self.source_content, self.context)
        if self.stop_after_stage == "tokens":
            return self.context

        # --- Stage 2: Parsing ---
        statements = self._run_stage("ast", parse, tokens, self.context)
        if self.context.had_error or self.stop_after_stage == "ast":
            return self.context

        # --- Stage 3: Resolution ---
        resolve(statements, self.interpreter, self.context)
        # The table covers every line a REPL session has resolved, so only flatten it on request.
        if "resolution" in self.dump_stages or self.stop_after_stage == "resolution":
            self._record("resolution", describe_resolution(self.interpreter.locals))
        if self.context.had_error or self.stop_after_stage == "resolution":
            return self.context

        # --- Stage 4: Execution ---
        self.interpreter.interpret(statements)
        return self.context

    @property
    def statements(self):
        return self.artifacts.get("ast", [])

    def _run_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        result = func(*args, **kwargs)
        self._record(name, result)
        return result

    def _record(self, name: str, result: Any):
        self.artifacts[name] = result
        self.results.append(result)
        if name in self.dump_stages:
            self.save_artifact(name, result)

    def save_artifact(self, name: str, data: Any):
        """Saves an intermediate artifact to a JSON file with a user-friendly name."""
        if name not in PIPELINE_STAGES:
            raise ValueError(f"Unknown pipeline stage '{name}'. Expected one of: {', '.join(PIPELINE_STAGES)}.")

        if self.file_path == "<stdin>":
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]

        output_path = f"{base_name}.{name}.json"

        print(f"--- Saving artifact '{name}' to {output_path} ---")

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=False, cls=ArtifactEncoder)
        except OSError as e:
            print(f"Error: Could not save artifact '{name}': {e}")


def run_source(
    source_content: str,
    file_path: Optional[str] = None,
    dump_stages: List[str] = [],
    stop_after_stage: Optional[str] = None,
    interpreter: Optional[Interpreter] = None,
    context: Optional[RunContext] = None,
    output: Optional[TextIO] = None,
) -> RunContext:
    """High-level entry point: scan, parse, resolve and execute one piece of source."""
    pipeline = InterpreterPipeline(source_content, file_path, dump_stages, stop_after_stage, interpreter, context, output)
    return pipeline.run()
