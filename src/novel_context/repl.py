"""Interactive REPL for inspecting assembled and compressed contexts."""

from __future__ import annotations

import logging
import os
import sys

from .config import EngineConfig
from .engine import NovelContextEngine
from .errors import ContextError
from .sqlite_store import SqliteRecordStore
from .telemetry import ContextTracer, TelemetryConfig, set_default_tracer

_HELP = """Commands:
  build <project-id> <document-id> <position>   assemble the full context
  compress [max-tokens]                          fit the last context into a budget
  quality                                        score the last context
  stats <project-id>                             stored document/character figures
  show                                           print the last context
  help, quit/exit"""


def main() -> None:
    """Entry point for the ``novel-context-repl`` command.

    Reads the SQLite database path from the first positional argument (or
    ``NOVEL_CONTEXT_DB``) and engine limits from ``NOVEL_CONTEXT_*``.
    ``--trace stdout|otlp`` exports spans for every command.
    """
    import argparse

    parser = argparse.ArgumentParser(description="Inspect continuation contexts")
    parser.add_argument("database", nargs="?", default=None, help="SQLite database path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--trace",
        choices=("none", "stdout", "otlp"),
        default="none",
        help="Span exporter (default: none)",
    )
    opts = parser.parse_args()

    db_path = opts.database or os.environ.get("NOVEL_CONTEXT_DB", "")
    if not db_path:
        print("Usage: novel-context-repl <database> (or set NOVEL_CONTEXT_DB)")
        sys.exit(2)
    if opts.debug:
        logging.basicConfig(level=logging.DEBUG)

    tracer = ContextTracer(TelemetryConfig(exporter=opts.trace))
    tracer.init()
    set_default_tracer(tracer)

    store = SqliteRecordStore(db_path)
    engine = NovelContextEngine(store, EngineConfig.from_env())
    print("novel-context REPL")
    print(f"Database: {db_path}")
    if opts.trace != "none":
        print(f"Tracing: {opts.trace}")
    print("Type 'help' for commands, 'quit' or 'exit' to exit")
    print()

    context = ""
    try:
        while True:
            try:
                user_input = input("ctx> ")
            except (EOFError, KeyboardInterrupt):
                print("\nBye!")
                break

            parts = user_input.split()
            if not parts:
                continue
            command, args = parts[0], parts[1:]
            if command in ("quit", "exit"):
                print("Bye!")
                break
            if command == "help":
                print(_HELP)
                continue
            with tracer.span("repl/command", {"repl.command": command}):
                try:
                    context = _dispatch(engine, command, args, context)
                except ContextError as e:
                    tracer.record_event("repl.error", {"error": str(e)})
                    print(f"  Error: {e}")
                except ValueError as e:
                    tracer.record_event("repl.invalid_argument", {"error": str(e)})
                    print(f"  Invalid argument: {e}")
    finally:
        store.close()
        tracer.shutdown()
        set_default_tracer(ContextTracer())


def _dispatch(engine: NovelContextEngine, command: str, args: list[str], context: str) -> str:
    """Run one REPL command; returns the (possibly new) current context."""
    if command == "build":
        if len(args) != 3:
            print("  Usage: build <project-id> <document-id> <position>")
            return context
        context = engine.build_context(args[0], args[1], int(args[2]))
        _print_summary(engine, context)
        return context
    if command == "compress":
        if not context:
            print("  Nothing to compress; run 'build' first")
            return context
        budget = int(args[0]) if args else engine.config.default_max_tokens
        compressed = engine.compress_context(context, budget)
        _print_summary(engine, compressed)
        print(compressed)
        return context
    if command == "quality":
        report = engine.analyze_context_quality(context)
        print(f"  Characters: {report.character_info_quality}")
        print(f"  World:      {report.world_building_quality}")
        print(f"  Narrative:  {report.narrative_coherence_quality}")
        print(f"  Overall:    {report.overall_quality}")
        for suggestion in report.suggestions:
            print(f"  - {suggestion}")
        return context
    if command == "stats":
        if len(args) != 1:
            print("  Usage: stats <project-id>")
            return context
        stats = engine.context_stats(args[0])
        print(f"  Documents:  {stats.document_count}")
        print(f"  Characters: {stats.character_count}")
        print(f"  Text chars: {stats.total_characters} (~{stats.estimated_tokens} tokens)")
        return context
    if command == "show":
        print(context or "  (no context yet)")
        return context
    print(f"  Unknown command '{command}'; type 'help'")
    return context


def _print_summary(engine: NovelContextEngine, context: str) -> None:
    report = engine.analyze_context_quality(context)
    print(f"  {len(context)} chars, ~{report.estimated_tokens} tokens, quality {report.overall_quality}")


if __name__ == "__main__":
    main()
