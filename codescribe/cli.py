"""CLI entrypoints for codescribe commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .augment.export import WORKFLOW_EXPORT_FORMATS
from .chat import ChatResponse
from .documents.constants import COMPLIANCE_OPTIONS, DOCUMENT_TYPES, STANDARDS
from .errors import CodescribeError
from .export import analysis_to_dict
from .logging import configure_logging
from .orchestrator import Orchestrator, resolve_document_config


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .zip archive (defaults to current directory).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the result to this file instead of stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codescribe",
        description="Analyze a source project and generate documentation from it.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Generate the standard project documentation.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)
    variant = analyze_parser.add_mutually_exclusive_group()
    variant.add_argument(
        "--ai",
        action="store_true",
        help="Emit the dense AI-optimized variant instead of the human document.",
    )
    variant.add_argument(
        "--json",
        action="store_true",
        help="Emit the structured analysis as JSON.",
    )

    professional_parser = subparsers.add_parser(
        "professional",
        help="Generate a professional document from the section catalog.",
    )
    _add_verbose_option(professional_parser, suppress_default=True)
    _add_path_argument(professional_parser)
    professional_parser.add_argument(
        "--type",
        dest="document_type",
        choices=sorted(DOCUMENT_TYPES),
        default=None,
        help="Document type (defaults to .codescribe.yml or technical-architecture).",
    )
    professional_parser.add_argument("--standard", choices=sorted(STANDARDS), default=None)
    professional_parser.add_argument("--company", default=None, help="Company name for the header.")
    professional_parser.add_argument("--author", default=None)
    professional_parser.add_argument(
        "--compliance",
        nargs="+",
        choices=sorted(COMPLIANCE_OPTIONS),
        default=None,
        help="Compliance frameworks to note in the document.",
    )
    professional_parser.add_argument(
        "--required-only",
        action="store_true",
        help="Skip optional sections of the document type.",
    )
    professional_parser.add_argument("--format", choices=("markdown", "html"), default="markdown")

    workflows_parser = subparsers.add_parser(
        "workflows",
        help="Generate workflows and user stories from the extracted workflow analysis.",
    )
    _add_verbose_option(workflows_parser, suppress_default=True)
    _add_path_argument(workflows_parser)
    workflows_parser.add_argument("--format", choices=WORKFLOW_EXPORT_FORMATS, default="markdown")
    workflows_parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the model call and use the deterministic fallback.",
    )

    ask_parser = subparsers.add_parser("ask", help="Answer a question about the project's code.")
    _add_verbose_option(ask_parser, suppress_default=True)
    ask_parser.add_argument("question", help="Question to ask, quoted.")
    _add_path_argument(ask_parser)
    ask_parser.add_argument(
        "--offline",
        action="store_true",
        help="Never call the model; unmatched questions get a canned answer.",
    )
    ask_parser.add_argument("--json", action="store_true", help="Emit the full answer as JSON.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codescribe commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        orchestrator = Orchestrator.for_path(args.path)
        root = orchestrator.load_path(args.path)
        if args.command == "analyze":
            run = orchestrator.run_analysis(root)
            if args.json:
                text = json.dumps(analysis_to_dict(run.project), indent=2, ensure_ascii=False) + "\n"
            elif args.ai:
                text = run.document.ai_optimized
            else:
                text = run.document.content
            _emit(text.encode("utf-8"), args.output)
        elif args.command == "professional":
            document_config = resolve_document_config(
                orchestrator.config.document,
                document_type=args.document_type,
                standard=args.standard,
                output_format=args.format,
                company_name=args.company,
                author=args.author,
                compliance=args.compliance,
                include_optional=not args.required_only,
            )
            run = orchestrator.run_professional(root, document_config)
            payload = orchestrator.export(run.document, args.format, project_name=run.project.name)
            _emit(payload.data, args.output)
        elif args.command == "workflows":
            run = orchestrator.run_workflows(root, offline=bool(args.offline))
            payload = orchestrator.export_workflows(
                run.outcome.result, args.format, project_name=run.project.name
            )
            if run.outcome.used_fallback:
                print(f"Using fallback workflows: {run.outcome.reason}", file=sys.stderr)
            _emit(payload.data, args.output)
        elif args.command == "ask":
            run = orchestrator.run_chat(root, args.question, offline=bool(args.offline))
            if args.json:
                text = json.dumps(run.response.to_dict(), indent=2, ensure_ascii=False) + "\n"
            else:
                text = _render_answer(run.response)
            _emit(text.encode("utf-8"), args.output)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except CodescribeError as exc:
        parser.exit(1, f"codescribe {args.command} failed: {exc}\n")


def _render_answer(response: ChatResponse) -> str:
    parts = [response.content]
    for snippet in response.snippets:
        if snippet.filename:
            parts.append(f"`{snippet.filename}`")
        parts.append(f"```{snippet.language}\n{snippet.code}\n```")
    if response.suggestions:
        parts.append("Try asking:\n" + "\n".join(f"- {item}" for item in response.suggestions))
    return "\n\n".join(parts) + "\n"


def _emit(data: bytes, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(data.decode("utf-8"))
        sys.stdout.flush()
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    print(f"Wrote {_relativize(output)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
