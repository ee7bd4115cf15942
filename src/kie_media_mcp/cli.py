"""
kie CLI: run Kie.ai nodes from the shell.

Usage:
    kie nodes
    kie describe grokImagine
    kie run zImage --params '{"prompt": "a red fox"}'
    kie run seedream --items @items.json --continue-on-fail
    kie run veo3 --params '{"prompt": "waves"}' --dry-run
    kie status <task_id>
    kie status <task_id> --raw
    kie upload https://example.com/cat.png --upload-path images
    kie upload --file ./cat.png
    kie credits
    kie --domain https://api.kie.ai credits
"""

import argparse
import base64
import json
import mimetypes
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from . import nodes, runner
from .cli_utils import (
    EXIT_ERROR,
    EXIT_OK,
    EXIT_PARTIAL,
    EXIT_VALIDATION,
    _add_output_args,
    _error,
    _exit_code_for_error,
    _is_pretty,
    _output,
    _parse_json_arg,
)
from .client import Request, get_client
from .errors import KieError, ValidationError


def _request_summary(request: Request) -> Dict[str, Any]:
    """Printable view of a request descriptor; file content is reduced to its size."""
    summary: Dict[str, Any] = {"method": request.method, "origin": request.origin, "path": request.path}
    if request.query:
        summary["query"] = request.query
    if request.body is not None:
        summary["body"] = request.body
    if request.form is not None:
        summary["form"] = dict(request.form.fields)
        if request.form.file is not None:
            summary["file"] = {
                "field": request.form.file.field,
                "filename": request.form.file.filename,
                "content_type": request.form.file.content_type,
                "size": len(request.form.file.content),
            }
    return summary


def _load_items(args) -> List[Dict[str, Any]]:
    if args.items:
        items = _parse_json_arg(args.items)
        if not isinstance(items, list):
            raise ValidationError("--items must be a JSON array of objects")
        return items
    if args.params:
        params = _parse_json_arg(args.params)
        if not isinstance(params, dict):
            raise ValidationError("--params must be a JSON object")
        return [params]
    if not sys.stdin.isatty():
        data = json.loads(sys.stdin.read())
        return data if isinstance(data, list) else [data]
    return [{}]


# ─── Commands ────────────────────────────────────────────────────────


def cmd_nodes(args):
    """List available nodes."""
    available = nodes.list_nodes()
    _output({"nodes": available, "count": len(available)}, args.pretty or _is_pretty())
    return EXIT_OK


def cmd_describe(args):
    """Show a node's parameter schema."""
    _output(nodes.get_node(args.name).describe(), args.pretty or _is_pretty())
    return EXIT_OK


def cmd_run(args):
    """Run a node over one or more items."""
    pretty = args.pretty or _is_pretty()
    node = nodes.get_node(args.name)
    items = _load_items(args)

    if args.dry_run:
        _output([_request_summary(node.preview(item)) for item in items], pretty)
        return EXIT_OK

    results = runner.run_items(node, items, continue_on_fail=args.continue_on_fail)
    summary = runner.summarize(results)
    _output(summary, pretty)
    return EXIT_PARTIAL if summary["errors"] else EXIT_OK


def cmd_status(args):
    """Task status, normalized unless --raw."""
    node_name = "jobLookup" if args.raw else "taskStatus"
    records = runner.run_node(node_name, [{"task_id": args.task_id}])
    _output(records[0]["json"], args.pretty or _is_pretty())
    return EXIT_OK


def cmd_upload(args):
    """Upload a file by URL, local path or Base64 string."""
    item: Dict[str, Any] = {"file_name": args.file_name or "", "upload_path": args.upload_path or ""}

    if args.file:
        path = Path(args.file)
        if not path.exists():
            _output(_error(f"File not found: {path}", "VALIDATION_ERROR"), args.pretty or _is_pretty())
            return EXIT_VALIDATION
        mime_type, _ = mimetypes.guess_type(str(path))
        item["operation"] = "uploadStream"
        item["binary"] = {
            "data": {
                "data": base64.b64encode(path.read_bytes()).decode(),
                "fileName": path.name,
                "mimeType": mime_type or "application/octet-stream",
            }
        }
    elif args.base64:
        item["operation"] = "uploadBase64"
        item["base64_data"] = args.base64
    elif args.url:
        item["operation"] = "uploadUrl"
        item["file_url"] = args.url
    else:
        _output(_error("Provide a URL, --file or --base64", "VALIDATION_ERROR"), args.pretty or _is_pretty())
        return EXIT_VALIDATION

    records = runner.run_node("fileUpload", [item])
    _output(records[0]["json"], args.pretty or _is_pretty())
    return EXIT_OK


def cmd_credits(args):
    """Remaining credits; also checks the API key."""
    _output(get_client().check_credentials(), args.pretty or _is_pretty())
    return EXIT_OK


# ─── Parser ──────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kie",
        description="Kie.ai CLI for image, video and upload nodes",
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument("--domain", help="Kie.ai API domain (overrides KIE_DOMAIN env)")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # ── nodes ──
    p_nodes = sub.add_parser("nodes", help="List available nodes")
    _add_output_args(p_nodes)
    p_nodes.set_defaults(func=cmd_nodes)

    # ── describe ──
    p_describe = sub.add_parser("describe", help="Show a node's parameters")
    p_describe.add_argument("name", help="Node name, e.g. grokImagine")
    _add_output_args(p_describe)
    p_describe.set_defaults(func=cmd_describe)

    # ── run ──
    p_run = sub.add_parser("run", help="Run a node")
    p_run.add_argument("name", help="Node name, e.g. zImage")
    p_run.add_argument("--params", help="JSON params for a single item (or @file.json)")
    p_run.add_argument("--items", help="JSON array of items (or @file.json)")
    p_run.add_argument(
        "--continue-on-fail", action="store_true", default=False, help="Record failed items and keep going"
    )
    p_run.add_argument("--dry-run", action="store_true", default=False, help="Print the requests without sending")
    _add_output_args(p_run)
    p_run.set_defaults(func=cmd_run)

    # ── status ──
    p_status = sub.add_parser("status", help="Task status and results")
    p_status.add_argument("task_id", help="Task ID returned by a generation node")
    p_status.add_argument("--raw", action="store_true", default=False, help="Unprocessed job lookup")
    _add_output_args(p_status)
    p_status.set_defaults(func=cmd_status)

    # ── upload ──
    p_upload = sub.add_parser("upload", help="Upload a file to Kie.ai storage (kept 3 days)")
    p_upload.add_argument("url", nargs="?", help="Remote file URL")
    p_upload.add_argument("--file", help="Local file path (stream upload)")
    p_upload.add_argument("--base64", help="Base64 data or data URI")
    p_upload.add_argument("--file-name", help="Target filename; generated when omitted")
    p_upload.add_argument("--upload-path", help="Directory within Kie.ai storage")
    _add_output_args(p_upload)
    p_upload.set_defaults(func=cmd_upload)

    # ── credits ──
    p_credits = sub.add_parser("credits", help="Remaining credits")
    _add_output_args(p_credits)
    p_credits.set_defaults(func=cmd_credits)

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    if getattr(args, "domain", None):
        os.environ["KIE_DOMAIN"] = args.domain

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    pretty = args.pretty or _is_pretty()
    try:
        exit_code = args.func(args)
        sys.exit(exit_code or EXIT_OK)
    except KieError as e:
        _output(e.to_dict(), pretty)
        sys.exit(_exit_code_for_error(e.code))
    except json.JSONDecodeError as e:
        _output(_error(f"Invalid JSON: {e}", "INVALID_PARAMS"), pretty)
        sys.exit(EXIT_VALIDATION)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        _output(_error(str(e), "CLI_ERROR"), pretty)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
