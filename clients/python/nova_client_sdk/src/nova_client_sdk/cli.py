from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

from .bulk_validation import parse_csv, validate_rows
from .clients import AuditClient, InventoryClient, ProductsClient
from .clients.bulk import BulkEntityClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import ApiError
from .http_client import HttpClient
from .models import BulkOptions

ENTITY_CLIENTS: dict[str, type[BulkEntityClient]] = {
    "products": ProductsClient,
    "inventory": InventoryClient,
}


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _client(client_cls, config: ClientConfig):
    return client_cls(
        http=HttpClient(config),
        account_name=config.account_name,
        account_key=config.account_key,
    )


def _entity_client(args: argparse.Namespace, config: ClientConfig) -> BulkEntityClient:
    return _client(ENTITY_CLIENTS[args.entity], config)


def _read_rows(args: argparse.Namespace) -> list[dict[str, Any]]:
    text = Path(args.file).read_text(encoding="utf-8")
    return parse_csv(text, args.entity).rows


def _checked_rows(args: argparse.Namespace) -> list[dict[str, Any]] | None:
    rows = _read_rows(args)
    report = validate_rows(rows, args.entity)
    if not report.valid:
        _emit(report.to_dict())
        return None
    return rows


def cmd_sample(args: argparse.Namespace, config: ClientConfig) -> int:
    print(_entity_client(args, config).sample_csv(), end="")
    return 0


def cmd_validate(args: argparse.Namespace, config: ClientConfig | None) -> int:
    text = Path(args.file).read_text(encoding="utf-8")
    parsed = parse_csv(text, args.entity)
    report = validate_rows(parsed.rows, args.entity)
    payload = {"rows": len(parsed.rows), "ignoredColumns": parsed.ignored_columns, **report.to_dict()}
    if args.remote and config is not None:
        remote = _entity_client(args, config).validate(parsed.rows)
        payload["remote"] = remote.model_dump(by_alias=True)
    _emit(payload)
    return 0 if report.valid else 1


def cmd_diff(args: argparse.Namespace, config: ClientConfig) -> int:
    rows = _checked_rows(args)
    if rows is None:
        return 1
    result = _entity_client(args, config).diff(rows, upsert=not args.no_upsert)
    _emit(result.model_dump(by_alias=True))
    return 0


def cmd_apply(args: argparse.Namespace, config: ClientConfig) -> int:
    rows = _checked_rows(args)
    if rows is None:
        return 1
    options = BulkOptions(
        upsert=not args.no_upsert,
        transactional=not args.row_mode,
        dry_run=not args.live,
        batch_name=args.batch_name,
        employee_id=args.employee_id,
        reason=args.reason,
    )
    result = _entity_client(args, config).bulk_update(rows, options, idempotency_key=args.idempotency_key)
    _emit(result.model_dump(by_alias=True))
    return 0 if result.success else 1


def cmd_audit(args: argparse.Namespace, config: ClientConfig) -> int:
    _emit(_client(AuditClient, config).list_batches(limit=args.limit).model_dump(by_alias=True))
    return 0


def cmd_batch(args: argparse.Namespace, config: ClientConfig) -> int:
    _emit(_client(AuditClient, config).get_batch(args.batch_id).model_dump(by_alias=True))
    return 0


def cmd_rollback(args: argparse.Namespace, config: ClientConfig) -> int:
    _emit(_client(AuditClient, config).rollback(args.batch_id).model_dump(by_alias=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nova-bulk", description="Nova bulk update CLI")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    def entity_parser(name: str, help_text: str, with_file: bool = True) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("entity", choices=sorted(ENTITY_CLIENTS))
        if with_file:
            sub.add_argument("file")
        return sub

    entity_parser("sample", "print the sample CSV for an entity", with_file=False).set_defaults(func=cmd_sample)

    validate_parser = entity_parser("validate", "check a CSV file locally")
    validate_parser.add_argument("--remote", action="store_true", help="also run the server validator")
    validate_parser.set_defaults(func=cmd_validate, offline=True)

    diff_parser = entity_parser("diff", "preview changes against the live database")
    diff_parser.add_argument("--no-upsert", action="store_true")
    diff_parser.set_defaults(func=cmd_diff)

    apply_parser = entity_parser("apply", "apply a CSV file (dry run unless --live)")
    apply_parser.add_argument("--live", action="store_true")
    apply_parser.add_argument("--row-mode", action="store_true", help="commit rows one at a time")
    apply_parser.add_argument("--no-upsert", action="store_true")
    apply_parser.add_argument("--batch-name")
    apply_parser.add_argument("--employee-id", type=int)
    apply_parser.add_argument("--reason")
    apply_parser.add_argument("--idempotency-key")
    apply_parser.set_defaults(func=cmd_apply)

    audit_parser = subparsers.add_parser("audit", help="list recent batches")
    audit_parser.add_argument("--limit", type=int, default=50)
    audit_parser.set_defaults(func=cmd_audit)

    batch_parser = subparsers.add_parser("batch", help="show one batch and its changes")
    batch_parser.add_argument("batch_id")
    batch_parser.set_defaults(func=cmd_batch)

    rollback_parser = subparsers.add_parser("rollback", help="roll back a batch")
    rollback_parser.add_argument("batch_id")
    rollback_parser.set_defaults(func=cmd_rollback)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        offline = getattr(args, "offline", False) and not getattr(args, "remote", False)
        config = None if offline else load_config(args.env_file)
        code = args.func(args, config)
    except ConfigError as exc:
        _emit({"error": "CONFIG_ERROR", "message": str(exc)})
        raise SystemExit(2) from exc
    except ApiError as exc:
        _emit({"error": exc.code, "message": exc.message, "details": exc.details, "trace_id": exc.trace_id})
        raise SystemExit(1) from exc
    except OSError as exc:
        _emit({"error": "FILE_ERROR", "message": str(exc)})
        raise SystemExit(1) from exc
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
