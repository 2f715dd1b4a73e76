import argparse
import json
import sys

from otpmigrate.errors import MigrationDecodeError
from otpmigrate.migration import decode_migration_uri, filter_accounts
from otpmigrate.models import OtpType
from otpmigrate.otpauth import account_dicts
from otpmigrate.settings import load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode an otpauth-migration:// export into OTP account records.")
    parser.add_argument("url", nargs="?", help="otpauth-migration://offline?data=... (default: $OTPMIGRATE_URL)")
    parser.add_argument("--issuer", help="only accounts whose issuer contains this text")
    parser.add_argument("--name", help="only accounts whose name contains this text")
    parser.add_argument("--type", choices=[t.name for t in OtpType], help="only accounts of this OTP type")
    parser.add_argument("--uris", action="store_true", help="add an otpauth:// key URI to every account")
    parser.add_argument("--indent", type=int, default=None)
    parser.add_argument("--serve", action="store_true", help="run the HTTP decoder instead")
    return parser


def _serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("otpmigrate.web:app", host=host, port=port)
    return 0


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        settings = load_settings()
        if args.serve:
            return _serve(settings.host, settings.port)

        url = args.url or settings.default_url
        if not url:
            raise ValueError("No migration URL given (pass one or set OTPMIGRATE_URL)")

        entries = decode_migration_uri(url)
        entries = filter_accounts(
            entries,
            issuer=args.issuer,
            name=args.name,
            otp_type=OtpType[args.type] if args.type else None,
        )
        records = account_dicts(entries, with_uris=args.uris or settings.otpauth_uris)
        indent = args.indent if args.indent is not None else settings.json_indent
        print(json.dumps(records, ensure_ascii=False, indent=indent))
        return 0
    except MigrationDecodeError as e:
        print(f"!!! error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"!!! error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
