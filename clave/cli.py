"""Command-line interface for Clave."""

import argparse
import json
import logging
import sys

import tracerite

from clave.crypto import expand_matrix_bytes, hash_matrix_hex
from clave.keys import create_passkey, sign_message, verify_message_signature
from clave.password import DEFAULT_ALPHABET, DEFAULT_LENGTH, create_password
from clave.shared import create_shared_passkey, create_shared_signature
from clave.utils import parse_matrix, parse_size

tracerite.load()

__all__ = ["main"]


def read_matrix(arg: str):
    """Parse a matrix argument, reading stdin for ``-``."""
    text = sys.stdin.read() if arg == "-" else arg
    return parse_matrix(text)


def context(args) -> dict:
    return {"salt": args.salt, "info": args.info}


def emit(args, data: dict, text: str):
    if args.quiet:
        return
    if args.json:
        print(json.dumps(data))
    else:
        print(text)


def cmd_password(args):
    password = create_password(
        read_matrix(args.matrix), length=args.len, alphabet=args.alphabet, **context(args)
    )
    emit(args, {"password": password}, password)


def cmd_passkey(args):
    passkey = create_passkey(read_matrix(args.matrix), **context(args))
    emit(
        args,
        {
            "curve": passkey.curve,
            "privateKey": passkey.private_key_hex,
            "publicKey": passkey.public_key_hex,
        },
        f"private {passkey.private_key_hex}\npublic  {passkey.public_key_hex}",
    )


def cmd_sign(args):
    sig = sign_message(read_matrix(args.matrix), args.message, **context(args))
    emit(
        args,
        {"curve": sig.curve, "signature": sig.signature_hex, "publicKey": sig.public_key_hex},
        f"signature {sig.signature_hex}\npublic    {sig.public_key_hex}",
    )


def cmd_verify(args):
    ok = verify_message_signature(args.message, args.signature, args.public_key)
    emit(args, {"valid": ok}, "valid" if ok else "invalid")
    return 0 if ok else 1


def cmd_hash(args):
    digest = hash_matrix_hex(read_matrix(args.matrix), **context(args))
    emit(args, {"hash": digest}, digest)


def cmd_expand(args):
    data = expand_matrix_bytes(read_matrix(args.matrix), parse_size(args.len), **context(args))
    if args.hex:
        out = data.hex().encode() + b"\n"
    else:
        out = data
    if args.output and args.output != "-":
        with open(args.output, "wb") as f:
            f.write(out)
        logging.info("Wrote %d bytes to %s", len(out), args.output)
    elif not args.quiet:
        sys.stdout.buffer.write(out)
        sys.stdout.buffer.flush()


def cmd_shared_passkey(args):
    passkeys = create_shared_passkey([read_matrix(m) for m in args.matrices], **context(args))
    emit(
        args,
        {
            "passkeys": [
                {
                    "curve": p.curve,
                    "privateKey": p.private_key_hex,
                    "publicKey": p.public_key_hex,
                }
                for p in passkeys
            ]
        },
        "\n".join(f"{i} {p.private_key_hex} {p.public_key_hex}" for i, p in enumerate(passkeys)),
    )


def cmd_shared_sign(args):
    sigs = create_shared_signature(
        [read_matrix(m) for m in args.matrices], args.message, **context(args)
    )
    emit(
        args,
        {
            "signatures": [
                {"curve": s.curve, "signature": s.signature_hex, "publicKey": s.public_key_hex}
                for s in sigs
            ]
        },
        "\n".join(f"{i} {s.signature_hex} {s.public_key_hex}" for i, s in enumerate(sigs)),
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-s", "--salt", help="Extra domain separation (text)", type=str)
    common.add_argument("-i", "--info", help="Extra context label (text)", type=str)
    common.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode: suppress all output except errors",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose mode: log derivation steps to stderr",
    )
    formatted = argparse.ArgumentParser(add_help=False)
    formatted.add_argument("--json", action="store_true", help="Print results as JSON")

    matrix_help = 'Matrix, e.g. "2,2.3,4; 7,7.8,7" or JSON, or - for stdin'
    parser = argparse.ArgumentParser(
        description="Derive passwords, keys and signatures deterministically from a matrix"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("password", parents=[common, formatted], help="Derive a password")
    p.add_argument("matrix", help=matrix_help)
    p.add_argument(
        "-l",
        "--len",
        help=f"Password length, 8 to 16 (default: {DEFAULT_LENGTH})",
        type=int,
        default=DEFAULT_LENGTH,
    )
    p.add_argument("-a", "--alphabet", help="Characters to draw from", default=DEFAULT_ALPHABET)
    p.set_defaults(func=cmd_password)

    p = sub.add_parser(
        "passkey", parents=[common, formatted], help="Derive an Ed25519 key pair"
    )
    p.add_argument("matrix", help=matrix_help)
    p.set_defaults(func=cmd_passkey)

    p = sub.add_parser("sign", parents=[common, formatted], help="Sign a message")
    p.add_argument("matrix", help=matrix_help)
    p.add_argument("message", help="Message text (signed as UTF-8)")
    p.set_defaults(func=cmd_sign)

    p = sub.add_parser(
        "verify", parents=[common, formatted], help="Verify a signature (exit 1 if invalid)"
    )
    p.add_argument("message", help="Message text")
    p.add_argument("signature", help="Signature hex")
    p.add_argument("public_key", help="Public key hex")
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("hash", parents=[common, formatted], help="Hash a matrix")
    p.add_argument("matrix", help=matrix_help)
    p.set_defaults(func=cmd_hash)

    p = sub.add_parser("expand", parents=[common], help="Derive raw key material")
    p.add_argument("matrix", help=matrix_help)
    p.add_argument("-l", "--len", help="Length to derive (e.g. 32, 1k, 1mi)", required=True)
    p.add_argument("-o", "--output", help="Output file (default: stdout)", type=str)
    p.add_argument("--hex", action="store_true", help="Write hex instead of raw bytes")
    p.set_defaults(func=cmd_expand)

    p = sub.add_parser(
        "shared-passkey",
        parents=[common, formatted],
        help="Derive key pairs for a group of matrices",
    )
    p.add_argument("matrices", nargs="+", help="Two or more matrices, in order")
    p.set_defaults(func=cmd_shared_passkey)

    p = sub.add_parser(
        "shared-sign", parents=[common, formatted], help="Sign a message with a group"
    )
    p.add_argument("message", help="Message text (signed as UTF-8)")
    p.add_argument("matrices", nargs="+", help="Two or more matrices, in order")
    p.set_defaults(func=cmd_shared_sign)

    return parser


def _main(argv=None) -> int:
    """Internal main function that may raise exceptions."""
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    sources = [getattr(args, "matrix", None), *getattr(args, "matrices", [])]
    if sources.count("-") > 1:
        raise ValueError("Only one matrix can be read from stdin")
    return args.func(args) or 0


def main(argv=None):
    """Main entry point for the CLI with exception handling."""
    try:
        code = _main(argv)
    except (KeyboardInterrupt, BrokenPipeError):
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
