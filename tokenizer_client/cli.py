#!/usr/bin/env python3
"""
Command line front end for the tokenizer client.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import after loading env vars to ensure proper configuration
from .client import TokenizerClient
from .infrastructure.config.settings import get_settings
from .utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog='tokenizer-client',
        description="Tokenize and detokenize sensitive values through a tokenization service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tokenize --value "4111 1111 1111 1111" --metadata '{"type": "card"}'
  %(prog)s detokenize tok_123
  %(prog)s grant --session-id sess_1 tok_123
        """
    )

    parser.add_argument('--host',
                        default=settings.tokenizer.host,
                        help='Tokenizer host URL (or set TOKENIZER_HOST env var)')
    parser.add_argument('--base-route',
                        default=settings.tokenizer.base_route,
                        help='Route under the host the API is served from')
    parser.add_argument('--auth-token',
                        default=settings.tokenizer.authentication_token,
                        help='Authentication token (or set TOKENIZER_AUTH_TOKEN env var)')
    parser.add_argument('--log-level',
                        default=settings.log_level,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--version',
                        action='version',
                        version='%(prog)s 1.0.0')

    sub = parser.add_subparsers(dest='command', required=True)

    tok = sub.add_parser('tokenize', help='Exchange a value for a token')
    source = tok.add_mutually_exclusive_group(required=True)
    source.add_argument('--value', help='Plaintext value')
    source.add_argument('--file', type=Path, help='Read the plaintext bytes from a file')
    tok.add_argument('--metadata', default='{}', help='Metadata JSON object')

    detok = sub.add_parser('detokenize', help='Retrieve the value behind a token')
    detok.add_argument('token_id')
    detok.add_argument('--output', type=Path, help='Write the value to a file instead of stdout')

    to_url = sub.add_parser('detokenize-url', help='Get a signed download URL for a token')
    to_url.add_argument('token_id')

    meta = sub.add_parser('metadata', help='Fetch the metadata stored with a token')
    meta.add_argument('token_id')

    for name, help_text in (('grant', 'Grant a session full access to a token'),
                            ('verify-grant', 'Check whether a session holds a grant')):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('--session-id', required=True)
        p.add_argument('token_id')

    return parser


async def run(args: argparse.Namespace) -> int:
    config = {
        'host': args.host,
        'base_route': args.base_route,
        'authentication_token': args.auth_token,
    }
    async with TokenizerClient(config) as client:
        if args.command == 'tokenize':
            metadata = json.loads(args.metadata)
            value = args.file.read_bytes() if args.file else args.value
            result = await client.tokenize(value, metadata)
        elif args.command == 'detokenize':
            result = await client.detokenize(args.token_id)
            if result.success and args.output:
                args.output.write_bytes(result.value)
                print(json.dumps({'success': True, 'tokenId': result.token_id, 'output': str(args.output)}))
                return 0
        elif args.command == 'detokenize-url':
            result = await client.detokenize_to_url(args.token_id)
        elif args.command == 'metadata':
            result = await client.get_metadata(args.token_id)
        elif args.command == 'grant':
            result = await client.create_full_access_grant(args.session_id, args.token_id)
        else:
            result = await client.verify_grant(args.session_id, args.token_id)

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.success else 1


def main():
    """Main entry point for the tokenizer CLI."""
    parser = build_parser()
    args = parser.parse_args()

    # Setup logging
    setup_logging(args.log_level, get_settings().log_format)
    logger = logging.getLogger(__name__)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        sys.exit(130)
    except (ValueError, OSError) as e:
        logger.error(f"Application error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
