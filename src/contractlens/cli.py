"""Command line entry point: analyze a Solidity file or a verified contract address."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .analyzers.comprehensive_contract_analysis import ContractAnalyzer
from .config import Settings
from .integrations.explorer import ExplorerClient
from .integrations.summarizer import build_summarizer
from .reporting.report_generator import generate_json_report
from .utils.error_handling import ResourceError, ValidationError, error_to_payload
from .utils.logger import setup_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='contractlens',
        description='Analyze Solidity smart contracts for security risks.',
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze_parser = subparsers.add_parser('analyze', help='Analyze a local .sol file')
    analyze_parser.add_argument('path', help='Path to the Solidity source file')

    address_parser = subparsers.add_parser('address', help='Fetch verified source by address and analyze it')
    address_parser.add_argument('address', help='Contract address (0x followed by 40 hex characters)')

    for sub in (analyze_parser, address_parser):
        sub.add_argument('--summary', action='store_true', help='Request a narrative summary (needs OPENAI_API_KEY)')
        sub.add_argument('--output', help='Also write the JSON report to this path')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logger = setup_logger('contractlens', log_level=args.log_level or settings.log_level,
                          log_file=settings.log_file)

    analyzer = ContractAnalyzer(
        settings=settings,
        summarizer=build_summarizer(settings) if args.summary else None,
        explorer=ExplorerClient.from_settings(settings),
    )

    try:
        if args.command == 'analyze':
            try:
                source_code = Path(args.path).read_text(encoding='utf-8')
            except OSError as e:
                raise ValidationError(f"Cannot read source file: {e}", field='path', value=args.path) from e
            record = analyzer.analyze(source_code, enable_summary=args.summary)
        else:
            record = analyzer.analyze_address(args.address, enable_summary=args.summary)
        report = generate_json_report(record, args.output)
    except ValidationError as e:
        logger.error(f"Invalid input: {e.message}")
        print(json.dumps({'error': error_to_payload(e)}, indent=2), file=sys.stderr)
        return EXIT_INVALID_INPUT
    except ResourceError as e:
        logger.error(f"Analysis aborted: {e.message}")
        print(json.dumps({'error': error_to_payload(e)}, indent=2), file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        print(json.dumps({'error': error_to_payload(e)}, indent=2), file=sys.stderr)
        return EXIT_FAILURE

    print(report)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
