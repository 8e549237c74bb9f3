#!/usr/bin/env python3
"""
JsHunter CLI - Passive JavaScript Endpoint & Secret Hunter
Replays captured traffic (HAR) through the passive scan pipeline and exports findings.
"""

import asyncio
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from colorama import init, Fore, Style
init(autoreset=True)

from jshunter.analyzers.patterns import DETECTION_PATTERNS
from jshunter.core.config import get_default_config
from jshunter.core.logger import logger, set_verbose, set_silent
from jshunter.hosts.har import HarReplayHost, HarFormatError
from jshunter.hunter import JsHunter
from jshunter.services.datastore import DataStore


SEVERITY_COLORS = {
    'critical': Fore.RED + Style.BRIGHT,
    'high': Fore.RED,
    'medium': Fore.YELLOW,
    'low': Fore.WHITE,
    'info': Fore.CYAN,
}


def print_banner():
    banner = f"""
{Fore.CYAN}╔═══════════════════════════════════════════════════════╗
║   {Fore.WHITE}JS Endpoint & Secret Hunter{Fore.CYAN}                         ║
║   {Fore.GREEN}Passive JavaScript analysis v2.0.0{Fore.CYAN}                  ║
║   {Fore.WHITE}For authorized security testing only{Fore.CYAN}                ║
╚═══════════════════════════════════════════════════════╝{Style.RESET_ALL}
"""
    print(banner, flush=True)


def show_help():
    print(f"""
{Fore.CYAN}Usage:{Style.RESET_ALL}
    python cli.py <command> [args] [options]

{Fore.CYAN}Commands:{Style.RESET_ALL}
    {Fore.GREEN}har{Style.RESET_ALL} <file.har>     Replay a HAR capture and scan its JavaScript
    {Fore.GREEN}serve{Style.RESET_ALL} <file.har>   Replay a HAR capture, then browse results in the web UI
    {Fore.GREEN}patterns{Style.RESET_ALL}           List detection patterns
    {Fore.GREEN}sessions{Style.RESET_ALL}           List saved export sessions
    {Fore.GREEN}show{Style.RESET_ALL} <session>     Print the findings of a saved session

{Fore.CYAN}Options:{Style.RESET_ALL}
    -s, --scope <hosts>   Comma separated host patterns (e.g. *.corp.io,app.corp.io)
    -o, --output <dir>    Output directory (default: jshunter_output)
    -f, --format <fmts>   Export formats: json,csv (default: json,csv)
    -t, --timeout <sec>   Script download timeout (default: 10)
    -p, --port <port>     Web UI port for serve (default: 5000)
    -v, --verbose         Verbose output
    --silent              Silent mode (minimal output)

{Fore.CYAN}Examples:{Style.RESET_ALL}
    python cli.py har capture.har -s "*.corp.io"
    python cli.py har capture.har -f csv -o results
    python cli.py serve capture.har -p 8080
    python cli.py show 20260101_120000_1a2b3c4d
""")


def _parse_number(kind, flag, value):
    try:
        return kind(value)
    except ValueError:
        print(f"{Fore.RED}Error: invalid value for {flag}: {value!r}{Style.RESET_ALL}")
        show_help()
        sys.exit(1)


def parse_args(args):
    options = {
        'output': 'jshunter_output',
        'scope': [],
        'formats': ['json', 'csv'],
        'timeout': None,
        'port': 5000,
        'verbose': False,
        'silent': False,
    }

    positional = []
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ['-o', '--output']:
            if i + 1 < len(args):
                options['output'] = args[i + 1]
                i += 2
                continue
        elif arg in ['-s', '--scope']:
            if i + 1 < len(args):
                options['scope'] = [s.strip() for s in args[i + 1].split(',') if s.strip()]
                i += 2
                continue
        elif arg in ['-f', '--format']:
            if i + 1 < len(args):
                options['formats'] = [s.strip().lower() for s in args[i + 1].split(',') if s.strip()]
                i += 2
                continue
        elif arg in ['-t', '--timeout']:
            if i + 1 < len(args):
                options['timeout'] = _parse_number(float, arg, args[i + 1])
                i += 2
                continue
        elif arg in ['-p', '--port']:
            if i + 1 < len(args):
                options['port'] = _parse_number(int, arg, args[i + 1])
                i += 2
                continue
        elif arg in ['-v', '--verbose']:
            options['verbose'] = True
        elif arg == '--silent':
            options['silent'] = True
        elif arg in ['-h', '--help']:
            return 'help', [], options
        elif not arg.startswith('-'):
            positional.append(arg)
        i += 1

    command = positional[0] if positional else None
    targets = positional[1:] if len(positional) > 1 else []

    return command, targets, options


def build_config(options):
    config = get_default_config()
    config.output_dir = options['output']
    if options['timeout'] is not None:
        config.fetch.timeout = options['timeout']
    return config


async def replay_har(har_file, options):
    host = HarReplayHost.from_file(har_file, scope=options['scope'])
    hunter = JsHunter(host, config=build_config(options))
    try:
        await host.replay()
        await hunter.drain()
    finally:
        await hunter.close()
    return hunter


def print_summary(hunter):
    stats = hunter.get_stats()
    print(f"\n{Fore.GREEN}[+] Scan complete!{Style.RESET_ALL}")
    print(f"  Scripts scanned: {stats['scanned_files']}")
    print(f"  Total findings: {stats['total']}")

    if stats['by_severity']:
        print(f"\n  {Fore.CYAN}Findings by severity:{Style.RESET_ALL}")
        for level in ['critical', 'high', 'medium', 'low', 'info']:
            count = stats['by_severity'].get(level)
            if count:
                print(f"    {SEVERITY_COLORS[level]}{level.upper()}: {count}{Style.RESET_ALL}")

    if stats['by_category']:
        print(f"\n  {Fore.CYAN}Findings by type:{Style.RESET_ALL}")
        for cat, count in sorted(stats['by_category'].items(), key=lambda x: -x[1]):
            print(f"    {cat}: {count}")


def run_har(har_file, options):
    """Replay a HAR capture and export the findings"""
    if options['verbose']:
        set_verbose(True)
    elif options['silent']:
        set_silent(True)

    if not options['silent']:
        print_banner()
        print(f"  Capture: {har_file}")
        print(f"  Scope: {', '.join(options['scope']) or 'everything'}")
        print(f"  Output: {options['output']}\n")

    try:
        hunter = asyncio.run(replay_har(har_file, options))
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}[!] Scan interrupted{Style.RESET_ALL}")
        sys.exit(1)
    except (OSError, HarFormatError) as e:
        logger.error(f"Could not read capture: {e}")
        sys.exit(1)

    datastore = DataStore(options['output'])
    label = datastore.generate_scan_id()
    try:
        paths = datastore.save_results(hunter.store, label, options['formats'])
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    if not options['silent']:
        print_summary(hunter)
        print(f"\n  {Fore.CYAN}Reports saved to:{Style.RESET_ALL}")
        for path in paths:
            print(f"    {path}")

    return hunter


def run_serve(har_file, options):
    """Replay a HAR capture and serve the results UI"""
    from app import create_app

    hunter = run_har(har_file, options)
    app = create_app(hunter)
    print(f"\n  {Fore.CYAN}Web UI: http://127.0.0.1:{options['port']}{Style.RESET_ALL}")
    app.run(host='127.0.0.1', port=options['port'])


def show_patterns():
    print_banner()
    print(f"{Fore.CYAN}Detection patterns ({len(DETECTION_PATTERNS)}):{Style.RESET_ALL}\n")
    for rule in DETECTION_PATTERNS:
        print(f"  {Fore.GREEN}{rule.name:<32}{Style.RESET_ALL} {rule.category.value:<9} {rule.description}")


def show_sessions(options):
    print_banner()
    datastore = DataStore(options['output'])
    sessions = datastore.get_all_sessions()

    if not sessions:
        print(f"\n{Fore.YELLOW}No saved sessions in {options['output']}{Style.RESET_ALL}")
        return

    print(f"\n{Fore.CYAN}Saved sessions in {options['output']}:{Style.RESET_ALL}\n")
    for session in sessions:
        print(f"  {session}")


def show_session(session, options):
    """Print the findings saved in an earlier session's JSON export"""
    datastore = DataStore(options['output'])
    findings = datastore.load_findings(datastore.get_export_path(session))

    if findings is None:
        print(f"{Fore.RED}Error: no readable JSON export for session {session}{Style.RESET_ALL}")
        sys.exit(1)

    print(f"\n{Fore.CYAN}Session {session}: {len(findings)} finding(s){Style.RESET_ALL}\n")
    for finding in findings:
        color = SEVERITY_COLORS.get(finding.severity.value, '')
        print(f"  {color}[{finding.severity.value.upper()}]{Style.RESET_ALL} {finding.pattern_name}: {finding.value}")
        print(f"      {finding.file_url}")

    return findings


def main():
    if len(sys.argv) < 2:
        print_banner()
        show_help()
        sys.exit(0)

    command, targets, options = parse_args(sys.argv[1:])

    if command == 'help' or command is None:
        print_banner()
        show_help()
        sys.exit(0)

    if command in ('har', 'serve'):
        if not targets:
            print(f"{Fore.RED}Error: {command} requires a HAR file{Style.RESET_ALL}")
            sys.exit(1)
        if command == 'har':
            run_har(targets[0], options)
        else:
            run_serve(targets[0], options)

    elif command == 'patterns':
        show_patterns()

    elif command == 'sessions':
        show_sessions(options)

    elif command == 'show':
        if not targets:
            print(f"{Fore.RED}Error: show requires a session name{Style.RESET_ALL}")
            sys.exit(1)
        show_session(targets[0], options)

    else:
        print(f"{Fore.RED}Unknown command: {command}{Style.RESET_ALL}")
        show_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
