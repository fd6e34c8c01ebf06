"""
castdeploy - Push build bundles to a host directory with deployment history

A command-line tool that extracts a bundle on a target host, resolves
collisions with files already there, and records every deploy in an
append-only snapshot next to the deployed files.
"""
import argparse
import logging
import sys

__version__ = "1.0.0"


def main(argv=None):
    """Main CLI entry point"""
    from castdeploy.commands import config, deploy, history

    parser = argparse.ArgumentParser(
        prog='castdeploy',
        description='castdeploy: bundle deployment with conflict-safe placement',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  castdeploy deploy dist/app.tar.gz -d deploy@web1 -t /srv/app
  castdeploy deploy app.tar.gz -t /tmp/site             # local target
  castdeploy history -d deploy@web1 -t /srv/app --files
  castdeploy config --lang en
        '''
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Deploy command
    deploy_parser = subparsers.add_parser('deploy', help='Deploy a bundle')
    deploy.setup_parser(deploy_parser)

    # History command
    history_parser = subparsers.add_parser('history', help='Show deployment history')
    history.setup_parser(history_parser)

    # Config command
    config_parser = subparsers.add_parser('config', help='Show or set user config')
    config.setup_parser(config_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # Dispatch to command handler
    try:
        if args.command == 'deploy':
            sys.exit(deploy.execute(args))
        elif args.command == 'history':
            sys.exit(history.execute(args))
        elif args.command == 'config':
            sys.exit(config.execute(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
