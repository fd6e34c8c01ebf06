"""Show deployment history of a target directory"""
from castdeploy.core import ConsoleLogger, LocalFileSystem, YamlConfigLoader
from castdeploy.deploy import RemoteError, RemoteSnapshotStore, TransportFactory
from castdeploy.i18n import HISTORY_EMPTY, SUPPORTED_LANGS, MessageCatalog
from castdeploy.utils.config import load_user_config


def setup_parser(parser):
    """Setup argument parser for history command"""
    parser.add_argument(
        '--device', '-d',
        default='local://',
        help='Target host: user@host[:port] or local:// (default: local://)'
    )
    parser.add_argument(
        '--target', '-t',
        required=True,
        help='Target directory on the host'
    )
    parser.add_argument(
        '--files',
        action='store_true',
        help='List files recorded by each deploy'
    )
    parser.add_argument(
        '--lang',
        choices=SUPPORTED_LANGS,
        help='Message language (default: from ~/.castdeploy/config.yaml)'
    )


def format_entry(index, entry, show_files=False):
    """Render one snapshot entry as text lines."""
    when = entry.deployed_at.strftime('%Y-%m-%d %H:%M:%S UTC')
    lines = [
        f"#{index:<3} {when}  {entry.bundle_name}  "
        f"{entry.bundle_hash[:12] or '-'}  ({len(entry.files)} file(s))"
    ]
    if show_files:
        for record in entry.files:
            lines.append(f"       {record.hash[:12] or '-':<12}  {record.path}")
    return lines


def execute(args):
    """Execute history command"""
    logger = ConsoleLogger()
    lang = args.lang or load_user_config(YamlConfigLoader(LocalFileSystem())).lang
    target_dir = args.target.rstrip('/') or '/'

    try:
        transport = TransportFactory.from_device_string(args.device)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        snapshot = RemoteSnapshotStore(transport.filesystem).load(target_dir)
    except RemoteError as e:
        logger.error(f"Could not read snapshot: {e}")
        return 1

    if snapshot is None or not snapshot.entries:
        print(MessageCatalog().message(HISTORY_EMPTY, lang, target_dir))
        return 0

    for index, entry in enumerate(snapshot.entries, start=1):
        for line in format_entry(index, entry, show_files=args.files):
            print(line)

    print(f"\n{len(snapshot.entries)} deploy(s), {len(snapshot.managed_paths())} managed path(s)")
    latest = snapshot.latest
    print(f"latest: {latest.bundle_name} at {latest.deployed_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    return 0
