"""Deploy a bundle to a target directory on a host"""
import hashlib
import os

from castdeploy.core import ConsoleLogger, LocalFileSystem, YamlConfigLoader
from castdeploy.deploy import (
    DeploymentError,
    DeployService,
    RemoteError,
    RemoteSnapshotStore,
    StdinPrompter,
    TransportFactory,
)
from castdeploy.deploy.snapshot_store import metadata_dir
from castdeploy.deploy.ssh_transport import quote_path
from castdeploy.i18n import SUPPORTED_LANGS, MessageCatalog
from castdeploy.utils.config import load_user_config


def setup_parser(parser):
    """Setup argument parser for deploy command"""
    parser.add_argument(
        'bundle',
        help='Local .tar.gz bundle to deploy'
    )
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
        '--bundle-name',
        help='Name recorded in the snapshot (default: bundle file name)'
    )
    parser.add_argument(
        '--lang',
        choices=SUPPORTED_LANGS,
        help='Message language (default: from ~/.castdeploy/config.yaml)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show debug output'
    )


def sha256_file(path: str) -> str:
    """SHA-256 hex digest of a local file."""
    digest = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b''):
            digest.update(chunk)
    return digest.hexdigest()


def execute(args):
    """Execute deploy command"""
    logger = ConsoleLogger(verbose=args.verbose)

    if not os.path.isfile(args.bundle):
        logger.error(f"Bundle not found: {args.bundle}")
        return 1

    lang = args.lang or load_user_config(YamlConfigLoader(LocalFileSystem())).lang

    try:
        transport = TransportFactory.from_device_string(args.device)
    except ValueError as e:
        logger.error(str(e))
        return 1

    bundle_name = args.bundle_name or os.path.basename(args.bundle)
    bundle_hash = sha256_file(args.bundle)
    target_dir = args.target.rstrip('/') or '/'
    remote_bundle = f"{metadata_dir(target_dir)}/upload-{bundle_hash[:12]}.tar.gz"

    logger.info(f"Deploying {bundle_name} ({bundle_hash[:12]}) to {transport.name}:{target_dir}")

    try:
        transport.check()
        transport.filesystem.mkdir(metadata_dir(target_dir))
        transport.upload(args.bundle, remote_bundle)
    except RemoteError as e:
        logger.error(f"Upload failed: {e}")
        return 1

    localizer = MessageCatalog()
    service = DeployService(
        filesystem=transport.filesystem,
        executor=transport.executor,
        snapshot_store=RemoteSnapshotStore(transport.filesystem),
        prompter=StdinPrompter(localizer),
        localizer=localizer,
        logger=logger,
        lang=lang,
    )

    try:
        result = service.deploy(remote_bundle, target_dir, bundle_name, bundle_hash)
    except DeploymentError as e:
        logger.error(str(e))
        return 1
    finally:
        try:
            transport.executor.run(f"rm -f {quote_path(remote_bundle)}")
        except RemoteError as e:
            logger.warning(f"Could not remove uploaded bundle {remote_bundle}: {e}")

    for name, backup in result.backed_up.items():
        logger.debug(f"backup kept: {name} -> {backup}")
    print(
        f"\n{len(result.entry.files)} entr{'y' if len(result.entry.files) == 1 else 'ies'} placed, "
        f"{len(result.replaced)} replaced, {len(result.backed_up)} backed up, "
        f"{len(result.removed)} removed"
    )
    return 0
