"""Show or update user configuration"""
from castdeploy.core import LocalFileSystem, YamlConfigLoader
from castdeploy.i18n import SUPPORTED_LANGS
from castdeploy.utils.config import default_config_path, load_user_config, save_user_config


def setup_parser(parser):
    """Setup argument parser for config command"""
    parser.add_argument(
        '--lang',
        choices=SUPPORTED_LANGS,
        help='Set message language'
    )
    parser.add_argument(
        '--path',
        help='Config file (default: ~/.castdeploy/config.yaml)'
    )


def execute(args):
    """Execute config command"""
    path = args.path or default_config_path()
    config = load_user_config(YamlConfigLoader(LocalFileSystem()), path)

    if args.lang:
        config.lang = args.lang
        save_user_config(config, path)
        print(f"Saved {path}")

    print(f"lang: {config.lang}")
    return 0
