""" Configuration classes for the CLI. """

from .app import AppConfig
from .keys import KeyManager, WalletConfig
from .ledger import LedgerConfig
from .multisig import MultisigConfig
from .utils import load_yaml_config, setup_logging
