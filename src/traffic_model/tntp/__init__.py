from .columns import ColumnSchema, NetworkFileColumns
from .common import TNTPDirectory
from .model import TNTPModel, read_tntp
from .network import TNTPNetworkReader
from .settings import (NetworkReaderSettings, TNTPSettings,
                       TripsReaderSettings, ZoningReaderSettings,
                       load_settings, load_settings_file)
from .trips import TNTPTripsReader
from .zoning import TNTPZoningReader
