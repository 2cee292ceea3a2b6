from .admin_client import AdminClient
from .arco_client import ArcoClient
from .me_client import MeClient
from .movements_client import MovementsClient
from .reports_client import ReportsClient

__all__ = ["AdminClient", "ArcoClient", "MeClient", "MovementsClient", "ReportsClient"]
