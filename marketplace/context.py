# marketplace/context.py
from dataclasses import dataclass

from .config import Settings
from .db import Store
from .ledger import BalanceLedger


@dataclass
class AppContext:
    """Everything a request handler may reach: settings, store, ledger.

    Built once by ``create_app`` and kept on ``app.state.context``.
    """

    settings: Settings
    store: Store
    ledger: BalanceLedger

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        store = Store(settings.database_url, echo=settings.echo_sql)
        return cls(settings=settings, store=store, ledger=BalanceLedger(store))
