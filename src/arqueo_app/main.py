from __future__ import annotations

import logging

from arqueo_app.bootstrap import AppBootstrap
from arqueo_app.formatting import format_currency

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def run() -> int:
    bootstrap = AppBootstrap()
    result = bootstrap.start()
    if not result.authenticated:
        print(f"Arqueo: {result.error_message or 'login required'}.")
        return 0
    state = bootstrap.state
    status = "abierto" if state.session.is_open else "cerrado"
    print(f"Arqueo turno {state.shift}: arco {status}, saldo {format_currency(state.balance.total)}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
