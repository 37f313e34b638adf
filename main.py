# main.py
import uvicorn

from api.server import create_app
from burncore.keystore import load_or_create_owner_account
from burncore.node import build_engine
from burncore.storage import EngineStorage
from burncore.telemetry import setup_logging
from config.settings import HOST_IP, HOST_PORT, get_settings


def loading(owner, status):
    print(r' ____                    _____             _            ')
    print(r'| __ ) _   _ _ __ _ __  | ____|_ __   __ _(_)_ __   ___ ')
    print(r'|  _ \| | | | `__| `_ \ |  _| | `_ \ / _` | | `_ \ / _ \ ')
    print(r'| |_) | |_| | |  | | | || |___| | | | (_| | | | | |  __/')
    print(r'|____/ \__,_|_|  |_| |_||_____|_| |_|\__, |_|_| |_|\___|')
    print(r'                                     |___/              ')

    print("🚀 Burn engine starting... ")
    print(f"🆔 Owner: {owner}")
    print(f"🔮 Oracle: {status.oracle}")
    print(f"🧢 Max burn per cycle: {status.max_cap:,}")
    print(f"🔥 Cycles recorded: {status.total_cycles}")
    if status.paused:
        print("⏸️ Engine is PAUSED")


def bootstrap():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    owner = load_or_create_owner_account(settings.data_dir)
    storage = EngineStorage(settings.data_dir)

    engine = build_engine(settings, owner.address, storage=storage)
    return settings, owner, engine


def main():
    settings, owner, engine = bootstrap()

    loading(owner.address, engine.get_system_status())

    app = create_app(engine, request_ttl=settings.request_ttl)
    uvicorn.run(app, host=HOST_IP, port=HOST_PORT)


if __name__ == "__main__":
    main()
