import logging
from typing import Optional

from fastapi import FastAPI

from sensorbridge import config
from sensorbridge.api import router
from sensorbridge.core.bridge import DeviceBridge
from sensorbridge.db.persistence import Persistence
from sensorbridge.device.transport import open_transport

logger = logging.getLogger("sensorbridge.app")


def create_app(bridge: Optional[DeviceBridge] = None) -> FastAPI:
    """Build the API. Without `bridge`, the serial port and archive are
    opened on startup from `sensorbridge.config`."""
    app = FastAPI(title="Sensor Serial Bridge API")
    app.include_router(router)
    app.state.bridge = bridge

    @app.on_event("startup")
    def startup_event():
        if app.state.bridge is not None:
            app.state.bridge.start()
            return
        logger.info("Starting app: running migrations and opening %s", config.PORT_NAME)
        persistence = Persistence(config.DB_PATH)
        try:
            persistence.migrate()
        except Exception:
            logger.exception("Migration failed")
            raise
        transport = open_transport(config.PORT_NAME, config.BAUD_RATE, config.DEFAULT_PORT)
        b = DeviceBridge(
            transport,
            persistence,
            frequency=config.FREQUENCY,
            debug=config.DEBUG,
            timeout_s=config.COMMAND_TIMEOUT_S,
        )
        b.start()
        app.state.bridge = b

    @app.on_event("shutdown")
    def shutdown_event():
        logger.info("Shutting down app")
        b = app.state.bridge
        if b:
            b.close()

    return app


app = create_app()
