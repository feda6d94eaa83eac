import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from sensorbridge.api.deps import get_bridge
from sensorbridge.core.bridge import DeviceBridge
from sensorbridge.core.errors import CommandBusyError, TransportError
from sensorbridge.core.protocol import ResponseStatus

logger = logging.getLogger("sensorbridge.api")

router = APIRouter()


class ConfigureRequest(BaseModel):
    frequency: int
    debug: bool


def _run(label: str, fn, *args):
    try:
        return fn(*args)
    except CommandBusyError as e:
        logger.warning("%s: %s", label, e)
        raise HTTPException(status_code=409, detail=f"{label}: another command is in flight")
    except TransportError as e:
        logger.error("%s: Error: %s", label, e)
        raise HTTPException(status_code=500, detail=f"{label}: Error sending command: {e}")


def _fail(label: str, status: ResponseStatus, bridge: DeviceBridge):
    if status is ResponseStatus.TIMEOUT:
        logger.warning("%s: Timeout - No response from device", label)
        raise HTTPException(status_code=504, detail=f"{label}: Timeout - No response from device")
    response = bridge.correlator.last_response
    logger.warning("%s: Device error - %s (%r)", label, status.name, response)
    raise HTTPException(status_code=500, detail=f"{label}: Device error - {status.value}")


@router.get("/start")
def start(bridge: DeviceBridge = Depends(get_bridge)):
    label = "GET /start"
    if bridge.is_reading:
        raise HTTPException(status_code=400, detail=f"{label}: Already reading")
    status = _run(label, bridge.issue_start)
    if status is not ResponseStatus.OK:
        _fail(label, status, bridge)
    logger.info("%s: Reading started", label)
    return {"ok": True, "reading": True}


@router.get("/stop")
def stop(bridge: DeviceBridge = Depends(get_bridge)):
    label = "GET /stop"
    if not bridge.is_reading:
        raise HTTPException(status_code=400, detail=f"{label}: Already stopped - was not reading before request")
    status = _run(label, bridge.issue_stop)
    if status is not ResponseStatus.OK:
        _fail(label, status, bridge)
    logger.info("%s: Reading stopped", label)
    return {"ok": True, "reading": False}


@router.put("/configure")
def configure(req: ConfigureRequest, bridge: DeviceBridge = Depends(get_bridge)):
    label = "PUT /configure"
    if req.frequency <= 0 or req.frequency > 255:
        raise HTTPException(status_code=400, detail="Frequency must be between 1 and 255")
    status = _run(label, bridge.issue_configure, req.frequency, req.debug)
    if status is ResponseStatus.INVALID_COMMAND:
        logger.warning("%s: Device rejected the configuration", label)
        raise HTTPException(status_code=400, detail=f"{label}: Device rejected the configuration")
    if status is not ResponseStatus.OK:
        _fail(label, status, bridge)
    logger.info("%s: Configuration updated and sent to device successfully", label)
    return {"ok": True, "frequency": bridge.frequency, "debug": bridge.debug}
# /start, /stop, /configure routes
