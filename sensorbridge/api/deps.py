from fastapi import HTTPException, Request

from sensorbridge.core.bridge import DeviceBridge


def get_bridge(request: Request) -> DeviceBridge:
    bridge = getattr(request.app.state, "bridge", None)
    if bridge is None:
        raise HTTPException(status_code=503, detail="serial bridge not initialized")
    return bridge
