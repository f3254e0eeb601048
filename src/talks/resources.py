"""Fixed response bodies served by the /talks/v1 endpoints."""
import json

# 1x1 GIF89a, two entry palette, 35 bytes.
TRACKING_PIXEL = bytes([
    0x47, 0x49, 0x46, 0x38, 0x39, 0x61,  # GIF89a
    0x01, 0x00, 0x01, 0x00,              # 1x1
    0x80, 0x00, 0x00,                    # global color table, 2 entries
    0xff, 0xff, 0xff, 0x00, 0x00, 0x00,
    0x2c, 0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x01, 0x00, 0x00,  # image descriptor
    0x02, 0x02, 0x44, 0x01, 0x00,        # image data
    0x3b,                                # trailer
])

ICE_CONFIG = {
    "lifetimeDuration": "86400s",
    "iceServers": [
        {
            "urls": [
                "stun:stun.l.google.com:19302",
                "stun:stun1.l.google.com:19302",
            ],
        },
        {
            "urls": [
                "turn:turn.ossrs.net:3478?transport=udp",
                "turn:turn.ossrs.net:3478?transport=tcp",
            ],
            "username": "talks",
            "credential": "talks",
        },
    ],
    "blockStatus": "NOT_BLOCKED",
    "iceTransportPolicy": "all",
}

ICE_CONFIG_BODY = json.dumps(ICE_CONFIG).encode("utf-8")
