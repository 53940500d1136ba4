from __future__ import annotations

from typing import Any

from django.http import JsonResponse


def check_relay() -> dict[str, Any]:
    try:
        from linkup.realtime.socketio import registry  # noqa: PLC0415

        stats = registry.stats()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True, **stats}


def health(request):
    components = {"relay": check_relay()}

    all_ok = all(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else "down"
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
