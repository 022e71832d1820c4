from __future__ import annotations

import logging

from fastapi.testclient import TestClient

from OptionGuard.api.main import app, settings


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    headers = {"X-API-Key": settings.OPTIONGUARD_API_KEY}

    with TestClient(app) as client:
        check = client.post("/check", json={"key": "site_title", "value": "x" * 64, "operation": "update"})
        print("Dry-run update of a missing option:", check.json())

        created = client.post("/options/site_title", json={"value": "Hello"}, headers=headers)
        print("Create:", created.status_code, created.json())

        updated = client.put("/options/site_title", json={"value": "Hello, world"}, headers=headers)
        print("Update:", updated.status_code, updated.json())

        oversized = "x" * (settings.OPTION_VALUE_MAX_SIZE + 1)
        big = client.put("/options/site_title", json={"value": oversized}, headers=headers)
        print("Oversized update:", big.status_code, big.json().get("detail", "stored"))

        unknown = client.put("/options/never_added", json={"value": "x"}, headers=headers)
        print("Update without add:", unknown.status_code, unknown.json())


if __name__ == "__main__":
    main()
