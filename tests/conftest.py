from __future__ import annotations

import logging
import socket
import threading
import time
from typing import Any

import httpx
import pytest
import structlog
import uvicorn

from tally_xml.common.settings import get_settings

APPLICABLE_FROM = "20230401"


def get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


def run_uvicorn_in_thread(app: Any, port: int) -> tuple[uvicorn.Server, threading.Thread]:
    config = uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning", access_log=False)
    server = uvicorn.Server(config=config)
    server.install_signal_handlers = False  # required when running in a thread

    t = threading.Thread(target=server.run, daemon=True)
    t.start()

    for _ in range(50):
        try:
            r = httpx.get(f"http://127.0.0.1:{port}/healthz", timeout=1.0)
            if r.status_code == 200:
                break
        except httpx.HTTPError:
            pass
        time.sleep(0.1)
    else:
        server.should_exit = True
        t.join(timeout=2)
        raise RuntimeError("uvicorn did not start")

    return server, t


def stop_uvicorn(server: uvicorn.Server, thread: threading.Thread) -> None:
    server.should_exit = True
    thread.join(timeout=5)


@pytest.fixture(autouse=True)
def tally_env(monkeypatch):
    """Pin APPLICABLEFROM and start every test from default settings."""
    monkeypatch.setenv("TALLY_APPLICABLE_FROM", APPLICABLE_FROM)
    for var in (
        "TALLY_AUTH_MODE",
        "TALLY_API_KEY",
        "TALLY_XML_INDENT",
        "TALLY_REQUEST_TYPE",
        "TALLY_REPORT_NAME",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # The CLI and service point logging at whatever stream was current; drop it.
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)


@pytest.fixture
def master_payload() -> dict[str, Any]:
    return {
        "company_name": "Demo Traders Pvt Ltd",
        "ledger": [
            {
                "name": "Acme Retail",
                "parent": "Sundry Debtors",
                "address": ["12 MG Road", "Bengaluru"],
                "state": "Karnataka",
                "country": "India",
                "pincode": "560001",
                "gst_registration_type": "Regular",
                "gst_in": "29ABCDE1234F1Z5",
            },
            {"name": "Sales Account", "parent": "Sales Accounts"},
            {
                "name": "Output CGST",
                "parent": "Duties & Taxes",
                "gst_duty_head": "CGST",
                "gst_percentage": 9,
            },
        ],
    }


@pytest.fixture
def sale_payload() -> dict[str, Any]:
    return {
        "company_name": "Demo Traders Pvt Ltd",
        "voucher": {
            "voucher_type": "Sale",
            "voucher_number": "1",
            "voucher_date": "2024-04-01",
            "ledger_name": "Acme",
            "voucher_items": [
                {
                    "ledger_name": "Sales",
                    "stock_item_name": "Widget",
                    "unit": "Nos",
                    "rate": 100,
                    "qty": 2,
                }
            ],
            "total": 200,
        },
    }


@pytest.fixture
def full_voucher_payload() -> dict[str, Any]:
    return {
        "company_name": "Demo Traders Pvt Ltd",
        "units": [{"name": "Nos", "uqc_name": "NOS", "decimal_point": 0}],
        "ledgers": [{"name": "Acme Retail", "parent": "Sundry Debtors", "state": "Karnataka"}],
        "stock_item": [
            {
                "name": "Widget",
                "unit": "Nos",
                "gst_applicable": True,
                "gst_supply_type": "Goods",
                "hsn": "8471",
                "gst_percentage": 18,
                "price": 500,
            }
        ],
        "voucher": {
            "voucher_type": "Sale",
            "voucher_number": "INV-042",
            "voucher_date": "2024-05-10",
            "ledger_name": "Acme Retail",
            "address_line_1": "12 MG Road",
            "address_line_2": "Bengaluru",
            "state": "Karnataka",
            "country": "India",
            "pincode": "560001",
            "gst_registration_type": "Regular",
            "gst_in": "29ABCDE1234F1Z5",
            "place_of_supply": "Karnataka",
            "narration": "Bill for May",
            "voucher_items": [
                {
                    "ledger_name": "Sales Account",
                    "stock_item_name": "Widget",
                    "unit": "Nos",
                    "price": 500,
                    "qty": 2,
                    "discount": 0,
                }
            ],
            "tax_details": [
                {"name": "Output CGST", "amount": 90},
                {"name": "Output SGST", "amount": 90},
            ],
            "additional_charges": [{"name": "Freight", "amount": 50}],
            "round_off": {"name": "Round Off", "amount": -0.4},
            "total": 1229.6,
        },
    }
