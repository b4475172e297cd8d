#!/usr/bin/env python3
"""End-to-end smoke test against a running tagclaim server.

Usage:
    ADMIN_PASS=... TOKEN=... python smoke_api.py

TOKEN is a bearer token issued by the identity provider for an existing user.
"""
import json
import os
import sys

import requests

BASE_URL = os.environ.get("BASE_URL", "http://localhost:8000/api/v1")
ADMIN = {"pass": os.environ.get("ADMIN_PASS", "")}
TOKEN = os.environ.get("TOKEN")


def print_section(title):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print('='*60)


def print_response(resp, label="Response"):
    print(f"  {label}: {resp.status_code}")
    try:
        data = resp.json()
    except ValueError:
        print(f"  {resp.text[:200]}")
        return None
    print(f"  {json.dumps(data, indent=4)[:500]}")
    return data


def main():
    results = {}

    print_section("1. Admin: create tag")
    resp = requests.post(f"{BASE_URL}/nfc/admin/create-tag", params=ADMIN)
    created = print_response(resp, "Create Tag")
    results["create"] = resp.status_code == 201

    print_section("2. Admin: list tags")
    resp = requests.get(f"{BASE_URL}/nfc/admin/tags", params={**ADMIN, "limit": 5})
    listed = print_response(resp, "List Tags")
    results["list"] = bool(listed and listed.get("success"))

    # Public lookups need the long identifiers written to physical tags
    scan_id = f"SMOKE-{os.getpid():010d}-TAG-0001"

    print_section("3. Public scan")
    resp = requests.get(f"{BASE_URL}/nfc/{scan_id}")
    scanned = print_response(resp, "Scan")
    results["scan"] = bool(scanned and scanned["data"]["viewedCount"] >= 1)

    if TOKEN:
        auth = {"Authorization": f"Bearer {TOKEN}"}

        print_section("4. Claim")
        resp = requests.post(f"{BASE_URL}/nfc/{scan_id}/claim", headers=auth)
        print_response(resp, "Claim")
        results["claim"] = resp.status_code == 200

        resp = requests.get(f"{BASE_URL}/nfc/my-tag", headers=auth)
        mine = print_response(resp, "My Tag")
        results["my-tag"] = bool(mine and mine["data"] and mine["data"]["tagId"] == scan_id)
    else:
        print("\n  TOKEN not set, skipping claim checks")

    if created and created.get("data"):
        print_section("5. Admin: cleanup")
        resp = requests.post(f"{BASE_URL}/nfc/admin/{created['data']['tagId']}/delete", params=ADMIN)
        print_response(resp, "Delete Tag")

    print_section("Summary")
    for name, ok in results.items():
        print(f"  - {name}: {'OK' if ok else 'FAILED'}")
    return all(results.values())


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
