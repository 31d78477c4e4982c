#!/usr/bin/env python3
"""
Basic usage examples for the TSA client library.

Signing examples run offline. The request examples need real credentials
in the TSA_CUSTOMER_ID and TSA_SECRET_KEY environment variables.
"""

import os
import sys

from tsa_client import (
    RestClient,
    SigningContext,
    TSAClientError,
    generate_headers,
    sign_request,
    string_to_sign,
)

DEMO_CUSTOMER_ID = "FFFFFFFF-EEEE-DDDD-1234-AB1234567890"
DEMO_SECRET_KEY = "EXAMPLE----TE8sTgg45yusumoN6BYsBVkh+yRJ5czgsnCehZaOYldPJdmFh6NeX8kunZ2zU1YWaUw/0wV6xfw=="


def demonstrate_signing():
    """Show the string-to-sign and headers for both schemes."""

    print("=== TSA Signing Examples ===\n")

    print("1. Nonce scheme (HMAC-SHA256)...")
    context = SigningContext.build(
        DEMO_CUSTOMER_ID,
        DEMO_SECRET_KEY,
        "POST",
        "/v1/messaging",
        body="message=hello&message_type=ARN&phone_number=15555551234",
        timestamp="Tue, 10 Jan 2012 19:36:42 GMT",
        nonce="11111111-1111-1111-1111-111111111111",
    )
    print("   String to sign:")
    for line in string_to_sign(context).split("\n"):
        print(f"     {line}")
    for name, value in generate_headers(context).items():
        print(f"   {name}: {value}")
    print()

    print("2. Legacy scheme (HMAC-SHA1 with x-ts headers)...")
    headers = sign_request(
        DEMO_CUSTOMER_ID,
        DEMO_SECRET_KEY,
        "GET",
        "/v1/phoneid/standard/15555551234",
        headers={"X-TS-Reference": "demo"},
        scheme="legacy",
    )
    for name, value in headers.items():
        print(f"   {name}: {value}")
    print()


def demonstrate_requests(customer_id, secret_key):
    """Make a few authenticated calls against the live API."""

    print("=== Live API Examples ===\n")

    with RestClient(customer_id, secret_key) as client:
        print("3. PhoneID lookup (POST, JSON body)...")
        response = client.post("/v1/phoneid/15555551234", json={"account_lifecycle_event": "create"})
        if response.ok:
            print(f"   ✓ Phone type: {response.json.get('phone_type', {}).get('description')}")
        else:
            print(f"   ✗ PhoneID failed: {response.status_code}")
            for error in response.json.get("errors", []):
                print(f"     {error.get('code')}: {error.get('description')}")
        print()

        print("4. Score lookup (POST, form body)...")
        response = client.post("/v1/score/15555551234", {"account_lifecycle_event": "create"})
        print(f"   Status: {response.status_code}")
        print()

    print("5. Wrong secret key...")
    with RestClient(customer_id, "d3Jvbmcta2V5LXdyb25nLWtleQ==") as client:
        response = client.get("/v1/phoneid/standard/15555551234")
        if response.status_code == 401:
            print("   ✓ Correctly rejected wrong secret (401 Unauthorized)")
        else:
            print(f"   ✗ Unexpected response: {response.status_code}")


if __name__ == "__main__":
    demonstrate_signing()

    customer_id = os.environ.get("TSA_CUSTOMER_ID")
    secret_key = os.environ.get("TSA_SECRET_KEY")
    if not customer_id or not secret_key:
        print("Set TSA_CUSTOMER_ID and TSA_SECRET_KEY to run the live API examples.")
        sys.exit(0)

    try:
        demonstrate_requests(customer_id, secret_key)
    except TSAClientError as e:
        print(f"TSA Client Error: {e}")
        sys.exit(1)
