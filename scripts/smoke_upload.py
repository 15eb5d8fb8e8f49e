"""
Smoke test against a running upload service

Usage:
  python scripts/smoke_upload.py [--url http://localhost:8080] [--size-mb 10]
"""
import argparse
import os
import sys
import time
from urllib.parse import urlparse

import requests


def check_health(api_url):
    print("Testing health check...")
    try:
        response = requests.get(f"{api_url}/health", timeout=5)
    except requests.RequestException as e:
        print(f"Connection failed: {e}")
        return False
    if response.status_code != 200:
        print(f"Health check failed: {response.status_code}")
        return False
    print(f"Health check passed: {response.json()}")
    return True


def upload_and_fetch(api_url, size_mb):
    """Upload a random payload, then download it and compare bytes"""
    payload = os.urandom(size_mb * 1024 * 1024)
    filename = f"smoke test {size_mb}mb.bin"

    print(f"\nUploading {filename}...")
    start_time = time.time()
    response = requests.post(
        f"{api_url}/upload",
        files={'file': (filename, payload, 'application/octet-stream')},
        timeout=300
    )
    upload_time = time.time() - start_time

    if response.status_code != 200:
        print(f"Upload failed: {response.status_code}")
        print(f"   Response: {response.text}")
        return False

    item = response.json()[0]
    print(f"Upload successful in {upload_time:.2f}s")
    print(f"   Stored as: {item['filename']}")
    print(f"   URL: {item['url']}")

    # Advertised hostname may not be reachable from here
    fetched = requests.get(f"{api_url}{urlparse(item['url']).path}", timeout=300)
    if fetched.status_code != 200 or fetched.content != payload:
        print(f"Download mismatch: status {fetched.status_code}, {len(fetched.content)} bytes")
        return False
    print("Downloaded bytes match the upload")
    return True


def check_rejections(api_url):
    print("\nChecking rejected uploads...")
    ok = True
    cases = [
        ('README', 'Filename must have an extension'),
        ('payload.exe', 'Disallowed file extension'),
    ]
    for filename, expected in cases:
        response = requests.post(f"{api_url}/upload", files={'file': (filename, b'x')}, timeout=30)
        error = response.json().get('error') if response.status_code == 400 else None
        status = "✓" if error == expected else "✗"
        print(f"   {status} {filename}: {response.status_code} {response.text.strip()}")
        ok = ok and error == expected
    return ok


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--url', default=os.getenv('UPLOAD_SERVICE_URL', 'http://localhost:8080'))
    parser.add_argument('--size-mb', type=int, default=10)
    args = parser.parse_args()

    print("=" * 60)
    print("Upload Service Smoke Test")
    print("=" * 60)

    if not check_health(args.url):
        print("\nService is not running. Start it with:")
        print("   file-drop --port 8080")
        sys.exit(1)

    passed = upload_and_fetch(args.url, args.size_mb) and check_rejections(args.url)

    print("\n" + "=" * 60)
    print("All checks passed!" if passed else "Some checks failed!")
    print("=" * 60)
    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
